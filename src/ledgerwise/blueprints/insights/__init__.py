"""Insights blueprint package."""

from __future__ import annotations

from flask import Blueprint

from .. import API_PREFIX

bp = Blueprint("insights", __name__, url_prefix=f"{API_PREFIX}/insights")

from . import routes  # noqa: E402,F401 - ensure routes get registered

__all__ = ["bp"]
