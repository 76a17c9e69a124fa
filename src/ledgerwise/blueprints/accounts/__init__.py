"""Accounts blueprint package."""

from __future__ import annotations

from flask import Blueprint

from .. import API_PREFIX

bp = Blueprint("accounts", __name__, url_prefix=f"{API_PREFIX}/accounts")

from . import routes  # noqa: E402,F401 - ensure routes get registered

__all__ = ["bp"]
