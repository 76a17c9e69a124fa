"""LedgerWise application factory."""

from __future__ import annotations

from importlib import import_module
from typing import Iterable, Optional

from flask import Flask

from . import cli as _cli
from .blueprints import API_PREFIX
from .config import CONFIGS, BaseConfig
from .context import LedgerContext, create_ledger_context
from .logging_config import setup_logging


def _resolve_config(name: str | None) -> type[BaseConfig]:
    """Return the config class for the provided environment name."""

    if not name:
        return BaseConfig
    return CONFIGS.get(name.lower(), BaseConfig)


def _blueprint_paths() -> Iterable[str]:
    """Yield import paths of the API blueprints."""

    yield "ledgerwise.blueprints.transactions"
    yield "ledgerwise.blueprints.accounts"
    yield "ledgerwise.blueprints.budgets"
    yield "ledgerwise.blueprints.goals"
    yield "ledgerwise.blueprints.insights"


def create_app(
    config_name: str | None = None, *, context: Optional[LedgerContext] = None
) -> Flask:
    """Create and configure the Flask application instance.

    A prepared ``context`` (as built by tests) is used as-is; otherwise one is
    bootstrapped from the named configuration and default categories seeded.
    """

    app = Flask(__name__, instance_relative_config=True)
    if context is None:
        config_obj = _resolve_config(config_name or app.config.get("ENV"))()
        setup_logging(config_obj)
        context = create_ledger_context(config_obj)
        from .services.categories import seed_default_categories

        seed_default_categories(context)
    else:
        config_obj = context.config

    app.config.from_object(config_obj)
    app.config["LEDGERWISE_CONFIG"] = config_obj
    app.json.ensure_ascii = False

    from .extensions import init_ledger, register_error_handlers

    init_ledger(app, context)
    register_error_handlers(app)
    _register_blueprints(app)
    _cli.init_app(app)
    return app


def _register_blueprints(app: Flask) -> None:
    """Import and register all blueprints declared in `_blueprint_paths`."""

    for dotted_path in _blueprint_paths():
        module = import_module(dotted_path)
        blueprint = getattr(module, "bp")
        app.register_blueprint(blueprint)


__all__ = ["API_PREFIX", "create_app"]
