"""Flask CLI commands for LedgerWise."""

from __future__ import annotations

from pathlib import Path

import click


def init_app(app) -> None:
    """Register CLI commands on the Flask app."""

    @app.cli.command("ledgerwise-seed")
    @click.option("--owner", default=None, help="Also register an owner with default accounts")
    def ledgerwise_seed(owner: str | None) -> None:
        """Seed default categories and, optionally, an owner."""

        # Import here to avoid circular imports at module import time
        from .extensions import get_ledger
        from .services.categories import seed_default_categories
        from .services.owners import register_owner

        ctx = get_ledger()
        added = seed_default_categories(ctx)
        click.echo(f"Default categories added: {added}")
        if owner:
            user = register_owner(ctx, username=owner)
            click.echo(f"Owner {user.username!r} registered with id {user.id}")

    @app.cli.command("ledgerwise-export")
    @click.option("--user-id", type=int, required=True, help="Owner whose entries are exported")
    @click.option(
        "--output",
        type=click.Path(dir_okay=False, path_type=Path),
        required=True,
        help="Destination CSV file",
    )
    def ledgerwise_export(user_id: int, output: Path) -> None:
        """Export an owner's live entries to CSV."""

        from .extensions import get_ledger
        from .services.entries import LedgerFilters
        from .services.export_csv import export_for_filters

        text = export_for_filters(get_ledger(), LedgerFilters(user_id=user_id))
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text, encoding="utf-8", newline="")
        click.echo(f"Export written: {output}")
