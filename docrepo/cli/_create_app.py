"""Create the main Typer CLI app."""

import typer

from docrepo.cli._configure_logging import _configure_logging
from docrepo.cli.collection import collection

DISPLAY_FORMATS = ("json", "yaml")


def _create_app() -> typer.Typer:
    """Build the ``docrepo`` app with its global ``--display`` option."""
    app = typer.Typer(
        pretty_exceptions_show_locals=False,
        pretty_exceptions_enable=False,
        help="Typed document repositories over MongoDB",
        context_settings={"help_option_names": ["-h", "--help"]},
        invoke_without_command=True,
    )
    app.add_typer(collection(), name="collection")

    @app.callback(invoke_without_command=True)
    def main_callback(
        ctx: typer.Context,
        display: str = typer.Option("yaml", "--display", "-d", help="Output format: json or yaml"),
    ) -> None:
        if display not in DISPLAY_FORMATS:
            typer.echo(f"Error: --display must be 'json' or 'yaml', got '{display}'", err=True)
            raise typer.Exit(1)

        if ctx.invoked_subcommand is None:
            typer.echo(ctx.get_help())
            raise typer.Exit()

        ctx.ensure_object(dict)["display_format"] = display
        _configure_logging()

    return app
