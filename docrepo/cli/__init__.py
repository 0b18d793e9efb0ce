"""CLI - main entry point."""

import sys


def main(argv: list[str] | None = None) -> int:
    """Run the ``docrepo`` CLI and return its exit code."""
    import click
    import typer

    from docrepo.cli._create_app import _create_app

    app = _create_app()
    try:
        exit_code = app(sys.argv[1:] if argv is None else argv, prog_name="docrepo", standalone_mode=False)
    except click.exceptions.UsageError as e:
        typer.echo(f"Usage error: {e.format_message()}", err=True)
        return e.exit_code
    except click.exceptions.Abort:
        typer.echo("Aborted.", err=True)
        return 1
    return exit_code if isinstance(exit_code, int) else 0
