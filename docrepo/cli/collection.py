"""Collection Typer app that registers all collection commands."""

import sys

import typer

from docrepo.api.collection.cmd_delete import cmd_delete
from docrepo.api.collection.cmd_list import cmd_list
from docrepo.api.collection.cmd_load import cmd_load
from docrepo.api.collection.cmd_new_id import cmd_new_id
from docrepo.api.collection.cmd_save import cmd_save
from docrepo.api.collection.cmd_show import cmd_show
from docrepo.cli._handle_stage_result import _handle_stage_result


def collection() -> typer.Typer:
    """Create the ``collection`` sub-app."""
    app = typer.Typer(
        name="collection",
        help="Collection operations",
        pretty_exceptions_show_locals=False,
        pretty_exceptions_enable=False,
        context_settings={"help_option_names": ["-h", "--help"]},
        invoke_without_command=True,
    )

    @app.callback(invoke_without_command=True)
    def collection_callback(ctx: typer.Context) -> None:
        """Collection operations - shows available commands."""
        if ctx.invoked_subcommand is None:
            typer.echo(ctx.get_help(), err=True)
            raise typer.Exit()

    @app.command(name="list")
    def list_command() -> None:
        """List collections in the configured database."""
        _handle_stage_result(cmd_list)()

    @app.command(name="show")
    def show_command(
        collection: str = typer.Argument(..., help="Collection name. Use 'docrepo collection list' to find them."),
        query: str | None = typer.Option(
            None, "--query", "-q", help="Query as JSON or mongo shell syntax, e.g. \"{ name: 'Alice' }\""
        ),
        skip: int = typer.Option(0, "--skip", "-s", help="Number of documents to skip"),
        limit: int = typer.Option(50, "--limit", "-l", help="Maximum number of documents to return"),
    ) -> None:
        """Show documents of a collection."""
        _handle_stage_result(cmd_show)(collection, query, skip, limit)

    @app.command(name="load")
    def load_command(
        collection: str = typer.Argument(..., help="Collection name"),
        id: str = typer.Argument(..., help="Document id"),
    ) -> None:
        """Load one document by id."""
        _handle_stage_result(cmd_load)(collection, id)

    @app.command(name="save")
    def save_command(
        collection: str = typer.Argument(..., help="Collection name"),
        document: str = typer.Argument(..., help="Document as JSON; '-' reads it from stdin"),
    ) -> None:
        """Save (insert or replace) a JSON document."""
        if document == "-":
            document = sys.stdin.read()
        _handle_stage_result(cmd_save)(collection, document)

    @app.command(name="delete")
    def delete_command(
        collection: str = typer.Argument(..., help="Collection name"),
        id: str = typer.Argument(..., help="Document id"),
    ) -> None:
        """Delete one document by id."""
        _handle_stage_result(cmd_delete)(collection, id)

    @app.command(name="new-id")
    def new_id_command() -> None:
        """Generate a new document id."""
        _handle_stage_result(cmd_new_id)()

    return app
