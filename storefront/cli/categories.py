"""Operator CLI for inspecting and maintaining categories."""

import typer

from storefront.api.dependencies import get_image_store
from storefront.db import session as db_session
from storefront.services.categories import (
    CategoryNotFoundError,
    CategoryValidationError,
    DuplicateCategoryError,
    create_category,
    delete_category,
    list_categories,
    validate_category,
)

app = typer.Typer(help="Manage storefront categories.")


@app.command("list")
def list_command(
    offset: int = typer.Option(0, min=0, help="Rows to skip."),
    limit: int = typer.Option(50, min=1, max=100, help="Rows to show."),
):
    """Print categories with the names of their types."""
    with db_session.session_scope() as db:
        rows, total = list_categories(db, offset=offset, limit=limit)
        for category in rows:
            type_names = ", ".join(t.name for t in category.types) or "-"
            typer.echo(f"{category.id}\t{category.name}\t{category.image or '-'}\t{type_names}")
    typer.echo(f"{len(rows)} of {total} categories")


@app.command("create")
def create_command(name: str):
    """Create a category without an image."""
    try:
        category_in = validate_category({"name": name})
    except CategoryValidationError as exc:
        typer.echo(f"Error: {exc.message}")
        raise typer.Exit(code=2)

    with db_session.session_scope() as db:
        try:
            category = create_category(db, category_in, get_image_store())
        except DuplicateCategoryError:
            typer.echo(f"Error: category '{name}' already exists.")
            raise typer.Exit(code=1)
        typer.echo(f"Created category {category.id}: {category.name}")


@app.command("delete")
def delete_command(
    category_id: int,
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt."),
):
    """Permanently delete a category and its stored image."""
    if not yes:
        typer.confirm(f"Permanently delete category {category_id}?", abort=True)

    with db_session.session_scope() as db:
        try:
            delete_category(db, category_id, get_image_store())
        except CategoryNotFoundError:
            typer.echo(f"Error: category {category_id} not found.")
            raise typer.Exit(code=1)
    typer.echo(f"Deleted category {category_id}")


if __name__ == "__main__":
    app()
