"""Category management commands."""

import click
from finledger.cli.error_handling import handle_domain_error
from finledger.cli.resolution import resolve_category_or_exit
from finledger.domain.category import CategoryService
from finledger.domain.entities import TRANSACTION_TYPES
from finledger.domain.errors import DomainError


def print_category_tree(categories, parent_id=None, indent: int = 0) -> None:
    """Recursively print categories below parent_id."""
    for cat in categories:
        if cat.parent_id != parent_id:
            continue
        prefix = "  " * indent
        click.echo(f"{prefix}{cat.name} (ID: {cat.id}, {cat.category_type})")
        print_category_tree(categories, cat.id, indent + 1)


@click.group()
def category_group():
    """Manage categories."""
    pass


@category_group.command("list")
@click.option("--type", "category_type", type=click.Choice(TRANSACTION_TYPES), help="Show only one type")
@click.pass_context
def list_categories(ctx, category_type: str | None):
    """List categories in tree format."""
    service = CategoryService(ctx.obj["db"])

    categories = service.list_categories(ctx.obj["owner_id"], category_type=category_type)
    if not categories:
        click.echo("No categories found.")
        return

    click.echo("\nCategories:")
    print_category_tree(categories)


@category_group.command("create")
@click.argument("name")
@click.option("--type", "category_type", type=click.Choice(TRANSACTION_TYPES), default="expense", show_default=True)
@click.option("--parent", help="Parent category name or ID")
@click.option("--color", help="Display color")
@click.option("--icon", help="Icon name")
@click.pass_context
def create_category(ctx, name: str, category_type: str, parent: str | None, color: str | None, icon: str | None):
    """Create a new category."""
    owner_id = ctx.obj["owner_id"]
    service = CategoryService(ctx.obj["db"])

    parent_id = None
    if parent is not None:
        parent_id = resolve_category_or_exit(ctx, service, owner_id, parent, category_type)

    try:
        category_id = service.create_category(
            owner_id, name=name, category_type=category_type, parent_id=parent_id, color=color, icon=icon
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    parent_str = f" under '{parent}'" if parent else ""
    click.echo(f"Created category '{name}'{parent_str} (ID: {category_id})")


@category_group.command("delete")
@click.argument("category")
@click.pass_context
def delete_category(ctx, category: str):
    """Delete a category.

    Transactions, goals and subcategories that used it become uncategorized.
    """
    owner_id = ctx.obj["owner_id"]
    service = CategoryService(ctx.obj["db"])
    category_id = resolve_category_or_exit(ctx, service, owner_id, category)

    try:
        service.delete_category(owner_id, category_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted category {category_id}")


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
