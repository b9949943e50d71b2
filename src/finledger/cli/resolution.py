"""Turn account and category arguments (name or ID) into IDs."""

import click
from finledger.cli.error_handling import handle_domain_error
from finledger.domain.account import AccountService
from finledger.domain.category import CategoryService
from finledger.domain.errors import DomainError, NotFoundError
from finledger.utils.account_resolver import resolve_account


def resolve_account_or_exit(ctx: click.Context, account_service: AccountService, owner_id: str, account: str) -> int:
    try:
        return resolve_account(account_service, owner_id, account)
    except DomainError as e:
        handle_domain_error(ctx, e)


def resolve_category_or_exit(
    ctx: click.Context,
    category_service: CategoryService,
    owner_id: str,
    category: str,
    category_type: str | None = None,
) -> int:
    """Resolve a category name or ID, or exit with a CLI error.

    Names are matched within category_type when it is given, so an income
    and an expense category may share a name.
    """
    try:
        if category.isdigit():
            return category_service.require_category(owner_id, int(category)).id
        for cat in category_service.list_categories(owner_id, category_type=category_type):
            if cat.name == category:
                return cat.id
        raise NotFoundError(f"Category '{category}' not found")
    except DomainError as e:
        handle_domain_error(ctx, e)
