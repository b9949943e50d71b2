"""Transaction management commands."""

import click
from finledger.cli.error_handling import handle_domain_error
from finledger.cli.parsing import parse_amount_or_exit, parse_date_or_exit, resolve_date_range
from finledger.cli.resolution import resolve_account_or_exit, resolve_category_or_exit
from finledger.domain.account import AccountService
from finledger.domain.category import CategoryService
from finledger.domain.entities import RECURRENCE_TYPES, TRANSACTION_TYPES
from finledger.domain.errors import DomainError
from finledger.domain.transaction import TransactionService


@click.group()
def transaction_group():
    """Manage income and expense transactions."""
    pass


@transaction_group.command("add")
@click.argument("transaction_type", type=click.Choice(TRANSACTION_TYPES))
@click.argument("amount")
@click.option("--account", required=True, help="Account name or ID")
@click.option("--date", "txn_date", default="today", help="Transaction date (YYYY-MM-DD or relative like 'yesterday')")
@click.option("--category", help="Category name or ID")
@click.option("--description", help="Transaction description")
@click.option("--payment-method", help="Payment method (e.g., 'pix', 'card')")
@click.option("--recurrence", type=click.Choice(RECURRENCE_TYPES), default="none", show_default=True)
@click.option("--notes", help="Notes")
@click.option("--currency", default="BRL", show_default=True)
@click.pass_context
def add_transaction(
    ctx,
    transaction_type: str,
    amount: str,
    account: str,
    txn_date: str,
    category: str | None,
    description: str | None,
    payment_method: str | None,
    recurrence: str,
    notes: str | None,
    currency: str,
) -> None:
    """Record income or an expense and update the account balance.

    Examples:
        finledger transaction add expense 42.50 --account Checking --category Groceries
        finledger transaction add income 3000 --account Checking --date 2024-01-05
    """
    db = ctx.obj["db"]
    owner_id = ctx.obj["owner_id"]
    account_id = resolve_account_or_exit(ctx, AccountService(db), owner_id, account)
    category_id = None
    if category is not None:
        category_id = resolve_category_or_exit(ctx, CategoryService(db), owner_id, category, transaction_type)
    parsed_amount = parse_amount_or_exit(ctx, amount)
    parsed_date = parse_date_or_exit(ctx, txn_date)

    try:
        transaction_id = TransactionService(db).create_transaction(
            owner_id,
            account_id=account_id,
            transaction_type=transaction_type,
            amount=parsed_amount,
            date=parsed_date,
            category_id=category_id,
            description=description,
            payment_method=payment_method,
            recurrence=recurrence,
            notes=notes,
            currency=currency,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created transaction {transaction_id}: {transaction_type} of {parsed_amount:,.2f} on {parsed_date}")


@transaction_group.command("update")
@click.argument("transaction_id", type=int)
@click.option("--account", help="Account name or ID")
@click.option("--type", "transaction_type", type=click.Choice(TRANSACTION_TYPES), help="income or expense")
@click.option("--amount", help="Transaction amount")
@click.option("--date", "txn_date", help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday')")
@click.option("--category", help="Category name or ID, or empty string to clear")
@click.option("--description", help="Transaction description")
@click.option("--payment-method", help="Payment method")
@click.option("--recurrence", type=click.Choice(RECURRENCE_TYPES))
@click.option("--notes", help="Notes")
@click.pass_context
def update_transaction(
    ctx,
    transaction_id: int,
    account: str | None,
    transaction_type: str | None,
    amount: str | None,
    txn_date: str | None,
    category: str | None,
    description: str | None,
    payment_method: str | None,
    recurrence: str | None,
    notes: str | None,
) -> None:
    """Update a transaction.

    Updates only the fields that are provided. The old balance effect is
    reversed and the new one applied. Use --category "" to clear the category.

    Examples:
        finledger transaction update 1 --amount 75.00
        finledger transaction update 1 --account "Savings" --type income
        finledger transaction update 1 --category ""  # Clear category
    """
    db = ctx.obj["db"]
    owner_id = ctx.obj["owner_id"]
    transaction_service = TransactionService(db)

    account_id = None
    if account is not None:
        account_id = resolve_account_or_exit(ctx, AccountService(db), owner_id, account)

    parsed_amount = parse_amount_or_exit(ctx, amount) if amount is not None else None
    parsed_date = parse_date_or_exit(ctx, txn_date) if txn_date is not None else None

    category_id = None
    clear_category = category == ""
    if category:
        try:
            current = transaction_service.require_transaction(owner_id, transaction_id)
        except DomainError as e:
            handle_domain_error(ctx, e)
        category_id = resolve_category_or_exit(
            ctx, CategoryService(db), owner_id, category, transaction_type or current.transaction_type
        )

    try:
        updated = transaction_service.update_transaction(
            owner_id,
            transaction_id,
            account_id=account_id,
            transaction_type=transaction_type,
            amount=parsed_amount,
            date=parsed_date,
            category_id=category_id,
            description=description,
            payment_method=payment_method,
            recurrence=recurrence,
            notes=notes,
            clear_category=clear_category,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated transaction {updated.id}")


@transaction_group.command("delete")
@click.argument("transaction_id", type=int)
@click.pass_context
def delete_transaction(ctx, transaction_id: int) -> None:
    """Delete a transaction and reverse its balance effect."""
    try:
        TransactionService(ctx.obj["db"]).delete_transaction(ctx.obj["owner_id"], transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted transaction {transaction_id}")


@transaction_group.command("list")
@click.option("--account", help="Filter by account name or ID")
@click.option("--category", help="Filter by category name or ID")
@click.option("--type", "transaction_type", type=click.Choice(TRANSACTION_TYPES), help="Filter by type")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@click.option("--period", help="Named period (this-month, last-month, this-year, ...)")
@click.pass_context
def list_transactions(
    ctx,
    account: str | None,
    category: str | None,
    transaction_type: str | None,
    start_date: str | None,
    end_date: str | None,
    period: str | None,
) -> None:
    """List transactions, newest first."""
    db = ctx.obj["db"]
    owner_id = ctx.obj["owner_id"]

    account_id = resolve_account_or_exit(ctx, AccountService(db), owner_id, account) if account else None
    category_id = (
        resolve_category_or_exit(ctx, CategoryService(db), owner_id, category, transaction_type) if category else None
    )
    start, end = resolve_date_range(ctx, start_date, end_date, period)

    transactions = TransactionService(db).list_transactions(
        owner_id,
        start_date=start,
        end_date=end,
        account_id=account_id,
        category_id=category_id,
        transaction_type=transaction_type,
    )
    if not transactions:
        click.echo("No transactions found.")
        return

    click.echo(f"\n{'ID':>5} {'Date':<12} {'Type':<8} {'Amount':>14} {'Account':>8}  Description")
    click.echo("-" * 80)
    for txn in transactions:
        click.echo(
            f"{txn.id:>5} {str(txn.date):<12} {txn.transaction_type:<8} {txn.amount:>14,.2f} "
            f"{txn.account_id:>8}  {txn.description or ''}"
        )


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
