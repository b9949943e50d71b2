"""Summary commands."""

import click
from finledger.cli.error_handling import handle_domain_error
from finledger.cli.parsing import resolve_date_range
from finledger.cli.resolution import resolve_account_or_exit
from finledger.domain.account import AccountService
from finledger.domain.entities import EXPENSE, TRANSACTION_TYPES
from finledger.domain.errors import DomainError
from finledger.domain.summary import SummaryService


@click.command("summary")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@click.option("--period", help="Named period (this-month, last-month, this-year, ...)")
@click.option("--account", help="Limit income and expense totals to one account")
@click.option("--months", type=click.IntRange(min=1), default=6, show_default=True, help="Months in the monthly series")
@click.option(
    "--breakdown",
    type=click.Choice(TRANSACTION_TYPES),
    default=EXPENSE,
    show_default=True,
    help="Transaction type for the per-category breakdown",
)
@click.pass_context
def summary(
    ctx,
    start_date: str | None,
    end_date: str | None,
    period: str | None,
    account: str | None,
    months: int,
    breakdown: str,
):
    """Show balances, income and expense totals for a period.

    Examples:
        finledger summary --period this-month
        finledger summary --start-date 2024-01-01 --end-date 2024-03-31 --breakdown income
    """
    db = ctx.obj["db"]
    owner_id = ctx.obj["owner_id"]
    account_id = resolve_account_or_exit(ctx, AccountService(db), owner_id, account) if account else None
    start, end = resolve_date_range(ctx, start_date, end_date, period)
    service = SummaryService(db)

    try:
        overview = service.get_overview(owner_id, start_date=start, end_date=end, account_id=account_id)
        monthly = service.get_monthly_totals(owner_id, months=months, account_id=account_id)
        categories = service.get_category_breakdown(
            owner_id, transaction_type=breakdown, start_date=start, end_date=end
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    if start or end:
        click.echo(f"\nPeriod: {start or '...'} to {end or '...'}")
    click.echo(f"Total balance: {overview.total_balance:>14,.2f}")
    click.echo(f"Income:        {overview.total_income:>14,.2f}")
    click.echo(f"Expense:       {overview.total_expense:>14,.2f}")
    click.echo(f"Net:           {overview.net:>14,.2f}")
    click.echo(f"Transactions:  {overview.transaction_count:>14d}")

    click.echo("\nMonthly:")
    click.echo("-" * 60)
    for m in monthly:
        click.echo(f"{m.year:04d}-{m.month:02d}  {m.income:>14,.2f} {m.expense:>14,.2f} {m.net:>14,.2f}")

    click.echo(f"\nBy category ({breakdown}):")
    click.echo("-" * 60)
    if not categories:
        click.echo("No transactions found.")
    for item in categories:
        click.echo(f"{item.category_name:30s} {item.total:>14,.2f} ({item.count})")


def register_commands(cli):
    """Register summary command with main CLI."""
    cli.add_command(summary)
