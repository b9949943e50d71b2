"""CLI helpers for parsing amount and date options."""

from datetime import date
from decimal import Decimal

import click

from finledger.utils.amount_parser import parse_amount
from finledger.utils.date_parser import get_date_range, parse_date


def parse_amount_or_exit(ctx: click.Context, value: str) -> Decimal:
    """Parse an amount option, or exit with a CLI error."""
    try:
        return parse_amount(value)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)


def parse_date_or_exit(ctx: click.Context, value: str, label: str = "date") -> date:
    """Parse a date option, or exit with a CLI error."""
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


def resolve_date_range(
    ctx: click.Context, start_date: str | None, end_date: str | None, period: str | None
) -> tuple[date | None, date | None]:
    """Resolve --period or --start-date/--end-date into a date range."""
    if period and (start_date or end_date):
        click.echo("Error: --period cannot be combined with --start-date or --end-date.", err=True)
        ctx.exit(1)
    if period:
        try:
            return get_date_range(period)
        except ValueError as e:
            click.echo(f"Error: {e}", err=True)
            ctx.exit(1)
    start = parse_date_or_exit(ctx, start_date, "start date") if start_date else None
    end = parse_date_or_exit(ctx, end_date, "end date") if end_date else None
    return start, end
