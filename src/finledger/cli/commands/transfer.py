"""Transfer commands."""

import click
from finledger.cli.error_handling import handle_domain_error
from finledger.cli.parsing import parse_amount_or_exit, parse_date_or_exit, resolve_date_range
from finledger.cli.resolution import resolve_account_or_exit
from finledger.domain.account import AccountService
from finledger.domain.errors import DomainError
from finledger.domain.transfer import TransferService


@click.group()
def transfer_group():
    """Move money between accounts."""
    pass


@transfer_group.command("create")
@click.argument("from_account", metavar="FROM_ACCOUNT")
@click.argument("to_account", metavar="TO_ACCOUNT")
@click.argument("amount")
@click.option("--date", "transfer_date", default="today", help="Transfer date (YYYY-MM-DD or relative)")
@click.option("--description", help="Transfer description")
@click.option("--currency", default="BRL", show_default=True)
@click.pass_context
def create_transfer(
    ctx,
    from_account: str,
    to_account: str,
    amount: str,
    transfer_date: str,
    description: str | None,
    currency: str,
) -> None:
    """Transfer AMOUNT from FROM_ACCOUNT to TO_ACCOUNT.

    Examples:
        finledger transfer create Checking Savings 500
        finledger transfer create 1 2 120.50 --date yesterday
    """
    db = ctx.obj["db"]
    owner_id = ctx.obj["owner_id"]
    account_service = AccountService(db)
    from_id = resolve_account_or_exit(ctx, account_service, owner_id, from_account)
    to_id = resolve_account_or_exit(ctx, account_service, owner_id, to_account)
    parsed_amount = parse_amount_or_exit(ctx, amount)
    parsed_date = parse_date_or_exit(ctx, transfer_date)

    try:
        transfer_id = TransferService(db).create_transfer(
            owner_id,
            from_account_id=from_id,
            to_account_id=to_id,
            amount=parsed_amount,
            date=parsed_date,
            description=description,
            currency=currency,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created transfer {transfer_id}: {parsed_amount:,.2f} from account {from_id} to account {to_id}")


@transfer_group.command("update")
@click.argument("transfer_id", type=int)
@click.option("--from", "from_account", help="New source account name or ID")
@click.option("--to", "to_account", help="New destination account name or ID")
@click.option("--amount", help="New amount")
@click.option("--date", "transfer_date", help="New date")
@click.option("--description", help="New description")
@click.pass_context
def update_transfer(
    ctx,
    transfer_id: int,
    from_account: str | None,
    to_account: str | None,
    amount: str | None,
    transfer_date: str | None,
    description: str | None,
) -> None:
    """Update a transfer. Both balances are moved to match."""
    db = ctx.obj["db"]
    owner_id = ctx.obj["owner_id"]
    account_service = AccountService(db)
    from_id = resolve_account_or_exit(ctx, account_service, owner_id, from_account) if from_account else None
    to_id = resolve_account_or_exit(ctx, account_service, owner_id, to_account) if to_account else None
    parsed_amount = parse_amount_or_exit(ctx, amount) if amount is not None else None
    parsed_date = parse_date_or_exit(ctx, transfer_date) if transfer_date is not None else None

    try:
        updated = TransferService(db).update_transfer(
            owner_id,
            transfer_id,
            from_account_id=from_id,
            to_account_id=to_id,
            amount=parsed_amount,
            date=parsed_date,
            description=description,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(
        f"Updated transfer {updated.id}: {updated.amount:,.2f} "
        f"from account {updated.from_account_id} to account {updated.to_account_id}"
    )


@transfer_group.command("delete")
@click.argument("transfer_id", type=int)
@click.pass_context
def delete_transfer(ctx, transfer_id: int) -> None:
    """Delete a transfer and restore both balances."""
    try:
        TransferService(ctx.obj["db"]).delete_transfer(ctx.obj["owner_id"], transfer_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted transfer {transfer_id}")


@transfer_group.command("list")
@click.option("--account", help="Only transfers touching this account")
@click.option("--start-date", help="Start date")
@click.option("--end-date", help="End date")
@click.option("--period", help="Named period (this-month, last-month, this-year, ...)")
@click.pass_context
def list_transfers(ctx, account: str | None, start_date: str | None, end_date: str | None, period: str | None):
    """List transfers, newest first."""
    db = ctx.obj["db"]
    owner_id = ctx.obj["owner_id"]
    account_id = resolve_account_or_exit(ctx, AccountService(db), owner_id, account) if account else None
    start, end = resolve_date_range(ctx, start_date, end_date, period)

    transfers = TransferService(db).list_transfers(owner_id, start_date=start, end_date=end, account_id=account_id)
    if not transfers:
        click.echo("No transfers found.")
        return

    click.echo(f"\n{'ID':>5} {'Date':<12} {'From':>6} {'To':>6} {'Amount':>14}  Description")
    click.echo("-" * 70)
    for tr in transfers:
        click.echo(
            f"{tr.id:>5} {str(tr.date):<12} {tr.from_account_id:>6} {tr.to_account_id:>6} "
            f"{tr.amount:>14,.2f}  {tr.description or ''}"
        )


def register_commands(cli):
    """Register transfer commands with main CLI."""
    cli.add_command(transfer_group, name="transfer")
