"""Account management commands."""

import click
from finledger.cli.error_handling import handle_domain_error
from finledger.cli.parsing import parse_amount_or_exit, resolve_date_range
from finledger.cli.resolution import resolve_account_or_exit
from finledger.domain.account import AccountService
from finledger.domain.entities import ACCOUNT_TYPES
from finledger.domain.errors import DomainError


@click.group()
def account_group():
    """Manage accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option("--type", "account_type", type=click.Choice(ACCOUNT_TYPES), default="checking", show_default=True)
@click.option("--initial-balance", default="0", help="Opening balance (e.g., 1500.00)")
@click.option("--bank", help="Bank or institution name")
@click.option("--color", help="Display color (e.g., '#10b981')")
@click.pass_context
def create_account(ctx, name: str, account_type: str, initial_balance: str, bank: str | None, color: str | None):
    """Create a new account.

    Examples:
        finledger account create "Checking" --bank "Chase" --initial-balance 1500
        finledger account create "Wallet" --type wallet
    """
    service = AccountService(ctx.obj["db"])
    balance = parse_amount_or_exit(ctx, initial_balance)

    try:
        account_id = service.create_account(
            ctx.obj["owner_id"],
            name=name,
            account_type=account_type,
            initial_balance=balance,
            bank_name=bank,
            color=color,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created account '{name}' (ID: {account_id})")
    click.echo(f"  Balance: {balance:,.2f}")


@account_group.command("list")
@click.option("--active", is_flag=True, help="Show only active accounts")
@click.pass_context
def list_accounts(ctx, active: bool):
    """List all accounts with their current balances."""
    service = AccountService(ctx.obj["db"])

    accounts = service.list_accounts(ctx.obj["owner_id"], active_only=active)
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 80)
    for acc in accounts:
        status = "" if acc.is_active else " (inactive)"
        click.echo(
            f"ID: {acc.id:3d} | {acc.name:20s} | {acc.account_type:11s} | "
            f"Balance: {acc.current_balance:>14,.2f}{status}"
        )
    click.echo("-" * 80)
    click.echo(f"Total: {sum(acc.current_balance for acc in accounts):,.2f}")


@account_group.command("show")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def show_account(ctx, account: str):
    """Show account details.

    ACCOUNT can be an account name or ID.
    """
    owner_id = ctx.obj["owner_id"]
    service = AccountService(ctx.obj["db"])
    account_id = resolve_account_or_exit(ctx, service, owner_id, account)
    acc = service.require_account(owner_id, account_id)

    click.echo(f"Account {acc.id}: {acc.name}")
    click.echo(f"  Type: {acc.account_type}")
    if acc.bank_name:
        click.echo(f"  Bank: {acc.bank_name}")
    click.echo(f"  Initial balance: {acc.initial_balance:,.2f}")
    click.echo(f"  Current balance: {acc.current_balance:,.2f}")
    click.echo(f"  Active: {'yes' if acc.is_active else 'no'}")


@account_group.command("update")
@click.argument("account", metavar="ACCOUNT")
@click.option("--name", help="New account name")
@click.option("--type", "account_type", type=click.Choice(ACCOUNT_TYPES), help="New account type")
@click.option("--bank", help="New bank name")
@click.option("--color", help="New display color")
@click.option("--active/--inactive", default=None, help="Mark the account active or inactive")
@click.pass_context
def update_account(
    ctx,
    account: str,
    name: str | None,
    account_type: str | None,
    bank: str | None,
    color: str | None,
    active: bool | None,
) -> None:
    """Update an account's details. Balances cannot be edited.

    Examples:
        finledger account update "Chase" --name "Chase Checking"
        finledger account update 1 --inactive
    """
    owner_id = ctx.obj["owner_id"]
    service = AccountService(ctx.obj["db"])
    account_id = resolve_account_or_exit(ctx, service, owner_id, account)

    try:
        service.update_account(
            owner_id,
            account_id,
            name=name,
            account_type=account_type,
            bank_name=bank,
            color=color,
            is_active=active,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated account {account_id}")


@account_group.command("delete")
@click.argument("account", metavar="ACCOUNT")
@click.option("--yes", is_flag=True, help="Skip the confirmation prompt")
@click.pass_context
def delete_account(ctx, account: str, yes: bool) -> None:
    """Delete an account with its transactions and transfers.

    Transfers to or from other accounts are reversed on those accounts.
    Goal contributions made from this account stay on their goals.

    Examples:
        finledger account delete "Chase"
        finledger account delete 1 --yes
    """
    owner_id = ctx.obj["owner_id"]
    service = AccountService(ctx.obj["db"])
    account_id = resolve_account_or_exit(ctx, service, owner_id, account)
    account_obj = service.require_account(owner_id, account_id)

    if not yes and not click.confirm(
        f"Are you sure you want to delete account '{account_obj.name}' (ID: {account_id})?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_account(owner_id, account_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted account '{account_obj.name}'")


@account_group.command("reconcile")
@click.argument("account", metavar="ACCOUNT", required=False)
@click.option("--fix", is_flag=True, help="Overwrite stored balances that differ")
@click.pass_context
def reconcile_accounts(ctx, account: str | None, fix: bool) -> None:
    """Check stored balances against the recorded transactions.

    Checks every account unless ACCOUNT is given. Exits with status 1 when
    a difference remains.
    """
    owner_id = ctx.obj["owner_id"]
    service = AccountService(ctx.obj["db"])
    if account is not None:
        account_ids = [resolve_account_or_exit(ctx, service, owner_id, account)]
    else:
        account_ids = [acc.id for acc in service.list_accounts(owner_id)]

    mismatched = 0
    for account_id in account_ids:
        result = service.reconcile_account(owner_id, account_id, fix=fix)
        if not result.difference:
            click.echo(f"Account {account_id}: OK ({result.stored_balance:,.2f})")
            continue
        state = "corrected" if result.corrected else "MISMATCH"
        click.echo(
            f"Account {account_id}: {state} - stored {result.stored_balance:,.2f}, "
            f"expected {result.expected_balance:,.2f}"
        )
        if not result.corrected:
            mismatched += 1

    if mismatched:
        ctx.exit(1)


@account_group.command("statement")
@click.argument("account", metavar="ACCOUNT")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@click.option("--period", help="Named period (this-month, last-month, this-year, ...)")
@click.pass_context
def account_statement(ctx, account: str, start_date: str | None, end_date: str | None, period: str | None):
    """Show an account statement with a running balance."""
    owner_id = ctx.obj["owner_id"]
    service = AccountService(ctx.obj["db"])
    account_id = resolve_account_or_exit(ctx, service, owner_id, account)
    start, end = resolve_date_range(ctx, start_date, end_date, period)

    entries = service.get_statement(owner_id, account_id, start_date=start, end_date=end)
    if not entries:
        click.echo("No entries found.")
        return

    click.echo(f"\n{'Date':<12} {'Kind':<14} {'Ref':<6} {'Amount':>14} {'Balance':>14}  Description")
    click.echo("-" * 90)
    for entry in entries:
        click.echo(
            f"{str(entry.date):<12} {entry.kind:<14} {entry.reference_id:<6} "
            f"{entry.amount:>14,.2f} {entry.balance:>14,.2f}  {entry.description or ''}"
        )


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
