"""Savings goal commands."""

import click
from finledger.cli.error_handling import handle_domain_error
from finledger.cli.parsing import parse_amount_or_exit, parse_date_or_exit
from finledger.cli.resolution import resolve_account_or_exit, resolve_category_or_exit
from finledger.domain.account import AccountService
from finledger.domain.category import CategoryService
from finledger.domain.entities import GOAL_STATUSES
from finledger.domain.errors import DomainError
from finledger.domain.goal import GoalService


@click.group()
def goal_group():
    """Manage savings goals and contributions."""
    pass


@goal_group.command("create")
@click.argument("name")
@click.argument("target")
@click.option("--current", default="0", help="Amount already saved outside tracked accounts")
@click.option("--deadline", help="Target date")
@click.option("--category", help="Category name or ID")
@click.option("--description", help="Goal description")
@click.pass_context
def create_goal(
    ctx,
    name: str,
    target: str,
    current: str,
    deadline: str | None,
    category: str | None,
    description: str | None,
) -> None:
    """Create a savings goal with a TARGET amount.

    Examples:
        finledger goal create "Emergency fund" 10000 --deadline 2025-12-31
    """
    db = ctx.obj["db"]
    owner_id = ctx.obj["owner_id"]
    target_amount = parse_amount_or_exit(ctx, target)
    current_amount = parse_amount_or_exit(ctx, current)
    deadline_date = parse_date_or_exit(ctx, deadline, "deadline") if deadline else None
    category_id = resolve_category_or_exit(ctx, CategoryService(db), owner_id, category) if category else None

    try:
        goal_id = GoalService(db).create_goal(
            owner_id,
            name=name,
            target_amount=target_amount,
            current_amount=current_amount,
            description=description,
            deadline=deadline_date,
            category_id=category_id,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created goal '{name}' (ID: {goal_id}) with target {target_amount:,.2f}")


@goal_group.command("list")
@click.option("--status", type=click.Choice(GOAL_STATUSES), help="Filter by status")
@click.pass_context
def list_goals(ctx, status: str | None):
    """List goals with their progress."""
    owner_id = ctx.obj["owner_id"]
    service = GoalService(ctx.obj["db"])

    goals = service.list_goals(owner_id, status=status)
    if not goals:
        click.echo("No goals found.")
        return

    click.echo("\nGoals:")
    click.echo("-" * 80)
    for goal in goals:
        progress = service.get_progress(owner_id, goal.id)
        click.echo(
            f"ID: {goal.id:3d} | {goal.name:20s} | {goal.current_amount:>12,.2f} / {goal.target_amount:<12,.2f} | "
            f"{progress.percentage:>6}% | {goal.status}"
        )


@goal_group.command("show")
@click.argument("goal_id", type=int)
@click.pass_context
def show_goal(ctx, goal_id: int):
    """Show a goal with its progress and contributions."""
    owner_id = ctx.obj["owner_id"]
    service = GoalService(ctx.obj["db"])

    try:
        goal = service.require_goal(owner_id, goal_id)
        progress = service.get_progress(owner_id, goal_id)
        contributions = service.list_contributions(owner_id, goal_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Goal {goal.id}: {goal.name} ({goal.status})")
    if goal.description:
        click.echo(f"  {goal.description}")
    click.echo(f"  Saved: {goal.current_amount:,.2f} of {goal.target_amount:,.2f} ({progress.percentage}%)")
    click.echo(f"  Remaining: {progress.remaining:,.2f}")
    if goal.deadline is not None:
        click.echo(f"  Deadline: {goal.deadline} ({progress.days_left} days left)")
    click.echo(f"  Contributions: {len(contributions)}")


@goal_group.command("update")
@click.argument("goal_id", type=int)
@click.option("--name", help="New name")
@click.option("--target", help="New target amount")
@click.option("--deadline", help="New deadline, or empty string to clear")
@click.option("--category", help="Category name or ID")
@click.option("--description", help="New description")
@click.option("--status", type=click.Choice(GOAL_STATUSES), help="Set status by hand")
@click.pass_context
def update_goal(
    ctx,
    goal_id: int,
    name: str | None,
    target: str | None,
    deadline: str | None,
    category: str | None,
    description: str | None,
    status: str | None,
) -> None:
    """Update a goal. The saved amount only changes through contributions."""
    db = ctx.obj["db"]
    owner_id = ctx.obj["owner_id"]
    target_amount = parse_amount_or_exit(ctx, target) if target is not None else None
    deadline_date = parse_date_or_exit(ctx, deadline, "deadline") if deadline else None
    category_id = resolve_category_or_exit(ctx, CategoryService(db), owner_id, category) if category else None

    try:
        goal = GoalService(db).update_goal(
            owner_id,
            goal_id,
            name=name,
            description=description,
            target_amount=target_amount,
            deadline=deadline_date,
            category_id=category_id,
            status=status,
            clear_deadline=deadline == "",
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated goal {goal.id} ({goal.status})")


@goal_group.command("delete")
@click.argument("goal_id", type=int)
@click.option("--yes", is_flag=True, help="Skip the confirmation prompt")
@click.pass_context
def delete_goal(ctx, goal_id: int, yes: bool) -> None:
    """Delete a goal. Contributions are refunded to their accounts."""
    owner_id = ctx.obj["owner_id"]
    service = GoalService(ctx.obj["db"])

    try:
        goal = service.require_goal(owner_id, goal_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not yes and not click.confirm(f"Are you sure you want to delete goal '{goal.name}' (ID: {goal_id})?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_goal(owner_id, goal_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted goal '{goal.name}'")


@goal_group.command("contribute")
@click.argument("goal_id", type=int)
@click.argument("amount")
@click.option("--account", required=True, help="Account the money comes from")
@click.option("--date", "contribution_date", help="Contribution date (defaults to today)")
@click.option("--description", help="Contribution description")
@click.option("--transaction", "transaction_id", type=int, help="Link to an existing transaction ID")
@click.pass_context
def contribute(
    ctx,
    goal_id: int,
    amount: str,
    account: str,
    contribution_date: str | None,
    description: str | None,
    transaction_id: int | None,
) -> None:
    """Move AMOUNT from an account into a goal.

    Examples:
        finledger goal contribute 1 250 --account Savings
    """
    db = ctx.obj["db"]
    owner_id = ctx.obj["owner_id"]
    account_id = resolve_account_or_exit(ctx, AccountService(db), owner_id, account)
    parsed_amount = parse_amount_or_exit(ctx, amount)
    parsed_date = parse_date_or_exit(ctx, contribution_date) if contribution_date else None
    service = GoalService(db)

    try:
        contribution_id = service.add_contribution(
            owner_id,
            goal_id,
            account_id,
            parsed_amount,
            date=parsed_date,
            description=description,
            transaction_id=transaction_id,
        )
        goal = service.require_goal(owner_id, goal_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Added contribution {contribution_id}: {parsed_amount:,.2f} to goal '{goal.name}'")
    click.echo(f"  Saved: {goal.current_amount:,.2f} of {goal.target_amount:,.2f} ({goal.status})")


@goal_group.command("contributions")
@click.argument("goal_id", type=int)
@click.pass_context
def list_contributions(ctx, goal_id: int):
    """List a goal's contributions, newest first."""
    try:
        contributions = GoalService(ctx.obj["db"]).list_contributions(ctx.obj["owner_id"], goal_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    if not contributions:
        click.echo("No contributions found.")
        return

    for c in contributions:
        source = f"account {c.account_id}" if c.account_id is not None else "deleted account"
        click.echo(f"{c.id:>5} {str(c.date):<12} {c.amount:>14,.2f}  from {source}  {c.description or ''}")


@goal_group.command("uncontribute")
@click.argument("contribution_id", type=int)
@click.pass_context
def remove_contribution(ctx, contribution_id: int) -> None:
    """Remove a contribution and refund its account."""
    try:
        GoalService(ctx.obj["db"]).remove_contribution(ctx.obj["owner_id"], contribution_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Removed contribution {contribution_id}")


def register_commands(cli):
    """Register goal commands with main CLI."""
    cli.add_command(goal_group, name="goal")
