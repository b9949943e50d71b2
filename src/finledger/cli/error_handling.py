"""Rendering of domain errors for the command line."""

import click

from finledger.domain.errors import DomainError
from finledger.utils.logging import get_logger

logger = get_logger(__name__)


def handle_domain_error(ctx: click.Context, error: DomainError) -> None:
    """Print "Error: <message>" to stderr and exit with status 1."""
    logger.debug("command_failed", command=ctx.command_path, error_type=type(error).__name__)
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)
