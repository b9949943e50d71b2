"""Domain layer for finledger application.

Services live in their own modules (finledger.domain.account, ...) and are
imported from there; this package only re-exports entities and errors.
"""

from finledger.domain import entities
from finledger.domain.errors import (
    DomainError,
    ValidationError,
    InvalidTransferError,
    NotFoundError,
    InsufficientBalanceError,
    InconsistencyError,
)

__all__ = [
    "entities",
    "DomainError",
    "ValidationError",
    "InvalidTransferError",
    "NotFoundError",
    "InsufficientBalanceError",
    "InconsistencyError",
]
