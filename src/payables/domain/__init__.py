"""Domain layer for payables application.

Services live in their own modules (``payables.domain.account`` etc.) and are
imported from there, since they depend on the database interface.
"""

from payables.domain.entities import (
    Account,
    CostCenterAllocation,
    CostCenterShare,
    HistoryEntry,
    Occurrence,
    OccurrenceGroups,
    OccurrenceStatus,
    PaymentRecord,
    Supplier,
)
from payables.domain.errors import (
    ConflictError,
    DependencyError,
    DomainError,
    NotFoundError,
    ValidationError,
)

__all__ = [
    "Account",
    "CostCenterAllocation",
    "CostCenterShare",
    "HistoryEntry",
    "Occurrence",
    "OccurrenceGroups",
    "OccurrenceStatus",
    "PaymentRecord",
    "Supplier",
    "ConflictError",
    "DependencyError",
    "DomainError",
    "NotFoundError",
    "ValidationError",
]
