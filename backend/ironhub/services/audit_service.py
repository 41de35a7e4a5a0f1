"""
Service Layer for the audit trail
Project: Iron Hub (customer ledger backend)

Every customer-affecting write appends exactly one entry, staged on the
same unit of work as the write itself: the entry and the change become
visible together or not at all.
"""

import logging
import uuid
from typing import Optional

from ironhub.core.providers import Clock, IdGenerator
from ironhub.models import AuditLog
from ironhub.repositories.base import UnitOfWork

# Logger for this module
logger = logging.getLogger(__name__)


def newest_first(entries: list[AuditLog]) -> list[AuditLog]:
    """Sort by created_at descending; entries with equal timestamps keep reverse insertion order."""
    return list(reversed(sorted(entries, key=lambda e: e.created_at)))


class AuditService:
    """Append-only writer and reader of AuditLog entries."""

    def __init__(
        self,
        id_generator: Optional[IdGenerator] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self.id_generator = id_generator or IdGenerator()
        self.clock = clock or Clock()

    def record(
        self,
        uow: UnitOfWork,
        actor: str,
        action: str,
        details: str,
        customer_id: Optional[uuid.UUID] = None,
    ) -> AuditLog:
        """
        Stage an audit entry on the caller's unit of work.

        Does not commit: the caller commits the entry together with the
        change it describes.
        """
        entry = AuditLog(
            id=self.id_generator.new_uuid(),
            customer_id=customer_id,
            user_email=actor,
            action=action,
            details=details,
            created_at=self.clock.now(),
        )
        uow.audit_logs.add(entry)
        logger.debug("Audit entry staged: %s (%s) by %s", action, customer_id, actor)
        return entry

    async def list_for_customer(self, uow: UnitOfWork, customer_id: uuid.UUID) -> list[AuditLog]:
        """Entries scoped to one customer, newest first."""
        return newest_first(await uow.audit_logs.list_by_customer(customer_id))
