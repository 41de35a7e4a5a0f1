"""
Service Layer for quotes (invoices)
Project: Iron Hub (customer ledger backend)

Status lifecycle:
    draft -> sent -> accepted
                  -> rejected

Accepting a quote bills it: its total is added to the customer's
total_billed in the same unit of work as the status change.
"""

import logging
import uuid
from decimal import Decimal
from typing import Optional

from ironhub.core.exceptions import ConflictError, InvalidTransitionError, NotFoundError
from ironhub.core.money import compute_quote_total
from ironhub.core.providers import Clock, IdGenerator
from ironhub.models import Customer, Quote
from ironhub.repositories.base import UnitOfWork
from ironhub.schemas.quote import QuoteCreate, QuoteStatus
from ironhub.services.audit_service import AuditService
from ironhub.services.customer_service import CustomerService

# Logger for this module
logger = logging.getLogger(__name__)

__all__ = [
    "ALLOWED_TRANSITIONS",
    "QuoteService",
    "compute_quote_total",
    "validate_status_transition",
]

# Maximum attempts at drawing an unused quote identifier
MAX_ID_ATTEMPTS = 10


# ------------------------------------------------------------
# Status transitions
# ------------------------------------------------------------
ALLOWED_TRANSITIONS: dict[QuoteStatus, set[QuoteStatus]] = {
    QuoteStatus.DRAFT: {QuoteStatus.SENT},
    QuoteStatus.SENT: {QuoteStatus.ACCEPTED, QuoteStatus.REJECTED},
    QuoteStatus.ACCEPTED: set(),
    QuoteStatus.REJECTED: set(),
}


def validate_status_transition(current: QuoteStatus, target: QuoteStatus) -> None:
    """
    Check a status change against the lifecycle.

    Raises:
        InvalidTransitionError: target is not reachable from current
    """
    if target not in ALLOWED_TRANSITIONS[current]:
        raise InvalidTransitionError(
            f"Quote status cannot change from {current.value} to {target.value}",
            extra={"current": current.value, "target": target.value},
        )


def quote_items_to_json(data: QuoteCreate) -> list[dict]:
    """Line items as stored on Quote.items: amounts as strings, no float rounding."""
    return [
        {
            "description": item.description,
            "quantity": str(item.quantity),
            "price": str(item.price),
        }
        for item in data.items
    ]


class QuoteService:
    """
    Service for quotes.

    The quote total is never stored: compute_quote_total(quote.items) is
    the one place it is derived from.
    """

    def __init__(
        self,
        id_generator: Optional[IdGenerator] = None,
        clock: Optional[Clock] = None,
        audit_service: Optional[AuditService] = None,
        customer_service: Optional[CustomerService] = None,
    ) -> None:
        self.id_generator = id_generator or IdGenerator()
        self.clock = clock or Clock()
        self.audit_service = audit_service or AuditService(self.id_generator, self.clock)
        self.customer_service = customer_service or CustomerService(
            self.id_generator, self.clock, self.audit_service
        )

    async def get_all(self, uow: UnitOfWork, status: Optional[QuoteStatus] = None) -> list[Quote]:
        """All quotes in creation order, optionally filtered by status."""
        quotes = await uow.quotes.list_all(status.value if status is not None else None)
        logger.info("Retrieved %s quotes (status=%s)", len(quotes), status.value if status else "any")
        return quotes

    async def get_by_customer(self, uow: UnitOfWork, customer_id: uuid.UUID) -> list[Quote]:
        """Quotes of one customer in creation order."""
        return await uow.quotes.list_by_customer(customer_id)

    async def get_by_id(self, uow: UnitOfWork, quote_id: str) -> Quote:
        """
        Retrieve a quote by ID.

        Raises:
            NotFoundError: If the quote does not exist
        """
        quote = await uow.quotes.get(quote_id)
        if quote is None:
            logger.warning("Quote not found: %s", quote_id)
            raise NotFoundError(f"Quote {quote_id} not found")
        return quote

    async def create(self, uow: UnitOfWork, data: QuoteCreate, actor: str) -> Quote:
        """
        Create a quote for an existing customer.

        client_name / client_email default to the customer's. A quote
        created directly as sent gets sent_at; one created directly as
        accepted is billed at once.

        Args:
            uow: Unit of work
            data: Validated quote data
            actor: Email of the operator performing the action

        Returns:
            The created Quote

        Raises:
            NotFoundError: If the customer does not exist
            ConflictError: If no unused identifier could be drawn
        """
        async with uow:
            customer = await uow.lock_customer(data.customer_id)
            now = self.clock.now()

            quote = Quote(
                id=await self._new_quote_id(uow, now.year),
                customer_id=customer.id,
                client_name=data.client_name or customer.name,
                client_email=data.client_email or customer.email,
                items=quote_items_to_json(data),
                status=data.status.value,
                sent_at=now if data.status in (QuoteStatus.SENT, QuoteStatus.ACCEPTED) else None,
                created_at=now,
                updated_at=now,
            )
            uow.quotes.add(quote)

            total = compute_quote_total(quote.items)
            details = f"Quote {quote.id} created ({data.status.value}, total {total})"
            if data.status == QuoteStatus.ACCEPTED:
                self._bill(uow, customer, total)
                details += "; billed to account"
            self.audit_service.record(uow, actor, "Quote Created", details, customer_id=customer.id)

            await uow.commit()

        logger.info("Created quote %s for customer %s (total %s)", quote.id, customer.id, total)
        return quote

    async def update_status(
        self,
        uow: UnitOfWork,
        quote_id: str,
        status: QuoteStatus,
        actor: str,
    ) -> Quote:
        """
        Move a quote along its lifecycle.

        Requesting the current status changes nothing and writes no audit
        entry.

        Raises:
            NotFoundError: If the quote does not exist
            InvalidTransitionError: If the transition is not allowed
        """
        async with uow:
            quote = await self.get_by_id(uow, quote_id)
            current = QuoteStatus(quote.status)
            if current == status:
                return quote
            validate_status_transition(current, status)

            # Lock the account before re-reading the quote: two concurrent
            # acceptances must not both bill it
            customer = await uow.lock_customer(quote.customer_id)
            quote = await self.get_by_id(uow, quote_id)
            current = QuoteStatus(quote.status)
            if current == status:
                return quote
            validate_status_transition(current, status)

            now = self.clock.now()
            quote.status = status.value
            quote.updated_at = now
            if status == QuoteStatus.SENT:
                quote.sent_at = now
            uow.quotes.update(quote)

            details = f"Quote {quote.id} moved from {current.value} to {status.value}"
            if status == QuoteStatus.ACCEPTED:
                total = compute_quote_total(quote.items)
                self._bill(uow, customer, total)
                details += f"; {total} billed to account"
            self.audit_service.record(uow, actor, "Quote Status Changed", details, customer_id=customer.id)

            await uow.commit()

        logger.info("Quote %s: %s -> %s", quote.id, current.value, status.value)
        return quote

    # ------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------

    def _bill(self, uow: UnitOfWork, customer: Customer, total: Decimal) -> None:
        self.customer_service.record_billing_applied(customer, total)
        uow.customers.update(customer)

    async def _new_quote_id(self, uow: UnitOfWork, year: int) -> str:
        for _ in range(MAX_ID_ATTEMPTS):
            quote_id = self.id_generator.quote_id(year)
            if await uow.quotes.get(quote_id) is None:
                return quote_id
            logger.warning("Quote id collision: %s", quote_id)
        raise ConflictError("Could not allocate a unique quote identifier")
