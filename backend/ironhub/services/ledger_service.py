"""
Service Layer for the customer ledger
Project: Iron Hub (customer ledger backend)

Read side of the ledger (account view, balance, revenue report) and the
reconciliation of stored totals against the underlying records.
"""

import logging
import uuid
from collections import defaultdict
from decimal import Decimal
from typing import Optional

from ironhub.core.money import ZERO, compute_quote_total, to_money
from ironhub.core.providers import Clock, IdGenerator
from ironhub.models import Payment, Quote
from ironhub.repositories.base import UnitOfWork
from ironhub.schemas.audit_log import AuditLogRead
from ironhub.schemas.customer import CustomerRead
from ironhub.schemas.ledger import (
    AccountView,
    BalanceRead,
    QuoteLedgerEntry,
    ReconciliationReport,
    RevenueSummary,
)
from ironhub.schemas.payment import PaymentRead
from ironhub.schemas.quote import QuoteStatus
from ironhub.services.audit_service import AuditService
from ironhub.services.customer_service import CustomerService
from ironhub.services.payment_service import PaymentService
from ironhub.services.quote_service import QuoteService

# Logger for this module
logger = logging.getLogger(__name__)


def sum_payments(payments: list[Payment]) -> Decimal:
    return to_money(sum((p.amount for p in payments), ZERO))


def sum_accepted_quotes(quotes: list[Quote]) -> Decimal:
    return to_money(
        sum(
            (compute_quote_total(q.items) for q in quotes if q.status == QuoteStatus.ACCEPTED.value),
            ZERO,
        )
    )


class LedgerService:
    """
    Composes the customer, quote, payment and audit services into the
    views the portal shows.

    Reads take no lock. The account view and the revenue report read
    inside uow.snapshot(), so every figure comes from the same committed
    state.
    """

    def __init__(
        self,
        id_generator: Optional[IdGenerator] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self.id_generator = id_generator or IdGenerator()
        self.clock = clock or Clock()
        self.audit_service = AuditService(self.id_generator, self.clock)
        self.customer_service = CustomerService(self.id_generator, self.clock, self.audit_service)
        self.quote_service = QuoteService(
            self.id_generator, self.clock, self.audit_service, self.customer_service
        )
        self.payment_service = PaymentService(
            self.id_generator, self.clock, self.audit_service, self.customer_service
        )

    async def get_account_view(self, uow: UnitOfWork, customer_id: uuid.UUID) -> AccountView:
        """
        Everything the customer detail page shows.

        Quotes carry their computed total and the amount allocated to them;
        payments and audit entries are listed newest first.

        Raises:
            NotFoundError: If the customer does not exist
        """
        # Rows are copied into read schemas before the snapshot ends
        async with uow.snapshot():
            customer = CustomerRead.model_validate(
                await self.customer_service.get_by_id(uow, customer_id)
            )
            quotes = [
                QuoteLedgerEntry.model_validate(q)
                for q in await self.quote_service.get_by_customer(uow, customer_id)
            ]
            payments = [
                PaymentRead.model_validate(p)
                for p in await self.payment_service.get_by_customer(uow, customer_id)
            ]
            logs = [
                AuditLogRead.model_validate(e)
                for e in await self.audit_service.list_for_customer(uow, customer_id)
            ]

        allocated: dict[str, Decimal] = defaultdict(lambda: ZERO)
        unallocated = ZERO
        for payment in payments:
            if payment.invoice_id:
                allocated[payment.invoice_id] += payment.amount
            else:
                unallocated += payment.amount

        entries = [
            quote.model_copy(update={"allocated_amount": to_money(allocated[quote.id])})
            for quote in quotes
        ]

        return AccountView(
            customer=customer,
            quotes=entries,
            payments=payments,
            logs=logs,
            balance=customer.balance,
            unallocated_total=to_money(unallocated),
        )

    async def balance(self, uow: UnitOfWork, customer_id: uuid.UUID) -> BalanceRead:
        """
        total_billed - total_paid, recomputed on every call.

        Raises:
            NotFoundError: If the customer does not exist
        """
        customer = await self.customer_service.get_by_id(uow, customer_id)
        return BalanceRead(
            customer_id=customer.id,
            total_billed=customer.total_billed,
            total_paid=customer.total_paid,
            balance=customer.balance,
        )

    async def reconcile(
        self,
        uow: UnitOfWork,
        customer_id: uuid.UUID,
        actor: str,
        dry_run: bool = True,
    ) -> ReconciliationReport:
        """
        Compare the stored totals with the sums of the records.

        With dry_run=False and a drift, the stored totals are overwritten
        with the recomputed ones and the repair is audited once.

        Raises:
            NotFoundError: If the customer does not exist
        """
        async with uow:
            customer = await uow.lock_customer(customer_id)
            payments = await uow.payments.list_by_customer(customer_id)
            quotes = await uow.quotes.list_by_customer(customer_id)

            report = ReconciliationReport(
                customer_id=customer.id,
                stored_total_paid=to_money(customer.total_paid),
                computed_total_paid=sum_payments(payments),
                stored_total_billed=to_money(customer.total_billed),
                computed_total_billed=sum_accepted_quotes(quotes),
                payments_count=len(payments),
                dry_run=dry_run,
            )

            if report.is_consistent:
                logger.info("Customer %s reconciled: consistent", customer_id)
                return report

            logger.warning(
                "Customer %s totals drift: paid %s/%s, billed %s/%s (stored/computed)",
                customer_id,
                report.stored_total_paid, report.computed_total_paid,
                report.stored_total_billed, report.computed_total_billed,
            )
            if dry_run:
                return report

            customer.total_paid = report.computed_total_paid
            customer.total_billed = report.computed_total_billed
            customer.updated_at = self.clock.now()
            uow.customers.update(customer)
            self.audit_service.record(
                uow,
                actor,
                "Ledger Reconciled",
                (
                    f"total_paid {report.stored_total_paid} -> {report.computed_total_paid}, "
                    f"total_billed {report.stored_total_billed} -> {report.computed_total_billed}"
                ),
                customer_id=customer.id,
            )
            await uow.commit()

        logger.info("Customer %s totals repaired", customer_id)
        return report.model_copy(update={"repaired": True})

    async def revenue_summary(self, uow: UnitOfWork) -> RevenueSummary:
        """Dashboard aggregation over every quote and payment."""
        async with uow.snapshot():
            quotes = await uow.quotes.list_all()
            payments = await uow.payments.list_all()
            customers_count = len(await uow.customers.list_all())

            total_quoted = to_money(sum((compute_quote_total(q.items) for q in quotes), ZERO))
            total_billed = sum_accepted_quotes(quotes)
            total_received = sum_payments(payments)
            accepted_count = sum(1 for q in quotes if q.status == QuoteStatus.ACCEPTED.value)

        return RevenueSummary(
            total_quoted=total_quoted,
            total_billed=total_billed,
            total_received=total_received,
            outstanding=total_billed - total_received,
            quotes_count=len(quotes),
            accepted_count=accepted_count,
            payments_count=len(payments),
            customers_count=customers_count,
            generated_at=self.clock.now(),
        )
