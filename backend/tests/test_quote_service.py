"""
Unit tests for QuoteService and the quote total.
"""

import uuid
from decimal import Decimal

import pytest
from pydantic import ValidationError

from conftest import ACTOR, ScriptedIdGenerator, TickingClock, customer_data, quote_data
from ironhub.core.exceptions import (
    BusinessValidationError,
    ConflictError,
    InvalidTransitionError,
    NotFoundError,
)
from ironhub.core.money import MAX_AMOUNT, compute_quote_total, to_money
from ironhub.schemas.quote import QuoteItem, QuoteRead, QuoteStatus
from ironhub.services.quote_service import QuoteService, validate_status_transition


# ============================================================
# Quote total
# ============================================================


class TestComputeQuoteTotal:
    """Tests for the shared quote total."""

    def test_total_of_two_lines(self):
        """2 x 500 + 1 x 1200 = 2200, same result on every call."""
        items = [{"quantity": 2, "price": 500}, {"quantity": 1, "price": 1200}]

        assert compute_quote_total(items) == Decimal("2200.00")
        assert compute_quote_total(items) == Decimal("2200.00")

    def test_total_of_no_items(self):
        """An empty quote totals zero."""
        assert compute_quote_total([]) == Decimal("0.00")

    def test_total_from_stored_strings(self):
        """Items as stored on Quote.items (amounts as strings)."""
        items = [{"description": "Lowboy transport", "quantity": "1.5", "price": "333.33"}]

        assert compute_quote_total(items) == Decimal("500.00")

    def test_total_from_schema_items(self):
        """QuoteItem instances are accepted as well."""
        items = [QuoteItem(description="Track pads", quantity=Decimal("4"), price=Decimal("89.99"))]

        assert compute_quote_total(items) == Decimal("359.96")

    def test_rounding_half_up(self):
        """Totals round half up to the cent."""
        assert compute_quote_total([{"quantity": 1, "price": "0.005"}]) == Decimal("0.01")
        assert to_money("2.675") == Decimal("2.68")

    def test_to_money_rejects_text(self):
        """Non numeric amounts are refused."""
        with pytest.raises(ValueError):
            to_money("twelve")

    @pytest.mark.parametrize("value", ["1e30", Decimal("1e30"), Decimal("-4.2e27")])
    def test_to_money_out_of_range(self, value):
        """Amounts too large to round to cents raise ValueError."""
        with pytest.raises(ValueError):
            to_money(value)

    def test_total_out_of_range(self):
        """An oversized product of quantity and price raises ValueError."""
        with pytest.raises(ValueError):
            compute_quote_total([{"quantity": "1e20", "price": "1e20"}])


# ============================================================
# Status transitions
# ============================================================


class TestStatusTransitions:
    """Tests for the quote lifecycle graph."""

    @pytest.mark.parametrize(
        "current,target",
        [
            (QuoteStatus.DRAFT, QuoteStatus.SENT),
            (QuoteStatus.SENT, QuoteStatus.ACCEPTED),
            (QuoteStatus.SENT, QuoteStatus.REJECTED),
        ],
    )
    def test_allowed(self, current, target):
        """Forward edges are accepted."""
        validate_status_transition(current, target)

    @pytest.mark.parametrize(
        "current,target",
        [
            (QuoteStatus.DRAFT, QuoteStatus.ACCEPTED),
            (QuoteStatus.ACCEPTED, QuoteStatus.DRAFT),
            (QuoteStatus.REJECTED, QuoteStatus.SENT),
            (QuoteStatus.ACCEPTED, QuoteStatus.REJECTED),
        ],
    )
    def test_refused(self, current, target):
        """Any other edge raises InvalidTransitionError."""
        with pytest.raises(InvalidTransitionError):
            validate_status_transition(current, target)


# ============================================================
# Service
# ============================================================


@pytest.mark.anyio
class TestQuoteService:
    """Tests for QuoteService on the in-memory backend."""

    async def test_create_defaults(self, uow, customer_service, quote_service):
        """A new quote is a draft addressed to the customer."""
        customer = await customer_service.create(uow, customer_data(), ACTOR)

        quote = await quote_service.create(uow, quote_data(customer.id), ACTOR)

        assert quote.id.startswith("QT-2025")
        assert len(quote.id) == len("QT-2025") + 4
        assert quote.status == "draft"
        assert quote.client_name == "Gulf Coast Hauling"
        assert quote.client_email == "billing@gulfcoasthauling.com"
        assert quote.sent_at is None
        assert compute_quote_total(quote.items) == Decimal("3000.00")

    async def test_create_unknown_customer(self, uow, quote_service, store):
        """Quotes need an existing customer."""
        with pytest.raises(NotFoundError):
            await quote_service.create(uow, quote_data(uuid.uuid4()), ACTOR)
        assert store.quotes == {}
        assert store.audit_logs == {}

    async def test_create_is_audited(self, uow, customer_service, quote_service, audit_service):
        """Creating a quote adds one entry to the customer's trail."""
        customer = await customer_service.create(uow, customer_data(), ACTOR)

        quote = await quote_service.create(uow, quote_data(customer.id), ACTOR)

        logs = await audit_service.list_for_customer(uow, customer.id)
        assert [e.action for e in logs] == ["Quote Created", "Account Created"]
        assert quote.id in logs[0].details

    async def test_create_accepted_bills_customer(self, uow, customer_service, quote_service):
        """A quote created as accepted is billed immediately."""
        customer = await customer_service.create(uow, customer_data(), ACTOR)

        await quote_service.create(uow, quote_data(customer.id, status=QuoteStatus.ACCEPTED), ACTOR)

        stored = await customer_service.get_by_id(uow, customer.id)
        assert stored.total_billed == Decimal("3000.00")
        assert stored.total_paid == Decimal("0.00")

    async def test_create_retries_on_id_collision(self, uow, clock, customer_service):
        """A drawn id already in use is discarded."""
        ids = ScriptedIdGenerator(["QT-2025AAAA", "QT-2025AAAA", "QT-2025BBBB"])
        service = QuoteService(ids, clock)
        customer = await customer_service.create(uow, customer_data(), ACTOR)

        first = await service.create(uow, quote_data(customer.id), ACTOR)
        second = await service.create(uow, quote_data(customer.id), ACTOR)

        assert first.id == "QT-2025AAAA"
        assert second.id == "QT-2025BBBB"

    async def test_create_gives_up_after_repeated_collisions(self, uow, clock, customer_service):
        """ConflictError once every attempt collided."""
        ids = ScriptedIdGenerator(["QT-2025AAAA"] * 11)
        service = QuoteService(ids, clock)
        customer = await customer_service.create(uow, customer_data(), ACTOR)
        await service.create(uow, quote_data(customer.id), ACTOR)

        with pytest.raises(ConflictError):
            await service.create(uow, quote_data(customer.id), ACTOR)

    async def test_get_all_filters_by_status(self, uow, customer_service, quote_service):
        """get_all keeps creation order and filters by status."""
        customer = await customer_service.create(uow, customer_data(), ACTOR)
        q1 = await quote_service.create(uow, quote_data(customer.id), ACTOR)
        q2 = await quote_service.create(uow, quote_data(customer.id, status=QuoteStatus.SENT), ACTOR)
        q3 = await quote_service.create(uow, quote_data(customer.id), ACTOR)

        assert [q.id for q in await quote_service.get_all(uow)] == [q1.id, q2.id, q3.id]
        assert [q.id for q in await quote_service.get_all(uow, QuoteStatus.DRAFT)] == [q1.id, q3.id]
        assert [q.id for q in await quote_service.get_all(uow, QuoteStatus.SENT)] == [q2.id]

    async def test_get_by_id_missing(self, uow, quote_service):
        """Unknown quote ids raise NotFoundError."""
        with pytest.raises(NotFoundError):
            await quote_service.get_by_id(uow, "QT-2025ZZZZ")

    async def test_full_lifecycle_bills_once(self, uow, customer_service, quote_service):
        """draft -> sent -> accepted bills the total exactly once."""
        customer = await customer_service.create(uow, customer_data(), ACTOR)
        quote = await quote_service.create(
            uow,
            quote_data(customer.id, items=[("Boom repair", "2", "500"), ("Hydraulic kit", "1", "1200")]),
            ACTOR,
        )

        sent = await quote_service.update_status(uow, quote.id, QuoteStatus.SENT, ACTOR)
        assert sent.sent_at is not None

        await quote_service.update_status(uow, quote.id, QuoteStatus.ACCEPTED, ACTOR)
        # Repeating the current status changes nothing
        await quote_service.update_status(uow, quote.id, QuoteStatus.ACCEPTED, ACTOR)

        stored = await customer_service.get_by_id(uow, customer.id)
        assert stored.total_billed == Decimal("2200.00")
        assert (await quote_service.get_by_id(uow, quote.id)).status == "accepted"

    async def test_invalid_transition_changes_nothing(self, uow, store, customer_service, quote_service):
        """draft -> accepted is refused and leaves the ledger as it was."""
        customer = await customer_service.create(uow, customer_data(), ACTOR)
        quote = await quote_service.create(uow, quote_data(customer.id), ACTOR)
        logs_before = len(store.audit_logs)

        with pytest.raises(InvalidTransitionError):
            await quote_service.update_status(uow, quote.id, QuoteStatus.ACCEPTED, ACTOR)

        assert store.quotes[quote.id].status == "draft"
        assert store.customers[customer.id].total_billed == Decimal("0.00")
        assert len(store.audit_logs) == logs_before

    async def test_read_schema_total(self, uow, customer_service, quote_service):
        """QuoteRead exposes the computed total."""
        customer = await customer_service.create(uow, customer_data(), ACTOR)
        quote = await quote_service.create(
            uow, quote_data(customer.id, items=[("Bucket teeth", "12", "45.50")]), ACTOR
        )

        read = QuoteRead.model_validate(quote)

        assert read.total == Decimal("546.00")
        assert read.items[0].line_total == Decimal("546.00")

    async def test_price_above_column_capacity(self):
        """Line prices and quantities are bounded by what the ledger can store."""
        with pytest.raises(ValidationError):
            QuoteItem(description="Mining fleet", quantity=Decimal("1"), price=Decimal("1e30"))
        with pytest.raises(ValidationError):
            QuoteItem(description="Mining fleet", quantity=MAX_AMOUNT + 1, price=Decimal("1"))

    async def test_billing_above_capacity_changes_nothing(self, uow, store, customer_service, quote_service):
        """Accepting a quote that would overflow total_billed is refused as a whole."""
        customer = await customer_service.create(uow, customer_data(), ACTOR)
        logs_before = len(store.audit_logs)

        with pytest.raises(BusinessValidationError):
            await quote_service.create(
                uow,
                quote_data(customer.id, items=[("Fleet buyout", "2", str(MAX_AMOUNT))], status=QuoteStatus.ACCEPTED),
                ACTOR,
            )

        assert store.quotes == {}
        assert store.customers[customer.id].total_billed == Decimal("0.00")
        assert len(store.audit_logs) == logs_before


def test_ticking_clock_is_monotonic():
    """Consecutive readings of the test clock differ."""
    clock = TickingClock()
    assert clock.now() < clock.now()
