"""
Unit tests for CustomerService.
"""

import uuid
from decimal import Decimal

import pytest

from conftest import ACTOR, customer_data
from ironhub.core.exceptions import InconsistentStateError, NotFoundError
from ironhub.models import Customer
from ironhub.schemas.customer import CustomerCreate, CustomerRead, normalize_phone


class TestCustomerSchemas:
    """Tests for customer input validation."""

    def test_phone_normalized(self):
        """Separators are stripped from phone numbers."""
        assert normalize_phone("+1 (713) 555-0142") == "+17135550142"
        assert normalize_phone("   ") is None

    def test_phone_invalid(self):
        """Letters in a phone number are refused."""
        with pytest.raises(ValueError):
            normalize_phone("call me")

    def test_totals_are_ignored_on_create(self):
        """Client-sent totals never reach CustomerCreate."""
        data = CustomerCreate.model_validate(
            {"name": "Lone Star Cranes", "total_paid": "5000", "total_billed": "1"}
        )
        assert not hasattr(data, "total_paid")

    def test_name_required(self):
        """A blank name is refused."""
        with pytest.raises(ValueError):
            CustomerCreate(name="   ")


@pytest.mark.anyio
class TestCustomerService:
    """Tests for CustomerService on the in-memory backend."""

    async def test_create(self, uow, store, customer_service, clock):
        """New accounts start at zero and are audited once."""
        customer = await customer_service.create(uow, customer_data(), ACTOR)

        stored = store.customers[customer.id]
        assert stored.name == "Gulf Coast Hauling"
        assert stored.total_billed == Decimal("0.00")
        assert stored.total_paid == Decimal("0.00")
        assert stored.billing_address["city"] == "Houston"
        assert stored.shipping_address == {"street": "", "city": "", "state": "", "zip": "", "country": ""}
        assert stored.created_at.year == 2025

        logs = list(store.audit_logs.values())
        assert len(logs) == 1
        assert logs[0].action == "Account Created"
        assert logs[0].customer_id == customer.id
        assert logs[0].user_email == ACTOR

    async def test_get_by_id_missing(self, uow, customer_service):
        """Unknown ids raise NotFoundError."""
        with pytest.raises(NotFoundError):
            await customer_service.get_by_id(uow, uuid.uuid4())

    async def test_get_all_returns_snapshots(self, uow, store, customer_service):
        """Mutating a listed customer does not touch the store."""
        first = await customer_service.create(uow, customer_data("Permian Rigging"), ACTOR)
        second = await customer_service.create(uow, customer_data("Delta Earthworks"), ACTOR)

        customers = await customer_service.get_all(uow)
        assert [c.id for c in customers] == [first.id, second.id]

        customers[0].total_paid = Decimal("999.00")
        customers[0].billing_address["city"] = "Nowhere"
        assert store.customers[first.id].total_paid == Decimal("0.00")
        assert store.customers[first.id].billing_address["city"] == "Houston"

    async def test_email_not_unique(self, uow, customer_service):
        """Two accounts may share a billing email."""
        await customer_service.create(uow, customer_data("Permian Rigging"), ACTOR)
        await customer_service.create(uow, customer_data("Permian Rigging West"), ACTOR)

        assert len(await customer_service.get_all(uow)) == 2

    async def test_bulk_import_three_customers(self, uow, store, customer_service):
        """3 rows -> 3 customers with zero totals and 3 audit entries."""
        rows = [
            {"name": "Permian Rigging", "email": "ap@permianrigging.com"},
            {"name": "Delta Earthworks", "phone": "504-555-0199"},
            {"name": "Lone Star Cranes", "total_paid": "12000"},
        ]

        result = await customer_service.bulk_create(uow, rows, ACTOR)

        assert result.created == 3
        assert result.failed == 0
        assert len(store.customers) == 3
        for customer in store.customers.values():
            assert customer.total_billed == Decimal("0.00")
            assert customer.total_paid == Decimal("0.00")
        logs = list(store.audit_logs.values())
        assert len(logs) == 3
        assert {e.customer_id for e in logs} == set(store.customers)
        assert all(e.action == "Account Created" for e in logs)

    async def test_bulk_reports_bad_rows(self, uow, store, customer_service):
        """Invalid rows are reported by index and the rest is created."""
        rows = [
            {"name": "Permian Rigging"},
            {"email": "no-name@deltaearthworks.com"},
            {"name": "Lone Star Cranes", "email": "not-an-email"},
            {"name": "Bayou Heavy Haul"},
        ]

        result = await customer_service.bulk_create(uow, rows, ACTOR)

        assert [item.success for item in result.items] == [True, False, False, True]
        assert result.items[1].error_code == "VALIDATION_ERROR"
        assert "name" in result.items[1].error
        assert "email" in result.items[2].error
        assert len(store.customers) == 2
        assert len(store.audit_logs) == 2

    async def test_bulk_nothing_valid(self, uow, store, customer_service):
        """No valid rows, no writes."""
        result = await customer_service.bulk_create(uow, [{"phone": "555"}], ACTOR)

        assert result.created == 0
        assert store.customers == {}
        assert store.audit_logs == {}

    async def test_read_schema_balance(self, uow, customer_service):
        """CustomerRead carries the computed balance."""
        customer = await customer_service.create(uow, customer_data(), ACTOR)

        read = CustomerRead.model_validate(customer)

        assert read.balance == Decimal("0.00")
        assert read.billing_address.state == "TX"


class TestTotalsUpdates:
    """Tests for the internal total increments."""

    def test_record_payment_applied(self, customer_service):
        """total_paid grows by the amount, rounded to cents."""
        customer = Customer(name="Permian Rigging", total_billed=Decimal("0.00"), total_paid=Decimal("10.00"))

        customer_service.record_payment_applied(customer, Decimal("5.005"))

        assert customer.total_paid == Decimal("15.01")

    def test_record_payment_on_missing_customer(self, customer_service):
        """A missing customer is an inconsistent ledger."""
        with pytest.raises(InconsistentStateError):
            customer_service.record_payment_applied(None, Decimal("1.00"))

    def test_record_billing_on_missing_customer(self, customer_service):
        with pytest.raises(InconsistentStateError):
            customer_service.record_billing_applied(None, Decimal("1.00"))
