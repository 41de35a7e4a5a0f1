"""
Unit tests for the data intake tool and the inventory registry.
"""

from decimal import Decimal

import pytest

from conftest import ACTOR, customer_data, quote_data
from ironhub.schemas.intake import (
    CustomerImportRow,
    IntakeEntity,
    InventoryImportRow,
    PaymentImportRow,
)
from ironhub.schemas.inventory import InventoryItemCreate, InventoryType
from ironhub.schemas.payment import PaymentMethod


class TestImportRows:
    """Tests for the normalization of loose rows."""

    def test_customer_aliases(self):
        """Usual export spellings map onto the customer fields."""
        row = CustomerImportRow.model_validate(
            {
                "company_name": "Bayou Heavy Haul",
                "email_address": "  ",
                "telephone": "337-555-0110",
                "billing_address": "12 Levee Rd, Lafayette LA",
                "notes": "Prefers wire",
            }
        )

        data = row.to_create()

        assert data.name == "Bayou Heavy Haul"
        assert data.email is None
        assert data.phone == "3375550110"
        assert data.billing_address.street == "12 Levee Rd, Lafayette LA"
        assert data.shipping_address == data.billing_address
        assert data.internal_notes == "Prefers wire"

    def test_inventory_money_and_type(self):
        """Prices with currency symbols and upper-case types are accepted."""
        row = InventoryImportRow.model_validate(
            {"item": "Komatsu PC210", "model": "PC210LC-11", "price": "$145,000.00", "qty": "2", "type": "EQUIPMENT"}
        )

        data = row.to_create()

        assert data.price == Decimal("145000.00")
        assert data.quantity == 2
        assert data.type == InventoryType.EQUIPMENT
        assert data.model_number == "PC210LC-11"

    def test_payment_method_aliases(self):
        """Bank export method names map onto PaymentMethod."""
        wire = PaymentImportRow.model_validate({"paid_on": "2025-03-03", "amount": "1,250.00", "method": "wire"})
        cheque = PaymentImportRow.model_validate({"date": "2025-03-03", "amount": 10, "method": "Cheque"})

        assert wire.method == PaymentMethod.BANK_TRANSFER
        assert wire.amount == Decimal("1250.00")
        assert cheque.method == PaymentMethod.CHECK

    @pytest.mark.parametrize("amount", ["1e30", "-4.2e27"])
    def test_payment_amount_out_of_range(self, amount):
        """Amounts too large to round to cents fail validation."""
        with pytest.raises(ValueError):
            PaymentImportRow.model_validate({"date": "2025-03-03", "amount": amount})

    def test_payment_unknown_method(self):
        """Unrecognized methods are refused."""
        with pytest.raises(ValueError):
            PaymentImportRow.model_validate({"date": "2025-03-03", "amount": "10", "method": "bitcoin"})


@pytest.mark.anyio
class TestIntakeService:
    """Tests for IntakeService.ingest."""

    async def test_customers(self, uow, store, intake_service):
        """Customer rows are created through the bulk operation."""
        rows = [
            {"customer_name": "Permian Rigging", "email": "ap@permianrigging.com"},
            {"email": "orphan@deltaearthworks.com"},
            {"company": "Lone Star Cranes", "phone": "512-555-0133"},
        ]

        result = await intake_service.ingest(uow, IntakeEntity.CUSTOMERS, rows, ACTOR)

        assert [item.success for item in result.items] == [True, False, True]
        assert [item.index for item in result.items] == [0, 1, 2]
        assert sorted(c.name for c in store.customers.values()) == ["Lone Star Cranes", "Permian Rigging"]
        assert len(store.audit_logs) == 2

    async def test_inventory(self, uow, store, intake_service):
        """Inventory rows write one system-wide Bulk Ingest entry."""
        rows = [
            {"name": "CAT 336 excavator", "price": "289000", "type": "equipment"},
            {"name": "Hydraulic filter", "part_no": "1R-0750", "cost": "42.10", "quantity": 40, "type": "part"},
            {"name": "Mystery item", "type": "gadget"},
        ]

        result = await intake_service.ingest(uow, IntakeEntity.INVENTORY, rows, ACTOR)

        assert [item.success for item in result.items] == [True, True, False]
        assert len(store.inventory) == 2
        logs = list(store.audit_logs.values())
        assert len(logs) == 1
        assert logs[0].action == "Bulk Ingest"
        assert logs[0].customer_id is None

    async def test_payments_resolved_from_invoice(
        self, uow, store, customer_service, quote_service, intake_service
    ):
        """A payment row without customer_id is attributed through its invoice."""
        customer = await customer_service.create(uow, customer_data(), ACTOR)
        quote = await quote_service.create(uow, quote_data(customer.id), ACTOR)
        rows = [
            {"invoice": quote.id, "payment_date": "2025-03-04", "amount": "$1,500.00", "method": "ACH"},
            {"customer_id": str(customer.id), "date": "2025-03-05", "amount": "800"},
            {"invoice_id": "QT-2025NONE", "date": "2025-03-05", "amount": "10"},
            {"date": "2025-03-05", "amount": "10"},
            {"customer_id": str(customer.id), "date": "2025-03-05", "amount": "-3"},
        ]

        result = await intake_service.ingest(uow, IntakeEntity.PAYMENTS, rows, ACTOR)

        assert [item.success for item in result.items] == [True, True, False, False, False]
        assert result.items[2].error_code == "RESOURCE_NOT_FOUND"
        assert result.items[3].error_code == "BUSINESS_VALIDATION_ERROR"
        assert result.items[4].error_code == "INVALID_AMOUNT"
        assert store.customers[customer.id].total_paid == Decimal("2300.00")
        imported = list(store.payments.values())
        assert all(p.id.startswith("PAY-INGEST-") for p in imported)
        assert all(p.source == "import" for p in imported)
        assert imported[0].invoice_id == quote.id

    async def test_oversized_payment_rows(self, uow, store, customer_service, intake_service):
        """Out-of-range amounts are per-row errors; the valid row is still imported."""
        customer = await customer_service.create(uow, customer_data(), ACTOR)
        rows = [
            {"customer_id": str(customer.id), "date": "2025-03-05", "amount": "1e30"},
            {"customer_id": str(customer.id), "date": "2025-03-05", "amount": "$15,000,000,000.00"},
            {"customer_id": str(customer.id), "date": "2025-03-05", "amount": "250"},
        ]

        result = await intake_service.ingest(uow, IntakeEntity.PAYMENTS, rows, ACTOR)

        assert [item.success for item in result.items] == [False, False, True]
        assert result.items[0].error_code == "VALIDATION_ERROR"
        assert result.items[1].error_code == "INVALID_AMOUNT"
        assert store.customers[customer.id].total_paid == Decimal("250.00")

    async def test_oversized_inventory_prices(self, uow, store, intake_service):
        """Prices the ledger cannot store are rejected per row."""
        rows = [
            {"name": "Bucket wheel excavator", "price": "1e30"},
            {"name": "Dragline", "price": "$15,000,000,000.00"},
            {"name": "Skid steer", "price": "$64,500.00"},
        ]

        result = await intake_service.ingest(uow, IntakeEntity.INVENTORY, rows, ACTOR)

        assert [item.success for item in result.items] == [False, False, True]
        assert len(store.inventory) == 1


@pytest.mark.anyio
class TestInventoryService:
    """Tests for InventoryService.create / get_all."""

    async def test_create_and_list(self, uow, store, inventory_service):
        """Single items are stored and audited without customer scope."""
        item = await inventory_service.create(
            uow,
            InventoryItemCreate(name="Volvo A40G hauler", price=Decimal("510000"), quantity=1),
            ACTOR,
        )

        items = await inventory_service.get_all(uow)

        assert [i.id for i in items] == [item.id]
        assert items[0].type == "equipment"
        assert list(store.audit_logs.values())[0].action == "Inventory Added"
