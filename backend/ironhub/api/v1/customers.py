"""
FastAPI router for customer accounts
Project: Iron Hub (customer ledger backend)

Defines the API endpoints for customers, their ledger and their payments.
"""

import logging
import uuid
from typing import Any

from fastapi import APIRouter, Body, Depends, Query, status

from ironhub.core.deps import CurrentActor, UnitOfWorkDep
from ironhub.schemas.customer import CustomerCreate, CustomerList, CustomerRead
from ironhub.schemas.ledger import AccountView, BalanceRead, BulkResult, ReconciliationReport
from ironhub.schemas.payment import PaymentCreate, PaymentRead, PaymentRequest
from ironhub.services.customer_service import CustomerService
from ironhub.services.ledger_service import LedgerService
from ironhub.services.payment_service import PaymentService

# Logger for this module
logger = logging.getLogger(__name__)

# Router with prefix and tag
router = APIRouter(
    prefix="/customers",
    tags=["Customers"],
)


# -------------------------------------------------------------------
# Dependency Injection
# -------------------------------------------------------------------

def get_customer_service() -> CustomerService:
    """
    Dependency returning a CustomerService instance.

    Lets the routers receive the service without global instances, which
    keeps tests free to override it.
    """
    return CustomerService()


def get_ledger_service() -> LedgerService:
    """Dependency returning a LedgerService instance."""
    return LedgerService()


def get_payment_service() -> PaymentService:
    """Dependency returning a PaymentService instance."""
    return PaymentService()


# -------------------------------------------------------------------
# Endpoints
# -------------------------------------------------------------------

@router.get(
    "/",
    name="customers_list",
    summary="List customers",
    description="All customer accounts in creation order.",
    response_model=CustomerList,
    status_code=status.HTTP_200_OK,
)
async def get_customers(
    uow: UnitOfWorkDep,
    service: CustomerService = Depends(get_customer_service),
) -> CustomerList:
    customers = await service.get_all(uow)
    return CustomerList(
        items=[CustomerRead.model_validate(c) for c in customers],
        total=len(customers),
    )


@router.post(
    "/",
    name="customers_create",
    summary="Create customer",
    description="Create a customer account with zero totals.",
    response_model=CustomerRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_customer(
    customer_data: CustomerCreate,
    uow: UnitOfWorkDep,
    actor: CurrentActor,
    service: CustomerService = Depends(get_customer_service),
) -> CustomerRead:
    """
    Create a customer.

    Any total sent in the body is ignored: accounts always start at zero.
    """
    customer = await service.create(uow, customer_data, actor)
    return CustomerRead.model_validate(customer)


@router.post(
    "/bulk",
    name="customers_bulk_create",
    summary="Bulk create customers",
    description="Create several customers in one transaction; the result reports each row.",
    response_model=BulkResult,
    status_code=status.HTTP_200_OK,
)
async def bulk_create_customers(
    uow: UnitOfWorkDep,
    actor: CurrentActor,
    rows: list[dict[str, Any]] = Body(..., description="Customer rows"),
    service: CustomerService = Depends(get_customer_service),
) -> BulkResult:
    return await service.bulk_create(uow, rows, actor)


@router.get(
    "/{customer_id}",
    name="customers_account",
    summary="Customer account",
    description="Customer with quotes, payments, audit trail and balance.",
    response_model=AccountView,
    status_code=status.HTTP_200_OK,
)
async def get_customer_account(
    customer_id: uuid.UUID,
    uow: UnitOfWorkDep,
    service: LedgerService = Depends(get_ledger_service),
) -> AccountView:
    """
    Retrieve the account view of a customer.

    Raises:
        NotFoundError: If the customer does not exist
    """
    return await service.get_account_view(uow, customer_id)


@router.get(
    "/{customer_id}/balance",
    name="customers_balance",
    summary="Customer balance",
    description="total_billed - total_paid of the account.",
    response_model=BalanceRead,
    status_code=status.HTTP_200_OK,
)
async def get_customer_balance(
    customer_id: uuid.UUID,
    uow: UnitOfWorkDep,
    service: LedgerService = Depends(get_ledger_service),
) -> BalanceRead:
    return await service.balance(uow, customer_id)


@router.post(
    "/{customer_id}/payments",
    name="customers_payment_create",
    summary="Record payment",
    description="Record a payment on the account, optionally allocated to one of its quotes.",
    response_model=PaymentRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_customer_payment(
    customer_id: uuid.UUID,
    payment_data: PaymentRequest,
    uow: UnitOfWorkDep,
    actor: CurrentActor,
    service: PaymentService = Depends(get_payment_service),
) -> PaymentRead:
    """
    Record a payment.

    Raises:
        InvalidAmountError: amount <= 0
        NotFoundError: customer or quote does not exist
        InvalidAllocationError: quote of another customer, or rejected
    """
    payment = await service.create(
        uow,
        PaymentCreate(customer_id=customer_id, **payment_data.model_dump()),
        actor,
    )
    return PaymentRead.model_validate(payment)


@router.post(
    "/{customer_id}/reconcile",
    name="customers_reconcile",
    summary="Reconcile totals",
    description="Compare the stored totals with the records; repair them when dry_run is false.",
    response_model=ReconciliationReport,
    status_code=status.HTTP_200_OK,
)
async def reconcile_customer(
    customer_id: uuid.UUID,
    uow: UnitOfWorkDep,
    actor: CurrentActor,
    dry_run: bool = Query(True, description="Report only, change nothing"),
    service: LedgerService = Depends(get_ledger_service),
) -> ReconciliationReport:
    return await service.reconcile(uow, customer_id, actor, dry_run=dry_run)
