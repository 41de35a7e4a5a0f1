"""
API v1 Routes
Project: Iron Hub (customer ledger backend)

Version 1 router of the API.
"""

from fastapi import APIRouter

from ironhub.api.v1 import auth, customers, intake, inventory, payments, quotes, reports

# Aggregated router for v1
api_v1_router = APIRouter(prefix="/api/v1")

# Include the module routers
api_v1_router.include_router(auth.router)
api_v1_router.include_router(customers.router)
api_v1_router.include_router(payments.router)
api_v1_router.include_router(quotes.router)
api_v1_router.include_router(inventory.router)
api_v1_router.include_router(intake.router)
api_v1_router.include_router(reports.router)

# Export
__all__ = ["api_v1_router"]
