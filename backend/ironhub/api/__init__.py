"""
API Routes
Project: Iron Hub (customer ledger backend)

Aggregates the versioned routers.
"""

from ironhub.api.v1 import api_v1_router

# Export router
__all__ = ["api_v1_router"]
