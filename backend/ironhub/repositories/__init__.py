"""
Storage backends for Iron Hub

Services depend on UnitOfWork only; the concrete backend is picked by
ironhub.core.deps.get_unit_of_work from settings.storage_backend.
"""

from ironhub.repositories.base import UnitOfWork
from ironhub.repositories.memory import InMemoryUnitOfWork, MemoryStore, get_memory_store
from ironhub.repositories.sql import SqlAlchemyUnitOfWork

__all__ = [
    "UnitOfWork",
    "InMemoryUnitOfWork",
    "MemoryStore",
    "get_memory_store",
    "SqlAlchemyUnitOfWork",
]
