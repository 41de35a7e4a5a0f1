"""
SQLAlchemy model mixins
Project: Iron Hub (customer ledger backend)

Reusable mixins adding common columns to the models.

Timestamps are written by the services through the injected Clock rather
than by server defaults, so the in-memory backend and the database agree
on every value.
"""

import copy
import datetime
import uuid
from typing import TypeVar

from sqlalchemy import DateTime, Uuid
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import Mapped, mapped_column

T = TypeVar("T")


class UUIDMixin:
    """
    Mixin for a UUID primary key.

    Usage:
        class MyModel(Base, UUIDMixin):
            __tablename__ = "my_table"
            ...
    """

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
        doc="UUID primary key",
    )


class CreatedAtMixin:
    """
    Mixin for append-only records: creation timestamp only.
    """

    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        doc="Record creation timestamp",
    )


class TimestampMixin(CreatedAtMixin):
    """
    Mixin for mutable records: creation and last update timestamps.

    Usage:
        class MyModel(Base, TimestampMixin):
            __tablename__ = "my_table"
            ...
    """

    updated_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        doc="Last update timestamp",
    )


# ------------------------------------------------------------
# Helpers
# ------------------------------------------------------------
def clone_entity(entity: T) -> T:
    """
    Return a detached copy of a model instance with every column value
    deep-copied (JSON columns included). Relationships are not copied.

    Used by the in-memory backend to hand out snapshots.
    """
    mapper = sa_inspect(type(entity))
    values = {
        attr.key: copy.deepcopy(getattr(entity, attr.key))
        for attr in mapper.column_attrs
    }
    return type(entity)(**values)
