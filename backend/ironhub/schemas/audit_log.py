"""
Pydantic schemas for audit entries
Project: Iron Hub (customer ledger backend)
"""

import datetime
import uuid
from typing import Optional

from pydantic import BaseModel, ConfigDict


class AuditLogRead(BaseModel):
    """Schema for reading an audit entry."""

    id: uuid.UUID
    customer_id: Optional[uuid.UUID] = None
    user_email: str
    action: str
    details: Optional[str] = None
    created_at: datetime.datetime

    model_config = ConfigDict(from_attributes=True)
