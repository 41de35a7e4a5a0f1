"""
Identifier and clock providers
Project: Iron Hub (customer ledger backend)

The ledger services never call uuid/datetime directly: they receive an
IdGenerator and a Clock, so tests can pin both.
"""

import datetime
import secrets
import string
import uuid

from ironhub.core.config import settings

_QUOTE_SUFFIX_ALPHABET = string.ascii_uppercase + string.digits


class Clock:
    """System clock, always timezone-aware UTC."""

    def now(self) -> datetime.datetime:
        return datetime.datetime.now(datetime.timezone.utc)


class IdGenerator:
    """
    Produces identifiers for ledger records.

    - UUIDs for customers, audit entries and inventory items
    - QT-<year><4 chars> for quotes (human legible, read out on the phone)
    - PAY-<hex> / PAY-INGEST-<hex> for payments
    """

    def __init__(
        self,
        quote_prefix: str = settings.quote_id_prefix,
        payment_prefix: str = settings.payment_id_prefix,
    ) -> None:
        self.quote_prefix = quote_prefix
        self.payment_prefix = payment_prefix

    def new_uuid(self) -> uuid.UUID:
        return uuid.uuid4()

    def quote_id(self, year: int) -> str:
        suffix = "".join(secrets.choice(_QUOTE_SUFFIX_ALPHABET) for _ in range(4))
        return f"{self.quote_prefix}-{year}{suffix}"

    def payment_id(self, imported: bool = False) -> str:
        token = secrets.token_hex(6).upper()
        if imported:
            return f"{self.payment_prefix}-INGEST-{token}"
        return f"{self.payment_prefix}-{token}"
