"""
Monetary helpers
Project: Iron Hub (customer ledger backend)

Single implementation of quote totals: the ledger balance, the revenue
report and the quote read schema all go through compute_quote_total.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Iterable

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

# Largest value a Numeric(12, 2) column holds
MAX_AMOUNT = Decimal("9999999999.99")


def to_money(value: Any) -> Decimal:
    """
    Convert a number or numeric string to a Decimal rounded to cents
    (ROUND_HALF_UP).

    Floats go through str() so 0.1 stays 0.10.

    Raises:
        ValueError: value is not numeric, or too large to round to cents
    """
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            raise ValueError(f"Not a monetary amount: {value!r}")
    if not amount.is_finite():
        raise ValueError(f"Not a monetary amount: {value!r}")
    try:
        return amount.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValueError(f"Amount out of range: {value!r}")


def _item_field(item: Any, name: str) -> Any:
    if isinstance(item, dict):
        return item.get(name, 0)
    return getattr(item, name, 0)


def compute_quote_total(items: Iterable[Any]) -> Decimal:
    """
    Total of a quote: sum of quantity * price over the line items.

    Pure and deterministic. Items may be dicts (as stored on Quote.items)
    or objects exposing quantity/price (QuoteItem schemas).

    Example:
        >>> compute_quote_total([{"quantity": 2, "price": 500}, {"quantity": 1, "price": 1200}])
        Decimal('2200.00')

    Raises:
        ValueError: the total is too large to round to cents
    """
    total = Decimal("0")
    for item in items or ():
        quantity = Decimal(str(_item_field(item, "quantity") or 0))
        price = Decimal(str(_item_field(item, "price") or 0))
        total += quantity * price
    return to_money(total)
