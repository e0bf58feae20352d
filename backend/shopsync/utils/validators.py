"""
PURPOSE: Input coercion functions for Shopify webhook payload fields.
Shopify sends money as strings and IDs as integers; these helpers turn them
into the types stored in the database, falling back to safe defaults.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Optional

ZERO = Decimal("0")
CENTS = Decimal("0.01")


def parse_money(value: Any, default: Decimal = ZERO) -> Decimal:
    """
    PURPOSE: Parse a monetary amount into a Decimal rounded to cents.

    Args:
        value: Amount as string ("50.00"), int, float, Decimal or None.
        default: Value returned when parsing fails (default 0).

    Returns:
        Decimal: Parsed amount, or default for None, blanks, garbage and non-finite values.
    """
    if value is None or isinstance(value, bool):
        return default

    try:
        amount = Decimal(str(value).strip())
        if not amount.is_finite():
            return default
        return amount.quantize(CENTS)
    except (InvalidOperation, ValueError):
        return default


def parse_int(value: Any, default: int = 0) -> int:
    """
    PURPOSE: Parse an integer field, tolerating strings and missing values.

    Args:
        value: Integer-like value.
        default: Value returned when parsing fails (default 0).

    Returns:
        int: Parsed integer or default.
    """
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(str(value).strip())
    except ValueError:
        return default


def parse_order_number(order_number: Any, name: Optional[str]) -> int:
    """
    PURPOSE: Resolve an order number from `order_number`, falling back to the order name.

    Args:
        order_number: Numeric order number from the payload, may be absent.
        name: Display name such as "#1001".

    Returns:
        int: Order number, or 0 when neither field yields one.

    Examples:
        (1001, None)    → 1001
        (None, "#1002") → 1002
        (None, None)    → 0
    """
    parsed = parse_int(order_number, default=0)
    if parsed:
        return parsed
    if name:
        return parse_int(name.replace("#", ""), default=0)
    return 0


def normalize_external_id(value: Any) -> Optional[str]:
    """
    PURPOSE: Convert an external (Shopify) identifier into its stored string form.

    Args:
        value: Integer or string ID.

    Returns:
        Optional[str]: ID as string, or None when absent/blank.
    """
    if value is None or isinstance(value, bool):
        return None
    text = str(value).strip()
    return text or None
