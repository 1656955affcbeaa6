"""Amount formatting and request marker helpers."""

import uuid
from decimal import Decimal
from typing import Optional, Union

CURRENCY_SYMBOLS = {
    "NGN": "₦",
}

Number = Union[Decimal, int, float, str]


def total_deducted(amount: Number, fee: Optional[Number] = None) -> Decimal:
    """Amount plus fee, as shown on the confirmation and PIN screens."""
    return Decimal(str(amount)) + Decimal(str(fee or 0))


def format_amount(amount: Number, currency: Optional[str] = "NGN") -> str:
    """Render an amount with grouping, e.g. ``₦1,500`` or ``USD 12.50``."""
    value = Decimal(str(amount))
    if value == value.to_integral_value():
        text = f"{value:,.0f}"
    else:
        text = f"{value:,.2f}"

    code = (currency or "NGN").upper()
    symbol = CURRENCY_SYMBOLS.get(code)
    if symbol:
        return f"{symbol}{text}"
    return f"{code} {text}"


def new_idempotency_marker() -> str:
    """Fresh marker for one logical transfer submission."""
    return uuid.uuid4().hex
