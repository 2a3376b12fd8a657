"""Mini README: Display formatting for monetary amounts."""

from __future__ import annotations

from typing import Optional

from ..configuration import get_settings


def format_currency(amount: float, symbol: Optional[str] = None) -> str:
    """Render ``amount`` as ``₹15,000.00``; negatives become ``-₹500.00``."""

    prefix = get_settings().currency_symbol if symbol is None else symbol
    value = float(amount or 0)
    sign = "-" if value < 0 else ""
    return f"{sign}{prefix}{abs(value):,.2f}"
