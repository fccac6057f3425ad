"""Formatting utilities for currency, percentages and month labels."""

from __future__ import annotations

from typing import Union

from .config import MONTH_NAMES, NEGATIVE_COLOR, POSITIVE_COLOR, WARNING_COLOR


def escape_dollar_for_markdown(amount: float) -> str:
    """Format a dollar amount and escape the dollar sign for markdown rendering.

    Streamlit markdown treats ``$`` as a LaTeX delimiter, so the sign is
    escaped.

    Example:
        >>> escape_dollar_for_markdown(1234.56)
        '\\\\$1,234.56'
    """
    return format_currency(amount).replace("$", "\\$")


def format_currency(amount: Union[float, int], include_sign: bool = True) -> str:
    """Format a currency amount, placing any minus sign before the dollar.

    Example:
        >>> format_currency(1234.56)
        '$1,234.56'
        >>> format_currency(-50)
        '-$50.00'
        >>> format_currency(1234.56, include_sign=False)
        '1,234.56'
    """
    formatted = f"{abs(amount):,.2f}"
    if include_sign:
        formatted = f"${formatted}"
    return f"-{formatted}" if amount < 0 else formatted


def format_percent(value: float, decimals: int = 1) -> str:
    return f"{value:.{decimals}f}%"


def month_label(year: int, month: int) -> str:
    """Human-readable label for a zero-based month index, e.g. ``'October 2025'``."""
    return f"{MONTH_NAMES[month]} {year}"


def amount_color(value: float) -> str:
    """Green for zero or positive, red for negative."""
    return POSITIVE_COLOR if value >= 0 else NEGATIVE_COLOR


def usage_color(usage_level: str) -> str:
    return {
        'ok': POSITIVE_COLOR,
        'warning': WARNING_COLOR,
    }.get(usage_level, NEGATIVE_COLOR)
