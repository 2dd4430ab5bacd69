"""
Display formatting for estimates.

Formatting never touches stored results; it only renders them.
"""


def format_currency(value: float) -> str:
    """Format a dollar amount, keeping 4 decimals below one cent."""
    if value < 0.01:
        return f"${value:.4f}"
    return f"${value:,.2f}"


def format_tokens(count: int) -> str:
    return f"{count:,} tok"


def format_multiplier(multiplier: int, period: str) -> str:
    """Format runs per period, e.g. ``4x / month``."""
    return f"{multiplier}x / {period}"
