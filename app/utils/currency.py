from decimal import Decimal, ROUND_HALF_UP


def format_currency(amount: Decimal, currency: str) -> str:
    """
    Render a zero-decimal amount with thousands separators.

    Example:
        format_currency(Decimal("1000000"), "IDR") -> "IDR 1,000,000"
    """
    whole = Decimal(amount).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return f"{currency} {whole:,}"
