"""Display formatting for invoice amounts."""

from decimal import ROUND_HALF_UP, Decimal

from app.models.currency import CurrencyCode

CURRENCY_SYMBOLS: dict[str, str] = {
    CurrencyCode.UGX.value: "USh",
    CurrencyCode.USD.value: "$",
    CurrencyCode.LYD.value: "LD",
}

# Shilling amounts are shown without minor units
FRACTION_DIGITS: dict[str, int] = {
    CurrencyCode.UGX.value: 0,
}
DEFAULT_FRACTION_DIGITS = 2


def currency_symbol(currency: str) -> str:
    """Symbol for ``currency``; unknown codes are shown as-is."""
    return CURRENCY_SYMBOLS.get(currency, currency)


def format_currency(amount: Decimal | int | float, currency: str) -> str:
    """Format an amount for display, e.g. ``$4,400.00``, ``USh 3,300``, ``LD 10,000.00``.

    Single-character symbols are written flush against the number, longer
    symbols (and raw codes) are separated by a space. Rounding is half-up.
    """
    code = str(currency.value if isinstance(currency, CurrencyCode) else currency)
    digits = FRACTION_DIGITS.get(code, DEFAULT_FRACTION_DIGITS)
    value = Decimal(str(amount)).quantize(Decimal(1).scaleb(-digits), rounding=ROUND_HALF_UP)

    sign = "-" if value < 0 else ""
    number = f"{abs(value):,.{digits}f}"
    symbol = currency_symbol(code)
    separator = "" if len(symbol) == 1 else " "
    return f"{sign}{symbol}{separator}{number}"


def calculate_percentage(value: Decimal | int | float, total: Decimal | int | float) -> int:
    """Whole-number share of ``value`` in ``total`` (0 when ``total`` is 0)."""
    total_dec = Decimal(str(total))
    if total_dec == 0:
        return 0
    share = Decimal(str(value)) / total_dec * 100
    return int(share.quantize(Decimal(1), rounding=ROUND_HALF_UP))
