from enum import Enum


class CurrencyCode(str, Enum):
    """Currencies an invoice can be issued in."""

    UGX = "UGX"
    USD = "USD"
    LYD = "LYD"
