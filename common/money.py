"""Exact money amounts.

Prices arrive as display strings (``"₱124.00"``). They are parsed once into an
integer amount of minor units plus an ISO currency code and only formatted
again for display.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from django.conf import settings

CURRENCY_SYMBOLS = {
    "₱": "PHP",
    "$": "USD",
    "£": "GBP",
    "€": "EUR",
}

SYMBOL_FOR_CURRENCY = {code: symbol for symbol, code in CURRENCY_SYMBOLS.items()}

MINOR_UNITS = Decimal("100")


def default_currency() -> str:
    return getattr(settings, "DEFAULT_CURRENCY", "PHP")


@dataclass(frozen=True)
class Money:
    """Amount in minor units (centavos, cents) of a single currency."""

    amount: int
    currency: str

    @classmethod
    def zero(cls, currency: str | None = None) -> "Money":
        return cls(0, currency or default_currency())

    @classmethod
    def parse(cls, text: str, currency: str | None = None) -> "Money":
        """Parse a formatted price such as ``"₱1,124.00"`` or ``"35"``.

        Raises ValueError for anything that is not a non-negative amount with
        at most two decimal places.
        """
        raw = (text or "").strip()
        code = currency
        for symbol, symbol_code in CURRENCY_SYMBOLS.items():
            if raw.startswith(symbol):
                raw = raw[len(symbol) :].strip()
                code = code or symbol_code
                break
        raw = raw.replace(",", "")
        try:
            value = Decimal(raw)
        except InvalidOperation:
            raise ValueError(f"Invalid price: {text!r}")
        if not value.is_finite() or value < 0:
            raise ValueError(f"Invalid price: {text!r}")
        minor = value * MINOR_UNITS
        if minor != minor.to_integral_value():
            raise ValueError(f"Too many decimal places: {text!r}")
        return cls(int(minor), code or default_currency())

    @property
    def decimal(self) -> Decimal:
        return (Decimal(self.amount) / MINOR_UNITS).quantize(Decimal("0.01"))

    def format(self) -> str:
        symbol = SYMBOL_FOR_CURRENCY.get(self.currency)
        if symbol:
            return f"{symbol}{self.decimal:,.2f}"
        return f"{self.decimal:,.2f} {self.currency}"

    def __add__(self, other: "Money") -> "Money":
        if not isinstance(other, Money):
            return NotImplemented
        if other.currency != self.currency:
            raise ValueError(f"Currency mismatch: {self.currency} != {other.currency}")
        return Money(self.amount + other.amount, self.currency)

    def __mul__(self, quantity: int) -> "Money":
        if not isinstance(quantity, int):
            return NotImplemented
        return Money(self.amount * quantity, self.currency)

    __rmul__ = __mul__

    def __str__(self) -> str:
        return self.format()
