"""Value Objects for the domain layer.

Value objects are immutable objects that are defined by their attributes
rather than identity. They are interchangeable when their values are equal.
"""

import itertools
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Protocol, Self
from uuid import uuid4

from toolcart.domain.exceptions import CurrencyMismatchError, NegativeMoneyError

DEFAULT_CURRENCY = "GBP"

CURRENCY_SYMBOLS = {"GBP": "£", "USD": "$", "EUR": "€"}


# ============================================================================
# Money Value Object
# ============================================================================


@dataclass(frozen=True)
class Money:
    """Represents monetary value with currency.

    Money is stored in the smallest currency unit (pence for GBP)
    so all arithmetic stays in integers.

    Attributes:
        amount_minor: Amount in smallest currency unit.
        currency: ISO 4217 currency code (e.g., 'GBP').
    """

    amount_minor: int
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self) -> None:
        """Validate money constraints."""
        if self.amount_minor < 0:
            raise NegativeMoneyError(self.amount_minor)
        object.__setattr__(self, "currency", self.currency.upper())

    @classmethod
    def zero(cls, currency: str = DEFAULT_CURRENCY) -> Self:
        """Create zero amount money."""
        return cls(amount_minor=0, currency=currency)

    def to_decimal(self) -> Decimal:
        """Convert to decimal amount in major units."""
        return Decimal(self.amount_minor) / 100

    def __add__(self, other: "Money") -> "Money":
        """Add two money amounts.

        Raises:
            CurrencyMismatchError: If currencies don't match.
        """
        if self.currency != other.currency:
            raise CurrencyMismatchError(self.currency, other.currency)
        return Money(
            amount_minor=self.amount_minor + other.amount_minor,
            currency=self.currency,
        )

    def __mul__(self, quantity: int) -> "Money":
        """Multiply money by quantity."""
        return Money(
            amount_minor=self.amount_minor * quantity,
            currency=self.currency,
        )

    def __rmul__(self, quantity: int) -> "Money":
        return self.__mul__(quantity)

    def format(self) -> str:
        """Return the display string, e.g. '£17.98'."""
        symbol = CURRENCY_SYMBOLS.get(self.currency)
        if symbol is None:
            return f"{self.to_decimal():,.2f} {self.currency}"
        return f"{symbol}{self.to_decimal():,.2f}"

    def __str__(self) -> str:
        return self.format()

    def is_zero(self) -> bool:
        """Check if amount is zero."""
        return self.amount_minor == 0

    def to_dict(self) -> dict[str, Any]:
        """Wire representation."""
        return {"currency": self.currency, "amountMinor": self.amount_minor}


def format_money(amount_minor: int, currency: str = DEFAULT_CURRENCY) -> str:
    """Format an amount in minor units for display."""
    return Money(amount_minor=amount_minor, currency=currency).format()


# ============================================================================
# Identifier Generation
# ============================================================================


class IdGenerator(Protocol):
    """Source of the random part of generated ids."""

    def token(self, length: int) -> str:
        """Return ``length`` lowercase hex characters."""
        ...


class RandomIds:
    """Random hex tokens backed by uuid4."""

    def token(self, length: int) -> str:
        return uuid4().hex[:length]


class SequentialIds:
    """Deterministic hex tokens: 00000001, 00000002, ...

    Used by tests so generated ids can be asserted exactly.
    """

    def __init__(self, start: int = 1) -> None:
        self._counter = itertools.count(start)

    def token(self, length: int) -> str:
        return f"{next(self._counter):0{length}x}"


def new_payment_intent_id(ids: IdGenerator) -> str:
    """Generate a payment intent id, e.g. 'pi_3f9a0c1d'."""
    return f"pi_{ids.token(8)}"


def new_order_id(ids: IdGenerator) -> str:
    """Generate a persisted order id, e.g. 'ord_3f9a0c1d'."""
    return f"ord_{ids.token(8)}"


def new_receipt_id(ids: IdGenerator) -> str:
    """Generate a transient receipt order id, e.g. 'ORD-3F9A0C'."""
    return f"ORD-{ids.token(6).upper()}"
