"""Payment intent registry.

Creates payment intents and moves them to ``succeeded`` exactly once.
No money moves anywhere: an intent only records the authorized amount.
"""

import math
from datetime import datetime, timezone
from typing import Any, Callable

import structlog

from toolcart.application.cart_service import CartLedger
from toolcart.domain.entities import PaymentIntent
from toolcart.domain.exceptions import (
    InvalidAmountError,
    MissingFieldError,
    PaymentIntentNotFoundError,
)
from toolcart.domain.value_objects import IdGenerator, Money, RandomIds, new_payment_intent_id

logger = structlog.get_logger()

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _resolve_amount(amount_minor: Any) -> int:
    if isinstance(amount_minor, bool):
        raise InvalidAmountError(amount_minor)
    try:
        number = float(amount_minor)
    except (TypeError, ValueError):
        raise InvalidAmountError(amount_minor) from None
    if not math.isfinite(number) or number <= 0 or not number.is_integer():
        raise InvalidAmountError(amount_minor)
    return int(number)


class PaymentIntentRegistry:
    """In-memory id -> PaymentIntent map."""

    def __init__(
        self,
        cart: CartLedger,
        ids: IdGenerator | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self.cart = cart
        self.ids = ids or RandomIds()
        self.clock = clock
        self._intents: dict[str, PaymentIntent] = {}

    def create(self, amount_minor: Any = None) -> PaymentIntent:
        """Create a payment intent awaiting confirmation.

        Args:
            amount_minor: Amount in minor units. Defaults to the current
                cart total when omitted.

        Raises:
            InvalidAmountError: If the resolved amount is not > 0, which
                includes an empty cart with no explicit amount.
        """
        if amount_minor is None:
            amount_minor = self.cart.snapshot().total.amount_minor
        amount = _resolve_amount(amount_minor)

        intent = PaymentIntent(
            id=new_payment_intent_id(self.ids),
            amount=Money(amount_minor=amount, currency=self.cart.currency),
            created_at=self.clock(),
        )
        self._intents = {**self._intents, intent.id: intent}

        logger.info("Payment intent created", payment_intent_id=intent.id, amount_minor=amount)
        return intent

    def get(self, payment_intent_id: Any) -> PaymentIntent:
        """Get a payment intent by id.

        Raises:
            MissingFieldError: If the id is empty.
            PaymentIntentNotFoundError: If the id is not registered.
        """
        pid = "" if payment_intent_id is None else str(payment_intent_id)
        if not pid:
            raise MissingFieldError("paymentIntentId")
        intent = self._intents.get(pid)
        if intent is None:
            raise PaymentIntentNotFoundError(pid)
        return intent

    def confirm(self, payment_intent_id: str) -> PaymentIntent:
        """Move an intent to ``succeeded`` and store the new value.

        Raises:
            PaymentIntentNotFoundError: If the id is not registered.
            InvalidStateTransitionError: If the intent already succeeded.
        """
        confirmed = self.get(payment_intent_id).confirm()
        self._intents = {**self._intents, confirmed.id: confirmed}

        logger.info("Payment intent confirmed", payment_intent_id=confirmed.id)
        return confirmed

    def __len__(self) -> int:
        return len(self._intents)
