"""State machines for domain entities.

Payment intents move forward exactly once; orders are created confirmed
and never change. The checkout protocol selects which tool set and which
checkout flow are active.
"""

from enum import Enum


# ============================================================================
# Payment Intent State Machine
# ============================================================================


class PaymentIntentStatus(str, Enum):
    """Payment intent lifecycle states.

    State diagram:
        REQUIRES_CONFIRMATION
          │
          │ confirm
          ▼
        SUCCEEDED
    """

    REQUIRES_CONFIRMATION = "requires_confirmation"
    SUCCEEDED = "succeeded"

    def can_transition_to(self, target: "PaymentIntentStatus") -> bool:
        """Check if transition to target state is valid."""
        return target in _PAYMENT_INTENT_TRANSITIONS.get(self, set())

    def allowed_transitions(self) -> list["PaymentIntentStatus"]:
        """Get list of valid target states."""
        return list(_PAYMENT_INTENT_TRANSITIONS.get(self, set()))

    def is_terminal(self) -> bool:
        """Check if this is a terminal (final) state."""
        return len(_PAYMENT_INTENT_TRANSITIONS.get(self, set())) == 0


_PAYMENT_INTENT_TRANSITIONS: dict[PaymentIntentStatus, set[PaymentIntentStatus]] = {
    PaymentIntentStatus.REQUIRES_CONFIRMATION: {PaymentIntentStatus.SUCCEEDED},
    PaymentIntentStatus.SUCCEEDED: set(),  # Terminal state
}


# ============================================================================
# Order Status
# ============================================================================


class OrderStatus(str, Enum):
    """Orders are written once, already confirmed."""

    CONFIRMED = "confirmed"


# ============================================================================
# Checkout Protocol
# ============================================================================


class CheckoutProtocol(str, Enum):
    """Checkout protocol in effect.

    STANDARD confirms and clears the cart in one step and returns a
    transient receipt. UCP separates authorization (payment intent) from
    settlement (persisted order).
    """

    STANDARD = "standard"
    UCP = "ucp"
