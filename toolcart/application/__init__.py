"""Application layer module.

Contains the registries (cart, payment intents, orders) and the checkout
orchestrator that coordinates them.
"""

from toolcart.application.cart_service import CartLedger
from toolcart.application.checkout_service import CheckoutOrchestrator
from toolcart.application.confirmation import (
    CallbackConfirmation,
    CallerContext,
    ConfirmationProvider,
    ConsolePrompt,
    StaticConfirmation,
)
from toolcart.application.order_service import OrderRegistry
from toolcart.application.payment_service import PaymentIntentRegistry

__all__ = [
    "CallbackConfirmation",
    "CallerContext",
    "CartLedger",
    "CheckoutOrchestrator",
    "ConfirmationProvider",
    "ConsolePrompt",
    "OrderRegistry",
    "PaymentIntentRegistry",
    "StaticConfirmation",
]
