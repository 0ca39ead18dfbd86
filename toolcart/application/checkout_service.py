"""Checkout orchestration.

Implements the two checkout protocols:

Standard (Empty -> AwaitingConfirmation -> Cancelled | Completed):
    confirm the cart total, clear the cart, return a transient receipt.
    No order is stored.

UCP (Empty -> IntentResolved -> AwaitingConfirmation -> Cancelled | Confirmed):
    resolve or create a payment intent, confirm its amount, then confirm
    the intent, store an order and clear the cart.

Both protocols raise CartEmptyError when the cart is empty. The caller is
responsible for running a checkout inside the shop's writer lock so that
nothing else mutates the registries while confirmation is pending.
"""

import structlog

from toolcart.application.cart_service import CartLedger
from toolcart.application.confirmation import (
    CallerContext,
    ConfirmationProvider,
    ConsolePrompt,
)
from toolcart.application.order_service import OrderRegistry
from toolcart.application.payment_service import Clock, PaymentIntentRegistry, utc_now
from toolcart.domain.entities import (
    CANCELLED_MESSAGE,
    COMPLETED_MESSAGE,
    CartSnapshot,
    Order,
    StandardCheckoutResult,
    UcpCheckoutResult,
)
from toolcart.domain.exceptions import CartEmptyError
from toolcart.domain.value_objects import IdGenerator, RandomIds, new_order_id, new_receipt_id

logger = structlog.get_logger()


def confirmation_prompt(amount: str) -> str:
    return f"Confirm checkout for {amount}?"


class CheckoutOrchestrator:
    """Runs checkouts against the cart, intent and order registries."""

    def __init__(
        self,
        cart: CartLedger,
        payment_intents: PaymentIntentRegistry,
        orders: OrderRegistry,
        ids: IdGenerator | None = None,
        clock: Clock = utc_now,
        default_confirmation: ConfirmationProvider | None = None,
    ) -> None:
        """Initialize orchestrator.

        Args:
            cart: Cart ledger to check out.
            payment_intents: Registry used by the UCP protocol.
            orders: Registry the UCP protocol writes to.
            ids: Id generator for order and receipt ids.
            clock: Source of order timestamps.
            default_confirmation: Used when the caller offers no
                confirmation capability; defaults to a console prompt.
        """
        self.cart = cart
        self.payment_intents = payment_intents
        self.orders = orders
        self.ids = ids or RandomIds()
        self.clock = clock
        self.default_confirmation = default_confirmation or ConsolePrompt()

    def _require_items(self) -> CartSnapshot:
        snapshot = self.cart.snapshot()
        if snapshot.is_empty:
            raise CartEmptyError()
        return snapshot

    async def _confirm(self, context: CallerContext | None, prompt: str) -> bool:
        provider = (context.confirmation if context else None) or self.default_confirmation
        logger.info("Awaiting checkout confirmation", prompt=prompt)
        approved = await provider.request_confirmation(prompt)
        logger.info("Checkout confirmation resolved", approved=approved)
        return approved

    async def checkout_standard(
        self, context: CallerContext | None = None
    ) -> StandardCheckoutResult:
        """Single-step checkout of the current cart.

        Raises:
            CartEmptyError: If the cart has no items.
        """
        snapshot = self._require_items()
        charged = snapshot.total.format()

        if not await self._confirm(context, confirmation_prompt(charged)):
            logger.info("Standard checkout cancelled")
            return StandardCheckoutResult(ok=False, message=CANCELLED_MESSAGE)

        order_id = new_receipt_id(self.ids)
        self.cart.clear()

        logger.info("Standard checkout completed", order_id=order_id, charged=charged)
        return StandardCheckoutResult(
            ok=True,
            message=COMPLETED_MESSAGE,
            order_id=order_id,
            charged=charged,
            items=snapshot.items,
        )

    async def checkout_ucp(
        self,
        payment_intent_id: str | None = None,
        context: CallerContext | None = None,
    ) -> UcpCheckoutResult:
        """Two-step checkout settling a payment intent into an order.

        Args:
            payment_intent_id: Existing intent to settle. When omitted, a
                new intent is created for the cart total.
            context: Caller context providing confirmation.

        Raises:
            CartEmptyError: If the cart has no items.
            PaymentIntentNotFoundError: If payment_intent_id is unknown.
            InvalidStateTransitionError: If the intent already succeeded.
        """
        snapshot = self._require_items()

        if payment_intent_id:
            intent = self.payment_intents.get(payment_intent_id)
        else:
            intent = self.payment_intents.create(snapshot.total.amount_minor)

        if not await self._confirm(context, confirmation_prompt(intent.amount.format())):
            logger.info("UCP checkout cancelled", payment_intent_id=intent.id)
            return UcpCheckoutResult(ok=False, message=CANCELLED_MESSAGE, payment_intent=intent)

        # Validate the transition and build the order before touching any
        # registry, so a failure leaves every registry as it was.
        succeeded = intent.confirm()
        order = Order.settle(
            order_id=new_order_id(self.ids),
            cart=snapshot,
            payment_intent=succeeded,
            created_at=self.clock(),
        )
        self.orders.put(order)
        succeeded = self.payment_intents.confirm(intent.id)
        self.cart.clear()

        logger.info(
            "UCP checkout completed",
            order_id=order.id,
            payment_intent_id=succeeded.id,
            total_minor=order.totals.total.amount_minor,
        )
        return UcpCheckoutResult(ok=True, order=order, payment_intent=succeeded)
