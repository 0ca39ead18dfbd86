"""Shop session.

Composition root owning the catalog, the three registries, the checkout
orchestrator, the tool gateway and the activity log for one session. Its
methods are the plain-call surface used by the HTTP API; the tool gateway
dispatches to the same registry operations under the same lock, so a UI
click and a tool call produce the same result.

Concurrency: one asyncio lock serializes every mutation. A checkout holds
it for its whole run, including the wait for confirmation, so no other
cart, intent or order mutation can interleave. Reads do not take the lock;
registries swap whole mappings, so a read always sees a complete state.
"""

import asyncio
import inspect
from typing import Any, Awaitable, Callable, TypeVar

import structlog

from toolcart.application.cart_service import CartLedger
from toolcart.application.checkout_service import CheckoutOrchestrator
from toolcart.application.confirmation import CallerContext, ConfirmationProvider
from toolcart.application.order_service import OrderRegistry
from toolcart.application.payment_service import Clock, PaymentIntentRegistry, utc_now
from toolcart.catalog.repository import CatalogStore
from toolcart.catalog.service import SearchEngine, SearchResult
from toolcart.domain.entities import (
    CartSnapshot,
    CheckoutResult,
    Order,
    PaymentIntent,
    StandardCheckoutResult,
    UcpCheckoutResult,
)
from toolcart.domain.exceptions import BusinessRuleViolation, DomainError, UnsupportedFieldError
from toolcart.domain.state_machines import CheckoutProtocol
from toolcart.domain.value_objects import DEFAULT_CURRENCY, IdGenerator, RandomIds
from toolcart.infrastructure.activity import ActivityLog, to_wire
from toolcart.tools.gateway import ToolGateway

logger = structlog.get_logger()

T = TypeVar("T")

DEMO_QUERY = "mug"


class Shop:
    """One shopping session: registries, checkout and tools.

    Example usage:
        shop = Shop()
        await shop.add_to_cart("p1", 2)
        await shop.set_protocol(CheckoutProtocol.UCP)
        result = await shop.checkout(context=CallerContext(StaticConfirmation(True)))
    """

    def __init__(
        self,
        catalog: CatalogStore | None = None,
        currency: str = DEFAULT_CURRENCY,
        protocol: CheckoutProtocol = CheckoutProtocol.STANDARD,
        ids: IdGenerator | None = None,
        clock: Clock = utc_now,
        default_confirmation: ConfirmationProvider | None = None,
        activity: ActivityLog | None = None,
    ) -> None:
        """Initialize the session.

        Args:
            catalog: Product catalog; defaults to the seeded catalog.
            currency: Currency for all prices.
            protocol: Checkout protocol active at start.
            ids: Id generator shared by intents, orders and receipts.
            clock: Timestamp source.
            default_confirmation: Confirmation used when a caller offers none.
            activity: Observability sink.
        """
        ids = ids or RandomIds()
        self.currency = currency
        self.catalog = catalog if catalog is not None else CatalogStore()
        self.search_engine = SearchEngine(self.catalog, currency=currency)
        self.cart = CartLedger(self.catalog, currency=currency)
        self.payment_intents = PaymentIntentRegistry(self.cart, ids=ids, clock=clock)
        self.orders = OrderRegistry()
        self.checkout_orchestrator = CheckoutOrchestrator(
            cart=self.cart,
            payment_intents=self.payment_intents,
            orders=self.orders,
            ids=ids,
            clock=clock,
            default_confirmation=default_confirmation,
        )
        self.activity = activity if activity is not None else ActivityLog()
        self._writer_lock = asyncio.Lock()
        self._protocol = protocol
        self.tools = ToolGateway(self)
        self.tools.activate(protocol)

    @property
    def protocol(self) -> CheckoutProtocol:
        return self._protocol

    @property
    def writer_lock(self) -> asyncio.Lock:
        """Lock held by every mutation. Not reentrant."""
        return self._writer_lock

    # =========================================================================
    # Observation
    # =========================================================================

    async def observe(
        self,
        event: str,
        input: dict[str, Any],
        call: Callable[[], T | Awaitable[T]],
    ) -> T:
        """Run an operation and record its outcome as ``event``.

        Failures are recorded and re-raised unchanged.
        """
        try:
            result = call()
            if inspect.isawaitable(result):
                result = await result
        except DomainError as exc:
            self.activity.record(event, {"input": input, "error": exc.to_dict()})
            raise
        except Exception as exc:
            self.activity.record(
                event,
                {"input": input, "error": {"error_code": "INTERNAL_ERROR", "message": str(exc)}},
            )
            raise
        self.activity.record(event, {"input": input, "result": to_wire(result)})
        return result

    # =========================================================================
    # Reads
    # =========================================================================

    def search(self, q: Any = "", category: Any = "") -> SearchResult:
        """Search the catalog by text and category."""
        return self.search_engine.search(q, category)

    def get_cart(self) -> CartSnapshot:
        return self.cart.snapshot()

    def get_order_status(self, order_id: Any) -> Order:
        """Look up an order settled by the UCP protocol."""
        return self.orders.get(order_id)

    # =========================================================================
    # Mutations
    # =========================================================================

    async def add_to_cart(self, product_id: Any, quantity: Any = 1) -> CartSnapshot:
        async with self._writer_lock:
            return self.cart.add(product_id, quantity)

    async def remove_from_cart(self, product_id: Any) -> CartSnapshot:
        async with self._writer_lock:
            return self.cart.remove(product_id)

    async def create_payment_intent(self, amount_minor: Any = None) -> PaymentIntent:
        async with self._writer_lock:
            return self.payment_intents.create(amount_minor)

    async def checkout_standard(
        self, context: CallerContext | None = None
    ) -> StandardCheckoutResult:
        async with self._writer_lock:
            return await self.checkout_orchestrator.checkout_standard(context)

    async def checkout_ucp(
        self,
        payment_intent_id: str | None = None,
        context: CallerContext | None = None,
    ) -> UcpCheckoutResult:
        async with self._writer_lock:
            return await self.checkout_orchestrator.checkout_ucp(payment_intent_id, context)

    async def checkout(
        self,
        payment_intent_id: str | None = None,
        context: CallerContext | None = None,
    ) -> CheckoutResult:
        """Check out using the protocol active when the lock is acquired.

        Raises:
            UnsupportedFieldError: If ``payment_intent_id`` is given while
                the Standard protocol is active.
        """
        async with self._writer_lock:
            if self._protocol is CheckoutProtocol.UCP:
                return await self.checkout_orchestrator.checkout_ucp(payment_intent_id, context)
            if payment_intent_id:
                raise UnsupportedFieldError("paymentIntentId", self._protocol.value)
            return await self.checkout_orchestrator.checkout_standard(context)

    async def set_protocol(self, protocol: CheckoutProtocol | str) -> list[str]:
        """Switch checkout protocol and reinstall the matching tool set.

        Waits for any in-flight mutation, including a pending checkout.

        Returns:
            Names of the tools now installed.
        """
        protocol = CheckoutProtocol(protocol)
        async with self._writer_lock:
            self._protocol = protocol
            installed = self.tools.activate(protocol)
        logger.info("Checkout protocol changed", protocol=protocol.value)
        return installed

    # =========================================================================
    # Demo helpers
    # =========================================================================

    async def demo_search(self) -> SearchResult:
        """Search for the demo query."""
        return await self.observe(
            "demo:searchProducts",
            {"q": DEMO_QUERY},
            lambda: self.search(DEMO_QUERY),
        )

    async def demo_add_first(self) -> CartSnapshot:
        """Add one of the first product from the latest search.

        Raises:
            BusinessRuleViolation: If the latest search had no results.
        """
        first = self.search_engine.first_result()

        async def add_first() -> CartSnapshot:
            if first is None:
                raise BusinessRuleViolation("Search first (no results to add).")
            return await self.add_to_cart(first, 1)

        return await self.observe(
            "demo:addToCart",
            {"productId": first, "quantity": 1},
            add_first,
        )

    async def demo_checkout(self, context: CallerContext | None = None) -> CheckoutResult:
        """Check out with the active protocol."""
        return await self.observe(
            "demo:checkout",
            {"protocol": self._protocol.value},
            lambda: self.checkout(context=context),
        )
