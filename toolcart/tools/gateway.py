"""Tool gateway.

Exposes the shop as a set of named, schema-described tools. Exactly one
tool set is active at a time, chosen by the checkout protocol:

| Tool                | Installed  | Read-only |
|---------------------|------------|-----------|
| searchProducts      | always     | yes       |
| addToCart           | always     | no        |
| createPaymentIntent | UCP only   | no        |
| checkout            | always     | no        |
| getOrderStatus      | UCP only   | yes       |

``activate`` builds the new set completely and swaps it in with one
assignment, so a caller sees either the old set or the new one, never a
mix and never an empty set.

Mutating tools are looked up again and run while holding the shop's
writer lock, so a call queued behind a pending checkout cannot run a tool
that a protocol switch uninstalled in the meantime. Their handlers call
the registries directly since the lock is already held.
"""

import threading
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Mapping

import pydantic
import structlog

from toolcart.application.confirmation import CallerContext
from toolcart.domain.exceptions import InputValidationError, ToolNotFoundError
from toolcart.domain.state_machines import CheckoutProtocol
from toolcart.infrastructure.activity import to_wire
from toolcart.tools.schemas import (
    AddToCartInput,
    CreatePaymentIntentInput,
    GetOrderStatusInput,
    SearchProductsInput,
    StandardCheckoutInput,
    ToolInput,
    UcpCheckoutInput,
)

if TYPE_CHECKING:
    from toolcart.shop import Shop

logger = structlog.get_logger()

TOOL_NAMES = (
    "searchProducts",
    "addToCart",
    "createPaymentIntent",
    "checkout",
    "getOrderStatus",
)

ToolHandler = Callable[[Any, CallerContext], Awaitable[Any]]


class SideEffect(str, Enum):
    """Whether a tool may change shop state."""

    READ_ONLY = "read_only"
    MUTATING = "mutating"


@dataclass(frozen=True)
class ToolDescriptor:
    """A callable operation and its calling contract."""

    name: str
    description: str
    input_model: type[ToolInput]
    side_effect: SideEffect
    handler: ToolHandler

    @property
    def read_only(self) -> bool:
        return self.side_effect is SideEffect.READ_ONLY

    @property
    def input_schema(self) -> dict[str, Any]:
        schema = self.input_model.model_json_schema()
        schema.setdefault("properties", {})
        schema.setdefault("required", [])
        return schema

    def parse(self, arguments: Mapping[str, Any]) -> ToolInput:
        """Validate raw input against the tool's schema.

        Raises:
            InputValidationError: If the input does not match.
        """
        try:
            return self.input_model.model_validate(dict(arguments))
        except pydantic.ValidationError as exc:
            errors = [
                {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]}
                for err in exc.errors()
            ]
            raise InputValidationError(self.name, errors) from exc

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
            "sideEffect": self.side_effect.value,
            "annotations": {"readOnlyHint": self.read_only},
        }


class ToolGateway:
    """Installs the protocol's tool set and dispatches calls to the shop."""

    def __init__(self, shop: "Shop") -> None:
        self.shop = shop
        self._active: Mapping[str, ToolDescriptor] = MappingProxyType({})
        self._protocol: CheckoutProtocol | None = None
        self._swap_lock = threading.Lock()

    @property
    def protocol(self) -> CheckoutProtocol | None:
        return self._protocol

    # =========================================================================
    # Tool sets
    # =========================================================================

    def build_tool_set(self, protocol: CheckoutProtocol) -> dict[str, ToolDescriptor]:
        """Build, without installing, the tools for a protocol."""
        shop = self.shop

        async def search_products(params: SearchProductsInput, context: CallerContext) -> Any:
            category = params.category.value if params.category else ""
            return shop.search(params.q, category)

        async def add_to_cart(params: AddToCartInput, context: CallerContext) -> Any:
            return shop.cart.add(params.product_id, params.quantity)

        tools = [
            ToolDescriptor(
                name="searchProducts",
                description=(
                    "Search products by text and optional category. "
                    "Returns matching products with ids and prices."
                ),
                input_model=SearchProductsInput,
                side_effect=SideEffect.READ_ONLY,
                handler=search_products,
            ),
            ToolDescriptor(
                name="addToCart",
                description=(
                    "Add a product to the cart by productId and quantity. "
                    "Returns the updated cart."
                ),
                input_model=AddToCartInput,
                side_effect=SideEffect.MUTATING,
                handler=add_to_cart,
            ),
        ]

        if protocol is CheckoutProtocol.UCP:

            async def create_payment_intent(
                params: CreatePaymentIntentInput, context: CallerContext
            ) -> Any:
                return shop.payment_intents.create(params.amount_minor)

            async def checkout_ucp(params: UcpCheckoutInput, context: CallerContext) -> Any:
                return await shop.checkout_orchestrator.checkout_ucp(
                    params.payment_intent_id, context
                )

            async def get_order_status(params: GetOrderStatusInput, context: CallerContext) -> Any:
                return shop.get_order_status(params.order_id)

            tools += [
                ToolDescriptor(
                    name="createPaymentIntent",
                    description=(
                        "Create a payment intent for current cart total (minor units). "
                        "Returns PaymentIntent."
                    ),
                    input_model=CreatePaymentIntentInput,
                    side_effect=SideEffect.MUTATING,
                    handler=create_payment_intent,
                ),
                ToolDescriptor(
                    name="checkout",
                    description="Checkout using a payment intent. Requires user confirmation.",
                    input_model=UcpCheckoutInput,
                    side_effect=SideEffect.MUTATING,
                    handler=checkout_ucp,
                ),
                ToolDescriptor(
                    name="getOrderStatus",
                    description="Get order details by orderId.",
                    input_model=GetOrderStatusInput,
                    side_effect=SideEffect.READ_ONLY,
                    handler=get_order_status,
                ),
            ]
        else:

            async def checkout_standard(
                params: StandardCheckoutInput, context: CallerContext
            ) -> Any:
                return await shop.checkout_orchestrator.checkout_standard(context)

            tools.append(
                ToolDescriptor(
                    name="checkout",
                    description="Checkout the current cart. Requires user confirmation.",
                    input_model=StandardCheckoutInput,
                    side_effect=SideEffect.MUTATING,
                    handler=checkout_standard,
                )
            )

        return {tool.name: tool for tool in tools}

    def activate(self, protocol: CheckoutProtocol) -> list[str]:
        """Uninstall the current tool set and install the protocol's set.

        Returns:
            Names of the installed tools, in registration order.
        """
        tool_set = MappingProxyType(self.build_tool_set(protocol))
        with self._swap_lock:
            previous = self._active
            self._active = tool_set
            self._protocol = protocol

        logger.info(
            "Tool set activated",
            protocol=protocol.value,
            uninstalled=list(previous),
            installed=list(tool_set),
        )
        return list(tool_set)

    def list_tools(self) -> list[ToolDescriptor]:
        """Active tools, in registration order."""
        return list(self._active.values())

    def describe(self) -> list[dict[str, Any]]:
        """Wire contract of the active tools."""
        return [tool.to_dict() for tool in self.list_tools()]

    def get(self, name: str) -> ToolDescriptor:
        """Get an active tool by name.

        Raises:
            ToolNotFoundError: If the tool is not installed.
        """
        active = self._active
        tool = active.get(name)
        if tool is None:
            raise ToolNotFoundError(name, list(active))
        return tool

    # =========================================================================
    # Invocation
    # =========================================================================

    async def invoke(
        self,
        name: str,
        arguments: Mapping[str, Any] | None = None,
        context: CallerContext | None = None,
    ) -> Any:
        """Validate input, run the tool and record the outcome.

        Errors are recorded as ``tool:<name>`` and re-raised unchanged;
        nothing is retried.

        Returns:
            The tool result in its wire shape.
        """
        raw = dict(arguments or {})
        context = context or CallerContext()

        async def run() -> Any:
            tool = self.get(name)
            params = tool.parse(raw)
            if tool.read_only:
                return await tool.handler(params, context)

            async with self.shop.writer_lock:
                # A protocol switch may have run while this call waited.
                tool = self.get(name)
                params = tool.parse(raw)
                return await tool.handler(params, context)

        result = await self.shop.observe(f"{context.source}:{name}", raw, run)
        return to_wire(result)
