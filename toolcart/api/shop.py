"""Shop API endpoints.

The human-operator surface. Every endpoint goes through the same shop
operations the tools use and records a ``ui:<operation>`` activity event:
- GET /products - search the catalog
- GET /cart - current cart
- POST /cart/items - add a product
- DELETE /cart/items/{product_id} - remove a product's line
- POST /payment-intents - create a payment intent
- POST /checkout - check out with the active protocol
- GET /orders/{order_id} - look up a settled order
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query, Request

from toolcart.api.schemas import AddToCartRequest, CheckoutRequest, CreatePaymentIntentRequest
from toolcart.application.confirmation import CallerContext, StaticConfirmation
from toolcart.infrastructure.activity import to_wire
from toolcart.shop import Shop

router = APIRouter(tags=["Shop"])


def get_shop(request: Request) -> Shop:
    """The shop session attached to the application."""
    return request.app.state.shop


ShopDep = Annotated[Shop, Depends(get_shop)]


def _number(value: float | None) -> int | float | None:
    """Hand whole JSON numbers to the shop as ints."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


@router.get("/products")
async def search_products(
    shop: ShopDep,
    q: Annotated[str, Query(description="Search text")] = "",
    category: Annotated[str, Query(description="Category filter")] = "",
) -> dict[str, Any]:
    """Search products by text and category."""
    result = await shop.observe(
        "ui:search",
        {"q": q, "category": category},
        lambda: shop.search(q, category),
    )
    return to_wire(result)


@router.get("/cart")
async def get_cart(shop: ShopDep) -> dict[str, Any]:
    """Current cart with computed lines and totals."""
    return to_wire(shop.get_cart())


@router.post("/cart/items")
async def add_to_cart(body: AddToCartRequest, shop: ShopDep) -> dict[str, Any]:
    """Add a product to the cart."""
    quantity = _number(body.quantity)
    result = await shop.observe(
        "ui:addToCart",
        {"productId": body.product_id, "quantity": quantity},
        lambda: shop.add_to_cart(body.product_id, quantity),
    )
    return to_wire(result)


@router.delete("/cart/items/{product_id}")
async def remove_from_cart(product_id: str, shop: ShopDep) -> dict[str, Any]:
    """Remove a product's whole line from the cart."""
    result = await shop.observe(
        "ui:removeFromCart",
        {"productId": product_id},
        lambda: shop.remove_from_cart(product_id),
    )
    return to_wire(result)


@router.post("/payment-intents")
async def create_payment_intent(
    shop: ShopDep,
    body: CreatePaymentIntentRequest | None = None,
) -> dict[str, Any]:
    """Create a payment intent; the amount defaults to the cart total."""
    amount_minor = _number(body.amount_minor) if body else None
    result = await shop.observe(
        "ui:createPaymentIntent",
        {"amountMinor": amount_minor},
        lambda: shop.create_payment_intent(amount_minor),
    )
    return to_wire(result)


@router.post("/checkout")
async def checkout(body: CheckoutRequest, shop: ShopDep) -> dict[str, Any]:
    """Check out with the active protocol.

    The body carries the operator's answer to the confirm dialog; a
    declined checkout returns ``ok: false`` with status 200.
    ``paymentIntentId`` is only accepted by the UCP protocol; sending it
    while Standard is active is a 422.
    """
    context = CallerContext(confirmation=StaticConfirmation(body.confirmed), source="ui")
    result = await shop.observe(
        "ui:checkout",
        {"protocol": shop.protocol.value, "paymentIntentId": body.payment_intent_id},
        lambda: shop.checkout(body.payment_intent_id, context),
    )
    return to_wire(result)


@router.get("/orders/{order_id}")
async def get_order_status(order_id: str, shop: ShopDep) -> dict[str, Any]:
    """Look up an order settled by the UCP protocol."""
    result = await shop.observe(
        "ui:getOrderStatus",
        {"orderId": order_id},
        lambda: shop.get_order_status(order_id),
    )
    return to_wire(result)
