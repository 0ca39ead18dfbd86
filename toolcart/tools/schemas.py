"""Tool input schemas.

Each tool validates its raw input against one of these models before the
call reaches the shop. Field aliases are the camelCase names callers send;
``model_json_schema()`` produces the published input schema.
"""

from pydantic import BaseModel, ConfigDict, Field, StrictInt

from toolcart.catalog.models import Category


class ToolInput(BaseModel):
    """Base for tool inputs: accepts aliases and field names alike."""

    model_config = ConfigDict(populate_by_name=True)


class SearchProductsInput(ToolInput):
    """Input schema for searchProducts tool."""

    q: str = Field(
        default="",
        description="Search text, matched against product name and description.",
    )
    category: Category | None = Field(
        default=None,
        description="Optional category filter.",
    )


class AddToCartInput(ToolInput):
    """Input schema for addToCart tool."""

    product_id: str = Field(
        ...,
        alias="productId",
        min_length=1,
        description="Product id from searchProducts, e.g. 'p1'.",
    )
    quantity: StrictInt = Field(
        default=1,
        gt=0,
        description="Number of units to add to any quantity already in the cart.",
    )


class CreatePaymentIntentInput(ToolInput):
    """Input schema for createPaymentIntent tool."""

    amount_minor: StrictInt | None = Field(
        default=None,
        alias="amountMinor",
        gt=0,
        description="Amount in minor units (pence). Defaults to the cart total.",
    )


class StandardCheckoutInput(ToolInput):
    """The Standard checkout takes no input."""


class UcpCheckoutInput(ToolInput):
    """Input schema for the UCP checkout tool."""

    payment_intent_id: str | None = Field(
        default=None,
        alias="paymentIntentId",
        description="Existing payment intent to settle. A new one is created when omitted.",
    )


class GetOrderStatusInput(ToolInput):
    """Input schema for getOrderStatus tool."""

    order_id: str = Field(
        ...,
        alias="orderId",
        min_length=1,
        description="Order id returned by checkout.",
    )
