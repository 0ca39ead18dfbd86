"""API request and response schemas.

Request bodies are deliberately loose about values: a malformed quantity
or amount reaches the shop and fails there with the same ValidationError a
tool caller would get.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from toolcart.domain.state_machines import CheckoutProtocol


class RequestSchema(BaseModel):
    """Base for request bodies: accepts camelCase aliases and field names."""

    model_config = ConfigDict(populate_by_name=True)


# ============================================================================
# Requests
# ============================================================================


class AddToCartRequest(RequestSchema):
    """Request to add a product to the cart."""

    product_id: str = Field(default="", alias="productId")
    quantity: float = Field(default=1)


class CreatePaymentIntentRequest(RequestSchema):
    """Request to create a payment intent."""

    amount_minor: float | None = Field(default=None, alias="amountMinor")


class CheckoutRequest(RequestSchema):
    """Checkout with the answer the operator gave in the confirm dialog."""

    confirmed: bool = Field(..., description="Operator approved the checkout")
    payment_intent_id: str | None = Field(default=None, alias="paymentIntentId")


class ProtocolRequest(RequestSchema):
    """Request to switch checkout protocol."""

    protocol: CheckoutProtocol


class ToolCallRequest(RequestSchema):
    """Invoke an active tool by name."""

    arguments: dict[str, Any] = Field(default_factory=dict)
    confirmed: bool | None = Field(
        default=None,
        description="Answer for a checkout confirmation; omitted uses the server default",
    )


class DemoCheckoutRequest(RequestSchema):
    """Demo checkout with the operator's confirmation answer."""

    confirmed: bool


# ============================================================================
# Responses
# ============================================================================


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str
    service: str
    version: str


class ModeResponse(BaseModel):
    """Active protocol and its installed tools."""

    protocol: CheckoutProtocol
    tools: list[str]


class ErrorResponse(BaseModel):
    """Error response schema."""

    error_code: str
    message: str
    details: Any = None
    request_id: str | None = None
