"""Domain entities and read models.

All values here are frozen: a payment intent changes state by producing a
new value, and an order is never modified after it is created. Each type
provides ``to_dict`` returning the wire shape handed to tool callers.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any

from toolcart.domain.exceptions import InvalidStateTransitionError
from toolcart.domain.state_machines import OrderStatus, PaymentIntentStatus
from toolcart.domain.value_objects import DEFAULT_CURRENCY, Money


# ============================================================================
# Cart Read Models
# ============================================================================


@dataclass(frozen=True)
class CartLine:
    """A cart line computed from the ledger at read time."""

    product_id: str
    name: str
    category: str
    quantity: int
    unit_price: Money
    line_total: Money

    def to_dict(self) -> dict[str, Any]:
        return {
            "productId": self.product_id,
            "name": self.name,
            "quantity": self.quantity,
            "unitPrice": self.unit_price.format(),
            "unitPriceMinor": self.unit_price.amount_minor,
            "lineTotal": self.line_total.format(),
            "lineTotalMinor": self.line_total.amount_minor,
        }


@dataclass(frozen=True)
class CartSnapshot:
    """Consistent view of the cart at a single point in time.

    Attributes:
        items: Lines whose product resolves and whose quantity is positive.
        item_count: Sum of quantities over ``items``.
        total: Sum of line totals over ``items``.
    """

    items: tuple[CartLine, ...]
    item_count: int
    total: Money

    @property
    def is_empty(self) -> bool:
        return self.item_count == 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "itemCount": self.item_count,
            "total": self.total.format(),
            "totalMinor": self.total.amount_minor,
            "items": [line.to_dict() for line in self.items],
        }


# ============================================================================
# Payment Intent
# ============================================================================


@dataclass(frozen=True)
class PaymentIntent:
    """An authorized-but-unconfirmed charge.

    The amount is fixed at creation; ``confirm`` returns a new value and
    leaves the original untouched.
    """

    id: str
    amount: Money
    created_at: datetime
    status: PaymentIntentStatus = PaymentIntentStatus.REQUIRES_CONFIRMATION

    def confirm(self) -> "PaymentIntent":
        """Return the succeeded version of this intent.

        Raises:
            InvalidStateTransitionError: If the intent already succeeded.
        """
        target = PaymentIntentStatus.SUCCEEDED
        if not self.status.can_transition_to(target):
            raise InvalidStateTransitionError(
                entity_type="PaymentIntent",
                entity_id=self.id,
                current_state=self.status.value,
                target_state=target.value,
                allowed_transitions=[s.value for s in self.status.allowed_transitions()],
            )
        return replace(self, status=target)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "amount": self.amount.to_dict(),
            "status": self.status.value,
            "createdAt": self.created_at.isoformat(),
        }


# ============================================================================
# Order
# ============================================================================


@dataclass(frozen=True)
class OrderItem:
    """Line item frozen into an order."""

    product_id: str
    name: str
    quantity: int
    unit_price: Money
    line_total: Money
    category: str

    @classmethod
    def from_cart_line(cls, line: CartLine) -> "OrderItem":
        return cls(
            product_id=line.product_id,
            name=line.name,
            quantity=line.quantity,
            unit_price=line.unit_price,
            line_total=line.line_total,
            category=line.category,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "productId": self.product_id,
            "name": self.name,
            "quantity": self.quantity,
            "unitPrice": self.unit_price.to_dict(),
            "lineTotal": self.line_total.to_dict(),
            "category": self.category,
        }


@dataclass(frozen=True)
class OrderTotals:
    """Order totals. Tax and shipping are always zero."""

    subtotal: Money
    tax: Money
    shipping: Money
    total: Money

    def to_dict(self) -> dict[str, Any]:
        return {
            "subtotal": self.subtotal.to_dict(),
            "tax": self.tax.to_dict(),
            "shipping": self.shipping.to_dict(),
            "total": self.total.to_dict(),
        }


@dataclass(frozen=True)
class Order:
    """A settled purchase created by the UCP checkout protocol."""

    id: str
    created_at: datetime
    payment_intent_id: str
    items: tuple[OrderItem, ...]
    totals: OrderTotals
    currency: str = DEFAULT_CURRENCY
    status: OrderStatus = OrderStatus.CONFIRMED

    @classmethod
    def settle(
        cls,
        order_id: str,
        cart: CartSnapshot,
        payment_intent: PaymentIntent,
        created_at: datetime,
    ) -> "Order":
        """Build an order from a cart snapshot and a confirmed intent.

        The charged amount is the intent's amount, not a recomputed cart
        total.
        """
        amount = payment_intent.amount
        zero = Money.zero(amount.currency)
        return cls(
            id=order_id,
            created_at=created_at,
            payment_intent_id=payment_intent.id,
            items=tuple(OrderItem.from_cart_line(line) for line in cart.items),
            totals=OrderTotals(subtotal=amount, tax=zero, shipping=zero, total=amount),
            currency=amount.currency,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "status": self.status.value,
            "createdAt": self.created_at.isoformat(),
            "currency": self.currency,
            "paymentIntentId": self.payment_intent_id,
            "items": [item.to_dict() for item in self.items],
            "totals": self.totals.to_dict(),
        }


# ============================================================================
# Checkout Results
# ============================================================================

CANCELLED_MESSAGE = "User cancelled checkout"
COMPLETED_MESSAGE = "Checkout complete"


@dataclass(frozen=True)
class StandardCheckoutResult:
    """Outcome of the Standard protocol.

    The receipt is transient: no order is persisted, so ``order_id`` cannot
    be looked up afterwards.
    """

    ok: bool
    message: str
    order_id: str | None = None
    charged: str | None = None
    items: tuple[CartLine, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        if not self.ok:
            return {"ok": False, "message": self.message}
        return {
            "ok": True,
            "orderId": self.order_id,
            "message": self.message,
            "charged": self.charged,
            "items": [line.to_dict() for line in self.items],
        }


@dataclass(frozen=True)
class UcpCheckoutResult:
    """Outcome of the UCP protocol."""

    ok: bool
    payment_intent: PaymentIntent
    order: Order | None = None
    message: str | None = None

    def to_dict(self) -> dict[str, Any]:
        if not self.ok:
            return {
                "ok": False,
                "message": self.message,
                "paymentIntent": self.payment_intent.to_dict(),
            }
        return {
            "ok": True,
            "order": self.order.to_dict() if self.order else None,
            "paymentIntent": self.payment_intent.to_dict(),
        }


CheckoutResult = StandardCheckoutResult | UcpCheckoutResult
