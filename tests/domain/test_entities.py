"""Tests for domain entities."""

import dataclasses
from datetime import datetime, timezone

import pytest

from toolcart.domain import (
    CartLine,
    CartSnapshot,
    InvalidStateTransitionError,
    Money,
    Order,
    PaymentIntent,
    PaymentIntentStatus,
    StandardCheckoutResult,
    UcpCheckoutResult,
)

NOW = datetime(2026, 1, 15, 10, 0, tzinfo=timezone.utc)


def make_snapshot() -> CartSnapshot:
    line = CartLine(
        product_id="p1",
        name="Ceramic Mug",
        category="home",
        quantity=2,
        unit_price=Money(899),
        line_total=Money(1798),
    )
    return CartSnapshot(items=(line,), item_count=2, total=Money(1798))


class TestPaymentIntent:
    """Tests for PaymentIntent."""

    def test_new_intent_requires_confirmation(self) -> None:
        intent = PaymentIntent(id="pi_1", amount=Money(1798), created_at=NOW)
        assert intent.status is PaymentIntentStatus.REQUIRES_CONFIRMATION

    def test_confirm_returns_new_value(self) -> None:
        """Confirming keeps id, amount and createdAt and leaves the original."""
        intent = PaymentIntent(id="pi_1", amount=Money(1798), created_at=NOW)
        confirmed = intent.confirm()

        assert confirmed.status is PaymentIntentStatus.SUCCEEDED
        assert confirmed.id == intent.id
        assert confirmed.amount == intent.amount
        assert confirmed.created_at == intent.created_at
        assert intent.status is PaymentIntentStatus.REQUIRES_CONFIRMATION

    def test_confirm_twice_raises(self) -> None:
        """Succeeded is terminal."""
        confirmed = PaymentIntent(id="pi_1", amount=Money(1), created_at=NOW).confirm()
        with pytest.raises(InvalidStateTransitionError):
            confirmed.confirm()

    def test_amount_is_immutable(self) -> None:
        intent = PaymentIntent(id="pi_1", amount=Money(1798), created_at=NOW)
        with pytest.raises(dataclasses.FrozenInstanceError):
            intent.amount = Money(1)  # type: ignore[misc]

    def test_to_dict(self) -> None:
        intent = PaymentIntent(id="pi_1", amount=Money(1798), created_at=NOW)
        assert intent.to_dict() == {
            "id": "pi_1",
            "amount": {"currency": "GBP", "amountMinor": 1798},
            "status": "requires_confirmation",
            "createdAt": "2026-01-15T10:00:00+00:00",
        }


class TestOrder:
    """Tests for Order."""

    def test_settle_uses_intent_amount(self) -> None:
        """Subtotal and total are the intent amount; tax and shipping are zero."""
        intent = PaymentIntent(id="pi_1", amount=Money(1500), created_at=NOW).confirm()
        order = Order.settle("ord_1", make_snapshot(), intent, NOW)

        assert order.totals.subtotal.amount_minor == 1500
        assert order.totals.total.amount_minor == 1500
        assert order.totals.tax.is_zero()
        assert order.totals.shipping.is_zero()
        assert order.payment_intent_id == "pi_1"
        assert order.status.value == "confirmed"

    def test_settle_copies_cart_lines(self) -> None:
        intent = PaymentIntent(id="pi_1", amount=Money(1798), created_at=NOW)
        order = Order.settle("ord_1", make_snapshot(), intent, NOW)

        item = order.to_dict()["items"][0]
        assert item == {
            "productId": "p1",
            "name": "Ceramic Mug",
            "quantity": 2,
            "unitPrice": {"currency": "GBP", "amountMinor": 899},
            "lineTotal": {"currency": "GBP", "amountMinor": 1798},
            "category": "home",
        }

    def test_order_is_frozen(self) -> None:
        intent = PaymentIntent(id="pi_1", amount=Money(1798), created_at=NOW)
        order = Order.settle("ord_1", make_snapshot(), intent, NOW)
        with pytest.raises(dataclasses.FrozenInstanceError):
            order.id = "other"  # type: ignore[misc]
        assert isinstance(order.items, tuple)


class TestCheckoutResults:
    """Tests for checkout result wire shapes."""

    def test_standard_declined(self) -> None:
        result = StandardCheckoutResult(ok=False, message="User cancelled checkout")
        assert result.to_dict() == {"ok": False, "message": "User cancelled checkout"}

    def test_standard_completed(self) -> None:
        snapshot = make_snapshot()
        result = StandardCheckoutResult(
            ok=True,
            message="Checkout complete",
            order_id="ORD-000001",
            charged="£17.98",
            items=snapshot.items,
        )
        data = result.to_dict()
        assert data["orderId"] == "ORD-000001"
        assert data["charged"] == "£17.98"
        assert data["items"][0]["productId"] == "p1"

    def test_ucp_declined_includes_intent(self) -> None:
        intent = PaymentIntent(id="pi_1", amount=Money(1798), created_at=NOW)
        result = UcpCheckoutResult(ok=False, payment_intent=intent, message="User cancelled checkout")
        data = result.to_dict()
        assert data["ok"] is False
        assert data["paymentIntent"]["id"] == "pi_1"
