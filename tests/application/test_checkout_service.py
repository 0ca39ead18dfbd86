"""Tests for checkout orchestration and confirmation providers."""

import asyncio

import pytest

from toolcart.application import (
    CallbackConfirmation,
    CallerContext,
    ConsolePrompt,
    StaticConfirmation,
)
from toolcart.domain import (
    CartEmptyError,
    InvalidStateTransitionError,
    OrderNotFoundError,
    PaymentIntentNotFoundError,
    PaymentIntentStatus,
)
from toolcart.shop import Shop


def recording_context(answer: bool, prompts: list[str]) -> CallerContext:
    def confirm(prompt: str) -> bool:
        prompts.append(prompt)
        return answer

    return CallerContext(confirmation=CallbackConfirmation(confirm))


class TestStandardCheckout:
    """Tests for the Standard protocol."""

    @pytest.mark.asyncio
    async def test_empty_cart_raises(self, shop: Shop, approve: CallerContext) -> None:
        with pytest.raises(CartEmptyError):
            await shop.checkout_standard(approve)

    @pytest.mark.asyncio
    async def test_prompt_contains_total(self, shop: Shop) -> None:
        await shop.add_to_cart("p1", 2)
        prompts: list[str] = []
        await shop.checkout_standard(recording_context(False, prompts))
        assert prompts == ["Confirm checkout for £17.98?"]

    @pytest.mark.asyncio
    async def test_decline_leaves_cart_untouched(self, shop: Shop, decline: CallerContext) -> None:
        await shop.add_to_cart("p1", 2)
        await shop.add_to_cart("p5", 1)
        before = shop.get_cart()

        result = await shop.checkout_standard(decline)

        assert result.ok is False
        assert result.message == "User cancelled checkout"
        assert shop.get_cart() == before

    @pytest.mark.asyncio
    async def test_approve_clears_cart_and_returns_receipt(
        self, shop: Shop, approve: CallerContext
    ) -> None:
        await shop.add_to_cart("p1", 2)
        before = shop.get_cart()

        result = await shop.checkout_standard(approve)

        assert result.ok is True
        assert result.order_id == "ORD-000001"
        assert result.charged == "£17.98"
        assert result.items == before.items
        assert shop.get_cart().is_empty

    @pytest.mark.asyncio
    async def test_receipt_is_not_persisted(self, shop: Shop, approve: CallerContext) -> None:
        """Standard receipts cannot be looked up as orders."""
        await shop.add_to_cart("p1", 1)
        result = await shop.checkout_standard(approve)
        with pytest.raises(OrderNotFoundError):
            shop.get_order_status(result.order_id)
        assert len(shop.orders) == 0

    @pytest.mark.asyncio
    async def test_default_confirmation_used_without_caller_capability(self, shop: Shop) -> None:
        """The shop fixture's default declines."""
        await shop.add_to_cart("p1", 1)
        result = await shop.checkout_standard(CallerContext())
        assert result.ok is False


class TestUcpCheckout:
    """Tests for the UCP protocol."""

    @pytest.mark.asyncio
    async def test_empty_cart_raises(self, ucp_shop: Shop, approve: CallerContext) -> None:
        with pytest.raises(CartEmptyError):
            await ucp_shop.checkout_ucp(context=approve)
        assert len(ucp_shop.payment_intents) == 0

    @pytest.mark.asyncio
    async def test_unknown_intent_raises(self, ucp_shop: Shop, approve: CallerContext) -> None:
        await ucp_shop.add_to_cart("p1", 1)
        with pytest.raises(PaymentIntentNotFoundError):
            await ucp_shop.checkout_ucp("pi_missing", approve)
        assert ucp_shop.get_cart().item_count == 1

    @pytest.mark.asyncio
    async def test_supplied_intent_amount_is_reused(
        self, ucp_shop: Shop, approve: CallerContext
    ) -> None:
        """The charged amount is the intent's, even if it differs from the cart."""
        await ucp_shop.add_to_cart("p1", 2)
        intent = await ucp_shop.create_payment_intent(500)

        result = await ucp_shop.checkout_ucp(intent.id, approve)

        assert result.payment_intent.id == intent.id
        assert result.payment_intent.amount.amount_minor == 500
        assert result.order.totals.total.amount_minor == 500

    @pytest.mark.asyncio
    async def test_prompt_contains_intent_amount(self, ucp_shop: Shop) -> None:
        await ucp_shop.add_to_cart("p1", 2)
        intent = await ucp_shop.create_payment_intent(1234)
        prompts: list[str] = []
        await ucp_shop.checkout_ucp(intent.id, recording_context(False, prompts))
        assert prompts == ["Confirm checkout for £12.34?"]

    @pytest.mark.asyncio
    async def test_decline_keeps_cart_and_intent(
        self, ucp_shop: Shop, decline: CallerContext
    ) -> None:
        await ucp_shop.add_to_cart("p1", 2)
        intent = await ucp_shop.create_payment_intent()

        result = await ucp_shop.checkout_ucp(intent.id, decline)

        assert result.ok is False
        assert result.message == "User cancelled checkout"
        assert result.payment_intent == intent
        stored = ucp_shop.payment_intents.get(intent.id)
        assert stored.status is PaymentIntentStatus.REQUIRES_CONFIRMATION
        assert ucp_shop.get_cart().total.amount_minor == 1798
        assert len(ucp_shop.orders) == 0

    @pytest.mark.asyncio
    async def test_approve_settles_order(self, ucp_shop: Shop, approve: CallerContext) -> None:
        await ucp_shop.add_to_cart("p1", 2)

        result = await ucp_shop.checkout_ucp(context=approve)

        assert result.ok is True
        assert result.payment_intent.status is PaymentIntentStatus.SUCCEEDED
        assert result.order.totals.total == result.payment_intent.amount
        assert result.order.payment_intent_id == result.payment_intent.id
        assert ucp_shop.get_cart().is_empty
        assert ucp_shop.get_order_status(result.order.id) is result.order

    @pytest.mark.asyncio
    async def test_already_succeeded_intent_is_rejected(
        self, ucp_shop: Shop, approve: CallerContext
    ) -> None:
        await ucp_shop.add_to_cart("p1", 1)
        first = await ucp_shop.checkout_ucp(context=approve)
        await ucp_shop.add_to_cart("p2", 1)

        with pytest.raises(InvalidStateTransitionError):
            await ucp_shop.checkout_ucp(first.payment_intent.id, approve)

        assert ucp_shop.get_cart().item_count == 1
        assert len(ucp_shop.orders) == 1


class TestScenario:
    """End-to-end UCP scenario with product p1 priced 899."""

    @pytest.mark.asyncio
    async def test_p1_scenario(self, ucp_shop: Shop, approve: CallerContext) -> None:
        cart = await ucp_shop.add_to_cart("p1", 2)
        assert cart.total.amount_minor == 1798

        intent = await ucp_shop.create_payment_intent()
        assert intent.amount.amount_minor == 1798
        assert intent.status is PaymentIntentStatus.REQUIRES_CONFIRMATION

        result = await ucp_shop.checkout_ucp(intent.id, approve)

        assert result.payment_intent.status is PaymentIntentStatus.SUCCEEDED
        assert result.order.to_dict()["totals"]["total"]["amountMinor"] == 1798
        assert ucp_shop.get_cart().total.amount_minor == 0
        assert ucp_shop.get_order_status(result.order.id).to_dict() == result.order.to_dict()


class TestConcurrency:
    """Mutations wait while a checkout is awaiting confirmation."""

    @pytest.mark.asyncio
    async def test_cart_mutation_waits_for_pending_checkout(self, shop: Shop) -> None:
        await shop.add_to_cart("p1", 1)
        prompted = asyncio.Event()
        answer = asyncio.Event()

        async def confirm(prompt: str) -> bool:
            prompted.set()
            await answer.wait()
            return True

        checkout = asyncio.create_task(
            shop.checkout(context=CallerContext(confirmation=CallbackConfirmation(confirm)))
        )
        await prompted.wait()

        add = asyncio.create_task(shop.add_to_cart("p2", 1))
        await asyncio.sleep(0)
        assert not add.done()
        assert [line.product_id for line in shop.get_cart().items] == ["p1"]

        answer.set()
        result = await checkout
        snapshot = await add

        assert [line.product_id for line in result.items] == ["p1"]
        assert [line.product_id for line in snapshot.items] == ["p2"]


class TestConfirmationProviders:
    """Tests for confirmation providers."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("answer", "expected"),
        [("y", True), ("YES ", True), ("n", False), ("", False)],
    )
    async def test_console_prompt(self, answer: str, expected: bool) -> None:
        prompts: list[str] = []

        def fake_input(prompt: str) -> str:
            prompts.append(prompt)
            return answer

        provider = ConsolePrompt(input_func=fake_input)
        assert await provider.request_confirmation("Confirm checkout for £1.00?") is expected
        assert prompts == ["Confirm checkout for £1.00? [y/N] "]

    @pytest.mark.asyncio
    async def test_console_prompt_without_terminal_declines(self) -> None:
        def no_terminal(prompt: str) -> str:
            raise EOFError

        assert await ConsolePrompt(input_func=no_terminal).request_confirmation("?") is False

    @pytest.mark.asyncio
    async def test_static_confirmation(self) -> None:
        assert await StaticConfirmation(True).request_confirmation("?") is True
        assert await StaticConfirmation(False).request_confirmation("?") is False

    @pytest.mark.asyncio
    async def test_callback_confirmation_accepts_sync_and_async(self) -> None:
        async def later(prompt: str) -> bool:
            return True

        assert await CallbackConfirmation(lambda p: True).request_confirmation("?") is True
        assert await CallbackConfirmation(later).request_confirmation("?") is True
