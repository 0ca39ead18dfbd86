"""Domain layer - entities, value objects, state machines, exceptions.

Example usage:
    from toolcart.domain import Money, PaymentIntent, PaymentIntentStatus

    intent = PaymentIntent(id="pi_1", amount=Money(1798), created_at=now)
    confirmed = intent.confirm()
    assert confirmed.status is PaymentIntentStatus.SUCCEEDED
"""

from toolcart.domain.entities import (
    CANCELLED_MESSAGE,
    COMPLETED_MESSAGE,
    CartLine,
    CartSnapshot,
    CheckoutResult,
    Order,
    OrderItem,
    OrderTotals,
    PaymentIntent,
    StandardCheckoutResult,
    UcpCheckoutResult,
)
from toolcart.domain.exceptions import (
    BusinessRuleViolation,
    CartEmptyError,
    CurrencyMismatchError,
    DomainError,
    InputValidationError,
    InvalidAmountError,
    InvalidQuantityError,
    InvalidStateTransitionError,
    MissingFieldError,
    NegativeMoneyError,
    NotFoundError,
    OrderAlreadyExistsError,
    OrderNotFoundError,
    PaymentIntentNotFoundError,
    ProductNotFoundError,
    ToolNotFoundError,
    UnsupportedFieldError,
    ValidationError,
)
from toolcart.domain.state_machines import CheckoutProtocol, OrderStatus, PaymentIntentStatus
from toolcart.domain.value_objects import (
    DEFAULT_CURRENCY,
    IdGenerator,
    Money,
    RandomIds,
    SequentialIds,
    format_money,
    new_order_id,
    new_payment_intent_id,
    new_receipt_id,
)

__all__ = [
    # Entities
    "CartLine",
    "CartSnapshot",
    "CheckoutResult",
    "Order",
    "OrderItem",
    "OrderTotals",
    "PaymentIntent",
    "StandardCheckoutResult",
    "UcpCheckoutResult",
    "CANCELLED_MESSAGE",
    "COMPLETED_MESSAGE",
    # Value objects
    "DEFAULT_CURRENCY",
    "IdGenerator",
    "Money",
    "RandomIds",
    "SequentialIds",
    "format_money",
    "new_order_id",
    "new_payment_intent_id",
    "new_receipt_id",
    # State machines
    "CheckoutProtocol",
    "OrderStatus",
    "PaymentIntentStatus",
    # Exceptions
    "BusinessRuleViolation",
    "CartEmptyError",
    "CurrencyMismatchError",
    "DomainError",
    "InputValidationError",
    "InvalidAmountError",
    "InvalidQuantityError",
    "InvalidStateTransitionError",
    "MissingFieldError",
    "NegativeMoneyError",
    "NotFoundError",
    "OrderAlreadyExistsError",
    "OrderNotFoundError",
    "PaymentIntentNotFoundError",
    "ProductNotFoundError",
    "ToolNotFoundError",
    "UnsupportedFieldError",
    "ValidationError",
]
