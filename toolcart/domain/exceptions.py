"""Domain exceptions.

Every failure the operation layer can report falls into one of three
families, each terminal for the current call:

- ``ValidationError``: the input was missing or malformed (caller-fixable).
- ``NotFoundError``: a product, payment intent, order or tool id is unknown.
- ``BusinessRuleViolation``: the input was well-formed but a precondition
  failed (e.g. checking out an empty cart).

A declined checkout confirmation is not an exception; it is returned as a
normal ``ok=False`` result.
"""

from typing import Any


class DomainError(Exception):
    """Base class for all domain exceptions.

    Attributes:
        message: Human-readable error message.
        details: Additional context, safe to serialize.
    """

    error_code = "DOMAIN_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize domain error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Serialize the error for callers and the activity log."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }


# ============================================================================
# Validation Errors
# ============================================================================


class ValidationError(DomainError):
    """Raised when a required field is missing or malformed."""

    error_code = "VALIDATION_ERROR"


class MissingFieldError(ValidationError):
    """Raised when a required field is empty."""

    def __init__(self, field: str) -> None:
        super().__init__(f"{field} is required", details={"field": field})


class InvalidQuantityError(ValidationError):
    """Raised when a cart quantity is not a positive whole number."""

    def __init__(self, quantity: Any, reason: str = "quantity must be a positive number") -> None:
        super().__init__(
            f"Invalid quantity {quantity!r}: {reason}",
            details={"quantity": repr(quantity), "reason": reason},
        )


class InvalidAmountError(ValidationError):
    """Raised when a payment amount cannot be resolved to a positive value."""

    def __init__(self, amount: Any) -> None:
        super().__init__(
            "amountMinor must be > 0 (or cart must be non-empty)",
            details={"amount_minor": repr(amount)},
        )


class UnsupportedFieldError(ValidationError):
    """Raised when a field is supplied that the active protocol does not take."""

    def __init__(self, field: str, protocol: str) -> None:
        super().__init__(
            f"{field} is not accepted by the {protocol} checkout",
            details={"field": field, "protocol": protocol},
        )


class InputValidationError(ValidationError):
    """Raised when tool input does not match the tool's input schema."""

    def __init__(self, tool_name: str, errors: list[dict[str, Any]]) -> None:
        super().__init__(
            f"Invalid input for tool '{tool_name}'",
            details={"tool": tool_name, "errors": errors},
        )


class NegativeMoneyError(ValidationError):
    """Raised when attempting to create money with negative amount."""

    def __init__(self, amount: int) -> None:
        super().__init__(
            f"Money amount cannot be negative: {amount}",
            details={"amount": amount},
        )


class CurrencyMismatchError(ValidationError):
    """Raised when attempting to combine money with different currencies."""

    def __init__(self, currency1: str, currency2: str) -> None:
        super().__init__(
            f"Cannot combine money with different currencies: {currency1} and {currency2}",
            details={"currency1": currency1, "currency2": currency2},
        )


# ============================================================================
# Not Found Errors
# ============================================================================


class NotFoundError(DomainError):
    """Raised when an id does not resolve. The message carries the id."""

    error_code = "NOT_FOUND"


class ProductNotFoundError(NotFoundError):
    """Raised when a product id is not in the catalog."""

    error_code = "PRODUCT_NOT_FOUND"

    def __init__(self, product_id: str) -> None:
        super().__init__(
            f"Unknown productId: {product_id}",
            details={"product_id": product_id},
        )


class PaymentIntentNotFoundError(NotFoundError):
    """Raised when a payment intent id is not registered."""

    error_code = "PAYMENT_INTENT_NOT_FOUND"

    def __init__(self, payment_intent_id: str) -> None:
        super().__init__(
            f"Unknown paymentIntentId: {payment_intent_id}",
            details={"payment_intent_id": payment_intent_id},
        )


class OrderNotFoundError(NotFoundError):
    """Raised when an order id is not registered."""

    error_code = "ORDER_NOT_FOUND"

    def __init__(self, order_id: str) -> None:
        super().__init__(
            f"Unknown orderId: {order_id}",
            details={"order_id": order_id},
        )


class ToolNotFoundError(NotFoundError):
    """Raised when a tool is not part of the active tool set."""

    error_code = "TOOL_NOT_FOUND"

    def __init__(self, tool_name: str, active_tools: list[str]) -> None:
        super().__init__(
            f"Unknown tool: {tool_name}",
            details={"tool": tool_name, "active_tools": active_tools},
        )


# ============================================================================
# Business Rule Violations
# ============================================================================


class BusinessRuleViolation(DomainError):
    """Raised when well-formed input hits a failed precondition."""

    error_code = "BUSINESS_RULE_VIOLATION"


class CartEmptyError(BusinessRuleViolation):
    """Raised when trying to checkout an empty cart."""

    error_code = "CART_EMPTY"

    def __init__(self) -> None:
        super().__init__("Cart is empty")


class OrderAlreadyExistsError(BusinessRuleViolation):
    """Raised when an order id is written twice."""

    error_code = "ORDER_ALREADY_EXISTS"

    def __init__(self, order_id: str) -> None:
        super().__init__(
            f"Order {order_id} already exists",
            details={"order_id": order_id},
        )


class InvalidStateTransitionError(BusinessRuleViolation):
    """Raised when an invalid state transition is attempted."""

    error_code = "INVALID_STATE_TRANSITION"

    def __init__(
        self,
        entity_type: str,
        entity_id: str,
        current_state: str,
        target_state: str,
        allowed_transitions: list[str] | None = None,
    ) -> None:
        """Initialize invalid state transition error.

        Args:
            entity_type: Type of entity (e.g., "PaymentIntent").
            entity_id: ID of the entity.
            current_state: Current state of the entity.
            target_state: Attempted target state.
            allowed_transitions: List of allowed target states from current state.
        """
        allowed = allowed_transitions or []
        message = (
            f"Cannot transition {entity_type}({entity_id}) "
            f"from '{current_state}' to '{target_state}'. "
            f"Allowed transitions: {allowed}"
        )
        super().__init__(
            message,
            details={
                "entity_type": entity_type,
                "entity_id": entity_id,
                "current_state": current_state,
                "target_state": target_state,
                "allowed_transitions": allowed,
            },
        )
