"""Exception hierarchy for the storefront.

- StorefrontError (base, carries the HTTP status the API renders)
- ValidationError: malformed input
- BusinessRuleError: caller-correctable rule violations
- NotFoundError: missing or foreign resources
- AuthenticationError / AuthorizationError: credential and role failures
- PersistenceError: storage failures, cause chained but never exposed
"""


class StorefrontError(Exception):
    """Base class for every error the API knows how to render."""

    status_code = 500
    default_message = "Request failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(StorefrontError):
    status_code = 400
    default_message = "Invalid request"


# ---------------------------------------------------------------------------
# Business rules
# ---------------------------------------------------------------------------
class BusinessRuleError(StorefrontError):
    status_code = 400
    default_message = "Request violates a business rule"


class EmptyCartError(BusinessRuleError):
    default_message = "Cart is empty"


class ProductUnavailableError(BusinessRuleError):
    def __init__(self, product_name: str) -> None:
        super().__init__(f"Product {product_name} is no longer available")
        self.product_name = product_name


class InsufficientStockError(BusinessRuleError):
    def __init__(self, product_name: str) -> None:
        super().__init__(f"Insufficient stock for {product_name}")
        self.product_name = product_name


class InvalidAddressError(BusinessRuleError):
    def __init__(self, address_id: str) -> None:
        super().__init__("Shipping address not found")
        self.address_id = address_id


class InvalidStateTransitionError(BusinessRuleError):
    def __init__(self, current: str, target: str, message: str | None = None) -> None:
        super().__init__(message or f"Cannot transition order from {current} to {target}")
        self.current = current
        self.target = target


class PaymentVerificationError(BusinessRuleError):
    default_message = "Payment verification failed"


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------
class NotFoundError(StorefrontError):
    status_code = 404
    default_message = "Resource not found"


class OrderNotFoundError(NotFoundError):
    default_message = "Order not found"


class ProductNotFoundError(NotFoundError):
    default_message = "Product not found"


class CategoryNotFoundError(NotFoundError):
    default_message = "Category not found"


class CartItemNotFoundError(NotFoundError):
    default_message = "Cart item not found"


class WishlistItemNotFoundError(NotFoundError):
    default_message = "Wishlist item not found"


class AddressNotFoundError(NotFoundError):
    default_message = "Address not found"


class UserNotFoundError(NotFoundError):
    default_message = "User not found"


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------
class AuthenticationError(StorefrontError):
    status_code = 401
    default_message = "Not authorized"


class AuthorizationError(StorefrontError):
    status_code = 403
    default_message = "Not authorized as admin"


# ---------------------------------------------------------------------------
# Storage
# ---------------------------------------------------------------------------
class PersistenceError(StorefrontError):
    """A storage operation failed.

    The original exception is chained as ``__cause__`` for server-side logs;
    ``message`` stays generic because it is returned to callers.
    """

    status_code = 500
    default_message = "Could not complete the request, please retry later"
