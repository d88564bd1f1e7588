"""Error taxonomy for the commerce engine.

Validation-type failures subclass Protean's ``ValidationError`` and lookup
failures subclass ``ObjectNotFoundError``, so callers can catch either the
specific kind or the broad Protean category.

    InvalidInput          caller's fault, never retried
    NotFound              product, cart item, or order is missing
    InsufficientStock     check-phase shortage; the caller should shrink the request
    ConcurrencyConflict   a reservation lost a race after passing the check phase,
                          or every version-checked stock write was overtaken;
                          the caller may retry the whole checkout
    PersistenceFailure    compensation itself failed; storage is in doubt
"""

from protean.exceptions import InvalidOperationError, ObjectNotFoundError, ValidationError


# ---------------------------------------------------------------------------
# Invalid input
# ---------------------------------------------------------------------------
class InvalidInput(ValidationError):
    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__({field: [message]})


class InvalidQuantity(InvalidInput):
    def __init__(self, quantity):
        self.quantity = quantity
        super().__init__("quantity", f"Quantity must be a positive integer, got {quantity!r}")


class InvalidOrder(InvalidInput):
    def __init__(self, message: str = "An order needs at least one item"):
        super().__init__("items", message)


class InvalidOwner(InvalidInput):
    def __init__(self, message: str = "Exactly one of account or session identity is required"):
        super().__init__("owner", message)


class InvalidStatusTransition(InvalidInput):
    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__("status", f"Cannot transition from {current} to {target}")


# ---------------------------------------------------------------------------
# Not found
# ---------------------------------------------------------------------------
class NotFound(ObjectNotFoundError):
    kind = "Object"

    def __init__(self, identifier):
        self.identifier = str(identifier)
        self.messages = {"_entity": [f"{self.kind} `{identifier}` not found"]}
        super().__init__(self.messages)


class ProductNotFound(NotFound):
    kind = "Product"


class ItemNotFound(NotFound):
    kind = "Cart item"


class OrderNotFound(NotFound):
    kind = "Order"


# ---------------------------------------------------------------------------
# Stock
# ---------------------------------------------------------------------------
class InsufficientStock(ValidationError):
    def __init__(self, product_id, available: int, requested: int):
        self.product_id = str(product_id)
        self.available = available
        self.requested = requested
        super().__init__(
            {"quantity": [f"Insufficient stock for product {product_id}: {available} available, {requested} requested"]}
        )


class ConcurrencyConflict(InvalidOperationError):
    def __init__(self, product_id, requested: int):
        self.product_id = str(product_id)
        self.requested = requested
        self.messages = {"_entity": [f"Stock for product {product_id} changed concurrently; retry the request"]}
        super().__init__(self.messages)


# ---------------------------------------------------------------------------
# Storage
# ---------------------------------------------------------------------------
class PersistenceFailure(Exception):
    """Raised when undoing a partially committed operation fails."""
