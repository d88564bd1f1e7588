"""Pydantic request/response schemas for the commerce API.

These are external contracts (anti-corruption layer), kept separate from
internal Protean commands and aggregates.
"""

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    product_id: str
    quantity: int = Field(ge=1, default=1)


class UpdateCartItemRequest(BaseModel):
    quantity: int = Field(ge=1)


class MergeGuestCartRequest(BaseModel):
    session_id: str


class ProductSummary(BaseModel):
    id: str
    name: str
    price: float
    sku: str


class CartItemResponse(BaseModel):
    id: str
    product_id: str
    product: ProductSummary | None = None
    quantity: int
    unit_price: float
    line_subtotal: float


class CartResponse(BaseModel):
    id: str
    items: list[CartItemResponse]
    total_items: int
    total_amount: float


class MergeSkipResponse(BaseModel):
    product_id: str
    quantity: int
    reason: str


class MergeResponse(BaseModel):
    cart: CartResponse
    merged: list[str]
    skipped: list[MergeSkipResponse]


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class OrderLineRequest(BaseModel):
    product_id: str
    quantity: int = Field(ge=1)


class CreateOrderRequest(BaseModel):
    items: list[OrderLineRequest] = Field(min_length=1)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "items": [
                        {"product_id": "prod-001", "quantity": 2},
                        {"product_id": "prod-002", "quantity": 1},
                    ]
                }
            ]
        }
    }


class UpdateOrderStatusRequest(BaseModel):
    status: str


class ExpireStaleOrdersRequest(BaseModel):
    older_than_minutes: int | None = Field(default=None, ge=0)


class OrderItemResponse(BaseModel):
    id: str
    product_id: str
    sku: str | None = None
    name: str | None = None
    quantity: int
    unit_price: float


class OrderResponse(BaseModel):
    id: str
    account_id: str
    status: str
    total_amount: float
    items: list[OrderItemResponse]
    cancellation_reason: str | None = None

    @classmethod
    def from_order(cls, order) -> "OrderResponse":
        return cls(
            id=str(order.id),
            account_id=str(order.account_id),
            status=order.status,
            total_amount=order.total_amount,
            items=[
                OrderItemResponse(
                    id=str(item.id),
                    product_id=str(item.product_id),
                    sku=item.sku,
                    name=item.name,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                )
                for item in order.items
            ],
            cancellation_reason=order.cancellation_reason,
        )


class ExpireStaleOrdersResponse(BaseModel):
    expired_count: int
