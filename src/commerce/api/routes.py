"""FastAPI endpoints for carts and orders.

The caller identifies itself with an ``X-Account-Id`` or ``X-Session-Id``
header. Cart mutations go through Protean commands; order placement,
status changes and expiry call the engine directly so that stock writes
happen outside a command unit of work.
"""

from fastapi import APIRouter, Header
from protean.utils.globals import current_domain

from commerce import engine
from commerce.api.schemas import (
    AddToCartRequest,
    CartResponse,
    CreateOrderRequest,
    ExpireStaleOrdersRequest,
    ExpireStaleOrdersResponse,
    MergeGuestCartRequest,
    MergeResponse,
    OrderResponse,
    UpdateCartItemRequest,
    UpdateOrderStatusRequest,
)
from commerce.cart.items import AddToCart, ClearCart, RemoveFromCart, UpdateCartItem
from commerce.cart.merging import MergeGuestCart
from commerce.cart.owner import owner_key
from commerce.errors import InvalidOwner, OrderNotFound

cart_router = APIRouter(prefix="/cart", tags=["cart"])
order_router = APIRouter(prefix="/orders", tags=["orders"])


def _require_account(account_id: str | None) -> str:
    if not account_id:
        raise InvalidOwner("An account identity is required")
    return account_id


# --- Cart endpoints ---


@cart_router.get("", response_model=CartResponse)
async def get_cart(
    x_account_id: str | None = Header(None, alias="X-Account-Id"),
    x_session_id: str | None = Header(None, alias="X-Session-Id"),
) -> CartResponse:
    store = engine.cart_store()
    cart = store.resolve_cart(owner_key(account_id=x_account_id, session_id=x_session_id))
    return CartResponse(**store.summarize(cart))


@cart_router.post("/items", status_code=201, response_model=CartResponse)
async def add_to_cart(
    body: AddToCartRequest,
    x_account_id: str | None = Header(None, alias="X-Account-Id"),
    x_session_id: str | None = Header(None, alias="X-Session-Id"),
) -> CartResponse:
    command = AddToCart(
        account_id=x_account_id,
        session_id=x_session_id,
        product_id=body.product_id,
        quantity=body.quantity,
    )
    result = current_domain.process(command, asynchronous=False)
    return CartResponse(**result)


@cart_router.patch("/items/{item_id}", response_model=CartResponse)
async def update_cart_item(
    item_id: str,
    body: UpdateCartItemRequest,
    x_account_id: str | None = Header(None, alias="X-Account-Id"),
    x_session_id: str | None = Header(None, alias="X-Session-Id"),
) -> CartResponse:
    command = UpdateCartItem(
        account_id=x_account_id,
        session_id=x_session_id,
        item_id=item_id,
        quantity=body.quantity,
    )
    result = current_domain.process(command, asynchronous=False)
    return CartResponse(**result)


@cart_router.delete("/items/{item_id}", response_model=CartResponse)
async def remove_from_cart(
    item_id: str,
    x_account_id: str | None = Header(None, alias="X-Account-Id"),
    x_session_id: str | None = Header(None, alias="X-Session-Id"),
) -> CartResponse:
    command = RemoveFromCart(account_id=x_account_id, session_id=x_session_id, item_id=item_id)
    result = current_domain.process(command, asynchronous=False)
    return CartResponse(**result)


@cart_router.delete("", response_model=CartResponse)
async def clear_cart(
    x_account_id: str | None = Header(None, alias="X-Account-Id"),
    x_session_id: str | None = Header(None, alias="X-Session-Id"),
) -> CartResponse:
    command = ClearCart(account_id=x_account_id, session_id=x_session_id)
    result = current_domain.process(command, asynchronous=False)
    return CartResponse(**result)


@cart_router.post("/merge", response_model=MergeResponse)
async def merge_guest_cart(
    body: MergeGuestCartRequest,
    x_account_id: str | None = Header(None, alias="X-Account-Id"),
) -> MergeResponse:
    command = MergeGuestCart(session_id=body.session_id, account_id=_require_account(x_account_id))
    result = current_domain.process(command, asynchronous=False)
    return MergeResponse(**result)


@cart_router.post("/checkout", status_code=201, response_model=OrderResponse)
async def checkout(
    x_account_id: str | None = Header(None, alias="X-Account-Id"),
) -> OrderResponse:
    order = engine.checkout().checkout(_require_account(x_account_id))
    return OrderResponse.from_order(order)


# --- Order endpoints ---


@order_router.post("", status_code=201, response_model=OrderResponse)
async def create_order(
    body: CreateOrderRequest,
    x_account_id: str | None = Header(None, alias="X-Account-Id"),
) -> OrderResponse:
    order = engine.order_assembler().create_order(
        _require_account(x_account_id),
        [{"product_id": line.product_id, "quantity": line.quantity} for line in body.items],
    )
    return OrderResponse.from_order(order)


@order_router.get("", response_model=list[OrderResponse])
async def list_orders(
    x_account_id: str | None = Header(None, alias="X-Account-Id"),
) -> list[OrderResponse]:
    orders = engine.order_assembler().find_by_account(_require_account(x_account_id))
    return [OrderResponse.from_order(order) for order in orders]


@order_router.post("/expire-stale", response_model=ExpireStaleOrdersResponse)
async def expire_stale_orders(body: ExpireStaleOrdersRequest | None = None) -> ExpireStaleOrdersResponse:
    older_than = body.older_than_minutes if body else None
    expired = engine.pending_order_expiry().run(older_than_minutes=older_than)
    return ExpireStaleOrdersResponse(expired_count=expired)


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: str,
    x_account_id: str | None = Header(None, alias="X-Account-Id"),
) -> OrderResponse:
    order = engine.order_assembler().find_by_id(order_id)
    if str(order.account_id) != _require_account(x_account_id):
        # Another account's order is reported as missing.
        raise OrderNotFound(order_id)
    return OrderResponse.from_order(order)


@order_router.patch("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(order_id: str, body: UpdateOrderStatusRequest) -> OrderResponse:
    order = engine.order_assembler().update_status(order_id, body.status)
    return OrderResponse.from_order(order)
