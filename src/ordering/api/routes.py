"""FastAPI routes for the Ordering domain: cart, wishlist, orders and admin."""

from fastapi import APIRouter, Query

from identity.auth.dependencies import AdminIdentity, CurrentIdentity
from ordering.api.schemas import (
    AddToCartRequest,
    AddToWishlistRequest,
    CartItemResponse,
    CartResponse,
    CheckoutPreviewRequest,
    CheckoutPreviewResponse,
    CreateOrderRequest,
    OrderListResponse,
    OrderResponse,
    UpdateCartItemRequest,
    UpdateOrderStatusRequest,
    WishlistItemResponse,
)
from ordering.cart.management import CartService
from ordering.cart.wishlist import WishlistService
from ordering.checkout.preview import CheckoutPreviewService
from ordering.order.creation import CreateOrder, CreateOrderHandler
from ordering.order.lifecycle import AdvanceOrder, CancelOrder, OrderLifecycleHandler
from ordering.order.queries import DEFAULT_LIMIT, DEFAULT_PAGE, OrderQueries
from ordering.store import CheckoutStore, SqlAlchemyStore
from shared.database import get_database
from shared.responses import ApiResponse, Pagination


def _store() -> CheckoutStore:
    return SqlAlchemyStore(get_database())


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("/checkout", response_model=ApiResponse[CheckoutPreviewResponse])
def checkout_preview(
    identity: CurrentIdentity, body: CheckoutPreviewRequest | None = None
) -> ApiResponse[CheckoutPreviewResponse]:
    payment_method = body.payment_method if body else None
    preview = CheckoutPreviewService(_store()).preview(identity.id, payment_method)
    return ApiResponse(
        message="Checkout summary calculated",
        data=CheckoutPreviewResponse.model_validate(preview),
    )


@order_router.post("", status_code=201, response_model=ApiResponse[OrderResponse])
def create_order(body: CreateOrderRequest, identity: CurrentIdentity) -> ApiResponse[OrderResponse]:
    command = CreateOrder(
        user_id=identity.id,
        address_id=body.address_id,
        payment_method=body.payment_method,
        payment_intent_id=body.payment_intent_id,
        notes=body.notes,
    )
    order = CreateOrderHandler(_store()).create_order(command)
    return ApiResponse(message="Order placed successfully", data=OrderResponse.model_validate(order))


@order_router.get("", response_model=ApiResponse[OrderListResponse])
def list_orders(
    identity: CurrentIdentity,
    page: int = Query(DEFAULT_PAGE, ge=1),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=100),
) -> ApiResponse[OrderListResponse]:
    result = OrderQueries(_store()).list_orders(identity.id, page=page, limit=limit)
    return ApiResponse(
        message="Orders retrieved successfully",
        data=OrderListResponse(
            orders=[OrderResponse.model_validate(order) for order in result.orders],
            pagination=Pagination.of(result.page, result.limit, result.total),
        ),
    )


@order_router.get("/{order_id}", response_model=ApiResponse[OrderResponse])
def get_order(order_id: str, identity: CurrentIdentity) -> ApiResponse[OrderResponse]:
    order = OrderQueries(_store()).get_order(identity.id, order_id)
    return ApiResponse(message="Order retrieved successfully", data=OrderResponse.model_validate(order))


@order_router.post("/{order_id}/cancel", response_model=ApiResponse[OrderResponse])
def cancel_order(order_id: str, identity: CurrentIdentity) -> ApiResponse[OrderResponse]:
    order = OrderLifecycleHandler(_store()).cancel_order(CancelOrder(user_id=identity.id, order_id=order_id))
    return ApiResponse(message="Order cancelled successfully", data=OrderResponse.model_validate(order))


# ---------------------------------------------------------------------------
# Admin Router
# ---------------------------------------------------------------------------
admin_router = APIRouter(prefix="/admin/orders", tags=["admin"])


@admin_router.put("/{order_id}/status", response_model=ApiResponse[OrderResponse])
def update_order_status(
    order_id: str, body: UpdateOrderStatusRequest, admin: AdminIdentity
) -> ApiResponse[OrderResponse]:
    order = OrderLifecycleHandler(_store()).advance_order(AdvanceOrder(order_id=order_id, target=body.status))
    return ApiResponse(message="Order status updated", data=OrderResponse.model_validate(order))


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


def _cart() -> CartService:
    database = get_database()
    return CartService(database, SqlAlchemyStore(database))


@cart_router.get("", response_model=ApiResponse[CartResponse])
def get_cart(identity: CurrentIdentity) -> ApiResponse[CartResponse]:
    cart = _cart().get_cart(identity.id)
    return ApiResponse(message="Cart retrieved successfully", data=CartResponse.model_validate(cart))


@cart_router.delete("", response_model=ApiResponse[None])
def clear_cart(identity: CurrentIdentity) -> ApiResponse[None]:
    _cart().clear_cart(identity.id)
    return ApiResponse(message="Cart cleared successfully")


@cart_router.post("/items", status_code=201, response_model=ApiResponse[CartItemResponse])
def add_cart_item(body: AddToCartRequest, identity: CurrentIdentity) -> ApiResponse[CartItemResponse]:
    item = _cart().add_to_cart(identity.id, body.product_id, body.quantity)
    return ApiResponse(message="Item added to cart", data=CartItemResponse.model_validate(item))


@cart_router.put("/items/{item_id}", response_model=ApiResponse[CartItemResponse])
def update_cart_item(
    item_id: str, body: UpdateCartItemRequest, identity: CurrentIdentity
) -> ApiResponse[CartItemResponse]:
    item = _cart().update_cart_item(identity.id, item_id, body.quantity)
    return ApiResponse(message="Cart item updated", data=CartItemResponse.model_validate(item))


@cart_router.delete("/items/{item_id}", response_model=ApiResponse[None])
def remove_cart_item(item_id: str, identity: CurrentIdentity) -> ApiResponse[None]:
    _cart().remove_cart_item(identity.id, item_id)
    return ApiResponse(message="Item removed from cart")


# ---------------------------------------------------------------------------
# Wishlist Router
# ---------------------------------------------------------------------------
wishlist_router = APIRouter(prefix="/wishlist", tags=["wishlist"])


@wishlist_router.get("", response_model=ApiResponse[list[WishlistItemResponse]])
def list_wishlist(identity: CurrentIdentity) -> ApiResponse[list[WishlistItemResponse]]:
    items = WishlistService(get_database()).list_wishlist(identity.id)
    return ApiResponse(
        message="Wishlist retrieved successfully",
        data=[WishlistItemResponse.model_validate(item) for item in items],
    )


@wishlist_router.post("", status_code=201, response_model=ApiResponse[WishlistItemResponse])
def add_to_wishlist(body: AddToWishlistRequest, identity: CurrentIdentity) -> ApiResponse[WishlistItemResponse]:
    item = WishlistService(get_database()).add_to_wishlist(identity.id, body.product_id)
    return ApiResponse(message="Product added to wishlist", data=WishlistItemResponse.model_validate(item))


@wishlist_router.delete("/{product_id}", response_model=ApiResponse[None])
def remove_from_wishlist(product_id: str, identity: CurrentIdentity) -> ApiResponse[None]:
    WishlistService(get_database()).remove_from_wishlist(identity.id, product_id)
    return ApiResponse(message="Product removed from wishlist")
