"""Pydantic request/response schemas for the Ordering API.

These are external contracts, kept separate from the services' dataclasses
and the ORM models they are read from.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from catalogue.api.schemas import ProductSummary
from ordering.models import OrderStatus, PaymentMethod, PaymentStatus
from shared.responses import Pagination


# ---------------------------------------------------------------------------
# Cart and wishlist requests
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    product_id: str
    quantity: int = Field(default=1, ge=1)


class UpdateCartItemRequest(BaseModel):
    quantity: int = Field(ge=1)


class AddToWishlistRequest(BaseModel):
    product_id: str


# ---------------------------------------------------------------------------
# Order requests
# ---------------------------------------------------------------------------
class CheckoutPreviewRequest(BaseModel):
    payment_method: PaymentMethod | None = None


class CreateOrderRequest(BaseModel):
    address_id: str
    payment_method: PaymentMethod
    payment_intent_id: str | None = Field(None, max_length=255)
    notes: str | None = Field(None, max_length=500)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "address_id": "6f1c2b9e-2d4a-4c7e-9a51-0b8f3e2d7a10",
                    "payment_method": "COD",
                    "notes": "Leave with the security desk",
                }
            ]
        }
    }


class UpdateOrderStatusRequest(BaseModel):
    status: OrderStatus


# ---------------------------------------------------------------------------
# Pricing and cart responses
# ---------------------------------------------------------------------------
class PricingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    subtotal: Decimal
    shipping_cost: Decimal
    tax: Decimal
    total: Decimal


class PricedLineResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    item_id: str
    product_id: str
    product_name: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal
    stock: int
    is_active: bool
    is_available: bool


class CartResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    lines: list[PricedLineResponse]
    total_items: int
    pricing: PricingResponse


class CheckoutPreviewResponse(CartResponse):
    payment_method: PaymentMethod | None = None


class CartItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    product_id: str
    quantity: int
    product: ProductSummary


class WishlistItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    product_id: str
    created_at: datetime
    product: ProductSummary


# ---------------------------------------------------------------------------
# Order responses
# ---------------------------------------------------------------------------
class OrderItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    product_id: str
    product_name: str
    quantity: int
    price: Decimal
    total: Decimal


class OrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    order_number: str
    user_id: str
    address_id: str | None = None
    status: OrderStatus
    payment_method: PaymentMethod
    payment_status: PaymentStatus
    payment_intent_id: str | None = None
    subtotal: Decimal
    shipping_cost: Decimal
    tax: Decimal
    total: Decimal
    notes: str | None = None
    items: list[OrderItemResponse]
    created_at: datetime
    updated_at: datetime


class OrderListResponse(BaseModel):
    orders: list[OrderResponse]
    pagination: Pagination
