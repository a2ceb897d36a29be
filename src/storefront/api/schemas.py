"""Pydantic request/response schemas for the Storefront API.

These are external contracts, kept separate from the internal Protean
commands they are translated into.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class CustomizationSchema(BaseModel):
    name: str
    value: str | None = None


class CartItemSchema(BaseModel):
    product_id: str
    quantity: int = Field(ge=1, default=1)
    customizations: list[CustomizationSchema] = []


class AddressSchema(BaseModel):
    name: str = Field(min_length=1)
    street: str = Field(min_length=1)
    city: str = Field(min_length=1)
    state: str | None = None
    zip_code: str = Field(min_length=1)
    country: str = "US"


class StatusResponse(BaseModel):
    status: str = "ok"


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------
class CustomOptionSchema(BaseModel):
    name: str
    option_type: str = "text"
    choices: list[str] = []
    required: bool = False
    additional_cost: float = Field(ge=0, default=0.0)


class AddProductRequest(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: str
    category: str
    price: float = Field(ge=0)
    compare_price: float | None = None
    stock: int = Field(ge=0, default=0)
    min_order_quantity: int = Field(ge=1, default=1)
    custom_options: list[CustomOptionSchema] = []
    featured: bool = False
    tags: list[str] = []

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Premium Business Cards",
                    "description": "High-quality business cards with premium finish options",
                    "category": "business-cards",
                    "price": 29.99,
                    "stock": 100,
                    "custom_options": [
                        {
                            "name": "Finish",
                            "option_type": "select",
                            "choices": ["Matte", "Gloss"],
                            "required": True,
                            "additional_cost": 5.0,
                        }
                    ],
                    "tags": ["business", "cards"],
                }
            ]
        }
    }


class ProductIdResponse(BaseModel):
    product_id: str


class ProductResponse(BaseModel):
    id: str
    name: str
    description: str
    category: str
    price: float
    compare_price: float | None = None
    stock: int
    min_order_quantity: int = 1
    customizable: bool = False
    custom_options: list[CustomOptionSchema] = []
    featured: bool = False
    tags: list[str] = []
    created_at: datetime | None = None


class ProductListResponse(BaseModel):
    items: list[ProductResponse]
    total: int
    total_pages: int
    current_page: int


class CategoriesResponse(BaseModel):
    categories: list[str]


# ---------------------------------------------------------------------------
# Offers
# ---------------------------------------------------------------------------
class CreateOfferRequest(BaseModel):
    title: str = Field(min_length=3, max_length=200)
    description: str | None = None
    code: str = Field(min_length=3, max_length=50)
    discount_type: str
    value: float = Field(ge=0)
    start_date: datetime
    end_date: datetime
    minimum_order_amount: float = Field(ge=0, default=0.0)
    maximum_discount: float | None = None
    applicable_products: list[str] = []
    applicable_categories: list[str] = []
    usage_limit: int | None = None
    user_usage_limit: int = Field(ge=1, default=1)
    is_public: bool = True
    target_audience: str = "all"

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "title": "Welcome Offer - 20% Off",
                    "code": "WELCOME20",
                    "discount_type": "percentage",
                    "value": 20,
                    "minimum_order_amount": 25,
                    "maximum_discount": 50,
                    "usage_limit": 100,
                    "start_date": "2026-01-01T00:00:00Z",
                    "end_date": "2026-12-31T23:59:59Z",
                }
            ]
        }
    }


class OfferIdResponse(BaseModel):
    offer_id: str


class OfferResponse(BaseModel):
    id: str
    title: str
    description: str | None = None
    code: str
    discount_type: str
    value: float
    minimum_order_amount: float = 0.0
    maximum_discount: float | None = None
    applicable_products: list[str] = []
    applicable_categories: list[str] = []
    usage_limit: int | None = None
    usage_count: int = 0
    start_date: datetime
    end_date: datetime
    target_audience: str = "all"


class OfferListResponse(BaseModel):
    items: list[OfferResponse]
    total: int
    total_pages: int
    current_page: int


class ValidateOfferRequest(BaseModel):
    code: str = Field(min_length=1)
    user_id: str
    items: list[CartItemSchema] = Field(min_length=1)


class OfferSummary(BaseModel):
    id: str
    title: str
    code: str
    discount_type: str
    value: float


class ValidateOfferResponse(BaseModel):
    is_valid: bool
    discount: float
    offer: OfferSummary


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class PlaceOrderRequest(BaseModel):
    user_id: str
    items: list[CartItemSchema] = Field(min_length=1)
    shipping_address: AddressSchema
    billing_address: AddressSchema | None = None
    payment_method: str | None = None
    offer_code: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "user_id": "user-001",
                    "items": [
                        {
                            "product_id": "prod-001",
                            "quantity": 2,
                            "customizations": [{"name": "Finish", "value": "Matte"}],
                        }
                    ],
                    "shipping_address": {
                        "name": "Ada Lovelace",
                        "street": "12 Press Lane",
                        "city": "Springfield",
                        "state": "IL",
                        "zip_code": "62701",
                        "country": "US",
                    },
                    "offer_code": "WELCOME20",
                }
            ]
        }
    }


class CancelOrderRequest(BaseModel):
    user_id: str


class OrderItemResponse(BaseModel):
    product_id: str
    name: str
    quantity: int
    unit_price: float
    customizations: list[dict] = []
    line_total: float


class OrderResponse(BaseModel):
    id: str
    order_number: str
    user_id: str
    items: list[OrderItemResponse]
    shipping_address: AddressSchema
    billing_address: AddressSchema | None = None
    payment_method: str | None = None
    subtotal: float
    shipping: float
    tax: float
    discount: float = 0.0
    total: float
    offer_code: str | None = None
    status: str
    payment_status: str
    payment_intent_id: str | None = None
    created_at: datetime | None = None


class OrderListResponse(BaseModel):
    items: list[OrderResponse]
    total: int
    total_pages: int
    current_page: int


# ---------------------------------------------------------------------------
# Payments
# ---------------------------------------------------------------------------
class CreatePaymentIntentRequest(BaseModel):
    order_id: str
    user_id: str


class PaymentIntentResponse(BaseModel):
    client_secret: str | None = None
    payment_intent_id: str


class ConfirmPaymentRequest(BaseModel):
    payment_intent_id: str
    user_id: str


class OrderSummary(BaseModel):
    order_id: str
    order_number: str
    status: str
    payment_status: str
    total: float


class ConfirmPaymentResponse(BaseModel):
    message: str = "Payment confirmed successfully"
    order: OrderSummary


class WebhookResponse(BaseModel):
    received: bool = True
    outcome: str


class ConfigureGatewayRequest(BaseModel):
    should_succeed: bool = True
    failure_reason: str = "Card declined"


class SettleIntentRequest(BaseModel):
    status: str = "succeeded"
