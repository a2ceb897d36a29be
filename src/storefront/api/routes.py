"""FastAPI routes for the Storefront domain: products, offers, orders and payments.

Thin adapters that translate HTTP requests into domain commands and map
aggregates back into response schemas. No business logic lives here.
"""

import json
import os

from fastapi import APIRouter, Header, HTTPException, Query, Request
from protean.utils.globals import current_domain

from shared.listing import Page
from storefront.api.schemas import (
    AddProductRequest,
    CancelOrderRequest,
    CategoriesResponse,
    ConfigureGatewayRequest,
    ConfirmPaymentRequest,
    ConfirmPaymentResponse,
    CreateOfferRequest,
    CreatePaymentIntentRequest,
    OfferIdResponse,
    OfferListResponse,
    OfferResponse,
    OrderListResponse,
    OrderResponse,
    PaymentIntentResponse,
    PlaceOrderRequest,
    ProductIdResponse,
    ProductListResponse,
    ProductResponse,
    SettleIntentRequest,
    StatusResponse,
    ValidateOfferRequest,
    ValidateOfferResponse,
    WebhookResponse,
)
from storefront.gateway import get_gateway
from storefront.gateway.fake_adapter import FakeGateway
from storefront.gateway.port import InvalidWebhookSignature
from storefront.offer.creation import CreateOffer
from storefront.offer.listing import browse_offers, current_offer
from storefront.offer.offer import Offer
from storefront.offer.validation import ValidateOffer
from storefront.order.cancellation import CancelOrder, get_order_for_user
from storefront.order.history import ORDERS_PAGE_SIZE, orders_for_user
from storefront.order.order import Order
from storefront.order.placement import PlaceOrder
from storefront.payment.confirmation import ConfirmPayment
from storefront.payment.intent import CreatePaymentIntent
from storefront.payment.webhook import ProcessPaymentWebhook
from storefront.product.catalog import browse_products, find_product, list_categories
from storefront.product.creation import AddProduct
from storefront.product.product import Product


# ---------------------------------------------------------------------------
# Mapping helpers
# ---------------------------------------------------------------------------
def _product_response(product: Product) -> ProductResponse:
    return ProductResponse(
        id=str(product.id),
        name=product.name,
        description=product.description,
        category=product.category,
        price=product.price,
        compare_price=product.compare_price,
        stock=product.stock,
        min_order_quantity=product.min_order_quantity or 1,
        customizable=bool(product.customizable),
        custom_options=[
            {
                "name": option.name,
                "option_type": option.option_type,
                "choices": json.loads(option.choices) if option.choices else [],
                "required": bool(option.required),
                "additional_cost": option.additional_cost or 0.0,
            }
            for option in product.custom_options
        ],
        featured=bool(product.featured),
        tags=product.tag_list,
        created_at=product.created_at,
    )


def _offer_response(offer: Offer) -> OfferResponse:
    return OfferResponse(
        id=str(offer.id),
        title=offer.title,
        description=offer.description,
        code=offer.code,
        discount_type=offer.discount_type,
        value=offer.value,
        minimum_order_amount=offer.minimum_order_amount or 0.0,
        maximum_discount=offer.maximum_discount,
        applicable_products=offer.product_scope,
        applicable_categories=offer.category_scope,
        usage_limit=offer.usage_limit,
        usage_count=offer.usage_count or 0,
        start_date=offer.start_date,
        end_date=offer.end_date,
        target_audience=offer.target_audience,
    )


def _address(address) -> dict | None:
    if address is None:
        return None
    return {
        "name": address.name,
        "street": address.street,
        "city": address.city,
        "state": address.state,
        "zip_code": address.zip_code,
        "country": address.country,
    }


def _order_response(order: Order) -> OrderResponse:
    return OrderResponse(
        id=str(order.id),
        order_number=order.order_number,
        user_id=str(order.user_id),
        items=[
            {
                "product_id": str(item.product_id),
                "name": item.name,
                "quantity": item.quantity,
                "unit_price": item.unit_price,
                "customizations": json.loads(item.customizations) if item.customizations else [],
                "line_total": item.line_total,
            }
            for item in order.items
        ],
        shipping_address=_address(order.shipping_address),
        billing_address=_address(order.billing_address),
        payment_method=order.payment_method,
        subtotal=order.subtotal,
        shipping=order.shipping,
        tax=order.tax,
        discount=order.discount or 0.0,
        total=order.total,
        offer_code=order.offer_code,
        status=order.status,
        payment_status=order.payment_status,
        payment_intent_id=order.payment_intent_id,
        created_at=order.created_at,
    )


def _page_fields(page: Page) -> dict:
    return {"total": page.total, "total_pages": page.total_pages, "current_page": page.page}


def _cart_items(items) -> str:
    return json.dumps([item.model_dump() for item in items])


# ---------------------------------------------------------------------------
# Product Router
# ---------------------------------------------------------------------------
product_router = APIRouter(prefix="/products", tags=["products"])


@product_router.get("", response_model=ProductListResponse)
async def list_products(
    category: str | None = None,
    search: str | None = None,
    featured: bool | None = None,
    min_price: float | None = Query(default=None, alias="minPrice"),
    max_price: float | None = Query(default=None, alias="maxPrice"),
    sort: str = "created_at",
    order: str = "desc",
    page: int = 1,
    limit: int = 12,
) -> ProductListResponse:
    result = browse_products(
        category=category,
        search=search,
        featured=featured,
        min_price=min_price,
        max_price=max_price,
        sort=sort,
        order=order,
        page=page,
        limit=limit,
    )
    return ProductListResponse(items=[_product_response(p) for p in result.items], **_page_fields(result))


@product_router.get("/categories", response_model=CategoriesResponse)
async def get_categories() -> CategoriesResponse:
    return CategoriesResponse(categories=list_categories())


@product_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str) -> ProductResponse:
    return _product_response(find_product(product_id))


@product_router.post("", status_code=201, response_model=ProductIdResponse)
async def add_product(body: AddProductRequest) -> ProductIdResponse:
    command = AddProduct(
        name=body.name,
        description=body.description,
        category=body.category,
        price=body.price,
        compare_price=body.compare_price,
        stock=body.stock,
        min_order_quantity=body.min_order_quantity,
        custom_options=json.dumps([option.model_dump() for option in body.custom_options]),
        featured=body.featured,
        tags=json.dumps(body.tags),
    )
    product_id = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=product_id)


# ---------------------------------------------------------------------------
# Offer Router
# ---------------------------------------------------------------------------
offer_router = APIRouter(prefix="/offers", tags=["offers"])


@offer_router.get("", response_model=OfferListResponse)
async def list_offers(
    type: str | None = None,  # noqa: A002
    category: str | None = None,
    sort: str = "created_at",
    order: str = "desc",
    page: int = 1,
    limit: int = 12,
) -> OfferListResponse:
    result = browse_offers(
        discount_type=type,
        category=category,
        sort=sort,
        order=order,
        page=page,
        limit=limit,
    )
    return OfferListResponse(items=[_offer_response(o) for o in result.items], **_page_fields(result))


@offer_router.post("/validate", response_model=ValidateOfferResponse)
async def validate_offer(body: ValidateOfferRequest) -> ValidateOfferResponse:
    command = ValidateOffer(code=body.code, user_id=body.user_id, items=_cart_items(body.items))
    result = current_domain.process(command, asynchronous=False)
    return ValidateOfferResponse(**result)


@offer_router.get("/{code}", response_model=OfferResponse)
async def get_offer(code: str) -> OfferResponse:
    return _offer_response(current_offer(code))


@offer_router.post("", status_code=201, response_model=OfferIdResponse)
async def create_offer(body: CreateOfferRequest) -> OfferIdResponse:
    command = CreateOffer(
        title=body.title,
        description=body.description,
        code=body.code,
        discount_type=body.discount_type,
        value=body.value,
        start_date=body.start_date,
        end_date=body.end_date,
        minimum_order_amount=body.minimum_order_amount,
        maximum_discount=body.maximum_discount,
        applicable_products=json.dumps(body.applicable_products),
        applicable_categories=json.dumps(body.applicable_categories),
        usage_limit=body.usage_limit,
        user_usage_limit=body.user_usage_limit,
        is_public=body.is_public,
        target_audience=body.target_audience,
    )
    offer_id = current_domain.process(command, asynchronous=False)
    return OfferIdResponse(offer_id=offer_id)


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderResponse)
async def place_order(body: PlaceOrderRequest) -> OrderResponse:
    command = PlaceOrder(
        user_id=body.user_id,
        items=_cart_items(body.items),
        shipping_address=json.dumps(body.shipping_address.model_dump()),
        billing_address=json.dumps(body.billing_address.model_dump()) if body.billing_address else None,
        payment_method=body.payment_method,
        offer_code=body.offer_code,
    )
    order_id = current_domain.process(command, asynchronous=False)
    return _order_response(current_domain.repository_for(Order).get(order_id))


@order_router.get("", response_model=OrderListResponse)
async def list_orders(
    user_id: str,
    status: str | None = None,
    page: int = 1,
    limit: int = ORDERS_PAGE_SIZE,
) -> OrderListResponse:
    result = orders_for_user(user_id, page=page, limit=limit, status=status)
    return OrderListResponse(items=[_order_response(o) for o in result.items], **_page_fields(result))


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, user_id: str) -> OrderResponse:
    return _order_response(get_order_for_user(order_id, user_id))


@order_router.put("/{order_id}/cancel", response_model=OrderResponse)
async def cancel_order(order_id: str, body: CancelOrderRequest) -> OrderResponse:
    current_domain.process(CancelOrder(order_id=order_id, user_id=body.user_id), asynchronous=False)
    return _order_response(current_domain.repository_for(Order).get(order_id))


# ---------------------------------------------------------------------------
# Payment Router
# ---------------------------------------------------------------------------
payment_router = APIRouter(prefix="/payment", tags=["payment"])


@payment_router.post("/create-intent", response_model=PaymentIntentResponse)
async def create_payment_intent(body: CreatePaymentIntentRequest) -> PaymentIntentResponse:
    command = CreatePaymentIntent(order_id=body.order_id, user_id=body.user_id)
    result = current_domain.process(command, asynchronous=False)
    return PaymentIntentResponse(**result)


@payment_router.post("/confirm", response_model=ConfirmPaymentResponse)
async def confirm_payment(body: ConfirmPaymentRequest) -> ConfirmPaymentResponse:
    command = ConfirmPayment(payment_intent_id=body.payment_intent_id, user_id=body.user_id)
    result = current_domain.process(command, asynchronous=False)
    return ConfirmPaymentResponse(order=result)


@payment_router.post("/webhook", response_model=WebhookResponse)
async def payment_webhook(request: Request, stripe_signature: str = Header(default="")) -> WebhookResponse:
    """Receive a processor event. The raw body is needed to verify the signature."""
    payload = await request.body()
    try:
        event = get_gateway().parse_webhook_event(payload, stripe_signature)
    except InvalidWebhookSignature as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc

    command = ProcessPaymentWebhook(
        event_type=event.event_type,
        payment_intent_id=event.intent_id,
        failure_reason=event.failure_reason,
    )
    outcome = current_domain.process(command, asynchronous=False)
    return WebhookResponse(outcome=outcome)


@payment_router.post("/gateway/configure", response_model=StatusResponse)
async def configure_gateway(body: ConfigureGatewayRequest) -> StatusResponse:
    """Configure the FakeGateway behavior (non-production only)."""
    gateway = _fake_gateway_or_error()
    gateway.configure(should_succeed=body.should_succeed, failure_reason=body.failure_reason)
    return StatusResponse(status="configured")


@payment_router.post("/gateway/intents/{intent_id}/settle", response_model=StatusResponse)
async def settle_intent(intent_id: str, body: SettleIntentRequest) -> StatusResponse:
    """Drive a FakeGateway intent to a final status, as a card completion would (non-production only)."""
    gateway = _fake_gateway_or_error()
    gateway.settle_intent(intent_id, body.status)
    return StatusResponse(status=body.status)


def _fake_gateway_or_error() -> FakeGateway:
    if os.environ.get("PROTEAN_ENV") == "production":
        raise HTTPException(status_code=403, detail="Gateway configuration not available in production")

    gateway = get_gateway()
    if not isinstance(gateway, FakeGateway):
        raise HTTPException(status_code=400, detail="Gateway configuration only available for FakeGateway")
    return gateway
