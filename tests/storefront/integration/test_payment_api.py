"""Integration tests for the payment endpoints via TestClient."""

import json

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient
from protean.integrations.fastapi import register_exception_handlers
from storefront.api import order_router, payment_router, product_router, register_gateway_error_handler
from storefront.domain import storefront
from storefront.gateway.fake_adapter import TEST_SIGNATURE

ADDRESS = {"name": "Ada Lovelace", "street": "12 Analytical Way", "city": "London", "zip_code": "N1 9GU"}


@pytest.fixture()
def client():
    app = FastAPI()

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        with storefront.domain_context():
            return await call_next(request)

    app.include_router(product_router)
    app.include_router(order_router)
    app.include_router(payment_router)
    register_exception_handlers(app)
    register_gateway_error_handler(app)
    return TestClient(app)


@pytest.fixture()
def order_id(client):
    product = client.post(
        "/products",
        json={"name": "Gift Bags", "description": "Bags", "category": "bags", "price": 12.50, "stock": 10},
    ).json()
    response = client.post(
        "/orders",
        json={
            "user_id": "user-001",
            "items": [{"product_id": product["product_id"], "quantity": 3}],
            "shipping_address": ADDRESS,
        },
    )
    return response.json()["id"]


def _intent(client, order_id):
    response = client.post("/payment/create-intent", json={"order_id": order_id, "user_id": "user-001"})
    assert response.status_code == 200
    return response.json()["payment_intent_id"]


def _webhook(client, event_type, intent_id, signature=TEST_SIGNATURE):
    payload = {"type": event_type, "data": {"object": {"id": intent_id}}}
    return client.post(
        "/payment/webhook",
        content=json.dumps(payload),
        headers={"Stripe-Signature": signature, "Content-Type": "application/json"},
    )


class TestPaymentFlow:
    def test_intent_settle_confirm(self, client, order_id):
        intent_id = _intent(client, order_id)

        pending = client.post("/payment/confirm", json={"payment_intent_id": intent_id, "user_id": "user-001"})
        assert pending.status_code == 400

        settled = client.post(f"/payment/gateway/intents/{intent_id}/settle", json={"status": "succeeded"})
        assert settled.status_code == 200

        response = client.post("/payment/confirm", json={"payment_intent_id": intent_id, "user_id": "user-001"})
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Payment confirmed successfully"
        assert body["order"]["status"] == "confirmed"
        assert body["order"]["payment_status"] == "paid"

    def test_gateway_failure_502(self, client, order_id):
        client.post("/payment/gateway/configure", json={"should_succeed": False, "failure_reason": "Down"})

        response = client.post("/payment/create-intent", json={"order_id": order_id, "user_id": "user-001"})

        assert response.status_code == 502
        assert response.json()["error"]["payment"] == ["Down"]


class TestWebhookAPI:
    def test_succeeded_event(self, client, order_id):
        intent_id = _intent(client, order_id)

        response = _webhook(client, "payment_intent.succeeded", intent_id)

        assert response.status_code == 200
        assert response.json() == {"received": True, "outcome": "processed"}
        order = client.get(f"/orders/{order_id}", params={"user_id": "user-001"}).json()
        assert order["status"] == "confirmed"

    def test_bad_signature_401(self, client, order_id):
        intent_id = _intent(client, order_id)

        response = _webhook(client, "payment_intent.succeeded", intent_id, signature="forged")

        assert response.status_code == 401
        order = client.get(f"/orders/{order_id}", params={"user_id": "user-001"}).json()
        assert order["status"] == "pending"

    @pytest.mark.parametrize("body", ["[]", '"x"', '{"data": {"object": 7}}'])
    def test_malformed_payload_rejected(self, client, body):
        response = client.post(
            "/payment/webhook",
            content=body,
            headers={"Stripe-Signature": TEST_SIGNATURE, "Content-Type": "application/json"},
        )
        assert response.status_code == 401

    def test_event_without_data_acknowledged(self, client):
        response = client.post(
            "/payment/webhook",
            content='{"type": "payment_intent.succeeded", "data": null}',
            headers={"Stripe-Signature": TEST_SIGNATURE, "Content-Type": "application/json"},
        )
        assert response.status_code == 200
        assert response.json()["outcome"] == "ignored"

    def test_unknown_intent_acknowledged(self, client):
        response = _webhook(client, "payment_intent.succeeded", "pi_unknown")
        assert response.status_code == 200
        assert response.json()["outcome"] == "ignored"
