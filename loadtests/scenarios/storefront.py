"""Storefront load test scenarios.

Stateful SequentialTaskSet journeys covering catalog browsing, the full
checkout path through the fake payment gateway, and order cancellation.
The server must run with PAYMENT_GATEWAY=fake so intents can be settled
over HTTP.
"""

from locust import SequentialTaskSet, task

from loadtests.data_generators import offer_data, order_data, product_data, shopper_id
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import CheckoutState


class CatalogBrowseJourney(SequentialTaskSet):
    """List products -> filter by category -> view a product -> list offers.

    Read-only traffic; the most common storefront activity.
    """

    def on_start(self):
        self.state = CheckoutState()

    @task
    def list_products(self):
        with self.client.get("/products", catch_response=True, name="GET /products") as resp:
            if resp.status_code == 200:
                self.state.product_ids = [p["id"] for p in resp.json()["items"]]
            else:
                resp.failure(f"List products failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def filter_by_category(self):
        self.client.get(
            "/products",
            params={"category": "business-cards", "sort": "price", "order": "asc"},
            name="GET /products?category",
        )

    @task
    def view_product(self):
        if not self.state.product_ids:
            self.interrupt()
        self.client.get(f"/products/{self.state.product_ids[0]}", name="GET /products/{id}")

    @task
    def list_offers(self):
        self.client.get("/offers", name="GET /offers")
        self.interrupt()


class CheckoutJourney(SequentialTaskSet):
    """Add products -> create offer -> place order -> create intent -> settle -> confirm.

    The happy path: stock is reserved, the intent succeeds at the gateway
    and the order becomes paid.
    """

    use_offer = True

    def on_start(self):
        self.state = CheckoutState(user_id=shopper_id())

    @task
    def add_products(self):
        for _ in range(2):
            with self.client.post(
                "/products",
                json=product_data(),
                catch_response=True,
                name="POST /products",
            ) as resp:
                if resp.status_code == 201:
                    self.state.product_ids.append(resp.json()["product_id"])
                else:
                    resp.failure(f"Add product failed: {resp.status_code} - {extract_error_detail(resp)}")
                    self.interrupt()

    @task
    def create_offer(self):
        if not self.use_offer:
            return
        payload = offer_data()
        with self.client.post("/offers", json=payload, catch_response=True, name="POST /offers") as resp:
            if resp.status_code == 201:
                self.state.offer_code = payload["code"]
            else:
                resp.failure(f"Create offer failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task
    def place_order(self):
        payload = order_data(self.state.user_id, self.state.product_ids, self.state.offer_code)
        with self.client.post("/orders", json=payload, catch_response=True, name="POST /orders") as resp:
            if resp.status_code == 201:
                self.state.order_id = resp.json()["id"]
            else:
                resp.failure(f"Place order failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def create_intent(self):
        with self.client.post(
            "/payment/create-intent",
            json={"order_id": self.state.order_id, "user_id": self.state.user_id},
            catch_response=True,
            name="POST /payment/create-intent",
        ) as resp:
            if resp.status_code == 200:
                self.state.payment_intent_id = resp.json()["payment_intent_id"]
            else:
                resp.failure(f"Create intent failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def settle_intent(self):
        with self.client.post(
            f"/payment/gateway/intents/{self.state.payment_intent_id}/settle",
            json={"status": "succeeded"},
            catch_response=True,
            name="POST /payment/gateway/intents/{id}/settle",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Settle intent failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def confirm_payment(self):
        with self.client.post(
            "/payment/confirm",
            json={"payment_intent_id": self.state.payment_intent_id, "user_id": self.state.user_id},
            catch_response=True,
            name="POST /payment/confirm",
        ) as resp:
            if resp.status_code == 200:
                self.state.current_status = resp.json()["order"]["status"]
            else:
                resp.failure(f"Confirm payment failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class OrderCancellationJourney(SequentialTaskSet):
    """Add a product -> place order -> cancel it.

    Exercises stock restoration on the unhappy path.
    """

    def on_start(self):
        self.state = CheckoutState(user_id=shopper_id())

    @task
    def add_product(self):
        with self.client.post("/products", json=product_data(), catch_response=True, name="POST /products") as resp:
            if resp.status_code == 201:
                self.state.product_ids.append(resp.json()["product_id"])
            else:
                resp.failure(f"Add product failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def place_order(self):
        payload = order_data(self.state.user_id, self.state.product_ids)
        with self.client.post("/orders", json=payload, catch_response=True, name="POST /orders") as resp:
            if resp.status_code == 201:
                self.state.order_id = resp.json()["id"]
            else:
                resp.failure(f"Place order failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def cancel_order(self):
        with self.client.put(
            f"/orders/{self.state.order_id}/cancel",
            json={"user_id": self.state.user_id},
            catch_response=True,
            name="PUT /orders/{id}/cancel",
        ) as resp:
            if resp.status_code == 200:
                self.state.current_status = "cancelled"
            else:
                resp.failure(f"Cancel order failed: {resp.status_code} - {extract_error_detail(resp)}")
        self.interrupt()
