"""Storefront load test scenarios.

A buyer journey from listing through checkout and fulfillment, plus a
contended-stock rush where many buyers chase a single-unit listing.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import (
    checkout_data,
    guest_cart_data,
    headers,
    line_item_data,
    product_data,
    user_id,
)
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import SellerState, ShopperState


class BuyerCheckoutJourney(SequentialTaskSet):
    """List Products -> Add to Cart -> Wishlist -> Merge Guest Cart -> Count -> Checkout -> Fulfill.

    Generates: ProductListed (x2), LineItemAdded, LineItemMovedToCart,
    OrderPlaced, OrderLineStatusChanged, OrderStatusChanged.
    """

    def on_start(self):
        self.state = ShopperState(buyer_id=user_id("buyer"), seller_id=user_id("seller"))
        self.products = {}

    @task
    def list_products(self):
        for _ in range(2):
            payload = product_data()
            with self.client.post(
                "/products",
                json=payload,
                headers=headers(self.state.seller_id),
                catch_response=True,
                name="POST /products",
            ) as resp:
                if resp.status_code == 201:
                    product_id = resp.json()["product_id"]
                    self.state.product_ids.append(product_id)
                    self.products[product_id] = payload
                else:
                    resp.failure(f"List product failed: {resp.status_code} — {extract_error_detail(resp)}")
                    self.interrupt()

    @task
    def add_to_cart(self):
        product_id = self.state.product_ids[0]
        with self.client.post(
            "/line-items",
            json=line_item_data(self.products[product_id], product_id),
            headers=headers(self.state.buyer_id),
            catch_response=True,
            name="POST /line-items",
        ) as resp:
            if resp.status_code == 201:
                self.state.line_item_ids.append(resp.json()["line_item_id"])
            else:
                resp.failure(f"Add to cart failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def add_to_wishlist(self):
        product_id = self.state.product_ids[1]
        with self.client.post(
            "/line-items",
            json=line_item_data(self.products[product_id], product_id, status="wishlist"),
            headers=headers(self.state.buyer_id),
            catch_response=True,
            name="POST /line-items (wishlist)",
        ) as resp:
            if resp.status_code == 201:
                self.state.wishlist_line_id = resp.json()["line_item_id"]
            else:
                resp.failure(f"Add to wishlist failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def move_to_cart(self):
        if not self.state.wishlist_line_id:
            return
        with self.client.post(
            f"/line-items/{self.state.wishlist_line_id}/move-to-cart",
            headers=headers(self.state.buyer_id),
            catch_response=True,
            name="POST /line-items/{id}/move-to-cart",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Move to cart failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def merge_guest_cart(self):
        with self.client.post(
            "/cart/merge",
            json=guest_cart_data(self.state.product_ids),
            headers=headers(self.state.buyer_id),
            catch_response=True,
            name="POST /cart/merge",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Merge guest cart failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def refresh_count(self):
        with self.client.get(
            "/cart/count",
            headers=headers(self.state.buyer_id),
            catch_response=True,
            name="GET /cart/count",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Cart count failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def checkout(self):
        with self.client.post(
            "/orders",
            json=checkout_data(),
            headers=headers(self.state.buyer_id),
            catch_response=True,
            name="POST /orders",
        ) as resp:
            if resp.status_code == 201:
                self.state.order_id = resp.json()["order_id"]
            elif resp.status_code in (409, 422):
                # Stock moved between count and checkout
                resp.success()
                self.interrupt()
            else:
                resp.failure(f"Checkout failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def fulfill(self):
        seller = SellerState(seller_id=self.state.seller_id, order_id=self.state.order_id)
        with self.client.get(
            f"/sellers/{seller.seller_id}/order-lines",
            headers=headers(seller.seller_id),
            catch_response=True,
            name="GET /sellers/{id}/order-lines",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Seller lines failed: {resp.status_code} — {extract_error_detail(resp)}")
                return
            seller.line_ids = [line["line_id"] for line in resp.json() if line["order_id"] == seller.order_id]

        for line_id in seller.line_ids:
            for status in ("CONFIRMED", "SHIPPED", "DELIVERED"):
                with self.client.put(
                    f"/orders/{seller.order_id}/lines/{line_id}/status",
                    json={"status": status},
                    headers=headers(seller.seller_id),
                    catch_response=True,
                    name="PUT /orders/{id}/lines/{id}/status",
                ) as resp:
                    if resp.status_code != 200:
                        resp.failure(f"Line status failed: {resp.status_code} — {extract_error_detail(resp)}")
                        break

    @task
    def done(self):
        self.interrupt()


class LastItemRushJourney(SequentialTaskSet):
    """Many buyers chase one single-unit listing; at most one checkout should win."""

    product_id = None
    seller_id = user_id("seller")

    def on_start(self):
        self.buyer_id = user_id("buyer")

    @task
    def ensure_listing(self):
        cls = type(self)
        if cls.product_id is not None:
            return
        with self.client.post(
            "/products",
            json=product_data(stock=1),
            headers=headers(cls.seller_id),
            catch_response=True,
            name="POST /products (rush)",
        ) as resp:
            if resp.status_code == 201:
                cls.product_id = resp.json()["product_id"]
            else:
                resp.failure(f"Rush listing failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def add_and_checkout(self):
        with self.client.post(
            "/line-items",
            json={"product_id": type(self).product_id, "quantity": random.randint(1, 3)},
            headers=headers(self.buyer_id),
            catch_response=True,
            name="POST /line-items (rush)",
        ) as resp:
            if resp.status_code == 409:
                resp.success()
                self.interrupt()
                return
            if resp.status_code != 201:
                resp.failure(f"Rush add failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()
                return

        with self.client.post(
            "/orders",
            json=checkout_data(),
            headers=headers(self.buyer_id),
            catch_response=True,
            name="POST /orders (rush)",
        ) as resp:
            if resp.status_code in (201, 409, 422):
                resp.success()
            else:
                resp.failure(f"Rush checkout failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class StorefrontUser(HttpUser):
    """Steady buyer traffic with seller fulfillment."""

    tasks = [BuyerCheckoutJourney]
    wait_time = between(0.5, 2.0)


class LastItemRushUser(HttpUser):
    """Contended stock: buyers racing for the same last unit."""

    tasks = [LastItemRushJourney]
    wait_time = between(0.05, 0.3)
