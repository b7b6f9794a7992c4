from datetime import datetime, timedelta

import pytest

from models import db
from models.product import Promotion, VendorProduct
from models.vendor import VendorCategory


@pytest.fixture
def menu(make_vendor):
    make_vendor("v1", title="Spice Hub")
    now = datetime.utcnow()
    db.session.add_all([
        VendorCategory(id="c1", restaurant_id="v1", title="Starters"),
        VendorCategory(id="c2", restaurant_id="Spice Hub", title="Mains"),
        VendorProduct(id="p1", vendor_id="v1", name="Paneer Tikka", category_id="c1",
                      price="200", dis_price="150", veg=True, publish=True, is_available=True),
        VendorProduct(id="p2", vendor_id="v1", name="Chicken 65", category_id="c1",
                      price="250", dis_price="0", nonveg=True, publish=True, is_available=True),
        VendorProduct(id="p3", vendor_id="v1", name="Dal", category_id="c2",
                      price="Rs 120", veg=True, publish=True, is_available=True),
        VendorProduct(id="p4", vendor_id="v1", name="Sold Out", category_id="c2",
                      price="90", publish=True, is_available=False),
        VendorProduct(id="p5", vendor_id="v1", name="Naan", category_id="c2",
                      price="40", publish=None, is_available=True),
        Promotion(id="promo1", product_id="p2", restaurant_id="Spice Hub", special_price="199",
                  start_time=now - timedelta(days=1), end_time=now + timedelta(days=1)),
        Promotion(id="promo2", product_id="p3", restaurant_id="v1", special_price="99",
                  start_time=now - timedelta(days=5), end_time=now - timedelta(days=1)),
    ])
    db.session.commit()


def _products(body):
    return {p["id"]: p for p in body["data"]["products"]}


def test_feed_prices_and_meta(client, menu):
    resp = client.get("/api/products/feed/v1")
    assert resp.status_code == 200
    body = resp.get_json()
    assert [p["name"] for p in body["data"]["products"]] == ["Chicken 65", "Dal", "Naan", "Paneer Tikka"]
    products = _products(body)
    assert products["p2"]["final_price"] == "199"
    assert products["p2"]["has_active_promotion"] is True
    assert products["p1"]["final_price"] == "150"
    assert products["p3"]["final_price"] == "120"
    assert products["p3"]["promotion"] is None
    assert body["data"]["meta"] == {"total_products": 4, "offer_products": 1, "categories": 2}
    summaries = {c["id"]: c for c in body["data"]["categories"]}
    assert summaries["c1"]["title"] == "Starters"
    assert summaries["c2"]["product_count"] == 2


def test_feed_veg_filter(client, menu):
    body = client.get("/api/products/feed/v1?is_veg=true").get_json()
    assert set(_products(body)) == {"p1", "p3"}
    assert body["data"]["filters"]["is_veg"] is True


def test_feed_explicit_false_excludes(client, menu):
    body = client.get("/api/products/feed/v1?is_nonveg=false").get_json()
    assert "p2" not in _products(body)


def test_feed_offer_only_and_search(client, menu):
    offers = client.get("/api/products/feed/v1?offer_only=1").get_json()
    assert set(_products(offers)) == {"p1", "p2"}

    found = client.get("/api/products/feed/v1?search=paneer").get_json()
    assert set(_products(found)) == {"p1"}


def test_vendor_products(client, menu):
    body = client.get("/api/products/vendor/v1").get_json()
    assert [p["name"] for p in body["data"]] == ["Chicken 65", "Dal", "Paneer Tikka"]
    assert body["message"] == "Products retrieved successfully"

    empty = client.get("/api/products/vendor/unknown").get_json()
    assert empty["data"] == []
    assert empty["message"] == "No available products found for this vendor"


def test_vendor_products_blank_id(client):
    resp = client.get("/api/products/vendor/%20")
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Invalid vendor ID provided."


def test_all_products_pagination(client, menu):
    body = client.get("/api/products?per_page=2&page=1").get_json()
    assert len(body["data"]) == 2
    assert body["meta"] == {"total": 3, "per_page": 2, "current_page": 1, "last_page": 2}
    assert body["links"]["prev"] is None
    assert body["links"]["next"].endswith("?page=2&per_page=2")

    defaulted = client.get("/api/products?per_page=0").get_json()
    assert defaulted["meta"]["per_page"] == 50


def test_all_products_empty(client):
    body = client.get("/api/products").get_json()
    assert body["data"] == []
    assert body["message"] == "No available products found"
    assert body["meta"]["last_page"] == 1


def test_product_detail(client, menu):
    body = client.get("/api/products/p2").get_json()
    assert body["data"]["final_price"] == "199"
    assert body["data"]["category_title"] == "Starters"
    assert client.get("/api/products/missing").status_code == 404
