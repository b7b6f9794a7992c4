import pytest
from sqlalchemy.exc import OperationalError

from app.services import search as search_service
from models import db
from models.mart import MartCategory, MartItem
from models.product import VendorProduct
from models.vendor import VendorCategory


@pytest.fixture
def marketplace(make_vendor):
    make_vendor("near", title="Biryani House", latitude=17.386, longitude=78.487)
    make_vendor("far", title="Biryani Palace", latitude=17.45, longitude=78.55, is_open="false")
    make_vendor("nowhere", title="Biryani Cloud Kitchen", latitude=None, longitude=None)
    make_vendor("hidden", title="Biryani Secret", publish=False)
    make_vendor("elsewhere", title="Biryani Zone Two", zone_id="zone-2")
    db.session.add_all([
        VendorProduct(id="p1", vendor_id="near", name="Chicken Biryani", price="250", publish=True),
        VendorProduct(id="p2", vendor_id="hidden", name="Mutton Biryani", price="350", publish=True),
        VendorProduct(id="p3", vendor_id="near", name="Veg Biryani", price="180", publish=False),
        VendorCategory(id="c1", title="Biryani", publish=True),
        VendorCategory(id="c2", title="Biryani Drafts", publish=False),
    ])
    db.session.commit()


def test_unified_search_orders_by_distance(client, marketplace):
    body = client.get(
        "/api/search/unified?query=biryani&zone_id=zone-1&latitude=17.385&longitude=78.4867"
    ).get_json()
    restaurants = body["data"]["restaurants"]
    assert [r["id"] for r in restaurants] == ["near", "far", "nowhere"]
    assert restaurants[-1]["distance"] is None
    assert [p["id"] for p in body["data"]["products"]] == ["p1"]
    assert [c["id"] for c in body["data"]["categories"]] == ["c1"]
    assert body["data"]["total_results"] == 5
    assert body["meta"]["openCount"] == 2
    assert body["meta"]["zone_id"] == "zone-1"


def test_unified_search_without_location_sorts_by_title(client, marketplace):
    body = client.get("/api/search/unified?query=biryani&zone_id=zone-1").get_json()
    titles = [r["title"] for r in body["data"]["restaurants"]]
    assert titles == sorted(titles)


def test_unified_search_treats_zero_coordinates_as_a_location(client, marketplace):
    body = client.get(
        "/api/search/unified?query=biryani&zone_id=zone-1&latitude=0&longitude=0"
    ).get_json()
    restaurants = body["data"]["restaurants"]
    assert [r["id"] for r in restaurants] == ["near", "far", "nowhere"]
    assert restaurants[0]["distance"] > 0


def test_unified_search_validation(client):
    assert client.get("/api/search/unified?query=b&zone_id=zone-1").status_code == 422
    resp = client.get("/api/search/unified?query=biryani")
    assert resp.status_code == 422
    assert "zone_id" in resp.get_json()["errors"]


@pytest.fixture
def mart(app):
    db.session.add_all([
        MartCategory(id="g", title="Groceries", category_order=2),
        MartCategory(id="d", title="Dairy", description="Milk and curd", category_order=1),
        MartItem(id="i1", name="Basmati Rice", price=120, category_title="Groceries", vendor_title="Jippy Mart"),
        MartItem(id="i2", name="Rice Bran Oil", price=180, category_title="Groceries", is_best_seller=True),
        MartItem(id="i3", name="Pulao Kit", description="Spiced rice mix", price=90, veg=True),
        MartItem(id="i4", name="Rice Flakes", price=60, publish=False),
        MartItem(id="i5", name="Paneer", price=80, category_title="Dairy", veg=True,
                 is_trending=True, is_feature=True),
        MartItem(id="i6", name="Ghee", price=400, category_title="Dairy", is_feature=True, is_available=False),
    ])
    db.session.commit()


def test_mart_categories_search(client, mart):
    body = client.get("/api/search/categories").get_json()
    assert [c["id"] for c in body["data"]] == ["d", "g"]
    assert body["pagination"]["total"] == 2

    milk = client.get("/api/search/categories?q=milk").get_json()
    assert [c["id"] for c in milk["data"]] == ["d"]
    assert milk["search_term"] == "milk"


def test_mart_categories_fallback_on_database_error(app, monkeypatch):
    def broken():
        raise OperationalError("SELECT", {}, Exception("gone"))

    class BrokenQuery:
        def filter(self, *args):
            return self

        count = staticmethod(broken)

    monkeypatch.setattr(MartCategory, "query", BrokenQuery())
    body = search_service.search_mart_categories("veg")
    assert body["fallback"] is True
    assert body["data"][0]["title"] == "Groceries"


def test_mart_items_relevance(client, mart):
    body = client.get("/api/search/mart-items?search=rice").get_json()
    assert [i["id"] for i in body["data"]] == ["i2", "i1", "i3"]
    assert body["pagination"]["total"] == 3
    assert body["filters_applied"] == {"search": "rice"}


def test_mart_items_filters_and_pagination(client, mart):
    veg = client.get("/api/search/mart-items?veg=true").get_json()
    assert {i["id"] for i in veg["data"]} == {"i3", "i5"}

    priced = client.get("/api/search/mart-items?min_price=100&max_price=200").get_json()
    assert {i["id"] for i in priced["data"]} == {"i1", "i2"}

    paged = client.get("/api/search/mart-items?category=dairy&limit=1").get_json()
    assert paged["pagination"]["total"] == 2
    assert paged["pagination"]["total_pages"] == 2
    assert paged["pagination"]["has_more"] is True


def test_featured_mart_items(client, mart):
    body = client.get("/api/search/mart-items/featured").get_json()
    assert [i["id"] for i in body["data"]] == ["i5"]
    assert body["type"] == "featured"

    trending = client.get("/api/search/mart-items/featured?type=trending").get_json()
    assert trending["count"] == 1
    assert client.get("/api/search/mart-items/featured?type=popular").status_code == 422


def test_featured_mart_items_fall_back(client, monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("db down")

    monkeypatch.setattr(search_service, "featured_mart_items", boom)
    body = client.get("/api/search/mart-items/featured").get_json()
    assert body["fallback"] is True
    assert body["data"] == []
