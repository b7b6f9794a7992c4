import pytest

from models import db
from models.banner import MenuItemBanner
from models.vendor import VendorCategory


@pytest.fixture
def categories(app):
    db.session.add_all([
        VendorCategory(id="c1", title="Biryani", publish=True, show_in_homepage=True),
        VendorCategory(id="c2", title="Andhra", publish=True),
        VendorCategory(id="c3", title="Draft", publish=False, show_in_homepage=True),
    ])
    db.session.commit()


@pytest.fixture
def banners(app):
    db.session.add_all([
        MenuItemBanner(id="b1", title="Zone top", position="top", zone_id="z1", set_order=2),
        MenuItemBanner(id="b2", title="Everywhere top", position="top", zone_id=None, set_order=1),
        MenuItemBanner(id="b3", title="Blank zone", position="middle", zone_id="", set_order=3),
        MenuItemBanner(id="b4", title="Other zone", position="top", zone_id="z2", set_order=0),
        MenuItemBanner(id="b5", title="Hidden", position="top", is_publish=False, set_order=0),
    ])
    db.session.commit()


def test_home_categories(client, categories):
    body = client.get("/api/categories/home").get_json()
    assert [c["id"] for c in body["data"]] == ["c1"]


def test_all_categories_cached(client, categories):
    body = client.get("/api/categories").get_json()
    assert body["count"] == 2
    db.session.add(VendorCategory(id="c4", title="Chinese", publish=True))
    db.session.commit()
    assert client.get("/api/categories").get_json()["count"] == 2
    assert client.get("/api/categories?refresh=true").get_json()["count"] == 3


def test_position_banners_for_zone(client, banners):
    body = client.get("/api/menu-items/banners/top?zone_id=z1").get_json()
    assert [b["id"] for b in body["data"]] == ["b2", "b1"]


def test_all_banners_with_position_filter(client, banners):
    body = client.get("/api/menu-items/banners?zone_id=z1").get_json()
    assert [b["id"] for b in body["data"]] == ["b2", "b1", "b3"]
    assert body["count"] == 3

    middle = client.get("/api/menu-items/banners?position=middle").get_json()
    assert [b["id"] for b in middle["data"]] == ["b3"]
    assert client.get("/api/menu-items/banners?position=side").status_code == 422


def test_banner_detail(client, banners):
    assert client.get("/api/menu-items/banners/b1").get_json()["data"]["zoneId"] == "z1"
    missing = client.get("/api/menu-items/banners/none")
    assert missing.status_code == 404
    assert missing.get_json()["message"] == "Menu item banner not found"
