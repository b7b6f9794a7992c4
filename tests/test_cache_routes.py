from app.cache import get_cache
from app.cache import keys


def _seed(*cache_keys):
    store = get_cache()
    for key in cache_keys:
        store.put(key, '{"success": true}', 600)
    return store


def test_flush_products_for_vendor(client):
    feed_key = keys.product_feed_key("v1", {})
    other_key = keys.product_feed_key("v2", {})
    store = _seed(feed_key, other_key, keys.vendor_products_key("v1"))

    body = client.post("/api/cache/flush/products?vendor_id=v1").get_json()
    assert body["cleared_count"] == 2
    assert body["vendor_id"] == "v1"
    assert store.get(feed_key) is None
    assert store.get(other_key) is not None


def test_flush_products_everything(client):
    store = _seed(keys.product_feed_key("v1", {}), keys.CATEGORIES_ALL_KEY)
    body = client.post("/api/cache/flush/products", json={"all": True}).get_json()
    assert body["cleared_count"] == -1
    assert body["message"] == "All product cache cleared successfully"
    assert store.get(keys.CATEGORIES_ALL_KEY) is None


def test_flush_restaurants_by_zone(client):
    zone_key = keys.nearest_restaurants_key("z1", 17.385, 78.4867, None, False, "distance")
    other_key = keys.nearest_restaurants_key("z2", 17.385, 78.4867, None, False, "distance")
    store = _seed(zone_key, other_key)

    body = client.post("/api/cache/flush/restaurants?zone_id=z1").get_json()
    assert body["cleared_count"] == 1
    assert body["message"] == "Restaurant cache cleared for zone: z1"
    assert store.get(other_key) is not None

    again = client.post("/api/cache/flush/restaurants?zone_id=z1").get_json()
    assert again["cleared_count"] == 0
    assert "expire naturally" in again["message"]


def test_flush_settings_and_categories(client):
    store = _seed(keys.MOBILE_SETTINGS_KEY, keys.CATEGORIES_HOME_KEY)
    settings = client.post("/api/cache/flush/settings").get_json()
    assert settings["cleared_count"] == 1
    assert settings["cleared_keys"] == ["mobile_settings_v1", "delivery_charge_settings_v1"]

    categories = client.post("/api/cache/flush/categories").get_json()
    assert categories["cleared_count"] == 1
    assert store.get(keys.CATEGORIES_HOME_KEY) is None

    empty = client.post("/api/cache/flush/categories").get_json()
    assert empty["message"] == "No category cache entries found to clear"


def test_flush_menu_items(client):
    top_key = keys.menu_items_key("top", "z1")
    store = _seed(top_key, keys.menu_items_key("bottom", None))

    body = client.post("/api/cache/flush/menu-items?position=top&zone_id=z1").get_json()
    assert body["cleared_count"] == 1
    assert body["position"] == "top"
    assert store.get(top_key) is None

    rest = client.post("/api/cache/flush/menu-items").get_json()
    assert rest["cleared_count"] == 1
    assert rest["zone_id"] == "all"

    assert client.post("/api/cache/flush/menu-items?position=side").status_code == 422


def test_flush_all(client):
    store = _seed(keys.MOBILE_SETTINGS_KEY, "anything")
    body = client.post("/api/cache/flush/all").get_json()
    assert body["message"] == "All cache cleared successfully"
    assert "menu_items" in body["cleared"]
    assert store.get("anything") is None


def test_stats(client):
    data = client.get("/api/cache/stats").get_json()["data"]
    assert data["cache_driver"] == "memory"
    assert "cache_prefix" in data
