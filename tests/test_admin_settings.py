from app.cache import get_cache
from app.cache.keys import MOBILE_SETTINGS_KEY
from models import db
from models.setting import Setting


def test_get_missing_document(client, app):
    resp = client.get("/api/admin/settings/Version")
    assert resp.status_code == 404
    assert resp.get_json()["message"] == "Settings document not found"


def test_replace_then_read_document(client, app):
    resp = client.put("/api/admin/settings/Version", json={"fields": {"app_version": "5.1.0"}})
    assert resp.status_code == 200
    assert resp.get_json()["document"] == "Version"

    body = client.get("/api/admin/settings/Version").get_json()
    assert body["data"] == {"app_version": "5.1.0"}
    assert client.get("/api/settings/all").get_json()["data"]["version"]["app_version"] == "5.1.0"


def test_replace_requires_fields(client, app):
    assert client.put("/api/admin/settings/Version", json={}).status_code == 422


def test_patch_single_field(client, app):
    Setting.update_by_document("story", {"isEnabled": False, "videoDuration": 30})
    db.session.commit()
    body = client.patch("/api/admin/settings/story/isEnabled", json={"value": True}).get_json()
    assert body["data"] == {"isEnabled": True, "videoDuration": 30}
    assert Setting.get_field("story", "isEnabled") is True

    missing = client.patch("/api/admin/settings/nothing/flag", json={"value": 1})
    assert missing.status_code == 404


def test_writes_invalidate_mobile_settings(client, app):
    Setting.update_by_document("Version", {"app_version": "1.0.0"})
    db.session.commit()
    first = client.get("/api/settings/mobile").get_json()
    assert first["data"]["derived"]["appVersion"] == "1.0.0"
    assert get_cache().get(MOBILE_SETTINGS_KEY) is not None

    client.patch("/api/admin/settings/Version/app_version", json={"value": "1.1.0"})
    assert get_cache().get(MOBILE_SETTINGS_KEY) is None
    second = client.get("/api/settings/mobile").get_json()
    assert second["data"]["derived"]["appVersion"] == "1.1.0"
