import json
from datetime import datetime, timedelta

import pytest

from models import db
from models.setting import Zone
from models.user import AppUser


def _user(firebase_id, first, last, email, **fields):
    fields.setdefault("password", "x")
    fields.setdefault("role", "customer")
    user = AppUser(firebase_id=firebase_id, first_name=first, last_name=last, email=email, **fields)
    db.session.add(user)
    return user


@pytest.fixture
def users(app):
    _user("user_1", "Ravi", "Kumar", "ravi@example.com", phone_number="9000000001",
          active=True, zone_id="z1")
    _user("user_2", "Anita", "Rao", "anita@example.com",
          shipping_address=json.dumps([{"zoneId": "z2", "address": "Ameerpet"}]))
    _user("user_3", "Old", "Timer", "old@example.com",
          created_at=datetime.utcnow() - timedelta(days=3))
    _user("drv_1", "Driver", "One", "driver@example.com", role="driver")
    db.session.add(Zone(id="z1", name="Hyderabad Central"))
    db.session.commit()


def test_create_user(client, app):
    payload = {"firstName": "Sita", "lastName": "Devi", "email": "sita@example.com",
               "password": "secret1", "active": "true", "zoneId": "z1"}
    resp = client.post("/api/admin/users", json=payload)
    assert resp.status_code == 201
    data = resp.get_json()["data"]
    assert data["firebase_id"] == "user_1"
    assert data["isActive"] is True

    stored = AppUser.query.filter_by(email="sita@example.com").one()
    assert stored.password != "secret1"
    assert stored.role == "customer"

    duplicate = client.post("/api/admin/users", json=payload)
    assert duplicate.status_code == 400
    assert duplicate.get_json()["message"] == "The email has already been taken."


@pytest.mark.parametrize("flag", ["inf", "nan", "maybe"])
def test_create_user_rejects_unreadable_active_flag(client, flag):
    payload = {"firstName": "Sita", "lastName": "Devi", "email": "sita@example.com",
               "password": "secret1", "active": flag}
    resp = client.post("/api/admin/users", json=payload)
    assert resp.status_code == 422
    assert "active" in resp.get_json()["errors"]


def test_list_rejects_unreadable_active_filter(client, users):
    resp = client.get("/api/admin/users?active=nan&date_range=all_users")
    assert resp.status_code == 422
    assert "active" in resp.get_json()["errors"]


def test_set_active_rejects_unreadable_flag(client, users):
    resp = client.post("/api/admin/users/user_2/active", json={"active": "inf"})
    assert resp.status_code == 422


def test_create_user_numbers_past_existing_ids(client, users):
    payload = {"firstName": "New", "lastName": "User", "email": "new@example.com", "password": "secret1"}
    data = client.post("/api/admin/users", json=payload).get_json()["data"]
    assert data["firebase_id"] == "user_4"


def test_create_user_validation(client, app):
    resp = client.post("/api/admin/users", json={"firstName": "A", "lastName": "B", "email": "not-an-email"})
    assert resp.status_code == 422
    errors = resp.get_json()["errors"]
    assert "email" in errors
    assert "password" in errors


def test_list_users_defaults_to_today(client, users):
    body = client.get("/api/admin/users").get_json()
    assert {u["id"] for u in body["data"]} == {"user_1", "user_2"}
    assert body["meta"]["total"] == 2


def test_list_users_all_time_with_filters(client, users):
    everyone = client.get("/api/admin/users?date_range=all_users").get_json()
    assert everyone["meta"]["total"] == 3

    zone = client.get("/api/admin/users?date_range=all_users&zoneId=z2").get_json()
    assert [u["id"] for u in zone["data"]] == ["user_2"]
    assert zone["data"][0]["zoneId"] == "z2"

    search = client.get("/api/admin/users?date_range=all_users&search=9000000001").get_json()
    assert [u["fullName"] for u in search["data"]] == ["Ravi Kumar"]

    active = client.get("/api/admin/users?date_range=all_users&active=1").get_json()
    assert [u["active"] for u in active["data"]] == [1]

    drivers = client.get("/api/admin/users?date_range=all_users&role=driver").get_json()
    assert [u["id"] for u in drivers["data"]] == ["drv_1"]


def test_list_users_pagination(client, users):
    body = client.get("/api/admin/users?date_range=all_users&limit=2").get_json()
    assert len(body["data"]) == 2
    assert body["meta"]["has_more"] is True


def test_list_users_invalid_date(client, users):
    resp = client.get("/api/admin/users?from=yesterday")
    assert resp.status_code == 400


def test_set_active_and_details(client, users):
    resp = client.post("/api/admin/users/user_2/active", json={"active": "1"})
    assert resp.get_json()["message"] == "User status updated"
    assert AppUser.query.filter_by(firebase_id="user_2").one().active is True

    details = client.get("/api/admin/users/user_2/details").get_json()["data"]
    assert details["fullName"] == "Anita Rao"
    assert client.get("/api/admin/users/nobody/details").status_code == 404
    assert client.post("/api/admin/users/nobody/active", json={"active": True}).status_code == 404


def test_details_by_numeric_id(client, users):
    user = AppUser.query.filter_by(firebase_id="user_1").one()
    details = client.get(f"/api/admin/users/{user.id}/details").get_json()["data"]
    assert details["id"] == "user_1"


def test_delete_user(client, users):
    assert client.delete("/api/admin/users/user_3").get_json()["message"] == "User deleted successfully"
    assert AppUser.query.filter_by(firebase_id="user_3").first() is None
    assert client.delete("/api/admin/users/user_3").status_code == 404


def test_export_csv(client, users):
    resp = client.get("/api/admin/users/export?date_range=all_users")
    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    assert "attachment; filename=users.csv" in resp.headers["Content-Disposition"]
    lines = resp.get_data(as_text=True).strip().splitlines()
    assert lines[0] == "Name,Email,Phone,Zone,Active,Created At"
    assert len(lines) == 4
    ravi = next(line for line in lines if line.startswith("Ravi Kumar"))
    assert "Hyderabad Central" in ravi
    assert "Active" in ravi
    anita = next(line for line in lines if line.startswith("Anita Rao"))
    assert "Not Assigned" in anita
    assert "Inactive" in anita


def test_export_unsupported_type(client, users):
    resp = client.get("/api/admin/users/export?type=pdf")
    assert resp.status_code == 404
    assert resp.get_json()["message"] == "Unsupported export type"
