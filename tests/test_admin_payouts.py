from datetime import datetime

import pytest

from models import db
from models.user import AppUser
from models.wallet import DriverPayout, Payout, WalletTransaction


@pytest.fixture
def payouts(make_vendor):
    make_vendor("v1", title="Spice Hub")
    db.session.add(AppUser(firebase_id="drv_1", first_name="Kiran", last_name="Das",
                           email="kiran@example.com", password="x", role="driver"))
    db.session.add_all([
        Payout(id="po1", vendor_id="v1", amount=100, note="weekly", payment_status="Success",
               paid_date=datetime(2025, 1, 5, 15, 4, 5)),
        Payout(id="po2", vendor_id="gone", amount=50, note="bonus", payment_status="Success",
               paid_date=datetime(2025, 1, 6, 9, 0, 0)),
        Payout(id="po3", vendor_id="v1", amount=75, payment_status="Pending",
               paid_date=datetime(2025, 1, 7)),
        DriverPayout(id="dp1", driver_id="drv_1", amount=40, payment_status="Success",
                     paid_date=datetime(2025, 2, 1)),
        DriverPayout(id="dp2", driver_id="drv_1", amount=30, payment_status="Rejected"),
        WalletTransaction(id="w1", user_id="drv_1", amount=20, transaction_user="driver",
                          date=datetime(2025, 3, 1), note="tip"),
        WalletTransaction(id="w2", user_id="someone", amount=10, date=datetime(2025, 3, 2)),
    ])
    db.session.commit()


def test_restaurant_payouts_only_successful(client, payouts):
    body = client.get("/api/admin/payouts/restaurants?draw=3").get_json()
    assert body["draw"] == 3
    assert body["recordsTotal"] == 2
    assert [r["id"] for r in body["data"]] == ["po2", "po1"]
    names = {r["id"]: r["restaurantName"] for r in body["data"]}
    assert names == {"po1": "Spice Hub", "po2": "Unknown"}
    assert body["data"][1]["formattedDate"] == "Sun Jan 05 2025 3:04:05 PM"


def test_restaurant_payouts_search_and_sort(client, payouts):
    search = client.get("/api/admin/payouts/restaurants?search[value]=SPICE").get_json()
    assert [r["id"] for r in search["data"]] == ["po1"]
    assert search["recordsFiltered"] == 1

    by_amount = client.get(
        "/api/admin/payouts/restaurants?order[0][column]=2&order[0][dir]=asc"
    ).get_json()
    assert [r["amount"] for r in by_amount["data"]] == [50.0, 100.0]


def test_restaurant_payouts_paging(client, payouts):
    page = client.get("/api/admin/payouts/restaurants?start=1&length=1").get_json()
    assert [r["id"] for r in page["data"]] == ["po1"]
    assert page["recordsTotal"] == 2

    everything = client.get("/api/admin/payouts/restaurants?length=-1").get_json()
    assert len(everything["data"]) == 2


def test_restaurant_payouts_for_one_vendor(client, payouts):
    body = client.get("/api/admin/payouts/restaurants?vendor_id=v1").get_json()
    assert [r["id"] for r in body["data"]] == ["po1"]


def test_driver_payouts(client, payouts):
    body = client.get("/api/admin/payouts/drivers").get_json()
    assert [r["id"] for r in body["data"]] == ["dp1"]
    assert body["data"][0]["driverName"] == "Kiran Das"


def test_wallet_transactions(client, payouts):
    body = client.get("/api/admin/transactions").get_json()
    by_id = {r["id"]: r for r in body["data"]}
    assert by_id["w1"]["userName"] == "Kiran Das"
    assert by_id["w1"]["userType"] == "driver"
    assert by_id["w2"]["userName"] == "Unknown"
    assert by_id["w2"]["userType"] == "user"

    mine = client.get("/api/admin/transactions?user_id=drv_1").get_json()
    assert [r["id"] for r in mine["data"]] == ["w1"]


def test_vendor_details(client, payouts):
    data = client.get("/api/admin/vendors/v1/details").get_json()["data"]
    assert data["title"] == "Spice Hub"
    assert client.get("/api/admin/vendors/none/details").status_code == 404
