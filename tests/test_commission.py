import json

import pytest

from app.services.commission import (
    calculate_from_settings,
    order_amount,
    resolve_commission,
    select_commission_settings,
    stored_commission,
    total_admin_commission,
)
from models import db
from models.order import RestaurantOrder
from models.setting import Setting

GLOBAL_PERCENT = json.dumps({"isEnabled": True, "commissionType": "Percent", "fix_commission": "10"})


def test_order_amount_skips_blank_fields():
    assert order_amount({"ToPay": "", "toPayAmount": "null", "grandTotal": "250"}) == 250.0


def test_order_amount_decodes_json_encoded_numbers():
    assert order_amount({"total": '"300"'}) == 300.0


def test_order_amount_from_calculated_charges_then_products():
    assert order_amount({"calculatedCharges": json.dumps({"grandTotal": 410})}) == 410.0
    assert order_amount({"products": json.dumps({"total": 99})}) == 99.0
    assert order_amount({}) == 0.0


def test_stored_commission_ignores_placeholders():
    assert stored_commission({"adminCommission": "0"}) == 0.0
    assert stored_commission({"adminCommission": "null"}) == 0.0
    assert stored_commission({"adminCommission": "12.5"}) == 12.5


def test_whole_rate_in_band_is_a_percentage():
    assert resolve_commission({"total": "200", "adminCommission": "20"}) == pytest.approx(40.0)


def test_plausible_stored_amount_is_kept():
    assert resolve_commission({"total": "1000", "adminCommission": "50"}) == 50.0


def test_implausible_stored_amount_falls_back_to_settings():
    order = {"total": "200", "adminCommission": "500"}
    assert resolve_commission(order, None, GLOBAL_PERCENT) == pytest.approx(20.0)


def test_zero_amount_returns_stored_value():
    assert resolve_commission({"total": "0", "adminCommission": "15"}) == 15.0


def test_vendor_settings_win_even_when_disabled():
    vendor = json.dumps({"isEnabled": False, "fix_commission": "30"})
    assert select_commission_settings(vendor, GLOBAL_PERCENT) == {"isEnabled": False, "fix_commission": "30"}
    assert resolve_commission({"total": "200"}, vendor, GLOBAL_PERCENT) == 0.0


def test_vendor_settings_without_flag_defer_to_global():
    vendor = json.dumps({"fix_commission": "30"})
    assert select_commission_settings(vendor, GLOBAL_PERCENT)["fix_commission"] == "10"
    assert select_commission_settings(None, None) is None


def test_fixed_commission_and_string_flags():
    settings = {"isEnabled": "true", "commissionType": "Fixed", "fix_commission": "25"}
    assert calculate_from_settings(500, settings) == 25.0
    assert calculate_from_settings(500, {"isEnabled": "0", "fix_commission": "25"}) == 0.0
    assert calculate_from_settings(500, None) == 0.0


@pytest.mark.parametrize("flag", ["nan", "inf", "-Infinity"])
def test_non_finite_enabled_flag_disables_commission(flag):
    settings = json.dumps({"isEnabled": flag, "commissionType": "Fixed", "fix_commission": "25"})
    assert resolve_commission({"total": "200"}, settings, None) == 0.0


def test_total_admin_commission_counts_completed_orders(app):
    Setting.update_by_document("AdminCommission", json.loads(GLOBAL_PERCENT))
    db.session.add_all([
        RestaurantOrder(id="o1", status="Order Completed", total="200", admin_commission="20"),
        RestaurantOrder(id="o2", status="Order Completed", grand_total="150"),
        RestaurantOrder(id="o3", status="Order Placed", total="999", admin_commission="20"),
    ])
    db.session.commit()
    # o1: 20% of 200, o2: global 10% of 150
    assert total_admin_commission() == 55.0
