import logging

from flask import jsonify, request

from app.services import payouts as payout_service
from app.services.payouts import TableParams
from app.services.vendors import vendor_details
from app.utils import internal_error_response, not_found, ok

from . import admin_bp


def _table(listing, failure_message, owner_arg):
    params = TableParams.from_args(request.args)
    try:
        payload = listing(params, request.args.get(owner_arg) or None)
    except Exception as e:
        logging.error("%s: %s", failure_message, e, exc_info=True)
        return internal_error_response(e, message=failure_message)
    return jsonify(payload), 200


@admin_bp.route("/payouts/restaurants", methods=["GET"])
def restaurant_payouts():
    """Successful restaurant payouts in DataTables shape.
    ---
    tags:
      - Admin Payouts
    parameters:
      - {name: vendor_id, in: query, type: string}
      - {name: draw, in: query, type: integer}
      - {name: start, in: query, type: integer}
      - {name: length, in: query, type: integer}
    responses:
      200:
        description: draw, recordsTotal, recordsFiltered and data
    """
    return _table(payout_service.restaurant_payouts, "Failed to fetch restaurant payouts", "vendor_id")


@admin_bp.route("/payouts/drivers", methods=["GET"])
def driver_payouts():
    return _table(payout_service.driver_payouts, "Failed to fetch driver payouts", "driver_id")


@admin_bp.route("/transactions", methods=["GET"])
def wallet_transactions():
    return _table(payout_service.wallet_transactions, "Failed to fetch wallet transactions", "user_id")


@admin_bp.route("/vendors/<vendor_id>/details", methods=["GET"])
def vendor_detail(vendor_id):
    details = vendor_details(vendor_id)
    if details is None:
        return not_found("Vendor not found")
    return ok(details)
