import logging

from flask import request

from app.schemas.admin import RecalculateCommissionRequest
from app.services import commission as commission_service
from app.tasks.commission import recalculate_commissions_task
from app.utils import internal_error_response, not_found, ok, validate_params

from . import admin_bp


@admin_bp.route("/commission/total", methods=["GET"])
def total_commission():
    try:
        total = commission_service.total_admin_commission()
    except Exception as e:
        logging.error("Commission total failed: %s", e, exc_info=True)
        return internal_error_response(e, message="Failed to calculate admin commission")
    return ok({"total": total})


@admin_bp.route("/commission/orders/<order_id>", methods=["POST"])
def update_order_commission(order_id):
    try:
        commission = commission_service.update_order_commission(order_id)
    except Exception as e:
        return internal_error_response(e, message="Failed to update order commission")
    if commission is None:
        return not_found("Order not found")
    return ok({"order_id": order_id, "admin_commission": round(commission, 2)})


@admin_bp.route("/commission/recalculate", methods=["POST"])
@validate_params(RecalculateCommissionRequest)
def recalculate():
    """Queue a commission recalculation over completed orders.
    ---
    tags:
      - Admin Commission
    parameters:
      - {name: limit, in: query, type: integer}
    responses:
      202:
        description: Task queued
    """
    limit = request.validated_data.limit
    try:
        result = recalculate_commissions_task.delay(limit)
    except Exception as e:
        logging.error("Failed to queue commission recalculation: %s", e, exc_info=True)
        return internal_error_response(e, message="Failed to queue recalculation")
    return ok({"task_id": result.id}, message="Recalculation queued", status=202)
