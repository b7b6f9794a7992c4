import logging

from flask import Blueprint, current_app, jsonify, request
from flask_limiter.util import get_remote_address

from app.schemas.search import (
    FeaturedMartItemsQuery,
    MartCategorySearchQuery,
    MartItemSearchQuery,
    UnifiedSearchQuery,
)
from app.services import search as search_service
from app.utils import internal_error_response, validate_query
from app.version import API_PREFIX
from extensions import limiter

search_bp = Blueprint("search", __name__, url_prefix=f"{API_PREFIX}/search")


@search_bp.route("/unified", methods=["GET"])
@limiter.limit(
    lambda: current_app.config["SEARCH_LIMIT_PER_IP"],
    key_func=get_remote_address,
    error_message="Too many search requests from this IP",
)
@validate_query(UnifiedSearchQuery)
def unified():
    """Restaurants, products and categories matching a term in one zone.
    ---
    tags:
      - Search
    parameters:
      - {name: query, in: query, type: string, required: true}
      - {name: zone_id, in: query, type: string, required: true}
      - {name: latitude, in: query, type: number}
      - {name: longitude, in: query, type: number}
      - {name: limit, in: query, type: integer}
      - {name: page, in: query, type: integer}
    responses:
      200:
        description: Grouped results with meta
      422:
        description: Validation failed
    """
    q = request.validated_query
    try:
        payload = search_service.unified_search(
            q.query, q.zone_id, q.latitude, q.longitude, limit=q.limit, page=q.page
        )
    except Exception as e:
        logging.error("Unified search failed: %s", e, exc_info=True)
        return internal_error_response(e, message="Failed to perform search")
    return jsonify(payload), 200


@search_bp.route("/categories", methods=["GET"])
@limiter.limit(
    lambda: current_app.config["SEARCH_LIMIT_PER_IP"],
    key_func=get_remote_address,
    error_message="Too many search requests from this IP",
)
@validate_query(MartCategorySearchQuery)
def mart_categories():
    q = request.validated_query
    return jsonify(search_service.search_mart_categories(q.q, q.page, q.limit)), 200


@search_bp.route("/mart-items", methods=["GET"])
@limiter.limit(
    lambda: current_app.config["SEARCH_LIMIT_PER_IP"],
    key_func=get_remote_address,
    error_message="Too many search requests from this IP",
)
@validate_query(MartItemSearchQuery)
def mart_items():
    q = request.validated_query
    try:
        payload = search_service.search_mart_items(q.filters(), page=q.page, limit=q.limit)
    except Exception as e:
        logging.error("Mart search failed: %s", e, exc_info=True)
        return internal_error_response(e, message="Error searching mart items")
    return jsonify(payload), 200


@search_bp.route("/mart-items/featured", methods=["GET"])
@validate_query(FeaturedMartItemsQuery)
def featured_mart_items():
    q = request.validated_query
    try:
        payload = search_service.featured_mart_items(q.type, q.limit)
    except Exception as e:
        logging.error("Featured mart items failed: %s", e, exc_info=True)
        payload = {"success": True, "message": "Fallback featured items", "data": [], "fallback": True}
    return jsonify(payload), 200


@search_bp.route("/health", methods=["GET"])
def health():
    status = "healthy" if search_service.database_healthy() else "unhealthy"
    return jsonify({"status": status}), 200
