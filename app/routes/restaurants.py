import logging

from flask import Blueprint, current_app, jsonify, request

from app.cache import cached_response, refresh_requested
from app.cache.keys import nearest_restaurants_key
from app.schemas.catalog import NearestRestaurantsQuery, RestaurantSearchQuery
from app.services import restaurants as restaurant_service
from app.utils import internal_error_response, not_found, ok, validate_query
from app.version import API_PREFIX

restaurants_bp = Blueprint("restaurants", __name__, url_prefix=f"{API_PREFIX}/restaurants")


# ------------------- Nearest restaurants -------------------
@restaurants_bp.route("/nearest", methods=["GET"])
@validate_query(NearestRestaurantsQuery)
def nearest():
    """Restaurants of a zone around a point, open ones first.
    ---
    tags:
      - Restaurants
    parameters:
      - {name: zone_id, in: query, type: string, required: true}
      - {name: latitude, in: query, type: number, required: true}
      - {name: longitude, in: query, type: number, required: true}
      - {name: radius, in: query, type: number}
      - {name: is_dining, in: query, type: boolean}
      - {name: filter, in: query, type: string, enum: [distance, rating]}
      - {name: refresh, in: query, type: boolean}
    responses:
      200:
        description: Restaurant list with count and openCount
      422:
        description: Validation failed
    """
    q = request.validated_query
    key = nearest_restaurants_key(q.zone_id, q.latitude, q.longitude, q.radius, q.is_dining, q.filter)
    try:
        payload = cached_response(
            key,
            current_app.config["NEAREST_CACHE_TTL"],
            lambda: restaurant_service.nearest_restaurants(
                q.zone_id, q.latitude, q.longitude,
                radius_km=q.radius, is_dining=q.is_dining, filter_by=q.filter,
            ),
            refresh=refresh_requested(),
        )
    except Exception as e:
        logging.error("Nearest restaurants failed: %s", e, exc_info=True)
        return internal_error_response(e, message="Failed to fetch nearest restaurants")
    return jsonify(payload), 200


# ------------------- Search -------------------
@restaurants_bp.route("/search", methods=["GET"])
@validate_query(RestaurantSearchQuery)
def search():
    q = request.validated_query
    try:
        result = restaurant_service.search_restaurants(q.query, q.zone_id, q.latitude, q.longitude)
    except Exception as e:
        logging.error("Search restaurants failed: %s", e, exc_info=True)
        return internal_error_response(e, message="Failed to search restaurants")
    return ok(**result)


# ------------------- By zone -------------------
@restaurants_bp.route("/by-zone/<zone_id>", methods=["GET"])
def by_zone(zone_id):
    try:
        result = restaurant_service.restaurants_by_zone(zone_id)
    except Exception as e:
        logging.error("Restaurants by zone failed: %s", e, exc_info=True)
        return internal_error_response(e, message="Failed to fetch restaurants")
    return ok(**result)


@restaurants_bp.route("/<restaurant_id>", methods=["GET"])
def show(restaurant_id):
    try:
        restaurant = restaurant_service.get_restaurant(restaurant_id)
    except Exception as e:
        logging.error("Get restaurant failed: %s", e, exc_info=True)
        return internal_error_response(e, message="Failed to fetch restaurant")
    if restaurant is None:
        return not_found("Restaurant not found")
    return ok(restaurant)
