import logging

from flask import Response, request

from app.schemas.admin import CreateUserRequest, SetActiveRequest, UserListQuery
from app.services import users as user_service
from app.utils import (
    error,
    internal_error_response,
    not_found,
    ok,
    transactional,
    validate_query,
    validate_schema,
)

from . import admin_bp


@admin_bp.route("/users", methods=["POST"])
@validate_schema(CreateUserRequest)
def create_user():
    """Create an app user from the admin panel.
    ---
    tags:
      - Admin Users
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [firstName, lastName, email, password]
          properties:
            firstName: {type: string}
            lastName: {type: string}
            email: {type: string}
            password: {type: string, minLength: 6}
            countryCode: {type: string}
            phoneNumber: {type: string}
            active: {type: boolean}
            role: {type: string}
            zoneId: {type: string}
    responses:
      201:
        description: User created
      400:
        description: Email already taken
      422:
        description: Validation failed
    """
    try:
        with transactional("Failed to create user"):
            user = user_service.create_user(request.validated_data)
    except user_service.ValidationError as ve:
        return error(str(ve), status=400)
    except Exception as e:
        return internal_error_response(e, message="Failed to create user")
    return ok(
        {
            "id": user.id,
            "firebase_id": user.firebase_id,
            "email": user.email,
            "isActive": bool(user.active),
        },
        message="User created successfully",
        status=201,
    )


@admin_bp.route("/users", methods=["GET"])
@validate_query(UserListQuery)
def list_users():
    q = request.validated_query
    try:
        payload = user_service.list_users(q.filters(), page=q.page, limit=q.limit)
    except user_service.ValidationError as ve:
        return error(str(ve), status=400)
    except Exception as e:
        logging.error("Error listing users: %s", e, exc_info=True)
        return internal_error_response(e, message="Failed to fetch users")
    return ok(payload["data"], meta=payload["meta"])


@admin_bp.route("/users/export", methods=["GET"])
@validate_query(UserListQuery)
def export_users():
    q = request.validated_query
    if (q.type or "csv").lower() != "csv":
        return not_found("Unsupported export type")
    try:
        body = user_service.export_users_csv(q.filters())
    except user_service.ValidationError as ve:
        return error(str(ve), status=400)
    except Exception as e:
        logging.error("User export failed: %s", e, exc_info=True)
        return internal_error_response(e, message="Failed to export users")
    return Response(
        body,
        mimetype="text/csv",
        headers={"Content-Disposition": "attachment; filename=users.csv"},
    )


@admin_bp.route("/users/<user_id>", methods=["DELETE"])
def delete_user(user_id):
    try:
        with transactional("Failed to delete user"):
            deleted = user_service.delete_user(user_id)
    except Exception as e:
        return internal_error_response(e, message="Failed to delete user")
    if not deleted:
        return not_found("User not found")
    return ok(message="User deleted successfully")


@admin_bp.route("/users/<user_id>/active", methods=["POST"])
@validate_schema(SetActiveRequest)
def set_active(user_id):
    try:
        with transactional("Failed to update user status"):
            updated = user_service.set_active(user_id, request.validated_data.active)
    except Exception as e:
        return internal_error_response(e, message="Failed to update user status")
    if not updated:
        return not_found("User not found")
    return ok(message="User status updated")


@admin_bp.route("/users/<user_id>/details", methods=["GET"])
def user_details(user_id):
    details = user_service.user_details(user_id)
    if details is None:
        return not_found("User not found")
    return ok(details)
