from flask import jsonify, current_app


def ok(data=None, message=None, status=200, **extra):
    payload = {"success": True}
    if message is not None:
        payload["message"] = message
    if data is not None:
        payload["data"] = data
    payload.update(extra)
    return jsonify(payload), status


def error(message, status=400, detail=None, errors=None):
    payload = {"success": False, "message": message}
    if detail is not None:
        payload["error"] = detail
    if errors is not None:
        payload["errors"] = errors
    return jsonify(payload), status


def not_found(message="Resource not found"):
    return error(message, status=404)


def validation_error_response(errors, message="Validation failed"):
    """Convert pydantic error entries into a field -> messages mapping."""
    fields = {}
    for entry in errors or []:
        loc = [str(part) for part in entry.get("loc", ()) if part != "__root__"]
        field = ".".join(loc) or "non_field_errors"
        fields.setdefault(field, []).append(entry.get("msg", "Invalid value"))
    return error(message, status=422, errors=fields)


def internal_error_response(exc=None, message="An unexpected error occurred, please try again later"):
    detail = None
    if exc is not None and current_app.config.get("EXPOSE_ERROR_DETAILS"):
        detail = str(exc)
    return error(message, status=500, detail=detail)
