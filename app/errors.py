import logging
from flask import Blueprint
from werkzeug.exceptions import HTTPException
from app.utils.responses import error, internal_error_response

errors_bp = Blueprint("errors_bp", __name__)

_HTTP_MESSAGES = {
    404: "Endpoint not found",
    405: "Method not allowed",
}


@errors_bp.app_errorhandler(HTTPException)
def handle_http_exception(e):
    if e.code == 429:
        return error(f"Rate limit exceeded: {e.description}", status=429)
    msg = _HTTP_MESSAGES.get(e.code) or e.description or getattr(e, "name", "HTTP Error")
    return error(msg, status=e.code)


@errors_bp.app_errorhandler(Exception)
def handle_unexpected_exception(e):
    logging.exception("Unhandled exception")
    return internal_error_response(e)
