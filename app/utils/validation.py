from functools import wraps
from flask import request
from pydantic import ValidationError
from .responses import validation_error_response


def validate_schema(schema):
    """Decorator to validate request JSON against a Pydantic schema."""

    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            try:
                obj = schema(**(request.get_json(silent=True) or {}))
            except ValidationError as ve:
                return validation_error_response(ve.errors())
            request.validated_data = obj
            return fn(*args, **kwargs)
        return wrapper

    return decorator


def validate_query(schema):
    """Decorator to validate query-string arguments against a Pydantic schema."""

    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            raw = {key: value for key, value in request.args.items() if value != ""}
            try:
                obj = schema(**raw)
            except ValidationError as ve:
                return validation_error_response(ve.errors())
            request.validated_query = obj
            return fn(*args, **kwargs)
        return wrapper

    return decorator


def validate_params(schema):
    """Decorator validating query-string and JSON body together, the body wins."""

    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            raw = {key: value for key, value in request.args.items() if value != ""}
            body = request.get_json(silent=True)
            if isinstance(body, dict):
                raw.update(body)
            try:
                obj = schema(**raw)
            except ValidationError as ve:
                return validation_error_response(ve.errors())
            request.validated_data = obj
            return fn(*args, **kwargs)
        return wrapper

    return decorator
