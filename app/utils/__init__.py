from .responses import (
    ok,
    error,
    not_found,
    internal_error_response,
    validation_error_response,
)
from .validation import validate_schema, validate_query, validate_params
from .db import transactional
from .coerce import (
    coerce_boolean,
    nullable_bool,
    numeric_string,
    safe_decode,
    string_or_null,
)

__all__ = [
    'ok',
    'error',
    'not_found',
    'internal_error_response',
    'validation_error_response',
    'validate_schema',
    'validate_query',
    'validate_params',
    'transactional',
    'coerce_boolean',
    'nullable_bool',
    'numeric_string',
    'safe_decode',
    'string_or_null',
]
