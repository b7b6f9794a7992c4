from flask import request
from prometheus_client import Histogram, Counter
from sqlalchemy import event
import time

from models import db

# Histogram buckets for DB query durations
DB_QUERY_DURATION = Histogram(
    "db_query_duration_seconds",
    "Database query duration in seconds",
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1, 2, 5),
)

# Counter for HTTP errors
ERROR_COUNTER = Counter(
    "flask_error_total",
    "Count of HTTP responses with status >= 400",
    ["endpoint", "method", "code"],
)

CACHE_HITS = Counter(
    "response_cache_hits_total",
    "Response cache hits",
    ["namespace"],
)

CACHE_MISSES = Counter(
    "response_cache_misses_total",
    "Response cache misses, including forced refreshes",
    ["namespace"],
)

CACHE_WRITE_ERRORS = Counter(
    "response_cache_write_errors_total",
    "Failed writes to the response cache",
)


def cache_namespace(key: str) -> str:
    """Collapse a cache key to a low-cardinality label."""
    for namespace in (
        "product_feed",
        "vendor_products",
        "nearest_restaurants",
        "menu_items",
        "categories",
        "mobile_settings",
        "delivery_charge_settings",
    ):
        if key.startswith(namespace):
            return namespace
    return "other"


def init_app(app):
    """Attach metric hooks to the app and database."""

    with app.app_context():
        engine = db.engine

        @event.listens_for(engine, "before_cursor_execute")
        def before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
            conn.info.setdefault("_query_start_time", []).append(time.time())

        @event.listens_for(engine, "after_cursor_execute")
        def after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
            starts = conn.info.get("_query_start_time")
            if starts:
                DB_QUERY_DURATION.observe(time.time() - starts.pop(-1))

    @app.after_request
    def track_errors(resp):
        if resp.status_code >= 400:
            endpoint = request.endpoint or "unknown"
            ERROR_COUNTER.labels(endpoint, request.method, resp.status_code).inc()
        return resp
