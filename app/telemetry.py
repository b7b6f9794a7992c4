from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.flask import FlaskInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.propagate import set_global_textmap
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator

from app.version import APP_VERSION
from models import db

# request paths that would only add noise to traces
EXCLUDED_URLS = "health,metrics,apispec.json,docs"


def _exporter(app):
    if app.config.get("TESTING"):
        return ConsoleSpanExporter()
    return OTLPSpanExporter(endpoint=app.config["OTEL_EXPORTER_OTLP_ENDPOINT"])


def init_tracing(app):
    """Trace Flask requests and SQLAlchemy queries, exported over OTLP/HTTP."""
    resource = Resource.create({
        "service.name": app.config.get("OTEL_SERVICE_NAME", "jippymart-backend"),
        "service.version": APP_VERSION,
        "deployment.environment": "testing" if app.testing else ("development" if app.debug else "production"),
    })
    provider = TracerProvider(resource=resource)
    provider.add_span_processor(BatchSpanProcessor(_exporter(app)))
    trace.set_tracer_provider(provider)
    set_global_textmap(TraceContextTextMapPropagator())

    FlaskInstrumentor().instrument_app(app, excluded_urls=EXCLUDED_URLS)
    with app.app_context():
        SQLAlchemyInstrumentor().instrument(engine=db.engine)


def get_tracer(name: str):
    return trace.get_tracer(name, APP_VERSION)
