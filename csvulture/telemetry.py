"""OpenTelemetry instrumentation — traces and metrics.

Spans wrap each solution pass and each outbound HTTP fetch. Without a
configured provider the opentelemetry API hands out no-op tracers and meters,
so instrumented code runs unchanged when tracing is disabled.

Metrics: a Histogram for solution pass duration.
"""

import logging
from functools import wraps
from typing import Any, Callable

from opentelemetry import metrics, trace

from csvulture import __version__
from csvulture.config import Settings, get_settings

logger = logging.getLogger(__name__)

# ──────────────────────────────────────────
#  Tracing setup
# ──────────────────────────────────────────

def setup_tracing(settings: Settings | None = None) -> bool:
    """Install a TracerProvider with a console or OTLP exporter. Returns True if installed."""
    settings = settings or get_settings()
    if not settings.tracing_enabled:
        logger.debug("[telemetry] tracing disabled")
        return False

    from opentelemetry.sdk.resources import Resource
    from opentelemetry.sdk.trace import TracerProvider
    from opentelemetry.sdk.trace.export import BatchSpanProcessor

    resource = Resource.create({"service.name": "csvulture", "service.version": __version__})
    provider = TracerProvider(resource=resource)

    # Exporter: console (local) or OTLP (collector)
    if settings.otel_exporter_otlp_endpoint:
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
        exporter = OTLPSpanExporter(endpoint=settings.otel_exporter_otlp_endpoint)
    else:
        from opentelemetry.sdk.trace.export import ConsoleSpanExporter
        exporter = ConsoleSpanExporter()

    provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(provider)
    logger.info("[telemetry] OpenTelemetry tracing configured")
    return True


# ──────────────────────────────────────────
#  Metrics
# ──────────────────────────────────────────

_solution_histogram = None

def _get_histogram():
    global _solution_histogram
    if _solution_histogram is None:
        meter = metrics.get_meter("csvulture.document")
        _solution_histogram = meter.create_histogram(
            "csvulture.solution.duration_ms",
            description="Solution pass duration in milliseconds",
            unit="ms",
        )
    return _solution_histogram


def record_solution_duration(duration_ms: int, component_count: int) -> None:
    _get_histogram().record(duration_ms, {"components": component_count})


# ──────────────────────────────────────────
#  Trace decorator
# ──────────────────────────────────────────

def traced(span_name: str = ""):
    """Decorator that wraps a function call in an OpenTelemetry span."""
    def decorator(func: Callable) -> Callable:
        name = span_name or f"{func.__module__}.{func.__qualname__}"

        @wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            tracer = trace.get_tracer("csvulture")
            with tracer.start_as_current_span(name):
                return func(*args, **kwargs)
        return wrapper
    return decorator
