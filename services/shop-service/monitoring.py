"""Monitoring and observability setup.

Tracing and metrics go through the OpenTelemetry API. Exporters are only
installed when OTEL_ENABLED is set; otherwise the global no-op providers
stay in place and every counter and span below is free to call.
"""
import logging
from opentelemetry import trace, metrics
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter

from config import OTEL_ENABLED, OTEL_EXPORTER_OTLP_ENDPOINT, SERVICE_NAME, ENVIRONMENT

logger = logging.getLogger(__name__)


def init_tracing() -> None:
    """Install a tracer provider that exports spans over OTLP."""
    resource = Resource.create({
        "service.name": SERVICE_NAME,
        "deployment.environment": ENVIRONMENT
    })

    tracer_provider = TracerProvider(resource=resource)
    otlp_span_exporter = OTLPSpanExporter(
        endpoint=OTEL_EXPORTER_OTLP_ENDPOINT,
        insecure=True
    )
    tracer_provider.add_span_processor(BatchSpanProcessor(otlp_span_exporter))
    trace.set_tracer_provider(tracer_provider)

    logger.info(f"Tracing initialized with endpoint: {OTEL_EXPORTER_OTLP_ENDPOINT}")


def init_metrics() -> None:
    """Install a meter provider that exports metrics over OTLP."""
    resource = Resource.create({"service.name": SERVICE_NAME})

    otlp_metric_exporter = OTLPMetricExporter(
        endpoint=OTEL_EXPORTER_OTLP_ENDPOINT,
        insecure=True
    )
    otlp_metric_reader = PeriodicExportingMetricReader(
        otlp_metric_exporter,
        export_interval_millis=5000
    )

    meter_provider = MeterProvider(
        resource=resource,
        metric_readers=[otlp_metric_reader]
    )
    metrics.set_meter_provider(meter_provider)

    logger.info("Metrics initialized with OTLP exporter")


if OTEL_ENABLED:
    init_tracing()
    init_metrics()

meter = metrics.get_meter(__name__)

# Catalog metrics
product_additions_counter = meter.create_counter(
    "shop.products.added",
    description="Total number of products added to the catalog",
    unit="1"
)

product_removals_counter = meter.create_counter(
    "shop.products.removed",
    description="Total number of product removal requests",
    unit="1"
)

image_uploads_counter = meter.create_counter(
    "shop.images.uploads",
    description="Total number of product images uploaded by storage backend",
    unit="1"
)

# Cart metrics
cart_updates_counter = meter.create_counter(
    "shop.cart.updates",
    description="Cart slot increments and decrements",
    unit="1"
)

# Account metrics
signups_counter = meter.create_counter(
    "shop.users.signups",
    description="Total number of signup attempts by outcome",
    unit="1"
)

# Security monitoring metrics
auth_failures_counter = meter.create_counter(
    "shop.auth.failures",
    description="Total number of authentication failures",
    unit="1"
)

auth_attempts_counter = meter.create_counter(
    "shop.auth.attempts",
    description="Total number of authentication attempts",
    unit="1"
)
