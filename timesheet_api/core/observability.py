"""OpenTelemetry providers and the workflow instruments.

Exporters are attached only when an OTLP endpoint is configured.
"""

from typing import Optional

from opentelemetry import metrics, trace
from opentelemetry.exporter.otlp.proto.http.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from .config import settings
from .logging import SERVICE_NAME

WORKFLOW_SCOPE = "timesheet_api.workflow"


def build_resource() -> Resource:
    return Resource.create(
        {
            "service.name": SERVICE_NAME,
            "service.namespace": "timesheets",
            "deployment.environment": settings.env,
        }
    )


def configure_observability(otlp_endpoint: Optional[str] = None) -> None:
    endpoint = otlp_endpoint or settings.otlp_endpoint
    resource = build_resource()

    tracer_provider = TracerProvider(resource=resource)
    metric_readers = []
    if endpoint:
        tracer_provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint)))
        metric_readers.append(PeriodicExportingMetricReader(OTLPMetricExporter(endpoint=endpoint)))

    trace.set_tracer_provider(tracer_provider)
    metrics.set_meter_provider(MeterProvider(resource=resource, metric_readers=metric_readers))


workflow_meter = metrics.get_meter(WORKFLOW_SCOPE)
workflow_transitions = workflow_meter.create_counter(
    "timesheet.workflow.transitions",
    unit="1",
    description="Week, task, invoice and payment evidence state changes",
)


def record_workflow_event(event: str, **attributes: str) -> None:
    """Count a state change and note it on the active request span."""
    labels = {"event": event, **attributes}
    workflow_transitions.add(1, labels)
    span = trace.get_current_span()
    if span.is_recording():
        span.add_event(event, labels)
