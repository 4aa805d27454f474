from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from timesheet_api.core.observability import build_resource, record_workflow_event


def test_transition_is_noted_on_active_span():
    exporter = InMemorySpanExporter()
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(exporter))

    with provider.get_tracer("tests").start_as_current_span("review"):
        record_workflow_event("task_reviewed", status="approved")

    (span,) = exporter.get_finished_spans()
    assert span.events[0].name == "task_reviewed"
    assert dict(span.events[0].attributes) == {"event": "task_reviewed", "status": "approved"}


def test_transition_without_span_is_counted_only():
    record_workflow_event("week_created")


def test_resource_names_service():
    assert build_resource().attributes["service.name"] == "timesheet-api"
