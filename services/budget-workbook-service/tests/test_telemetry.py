import logging

import pytest
from fastapi import FastAPI
from opentelemetry.sdk.trace import TracerProvider

import shared.observability.telemetry as telemetry
from shared.observability import bind_request_context, ensure_request_id, reset_request_context


def _record() -> logging.LogRecord:
    return logging.LogRecord("budget", logging.INFO, __file__, 1, {"event": "budget_exported"}, None, None)


def test_log_filter_adds_service_and_request_id():
    token = bind_request_context("req-123")
    try:
        record = _record()
        assert telemetry._TelemetryLogFilter("budget-workbook-service", traces_enabled=False).filter(record)
    finally:
        reset_request_context(token)

    assert record.service_name == "budget-workbook-service"
    assert record.request_id == "req-123"
    assert record.trace_id is None
    assert record.span_id is None


def test_log_filter_injects_active_span_ids_when_tracing():
    tracer = TracerProvider().get_tracer("budget-workbook-tests")
    record = _record()

    with tracer.start_as_current_span("export") as span:
        telemetry._TelemetryLogFilter("budget-workbook-service", traces_enabled=True).filter(record)
        context = span.get_span_context()

    assert record.trace_id == format(context.trace_id, "032x")
    assert record.span_id == format(context.span_id, "016x")


def test_log_filter_skips_invalid_span_context():
    record = _record()

    telemetry._TelemetryLogFilter("budget-workbook-service", traces_enabled=True).filter(record)

    assert record.trace_id is None


def test_ensure_request_id_generates_prefixed_uuid(monkeypatch):
    monkeypatch.setenv("REQUEST_ID_PREFIX", "wb-")

    assert ensure_request_id(None).startswith("wb-")


class _RecordingInstrumentor:
    instrumented_apps: list = []
    instrument_calls: list = []

    @classmethod
    def instrument_app(cls, app):
        cls.instrumented_apps.append(app)

    def instrument(self, **kwargs):
        self.instrument_calls.append(kwargs)


@pytest.fixture
def recorded_tracing(monkeypatch):
    calls = []
    _RecordingInstrumentor.instrumented_apps = []
    _RecordingInstrumentor.instrument_calls = []
    monkeypatch.setattr(telemetry, "_configure_tracing", lambda name, console: calls.append((name, console)))
    monkeypatch.setattr(telemetry, "FastAPIInstrumentor", _RecordingInstrumentor)
    monkeypatch.setattr(telemetry, "LoggingInstrumentor", _RecordingInstrumentor)
    return calls


def test_setup_telemetry_enables_tracing_from_environment(monkeypatch, recorded_tracing):
    monkeypatch.setenv("ENABLE_TELEMETRY", "true")
    monkeypatch.setenv("OTEL_CONSOLE_EXPORT", "1")
    monkeypatch.setenv("OTEL_SERVICE_NAME", "workbooks")
    app = FastAPI()

    telemetry.setup_telemetry(app, service_name="budget-workbook-service")

    assert recorded_tracing == [("workbooks", True)]
    assert _RecordingInstrumentor.instrumented_apps == [app]
    assert _RecordingInstrumentor.instrument_calls == [{"set_logging_format": False}]


def test_setup_telemetry_leaves_tracing_off_by_default(monkeypatch, recorded_tracing):
    monkeypatch.delenv("ENABLE_TELEMETRY", raising=False)

    telemetry.setup_telemetry(FastAPI(), service_name="budget-workbook-service")

    assert recorded_tracing == []
    assert _RecordingInstrumentor.instrumented_apps == []
