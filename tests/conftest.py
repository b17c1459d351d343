"""Shared fixtures: an in-memory tracer and fake collaborator HTTP sessions."""

from unittest.mock import MagicMock

import pytest
from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from cep_weather.observability import configure_propagation

# The global tracer provider can only be set once per process.
_exporter = InMemorySpanExporter()
_provider = TracerProvider()
_provider.add_span_processor(SimpleSpanProcessor(_exporter))
trace.set_tracer_provider(_provider)
configure_propagation()


@pytest.fixture
def spans():
    """Finished spans recorded during the test."""
    _exporter.clear()
    yield _exporter
    _exporter.clear()


def make_response(status_code: int, body: str, content_type: str = "application/json"):
    """Build a stand-in for requests.Response."""
    resp = MagicMock()
    resp.status_code = status_code
    resp.content = body.encode("utf-8")
    resp.text = body
    resp.headers = {"content-type": content_type}
    return resp


def viacep_get(url, timeout=None):
    cep = url.split("/ws/")[1].split("/json/")[0]
    if cep == "89053300":
        return make_response(200, '{"localidade": "Blumenau"}')
    if cep == "00000000":
        return make_response(200, '{"erro": "true"}')
    if cep == "89053301":
        return make_response(200, '{"localidade": "UnknownCity"}')
    return make_response(404, '{"erro": "true"}')


def weatherapi_get(url, params=None, timeout=None):
    if params["q"] == "Blumenau":
        return make_response(200, '{"current": {"temp_c": 17.1}}')
    return make_response(400, '{"error": {"code": 1006, "message": "No matching location found."}}')


@pytest.fixture
def viacep_session():
    """Session answering like ViaCEP for a handful of known codes."""
    session = MagicMock()
    session.get.side_effect = viacep_get
    return session


@pytest.fixture
def weatherapi_session():
    """Session answering like WeatherAPI; only Blumenau is known."""
    session = MagicMock()
    session.get.side_effect = weatherapi_get
    return session


def spans_by_name(exporter):
    return {span.name: span for span in exporter.get_finished_spans()}
