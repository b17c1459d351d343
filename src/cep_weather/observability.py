"""
OpenTelemetry observability setup for the CEP weather services.

Key Features:
- OTLP/HTTP span export with service resource attributes
- Root SERVER span per request, continued from the caller's trace headers
- W3C Trace Context + Baggage propagation across the service hop
"""

import logging
from contextlib import contextmanager
from typing import Dict, Optional

from opentelemetry import trace, context
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.resources import Resource, SERVICE_NAME, SERVICE_VERSION
from opentelemetry.trace import Status, StatusCode, SpanKind
from opentelemetry.propagate import set_global_textmap, extract, inject
from opentelemetry.propagators.composite import CompositePropagator
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator
from opentelemetry.baggage.propagation import W3CBaggagePropagator

from cep_weather import SERVICE_VERSION as CEP_WEATHER_VERSION

logger = logging.getLogger(__name__)


def _get_otlp_exporter(endpoint: str):
    """Get HTTP OTLP exporter."""
    from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
    if not endpoint.endswith("/v1/traces"):
        endpoint = endpoint.rstrip("/") + "/v1/traces"
    return OTLPSpanExporter(endpoint=endpoint)


def configure_propagation() -> None:
    """Use W3C Trace Context and W3C Baggage for inject/extract."""
    set_global_textmap(CompositePropagator([
        TraceContextTextMapPropagator(),
        W3CBaggagePropagator(),
    ]))


def setup_observability(service_name: str, otlp_endpoint: str) -> TracerProvider:
    """
    Set up OpenTelemetry tracing for one service.

    Call this ONCE at service startup. The returned provider must be shut
    down when the server stops so batched spans get flushed.
    """
    logger.info("Setting up OpenTelemetry observability")
    logger.info(f"  Service: {service_name}")
    logger.info(f"  OTLP Endpoint: {otlp_endpoint}")

    resource = Resource(attributes={
        SERVICE_NAME: service_name,
        SERVICE_VERSION: CEP_WEATHER_VERSION,
    })

    tracer_provider = TracerProvider(resource=resource)
    tracer_provider.add_span_processor(
        BatchSpanProcessor(_get_otlp_exporter(otlp_endpoint))
    )
    trace.set_tracer_provider(tracer_provider)

    configure_propagation()
    return tracer_provider


_tracer: Optional[trace.Tracer] = None
TRACER_NAME = "cep_weather"


def get_tracer() -> trace.Tracer:
    """Get tracer for creating manual spans."""
    global _tracer
    if _tracer is None:
        _tracer = trace.get_tracer(TRACER_NAME, CEP_WEATHER_VERSION)
    return _tracer


def record_span_error(span, error: BaseException) -> None:
    """Mark the span as failed and attach the exception as a span event."""
    span.set_status(Status(StatusCode.ERROR, str(error)))
    span.record_exception(error)


def inject_trace_headers(
    headers: Dict[str, str],
    ctx: Optional[context.Context] = None,
) -> Dict[str, str]:
    """
    Write traceparent/tracestate and baggage for `ctx` into `headers`.

    Uses the current context when `ctx` is None. Returns the same dict.
    """
    inject(headers, context=ctx)
    return headers


@contextmanager
def trace_context_from_headers(headers: Dict[str, str]):
    """
    Activate trace context from HTTP headers.

    Use this to connect to incoming distributed trace.
    """
    ctx = extract(headers)
    token = context.attach(ctx)
    try:
        yield ctx
    finally:
        context.detach(token)


def create_tracing_middleware(span_name: str):
    """
    Create Starlette middleware that wraps all requests in a root tracing span.

    This middleware:
    1. Continues the caller's trace from the incoming traceparent header
    2. Opens a SERVER span before the route handler runs
    3. Drains the response body inside the span, so the span ends only
       after the full response has been produced

    Usage:
        app.add_middleware(BaseHTTPMiddleware, dispatch=create_tracing_middleware("weather-api-http-request"))
    """
    from starlette.requests import Request
    from starlette.responses import Response

    async def tracing_middleware(request: Request, call_next):
        tracer = get_tracer()

        with trace_context_from_headers(dict(request.headers)):
            with tracer.start_as_current_span(
                span_name,
                kind=SpanKind.SERVER,
                attributes={
                    "http.method": request.method,
                    "http.target": request.url.path,
                },
            ) as span:
                try:
                    response = await call_next(request)

                    response_body = b""
                    async for chunk in response.body_iterator:
                        response_body += chunk

                    span.set_attribute("http.status_code", response.status_code)
                    if response.status_code >= 500:
                        span.set_status(Status(StatusCode.ERROR))
                    else:
                        span.set_status(Status(StatusCode.OK))

                    return Response(
                        content=response_body,
                        status_code=response.status_code,
                        headers=dict(response.headers),
                        media_type=response.media_type,
                    )

                except Exception as e:
                    record_span_error(span, e)
                    raise

    return tracing_middleware
