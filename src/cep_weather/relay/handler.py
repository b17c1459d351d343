import logging
from typing import Optional

import requests
from opentelemetry.trace import SpanKind
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.responses import Response

from cep_weather.errors import (
    CepWeatherError,
    InvalidRequestBodyError,
    RelayTransportError,
    ZipcodeValidationError,
)
from cep_weather.observability import get_tracer, inject_trace_headers, record_span_error
from cep_weather.responses import error_response
from cep_weather.schemas import CepInput
from cep_weather.validator import is_valid_input_cep

logger = logging.getLogger(__name__)


class InputRelay:
    """
    Handler behind `POST /` of the input service.

    Forwards a validated CEP to the enrichment service and hands its status
    code and body back to the caller untouched.
    """

    def __init__(
        self,
        downstream_url: str,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ):
        self.downstream_url = downstream_url
        self.session = session or requests.Session()
        self.timeout = timeout

    async def handle(self, request: Request) -> Response:
        tracer = get_tracer()
        with tracer.start_as_current_span(
            "get-weather-handler",
            record_exception=False,
            set_status_on_exception=False,
        ) as span:
            try:
                cep = await self._read_cep(request)
                span.set_attribute("cep", cep)
                return await self._forward(cep)
            except CepWeatherError as e:
                if e.status_code >= 500:
                    record_span_error(span, e)
                else:
                    span.set_attribute("error.message", e.client_message)
                return error_response(e)

    async def _read_cep(self, request: Request) -> str:
        try:
            payload = CepInput.model_validate_json(await request.body())
        except ValidationError as e:
            logger.info("Invalid request body: %s", e)
            raise InvalidRequestBodyError(str(e)) from e

        if not is_valid_input_cep(payload.cep):
            raise ZipcodeValidationError(payload.cep)
        return payload.cep

    async def _forward(self, cep: str) -> Response:
        with get_tracer().start_as_current_span(
            "call-service-b",
            kind=SpanKind.CLIENT,
            attributes={"http.method": "GET", "http.url": self.downstream_url},
            record_exception=False,
            set_status_on_exception=False,
        ) as span:
            # Injected from inside the client span so the enrichment
            # service's server span becomes its child.
            headers = inject_trace_headers({})
            try:
                resp = await run_in_threadpool(
                    self.session.get,
                    self.downstream_url,
                    params={"cep": cep},
                    headers=headers,
                    timeout=self.timeout,
                )
            except requests.RequestException as e:
                logger.error("Call to enrichment service failed: %s", e)
                record_span_error(span, e)
                raise RelayTransportError(e) from e

            span.set_attribute("http.status_code", resp.status_code)
            logger.debug("Enrichment service answered %s: %s", resp.status_code, resp.text)

            content_type = resp.headers.get("content-type")
            return Response(
                content=resp.content,
                status_code=resp.status_code,
                headers={"content-type": content_type} if content_type else None,
            )
