import logging
from typing import Optional

from opentelemetry import context
from opentelemetry.context import Context
from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from cep_weather.errors import CepWeatherError, EncodingError, ZipcodeValidationError
from cep_weather.observability import get_tracer, record_span_error
from cep_weather.providers import LocalityResolver, WeatherLookup
from cep_weather.responses import error_response
from cep_weather.schemas import WeatherResponse
from cep_weather.validator import is_valid_cep

logger = logging.getLogger(__name__)


class WeatherOrchestrator:
    """
    Validate -> resolve -> lookup pipeline behind `GET /weather`.

    Each stage exits early with its own error; the collaborators are given
    at construction time.
    """

    def __init__(self, resolver: LocalityResolver, lookup: WeatherLookup):
        self.resolver = resolver
        self.lookup = lookup

    def get_weather(self, cep: str, ctx: Optional[Context] = None) -> WeatherResponse:
        """
        Run the pipeline for one postal code.

        Raises:
            ZipcodeValidationError: The code is not exactly 8 digits
            ResolutionError: The code could not be resolved to a locality
            WeatherLookupError: No weather could be fetched for the locality
        """
        if not is_valid_cep(cep):
            raise ZipcodeValidationError(cep)

        info = self.resolver.resolve(cep, ctx)
        reading = self.lookup.lookup(info.localidade, ctx)
        return WeatherResponse.from_celsius(reading.temperature_celsius)

    async def handle(self, request: Request) -> Response:
        # first value wins when cep is repeated
        cep = next(iter(request.query_params.getlist("cep")), "")

        with get_tracer().start_as_current_span(
            "get-weather-handler",
            attributes={"cep": cep},
            record_exception=False,
            set_status_on_exception=False,
        ) as span:
            try:
                result = await run_in_threadpool(self.get_weather, cep, context.get_current())
                return self._render(result)
            except CepWeatherError as e:
                if e.status_code >= 500:
                    logger.error("Weather request for %r failed: %s", cep, e)
                    record_span_error(span, e)
                else:
                    logger.info("Weather request for %r rejected: %s", cep, e.client_message)
                    span.set_attribute("error.message", e.client_message)
                return error_response(e)

    @staticmethod
    def _render(result: WeatherResponse) -> JSONResponse:
        try:
            return JSONResponse(result.model_dump(by_alias=True))
        except ValueError as e:
            # json refuses NaN and infinities
            raise EncodingError(str(e)) from e
