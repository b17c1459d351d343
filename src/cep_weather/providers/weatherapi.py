"""WeatherAPI backed weather lookup."""

import logging
from typing import Optional

import requests
from opentelemetry.context import Context
from pydantic import ValidationError

from cep_weather.errors import FailureKind, WeatherLookupError
from cep_weather.observability import get_tracer, record_span_error
from cep_weather.providers.base import WeatherLookup
from cep_weather.schemas import WeatherReading

logger = logging.getLogger(__name__)

WEATHER_API_BASE_URL = "http://api.weatherapi.com/v1"


class WeatherApiLookup(WeatherLookup):
    """Current conditions from `GET {base_url}/current.json?key=...&q=<city>`."""

    def __init__(
        self,
        api_key: str,
        base_url: str = WEATHER_API_BASE_URL,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def lookup(self, city: str, ctx: Optional[Context] = None) -> WeatherReading:
        with get_tracer().start_as_current_span(
            "get-weather", context=ctx, attributes={"city": city},
            record_exception=False, set_status_on_exception=False,
        ) as span:
            try:
                return self._lookup(city)
            except WeatherLookupError as e:
                record_span_error(span, e)
                raise

    def _lookup(self, city: str) -> WeatherReading:
        params = {"key": self.api_key, "q": city}
        try:
            resp = self.session.get(
                f"{self.base_url}/current.json", params=params, timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.warning("WeatherAPI request failed for %s: %s", city, e)
            raise WeatherLookupError(FailureKind.TRANSPORT, str(e)) from e

        if resp.status_code != 200:
            logger.warning("WeatherAPI error response: %s", resp.text)
            raise WeatherLookupError(
                FailureKind.NOT_FOUND, f"could not find weather for city: {city}"
            )

        logger.debug("WeatherAPI complete response: %s", resp.text)

        try:
            return WeatherReading.model_validate_json(resp.content)
        except ValidationError as e:
            raise WeatherLookupError(FailureKind.DECODE, str(e)) from e
