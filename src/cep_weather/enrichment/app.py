import logging
import sys
from typing import Optional

import requests
import uvicorn
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.routing import Route

from cep_weather.configuration import EnrichmentConfiguration
from cep_weather.enrichment.handler import WeatherOrchestrator
from cep_weather.observability import configure_propagation, create_tracing_middleware, setup_observability
from cep_weather.providers import LocalityResolver, ViaCepResolver, WeatherApiLookup, WeatherLookup

logger = logging.getLogger(__name__)


def create_app(
    config: Optional[EnrichmentConfiguration] = None,
    resolver: Optional[LocalityResolver] = None,
    lookup: Optional[WeatherLookup] = None,
) -> Starlette:
    """
    Build the enrichment service application.

    Collaborators default to ViaCEP and WeatherAPI clients sharing one
    HTTP session; pass `resolver`/`lookup` to replace them.
    """
    config = config or EnrichmentConfiguration()
    if resolver is None or lookup is None:
        session = requests.Session()
        resolver = resolver or ViaCepResolver(
            base_url=config.viacep_base_url, session=session, timeout=config.request_timeout
        )
        lookup = lookup or WeatherApiLookup(
            api_key=config.weather_api_key,
            base_url=config.weather_api_base_url,
            session=session,
            timeout=config.request_timeout,
        )

    orchestrator = WeatherOrchestrator(resolver, lookup)
    return Starlette(
        routes=[Route("/weather", orchestrator.handle, methods=["GET"])],
        middleware=[
            Middleware(
                BaseHTTPMiddleware,
                dispatch=create_tracing_middleware("weather-api-http-request"),
            ),
        ],
    )


def run():
    """
    Runs the enrichment service.
    """
    config = EnrichmentConfiguration()
    logging.basicConfig(level=config.log_level.upper(), stream=sys.stdout, format='%(levelname)s: %(message)s')
    logging.getLogger("urllib3").setLevel(logging.INFO)

    if not config.weather_api_key:
        logger.warning("Please configure the WEATHER_API_KEY environment variable before running the server")

    tracer_provider = None
    if config.otel_enabled:
        tracer_provider = setup_observability(config.otel_service_name, config.otel_exporter_otlp_endpoint)
    else:
        configure_propagation()

    logger.info(f"Starting server on port {config.port}")
    try:
        uvicorn.run(create_app(config), host=config.host, port=config.port)
    finally:
        if tracer_provider is not None:
            tracer_provider.shutdown()


if __name__ == "__main__":
    run()
