import logging
import sys
from typing import Optional

import requests
import uvicorn
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.routing import Route

from cep_weather.configuration import InputConfiguration
from cep_weather.observability import configure_propagation, create_tracing_middleware, setup_observability
from cep_weather.relay.handler import InputRelay

logger = logging.getLogger(__name__)


def create_app(
    config: Optional[InputConfiguration] = None,
    session: Optional[requests.Session] = None,
) -> Starlette:
    """Build the input service application."""
    config = config or InputConfiguration()
    relay = InputRelay(
        downstream_url=config.service_b_url,
        session=session,
        timeout=config.request_timeout,
    )
    return Starlette(
        routes=[Route("/", relay.handle, methods=["POST"])],
        middleware=[
            Middleware(
                BaseHTTPMiddleware,
                dispatch=create_tracing_middleware("weather-input-http-request"),
            ),
        ],
    )


def run():
    """
    Runs the input service.
    """
    config = InputConfiguration()
    logging.basicConfig(level=config.log_level.upper(), stream=sys.stdout, format='%(levelname)s: %(message)s')
    logging.getLogger("urllib3").setLevel(logging.INFO)

    tracer_provider = None
    if config.otel_enabled:
        tracer_provider = setup_observability(config.otel_service_name, config.otel_exporter_otlp_endpoint)
    else:
        configure_propagation()

    logger.info(f"Starting server on port {config.port}, forwarding to {config.service_b_url}")
    try:
        uvicorn.run(create_app(config), host=config.host, port=config.port)
    finally:
        if tracer_provider is not None:
            tracer_provider.shutdown()


if __name__ == "__main__":
    run()
