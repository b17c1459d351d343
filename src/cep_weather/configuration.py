from typing import Optional

from pydantic_settings import BaseSettings


class ServiceConfiguration(BaseSettings):
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "INFO"
    # No timeout unless set; requests then waits indefinitely.
    request_timeout: Optional[float] = None
    otel_enabled: bool = True
    otel_exporter_otlp_endpoint: str = "http://otel-collector:4318"


class EnrichmentConfiguration(ServiceConfiguration):
    otel_service_name: str = "weather-api"
    weather_api_key: str = ""
    viacep_base_url: str = "https://viacep.com.br"
    weather_api_base_url: str = "http://api.weatherapi.com/v1"


class InputConfiguration(ServiceConfiguration):
    otel_service_name: str = "weather-input"
    service_b_url: str = "http://weather-api:8080/weather"
