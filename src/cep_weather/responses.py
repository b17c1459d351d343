from starlette.responses import JSONResponse

from cep_weather.errors import CepWeatherError
from cep_weather.schemas import ErrorResponse


def error_response(error: CepWeatherError) -> JSONResponse:
    """Render an error as `{"error": "<client message>"}` with its status code."""
    body = ErrorResponse(error=error.client_message)
    return JSONResponse(body.model_dump(), status_code=error.status_code)
