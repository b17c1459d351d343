"""Error taxonomy shared by both services.

Every error knows the HTTP status and the fixed message clients see, so the
request handlers only have to turn an exception into an ErrorResponse.
"""

from enum import Enum


class FailureKind(str, Enum):
    """Why a collaborator call failed."""

    TRANSPORT = "transport"
    NOT_FOUND = "not_found"
    DECODE = "decode"


class CepWeatherError(Exception):
    """Base error for the CEP weather services."""

    status_code = 500
    client_message = "internal server error"


class ZipcodeValidationError(CepWeatherError):
    """Raised when a postal code is malformed."""

    status_code = 422
    client_message = "invalid zipcode"


class InvalidRequestBodyError(CepWeatherError):
    """Raised when the input service cannot decode the request body."""

    status_code = 400
    client_message = "invalid request body"


class CollaboratorError(CepWeatherError):
    """A call to an external API failed."""

    status_code = 404

    def __init__(self, kind: FailureKind, detail: str):
        super().__init__(f"{kind.value}: {detail}")
        self.kind = kind
        self.detail = detail


class ResolutionError(CollaboratorError):
    """Raised when a postal code cannot be resolved to a locality."""

    client_message = "can not find zipcode"


class WeatherLookupError(CollaboratorError):
    """Raised when the weather for a locality cannot be fetched."""

    client_message = "can not find weather for this location"


class EncodingError(CepWeatherError):
    """Raised when a successful result cannot be serialised."""


class RelayTransportError(CepWeatherError):
    """Raised when the input service cannot reach the enrichment service.

    Unlike every other error, the message exposes the underlying cause.
    """

    def __init__(self, cause: Exception):
        super().__init__(str(cause))
        self.cause = cause

    @property
    def client_message(self) -> str:
        return f"failed to get weather from Service B: {self.cause}"
