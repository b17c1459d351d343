"""ViaCEP backed locality resolver."""

import logging
from typing import Optional

import requests
from opentelemetry.context import Context
from pydantic import ValidationError

from cep_weather.errors import FailureKind, ResolutionError
from cep_weather.observability import get_tracer, record_span_error
from cep_weather.providers.base import LocalityResolver
from cep_weather.schemas import LocalityInfo

logger = logging.getLogger(__name__)

VIACEP_BASE_URL = "https://viacep.com.br"


class ViaCepResolver(LocalityResolver):
    """Resolves postal codes with `GET {base_url}/ws/{cep}/json/`."""

    def __init__(
        self,
        base_url: str = VIACEP_BASE_URL,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def resolve(self, cep: str, ctx: Optional[Context] = None) -> LocalityInfo:
        with get_tracer().start_as_current_span(
            "get-cep-info", context=ctx, attributes={"cep": cep},
            record_exception=False, set_status_on_exception=False,
        ) as span:
            try:
                return self._resolve(cep)
            except ResolutionError as e:
                record_span_error(span, e)
                raise

    def _resolve(self, cep: str) -> LocalityInfo:
        url = f"{self.base_url}/ws/{cep}/json/"
        try:
            resp = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning("ViaCEP request failed for %s: %s", cep, e)
            raise ResolutionError(FailureKind.TRANSPORT, str(e)) from e

        if resp.status_code != 200:
            raise ResolutionError(FailureKind.NOT_FOUND, f"could not find cep: {cep}")

        logger.debug("ViaCEP complete response: %s", resp.text)

        try:
            info = LocalityInfo.model_validate_json(resp.content)
        except ValidationError as e:
            raise ResolutionError(FailureKind.DECODE, str(e)) from e

        if info.not_found:
            raise ResolutionError(FailureKind.NOT_FOUND, "cep not found")

        return info
