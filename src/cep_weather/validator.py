"""Postal code (CEP) format checks.

The two services validate differently: the enrichment service only accepts the
raw 8 digit form, the input service strips hyphens and spaces first.
"""

import re

_CEP_PATTERN = re.compile(r"[0-9]{8}")
_SEPARATORS = re.compile(r"[- ]")


def is_valid_cep(cep: str) -> bool:
    """Strict check used by the enrichment service: exactly 8 ASCII digits."""
    return _CEP_PATTERN.fullmatch(cep) is not None


def is_valid_input_cep(cep: str) -> bool:
    """Lenient check used by the input service, ignores '-' and ' '."""
    return _CEP_PATTERN.fullmatch(_SEPARATORS.sub("", cep)) is not None
