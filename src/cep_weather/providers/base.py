"""Abstract base classes for the external lookup collaborators."""

from abc import ABC, abstractmethod
from typing import Optional

from opentelemetry.context import Context

from cep_weather.schemas import LocalityInfo, WeatherReading


class LocalityResolver(ABC):
    """
    Maps a postal code to the locality it belongs to.

    The enrichment service receives an implementation through its
    constructor, so tests and alternative backends can be swapped in.
    """

    @abstractmethod
    def resolve(self, cep: str, ctx: Optional[Context] = None) -> LocalityInfo:
        """
        Resolve a postal code.

        Args:
            cep: 8 digit postal code
            ctx: Trace context the call span is started under

        Returns:
            The locality information

        Raises:
            ResolutionError: If the call fails, the code is unknown or the
                answer cannot be decoded
        """
        pass


class WeatherLookup(ABC):
    """Fetches current weather conditions for a locality."""

    @abstractmethod
    def lookup(self, city: str, ctx: Optional[Context] = None) -> WeatherReading:
        """
        Get current weather for a city.

        Args:
            city: Locality name as returned by a LocalityResolver
            ctx: Trace context the call span is started under

        Returns:
            Current weather reading

        Raises:
            WeatherLookupError: If the call fails, the city is unknown or the
                answer cannot be decoded
        """
        pass
