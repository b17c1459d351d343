"""Collaborator clients for locality resolution and weather lookup."""

from cep_weather.providers.base import LocalityResolver, WeatherLookup
from cep_weather.providers.viacep import ViaCepResolver
from cep_weather.providers.weatherapi import WeatherApiLookup

__all__ = ["LocalityResolver", "WeatherLookup", "ViaCepResolver", "WeatherApiLookup"]
