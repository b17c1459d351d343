"""Data models for the CEP weather services."""

from typing import Optional, Union
from pydantic import BaseModel, ConfigDict, Field


class CepInput(BaseModel):
    """Request body accepted by the input service."""

    cep: str = Field(default="", description="Postal code as typed by the caller")


class LocalityInfo(BaseModel):
    """Locality resolver (ViaCEP) answer for a postal code."""

    localidade: str = Field(default="", description="City name")
    erro: Optional[Union[bool, str]] = Field(None, description="Set when the postal code does not exist")

    @property
    def not_found(self) -> bool:
        if self.erro is None:
            return False
        return str(self.erro).lower() == "true"


class CurrentConditions(BaseModel):
    """The `current` block of a WeatherAPI answer."""

    temp_c: float = Field(..., strict=True, description="Current temperature in Celsius")


class WeatherReading(BaseModel):
    """Weather lookup (WeatherAPI) answer for a city."""

    current: CurrentConditions

    @property
    def temperature_celsius(self) -> float:
        return self.current.temp_c


class WeatherResponse(BaseModel):
    """Temperature in three scales, as returned to clients."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    temp_c: float = Field(..., alias="temp_C", description="Celsius")
    temp_f: float = Field(..., alias="temp_F", description="Fahrenheit")
    temp_k: float = Field(..., alias="temp_K", description="Kelvin")

    @classmethod
    def from_celsius(cls, celsius: float) -> "WeatherResponse":
        # Kelvin offset is 273.0, not 273.15.
        return cls(temp_c=celsius, temp_f=celsius * 1.8 + 32, temp_k=celsius + 273.0)


class ErrorResponse(BaseModel):
    """Body of every failed request."""

    error: str
