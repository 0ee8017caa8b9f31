from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictStr, TypeAdapter, ValidationError


# Inbound bodies are flat objects of strings, like `{"cep": "01001000"}`.
ZipcodeRequest = TypeAdapter(dict[str, StrictStr])


class ZipcodeForward(BaseModel):
    cep: str


class TemperatureResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    temp_c: float = Field(alias="temp_C")
    temp_k: float = Field(alias="temp_K")
    temp_f: float = Field(alias="temp_F")

    @classmethod
    def from_celsius(cls, celsius: float) -> TemperatureResponse:
        return cls(
            temp_c=celsius,
            temp_k=celsius + 273.15,
            # Multiply before dividing.
            temp_f=(celsius * 9 / 5) + 32,
        )


# ViaCEP answers with a flat object of strings.
ViaCepAddress = TypeAdapter(dict[str, str])


class CurrentWeather(BaseModel):
    temp_c: StrictFloat | None = None


class WeatherReport(BaseModel):
    current: CurrentWeather | None = None

    @classmethod
    def temperature_from(cls, payload: Any) -> float:
        """Return `current.temp_c`, or 0.0 when the payload does not carry one."""

        try:
            report = cls.model_validate(payload)
        except ValidationError:
            return 0.0
        if report.current is None or report.current.temp_c is None:
            return 0.0
        return float(report.current.temp_c)
