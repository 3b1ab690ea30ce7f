import math

from pydantic import model_validator

from meter_measurements.providers.base import (
    FloatGetter,
    Provider,
    ProviderConfig,
    ProviderSettings,
)


class CalcSettings(ProviderSettings):
    add: list[ProviderConfig] | None = None
    mul: list[ProviderConfig] | None = None

    @model_validator(mode="after")
    def check_operation(self) -> "CalcSettings":
        if (self.add is None) == (self.mul is None):
            raise ValueError("calc requires exactly one of add or mul")
        if not (self.add or self.mul):
            raise ValueError("calc requires at least one operand")
        return self


class CalcProvider(Provider):
    """Provider combining readings of nested providers by sum or product."""

    settings_model = CalcSettings

    def __init__(self, config: dict) -> None:
        from meter_measurements.providers import create_provider

        super().__init__(config)
        if self._settings.add is not None:
            self._combine = math.fsum
            operands = self._settings.add
        else:
            self._combine = math.prod
            operands = self._settings.mul

        self._providers: list[Provider] = []
        try:
            for c in operands:
                self._providers.append(create_provider(c.source, c.model_dump()))
        except Exception:
            self.close()
            raise
        self._getters = [p.float_getter() for p in self._providers]

    def float_getter(self) -> FloatGetter:
        def get() -> float:
            return self._combine(g() for g in self._getters) * self._scale

        return get

    def close(self) -> None:
        for provider in self._providers:
            provider.close()
