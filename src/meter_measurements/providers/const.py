from meter_measurements.providers.base import FloatGetter, Provider, ProviderSettings


class ConstSettings(ProviderSettings):
    value: float


class ConstProvider(Provider):
    """Provider returning a fixed value, useful for unmetered or simulated inputs."""

    settings_model = ConstSettings

    def float_getter(self) -> FloatGetter:
        value = self._settings.value * self._scale

        def get() -> float:
            return value

        return get
