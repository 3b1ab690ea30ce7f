"""Provider registry and float getter factory."""

import logging

from meter_measurements.providers.base import (
    FloatGetter,
    Provider,
    ProviderConfig,
    ProviderError,
)
from meter_measurements.providers.calc import CalcProvider
from meter_measurements.providers.const import ConstProvider
from meter_measurements.providers.http import HttpProvider
from meter_measurements.providers.script import ScriptProvider

__all__ = [
    "FloatGetter",
    "Provider",
    "ProviderConfig",
    "ProviderError",
    "ProviderPool",
    "create_provider",
    "new_float_getter",
]

logger = logging.getLogger(__name__)

_PROVIDERS: dict[str, type[Provider]] = {
    "const": ConstProvider,
    "http": HttpProvider,
    "script": ScriptProvider,
    "calc": CalcProvider,
}


def create_provider(source: str, config: dict) -> Provider:
    """Create a provider instance by source name."""
    cls = _PROVIDERS.get(source)
    if cls is None:
        raise ValueError(
            f"Unknown provider source: {source!r}. Available: {', '.join(_PROVIDERS)}"
        )
    return cls(config)


def new_float_getter(config: ProviderConfig) -> FloatGetter:
    """Resolve a provider config into a zero-argument float getter.

    The provider is not tracked; use a ProviderPool when it must be closed.
    """
    provider = create_provider(config.source, config.model_dump())
    return provider.float_getter()


class ProviderPool:
    """Resolver that keeps every provider it creates so they can be closed together."""

    def __init__(self) -> None:
        self._providers: list[Provider] = []

    def __call__(self, config: ProviderConfig) -> FloatGetter:
        provider = create_provider(config.source, config.model_dump())
        self._providers.append(provider)
        return provider.float_getter()

    def __len__(self) -> int:
        return len(self._providers)

    def close(self) -> None:
        """Close all providers created so far."""
        providers, self._providers = self._providers, []
        for provider in providers:
            provider.close()
        logger.debug("Closed %d providers", len(providers))
