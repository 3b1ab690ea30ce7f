from abc import ABC, abstractmethod
from typing import Callable, ClassVar

from pydantic import BaseModel, ConfigDict

FloatGetter = Callable[[], float]


class ProviderError(Exception):
    """A provider failed to deliver a reading."""


class ProviderConfig(BaseModel):
    """Declarative description of how to obtain a single reading.

    ``source`` selects the provider type; any other keys are passed through to
    that provider unchanged.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    source: str


class ProviderSettings(BaseModel):
    """Settings shared by all providers."""

    model_config = ConfigDict(extra="forbid")

    source: str
    scale: float = 1.0


class Provider(ABC):
    """Abstract base class for reading providers."""

    settings_model: ClassVar[type[ProviderSettings]] = ProviderSettings

    def __init__(self, config: dict) -> None:
        self._settings = self.settings_model.model_validate(config)
        self._scale = self._settings.scale

    @abstractmethod
    def float_getter(self) -> FloatGetter:
        """Return a zero-argument callable producing a fresh reading."""

    def close(self) -> None:
        """Release resources held by the provider."""
