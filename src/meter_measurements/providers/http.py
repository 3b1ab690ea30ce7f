import logging
from typing import Any

import httpx

from meter_measurements.providers.base import (
    FloatGetter,
    Provider,
    ProviderError,
    ProviderSettings,
)

logger = logging.getLogger(__name__)


class HttpSettings(ProviderSettings):
    uri: str
    method: str = "GET"
    headers: dict[str, str] = {}
    body: str | None = None
    path: str | None = None
    timeout: float = 10.0
    verify_ssl: bool = True


def extract_value(data: Any, path: str | None) -> float:
    """Walk a dotted path (``lines.0.wNow``) into decoded JSON and return a float.

    Integer segments index into lists, everything else looks up a dict key.
    """
    value = data
    if path:
        for segment in path.split("."):
            if isinstance(value, list):
                if not segment.isdecimal() or int(segment) >= len(value):
                    raise ProviderError(f"invalid list index {segment!r} in path {path!r}")
                value = value[int(segment)]
            elif isinstance(value, dict):
                if segment not in value:
                    raise ProviderError(f"key {segment!r} not found in path {path!r}")
                value = value[segment]
            else:
                raise ProviderError(f"cannot descend into {type(value).__name__} at {segment!r}")

    if isinstance(value, bool):
        raise ProviderError(f"expected a number, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ProviderError(f"expected a number, got {value!r}") from None


class HttpProvider(Provider):
    """Provider reading a value from an HTTP endpoint."""

    settings_model = HttpSettings

    def __init__(self, config: dict) -> None:
        super().__init__(config)
        self._client = httpx.Client(verify=self._settings.verify_ssl)

    def _request(self) -> httpx.Response:
        settings = self._settings
        try:
            resp = self._client.request(
                settings.method,
                settings.uri,
                headers=settings.headers,
                content=settings.body,
                timeout=settings.timeout,
            )
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            raise ProviderError(f"{settings.method} {settings.uri}: {exc}") from exc
        return resp

    def float_getter(self) -> FloatGetter:
        def get() -> float:
            resp = self._request()
            if self._settings.path is None:
                data: Any = resp.text.strip()
            else:
                try:
                    data = resp.json()
                except ValueError as exc:
                    raise ProviderError(f"invalid JSON from {self._settings.uri}") from exc
            value = extract_value(data, self._settings.path) * self._scale
            logger.debug("HTTP read %s: %s", self._settings.uri, value)
            return value

        return get

    def close(self) -> None:
        self._client.close()
