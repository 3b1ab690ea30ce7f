import logging
import shlex
import subprocess

from meter_measurements.providers.base import (
    FloatGetter,
    Provider,
    ProviderError,
    ProviderSettings,
)

logger = logging.getLogger(__name__)


class ScriptSettings(ProviderSettings):
    cmd: str
    timeout: float = 5.0


class ScriptProvider(Provider):
    """Provider running a command and parsing its stdout as a number."""

    settings_model = ScriptSettings

    def __init__(self, config: dict) -> None:
        super().__init__(config)
        self._args = shlex.split(self._settings.cmd)
        if not self._args:
            raise ValueError("script provider requires a non-empty cmd")

    def _run(self) -> str:
        try:
            proc = subprocess.run(
                self._args,
                capture_output=True,
                text=True,
                timeout=self._settings.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            raise ProviderError(
                f"{self._settings.cmd!r} timed out after {self._settings.timeout}s"
            ) from exc
        except OSError as exc:
            raise ProviderError(f"{self._settings.cmd!r}: {exc}") from exc

        if proc.returncode != 0:
            raise ProviderError(
                f"{self._settings.cmd!r} exited with {proc.returncode}: {proc.stderr.strip()}"
            )
        return proc.stdout.strip()

    def float_getter(self) -> FloatGetter:
        def get() -> float:
            output = self._run()
            try:
                value = float(output)
            except ValueError as exc:
                raise ProviderError(f"{self._settings.cmd!r} returned {output!r}") from exc
            logger.debug("Script read %r: %s", self._settings.cmd, value)
            return value * self._scale

        return get
