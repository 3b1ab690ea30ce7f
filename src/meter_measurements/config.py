import os
import re
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

from meter_measurements.providers import ProviderConfig


def _substitute_env_vars(value: str) -> str:
    """Replace ${ENV_VAR} patterns with environment variable values."""

    def replacer(match: re.Match) -> str:
        var_name = match.group(1)
        env_val = os.environ.get(var_name)
        if env_val is None:
            raise ValueError(f"Environment variable {var_name!r} is not set")
        return env_val

    return re.sub(r"\$\{([^}]+)}", replacer, value)


def _walk_and_substitute(obj: object) -> object:
    """Recursively substitute env vars in all string values."""
    if isinstance(obj, str):
        return _substitute_env_vars(obj)
    if isinstance(obj, dict):
        return {k: _walk_and_substitute(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_walk_and_substitute(item) for item in obj]
    return obj


class ServerConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8080


class MeterConfig(BaseModel):
    """Provider configs per quantity.

    Phase lists are not length-checked here; the measurement builder reports
    anything other than zero or three entries.
    """

    power: ProviderConfig | None = None
    energy: ProviderConfig | None = None
    currents: list[ProviderConfig] = Field(default_factory=list)
    voltages: list[ProviderConfig] = Field(default_factory=list)
    powers: list[ProviderConfig] = Field(default_factory=list)


class AppConfig(BaseModel):
    server: ServerConfig = Field(default_factory=ServerConfig)
    meter: MeterConfig = Field(default_factory=MeterConfig)


def load_config(path: str | Path) -> AppConfig:
    """Load and validate configuration from a YAML file."""
    path = Path(path)
    with path.open() as f:
        raw = yaml.safe_load(f)

    if raw is None:
        raw = {}

    raw = _walk_and_substitute(raw)
    return AppConfig.model_validate(raw)
