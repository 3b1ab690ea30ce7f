"""Shared test fixtures."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from meter_measurements.api import create_router
from meter_measurements.measurements import MeasurementSet, collect_phase_providers
from meter_measurements.providers import ProviderConfig


class StubResolver:
    """A resolver returning canned getters, keyed by the config's ``name``.

    Configs with ``fail: true`` raise on resolution. Every resolved name is
    recorded in ``resolved`` and every getter call in ``calls``.
    """

    def __init__(self) -> None:
        self.resolved: list[str] = []
        self.calls: list[str] = []

    def __call__(self, config: ProviderConfig):
        extra = config.model_extra
        name = extra["name"]
        self.resolved.append(name)
        if extra.get("fail"):
            raise ValueError(f"cannot resolve {name}")

        value = extra.get("value", 0.0)

        def get() -> float:
            self.calls.append(name)
            return value

        return get


@pytest.fixture
def resolver():
    return StubResolver()


def _const(value: float):
    return lambda: value


def _failing():
    raise RuntimeError("meter offline")


@pytest.fixture
def measurements():
    return MeasurementSet(
        power=_const(1500.0),
        energy=_const(12345.6),
        currents=collect_phase_providers((_const(6.1), _const(5.2), _const(4.3))),
        voltages=None,
        powers=collect_phase_providers((_const(700.0), _const(500.0), _failing)),
    )


@pytest.fixture
def client(measurements):
    """FastAPI test client exposing the measurement fixture (no lifespan)."""
    test_app = FastAPI()
    test_app.include_router(create_router(measurements))
    with TestClient(test_app) as c:
        yield c
