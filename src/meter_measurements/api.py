"""HTTP read-out of live measurements."""

import logging
from typing import Any

from fastapi import APIRouter, HTTPException

from meter_measurements.measurements import MeasurementSet, PhaseValues

logger = logging.getLogger(__name__)


def _read(measurements: MeasurementSet, name: str) -> Any:
    """Call the getter for ``name`` and shape the result for JSON."""
    getter = getattr(measurements, name)
    value = getter()
    if isinstance(value, PhaseValues):
        return value._asdict()
    return value


def read_measurements(measurements: MeasurementSet) -> dict[str, Any]:
    """Read every configured quantity. Unconfigured quantities are omitted."""
    return {name: _read(measurements, name) for name in measurements.configured()}


def create_router(measurements: MeasurementSet) -> APIRouter:
    """Return the APIRouter exposing the given measurements."""
    router = APIRouter(prefix="/api")

    @router.get("/measurements")
    def get_measurements() -> dict[str, Any]:
        try:
            return read_measurements(measurements)
        except Exception as exc:
            logger.warning("Reading measurements failed: %s", exc)
            raise HTTPException(status_code=503, detail=str(exc))

    @router.get("/measurements/{quantity}")
    def get_quantity(quantity: str) -> Any:
        if quantity not in measurements.configured():
            raise HTTPException(status_code=404, detail=f"{quantity!r} is not configured")
        try:
            return _read(measurements, quantity)
        except Exception as exc:
            logger.warning("Reading %s failed: %s", quantity, exc)
            raise HTTPException(status_code=503, detail=f"{quantity}: {exc}")

    return router
