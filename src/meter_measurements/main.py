"""FastAPI application and CLI for meter measurements."""

import argparse
import json
import logging
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from meter_measurements.api import create_router, read_measurements
from meter_measurements.config import AppConfig, load_config
from meter_measurements.errors import MeasurementError
from meter_measurements.measurements import MeasurementSet, build_measurements
from meter_measurements.providers import ProviderPool

logger = logging.getLogger("meter_measurements")

# Module-level config path, set before app creation
_config_path: str = "/app/config.yaml"

# Measurements built by run() before serving; the lifespan takes ownership
_prebuilt: tuple[MeasurementSet, ProviderPool] | None = None


def build_from_config(config: AppConfig, pool: ProviderPool) -> MeasurementSet:
    """Build the measurement set declared in the ``meter`` section.

    Providers are created through ``pool``, which the caller closes. On failure
    the providers created so far are closed before the error propagates.
    """
    meter = config.meter
    try:
        return build_measurements(
            meter.power,
            meter.energy,
            meter.currents,
            meter.voltages,
            meter.powers,
            resolver=pool,
        )
    except Exception:
        pool.close()
        raise


@asynccontextmanager
async def lifespan(app: FastAPI):
    global _prebuilt

    if _prebuilt is not None:
        (measurements, pool), _prebuilt = _prebuilt, None
    else:
        pool = ProviderPool()
        measurements = build_from_config(load_config(_config_path), pool)

    routes = list(app.router.routes)
    app.include_router(create_router(measurements))
    logger.info("Meter measurements ready (%d providers)", len(pool))

    try:
        yield
    finally:
        # Shutdown; the routes are bound to this build's getters
        app.router.routes[:] = routes
        pool.close()
        logger.info("Providers closed")


app = FastAPI(title="Meter Measurements", lifespan=lifespan)


def run() -> None:
    """CLI entry point."""
    global _config_path, _prebuilt

    parser = argparse.ArgumentParser(description="Meter Measurements")
    parser.add_argument(
        "-c",
        "--config",
        default="/app/config.yaml",
        help="Path to config YAML file",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Print one reading of all configured quantities as JSON and exit",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    _config_path = args.config
    pool = ProviderPool()
    try:
        config = load_config(_config_path)
        measurements = build_from_config(config, pool)
    except (OSError, ValueError, MeasurementError) as exc:
        logger.error("Invalid configuration %s: %s", _config_path, exc)
        sys.exit(1)

    if args.once:
        try:
            readings = read_measurements(measurements)
        except Exception as exc:
            logger.error("Reading measurements failed: %s", exc)
            sys.exit(1)
        finally:
            pool.close()
        print(json.dumps(readings, indent=2))
        return

    _prebuilt = (measurements, pool)
    uvicorn.run(app, host=config.server.host, port=config.server.port)
