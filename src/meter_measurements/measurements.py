"""Compose provider configs into meter measurement getters.

Scalar quantities (power, energy) resolve to a single float getter. Phase
quantities (currents, voltages, powers) are configured as exactly three
providers, one per phase, and combined into a getter returning all three
readings in L1, L2, L3 order.
"""

import logging
from typing import Callable, NamedTuple, Sequence

from meter_measurements.errors import (
    MeasurementError,
    ResolutionError,
    StructuralConfigError,
)
from meter_measurements.providers import FloatGetter, ProviderConfig, new_float_getter

logger = logging.getLogger(__name__)

PHASES = 3

Resolver = Callable[[ProviderConfig], FloatGetter]


class PhaseValues(NamedTuple):
    """One reading per phase."""

    l1: float
    l2: float
    l3: float


PhaseGetter = Callable[[], PhaseValues]


class MeasurementSet(NamedTuple):
    """Getters for the measured quantities; ``None`` means not configured."""

    power: FloatGetter | None = None
    energy: FloatGetter | None = None
    currents: PhaseGetter | None = None
    voltages: PhaseGetter | None = None
    powers: PhaseGetter | None = None

    def configured(self) -> list[str]:
        """Names of the quantities that have a getter."""
        return [name for name, getter in self._asdict().items() if getter is not None]


def collect_phase_providers(
    getters: tuple[FloatGetter, FloatGetter, FloatGetter],
) -> PhaseGetter:
    """Combine three per-phase getters into one.

    The getters are called strictly in phase order. The first exception is
    propagated unchanged and the remaining getters are not called.
    """
    g1, g2, g3 = getters

    def get() -> PhaseValues:
        return PhaseValues(g1(), g2(), g3())

    return get


def build_phase_providers(
    configs: Sequence[ProviderConfig],
    resolver: Resolver = new_float_getter,
) -> PhaseGetter | None:
    """Return a phase getter for the given configs, or ``None`` if there are none.

    Raises:
        StructuralConfigError: if not exactly one config per phase is given.
        ResolutionError: if a config cannot be resolved; ``index`` identifies it.
    """
    if len(configs) == 0:
        return None

    if len(configs) != PHASES:
        raise StructuralConfigError("need one per phase, total three")

    getters = []
    for idx, config in enumerate(configs):
        try:
            getters.append(resolver(config))
        except Exception as exc:
            raise ResolutionError(f"cannot resolve provider: {exc}", index=idx) from exc

    return collect_phase_providers((getters[0], getters[1], getters[2]))


def _resolve_scalar(name: str, config: ProviderConfig, resolver: Resolver) -> FloatGetter:
    try:
        getter = resolver(config)
    except Exception as exc:
        raise ResolutionError(f"cannot resolve provider: {exc}", quantity=name) from exc
    logger.debug("Resolved %s provider (%s)", name, config.source)
    return getter


def _build_phase_group(
    name: str, configs: Sequence[ProviderConfig], resolver: Resolver
) -> PhaseGetter | None:
    try:
        getter = build_phase_providers(configs, resolver)
    except MeasurementError as exc:
        exc.quantity = name
        raise
    if getter is not None:
        logger.debug(
            "Resolved %s providers (%s)", name, ", ".join(c.source for c in configs)
        )
    return getter


def build_measurements(
    power: ProviderConfig | None,
    energy: ProviderConfig | None,
    currents: Sequence[ProviderConfig],
    voltages: Sequence[ProviderConfig],
    powers: Sequence[ProviderConfig],
    resolver: Resolver = new_float_getter,
) -> MeasurementSet:
    """Build the typical meter measurement getters from provider configs.

    Quantities are resolved in the order power, energy, currents, voltages,
    powers. The first failure aborts the build.

    Raises:
        MeasurementError: tagged with the quantity that failed.
    """
    power_g = energy_g = None

    if power is not None:
        power_g = _resolve_scalar("power", power, resolver)

    if energy is not None:
        energy_g = _resolve_scalar("energy", energy, resolver)

    currents_g = _build_phase_group("currents", currents, resolver)
    voltages_g = _build_phase_group("voltages", voltages, resolver)
    powers_g = _build_phase_group("powers", powers, resolver)

    measurements = MeasurementSet(power_g, energy_g, currents_g, voltages_g, powers_g)
    logger.info(
        "Measurements ready, monitoring: %s",
        ", ".join(measurements.configured()) or "nothing",
    )
    return measurements
