"""Errors raised while building a measurement set."""


class MeasurementError(Exception):
    """Base class for measurement construction errors.

    ``quantity`` names the configured quantity (``"power"``, ``"currents"``, ...)
    and ``index`` the 0-based phase entry, when known.
    """

    def __init__(
        self, message: str, *, quantity: str | None = None, index: int | None = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.quantity = quantity
        self.index = index

    def __str__(self) -> str:
        parts = []
        if self.quantity is not None:
            parts.append(f"{self.quantity}:")
        if self.index is not None:
            parts.append(f"[{self.index}]")
        parts.append(self.message)
        return " ".join(parts)


class ResolutionError(MeasurementError):
    """A provider config could not be turned into a getter."""


class StructuralConfigError(MeasurementError):
    """A phase quantity was configured with other than zero or three entries."""
