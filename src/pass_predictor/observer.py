"""
Ground observer definition.

An observer is a fixed geodetic point from which satellite look angles
are computed.
"""

from dataclasses import dataclass
from typing import Any, Dict
import logging
import math

logger = logging.getLogger(__name__)


class InvalidObserverError(ValueError):
    """Raised when observer coordinates are out of range or non-finite."""


@dataclass(frozen=True)
class Observer:
    """
    Geodetic observer location.

    Coordinates are validated on construction so that bad input is
    rejected before any scan starts.
    """

    latitude: float  # degrees, -90 to +90
    longitude: float  # degrees, -180 to +180
    height_km: float = 0.0  # above the reference ellipsoid
    name: str = "observer"

    def __post_init__(self) -> None:
        """Validate observer parameters after initialization."""
        self._validate_coordinates()
        self._validate_height()

    def _validate_coordinates(self) -> None:
        """Validate latitude and longitude values."""
        for label, value in (("latitude", self.latitude), ("longitude", self.longitude)):
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidObserverError(f"Invalid {label}: {value!r}. Must be a number.")
            if not math.isfinite(value):
                raise InvalidObserverError(f"Invalid {label}: {value}. Must be finite.")

        if not -90 <= self.latitude <= 90:
            raise InvalidObserverError(
                f"Invalid latitude: {self.latitude}. Must be between -90 and 90 degrees."
            )

        if not -180 <= self.longitude <= 180:
            raise InvalidObserverError(
                f"Invalid longitude: {self.longitude}. Must be between -180 and 180 degrees."
            )

    def _validate_height(self) -> None:
        """Validate height value."""
        if isinstance(self.height_km, bool) or not isinstance(self.height_km, (int, float)):
            raise InvalidObserverError(f"Invalid height: {self.height_km!r}. Must be a number.")
        if not math.isfinite(self.height_km) or self.height_km < 0:
            raise InvalidObserverError(
                f"Invalid height: {self.height_km}. Must be a finite, non-negative number of km."
            )

    def to_dict(self) -> Dict[str, Any]:
        """Convert observer to dictionary representation."""
        return {
            "name": self.name,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "height_km": self.height_km,
        }

    def __str__(self) -> str:
        return f"{self.name} ({self.latitude:.4f}°, {self.longitude:.4f}°)"
