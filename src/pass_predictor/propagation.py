"""
Propagation adapter: element set + instant -> topocentric look angles.

The scanner only depends on the narrow interfaces defined here, so the
windowing logic can be exercised with scripted propagators in tests. The
default implementation uses the orbit-predictor library, which owns the
SGP4 propagation and the inertial to earth-fixed transform.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Optional, Tuple
import logging
import math

import numpy as np
from orbit_predictor.locations import Location  # type: ignore[import-untyped]
from orbit_predictor.sources import get_predictor_from_tle_lines  # type: ignore[import-untyped]

from .elements import ElementSet
from .observer import Observer

logger = logging.getLogger(__name__)


class ElementSetError(ValueError):
    """Raised when an element set cannot be turned into a propagator."""


@dataclass(frozen=True)
class LookAngles:
    """Where an observer must point to see the satellite at one instant."""

    elevation_deg: float
    azimuth_deg: float  # 0° = North, 90° = East
    range_km: Optional[float] = None


class SatellitePropagator(ABC):
    """Propagator bound to a single satellite."""

    @abstractmethod
    def look_angles(self, observer: Observer, when: datetime) -> Optional[LookAngles]:
        """
        Compute look angles from observer to the satellite.

        Returns None when the propagated state is invalid (decayed or
        numerically degenerate orbit); callers skip such samples.
        """


class PropagationAdapter(ABC):
    """Factory turning element sets into satellite propagators."""

    @abstractmethod
    def load(self, element_set: ElementSet) -> SatellitePropagator:
        """
        Build a propagator for one element set.

        Raises:
            ElementSetError: If the element lines cannot be used
        """


class OrbitPredictorPropagator(SatellitePropagator):
    """SGP4 propagation through an orbit-predictor TLEPredictor."""

    def __init__(self, satellite_name: str, predictor) -> None:
        self.satellite_name = satellite_name
        self.predictor = predictor
        # Cache Location objects per observer
        self._location_cache: Dict[Tuple[float, float, float], Location] = {}

    def _get_location(self, observer: Observer) -> Location:
        key = (observer.latitude, observer.longitude, observer.height_km)
        if key not in self._location_cache:
            self._location_cache[key] = Location(
                observer.name,
                observer.latitude,
                observer.longitude,
                observer.height_km * 1000.0,  # elevation in meters
            )
        return self._location_cache[key]

    def look_angles(self, observer: Observer, when: datetime) -> Optional[LookAngles]:
        try:
            position = self.predictor.get_position(when)
        except Exception as e:
            logger.debug(f"Propagation failed for {self.satellite_name} at {when}: {e}")
            return None

        sat_ecef = np.asarray(position.position_ecef, dtype=float)
        if sat_ecef.shape != (3,) or not np.all(np.isfinite(sat_ecef)):
            logger.debug(f"Invalid propagated state for {self.satellite_name} at {when}")
            return None

        location = self._get_location(observer)
        azimuth_rad, elevation_rad = location.get_azimuth_elev(position)
        elevation_deg = math.degrees(elevation_rad)
        azimuth_deg = math.degrees(azimuth_rad) % 360.0
        if not (math.isfinite(elevation_deg) and math.isfinite(azimuth_deg)):
            return None

        range_km = float(np.linalg.norm(sat_ecef - np.asarray(location.position_ecef, dtype=float)))

        return LookAngles(
            elevation_deg=elevation_deg,
            azimuth_deg=azimuth_deg,
            range_km=range_km,
        )

    def __repr__(self) -> str:
        return f"OrbitPredictorPropagator(name='{self.satellite_name}')"


class OrbitPredictorAdapter(PropagationAdapter):
    """Default adapter backed by orbit-predictor."""

    def load(self, element_set: ElementSet) -> OrbitPredictorPropagator:
        try:
            # Predictor only takes line1 and line2, not the name
            predictor = get_predictor_from_tle_lines((element_set.line1, element_set.line2))
        except Exception as e:
            raise ElementSetError(f"Invalid TLE data for satellite {element_set.name}: {e}") from e

        logger.debug(f"Loaded orbit for satellite: {element_set.name}")
        return OrbitPredictorPropagator(element_set.name, predictor)
