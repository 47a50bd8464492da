"""
Visibility scanning for a single satellite.

The scanner walks a fixed 24 hour horizon in 5 minute steps and records
the first sample of every pass above the minimum elevation. Once a pass
is detected the scan jumps ahead by roughly one low-Earth-orbit period
so the same pass is not reported again.

Known limitations of the coarse scan:
- passes shorter than one step can be missed entirely
- a second pass of the same satellite inside the skip window is not seen
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from threading import Event
from typing import Any, Dict, List, Optional
import logging
import math

from .elements import ElementSet
from .observer import Observer
from .propagation import ElementSetError, LookAngles, PropagationAdapter, SatellitePropagator

logger = logging.getLogger(__name__)

# =============================================================================
# CONSTANTS
# =============================================================================

SCAN_STEP = timedelta(minutes=5)
SKIP_AHEAD = timedelta(minutes=90)  # approximate LEO orbital period
SCAN_HORIZON = timedelta(hours=24)


class ScanCancelledError(RuntimeError):
    """Raised when a scan is stopped through its cancel event."""


@dataclass(frozen=True)
class Pass:
    """Start of a visibility window: first sample at or above the threshold."""

    satellite_name: str
    time: datetime
    elevation_deg: float
    azimuth_deg: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "satellite_name": self.satellite_name,
            "time": self.time.isoformat(),
            "elevation_deg": round(self.elevation_deg, 2),
            "azimuth_deg": round(self.azimuth_deg, 2),
        }

    def __str__(self) -> str:
        return (
            f"{self.satellite_name} at {self.time.strftime('%Y-%m-%d %H:%M:%S')} UTC "
            f"(elev {self.elevation_deg:.1f}°, az {self.azimuth_deg:.1f}°)"
        )


@dataclass(frozen=True)
class ScanState:
    """
    Two-state machine driving the scan.

    ``in_pass`` is False while searching for a rising edge. ``resume_at``
    is set on a rising edge and tells the scan where to jump next.
    """

    in_pass: bool = False
    resume_at: Optional[datetime] = None

    def should_skip(self, current_time: datetime) -> bool:
        return self.resume_at is not None and current_time < self.resume_at

    def resumed(self) -> "ScanState":
        return replace(self, resume_at=None)

    def rising_edge(self, current_time: datetime) -> "ScanState":
        return ScanState(in_pass=True, resume_at=current_time + SKIP_AHEAD)

    def falling_edge(self) -> "ScanState":
        return replace(self, in_pass=False)


@dataclass
class SatelliteScan:
    """Result of scanning one satellite, with diagnostics."""

    satellite_name: str
    passes: List[Pass] = field(default_factory=list)
    samples: int = 0
    invalid_samples: int = 0
    max_elevation_deg: Optional[float] = None
    error: Optional[str] = None


class VisibilityScanner:
    """
    Detects pass start events for one satellite over the scan horizon.

    Failures are isolated: an element set the adapter cannot load yields
    no passes, and a sample that fails to propagate is skipped.
    """

    def __init__(self, adapter: PropagationAdapter) -> None:
        self.adapter = adapter

    def scan(
        self,
        element_set: ElementSet,
        observer: Observer,
        start_time: datetime,
        min_elevation: float,
        cancel_event: Optional[Event] = None,
    ) -> List[Pass]:
        """
        Find pass start events for a satellite over [start, start + 24h).

        Args:
            element_set: Satellite to scan
            observer: Ground observer
            start_time: Horizon anchor (UTC)
            min_elevation: Minimum elevation in degrees
            cancel_event: Optional event checked between samples

        Returns:
            Passes in time order

        Raises:
            ScanCancelledError: If cancel_event is set during the scan
        """
        return self.scan_detailed(
            element_set, observer, start_time, min_elevation, cancel_event
        ).passes

    def scan_detailed(
        self,
        element_set: ElementSet,
        observer: Observer,
        start_time: datetime,
        min_elevation: float,
        cancel_event: Optional[Event] = None,
    ) -> SatelliteScan:
        """Same as scan() but also returns sample diagnostics."""
        result = SatelliteScan(satellite_name=element_set.name)

        try:
            propagator = self.adapter.load(element_set)
        except ElementSetError as e:
            logger.warning(f"Skipping satellite {element_set.name}: {e}")
            result.error = str(e)
            return result
        except Exception as e:
            logger.warning(f"Skipping satellite {element_set.name}: unexpected error loading elements: {e}")
            result.error = str(e)
            return result

        end_time = start_time + SCAN_HORIZON
        current_time = start_time
        state = ScanState()

        while current_time < end_time:
            if cancel_event is not None and cancel_event.is_set():
                raise ScanCancelledError(f"Scan of {element_set.name} cancelled at {current_time}")

            if state.should_skip(current_time):
                current_time = state.resume_at
                state = state.resumed()
                continue

            angles = self._sample(propagator, observer, current_time, element_set.name)
            result.samples += 1

            if angles is None:
                result.invalid_samples += 1
            else:
                if result.max_elevation_deg is None or angles.elevation_deg > result.max_elevation_deg:
                    result.max_elevation_deg = angles.elevation_deg

                if angles.elevation_deg >= min_elevation:
                    if not state.in_pass:
                        result.passes.append(
                            Pass(
                                satellite_name=element_set.name,
                                time=current_time,
                                elevation_deg=angles.elevation_deg,
                                azimuth_deg=angles.azimuth_deg,
                            )
                        )
                        state = state.rising_edge(current_time)
                else:
                    state = state.falling_edge()

            current_time += SCAN_STEP

        if not result.passes and result.max_elevation_deg is not None and result.max_elevation_deg > 0:
            logger.debug(
                f"{element_set.name}: max elevation {result.max_elevation_deg:.1f}° "
                f"(below threshold {min_elevation}°)"
            )
        if result.invalid_samples:
            logger.debug(
                f"{element_set.name}: skipped {result.invalid_samples}/{result.samples} invalid samples"
            )

        return result

    def _sample(
        self,
        propagator: SatellitePropagator,
        observer: Observer,
        when: datetime,
        satellite_name: str,
    ) -> Optional[LookAngles]:
        try:
            angles = propagator.look_angles(observer, when)
        except Exception as e:
            logger.debug(f"Skipping sample for {satellite_name} at {when}: {e}")
            return None

        if angles is None or not math.isfinite(angles.elevation_deg):
            return None
        return angles
