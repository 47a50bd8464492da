"""
Pytest configuration and shared fixtures.

This file is automatically loaded by pytest and provides:
- Custom markers for test categorization
- Scripted propagation adapters that replay a synthetic elevation curve
- Shared fixtures for common test setup
"""

import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional, Tuple

import pytest
from _pytest.config import Config
from _pytest.python import Function

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from pass_predictor.elements import ElementSet  # noqa: E402
from pass_predictor.observer import Observer  # noqa: E402
from pass_predictor.propagation import (  # noqa: E402
    ElementSetError,
    LookAngles,
    PropagationAdapter,
    SatellitePropagator,
)

BASE_TIME = datetime(2025, 11, 8, 0, 0, 0)

# Elevation curve: minutes since BASE_TIME -> elevation in degrees, or None for an invalid state
ElevationCurve = Callable[[float], Optional[float]]


# =============================================================================
# COLLECTION HOOKS
# =============================================================================


def pytest_collection_modifyitems(config: Config, items: List[Function]) -> None:
    """Auto-mark integration tests."""
    for item in items:
        if "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)


def pytest_configure(config: Config) -> None:
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line("markers", "integration: marks integration tests")


# =============================================================================
# SCRIPTED PROPAGATION
# =============================================================================


class ScriptedPropagator(SatellitePropagator):
    """Replays an elevation curve; azimuth is the minute offset mod 360."""

    def __init__(self, curve: ElevationCurve, delay_s: float = 0.0) -> None:
        self.curve = curve
        self.delay_s = delay_s
        self.sampled: List[datetime] = []

    def look_angles(self, observer: Observer, when: datetime) -> Optional[LookAngles]:
        if self.delay_s:
            time.sleep(self.delay_s)
        self.sampled.append(when)
        minutes = (when - BASE_TIME).total_seconds() / 60.0
        elevation = self.curve(minutes)
        if elevation is None:
            return None
        return LookAngles(elevation_deg=elevation, azimuth_deg=minutes % 360.0, range_km=1000.0)


class ScriptedAdapter(PropagationAdapter):
    """Maps satellite names to elevation curves; unknown names fail to load."""

    def __init__(self, curves: dict, delay_s: float = 0.0) -> None:
        self.curves = curves
        self.delay_s = delay_s
        self.propagators: dict = {}

    def load(self, element_set: ElementSet) -> ScriptedPropagator:
        if element_set.name not in self.curves:
            raise ElementSetError(f"No curve scripted for {element_set.name}")
        propagator = ScriptedPropagator(self.curves[element_set.name], self.delay_s)
        self.propagators[element_set.name] = propagator
        return propagator


def window_curve(*windows: Tuple[float, float], peak: float = 45.0, floor: float = -10.0) -> ElevationCurve:
    """Curve at ``peak`` inside the given [start, end] minute windows, ``floor`` elsewhere."""

    def curve(minutes: float) -> float:
        for start, end in windows:
            if start <= minutes <= end:
                return peak
        return floor

    return curve


def make_element_set(name: str) -> ElementSet:
    return ElementSet(
        name=name,
        line1="1 99999U 24001A   24001.50000000  .00000000  00000-0  00000-0 0  0001",
        line2="2 99999  97.4000 100.0000 0001000 100.0000 260.0000 15.20000000 00001",
    )


# =============================================================================
# FIXTURES - Common test setup
# =============================================================================


@pytest.fixture
def base_datetime() -> datetime:
    """Standard horizon anchor for tests."""
    return BASE_TIME


@pytest.fixture
def observer() -> Observer:
    """Observer in Dubai."""
    return Observer(latitude=25.2048, longitude=55.2708, name="Dubai")


@pytest.fixture
def sample_tle_lines() -> Tuple[str, str]:
    """Sample TLE data for ICEYE-X44."""
    return (
        "1 62707U 25009DC  25306.22031033  .00004207  00000+0  39848-3 0  9995",
        "2 62707  97.7269  23.9854 0002193 135.9671 224.1724 14.94137357 66022",
    )


@pytest.fixture
def sample_tle_text(sample_tle_lines: Tuple[str, str]) -> str:
    """Three-line TLE text for ICEYE-X44."""
    return f"ICEYE-X44\n{sample_tle_lines[0]}\n{sample_tle_lines[1]}\n"


@pytest.fixture
def sample_element_set(sample_tle_lines: Tuple[str, str]) -> ElementSet:
    return ElementSet("ICEYE-X44", sample_tle_lines[0], sample_tle_lines[1])
