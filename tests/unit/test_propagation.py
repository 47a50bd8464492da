"""
Tests for the orbit-predictor propagation adapter.
"""

import math
from datetime import datetime
from unittest.mock import MagicMock, patch

import pytest

from pass_predictor.elements import ElementSet
from pass_predictor.observer import Observer
from pass_predictor.propagation import (
    ElementSetError,
    LookAngles,
    OrbitPredictorAdapter,
    OrbitPredictorPropagator,
)

WHEN = datetime(2025, 11, 8, 12, 0, 0)


def create_mock_predictor(position_ecef=(6871.0, 0.0, 0.0)):
    """Create a mock TLEPredictor returning a fixed position."""
    predictor = MagicMock()
    mock_position = MagicMock()
    mock_position.position_ecef = position_ecef
    predictor.get_position = MagicMock(return_value=mock_position)
    return predictor


class TestOrbitPredictorAdapter:
    """Tests for OrbitPredictorAdapter.load."""

    def test_load_real_tle(self, sample_element_set) -> None:
        propagator = OrbitPredictorAdapter().load(sample_element_set)

        assert isinstance(propagator, OrbitPredictorPropagator)
        assert propagator.satellite_name == "ICEYE-X44"

    def test_load_passes_data_lines_only(self, sample_element_set) -> None:
        with patch("pass_predictor.propagation.get_predictor_from_tle_lines") as mock_get:
            OrbitPredictorAdapter().load(sample_element_set)

        mock_get.assert_called_once_with((sample_element_set.line1, sample_element_set.line2))

    def test_load_failure_raises_element_set_error(self) -> None:
        element_set = ElementSet("BAD", "garbage", "more garbage")

        with patch(
            "pass_predictor.propagation.get_predictor_from_tle_lines",
            side_effect=ValueError("bad TLE"),
        ):
            with pytest.raises(ElementSetError, match="BAD"):
                OrbitPredictorAdapter().load(element_set)


class TestOrbitPredictorPropagator:
    """Tests for look angle computation."""

    def test_real_look_angles_in_range(self, sample_element_set, observer) -> None:
        propagator = OrbitPredictorAdapter().load(sample_element_set)

        angles = propagator.look_angles(observer, WHEN)

        assert isinstance(angles, LookAngles)
        assert -90.0 <= angles.elevation_deg <= 90.0
        assert 0.0 <= angles.azimuth_deg < 360.0
        assert angles.range_km > 0

    def test_real_look_angles_deterministic(self, sample_element_set, observer) -> None:
        propagator = OrbitPredictorAdapter().load(sample_element_set)

        assert propagator.look_angles(observer, WHEN) == propagator.look_angles(observer, WHEN)

    def test_propagation_exception_returns_none(self, observer) -> None:
        predictor = MagicMock()
        predictor.get_position.side_effect = RuntimeError("decayed")
        propagator = OrbitPredictorPropagator("SAT", predictor)

        assert propagator.look_angles(observer, WHEN) is None

    def test_non_finite_position_returns_none(self, observer) -> None:
        propagator = OrbitPredictorPropagator("SAT", create_mock_predictor((math.nan, math.nan, math.nan)))

        assert propagator.look_angles(observer, WHEN) is None

    def test_location_cached_per_observer(self) -> None:
        propagator = OrbitPredictorPropagator("SAT", create_mock_predictor())
        obs = Observer(latitude=10.0, longitude=20.0, height_km=0.5)

        first = propagator._get_location(obs)
        second = propagator._get_location(Observer(latitude=10.0, longitude=20.0, height_km=0.5))

        assert first is second
        assert first.latitude_deg == 10.0
        assert first.longitude_deg == 20.0
        assert first.elevation_m == 500.0
