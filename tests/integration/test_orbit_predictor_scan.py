"""
Integration tests: full scans with the orbit-predictor adapter on a real TLE.
"""

import pytest

from pass_predictor.elements import parse_element_sets
from pass_predictor.fallback import find_next_pass_with_fallback
from pass_predictor.config import PredictorConfig
from pass_predictor.predictor import PassPredictor
from pass_predictor.scanner import SCAN_HORIZON, SKIP_AHEAD

BROKEN_TLE = "BROKEN\n1 this is not\n2 an element set\n"


@pytest.fixture
def predictor() -> PassPredictor:
    return PassPredictor(config=PredictorConfig(max_workers=2))


class TestRealPropagation:
    """Scans of ICEYE-X44 over Dubai."""

    def test_low_threshold_finds_passes(self, predictor, sample_tle_text, observer, base_datetime) -> None:
        element_sets = parse_element_sets(sample_tle_text)

        passes = predictor.scan_passes(element_sets, observer, 5.0, now=base_datetime)

        assert passes
        for p in passes:
            assert p.satellite_name == "ICEYE-X44"
            assert p.elevation_deg >= 5.0
            assert 0.0 <= p.azimuth_deg < 360.0
            assert base_datetime <= p.time < base_datetime + SCAN_HORIZON

        times = [p.time for p in passes]
        assert times == sorted(times)
        assert all(b - a >= SKIP_AHEAD for a, b in zip(times, times[1:]))

    def test_deterministic(self, predictor, sample_tle_text, observer, base_datetime) -> None:
        element_sets = parse_element_sets(sample_tle_text)

        first = predictor.scan_passes(element_sets, observer, 10.0, now=base_datetime)
        second = predictor.scan_passes(element_sets, observer, 10.0, now=base_datetime)

        assert first == second

    def test_broken_element_set_does_not_abort(self, predictor, sample_tle_text, observer, base_datetime) -> None:
        element_sets = parse_element_sets(BROKEN_TLE + sample_tle_text)
        assert [es.name for es in element_sets] == ["BROKEN", "ICEYE-X44"]

        passes = predictor.scan_passes(element_sets, observer, 5.0, now=base_datetime)

        assert any(p.satellite_name == "ICEYE-X44" for p in passes)
        assert all(p.satellite_name == "ICEYE-X44" for p in passes)

    def test_fallback_finds_pass(self, predictor, sample_tle_text, observer, base_datetime) -> None:
        result = find_next_pass_with_fallback(
            parse_element_sets(sample_tle_text), observer, predictor, now=base_datetime
        )

        assert result.found
        assert result.min_elevation_deg in (25.0, 15.0, 5.0)
        assert result.pass_.elevation_deg >= result.min_elevation_deg
