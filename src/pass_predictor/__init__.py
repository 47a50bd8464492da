"""
Satellite Pass Predictor

Predicts when satellites rise above a minimum elevation over a ground
observer within the next 24 hours, using TLE element sets.
"""

from .elements import ElementSet, load_element_sets, parse_element_sets
from .fallback import FallbackResult, find_next_pass_with_fallback
from .observer import InvalidObserverError, Observer
from .predictor import PassPredictor, next_pass, scan_passes
from .propagation import ElementSetError, LookAngles, OrbitPredictorAdapter
from .scanner import Pass, ScanCancelledError, VisibilityScanner

__version__ = "0.1.0"

__all__ = [
    "ElementSet",
    "ElementSetError",
    "FallbackResult",
    "InvalidObserverError",
    "LookAngles",
    "Observer",
    "OrbitPredictorAdapter",
    "Pass",
    "PassPredictor",
    "ScanCancelledError",
    "VisibilityScanner",
    "find_next_pass_with_fallback",
    "load_element_sets",
    "next_pass",
    "parse_element_sets",
    "scan_passes",
]
