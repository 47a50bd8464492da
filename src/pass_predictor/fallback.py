"""
Threshold fallback policy for next-pass lookups.

If no pass clears the default minimum elevation, the whole scan is
repeated at progressively lower thresholds. Every rung is an
independent scan; nothing is carried over between them.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence
import logging

from .config import DEFAULT_FALLBACK_THRESHOLDS
from .elements import ElementSet
from .observer import Observer
from .predictor import PassPredictor
from .scanner import Pass
from .utils import get_current_utc

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FallbackResult:
    """Outcome of the threshold ladder."""

    pass_: Optional[Pass]
    min_elevation_deg: Optional[float]  # threshold that produced pass_
    attempted: List[float] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.pass_ is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "found": self.found,
            "pass": self.pass_.to_dict() if self.pass_ is not None else None,
            "min_elevation_deg": self.min_elevation_deg,
            "attempted_thresholds": list(self.attempted),
        }


def find_next_pass_with_fallback(
    element_sets: Iterable[ElementSet],
    observer: Observer,
    predictor: Optional[PassPredictor] = None,
    thresholds: Optional[Sequence[float]] = None,
    now: Optional[datetime] = None,
) -> FallbackResult:
    """
    Find the next pass, lowering the elevation threshold until one is found.

    Args:
        element_sets: Satellites to scan
        observer: Ground observer
        predictor: PassPredictor to use (default: new PassPredictor)
        thresholds: Descending thresholds to try (default: predictor config, 25/15/5°)
        now: Horizon anchor shared by every rung (default: current UTC)

    Returns:
        FallbackResult; ``found`` is False when no threshold yields a pass
    """
    if predictor is None:
        predictor = PassPredictor()
    if thresholds is None:
        thresholds = predictor.config.fallback_thresholds or DEFAULT_FALLBACK_THRESHOLDS

    element_sets = list(element_sets)
    anchor = now if now is not None else get_current_utc()
    attempted: List[float] = []

    for threshold in thresholds:
        attempted.append(threshold)
        passes = predictor.scan_passes(element_sets, observer, threshold, now=anchor)
        if passes:
            if len(attempted) > 1:
                logger.info(f"Found pass with lowered threshold {threshold}°: {passes[0]}")
            return FallbackResult(pass_=passes[0], min_elevation_deg=threshold, attempted=attempted)

        logger.info(f"No passes found with {threshold}° threshold")

    logger.warning(f"No satellite passes found in the next 24 hours over {observer}")
    return FallbackResult(pass_=None, min_elevation_deg=None, attempted=attempted)
