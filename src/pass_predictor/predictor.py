"""
Multi-satellite pass prediction.

This module runs the visibility scanner over every element set, either
serially or on a thread pool, and merges the results into one
time-sorted list of passes.
"""

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from threading import Event, Timer
from typing import Iterable, List, Optional
import logging
import math

from .config import PredictorConfig, get_optimal_workers
from .elements import ElementSet
from .observer import Observer
from .propagation import OrbitPredictorAdapter, PropagationAdapter
from .scanner import Pass, ScanCancelledError, VisibilityScanner
from .utils import get_current_utc

logger = logging.getLogger(__name__)


class _CancelSignal:
    """
    Cancellation seen by the scanner for one scan_passes call.

    Timeouts and worker failures set a private event, so a caller's
    cancel_event is only ever read and stays reusable across calls.
    """

    def __init__(self, external: Optional[Event] = None) -> None:
        self.external = external
        self._internal = Event()

    def set(self) -> None:
        self._internal.set()

    def is_set(self) -> bool:
        if self._internal.is_set():
            return True
        return self.external is not None and self.external.is_set()


class PassPredictor:
    """
    Predicts satellite passes over an observer for a 24 hour horizon.

    Scans of different satellites share nothing but the read-only
    observer and horizon anchor, so they run as independent tasks whose
    per-satellite buffers are merged after all tasks finish.
    """

    def __init__(
        self,
        adapter: Optional[PropagationAdapter] = None,
        config: Optional[PredictorConfig] = None,
    ) -> None:
        """
        Initialize the predictor.

        Args:
            adapter: Propagation adapter (default: orbit-predictor backed)
            config: Predictor configuration (default: PredictorConfig())
        """
        self.adapter = adapter if adapter is not None else OrbitPredictorAdapter()
        self.config = config if config is not None else PredictorConfig()
        self.scanner = VisibilityScanner(self.adapter)

    def scan_passes(
        self,
        element_sets: Iterable[ElementSet],
        observer: Observer,
        min_elevation_deg: Optional[float] = None,
        now: Optional[datetime] = None,
        timeout_s: Optional[float] = None,
        cancel_event: Optional[Event] = None,
    ) -> List[Pass]:
        """
        Find passes of all satellites over the observer.

        Args:
            element_sets: Satellites to scan
            observer: Ground observer
            min_elevation_deg: Minimum elevation (default from config, 25°)
            now: Horizon anchor (default: current UTC)
            timeout_s: Abort the scan after this many seconds (default from config)
            cancel_event: Optional external cancellation signal (read only, never set here)

        Returns:
            Passes sorted ascending by time; ties keep satellite order

        Raises:
            TypeError: If observer is not an Observer
            ValueError: If min_elevation_deg is out of range
            ScanCancelledError: If the scan timed out or was cancelled
        """
        if not isinstance(observer, Observer):
            raise TypeError(f"observer must be an Observer, got {type(observer).__name__}")

        if min_elevation_deg is None:
            min_elevation_deg = self.config.default_min_elevation_deg
        if not math.isfinite(min_elevation_deg) or not -90 <= min_elevation_deg <= 90:
            raise ValueError(f"Invalid minimum elevation: {min_elevation_deg}. Must be between -90 and 90 degrees.")

        start_time = now if now is not None else get_current_utc()
        element_sets = list(element_sets)
        if not element_sets:
            logger.info("No element sets to scan")
            return []

        if timeout_s is None:
            timeout_s = self.config.timeout_s
        cancel = _CancelSignal(cancel_event)

        timer = None
        if timeout_s is not None:
            timer = Timer(timeout_s, cancel.set)
            timer.daemon = True
            timer.start()

        workers = get_optimal_workers(self.config.max_workers, len(element_sets))
        logger.info(
            f"Scanning {len(element_sets)} satellites over {observer} from {start_time} "
            f"(min elevation {min_elevation_deg}°, {workers} workers)"
        )

        try:
            if workers == 1:
                buffers = [
                    self._scan_satellite(es, observer, start_time, min_elevation_deg, cancel)
                    for es in element_sets
                ]
            else:
                buffers = self._scan_parallel(
                    element_sets, observer, start_time, min_elevation_deg, cancel, workers
                )
        finally:
            if timer is not None:
                timer.cancel()

        passes = [p for buffer in buffers for p in buffer]
        # list.sort is stable, so equal times keep satellite order
        passes.sort(key=lambda p: p.time)

        logger.info(f"Found {len(passes)} passes across {len(element_sets)} satellites")
        return passes

    def next_pass(
        self,
        element_sets: Iterable[ElementSet],
        observer: Observer,
        now: Optional[datetime] = None,
    ) -> Optional[Pass]:
        """
        Get the earliest pass at the default threshold.

        Returns:
            Earliest Pass or None if nothing rises above the threshold
        """
        passes = self.scan_passes(element_sets, observer, now=now)
        if passes:
            return passes[0]
        return None

    def _scan_parallel(
        self,
        element_sets: List[ElementSet],
        observer: Observer,
        start_time: datetime,
        min_elevation_deg: float,
        cancel: _CancelSignal,
        workers: int,
    ) -> List[List[Pass]]:
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="pass-scan") as executor:
            futures = [
                executor.submit(
                    self._scan_satellite, es, observer, start_time, min_elevation_deg, cancel
                )
                for es in element_sets
            ]
            buffers = []
            try:
                for future in futures:
                    buffers.append(future.result())
            except ScanCancelledError:
                cancel.set()
                for future in futures:
                    future.cancel()
                raise
        return buffers

    def _scan_satellite(
        self,
        element_set: ElementSet,
        observer: Observer,
        start_time: datetime,
        min_elevation_deg: float,
        cancel: _CancelSignal,
    ) -> List[Pass]:
        try:
            passes = self.scanner.scan(element_set, observer, start_time, min_elevation_deg, cancel)
        except ScanCancelledError:
            raise
        except Exception as e:
            logger.error(f"Error scanning satellite {element_set.name}: {e}")
            return []

        logger.debug(f"{element_set.name}: {len(passes)} passes")
        return passes

    def __repr__(self) -> str:
        return f"PassPredictor(adapter={type(self.adapter).__name__}, max_workers={self.config.max_workers})"


def scan_passes(
    element_sets: Iterable[ElementSet],
    observer: Observer,
    min_elevation_deg: float = 25.0,
    now: Optional[datetime] = None,
) -> List[Pass]:
    """Scan passes with a default PassPredictor."""
    return PassPredictor().scan_passes(element_sets, observer, min_elevation_deg, now=now)


def next_pass(
    element_sets: Iterable[ElementSet],
    observer: Observer,
    now: Optional[datetime] = None,
) -> Optional[Pass]:
    """Earliest pass at 25° with a default PassPredictor, or None."""
    return PassPredictor().next_pass(element_sets, observer, now=now)
