"""
Element-set (TLE) parsing and loading.

This module splits raw multi-satellite TLE text into per-satellite
records. No validation of the data lines is done here; malformed lines
are rejected later by the propagation adapter.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Union
import logging

logger = logging.getLogger(__name__)

# Earth-observation satellites tracked for disaster coverage
SAMPLE_ELEMENT_SETS = """LANDSAT 8
1 39084U 13008A   24001.00000000  .00000012  00000-0  28110-4 0  9993
2 39084  98.2062 348.0319 0001378  83.7123 276.4313 14.57107527560649
TERRA
1 25994U 99068A   24001.00000000  .00000023  00000-0  42979-4 0  9991
2 25994  98.2022  10.3559 0001378  83.7123 276.4313 14.57107527260649
AQUA
1 27424U 02022A   24001.00000000  .00000024  00000-0  43856-4 0  9996
2 27424  98.2123  70.8559 0002378  93.7123 266.4313 14.57207527160649
NOAA 18
1 28654U 05018A   24001.00000000  .00000012  00000-0  28110-4 0  9997
2 28654  99.0581 161.3857 0013414  73.9446 286.3932 14.12501637967188"""


@dataclass(frozen=True)
class ElementSet:
    """
    One satellite's orbital elements at a reference epoch.

    Holds the display name and the two fixed-format TLE data lines
    consumed by the propagation adapter.
    """

    name: str
    line1: str
    line2: str

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "line1": self.line1, "line2": self.line2}

    def __str__(self) -> str:
        return f"ElementSet('{self.name}')"


def parse_element_sets(raw_text: str) -> List[ElementSet]:
    """
    Parse raw TLE text into element sets.

    Lines are consumed in groups of three (name, line 1, line 2). A
    trailing group with fewer than three lines is dropped.

    Args:
        raw_text: Multi-satellite TLE text

    Returns:
        List of ElementSet in input order (empty for empty input)

    Raises:
        TypeError: If raw_text is not a string
    """
    if not isinstance(raw_text, str):
        raise TypeError(f"Element-set text must be a string, got {type(raw_text).__name__}")

    if not raw_text.strip():
        return []

    lines = raw_text.strip().split("\n")
    element_sets = []

    for i in range(0, len(lines), 3):
        if i + 2 < len(lines):
            element_sets.append(
                ElementSet(
                    name=lines[i].strip(),
                    line1=lines[i + 1].strip(),
                    line2=lines[i + 2].strip(),
                )
            )

    dropped = len(lines) % 3
    if dropped:
        logger.debug(f"Dropped {dropped} trailing line(s) of an incomplete element set")

    logger.debug(f"Parsed {len(element_sets)} element sets from {len(lines)} lines")
    return element_sets


def load_element_sets(tle_file_path: Union[str, Path]) -> List[ElementSet]:
    """
    Load element sets from a TLE file.

    Args:
        tle_file_path: Path to TLE file

    Returns:
        List of ElementSet in file order

    Raises:
        FileNotFoundError: If the TLE file doesn't exist
    """
    tle_path = Path(tle_file_path)
    if not tle_path.exists():
        raise FileNotFoundError(f"TLE file not found: {tle_file_path}")

    with open(tle_path, "r") as f:
        element_sets = parse_element_sets(f.read())

    logger.info(f"Loaded {len(element_sets)} element sets from {tle_path}")
    return element_sets


def write_sample_element_sets(output_file: Union[str, Path]) -> Path:
    """
    Create a sample TLE file with common earth-observation satellites.

    Args:
        output_file: Path to create sample TLE file

    Returns:
        Path of the written file
    """
    output_path = Path(output_file)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, "w") as f:
        f.write(SAMPLE_ELEMENT_SETS + "\n")

    logger.info(f"Created sample TLE file: {output_path}")
    return output_path
