"""Radius and flow-color scales for station markers."""

import logging
from typing import Optional, Sequence

from .models import RadiusScale, StationTraffic
from .timeofday import normalize_filter

logger = logging.getLogger(__name__)

UNFILTERED_RANGE = (0, 15)
MIN_FILTERED_RADIUS = 1
BASE_MAX_RADIUS = 8
RADIUS_SPREAD = 12
MIN_SCALE_FACTOR = 0.3
MAX_SCALE_FACTOR = 1.0

FLOW_LEVELS = (0, 0.5, 1)


def max_traffic(traffic: Sequence[StationTraffic]) -> int:
    """Largest total traffic at any station, 0 for an empty list."""
    return max((station.total_traffic for station in traffic), default=0)


def build_radius_scale(
    traffic: Sequence[StationTraffic],
    time_filter: Optional[int] = None,
    original_max: Optional[int] = None,
) -> RadiusScale:
    """
    Build the marker radius scale for one aggregation pass.

    The domain is [0, max traffic], with the max forced to 1 when nothing
    moved. Without a filter the range is fixed at (0, 15). With a filter the
    upper radius shrinks with the window's share of the unfiltered max, so a
    quiet overnight window does not get full-size markers.

    Args:
        traffic: Station traffic for this pass.
        time_filter: The filter that produced ``traffic``.
        original_max: Max total traffic with no filter. Defaults to this
            pass's max.

    Returns:
        RadiusScale for the pass.
    """
    current_max = max_traffic(traffic)
    domain = (0, current_max or 1)

    if normalize_filter(time_filter) is None:
        return RadiusScale(domain=domain, range_=UNFILTERED_RANGE)

    if original_max is None:
        original_max = current_max

    scale_factor = current_max / (original_max or 1)
    scale_factor = min(max(scale_factor, MIN_SCALE_FACTOR), MAX_SCALE_FACTOR)
    max_radius = BASE_MAX_RADIUS + scale_factor * RADIUS_SPREAD

    logger.debug(f"Filter {time_filter}: max traffic {current_max}, scale factor {scale_factor:.2f}")
    return RadiusScale(domain=domain, range_=(MIN_FILTERED_RADIUS, max_radius))


def quantize_flow(ratio: Optional[float]):
    """
    Snap a departure ratio onto one of the flow color levels.

    [0, 1/3) -> 0 (mostly arrivals), [1/3, 2/3) -> 0.5 (balanced),
    [2/3, 1] -> 1 (mostly departures). None stays None.
    """
    if ratio is None:
        return None
    index = int(ratio * len(FLOW_LEVELS))
    index = min(max(index, 0), len(FLOW_LEVELS) - 1)
    return FLOW_LEVELS[index]
