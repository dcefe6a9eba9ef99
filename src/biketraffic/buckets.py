"""Per-minute trip buckets, built once per loaded dataset."""

import logging
from itertools import chain
from typing import Iterable, List, Optional

from .models import Trip
from .timeofday import MINUTES_PER_DAY, minutes_since_midnight, normalize_filter, window_bounds

logger = logging.getLogger(__name__)


class MinuteBuckets:
    """
    Trips grouped by departure minute and by arrival minute.

    Each of the two arrays has exactly 1440 slots, one per minute of the day.
    A trip whose start (or end) timestamp cannot be read is left out of the
    departure (or arrival) array only; the other array still receives it.
    """

    def __init__(self):
        self.departures_by_minute: List[List[Trip]] = [[] for _ in range(MINUTES_PER_DAY)]
        self.arrivals_by_minute: List[List[Trip]] = [[] for _ in range(MINUTES_PER_DAY)]
        self.skipped_departures = 0
        self.skipped_arrivals = 0

    @classmethod
    def from_trips(cls, trips: Iterable[Trip]) -> "MinuteBuckets":
        """Bucket every trip by the minute it started and the minute it ended."""
        buckets = cls()
        trip_count = 0

        for trip in trips:
            trip_count += 1

            started = minutes_since_midnight(trip.started_at)
            if started is None:
                buckets.skipped_departures += 1
            else:
                buckets.departures_by_minute[started].append(trip)

            ended = minutes_since_midnight(trip.ended_at)
            if ended is None:
                buckets.skipped_arrivals += 1
            else:
                buckets.arrivals_by_minute[ended].append(trip)

        if buckets.skipped_departures or buckets.skipped_arrivals:
            logger.warning(
                f"Skipped {buckets.skipped_departures} departure and "
                f"{buckets.skipped_arrivals} arrival timestamps that could not be parsed"
            )
        logger.info(f"Bucketed {trip_count} trips into {MINUTES_PER_DAY} minute slots")
        return buckets

    def departures(self, time_filter: Optional[int] = None) -> List[Trip]:
        """Trips departing inside the filter window (all trips if no filter)."""
        return select_trips(self.departures_by_minute, time_filter)

    def arrivals(self, time_filter: Optional[int] = None) -> List[Trip]:
        """Trips arriving inside the filter window (all trips if no filter)."""
        return select_trips(self.arrivals_by_minute, time_filter)


def build_buckets(trips: Iterable[Trip]) -> MinuteBuckets:
    """Build departure and arrival buckets for a list of trips."""
    return MinuteBuckets.from_trips(trips)


def select_trips(trips_by_minute: List[List[Trip]], time_filter: Optional[int] = None) -> List[Trip]:
    """
    Collect the trips from the buckets that fall inside a time filter window.

    With no filter every bucket is used. Otherwise the buckets taken are
    [min_minute, max_minute), split into [min_minute, 1440) and
    [0, max_minute) when the window crosses midnight.

    Note: the window includes the minute 60 before the filter but not the
    minute 60 after it. This is the behaviour the slider has always had, so
    it is kept even though a symmetric window was probably intended.

    Args:
        trips_by_minute: A 1440-slot bucket array.
        time_filter: Minute of day, or None / -1 for all trips.

    Returns:
        Flat list of the selected trips.
    """
    minute = normalize_filter(time_filter)
    if minute is None:
        return list(chain.from_iterable(trips_by_minute))

    min_minute, max_minute = window_bounds(minute)
    if min_minute <= max_minute:
        selected = trips_by_minute[min_minute:max_minute]
    else:
        selected = trips_by_minute[min_minute:] + trips_by_minute[:max_minute]

    return list(chain.from_iterable(selected))
