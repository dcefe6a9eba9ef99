"""Aggregate trips into per-station arrival and departure counts."""

import logging
from collections import Counter
from typing import Iterable, List, Optional, Sequence

from .buckets import MinuteBuckets
from .models import Station, StationTraffic, Trip

logger = logging.getLogger(__name__)


class StationCounts(Counter):
    """Trip counts keyed by station id."""

    def count(self, station_id: Optional[str]) -> int:
        """Count for a station, 0 if no trip touched it."""
        return self.get(station_id, 0)


def count_by_station(trips: Iterable[Trip], key: str) -> StationCounts:
    """
    Count trips grouped by a station id attribute.

    Args:
        trips: Trips to count.
        key: "start_station_id" for departures, "end_station_id" for arrivals.

    Returns:
        StationCounts for every id seen, including ids with no matching station.
    """
    return StationCounts(getattr(trip, key) for trip in trips)


def merge_traffic(
    stations: Sequence[Station],
    departure_counts: StationCounts,
    arrival_counts: StationCounts,
) -> List[StationTraffic]:
    """
    Attach counts to every station, keeping order and zero-traffic stations.

    A fresh StationTraffic is built per station so nothing carries over from
    an earlier pass.
    """
    return [
        StationTraffic(
            station=station,
            arrivals=arrival_counts.count(station.short_name),
            departures=departure_counts.count(station.short_name),
        )
        for station in stations
    ]


def compute_station_traffic(
    stations: Sequence[Station],
    buckets: MinuteBuckets,
    time_filter: Optional[int] = None,
) -> List[StationTraffic]:
    """
    Compute arrivals, departures and total traffic for each station.

    Args:
        stations: Stations to annotate.
        buckets: Buckets built from the dataset's trips.
        time_filter: Minute of day for a windowed count, or None / -1 for all trips.

    Returns:
        One StationTraffic per station, in input order.

    Raises:
        ValueError: If the time filter is invalid.
    """
    departures = buckets.departures(time_filter)
    arrivals = buckets.arrivals(time_filter)

    departure_counts = count_by_station(departures, "start_station_id")
    arrival_counts = count_by_station(arrivals, "end_station_id")

    logger.debug(
        f"Filter {time_filter}: {len(departures)} departures, {len(arrivals)} arrivals "
        f"across {len(stations)} stations"
    )
    return merge_traffic(stations, departure_counts, arrival_counts)
