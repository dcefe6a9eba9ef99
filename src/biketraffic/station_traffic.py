"""Main station traffic tracker class."""

import logging
from typing import List, Optional, Sequence

from .buckets import MinuteBuckets
from .loader import TripDataLoader
from .models import Station, StationTraffic, TrafficSnapshot, Trip
from .scale import build_radius_scale, max_traffic
from .timeofday import format_time, normalize_filter
from .traffic import compute_station_traffic

logger = logging.getLogger(__name__)


class StationTrafficTracker:
    """
    Tracks trip traffic at Bluebikes stations for a time-of-day filter.

    This class provides methods to:
    - Load stations and trips (from objects or local files)
    - Recompute per-station arrivals and departures as the filter changes
    - Derive the marker radius scale for each recomputation
    """

    def __init__(self, stations: Optional[Sequence[Station]] = None, trips: Optional[Sequence[Trip]] = None):
        """
        Initialize the tracker.

        Args:
            stations: Optional station list. If given together with trips, the
                      tracker is loaded immediately; otherwise call load() or
                      load_from_files().
            trips: Optional trip list.
        """
        self.loader = TripDataLoader()
        self.stations: List[Station] = []
        self.buckets: Optional[MinuteBuckets] = None
        self.original_max = 0

        if stations is not None and trips is not None:
            self.load(stations, trips)

    def load(self, stations: Sequence[Station], trips: Sequence[Trip]) -> None:
        """
        Bucket the trips and record the unfiltered traffic baseline.

        Args:
            stations: Stations to annotate.
            trips: Every trip in the dataset.
        """
        self.stations = list(stations)
        self.buckets = MinuteBuckets.from_trips(trips)
        self.original_max = max_traffic(compute_station_traffic(self.stations, self.buckets))
        logger.info(
            f"Loaded {len(self.stations)} stations; busiest station has {self.original_max} trips"
        )

    def load_from_files(self, stations_path: str, trips_path: str) -> None:
        """
        Load stations and trips from local files.

        Args:
            stations_path: Path to the stations JSON document
            trips_path: Path to the trips CSV document
        """
        self.loader.load_from_files(stations_path, trips_path)
        self.load(self.loader.get_stations(), self.loader.trips)

    def get_traffic(self, time_filter: Optional[int] = None) -> TrafficSnapshot:
        """
        Compute traffic at every station for a time filter.

        Args:
            time_filter: Minute of day (0-1439) for the 120-minute window around
                         it, or None / -1 for all trips.

        Returns:
            TrafficSnapshot with fresh per-station traffic and radius scale.

        Raises:
            RuntimeError: If no data has been loaded.
            ValueError: If the time filter is invalid.
        """
        if self.buckets is None:
            raise RuntimeError("No trip data loaded; call load() first")

        minute = normalize_filter(time_filter)
        traffic = compute_station_traffic(self.stations, self.buckets, minute)
        radius_scale = build_radius_scale(traffic, minute, self.original_max)

        return TrafficSnapshot(
            time_filter=minute,
            stations=traffic,
            radius_scale=radius_scale,
            max_traffic=max_traffic(traffic),
        )

    def get_station(self, station_input: str) -> Station:
        """
        Get a station by short_name or name.

        Raises:
            ValueError: If station not found.
        """
        for station in self.stations:
            if station.short_name == station_input:
                return station

        name_lower = station_input.lower()
        for station in self.stations:
            if name_lower in station.name.lower():
                return station

        raise ValueError(f"No station found matching '{station_input}'")

    def get_station_traffic(self, station_input: str, time_filter: Optional[int] = None) -> StationTraffic:
        """Traffic for a single station, looked up by short_name or name."""
        station = self.get_station(station_input)
        snapshot = self.get_traffic(time_filter)
        return snapshot.by_station()[station.short_name]

    @staticmethod
    def format_time(minute: int) -> str:
        """Slider label for a minute of the day."""
        return format_time(minute)
