"""BikeTraffic - Time-of-day traffic aggregation for Bluebikes stations."""

__version__ = "0.1.0"

from .models import Station, Trip, StationTraffic, RadiusScale, TrafficSnapshot
from .buckets import MinuteBuckets, build_buckets, select_trips
from .traffic import StationCounts, count_by_station, merge_traffic, compute_station_traffic
from .scale import build_radius_scale, quantize_flow
from .timeofday import NO_FILTER, format_time, minutes_since_midnight, parse_time, window_bounds
from .loader import TripDataLoader
from .station_traffic import StationTrafficTracker

__all__ = [
    "StationTrafficTracker",
    "TripDataLoader",
    "MinuteBuckets",
    "build_buckets",
    "select_trips",
    "StationCounts",
    "count_by_station",
    "merge_traffic",
    "compute_station_traffic",
    "build_radius_scale",
    "quantize_flow",
    "NO_FILTER",
    "format_time",
    "minutes_since_midnight",
    "parse_time",
    "window_bounds",
    "Station",
    "Trip",
    "StationTraffic",
    "RadiusScale",
    "TrafficSnapshot",
]
