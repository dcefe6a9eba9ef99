"""Data models for Bluebikes station traffic."""

from dataclasses import dataclass
from typing import Dict, List, Optional
from datetime import datetime


@dataclass(frozen=True)
class Station:
    """Represents a Bluebikes docking station."""
    short_name: str  # Unique station id, matches trip start/end ids
    name: str
    lat: float
    lon: float
    capacity: Optional[int] = None


@dataclass(frozen=True)
class Trip:
    """Represents a single ride from one station to another."""
    start_station_id: Optional[str]
    end_station_id: Optional[str]
    started_at: Optional[datetime]  # None when the source value could not be parsed
    ended_at: Optional[datetime]
    ride_id: Optional[str] = None
    bike_type: Optional[str] = None  # e.g., "classic_bike", "electric_bike"
    is_member: Optional[bool] = None


@dataclass(frozen=True)
class StationTraffic:
    """Traffic at one station for a single aggregation pass."""
    station: Station
    arrivals: int
    departures: int

    @property
    def short_name(self) -> str:
        return self.station.short_name

    @property
    def total_traffic(self) -> int:
        return self.arrivals + self.departures

    @property
    def departure_ratio(self) -> Optional[float]:
        """Share of traffic that is departures, or None for an idle station."""
        if self.total_traffic == 0:
            return None
        return self.departures / self.total_traffic


@dataclass(frozen=True)
class RadiusScale:
    """
    Square-root scale mapping a station's total traffic to a marker radius.

    Values outside the domain are extrapolated, not clamped.
    """
    domain: tuple  # (0, max_traffic)
    range_: tuple  # (min_radius, max_radius)

    def __call__(self, value: float) -> float:
        d0, d1 = (_signed_sqrt(d) for d in self.domain)
        r0, r1 = self.range_
        if d1 == d0:
            return float(r0)
        t = (_signed_sqrt(value) - d0) / (d1 - d0)
        return r0 + (r1 - r0) * t


@dataclass
class TrafficSnapshot:
    """Annotated station list and scale for one time filter."""
    time_filter: Optional[int]  # None means all trips
    stations: List[StationTraffic]
    radius_scale: RadiusScale
    max_traffic: int

    def by_station(self) -> Dict[str, StationTraffic]:
        return {traffic.short_name: traffic for traffic in self.stations}

    @property
    def total_departures(self) -> int:
        return sum(traffic.departures for traffic in self.stations)

    @property
    def total_arrivals(self) -> int:
        return sum(traffic.arrivals for traffic in self.stations)


def _signed_sqrt(value: float) -> float:
    return -((-value) ** 0.5) if value < 0 else value ** 0.5
