"""Loader for Bluebikes station and trip data files."""

import io
import json
import logging
from typing import Dict, List, Optional

import pandas as pd

from .models import Station, Trip

logger = logging.getLogger(__name__)

TRIP_COLUMNS = ["start_station_id", "end_station_id", "started_at", "ended_at"]
TIMESTAMP_COLUMNS = ["started_at", "ended_at"]


class TripDataLoader:
    """Parses and indexes station and trip records."""

    def __init__(self):
        """Initialize the loader."""
        self.stations: Dict[str, Station] = {}  # short_name -> Station
        self.stations_by_name: Dict[str, List[str]] = {}  # name -> [short_names]
        self.trips: List[Trip] = []

    def load_from_files(self, stations_path: str, trips_path: str) -> None:
        """Load stations JSON and trips CSV from local files, replacing any loaded data."""
        logger.info(f"Loading station data from {stations_path} and trips from {trips_path}")
        self.clear()
        with open(stations_path, "r", encoding="utf-8") as f:
            self._load_stations(f.read())
        with open(trips_path, "r", encoding="utf-8") as f:
            self._load_trips(f.read())
        logger.info(f"Loaded {len(self.stations)} stations and {len(self.trips)} trips")

    def _load_stations(self, json_content: str) -> None:
        """Parse a stations document into Station objects."""
        try:
            document = json.loads(json_content)
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse station data: {e}")
            raise

        # Bluebikes/GBFS documents nest the list under data.stations
        if isinstance(document, dict):
            data = document.get("data") or {}
            records = data.get("stations") if isinstance(data, dict) else None
        else:
            records = document

        if not isinstance(records, list):
            logger.warning("Station data has no station list")
            return

        for record in records:
            if not isinstance(record, dict):
                logger.warning(f"Skipping station record that is not an object: {record!r}")
                continue

            station = self._parse_station(record)
            if station is None:
                continue

            if station.short_name in self.stations:
                logger.warning(f"Duplicate station {station.short_name}, keeping the first")
                continue

            self.stations[station.short_name] = station
            if station.name not in self.stations_by_name:
                self.stations_by_name[station.name] = []
            self.stations_by_name[station.name].append(station.short_name)

    @staticmethod
    def _parse_station(record: dict) -> Optional[Station]:
        """Build a Station from one JSON record, or None if it is unusable."""
        short_name = record.get("short_name")
        if short_name is None or str(short_name).strip() == "":
            logger.warning(f"Skipping station without short_name: {record.get('name')}")
            return None

        try:
            lat = float(record["lat"])
            lon = float(record["lon"])
        except (KeyError, TypeError, ValueError):
            logger.warning(f"Skipping station {short_name} with missing or bad coordinates")
            return None

        capacity = record.get("capacity")
        try:
            capacity = int(capacity) if capacity is not None else None
        except (TypeError, ValueError):
            capacity = None

        return Station(
            short_name=str(short_name).strip(),
            name=record.get("name") or str(short_name),
            lat=lat,
            lon=lon,
            capacity=capacity,
        )

    def _load_trips(self, csv_content: str) -> None:
        """Parse a trips CSV into Trip objects."""
        df = pd.read_csv(io.StringIO(csv_content), dtype=str)

        missing = [column for column in TRIP_COLUMNS if column not in df.columns]
        if missing:
            logger.error(f"Trip data is missing columns: {missing}")
            raise ValueError(f"Trip data is missing required columns: {', '.join(missing)}")

        # Unparseable timestamps become NaT and are left out when bucketing
        for column in TIMESTAMP_COLUMNS:
            df[column] = pd.to_datetime(df[column], format="ISO8601", errors="coerce")

        bad_rows = int(df[TIMESTAMP_COLUMNS].isna().any(axis=1).sum())
        if bad_rows:
            logger.warning(f"{bad_rows} trips have a missing or malformed timestamp")

        for row in df.to_dict("records"):
            self.trips.append(
                Trip(
                    start_station_id=_clean_text(row["start_station_id"]),
                    end_station_id=_clean_text(row["end_station_id"]),
                    started_at=_to_datetime(row["started_at"]),
                    ended_at=_to_datetime(row["ended_at"]),
                    ride_id=_clean_text(row.get("ride_id")),
                    bike_type=_clean_text(row.get("rideable_type", row.get("bike_type"))),
                    is_member=_to_member_flag(row.get("is_member", row.get("member_casual"))),
                )
            )

        logger.debug(f"Parsed {len(df)} trip rows")

    def get_station(self, short_name: str) -> Station:
        """Get station by short_name."""
        if short_name not in self.stations:
            raise ValueError(f"Station {short_name} not found")
        return self.stations[short_name]

    def find_stations_by_name(self, name: str) -> List[Station]:
        """Find stations by name (partial match)."""
        results = []
        name_lower = name.lower()

        for station_name, short_names in self.stations_by_name.items():
            if name_lower in station_name.lower():
                for short_name in short_names:
                    results.append(self.stations[short_name])

        return results

    def get_stations(self) -> List[Station]:
        """All loaded stations, in file order."""
        return list(self.stations.values())

    def clear(self) -> None:
        """Clear all loaded data to free memory."""
        self.stations.clear()
        self.stations_by_name.clear()
        self.trips.clear()
        logger.info("Cleared station and trip data from memory")


def _clean_text(value) -> Optional[str]:
    if value is None or pd.isna(value):
        return None
    text = str(value).strip()
    return text or None


def _to_datetime(value):
    if value is None or pd.isna(value):
        return None
    return value.to_pydatetime()


def _to_member_flag(value) -> Optional[bool]:
    text = _clean_text(value)
    if text is None:
        return None
    text = text.lower()
    if text in ("1", "true", "member"):
        return True
    if text in ("0", "false", "casual"):
        return False
    return None
