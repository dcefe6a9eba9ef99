"""Tests for TripDataLoader."""

import json
import os
import tempfile
import unittest
from datetime import datetime
import sys
from pathlib import Path

# Add src to path so we can import biketraffic
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from biketraffic.loader import TripDataLoader
from biketraffic.station_traffic import StationTrafficTracker

STATIONS_JSON = json.dumps({
    "data": {
        "stations": [
            {"short_name": "M32006", "name": "MIT at Mass Ave / Amherst St", "lat": 42.3581, "lon": -71.0932, "capacity": 27},
            {"short_name": "M32011", "name": "Central Square at Mass Ave / Essex St", "lat": 42.3652, "lon": -71.1031},
            {"name": "No Id Station", "lat": 42.0, "lon": -71.0},
            {"short_name": "B32050", "name": "Bad Coordinates", "lat": "north", "lon": -71.0},
            {"short_name": "M32006", "name": "Duplicate MIT", "lat": 42.0, "lon": -71.0},
        ]
    }
})

TRIPS_CSV = """ride_id,rideable_type,started_at,ended_at,start_station_name,start_station_id,end_station_name,end_station_id,is_member
R1,classic_bike,2024-03-01 08:15:12,2024-03-01 08:31:40,MIT at Mass Ave / Amherst St,M32006,Central Square at Mass Ave / Essex St,M32011,1
R2,electric_bike,not a date,2024-03-01 09:02:00,Central Square at Mass Ave / Essex St,M32011,MIT at Mass Ave / Amherst St,M32006,0
R3,classic_bike,2024-03-01 23:55:00,2024-03-02 00:10:05,MIT at Mass Ave / Amherst St,M32006,,,1
"""


class TestTripDataLoader(unittest.TestCase):
    """Test station and trip parsing."""

    def test_load_stations_json(self):
        """Test parsing of the nested stations document."""
        loader = TripDataLoader()
        loader._load_stations(STATIONS_JSON)

        self.assertEqual(set(loader.stations), {"M32006", "M32011"})

        station = loader.stations["M32006"]
        self.assertEqual(station.name, "MIT at Mass Ave / Amherst St")
        self.assertEqual(station.capacity, 27)
        self.assertAlmostEqual(station.lat, 42.358, places=2)
        self.assertIsNone(loader.stations["M32011"].capacity)

    def test_load_stations_bare_list(self):
        """Test parsing a plain list of station records."""
        loader = TripDataLoader()
        loader._load_stations(json.dumps([{"short_name": "A1", "name": "A", "lat": "42.1", "lon": "-71.2"}]))

        self.assertAlmostEqual(loader.get_station("A1").lon, -71.2)

    def test_load_stations_invalid_json(self):
        """Test that a broken document is reported."""
        loader = TripDataLoader()
        with self.assertRaises(ValueError):
            loader._load_stations("{not json")

    def test_load_trips_csv(self):
        """Test parsing of trip rows."""
        loader = TripDataLoader()
        loader._load_trips(TRIPS_CSV)

        self.assertEqual(len(loader.trips), 3)

        first = loader.trips[0]
        self.assertEqual(first.start_station_id, "M32006")
        self.assertEqual(first.end_station_id, "M32011")
        self.assertEqual(first.started_at, datetime(2024, 3, 1, 8, 15, 12))
        self.assertEqual(first.ride_id, "R1")
        self.assertEqual(first.bike_type, "classic_bike")
        self.assertTrue(first.is_member)

    def test_load_trips_malformed_values(self):
        """Test that bad timestamps and blank ids become None."""
        loader = TripDataLoader()
        loader._load_trips(TRIPS_CSV)

        second, third = loader.trips[1], loader.trips[2]
        self.assertIsNone(second.started_at)
        self.assertEqual(second.ended_at, datetime(2024, 3, 1, 9, 2))
        self.assertFalse(second.is_member)
        self.assertIsNone(third.end_station_id)

    def test_load_trips_mixed_precision_timestamps(self):
        """Test that fractional seconds after whole-second rows still parse."""
        loader = TripDataLoader()
        loader._load_trips(
            "started_at,ended_at,start_station_id,end_station_id\n"
            "2024-03-01 08:15:12,2024-03-01 08:31:40,M32006,M32011\n"
            "2024-03-01 09:15:12.345,2024-03-01 09:40:01.5,M32011,M32006\n"
        )

        second = loader.trips[1]
        self.assertEqual(second.started_at, datetime(2024, 3, 1, 9, 15, 12, 345000))
        self.assertEqual(second.ended_at, datetime(2024, 3, 1, 9, 40, 1, 500000))

    def test_load_stations_skips_non_object_records(self):
        """Test that junk entries in the station list are skipped."""
        loader = TripDataLoader()
        loader._load_stations(json.dumps([
            {"short_name": "A1", "name": "A", "lat": 42.1, "lon": -71.2},
            "junk",
            None,
            7,
        ]))

        self.assertEqual(list(loader.stations), ["A1"])

    def test_load_stations_without_station_list(self):
        """Test documents with a null or empty data section."""
        for document in ({"data": None}, {"data": {"stations": None}}, {}, {"data": []}):
            loader = TripDataLoader()
            loader._load_stations(json.dumps(document))
            self.assertEqual(loader.stations, {})

    def test_load_trips_missing_columns(self):
        """Test error handling for a CSV without required columns."""
        loader = TripDataLoader()
        with self.assertRaises(ValueError):
            loader._load_trips("ride_id,started_at\nR1,2024-03-01 08:00:00\n")

    def test_find_stations_by_name(self):
        """Test finding stations by partial name match."""
        loader = TripDataLoader()
        loader._load_stations(STATIONS_JSON)

        results = loader.find_stations_by_name("mass ave")
        self.assertEqual(len(results), 2)

        results = loader.find_stations_by_name("Central")
        self.assertEqual([s.short_name for s in results], ["M32011"])

    def test_get_station_not_found(self):
        """Test error handling for non-existent station."""
        loader = TripDataLoader()
        with self.assertRaises(ValueError):
            loader.get_station("NONEXISTENT")

    def test_clear(self):
        """Test clearing loaded data."""
        loader = TripDataLoader()
        loader._load_stations(STATIONS_JSON)
        loader._load_trips(TRIPS_CSV)
        loader.clear()

        self.assertEqual(loader.stations, {})
        self.assertEqual(loader.trips, [])


class TestIntegration(unittest.TestCase):
    """Integration tests loading from files on disk."""

    def setUp(self):
        """Write fixture files."""
        self.tmpdir = tempfile.TemporaryDirectory()
        self.stations_path = os.path.join(self.tmpdir.name, "stations.json")
        self.trips_path = os.path.join(self.tmpdir.name, "trips.csv")
        with open(self.stations_path, "w", encoding="utf-8") as f:
            f.write(STATIONS_JSON)
        with open(self.trips_path, "w", encoding="utf-8") as f:
            f.write(TRIPS_CSV)

    def tearDown(self):
        self.tmpdir.cleanup()

    def test_tracker_load_from_files(self):
        """Test loading files and computing traffic end to end."""
        tracker = StationTrafficTracker()
        tracker.load_from_files(self.stations_path, self.trips_path)

        snapshot = tracker.get_traffic()
        by_name = snapshot.by_station()

        # R2 has no start time, so only R1 and R3 count as departures
        self.assertEqual(by_name["M32006"].departures, 2)
        self.assertEqual(by_name["M32011"].departures, 0)
        self.assertEqual(by_name["M32006"].arrivals, 1)
        self.assertEqual(by_name["M32011"].arrivals, 1)
        self.assertEqual(tracker.original_max, 3)

    def test_tracker_reload_same_files(self):
        """Test that loading the files again replaces the data instead of adding to it."""
        tracker = StationTrafficTracker()
        tracker.load_from_files(self.stations_path, self.trips_path)
        first = tracker.get_traffic()

        tracker.load_from_files(self.stations_path, self.trips_path)
        second = tracker.get_traffic()

        self.assertEqual(len(tracker.loader.trips), 3)
        self.assertEqual(len(tracker.stations), 2)
        self.assertEqual(second.total_departures, 2)
        self.assertEqual(tracker.original_max, 3)
        self.assertEqual(second, first)

    def test_tracker_midnight_window(self):
        """Test that a late trip shows up just after midnight."""
        tracker = StationTrafficTracker()
        tracker.load_from_files(self.stations_path, self.trips_path)

        traffic = tracker.get_station_traffic("M32006", 30)
        self.assertEqual(traffic.departures, 1)
        self.assertEqual(traffic.arrivals, 0)


if __name__ == "__main__":
    unittest.main()
