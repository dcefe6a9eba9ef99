"""Example usage of StationTrafficTracker."""

import logging
import sys
from pathlib import Path

# Add src to path so we can import biketraffic
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from biketraffic.scale import quantize_flow
from biketraffic.station_traffic import StationTrafficTracker
from biketraffic.timeofday import parse_time

# Set up logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)

FLOW_LABELS = {0: "mostly arrivals", 0.5: "balanced", 1: "mostly departures", None: "idle"}


def print_busiest_stations(tracker: StationTrafficTracker, time_filter=None, limit: int = 10):
    """
    Display the busiest stations for a time filter.

    Args:
        tracker: Loaded tracker.
        time_filter: Minute of day, or None for all trips.
        limit: Number of stations to show.
    """
    snapshot = tracker.get_traffic(time_filter)
    label = "any time" if snapshot.time_filter is None else tracker.format_time(snapshot.time_filter)

    print(f"\n{'='*70}")
    print(f"Busiest stations ({label})")
    print(f"{'='*70}\n")

    busiest = sorted(snapshot.stations, key=lambda t: t.total_traffic, reverse=True)[:limit]
    for traffic in busiest:
        radius = snapshot.radius_scale(traffic.total_traffic)
        flow = FLOW_LABELS[quantize_flow(traffic.departure_ratio)]
        print(
            f"  {traffic.station.name[:40]:40s} {traffic.total_traffic:5d} trips "
            f"({traffic.departures} out, {traffic.arrivals} in) r={radius:4.1f} {flow}"
        )

    print(f"\nDepartures: {snapshot.total_departures}  Arrivals: {snapshot.total_arrivals}")


def interactive_mode(tracker: StationTrafficTracker):
    """
    Run in interactive mode, allowing user to scrub through times of day.
    """
    print("Bluebikes Traffic - Interactive Mode")
    print("Enter a time as HH:MM (or -1 for any time)")
    print("(Type 'quit' to exit)\n")

    while True:
        try:
            user_input = input("Time (or 'quit'): ").strip()

            if user_input.lower() in ["quit", "q", "exit"]:
                print("Goodbye!")
                break

            if not user_input:
                continue

            try:
                print_busiest_stations(tracker, parse_time(user_input))
            except ValueError as e:
                print(f"Invalid time: {e}")

        except KeyboardInterrupt:
            print("\n\nGoodbye!")
            break


if __name__ == "__main__":
    if len(sys.argv) < 3:
        print("Usage: example.py STATIONS_JSON TRIPS_CSV [HH:MM]")
        sys.exit(1)

    tracker = StationTrafficTracker()
    try:
        tracker.load_from_files(sys.argv[1], sys.argv[2])
    except Exception as e:
        logger.error(f"Failed to load data: {e}", exc_info=True)
        print(f"Error: {e}")
        sys.exit(1)

    if len(sys.argv) > 3:
        try:
            print_busiest_stations(tracker, parse_time(sys.argv[3]))
        except ValueError as e:
            print(f"Invalid time: {e}")
            sys.exit(1)
    else:
        print_busiest_stations(tracker)
        interactive_mode(tracker)
