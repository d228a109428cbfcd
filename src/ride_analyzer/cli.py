import argparse
import json
import logging
import sys

from gpxpy.gpx import GPXException

from ride_analyzer.analyzer import analyze_file
from ride_analyzer.config import DEFAULTS, get_setting, load_config
from ride_analyzer.formatters import format_duration_long, format_optional, format_zones
from ride_analyzer.models import InsufficientData, RideAnalysis


def build_parser(config: dict | None = None) -> argparse.ArgumentParser:
    """Build argument parser with defaults from config file."""
    if config is None:
        config = {}

    parser = argparse.ArgumentParser(
        description="Analyze a recorded GPX ride: distance, elevation, speed, zones and calories."
    )
    parser.add_argument("gpx_file", help="Path to GPX file")
    parser.add_argument(
        "--mass",
        type=float,
        default=get_setting(config, "rider_weight"),
        help=f"Rider mass in kg (default: {DEFAULTS['rider_weight']})",
    )
    parser.add_argument(
        "--max-hr",
        type=float,
        default=get_setting(config, "max_heart_rate"),
        help=f"Maximum heart rate used for HR zones (default: {DEFAULTS['max_heart_rate']})",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the full analysis as JSON instead of a text report",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def format_report(result: RideAnalysis) -> str:
    """Render the analysis as a plain text report."""
    lines = ["=== GPX Ride Analysis ==="]
    lines.append(f"Name:           {result.metadata.name}")

    summary = result.summary
    if isinstance(summary, InsufficientData):
        lines.append(f"Summary:        {summary.error}")
    else:
        lines.append(f"Points:         {summary.point_count}")
        lines.append(f"Distance:       {summary.distance:.2f} km")
        lines.append(f"Duration:       {format_duration_long(summary.total_time)}")
        lines.append(f"Moving Time:    {format_duration_long(summary.moving_time)}")
        lines.append(f"Avg Speed:      {summary.avg_speed:.1f} km/h")
        lines.append(f"Max Speed:      {summary.max_speed:.1f} km/h")
        lines.append(f"Elevation Gain: {summary.elevation_gain:.0f} m")
        lines.append(f"Elevation Loss: {summary.elevation_loss:.0f} m")
        lines.append(f"Max Elevation:  {format_optional(summary.max_elevation, 'm')}")
        lines.append(f"Min Elevation:  {format_optional(summary.min_elevation, 'm')}")
        lines.append(
            f"Elevation Data: {summary.valid_elevation_segments} valid, "
            f"{summary.filtered_elevation_segments} filtered "
            f"({summary.elevation_filtering_efficiency:.1f}% filtered, "
            f"{summary.elevation_coverage:.0f}% coverage)"
        )
        lines.append(f"Avg Heart Rate: {format_optional(summary.average_heart_rate, 'bpm')}")
        lines.append(f"Avg Cadence:    {format_optional(summary.average_cadence, 'rpm')}")
        lines.append(f"Avg Power:      {format_optional(summary.average_power, 'W')}")

    analysis = result.analysis
    if analysis.speed_zones:
        lines.append("Speed Zones:")
        lines.extend(format_zones(analysis.speed_zones))
    if analysis.heart_rate_zones:
        lines.append("Heart Rate Zones:")
        lines.extend(format_zones(analysis.heart_rate_zones))
    if analysis.power_zones:
        lines.append(f"Normalized Power: {format_optional(analysis.power_zones.normalized_power, 'W')}")

    lines.append(
        f"Climbing:       {analysis.distance_climb:.2f} km, descending: {analysis.distance_descent:.2f} km"
    )

    counts = {"climb": 0, "descent": 0, "flat": 0}
    for segment in result.segments:
        counts[segment.type] += 1
    lines.append(
        f"Segments:       {counts['climb']} climbs, {counts['descent']} descents, {counts['flat']} flats"
    )

    calories = analysis.calories_burned
    lines.append(f"Calories:       {calories.estimated} kcal ({calories.method})")
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> None:
    config = load_config()
    parser = build_parser(config)
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    try:
        result = analyze_file(args.gpx_file, rider_weight=args.mass, max_heart_rate=args.max_hr)
    except FileNotFoundError:
        print(f"Error: File not found: {args.gpx_file}", file=sys.stderr)
        sys.exit(1)
    except (GPXException, OSError) as e:
        print(f"Error parsing GPX file: {e}", file=sys.stderr)
        sys.exit(1)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print(format_report(result))
