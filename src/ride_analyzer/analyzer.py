import logging
import xml.etree.ElementTree as ET

from ride_analyzer.calories import estimate_calories
from ride_analyzer.elevation import elevation_profile, filter_elevation
from ride_analyzer.kinematics import compute_kinematics
from ride_analyzer.models import Analysis, InsufficientData, RideAnalysis, Segment, Summary, TrackPoint
from ride_analyzer.parser import extract_metadata, extract_points, parse_document, read_document
from ride_analyzer.segments import classify_segments, distance_by_type
from ride_analyzer.zones import (
    DEFAULT_MAX_HEART_RATE,
    heart_rate_samples,
    heart_rate_zones,
    intensity_metrics,
    power_stats,
    speed_zones,
)

logger = logging.getLogger(__name__)


def _extension_values(points: list[TrackPoint], key: str) -> list[float]:
    return [
        getattr(pt.extensions, key)
        for pt in points
        if pt.extensions is not None and getattr(pt.extensions, key) is not None
    ]


def _average(values: list[float]) -> float | None:
    return sum(values) / len(values) if values else None


def calculate_summary(points: list[TrackPoint], rider_weight: float = 0.0) -> Summary | InsufficientData:
    """Calculate the ride summary for a point sequence.

    Tracks with fewer than two points cannot be analyzed; they yield an
    InsufficientData summary rather than an exception so the caller can
    still report metadata and tracks.
    """
    if len(points) < 2:
        return InsufficientData()

    motion = compute_kinematics(points)
    elevation = filter_elevation(points)
    heart_rates = _extension_values(points, "heart_rate")

    return Summary(
        distance=motion.distance,
        total_time=motion.total_time,
        moving_time=motion.moving_time,
        avg_speed=motion.avg_speed,
        max_speed=motion.max_speed,
        elevation_gain=elevation.gain,
        elevation_loss=elevation.loss,
        max_elevation=elevation.max_elevation,
        min_elevation=elevation.min_elevation,
        elevation_range=elevation.elevation_range,
        mean_elevation=elevation.mean_elevation,
        valid_elevation_segments=elevation.valid_segments,
        filtered_elevation_segments=elevation.filtered_segments,
        elevation_filtering_efficiency=elevation.filtering_efficiency,
        elevation_coverage=elevation.coverage,
        average_heart_rate=_average(heart_rates),
        max_heart_rate=max(heart_rates) if heart_rates else None,
        average_cadence=_average(_extension_values(points, "cadence")),
        average_power=_average(_extension_values(points, "power")),
        point_count=len(points),
        start_time=points[0].time,
        end_time=points[-1].time,
        rider_weight=rider_weight,
    )


def _detailed_analysis(
    points: list[TrackPoint],
    summary: Summary | InsufficientData,
    segments: list[Segment],
    max_heart_rate: float,
) -> Analysis:
    hr_zones = heart_rate_zones(points, max_heart_rate)
    power = power_stats(points)

    if isinstance(summary, Summary):
        calories = estimate_calories(
            summary.distance, summary.elevation_gain, summary.moving_time, hr_zones, power
        )
    else:
        calories = estimate_calories(0.0, 0.0, 0.0, hr_zones, power)

    return Analysis(
        speed_zones=speed_zones(points),
        heart_rate_zones=hr_zones,
        power_zones=power,
        elevation_profile=elevation_profile(points),
        intensity_metrics=intensity_metrics(),
        calories_burned=calories,
        average_heart_rate=_average(heart_rate_samples(points)),
        average_power=power.average if power is not None else None,
        distance_climb=distance_by_type(segments, "climb"),
        distance_descent=distance_by_type(segments, "descent"),
    )


def analyze(
    root: ET.Element, rider_weight: float = 0.0, max_heart_rate: float = DEFAULT_MAX_HEART_RATE
) -> RideAnalysis:
    """Analyze a parsed GPX document and return the full ride analysis.

    Raises:
        NoTrackDataError: If the document contains no usable track points.
    """
    tracks, points = extract_points(root)
    summary = calculate_summary(points, rider_weight)
    segments = classify_segments(points)
    analysis = _detailed_analysis(points, summary, segments, max_heart_rate)

    logger.debug(
        "Analyzed %d points: %d segments, calories via %s",
        len(points), len(segments), analysis.calories_burned.method,
    )

    return RideAnalysis(
        metadata=extract_metadata(root, points),
        summary=summary,
        tracks=tracks,
        points=points,
        analysis=analysis,
        segments=segments,
    )


def analyze_gpx(
    xml_text: str, rider_weight: float = 0.0, max_heart_rate: float = DEFAULT_MAX_HEART_RATE
) -> RideAnalysis:
    """Parse GPX text and analyze it."""
    return analyze(parse_document(xml_text), rider_weight, max_heart_rate)


def analyze_file(
    filepath: str, rider_weight: float = 0.0, max_heart_rate: float = DEFAULT_MAX_HEART_RATE
) -> RideAnalysis:
    """Read a GPX file and analyze it."""
    return analyze(read_document(filepath), rider_weight, max_heart_rate)
