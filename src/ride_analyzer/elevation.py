"""Noise-resistant elevation gain/loss.

Summing raw point-to-point deltas badly overstates climbing on consumer GPS
data: altitude jitter while stopped, duplicate fixes and single-sample spikes
all add phantom meters. Each pair of consecutive elevation-bearing points is
checked against the interval, distance, speed and elevation-jump limits in
``ride_analyzer.filters``; only surviving pairs contribute.
"""

import logging

from ride_analyzer.distance import calculate_gradient, point_distance
from ride_analyzer.filters import (
    MAX_ELEVATION_JUMP_M,
    MAX_SPEED_KMH,
    MIN_SEGMENT_DISTANCE_KM,
    MIN_SPEED_KMH,
    interval_seconds,
    is_plausible_interval,
    speed_kmh,
)
from ride_analyzer.models import ElevationStats, ProfilePoint, TrackPoint

logger = logging.getLogger(__name__)

FILTER_REASONS = ("time", "distance", "speed", "elevation_jump")


def _rejection_reason(pt_a: TrackPoint, pt_b: TrackPoint) -> str | None:
    """Return why a pair is discarded, or None if it is plausible."""
    seconds = interval_seconds(pt_a, pt_b)
    if seconds is not None and not is_plausible_interval(seconds):
        return "time"

    distance_km = point_distance(pt_a, pt_b)
    if distance_km < MIN_SEGMENT_DISTANCE_KM:
        return "distance"

    if seconds is not None:
        speed = speed_kmh(distance_km, seconds)
        if not MIN_SPEED_KMH <= speed <= MAX_SPEED_KMH:
            return "speed"

    if abs(pt_b.elevation - pt_a.elevation) > MAX_ELEVATION_JUMP_M:
        return "elevation_jump"
    return None


def filter_elevation(points: list[TrackPoint]) -> ElevationStats:
    """Calculate filtered elevation gain/loss and data-quality diagnostics.

    Pairs are formed from consecutive points that carry an elevation. Max
    and min elevation only consider points of pairs that survive filtering.
    With fewer than two elevation-bearing points everything is zero/None.
    """
    elevation_points = [pt for pt in points if pt.elevation is not None]
    if len(elevation_points) < 2:
        return ElevationStats()

    gain = 0.0
    loss = 0.0
    max_elevation = None
    min_elevation = None
    valid = 0
    filtered_by = {reason: 0 for reason in FILTER_REASONS}

    for pt_a, pt_b in zip(elevation_points, elevation_points[1:]):
        reason = _rejection_reason(pt_a, pt_b)
        if reason is not None:
            filtered_by[reason] += 1
            continue

        valid += 1
        delta = pt_b.elevation - pt_a.elevation
        if delta > 0:
            gain += delta
        else:
            loss += abs(delta)

        pair_max = max(pt_a.elevation, pt_b.elevation)
        pair_min = min(pt_a.elevation, pt_b.elevation)
        max_elevation = pair_max if max_elevation is None else max(max_elevation, pair_max)
        min_elevation = pair_min if min_elevation is None else min(min_elevation, pair_min)

    filtered = sum(filtered_by.values())
    total_pairs = valid + filtered
    logger.debug(
        "Elevation filter: %d valid, %d filtered pairs (%s)", valid, filtered, filtered_by
    )

    return ElevationStats(
        gain=gain,
        loss=loss,
        max_elevation=max_elevation,
        min_elevation=min_elevation,
        mean_elevation=sum(pt.elevation for pt in elevation_points) / len(elevation_points),
        valid_segments=valid,
        filtered_segments=filtered,
        filtering_efficiency=filtered / total_pairs * 100,
        coverage=len(elevation_points) / len(points) * 100,
        filtered_by=filtered_by,
    )


def elevation_profile(points: list[TrackPoint]) -> list[ProfilePoint]:
    """Elevation against cumulative distance for plotting.

    Distance accumulates over every point; only points with an elevation
    appear in the profile.
    """
    profile = []
    cumulative_km = 0.0
    for i, pt in enumerate(points):
        if i > 0:
            cumulative_km += point_distance(points[i - 1], pt)
        if pt.elevation is not None:
            gradient = calculate_gradient(points[i - 1], pt) if i > 0 else 0.0
            profile.append(ProfilePoint(distance=cumulative_km, elevation=pt.elevation, gradient=gradient))
    return profile
