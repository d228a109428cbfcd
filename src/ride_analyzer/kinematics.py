from typing import Iterator

from ride_analyzer.distance import point_distance
from ride_analyzer.filters import interval_seconds, is_plausible_interval, is_plausible_speed, speed_kmh
from ride_analyzer.models import Kinematics, TrackPoint


def iter_valid_speeds(points: list[TrackPoint]) -> Iterator[tuple[float, float]]:
    """Yield (speed_kmh, seconds) for every plausible moving interval.

    A pair qualifies when both points are timestamped, the interval is
    between 2 and 300 seconds, and the speed over at least 2 meters falls
    within 1-70 km/h.
    """
    for pt_a, pt_b in zip(points, points[1:]):
        seconds = interval_seconds(pt_a, pt_b)
        if seconds is None or not is_plausible_interval(seconds):
            continue
        distance_km = point_distance(pt_a, pt_b)
        speed = speed_kmh(distance_km, seconds)
        if is_plausible_speed(speed, distance_km):
            yield speed, seconds


def compute_kinematics(points: list[TrackPoint]) -> Kinematics:
    """Calculate distance, elapsed/moving time and speeds for a track.

    Distance counts every pair, filtered or not. Moving time and the speed
    figures come only from plausible intervals (see iter_valid_speeds).
    """
    total_distance = 0.0
    for pt_a, pt_b in zip(points, points[1:]):
        total_distance += point_distance(pt_a, pt_b)

    moving_seconds = 0.0
    max_speed = 0.0
    speeds = []
    for speed, seconds in iter_valid_speeds(points):
        speeds.append(speed)
        max_speed = max(max_speed, speed)
        moving_seconds += seconds

    # Elapsed time from the endpoints, if the recording is timestamped
    if points and points[0].time is not None and points[-1].time is not None:
        total_time = (points[-1].time - points[0].time).total_seconds()
    else:
        total_time = moving_seconds

    if moving_seconds > 0:
        avg_speed = total_distance * 3600 / moving_seconds
    elif speeds:
        avg_speed = sum(speeds) / len(speeds)
    else:
        avg_speed = 0.0

    return Kinematics(
        distance=total_distance,
        total_time=total_time,
        moving_time=moving_seconds,
        avg_speed=avg_speed,
        max_speed=max_speed,
        speeds=tuple(speeds),
    )
