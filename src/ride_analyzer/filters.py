"""Plausibility checks shared by the elevation, speed and zone calculations.

Consumer GPS units log redundant fixes, drift while stationary and leave
gaps when paused. A pair of consecutive points only contributes to a metric
if the interval between them looks like actual riding.
"""

from ride_analyzer.models import TrackPoint

# Interval bounds (seconds): shorter is a redundant fix, longer is a stop or gap
MIN_INTERVAL_S = 2.0
MAX_INTERVAL_S = 300.0

# Below this the receiver is drifting in place (0.002 km = 2 m)
MIN_SEGMENT_DISTANCE_KM = 0.002

# Realistic cycling speeds (km/h), including fast descents
MIN_SPEED_KMH = 1.0
MAX_SPEED_KMH = 70.0

# Largest believable elevation change between two samples (meters)
MAX_ELEVATION_JUMP_M = 50.0


def interval_seconds(pt_a: TrackPoint, pt_b: TrackPoint) -> float | None:
    """Seconds from pt_a to pt_b, or None unless both carry a timestamp."""
    if pt_a.time is None or pt_b.time is None:
        return None
    return (pt_b.time - pt_a.time).total_seconds()


def is_plausible_interval(seconds: float) -> bool:
    return MIN_INTERVAL_S <= seconds <= MAX_INTERVAL_S


def speed_kmh(distance_km: float, seconds: float) -> float:
    return distance_km * 3600 / seconds


def is_plausible_speed(speed: float, distance_km: float) -> bool:
    """Check a speed sample and the distance it was measured over."""
    return MIN_SPEED_KMH <= speed <= MAX_SPEED_KMH and distance_km >= MIN_SEGMENT_DISTANCE_KM
