"""Climb, descent and flat segment detection.

Splits a ride into contiguous runs of the same terrain type, classifying
each pair of consecutive points by its gradient.
"""

from dataclasses import dataclass
from datetime import datetime

from ride_analyzer.distance import point_distance
from ride_analyzer.models import Segment, TrackPoint

# Gradient (percent) beyond which a pair counts as climbing or descending
GRADIENT_THRESHOLD_PCT = 3.0


@dataclass
class _OpenSegment:
    """Running totals for the segment currently being built."""
    type: str
    start_index: int
    end_index: int
    distance_m: float = 0.0
    elevation_change: float = 0.0
    max_gradient: float = 0.0
    start_time: datetime | None = None
    end_time: datetime | None = None

    def close(self) -> Segment:
        avg_gradient = self.elevation_change / self.distance_m * 100 if self.distance_m > 0 else 0.0
        duration = None
        if self.start_time is not None and self.end_time is not None:
            duration = (self.end_time - self.start_time).total_seconds()
        return Segment(
            type=self.type,
            distance=self.distance_m / 1000,
            elevation_change=self.elevation_change,
            avg_gradient=avg_gradient,
            max_gradient=self.max_gradient,
            start_index=self.start_index,
            end_index=self.end_index,
            duration=duration,
        )


def classify_gradient(gradient_pct: float, threshold: float = GRADIENT_THRESHOLD_PCT) -> str:
    """Return "climb", "descent" or "flat" for a gradient in percent."""
    if gradient_pct > threshold:
        return "climb"
    if gradient_pct < -threshold:
        return "descent"
    return "flat"


def classify_segments(points: list[TrackPoint]) -> list[Segment]:
    """Partition a track into climb/descent/flat segments.

    Algorithm:
    1. Walk consecutive point pairs, skipping pairs without elevation
    2. Classify each pair's gradient against ±3%
    3. Start a new segment whenever the classification changes
    4. Extend the open segment otherwise, tracking the steepest |gradient|

    Segment indices refer to positions in ``points``. Duration runs from the
    first to the last point of the segment when both carry a timestamp.
    """
    segments = []
    current = None

    for i in range(1, len(points)):
        prev, curr = points[i - 1], points[i]
        if prev.elevation is None or curr.elevation is None:
            continue

        distance_m = point_distance(prev, curr) * 1000
        elevation_change = curr.elevation - prev.elevation
        gradient = elevation_change / distance_m * 100 if distance_m > 0 else 0.0
        segment_type = classify_gradient(gradient)

        if current is None or current.type != segment_type:
            if current is not None:
                segments.append(current.close())
            current = _OpenSegment(type=segment_type, start_index=i - 1, end_index=i, start_time=prev.time)

        current.end_index = i
        current.end_time = curr.time
        current.distance_m += distance_m
        current.elevation_change += elevation_change
        current.max_gradient = max(current.max_gradient, abs(gradient))

    if current is not None:
        segments.append(current.close())

    return segments


def distance_by_type(segments: list[Segment], segment_type: str) -> float:
    """Total distance in km covered by segments of one type."""
    return sum((s.distance for s in segments if s.type == segment_type), 0.0)
