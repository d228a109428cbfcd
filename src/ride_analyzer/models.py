from dataclasses import asdict, dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class PointExtensions:
    heart_rate: int | None = None  # bpm
    cadence: int | None = None  # rpm
    power: float | None = None  # watts
    speed: float | None = None  # m/s, as reported by the device
    temperature: float | None = None  # °C


@dataclass(frozen=True)
class TrackPoint:
    lat: float
    lon: float
    elevation: float | None  # meters
    time: datetime | None  # UTC
    track_index: int = 0
    segment_index: int = 0
    point_index: int = 0  # position within its track segment
    extensions: PointExtensions | None = None


@dataclass(frozen=True)
class TrackStats:
    """Totals recorded by the device in a Garmin TrackStatsExtension."""
    distance: float | None = None  # meters
    timer_time: float | None = None  # seconds
    moving_time: float | None = None  # seconds
    stopped_time: float | None = None  # seconds
    max_speed: float | None = None  # m/s


@dataclass(frozen=True)
class Track:
    name: str
    points: tuple[TrackPoint, ...]
    segment_count: int
    track_id: str | None = None
    stats: TrackStats | None = None


@dataclass(frozen=True)
class Bounds:
    min_lat: float
    max_lat: float
    min_lon: float
    max_lon: float


@dataclass(frozen=True)
class Metadata:
    name: str = "Unnamed Track"
    description: str = ""
    author: str = "Unknown"
    time: datetime | None = None
    bounds: Bounds | None = None


@dataclass(frozen=True)
class ElevationStats:
    gain: float = 0.0  # meters, filtered pairs only
    loss: float = 0.0  # meters, absolute value
    max_elevation: float | None = None
    min_elevation: float | None = None
    mean_elevation: float | None = None  # over all points with elevation
    valid_segments: int = 0
    filtered_segments: int = 0
    filtering_efficiency: float = 0.0  # percent of pairs discarded
    coverage: float = 0.0  # percent of points carrying elevation
    filtered_by: dict[str, int] = field(default_factory=dict)

    @property
    def elevation_range(self) -> float | None:
        if self.max_elevation is None or self.min_elevation is None:
            return None
        return self.max_elevation - self.min_elevation


@dataclass(frozen=True)
class Kinematics:
    distance: float  # km, every pair counted
    total_time: float  # seconds
    moving_time: float  # seconds, plausible intervals only
    avg_speed: float  # km/h
    max_speed: float  # km/h
    speeds: tuple[float, ...] = ()  # km/h, one per plausible interval


@dataclass(frozen=True)
class Summary:
    distance: float  # km
    total_time: float  # seconds
    moving_time: float  # seconds
    avg_speed: float  # km/h
    max_speed: float  # km/h
    elevation_gain: float  # meters
    elevation_loss: float  # meters
    max_elevation: float | None
    min_elevation: float | None
    elevation_range: float | None
    mean_elevation: float | None
    valid_elevation_segments: int
    filtered_elevation_segments: int
    elevation_filtering_efficiency: float  # percent
    elevation_coverage: float  # percent
    average_heart_rate: float | None
    max_heart_rate: float | None
    average_cadence: float | None
    average_power: float | None
    point_count: int
    start_time: datetime | None
    end_time: datetime | None
    rider_weight: float = 0.0  # kg


@dataclass(frozen=True)
class InsufficientData:
    """Summary stand-in for tracks too short to analyze."""
    error: str = "Insufficient data points for analysis"


@dataclass(frozen=True)
class Segment:
    type: str  # "climb", "descent" or "flat"
    distance: float  # km
    elevation_change: float  # meters, signed
    avg_gradient: float  # percent, signed
    max_gradient: float  # percent, absolute
    start_index: int
    end_index: int
    duration: float | None = None  # seconds, None without timestamps


@dataclass(frozen=True)
class ProfilePoint:
    distance: float  # km from start
    elevation: float  # meters
    gradient: float  # percent, from previous point


@dataclass(frozen=True)
class PowerStats:
    average: float  # watts
    maximum: float  # watts
    normalized_power: float | None = None  # watts


@dataclass(frozen=True)
class IntensityMetrics:
    # All of these need the rider's FTP, which a GPX file does not carry
    variability_index: float | None = None
    intensity_factor: float | None = None
    training_stress_score: float | None = None


@dataclass(frozen=True)
class CalorieBreakdown:
    base: int | None = None
    elevation: int | None = None
    heart_rate: int | None = None
    power: int | None = None


@dataclass(frozen=True)
class CalorieEstimate:
    estimated: int  # kcal
    method: str  # "power", "heart_rate" or "distance_elevation"
    breakdown: CalorieBreakdown


@dataclass(frozen=True)
class Analysis:
    speed_zones: dict[str, float] | None
    heart_rate_zones: dict[str, float] | None
    power_zones: PowerStats | None
    elevation_profile: list[ProfilePoint]
    intensity_metrics: IntensityMetrics
    calories_burned: CalorieEstimate
    average_heart_rate: float | None = None
    average_power: float | None = None
    distance_climb: float = 0.0  # km in climb segments
    distance_descent: float = 0.0  # km in descent segments


@dataclass(frozen=True)
class RideAnalysis:
    metadata: Metadata
    summary: Summary | InsufficientData
    tracks: list[Track]
    points: list[TrackPoint]
    analysis: Analysis
    segments: list[Segment]

    def to_dict(self) -> dict:
        """Return a JSON-ready dict; datetimes become ISO-8601 strings."""
        return _jsonable(asdict(self))


def _jsonable(value):
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    if isinstance(value, datetime):
        return value.isoformat()
    return value
