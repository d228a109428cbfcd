from ride_analyzer.kinematics import iter_valid_speeds
from ride_analyzer.models import IntensityMetrics, PowerStats, TrackPoint

# Speed zone upper bounds (km/h); the last zone is open-ended
SPEED_ZONE_BINS = [15, 25, 35, 45, float("inf")]
SPEED_ZONE_LABELS = [
    "Recovery (0-15 km/h)",
    "Endurance (15-25 km/h)",
    "Tempo (25-35 km/h)",
    "Threshold (35-45 km/h)",
    "VO2 Max (45+ km/h)",
]

# Heart rate zone upper bounds (% of max HR); readings below 50% land in zone 1
HR_ZONE_BINS = [60, 70, 80, 90, float("inf")]
HR_ZONE_LABELS = [
    "Zone 1 (50-60%)",
    "Zone 2 (60-70%)",
    "Zone 3 (70-80%)",
    "Zone 4 (80-90%)",
    "Zone 5 (90-100%)",
]

# Assumed when the rider has not configured one
DEFAULT_MAX_HEART_RATE = 190

# Rolling window (samples) for normalized power
NORMALIZED_POWER_WINDOW = 30


def _bin_index(value: float, upper_bounds: list[float]) -> int:
    for j, bound in enumerate(upper_bounds):
        if value < bound:
            return j
    return len(upper_bounds) - 1


def _to_percentages(counts: list[int], labels: list[str]) -> dict[str, float]:
    total = sum(counts)
    return {label: count / total * 100 for label, count in zip(labels, counts)}


def speed_zones(points: list[TrackPoint]) -> dict[str, float] | None:
    """Share of plausible speed samples (percent) in each speed zone.

    Returns None when the track has no plausible moving interval.
    """
    counts = [0] * len(SPEED_ZONE_LABELS)
    for speed, _ in iter_valid_speeds(points):
        counts[_bin_index(speed, SPEED_ZONE_BINS)] += 1
    if sum(counts) == 0:
        return None
    return _to_percentages(counts, SPEED_ZONE_LABELS)


def heart_rate_samples(points: list[TrackPoint]) -> list[int]:
    """Recorded heart rates, ignoring points without a (non-zero) reading."""
    return [pt.extensions.heart_rate for pt in points if pt.extensions is not None and pt.extensions.heart_rate]


def heart_rate_zones(
    points: list[TrackPoint], max_heart_rate: float = DEFAULT_MAX_HEART_RATE
) -> dict[str, float] | None:
    """Share of heart rate samples (percent) in each zone of max HR.

    Returns None when no heart rate was recorded.
    """
    heart_rates = heart_rate_samples(points)
    if not heart_rates:
        return None

    counts = [0] * len(HR_ZONE_LABELS)
    for hr in heart_rates:
        counts[_bin_index(hr / max_heart_rate * 100, HR_ZONE_BINS)] += 1
    return _to_percentages(counts, HR_ZONE_LABELS)


def power_samples(points: list[TrackPoint]) -> list[float]:
    """Positive power readings in recording order."""
    return [
        pt.extensions.power
        for pt in points
        if pt.extensions is not None and pt.extensions.power is not None and pt.extensions.power > 0
    ]


def normalized_power(power_values: list[float], window: int = NORMALIZED_POWER_WINDOW) -> float | None:
    """Normalized power: 4th root of the mean 4th power of rolling averages.

    The rolling average runs over ``window`` consecutive samples. Returns
    None when there are fewer samples than one full window.
    """
    if len(power_values) < window:
        return None

    fourth_powers = []
    for i in range(len(power_values) - window + 1):
        average = sum(power_values[i:i + window]) / window
        fourth_powers.append(average ** 4)

    return (sum(fourth_powers) / len(fourth_powers)) ** 0.25


def power_stats(points: list[TrackPoint]) -> PowerStats | None:
    """Average, maximum and normalized power, or None without power data."""
    values = power_samples(points)
    if not values:
        return None
    return PowerStats(
        average=sum(values) / len(values),
        maximum=max(values),
        normalized_power=normalized_power(values),
    )


def intensity_metrics() -> IntensityMetrics:
    """Variability index, intensity factor and TSS placeholders.

    All three are defined relative to the rider's FTP, which a GPX file
    does not carry, so every field is None.
    """
    return IntensityMetrics()
