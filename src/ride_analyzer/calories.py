"""Calorie estimation.

Three estimates are tried in order of accuracy: recorded power, heart rate,
then distance and climbing. A method whose estimate comes out as zero (for
example power data on a ride with no moving time) counts as unavailable.
"""

from ride_analyzer.models import CalorieBreakdown, CalorieEstimate, PowerStats

KCAL_PER_KJ = 3.6
HR_KCAL_PER_MINUTE = 8.0
KCAL_PER_KM = 40.0
KCAL_PER_METER_CLIMBED = 0.1


def estimate_calories(
    distance_km: float,
    elevation_gain: float,
    moving_time: float,
    heart_rate_zones: dict[str, float] | None = None,
    power: PowerStats | None = None,
) -> CalorieEstimate:
    """Estimate energy expenditure for a ride.

    Args:
        distance_km: Total ride distance
        elevation_gain: Filtered elevation gain in meters
        moving_time: Moving time in seconds
        heart_rate_zones: Heart rate zone distribution, if HR was recorded
        power: Power statistics, if power was recorded

    Returns:
        CalorieEstimate naming the method used; breakdown entries belonging
        to other methods are None.
    """
    if power is not None and power.average:
        kilojoules = power.average * (moving_time / 1000)
        power_kcal = kilojoules * KCAL_PER_KJ
        if power_kcal:
            return CalorieEstimate(
                estimated=round(power_kcal),
                method="power",
                breakdown=CalorieBreakdown(power=round(power_kcal)),
            )

    if heart_rate_zones:
        hr_kcal = moving_time / 60 * HR_KCAL_PER_MINUTE
        if hr_kcal:
            return CalorieEstimate(
                estimated=round(hr_kcal),
                method="heart_rate",
                breakdown=CalorieBreakdown(heart_rate=round(hr_kcal)),
            )

    base_kcal = distance_km * KCAL_PER_KM
    elevation_kcal = elevation_gain * KCAL_PER_METER_CLIMBED
    return CalorieEstimate(
        estimated=round(base_kcal + elevation_kcal),
        method="distance_elevation",
        breakdown=CalorieBreakdown(base=round(base_kcal), elevation=round(elevation_kcal)),
    )
