from datetime import datetime, timedelta, timezone

import pytest

from ride_analyzer.models import PointExtensions, TrackPoint

BASE_TIME = datetime(2024, 6, 15, 8, 0, 0, tzinfo=timezone.utc)
START_LAT = 37.7749
START_LON = -122.4194
# ~50 m of latitude; one step every 10 s is ~18 km/h
LAT_STEP = 0.00045


def ramp(waypoints, step=5.0):
    """Elevations walking between waypoints in fixed steps, inclusive."""
    elevations = [float(waypoints[0])]
    for target in waypoints[1:]:
        direction = step if target > elevations[-1] else -step
        while elevations[-1] != target:
            elevations.append(elevations[-1] + direction)
    return elevations


def make_point(step, seconds, elevation, **extensions):
    return TrackPoint(
        lat=START_LAT + step * LAT_STEP,
        lon=START_LON,
        elevation=elevation,
        time=BASE_TIME + timedelta(seconds=seconds),
        extensions=PointExtensions(**extensions) if extensions else None,
    )


def make_points(elevations, interval=10):
    """Points due north, one LAT_STEP and ``interval`` seconds apart."""
    return [make_point(i, i * interval, elevation) for i, elevation in enumerate(elevations)]


@pytest.fixture
def clean_profile_points():
    """100 -> 200 -> 350 -> 50 -> 125 m in 5 m steps; every pair is plausible.

    Gain 325 m, loss 300 m.
    """
    return make_points(ramp([100, 200, 350, 50, 125]))


@pytest.fixture
def noisy_profile_points():
    """A 175 m up / 150 m down ride with typical GPS noise mixed in.

    Base profile: climb 100 -> 200, flat at 200, descend to 50, flat at 50,
    climb to 125. Noise added on the flats:
    - a +80 m spike between base points 21 and 22
    - a fix 1 s after base point 23, 2 m higher
    - a -70 m spike between base points 55 and 56
    - a fix 1 s after base point 57, 2 m lower
    """
    elevations = ramp([100, 200]) + [200.0] * 4 + ramp([200, 50])[1:] + [50.0] * 4 + ramp([50, 125])[1:]
    points = []
    for i, elevation in enumerate(elevations):
        points.append(make_point(i, i * 10, elevation))
        if i == 21:
            points.append(make_point(i + 0.5, i * 10 + 5, 280.0))
        elif i == 23:
            points.append(make_point(i + 0.1, i * 10 + 1, 202.0))
        elif i == 55:
            points.append(make_point(i + 0.5, i * 10 + 5, -20.0))
        elif i == 57:
            points.append(make_point(i + 0.1, i * 10 + 1, 48.0))
    return points


@pytest.fixture
def sensor_points():
    """Three minutes of riding with heart rate, cadence and power."""
    return [
        make_point(i, i * 10, 100.0, heart_rate=140 + i % 3, cadence=90, power=200.0)
        for i in range(19)
    ]

