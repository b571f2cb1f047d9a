import numpy as np
import pytest

from squishies.sun import Sun


def test_defaults():
    sun = Sun()
    assert sun.sunrise == 16200
    assert sun.sunset == 73800
    assert sun.time_of_day == 12 * 3600
    assert sun.colour == (1.0, 1.0, 1.0, 1.0)


def test_hours_and_minutes_setters():
    sun = Sun()
    assert sun.set_sunrise(4, 30).sunrise == 16200
    assert sun.set_sunset(20, 30).sunset == 73800
    assert sun.set_time_of_day(12, 0).time_of_day == 12 * 3600
    assert sun.set_time_of_day(500).time_of_day == 500


def test_weather_is_clamped():
    sun = Sun().set_weather(2.0, -1.0)
    assert sun.cloud_coverage == 1.0
    assert sun.storm_factor == 0.0


def test_direction_is_unit_length():
    for t in (0, 10000, 16200, 43200, 73800, 80000):
        sun = Sun(t)
        assert np.isclose(np.linalg.norm(sun.direction), 1.0)


def test_direction_at_sunrise_and_sunset():
    assert np.allclose(Sun(16200).direction, [-1.0, 0.0, 0.0], atol=1e-9)
    assert np.allclose(Sun(73800).direction, [1.0, 0.0, 0.0], atol=1e-9)


def test_sun_points_down_during_day_and_up_at_night():
    assert Sun(43200).direction[1] < 0.0
    assert Sun(2000).direction[1] > 0.0


def test_night_is_half_intensity():
    sun = Sun(1000)
    assert sun.colour[:3] == pytest.approx((0.5, 0.5, 0.5))


def test_ambient_peaks_at_midday_and_vanishes_at_sunrise():
    assert Sun(45000).ambient_level == pytest.approx(0.2)
    assert Sun(16200).ambient_level == pytest.approx(0.0)


def test_clouds_remove_ambience():
    sun = Sun(45000).set_weather(1.0, 0.0)
    sun.update_light_properties()
    assert sun.ambient_level == pytest.approx(0.0)


def test_full_storm_greys_the_light():
    sun = Sun(43200).set_weather(0.0, 1.0)
    sun.update_light_properties()
    assert sun.colour[:3] == pytest.approx((0.5, 0.5, 0.5))


@pytest.mark.parametrize("offset", [600, 3000])
def test_twilight_is_warm(offset):
    for t in (16200 - offset, 73800 + offset):
        r, g, b, _ = Sun(t).colour
        assert r > g > b


def test_setters_do_not_refresh_until_updated():
    sun = Sun(43200)
    before = sun.direction.copy()
    sun.set_time_of_day(1000)
    assert np.allclose(sun.direction, before)
    sun.update_light_properties()
    assert not np.allclose(sun.direction, before)