"""A rough day/night sunlight model driven by the time of day."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from squishies.config import Colour

_DAY_SECONDS = 86400
_TWILIGHT_LENGTH = 3600
_TWILIGHT_TINT = np.array([1.0, 0.45, 0.0])
_STORM_TINT = np.array([0.5, 0.5, 0.5])


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _mix(a: np.ndarray, b: np.ndarray, t: float) -> np.ndarray:
    return a * (1.0 - t) + b * t


def _seconds(value: int, minutes: Optional[int]) -> int:
    if minutes is None:
        return int(value)
    return (minutes + value * 60) * 60


@dataclass(eq=False)
class Sun:
    """Sunlight whose direction, colour and ambience follow the clock and weather."""

    time_of_day: int = 12 * 3600
    sunrise: int = 16200
    sunset: int = 73800
    cloud_coverage: float = 0.0
    storm_factor: float = 0.0
    direction: np.ndarray = field(default_factory=lambda: np.array([0.0, -1.0, 0.0]))
    colour: Colour = (1.0, 1.0, 1.0, 1.0)
    ambient_level: float = 0.1

    def __post_init__(self) -> None:
        self.update_light_properties()

    def set_sunrise(self, value: int, minutes: Optional[int] = None) -> "Sun":
        """Set sunrise in seconds, or in hours and minutes when minutes is given."""
        self.sunrise = _seconds(value, minutes)
        return self

    def set_sunset(self, value: int, minutes: Optional[int] = None) -> "Sun":
        """Set sunset in seconds, or in hours and minutes when minutes is given."""
        self.sunset = _seconds(value, minutes)
        return self

    def set_time_of_day(self, value: int, minutes: Optional[int] = None) -> "Sun":
        """Set seconds since midnight, or hours and minutes when minutes is given."""
        self.time_of_day = _seconds(value, minutes)
        return self

    def set_weather(self, cloud_coverage: float, storm_factor: float) -> "Sun":
        """Set cloud cover and storminess, each clamped to [0, 1]."""
        self.cloud_coverage = _clamp(cloud_coverage, 0.0, 1.0)
        self.storm_factor = _clamp(storm_factor, 0.0, 1.0)
        return self

    def update_light_properties(self) -> None:
        """Recompute direction, colour and ambient level from the current settings."""
        t, rise, setting = self.time_of_day, self.sunrise, self.sunset
        colour = np.array([1.0, 1.0, 1.0])

        day_length = setting - rise
        night_length = _DAY_SECONDS - day_length
        if rise <= t <= setting:
            degrees = 180.0 * (t - rise) / day_length
        else:
            since_sunset = t - setting if t > setting else t + (_DAY_SECONDS - setting)
            degrees = 180.0 + 180.0 * since_sunset / night_length

        theta = math.radians(degrees)
        sun_pos = np.array([math.cos(theta) * 100.0, math.sin(theta) * 100.0, 0.0])

        twilight = (rise - _TWILIGHT_LENGTH <= t < rise) or (setting < t <= setting + _TWILIGHT_LENGTH)
        night = t < rise or t > setting

        if twilight:
            distance = (rise - t if t <= rise else t - setting) / _TWILIGHT_LENGTH
            if distance < 0.5:
                colour[1] *= 1.0 - distance
                colour[2] *= 1.0 - distance
            else:
                colour[0] *= 0.5 + (1.0 - distance)
                colour[1] *= 0.5
                colour[2] *= 0.5
            amount = distance * 2.0 if distance < 0.5 else 1.0 - distance
            colour = _mix(colour, _TWILIGHT_TINT, amount)
        elif night:
            colour *= 0.5

        half_day = day_length / 2.0
        midpoint = rise + half_day
        day_dist = _clamp(abs(t - midpoint) / half_day, 0.0, 1.0)
        self.ambient_level = 0.2 * (1.0 - day_dist) * (1.0 - self.cloud_coverage)

        colour = _mix(colour, _STORM_TINT, self.storm_factor)

        self.direction = -sun_pos / float(np.linalg.norm(sun_pos))
        self.colour = (float(colour[0]), float(colour[1]), float(colour[2]), 1.0)