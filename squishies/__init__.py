"""Soft-body physics simulation of squishy characters, with game rules, cameras and a sun model."""

__version__ = "0.1.0"

__all__ = [
    "camera",
    "collision",
    "components",
    "config",
    "events",
    "game",
    "poly",
    "softbody",
    "squishy",
    "sun",
    "world",
]