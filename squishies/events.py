"""Game events and a dispatcher that routes them by type."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Callable, DefaultDict, List, Tuple, Type

import numpy as np


def _vec3(value) -> np.ndarray:
    arr = np.array(value, dtype=float).reshape(-1)
    if arr.size == 2:
        arr = np.append(arr, 0.0)
    return arr


class EventDispatcher:
    """Calls the handlers registered for an event's type, in registration order."""

    def __init__(self) -> None:
        self._handlers: DefaultDict[Type, List[Callable[[Any], None]]] = defaultdict(list)

    def on(self, event_type: Type, handler: Callable[[Any], None]) -> None:
        self._handlers[event_type].append(handler)

    def dispatch(self, event: Any) -> int:
        """Deliver the event; return how many handlers received it."""
        handlers = list(self._handlers.get(type(event), ()))
        for handler in handlers:
            handler(event)
        return len(handlers)


@dataclass
class Collision:
    """Two bodies touched."""


@dataclass(eq=False)
class DeployWeapon:
    """A player fired the selected weapon towards a target."""

    player: Any
    weapon_id: int
    position: np.ndarray
    target: np.ndarray
    power: float

    def __post_init__(self) -> None:
        self.position = _vec3(self.position)
        self.target = _vec3(self.target)


@dataclass(eq=False)
class ExplodeGrenade:
    """A grenade's fuse ran out."""

    grenade: Any
    player: Any
    position: np.ndarray

    def __post_init__(self) -> None:
        self.position = _vec3(self.position)


@dataclass(eq=False)
class Explosion:
    """A blast at a position with a radius and power."""

    position: np.ndarray
    radius: float
    power: float = 1.0

    def __post_init__(self) -> None:
        self.position = _vec3(self.position)


@dataclass(eq=False)
class SplitSquishy:
    """A character was hit; hitpoints hold (point index, squared distance) pairs."""

    player: Any
    hitpoints: List[Tuple[int, float]] = field(default_factory=list)
    epicenter: np.ndarray = field(default_factory=lambda: np.zeros(3))
    power: float = 0.0

    def __post_init__(self) -> None:
        self.hitpoints = [(int(i), float(d)) for i, d in self.hitpoints]
        self.epicenter = _vec3(self.epicenter)