"""Plain data components attached to game entities."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, List, Optional

import numpy as np


def _zero3() -> np.ndarray:
    return np.zeros(3)


@dataclass(eq=False)
class Character:
    """Intent of a playable character for the current frame."""

    move: np.ndarray = field(default_factory=_zero3)
    look_dir: np.ndarray = field(default_factory=_zero3)
    do_jump: bool = False
    duck: bool = False
    do_fire: bool = False


class CollisionGroup(IntEnum):
    """Collision groups; an object sits in one group and masks the groups it hits."""

    NONE = 0
    DEFAULT = 1
    STATIC = 2
    KINEMATIC = 4
    CHARACTER = 8
    PROJECTILE = 16
    LIQUID = 32
    ALL = -1


@dataclass
class Collider:
    """Collision group membership and mask."""

    collision_group: int = CollisionGroup.DEFAULT
    collision_mask: int = CollisionGroup.ALL

    def accepts(self, other: "Collider") -> bool:
        """Whether the two colliders are allowed to collide with each other."""
        return bool(
            (self.collision_mask & other.collision_group)
            and (other.collision_mask & self.collision_group)
        )


@dataclass(eq=False)
class Grenade:
    """A thrown grenade with its fuse and blast settings."""

    player: Any = None
    force: np.ndarray = field(default_factory=_zero3)
    velocity: np.ndarray = field(default_factory=_zero3)
    mass: float = 1.0
    blast_radius: float = 3.0
    timer: float = 3.0


class WeaponType(Enum):
    NADE = 0
    MINE = 1
    BALLOON = 2


_WEAPON_NAMES = {
    WeaponType.NADE: "Grenade",
    WeaponType.MINE: "Landmine",
    WeaponType.BALLOON: "Balloon",
}


def weapon_name(weapon_type) -> str:
    """Display name of a weapon type."""
    return _WEAPON_NAMES.get(weapon_type, "[Unknown]")


@dataclass
class InventoryItem:
    """A stack of one weapon type; a count of -1 means unlimited."""

    type: WeaponType
    count: int

    @property
    def name(self) -> str:
        return weapon_name(self.type)


@dataclass
class Inventory:
    """Weapons carried by a character and the one selected."""

    items: List[InventoryItem] = field(default_factory=list)
    selected_index: int = 0

    @property
    def selected(self) -> Optional[InventoryItem]:
        if not self.items:
            return None
        return self.items[self.selected_index]

    def scroll_weapon(self, direction: int) -> None:
        """Move the selection in the direction to the next item still in stock."""
        if not self.items:
            return
        count = len(self.items)
        index = self.selected_index
        for _ in range(count):
            index = (index + direction + count) % count
            if self.items[index].count > 0:
                self.selected_index = index
                return

    def select(self, weapon_type: WeaponType) -> None:
        """Select the first item of the given type, if carried."""
        for index, item in enumerate(self.items):
            if item.type == weapon_type:
                self.selected_index = index
                return


@dataclass
class UserControl:
    """Marks an entity as controlled by the local player."""