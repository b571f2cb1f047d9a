"""Game rules on top of the soft-body world: characters, weapons and damage."""

from __future__ import annotations

from typing import List, Optional

import numpy as np

from squishies import squishy as _squishy
from squishies.components import (
    Character,
    Collider,
    CollisionGroup,
    Grenade,
    Inventory,
    InventoryItem,
    WeaponType,
)
from squishies.config import BLACK, BLUE, DARKGREY, LIGHTBLUE, RED, YELLOW, Colour, Config
from squishies.events import DeployWeapon, EventDispatcher, Explosion, SplitSquishy
from squishies.world import Entity, World

_MOVE_FORCE = 10.0
_JUMP_FORCE = 500.0
_THROW_POWER = 20.0
_CAMERA_TRACK_SPEED = 3.0
_CAMERA_TRACK_OFFSET = np.array([0.0, 2.0, 0.0])
_STARTING_STOCK = 5

_NOT_STATIC = CollisionGroup.ALL & ~CollisionGroup.STATIC
_NOT_CHARACTER = CollisionGroup.ALL & ~CollisionGroup.CHARACTER


class Game:
    """A playable scene: spawns the level and characters and runs weapons and damage."""

    def __init__(self, config: Optional[Config] = None) -> None:
        self.events = EventDispatcher()
        self.world = World(config, self.events)
        self.background_colour: Colour = LIGHTBLUE
        self.camera_position = np.array([0.0, -2.0, 15.0])
        self.camera_target = np.array([0.0, -5.0, 0.0])
        self.debug = True
        self.splits: List[SplitSquishy] = []

        self._character_proto = _squishy.create_circle(1.0, 20, 3)
        self._grenade_proto = _squishy.create_ellipse(0.25, 0.25, 9, 4, DARKGREY)

        self.events.on(DeployWeapon, self._spawn_grenade)
        self.events.on(Explosion, self.explode)
        self.events.on(SplitSquishy, self._split)

    def setup(self) -> None:
        """Populate the level: three characters, a floor, a platform and a gear."""
        self.background_colour = LIGHTBLUE
        self.camera_position = np.array([0.0, -2.0, 15.0])
        self.camera_target = np.array([0.0, -5.0, 0.0])

        player = self.spawn_character("Squishy 1", (-2.0, -5.0, 0.0), RED)
        player.user_controlled = True
        self.spawn_character("Squishy 2", (-1.2, -3.0, 0.0), BLUE)
        self.spawn_character("Squishy 3", (5.0, 5.0, 0.0), YELLOW)

        floor = self.world.spawn(
            _squishy.create_rect(100.0, 10.0),
            (0.0, -15.0, 0.0),
            collider=Collider(CollisionGroup.STATIC, _NOT_STATIC),
            name="Beam",
        )
        floor.body.set_fixed()

        platform_shape = _squishy.create_rect(10.0, 2.0)
        platform_shape.poly.rotate(-30.0)
        platform = self.world.spawn(
            platform_shape,
            (-5.0, -5.0, 0.0),
            collider=Collider(CollisionGroup.STATIC, _NOT_STATIC),
            name="Platform",
        )
        platform.body.set_fixed()

        gear = self.world.spawn(
            _squishy.create_gear(1.5, 10, 0.3, BLACK),
            (5.0, 5.0, 0.0),
            collider=Collider(CollisionGroup.KINEMATIC),
            name="Gear",
        )
        gear.body.set_fixed()

    def spawn_character(self, name: str, position, colour: Colour) -> Entity:
        """Add a playable squishy with a collider and a full inventory."""
        proto = self._character_proto.copy()
        proto.colour = colour
        entity = self.world.spawn(
            proto,
            position,
            collider=Collider(CollisionGroup.CHARACTER),
            name=name,
            character=Character(),
        )
        self.reset_inventory(entity)
        return entity

    def reset_inventory(self, entity: Entity) -> Inventory:
        """Give the entity the starting weapons, selecting the first."""
        if entity.inventory is None:
            entity.inventory = Inventory()
        inventory = entity.inventory
        inventory.items.clear()
        inventory.selected_index = 0
        for weapon in (WeaponType.NADE, WeaponType.MINE, WeaponType.BALLOON):
            inventory.items.append(InventoryItem(weapon, _STARTING_STOCK))
        return inventory

    def update(self, dt: float) -> None:
        """Track the player with the camera, tick grenade fuses and refresh render data."""
        for entity in self.world:
            if entity.user_controlled:
                destination = entity.body.derived_position + _CAMERA_TRACK_OFFSET
                t = _CAMERA_TRACK_SPEED * dt
                self.camera_target = self.camera_target + (destination - self.camera_target) * t
                self.camera_position = np.array(
                    [self.camera_target[0], self.camera_target[1] + 0.5, self.camera_position[2]]
                )

        self.world.update(dt)

        for entity in self.world:
            if entity.grenade is None or entity not in self.world:
                continue
            entity.grenade.timer -= dt
            if entity.grenade.timer <= 0.0:
                self._detonate(entity)

    def move(self, entity: Entity, direction: float) -> None:
        """Push every point of the body sideways; direction is -1 for left, 1 for right."""
        for pm in entity.body.points:
            pm.force = pm.force + np.array([direction * _MOVE_FORCE, 0.0, 0.0])

    def jump(self, entity: Entity) -> None:
        for pm in entity.body.points:
            pm.force = pm.force + np.array([0.0, _JUMP_FORCE, 0.0])

    def duck(self, entity: Entity) -> None:
        for pm in entity.body.points:
            pm.force = pm.force - np.array([0.0, _JUMP_FORCE, 0.0])

    def deploy_weapon(self, entity: Entity, target) -> DeployWeapon:
        """Fire the entity's selected weapon towards the target."""
        if entity.inventory is None:
            raise ValueError(f"entity {entity.name or entity.id} carries no inventory")
        event = DeployWeapon(
            entity,
            entity.inventory.selected_index,
            entity.body.derived_position.copy(),
            target,
            _THROW_POWER,
        )
        self.events.dispatch(event)
        return event

    def explode(self, explosion: Explosion) -> List[SplitSquishy]:
        """Find characters caught in the blast and report the points hit on each."""
        radius_sq = explosion.radius * explosion.radius
        centre = explosion.position
        results: List[SplitSquishy] = []

        for entity in self.world:
            if entity.character is None:
                continue
            box = entity.body.bounding_box
            if not box.is_valid:
                continue

            corners = (
                (box.min[0], box.min[1]),
                (box.max[0], box.min[1]),
                (box.max[0], box.max[1]),
                (box.min[0], box.max[1]),
            )
            reached = any(
                (centre[0] - cx) ** 2 + (centre[1] - cy) ** 2 <= radius_sq for cx, cy in corners
            )
            if not reached:
                continue

            hitpoints = []
            for index, pm in enumerate(entity.body.points):
                offset = pm.position - centre
                dist_sq = float(np.dot(offset, offset))
                if dist_sq <= radius_sq:
                    hitpoints.append((index, dist_sq))

            if hitpoints:
                event = SplitSquishy(entity, hitpoints, centre, explosion.power)
                self.events.dispatch(event)
                results.append(event)

        return results

    def _spawn_grenade(self, detail: DeployWeapon) -> Entity:
        entity = self.world.spawn(
            self._grenade_proto,
            detail.position,
            collider=Collider(CollisionGroup.PROJECTILE, _NOT_CHARACTER),
        )
        entity.grenade = Grenade(player=detail.player)

        aim = detail.target - detail.position
        length = float(np.linalg.norm(aim))
        velocity = aim / length * detail.power if length > 0.0 else np.zeros(3)
        for pm in entity.body.points:
            pm.velocity = velocity.copy()
        return entity

    def _detonate(self, entity: Entity) -> None:
        explosion = Explosion(entity.body.derived_position.copy(), entity.grenade.blast_radius, 1.0)
        self.events.dispatch(explosion)
        if entity in self.world:
            self.world.remove(entity)

    def _split(self, event: SplitSquishy) -> None:
        name = event.player.name if isinstance(event.player, Entity) else str(event.player)
        print(f"GOTCHA! hitpoints on {name} = {len(event.hitpoints)}")
        self.splits.append(event)