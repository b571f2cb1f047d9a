"""The soft-body world: spawning bodies and stepping their physics."""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Union

import numpy as np

from squishies.collision import CollisionSolver
from squishies.components import Character, Collider, Grenade, Inventory
from squishies.config import Colour, Config, get_config
from squishies.events import EventDispatcher
from squishies.softbody import SoftBody
from squishies.squishy import Squishy

_MIN_SPRING_LENGTH = 0.0001
_BOUNCE_DAMPING = np.array([0.9, 0.8, 0.9])
_VELOCITY_DAMPING = 0.999


def spring_force(pos_a, vel_a, pos_b, vel_b, k: float, damping: float, rest_length: float) -> np.ndarray:
    """Damped spring force acting on point A from its spring to point B."""
    a = np.asarray(pos_a, dtype=float)
    b = np.asarray(pos_b, dtype=float)
    offset = a - b
    length = float(np.linalg.norm(offset))
    if length <= _MIN_SPRING_LENGTH:
        return np.zeros_like(offset)
    direction = offset / length
    relative_velocity = np.asarray(vel_a, dtype=float) - np.asarray(vel_b, dtype=float)
    closing_speed = float(np.dot(relative_velocity, direction))
    stretch = length - rest_length
    return -direction * (stretch * k - closing_speed * damping)


@dataclass(eq=False)
class Entity:
    """A game object owning a soft body and its optional components."""

    id: int
    body: SoftBody
    name: str = ""
    collider: Optional[Collider] = None
    character: Optional[Character] = None
    inventory: Optional[Inventory] = None
    grenade: Optional[Grenade] = None
    user_controlled: bool = False
    colour: Colour = (1.0, 1.0, 1.0, 1.0)
    vertices: np.ndarray = field(default_factory=lambda: np.zeros((0, 3)))
    needs_update: bool = False
    extras: Dict[str, Any] = field(default_factory=dict)

    @property
    def position(self) -> np.ndarray:
        return self.body.derived_position


class World:
    """Holds soft-body entities and advances their simulation."""

    def __init__(
        self,
        config: Optional[Config] = None,
        event_dispatcher: Optional[EventDispatcher] = None,
    ) -> None:
        self.config = config if config is not None else get_config()
        self.events = event_dispatcher if event_dispatcher is not None else EventDispatcher()
        self.collider = CollisionSolver(self.events)
        self._entities: Dict[int, Entity] = {}
        self._ids = itertools.count(1)

    def __iter__(self) -> Iterator[Entity]:
        return iter(list(self._entities.values()))

    def __len__(self) -> int:
        return len(self._entities)

    def __contains__(self, entity: object) -> bool:
        key = entity.id if isinstance(entity, Entity) else entity
        return key in self._entities

    def get(self, entity_id: int) -> Entity:
        return self._entities[entity_id]

    def spawn(
        self,
        squishy: Squishy,
        position=(0.0, 0.0, 0.0),
        collider: Optional[Collider] = None,
        name: str = "",
        character: Optional[Character] = None,
    ) -> Entity:
        """Build a soft body from the squishy at the position and add it to the world."""
        body = SoftBody(squishy)
        body.place_at(position)
        entity = Entity(
            id=next(self._ids),
            body=body,
            name=name,
            collider=collider,
            character=character,
            colour=body.colour,
        )
        entity.vertices = np.vstack(
            [body.derived_position] + [pm.position for pm in body.points]
        )
        self._entities[entity.id] = entity
        return entity

    def remove(self, entity: Union[Entity, int]) -> None:
        """Take the entity out of the world; raise KeyError if it is not present."""
        key = entity.id if isinstance(entity, Entity) else entity
        if key not in self._entities:
            raise KeyError(f"no entity with id {key}")
        del self._entities[key]

    def reset_bodies(self) -> None:
        """Put every body back into its rest shape at its original position, at rest."""
        for entity in self:
            body = entity.body
            for index, pm in enumerate(body.points):
                pm.position = np.append(body.shape.point(index), 0.0) + body.original_position
                pm.velocity = np.zeros(3)
                pm.force = np.zeros(3)
            body.update_derived_data()
            body.update_edges()
            body.update_bounding_box()

    def update(self, dt: float) -> None:
        """Refresh each entity's render vertices and colour from its body."""
        for entity in self:
            body = entity.body
            entity.colour = body.colour
            if len(entity.vertices) != len(body.points) + 1:
                entity.vertices = np.zeros((len(body.points) + 1, 3))
                entity.needs_update = True
            entity.vertices[0] = body.derived_position
            for index, pm in enumerate(body.points, start=1):
                if not np.array_equal(entity.vertices[index], pm.position):
                    entity.needs_update = True
                    entity.vertices[index] = pm.position

    def fixed_update(self, dt: float) -> None:
        """Advance the simulation by one fixed step."""
        self._accumulate_forces()
        self._integrate(dt)
        self._hard_constraints()
        self._meta_updates()
        self._handle_collisions()
        self._post_updates()

    def _moving_bodies(self) -> List[SoftBody]:
        return [e.body for e in self._entities.values() if not e.body.fixed]

    def _accumulate_forces(self) -> None:
        gravity = np.array([0.0, self.config.gravity, 0.0])
        for body in self._moving_bodies():
            body.update_derived_data()
            body.update_global_shape()

            for pm in body.points:
                if not pm.fixed:
                    pm.force = pm.force + gravity * pm.mass

            for joint in body.shape.joints:
                a = body.points[joint.from_index]
                b = body.points[joint.to_index]
                if a.fixed and b.fixed:
                    continue
                force = spring_force(
                    a.position, a.velocity, b.position, b.velocity,
                    body.joint_k, body.joint_damping, joint.rest,
                )
                if not a.fixed:
                    a.force = a.force + force
                if not b.fixed:
                    b.force = b.force - force

            if body.shape_matching:
                for pm in body.points:
                    target_velocity = np.zeros(3) if body.kinematic else pm.velocity
                    pm.force = pm.force + spring_force(
                        pm.position, pm.velocity, pm.global_position, target_velocity,
                        body.shape_match_k, body.shape_match_damping, 0.0,
                    )

    def _integrate(self, dt: float) -> None:
        for body in self._moving_bodies():
            for pm in body.points:
                acceleration = pm.force / pm.mass if pm.mass > 1.0 else pm.force
                pm.velocity = pm.velocity + acceleration * dt
                pm.last_position = pm.position.copy()
                pm.position = pm.position + pm.velocity * dt
                pm.force = np.zeros(3)

    def _hard_constraints(self) -> None:
        bounds = self.config.world_bounds
        if not bounds.is_valid:
            return
        for body in self._moving_bodies():
            for pm in body.points:
                pm.position = pm.position.copy()
                pm.velocity = pm.velocity.copy()
                for axis in (0, 2):
                    if pm.position[axis] < bounds.min[axis]:
                        pm.position[axis] = bounds.min[axis]
                        pm.velocity[axis] = -pm.velocity[axis] * _BOUNCE_DAMPING[0]
                    elif pm.position[axis] > bounds.max[axis]:
                        pm.position[axis] = bounds.max[axis]
                        pm.velocity[axis] = -pm.velocity[axis] * _BOUNCE_DAMPING[0]

                hit_floor = pm.position[1] < bounds.min[1]
                hit_ceiling = pm.position[1] > bounds.max[1]
                if hit_floor or hit_ceiling:
                    pm.position[1] = bounds.min[1] if hit_floor else bounds.max[1]
                    pm.velocity[1] = -pm.velocity[1] * _BOUNCE_DAMPING[1]
                    pm.velocity[0] *= _BOUNCE_DAMPING[0]
                    pm.velocity[2] *= _BOUNCE_DAMPING[2]

    def _meta_updates(self) -> None:
        for body in self._moving_bodies():
            body.update_all()
            for pm in body.points:
                pm.inside_another = False

    def _handle_collisions(self) -> None:
        collidable = [e for e in self._entities.values() if e.collider is not None]
        self.collider.reset()
        for first in collidable:
            for second in collidable:
                if first is second or (first.body.fixed and second.body.fixed):
                    continue
                if not first.collider.accepts(second.collider):
                    continue
                first.body.colliding = self.collider.check(first.body, second.body)
        self.collider.respond()

    def _post_updates(self) -> None:
        for body in self._moving_bodies():
            body.collision_box.reset()
            for pm in body.points:
                pm.velocity = pm.velocity * _VELOCITY_DAMPING
                if pm.inside_another:
                    body.collision_box.extend(pm.position)