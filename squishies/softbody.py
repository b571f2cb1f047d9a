"""Soft bodies built from point masses, with their derived shape data."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np

from squishies.config import BoundingBox, Colour, get_config
from squishies.squishy import Squishy


def _zero3() -> np.ndarray:
    return np.zeros(3)


def _vec3(value) -> np.ndarray:
    arr = np.array(value, dtype=float).reshape(-1)
    if arr.size == 2:
        arr = np.append(arr, 0.0)
    if arr.size != 3:
        raise ValueError(f"expected a 2D or 3D vector, got {arr.size} components")
    return arr


@dataclass(eq=False)
class PointMass:
    """One simulated point of a soft body."""

    position: np.ndarray = field(default_factory=_zero3)
    velocity: np.ndarray = field(default_factory=_zero3)
    force: np.ndarray = field(default_factory=_zero3)
    mass: float = 1.0
    fixed: bool = False
    last_position: np.ndarray = field(default_factory=_zero3)
    global_position: np.ndarray = field(default_factory=_zero3)
    inside_another: bool = False


class Edge:
    """A segment between two points, with its direction (from p2 towards p1) and length."""

    def __init__(self, p1=None, p2=None) -> None:
        self.dir = np.zeros(3)
        self.length = 0.0
        self.p1 = np.zeros(3)
        self.p2 = np.zeros(3)
        if p1 is not None and p2 is not None:
            self.update(p1, p2)

    def update(self, p1, p2) -> None:
        """Set the end points and recompute direction and length."""
        self.p1 = _vec3(p1)
        self.p2 = _vec3(p2)
        e = self.p1 - self.p2
        self.length = float(np.linalg.norm(e))
        self.dir = e / self.length if self.length > 0.0 else np.zeros(3)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Edge):
            return NotImplemented
        return bool(
            np.array_equal(self.p1, other.p1)
            and np.array_equal(self.p2, other.p2)
            and np.array_equal(self.dir, other.dir)
        )

    def __repr__(self) -> str:
        return f"Edge(p1={self.p1.tolist()}, p2={self.p2.tolist()})"


@dataclass
class Bitfields:
    """Occupied cells of a coarse world grid, one bit mask per axis."""

    x: int = 0
    y: int = 0
    z: int = 0

    def clear(self) -> None:
        self.x = self.y = self.z = 0

    def same(self, other: "Bitfields") -> bool:
        """Whether the two occupy at least one shared cell range on every axis."""
        return bool((self.x & other.x) and (self.y & other.y) and (self.z & other.z))


def _bit_range(low: int, high: int) -> int:
    if high < low:
        return 0
    return ((1 << (high + 1)) - 1) ^ ((1 << low) - 1)


class SoftBody:
    """A deformable body: a squishy template plus the points simulating it."""

    def __init__(self, squishy: Squishy) -> None:
        self.shape: Squishy = squishy.copy()
        self.points: List[PointMass] = []
        self.colour: Colour = squishy.colour

        self.fixed = False
        self.kinematic = False
        self.shape_matching = True

        self.joint_k = 300.0
        self.joint_damping = 10.0
        self.shape_match_k = 150.0
        self.shape_match_damping = 5.0

        self.original_position = np.zeros(3)
        self.original_rotation = 0.0
        self.derived_position = np.zeros(3)
        self.derived_rotation = 0.0  # radians about the z axis
        self.derived_velocity = np.zeros(3)

        self.colliding = False
        self.collision_box = BoundingBox()

        self.bit_fields = Bitfields()
        self.bounding_box = BoundingBox()
        self.edges: List[Edge] = []

    def place_at(self, position) -> None:
        """Create one point mass per shape point, offset to the position."""
        pos = _vec3(position)
        self.original_position = pos.copy()
        self.derived_position = pos.copy()
        self.original_rotation = 0.0
        self.derived_rotation = 0.0

        self.points = []
        for shape_point in self.shape.points:
            world = np.append(shape_point, 0.0) + pos
            self.points.append(
                PointMass(position=world.copy(), global_position=world.copy(), last_position=world.copy())
            )
        self.update_all()

    def update_all(self) -> None:
        """Refresh derived data, edges, bounding box and grid cells."""
        self.update_derived_data()
        self.update_edges()
        self.update_bounding_box()
        self.update_bitfields()

    def update_derived_data(self) -> None:
        """Recompute the body's position, velocity and rotation from its points."""
        if not self.points:
            return
        positions = np.array([p.position for p in self.points])
        velocities = np.array([p.velocity for p in self.points])
        self.derived_position = positions.mean(axis=0)
        self.derived_velocity = velocities.mean(axis=0)

        angle_sum = 0.0
        for index, pm in enumerate(self.points):
            base = self.shape.point(index)
            curr = pm.position - self.derived_position
            delta = math.atan2(curr[1], curr[0]) - math.atan2(base[1], base[0])
            if delta > math.pi:
                delta -= 2.0 * math.pi
            if delta < -math.pi:
                delta += 2.0 * math.pi
            angle_sum += delta
        self.derived_rotation = angle_sum / len(self.points)

    def update_bounding_box(self) -> None:
        """Rebuild the bounding box around the points, nudged slightly in z."""
        self.bounding_box.reset()
        nudge = np.array([0.0, 0.0, 0.1])
        for pm in self.points:
            self.bounding_box.extend(pm.position)
            self.bounding_box.extend(pm.position + nudge)

    def update_global_shape(self) -> None:
        """Place the rest shape at the derived position, for shape matching."""
        for index, pm in enumerate(self.points):
            pm.global_position = np.append(self.shape.point(index), 0.0) + self.derived_position

    def update_bitfields(self) -> None:
        """Mark the world grid cells the bounding box covers."""
        self.bit_fields.clear()
        if not self.bounding_box.is_valid:
            return

        config = get_config()
        world = config.world_bounds
        cells = config.spatial_grid_size
        step = world.size() / cells
        limit = int(cells)

        def cell(value: float, axis: int) -> int:
            index = math.floor((value - world.min[axis]) / step[axis])
            return min(max(index, 0), limit)

        masks = []
        for axis in range(3):
            low = cell(self.bounding_box.min[axis], axis)
            high = cell(self.bounding_box.max[axis], axis)
            masks.append(_bit_range(low, high))
        self.bit_fields.x, self.bit_fields.y, self.bit_fields.z = masks

    def update_edges(self) -> None:
        """Rebuild the edge from each point to the next, wrapping around."""
        count = len(self.points)
        if len(self.edges) != count:
            self.edges = [Edge() for _ in range(count)]
        for index, edge in enumerate(self.edges):
            nxt = self.points[(index + 1) % count]
            edge.update(self.points[index].position, nxt.position)

    def set_fixed(self, fixed: bool = True) -> "SoftBody":
        """Make the body immovable (or movable again)."""
        self.fixed = fixed
        return self

    def point_positions(self) -> Optional[np.ndarray]:
        if not self.points:
            return None
        return np.array([p.position for p in self.points])