"""Point-in-polygon collision detection and response between soft bodies."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import numpy as np

from squishies.events import EventDispatcher
from squishies.softbody import Edge, SoftBody

_FAR = 100000.0


def _zero2() -> np.ndarray:
    return np.zeros(2)


def _perp_ccw(v: np.ndarray) -> np.ndarray:
    return np.array([-v[1], v[0]])


def _cross2d(a: np.ndarray, b: np.ndarray) -> float:
    return float(a[0] * b[1] - a[1] * b[0])


@dataclass(eq=False)
class EdgeCol:
    """Closest point on an edge to a query point."""

    hit_point: np.ndarray = field(default_factory=_zero2)
    normal: np.ndarray = field(default_factory=_zero2)
    edge_d: float = 0.0
    dist: float = 0.0


@dataclass(eq=False)
class CollisionData:
    """A point of one body found inside another, and the edge it hit."""

    obj1: Optional[SoftBody] = None
    obj1_point: int = 0
    obj2: Optional[SoftBody] = None
    obj2_point_a: int = 0
    obj2_point_b: int = 0
    hit_point: np.ndarray = field(default_factory=_zero2)
    normal: np.ndarray = field(default_factory=_zero2)
    edge_d: float = 0.0
    penetration_sq: float = 0.0

    def clear(self) -> None:
        self.obj1 = self.obj2 = None
        self.obj1_point = self.obj2_point_a = self.obj2_point_b = -1
        self.hit_point = np.zeros(2)
        self.normal = np.zeros(2)
        self.edge_d = 0.0
        self.penetration_sq = 0.0


def closest_point_on_edge_squared(point, edge: Edge) -> EdgeCol:
    """Closest point on the edge to the point, with the squared distance to it."""
    pt = np.asarray(point, dtype=float)[:2]
    p1 = edge.p1[:2]
    direction = edge.dir[:2]
    to_p = pt - p1
    normal = _perp_ccw(direction)
    x = float(np.dot(to_p, direction))

    if x <= 0.0:
        diff = pt - p1
        return EdgeCol(p1.copy(), normal, 0.0, float(np.dot(diff, diff)))
    if x >= edge.length:
        p2 = edge.p2[:2]
        diff = pt - p2
        return EdgeCol(p2.copy(), normal, 1.0, float(np.dot(diff, diff)))
    cross = _cross2d(to_p, direction)
    return EdgeCol(p1 + direction * x, normal, x / edge.length, cross * cross)


def point_in_polygon(point, points: Sequence) -> bool:
    """Even-odd test of a 2D point against a polygon of point masses or positions."""
    if len(points) <= 2:
        return False
    px, py = float(point[0]), float(point[1])
    verts = [np.asarray(getattr(p, "position", p), dtype=float) for p in points]
    inside = False
    j = len(verts) - 1
    for i, vi in enumerate(verts):
        vj = verts[j]
        if (vi[1] > py) != (vj[1] > py):
            cross_x = (vj[0] - vi[0]) * (py - vi[1]) / (vj[1] - vi[1]) + vi[0]
            if px < cross_x:
                inside = not inside
        j = i
    return inside


class CollisionSolver:
    """Finds penetrating points between bodies and pushes them apart."""

    def __init__(self, event_dispatcher: Optional[EventDispatcher] = None) -> None:
        self.event_dispatcher = event_dispatcher
        self.collisions: List[CollisionData] = []
        self.penetration_threshold = 0.3
        self.elasticity = 0.8
        self.friction = 0.3

    def setup(self, penetration_threshold: float, elasticity: float, friction: float) -> None:
        self.penetration_threshold = penetration_threshold
        self.elasticity = elasticity
        self.friction = friction

    def reset(self) -> None:
        """Forget the collisions found so far."""
        self.collisions.clear()

    def check(self, body_a: SoftBody, body_b: SoftBody) -> bool:
        """Record every point of body_a lying inside body_b; return whether any did."""
        if not body_a.bit_fields.same(body_b.bit_fields):
            return False
        if not body_a.bounding_box.intersects(body_b.bounding_box):
            return False

        count_a = len(body_a.points)
        count_b = len(body_b.points)
        box_b = body_b.bounding_box
        has_collisions = False

        for i, pm in enumerate(body_a.points):
            pt = pm.position[:2]
            if not box_b.contains((pt[0], pt[1], 0.0)):
                continue
            if not point_in_polygon(pt, body_b.points):
                continue

            prev_index = 0 if i > 0 else count_a - 1
            next_index = (i + 1) % count_a
            prev = body_a.points[prev_index].position[:2]
            nxt = body_a.points[next_index].position[:2]
            v = (pt - prev) + (nxt - pt)
            pt_norm = np.array([-v[1], v[0]])

            closest_away = _FAR
            closest_same = _FAR
            info_away = CollisionData()
            info_away.clear()
            info_away.obj1, info_away.obj1_point, info_away.obj2 = body_a, i, body_b
            info_same = CollisionData()
            info_same.clear()
            info_same.obj1, info_same.obj1_point, info_same.obj2 = body_a, i, body_b
            found = False

            for j in range(count_b):
                b1, b2 = j, (j + 1) % count_b
                ec = closest_point_on_edge_squared(pt, body_b.edges[j])
                dot = float(np.dot(pt_norm, ec.normal))
                target = None
                if dot <= 0.0:
                    if ec.dist < closest_away:
                        closest_away = ec.dist
                        target = info_away
                        found = True
                elif ec.dist < closest_same:
                    closest_same = ec.dist
                    target = info_same
                if target is not None:
                    target.obj2_point_a = b1
                    target.obj2_point_b = b2
                    target.edge_d = ec.edge_d
                    target.hit_point = ec.hit_point
                    target.normal = ec.normal
                    target.penetration_sq = ec.dist

            use_same = not found or (
                closest_away > self.penetration_threshold and closest_same < closest_away
            )
            chosen = info_same if use_same else info_away
            body_a.points[chosen.obj1_point].inside_another = True
            self.collisions.append(chosen)
            has_collisions = True

        return has_collisions

    def respond(self) -> int:
        """Separate the recorded collisions; return how many were too deep to handle."""
        too_deep = 0
        threshold_sq = self.penetration_threshold * self.penetration_threshold

        for info in self.collisions:
            point_a = info.obj1.points[info.obj1_point]
            point_b1 = info.obj2.points[info.obj2_point_a]
            point_b2 = info.obj2.points[info.obj2_point_b]

            a_fixed = point_a.fixed or point_a.mass == 0.0 or info.obj1.fixed
            b1_fixed = point_b1.fixed or point_b1.mass == 0.0 or info.obj2.fixed
            b2_fixed = point_b2.fixed or point_b2.mass == 0.0 or info.obj2.fixed

            b1_vel = np.zeros(2) if b1_fixed else point_b1.velocity[:2]
            b2_vel = np.zeros(2) if b2_fixed else point_b2.velocity[:2]
            b_vel = (b1_vel + b2_vel) * 0.5
            rel_vel = point_a.velocity[:2] - b_vel
            normal = info.normal
            rel_dot = float(np.dot(rel_vel, normal))

            if info.penetration_sq > threshold_sq:
                too_deep += 1
                continue

            penetration = math.sqrt(info.penetration_sq)
            b1_inf = 1.0 - info.edge_d
            b2_inf = info.edge_d

            b_mass_sum = math.inf if (b1_fixed or b2_fixed) else point_b1.mass + point_b2.mass
            mass_sum = point_a.mass + b_mass_sum

            a_move = 0.0
            b_move = 0.0
            if a_fixed:
                b_move = penetration + 0.001
            elif math.isinf(b_mass_sum):
                a_move = penetration + 0.001
            else:
                a_move = penetration * (b_mass_sum / mass_sum)
                b_move = penetration * (point_a.mass / mass_sum)

            a_inv_mass = 0.0 if a_fixed else 1.0 / point_a.mass
            b_inv_mass = 0.0 if math.isinf(b_mass_sum) else 1.0 / b_mass_sum
            j_denom = a_inv_mass + b_inv_mass

            if not a_fixed:
                point_a.position = point_a.position + np.append(normal * a_move, 0.0)
            if not b1_fixed:
                point_b1.position = point_b1.position - np.append(normal * (b_move * b1_inf), 0.0)
            if not b2_fixed:
                point_b2.position = point_b2.position - np.append(normal * (b_move * b2_inf), 0.0)

            if j_denom == 0.0:
                continue

            j = -float(np.dot(rel_vel * (1.0 + self.elasticity), normal)) / j_denom
            tangent = _perp_ccw(normal)
            f = float(np.dot(rel_vel, tangent)) * self.friction / j_denom

            if rel_dot < 0.0001:
                if not a_fixed:
                    dv = normal * (j / point_a.mass) - tangent * (f / point_a.mass)
                    point_a.velocity = point_a.velocity + np.append(dv, 0.0)
                if not b1_fixed:
                    dv = (normal * (j / b_mass_sum) - tangent * (f / b_mass_sum)) * b1_inf
                    point_b1.velocity = point_b1.velocity - np.append(dv, 0.0)
                if not b2_fixed:
                    dv = (normal * (j / b_mass_sum) - tangent * (f / b_mass_sum)) * b2_inf
                    point_b2.velocity = point_b2.velocity - np.append(dv, 0.0)

        return too_deep