import math

import numpy as np
import pytest

from squishies.camera import (
    Camera,
    Light,
    LightType,
    create_orthographic,
    create_perspective,
)


def _camera():
    return create_perspective((1.0, 2.0, 3.0), (4.0, 2.0, -1.0))


def _project(matrix, point):
    clip = matrix @ np.append(np.asarray(point, dtype=float), 1.0)
    return clip[:3] / clip[3]


def test_defaults_match_engine_settings():
    cam = Camera()
    assert cam.fov_degrees == 60.0
    assert cam.near_plane == 0.1
    assert cam.far_plane == 10000.0
    assert cam.ortho_width == 10.0
    assert np.allclose(cam.up, [0.0, 1.0, 0.0])


def test_factories_set_projection_kind():
    p = create_perspective((0, 0, 5), (0, 0, 0), 45.0)
    o = create_orthographic((0, 0, 5), (0, 0, 0), 30.0)
    assert not p.orthographic and p.fov_degrees == 45.0
    assert o.orthographic and o.ortho_width == 30.0


def test_basis_is_orthonormal():
    cam = _camera()
    f, r = cam.forward(), cam.right()
    assert np.isclose(np.linalg.norm(f), 1.0)
    assert np.isclose(np.linalg.norm(r), 1.0)
    assert np.isclose(np.dot(f, r), 0.0)
    assert np.allclose(cam.direction(), f)


def test_view_matrix_maps_position_to_origin_and_target_ahead():
    cam = _camera()
    view = cam.view_matrix()
    assert np.allclose(_project(view, cam.position), [0.0, 0.0, 0.0])
    t = _project(view, cam.target)
    dist = np.linalg.norm(cam.target - cam.position)
    assert np.allclose(t, [0.0, 0.0, -dist])


def test_view_matrix_handles_up_parallel_to_forward():
    cam = create_perspective((0, 0, 0), (0, 10, 0))
    view = cam.view_matrix()
    assert np.all(np.isfinite(view))
    assert np.allclose(_project(view, (0, 10, 0)), [0.0, 0.0, -10.0])


def test_perspective_maps_near_and_far_to_ndc_bounds():
    cam = create_perspective((0, 0, 0), (0, 0, -1))
    proj = cam.projection_matrix(2.0)
    assert np.isclose(_project(proj, (0, 0, -cam.near_plane))[2], -1.0)
    assert np.isclose(_project(proj, (0, 0, -cam.far_plane))[2], 1.0)


def test_orthographic_maps_half_extent_to_unit():
    cam = create_orthographic((0, 0, 0), (0, 0, -1), 10.0)
    vp = cam.view_projection_matrix(2.0)
    assert np.allclose(_project(vp, (5.0, 2.5, -cam.near_plane)), [1.0, 1.0, -1.0])


def test_projection_rejects_bad_aspect():
    with pytest.raises(ValueError):
        _camera().projection_matrix(0.0)


def test_move_forward_keeps_offset():
    cam = _camera()
    before = cam.target - cam.position
    start = cam.position.copy()
    cam.move_forward(2.0)
    assert np.allclose(cam.target - cam.position, before)
    assert np.isclose(np.linalg.norm(cam.position - start), 2.0)


def test_move_forward_in_world_plane_keeps_height():
    cam = create_perspective((0, 5, 0), (3, 1, -4))
    cam.move_forward(3.0, True)
    assert np.isclose(cam.position[1], 5.0)
    assert np.isclose(cam.target[1], 1.0)


def test_move_right_and_up():
    cam = _camera()
    right = cam.right()
    start = cam.position.copy()
    cam.move_right(1.5)
    assert np.allclose(cam.position - start, right * 1.5)
    start = cam.position.copy()
    cam.move_up(2.0)
    assert np.allclose(cam.position - start, [0.0, 2.0, 0.0])


def test_move_to_target():
    cam = create_perspective((0, 0, 10), (0, 0, 0))
    cam.move_to_target(-4.0)
    assert np.isclose(np.linalg.norm(cam.position - cam.target), 6.0)
    cam.move_to_target(-100.0)
    assert np.isclose(np.linalg.norm(cam.position - cam.target), 0.001)
    assert np.allclose(cam.target, [0.0, 0.0, 0.0])


def test_yaw_full_turn_restores_target():
    cam = _camera()
    original = cam.target.copy()
    cam.yaw(2.0 * math.pi)
    assert np.allclose(cam.target, original)


def test_yaw_around_target_keeps_distance():
    cam = _camera()
    dist = np.linalg.norm(cam.target - cam.position)
    target = cam.target.copy()
    cam.yaw(0.7, True)
    assert np.allclose(cam.target, target)
    assert np.isclose(np.linalg.norm(cam.target - cam.position), dist)


def test_pitch_lock_view_stops_short_of_vertical():
    cam = create_perspective((0, 0, 0), (0, 0, -1))
    cam.pitch(10.0, lock_view=True)
    dot = float(np.dot(cam.forward(), cam.up_vector()))
    assert 0.999 < dot < 1.0


def test_pitch_rotate_up_keeps_up_perpendicular():
    cam = create_perspective((0, 0, 0), (0, 0, -1))
    cam.pitch(0.4, rotate_up=True)
    assert np.isclose(np.dot(cam.forward(), cam.up_vector()), 0.0)


def test_roll_keeps_up_perpendicular_to_forward():
    cam = create_perspective((0, 0, 0), (0, 0, -1))
    cam.roll(math.pi / 2)
    assert np.isclose(np.dot(cam.up_vector(), cam.forward()), 0.0)
    assert not np.allclose(cam.up_vector(), [0.0, 1.0, 0.0])


def test_directional_light_uses_orthographic_camera():
    light = Light((20, 20, 20), (0, 0, 0))
    assert light.type is LightType.DIRECTIONAL
    assert light.light_cam.orthographic
    assert light.light_cam.ortho_width == 50.0
    assert light.light_cam.far_plane == 500.0
    assert light.ambient_level == 0.1
    expected = -np.array([20.0, 20.0, 20.0]) / np.linalg.norm([20.0, 20.0, 20.0])
    assert np.allclose(light.direction(), expected)


def test_point_light_uses_perspective_camera():
    light = Light((0, 5, 0), (0, 0, 0), LightType.POINT)
    assert not light.light_cam.orthographic
    assert light.light_cam.fov_degrees == 90.0
    assert np.allclose(
        light.view_projection_matrix(1.0), light.light_cam.view_projection_matrix(1.0)
    )