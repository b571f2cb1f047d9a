import numpy as np
import pytest

from squishies.poly import (
    Poly,
    create_circle,
    create_ellipse,
    create_gear,
    create_rect,
    create_square,
)


def _on_rect_boundary(points, w, h):
    hw, hh = w / 2, h / 2
    return all(
        np.isclose(abs(x), hw) or np.isclose(abs(y), hh) for x, y in points
    )


def test_rect_starts_top_left():
    poly = create_rect(4.0, 2.0)
    assert np.allclose(poly.points[0], [-2.0, 1.0])
    assert _on_rect_boundary(poly.points, 4.0, 2.0)


def test_rect_primary_points_are_corners():
    poly = create_rect(4.0, 2.0, 3, 2)
    for idx in poly.primary_points:
        x, y = poly.points[idx]
        assert np.isclose(abs(x), 2.0) and np.isclose(abs(y), 1.0)
    assert _on_rect_boundary(poly.points, 4.0, 2.0)


def test_rect_points_unique():
    poly = create_rect(3.0, 3.0, 2, 2)
    rounded = {tuple(np.round(p, 6)) for p in poly.points}
    assert len(rounded) == len(poly)


def test_square_matches_rect():
    assert np.allclose(create_square(2.0, 1).points, create_rect(2.0, 2.0, 1, 1).points)


def test_circle_points_on_radius():
    poly = create_circle(2.0, 16)
    assert len(poly) == 16
    assert np.allclose(np.linalg.norm(poly.points, axis=1), 2.0)
    assert np.allclose(poly.points[0], [2.0, 0.0])
    assert np.allclose(poly.center(), [0.0, 0.0])


def test_ellipse_extents():
    poly = create_ellipse(3.0, 1.0, 40)
    assert np.isclose(poly.points[:, 0].max(), 3.0)
    assert np.isclose(poly.points[:, 1].max(), 1.0)


def test_ellipse_rejects_zero_segments():
    with pytest.raises(ValueError):
        create_ellipse(1.0, 1.0, 0)


def test_gear_radii():
    poly = create_gear(1.5, 10, 0.3)
    assert len(poly) == 10 * 4
    radii = np.linalg.norm(poly.points, axis=1)
    assert np.allclose(radii[0::4], 1.5)
    assert np.allclose(radii[1::4], 1.5)
    assert np.allclose(radii[2::4], 1.2)
    assert np.allclose(radii[3::4], 1.2)


def test_gear_rejects_no_teeth():
    with pytest.raises(ValueError):
        create_gear(1.0, 0, 0.1)


def test_rotate_quarter_turn():
    poly = Poly([(1.0, 0.0)])
    poly.rotate(90.0)
    assert np.allclose(poly.points[0], [0.0, 1.0])


def test_rotate_round_trip():
    poly = create_rect(3.0, 1.0, 2, 0)
    original = poly.points.copy()
    poly.rotate(-30.0).rotate(30.0)
    assert np.allclose(poly.points, original)


def test_translate_moves_center():
    poly = create_circle(1.0, 12)
    poly.translate((2.0, -3.0))
    assert np.allclose(poly.center(), [2.0, -3.0])


def test_scale_round_trip():
    poly = create_square(2.0, 1)
    original = poly.points.copy()
    poly.scale(4.0)
    assert np.allclose(poly.points, original * 4.0)
    poly.scale(0.25)
    assert np.allclose(poly.points, original)


def test_copy_is_independent():
    poly = create_square(1.0)
    clone = poly.copy()
    clone.translate((5.0, 5.0))
    assert not np.allclose(poly.points, clone.points)
    assert clone.primary_points == poly.primary_points


def test_empty_center_raises():
    with pytest.raises(ValueError):
        Poly().center()