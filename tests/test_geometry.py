import numpy as np
import pytest

from core.exceptions import ConfigurationError, InvalidInputError
from core.geometry import (
    EXTENT_SCALE,
    centroid_and_extent,
    find_proximate_axes,
    generate_sphere_points,
)


def test_sphere_points_lie_on_sphere():
    center = np.array([1.0, -2.0, 3.0])
    points = generate_sphere_points(350, center, 12.5)

    assert points.shape == (350, 3)
    distances = np.linalg.norm(points - center, axis=1)
    assert np.allclose(distances, 12.5)


def test_sphere_points_run_pole_to_pole():
    center = np.zeros(3)
    points = generate_sphere_points(100, center, 2.0)

    assert np.allclose(points[0], [0.0, -2.0, 0.0])
    assert np.allclose(points[-1], [0.0, 2.0, 0.0])
    # y grows monotonically along the spiral
    assert np.all(np.diff(points[:, 1]) > 0)


def test_sphere_points_are_deterministic():
    center = np.array([0.5, 0.5, 0.5])
    first = generate_sphere_points(350, center, 10.0)
    second = generate_sphere_points(350, center, 10.0)
    assert np.array_equal(first, second)


def test_sphere_points_cover_the_sphere():
    points = generate_sphere_points(350, np.zeros(3), 1.0)
    # every direction has a sample within ~15 degrees
    probes = np.array(
        [[1, 0, 0], [-1, 0, 0], [0, 0, 1], [0, 0, -1], [0.6, 0.0, 0.8], [-0.48, 0.6, 0.64]]
    )
    cosines = probes @ points.T
    assert np.all(cosines.max(axis=1) > np.cos(np.radians(15)))


def test_sphere_points_need_two_points():
    with pytest.raises(ConfigurationError):
        generate_sphere_points(1, np.zeros(3), 1.0)


def test_centroid_and_extent():
    coords = np.array([[0.0, 0.0, 0.0], [2.0, 0.0, 0.0], [1.0, 3.0, 0.0], [1.0, -3.0, 0.0]])
    centroid, extent = centroid_and_extent(coords)

    assert np.allclose(centroid, [1.0, 0.0, 0.0])
    assert extent == pytest.approx(EXTENT_SCALE * 3.0)


def test_centroid_of_empty_set():
    with pytest.raises(InvalidInputError):
        centroid_and_extent(np.empty((0, 3)))


def test_proximate_axes_around_centroid_cover_sphere():
    center = np.array([3.0, 1.0, -1.0])
    axes = find_proximate_axes(50, center, 10.1, center, refinement_points=400)

    # the centroid is equidistant from every sphere point
    assert len(axes) == 400
    assert np.allclose(np.linalg.norm(axes - center, axis=1), 10.1)


def test_proximate_axes_around_axis_point_are_local():
    center = np.zeros(3)
    radius = 20.0
    reference = np.array([0.0, 0.0, radius])
    axes = find_proximate_axes(40, center, radius, reference, refinement_points=2000)

    assert len(axes) >= 40
    assert len(axes) < 2000
    distances = np.linalg.norm(axes - reference, axis=1)
    assert distances.max() < radius / 2
    # selection is a ball around the reference
    dense = generate_sphere_points(2000, center, radius)
    dense_distances = np.linalg.norm(dense - reference, axis=1)
    assert np.sum(dense_distances <= distances.max() + 1e-9) == len(axes)


def test_proximate_axes_keep_sphere_order():
    center = np.zeros(3)
    reference = np.array([15.0, 0.0, 0.0])
    axes = find_proximate_axes(30, center, 15.0, reference, refinement_points=1000)

    dense = generate_sphere_points(1000, center, 15.0)
    positions = [int(np.flatnonzero(np.all(dense == axis, axis=1))[0]) for axis in axes]
    assert positions == sorted(positions)


def test_proximate_axes_need_enough_points():
    with pytest.raises(ConfigurationError):
        find_proximate_axes(100, np.zeros(3), 5.0, np.zeros(3), refinement_points=50)
