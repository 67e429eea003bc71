import numpy as np
import pytest

from core.data_models import HydrophobicityStats, MembraneCandidate, Topology
from core.membrane_layers import create_membrane_layer, create_membrane_layers


def test_layer_points_lie_on_plane_within_radius():
    point = np.array([1.0, 2.0, 3.0])
    normal = np.array([0.3, -0.2, 0.9])
    layer = create_membrane_layer(point, normal, density=1.5, radius=10.0)

    assert layer.shape[1] == 3
    assert len(layer) > 0
    assert np.allclose((layer - point) @ normal, 0.0)
    assert np.all(np.linalg.norm(layer - point, axis=1) < 10.0)


def test_layer_is_a_regular_grid():
    point = np.array([0.0, 0.0, 5.0])
    layer = create_membrane_layer(point, np.array([0.0, 0.0, 1.0]), density=2.0, radius=6.0)

    assert np.allclose(layer[:, 2], 5.0)
    assert np.allclose(np.mod(layer[:, :2], 2.0), 0.0)
    # (x, y) on the even grid with x^2 + y^2 < 36
    expected = sum(
        1
        for x in range(-6, 7, 2)
        for y in range(-6, 7, 2)
        if x * x + y * y < 36
    )
    assert len(layer) == expected


def test_layer_solves_for_dominant_normal_component():
    # plane x = 4: solving for z would divide by zero
    point = np.array([4.0, 1.0, -1.0])
    layer = create_membrane_layer(point, np.array([1.0, 0.0, 0.0]), density=1.0, radius=3.0)

    assert len(layer) > 0
    assert np.allclose(layer[:, 0], 4.0)


def test_layer_rejects_zero_normal():
    with pytest.raises(ValueError):
        create_membrane_layer(np.zeros(3), np.zeros(3), density=1.0, radius=5.0)


def test_two_layers_are_parallel():
    centroid = np.zeros(3)
    normal = np.array([0.0, 1.0, 1.0])
    unit = normal / np.linalg.norm(normal)
    membrane = MembraneCandidate(
        plane_point1=-12.0 * unit,
        plane_point2=12.0 * unit,
        normal_vector=normal,
        axis_point=-30.0 * unit,
        centroid=centroid,
        stats=HydrophobicityStats.of(10, 2),
        qmax=0.01,
    )
    points, (n1, n2) = create_membrane_layers(membrane, extent=25.0, density=2.0)

    assert len(points) == n1 + n2
    topology = Topology(membrane=points, candidate=membrane, layer_sizes=(n1, n2))
    first, second = topology.layers()
    assert np.allclose(first @ unit, -12.0)
    assert np.allclose(second @ unit, 12.0)
    assert membrane.thickness == pytest.approx(24.0)
