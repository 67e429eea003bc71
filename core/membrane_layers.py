"""
Membrane layer materialization: plane point grids for visualization
"""

import math

import numpy as np

from .data_models import MembraneCandidate


def create_membrane_layer(
    point: np.ndarray,
    normal_vector: np.ndarray,
    density: float,
    radius: float,
) -> np.ndarray:
    """
    Grid points of one membrane plane within `radius` of `point`

    The plane equation is solved for the coordinate with the largest normal
    component; the other two coordinates run over a square grid of spacing
    `density` centered on `point`.

    Returns:
        np.ndarray: shape (n, 3), ordered by the first grid coordinate
    """
    point = np.asarray(point, dtype=float)
    normal = np.asarray(normal_vector, dtype=float)
    axis = int(np.argmax(np.abs(normal)))
    if normal[axis] == 0:
        raise ValueError("normal_vector must not be zero")
    u, v = [i for i in range(3) if i != axis]

    half = int(math.ceil(radius / density))
    offsets = np.arange(-half, half + 1, dtype=float) * density
    grid_u, grid_v = np.meshgrid(point[u] + offsets, point[v] + offsets, indexing="ij")

    d = -float(np.dot(normal, point))
    out = np.empty((grid_u.size, 3), dtype=float)
    out[:, u] = grid_u.ravel()
    out[:, v] = grid_v.ravel()
    out[:, axis] = -(d + out[:, u] * normal[u] + out[:, v] * normal[v]) / normal[axis]

    diff = out - point
    keep = np.sum(diff * diff, axis=1) < radius * radius
    return out[keep]


def create_membrane_layers(
    membrane: MembraneCandidate,
    extent: float,
    density: float,
) -> tuple[np.ndarray, tuple[int, int]]:
    """
    Both membrane planes as one point array

    Returns:
        (points, layer_sizes): points of layer 1 followed by layer 2
    """
    layer1 = create_membrane_layer(membrane.plane_point1, membrane.normal_vector, density, extent)
    layer2 = create_membrane_layer(membrane.plane_point2, membrane.normal_vector, density, extent)
    return np.vstack([layer1, layer2]), (len(layer1), len(layer2))
