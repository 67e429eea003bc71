"""
Geometry helpers: centroid/extent estimation and axis sampling on a sphere
"""

import math

import numpy as np
from scipy.spatial import KDTree

from .exceptions import ConfigurationError, InvalidInputError

# Safety factor applied to the bounding-sphere radius
EXTENT_SCALE = 1.2

# Growth schedule of the proximal selection radius
PROXIMAL_START_OFFSET = 4.0
PROXIMAL_INCREMENT = 0.2


def centroid_and_extent(coords: np.ndarray) -> tuple[np.ndarray, float]:
    """
    Centroid and scaled bounding radius of a point set

    Args:
        coords: Coordinates, shape (n, 3)

    Returns:
        (centroid, extent): extent is EXTENT_SCALE times the largest
        centroid distance
    """
    if len(coords) == 0:
        raise InvalidInputError("Cannot compute centroid of an empty point set")
    centroid = coords.mean(axis=0)
    diff = coords - centroid
    radius_sq = float(np.max(np.sum(diff * diff, axis=1)))
    return centroid, EXTENT_SCALE * math.sqrt(radius_sq)


def generate_sphere_points(count: int, center: np.ndarray, radius: float) -> np.ndarray:
    """
    Deterministic spiral of points on a sphere

    Points run from the -y pole (k=1) to the +y pole (k=count) with the
    azimuth advanced by 3.6 / sqrt(count * (1 - h^2)) per step.

    Returns:
        np.ndarray: shape (count, 3)
    """
    if count < 2:
        raise ConfigurationError(f"At least 2 sphere points are required: {count}")

    points = np.empty((count, 3), dtype=float)
    old_phi = 0.0
    for k in range(1, count + 1):
        h = -1 + 2 * (k - 1) / (count - 1)
        theta = math.acos(h)
        if k == 1 or k == count:
            phi = 0.0
        else:
            phi = (old_phi + 3.6 / math.sqrt(count * (1 - h * h))) % (2 * math.pi)

        points[k - 1] = (
            radius * math.sin(phi) * math.sin(theta) + center[0],
            radius * math.cos(theta) + center[1],
            radius * math.cos(phi) * math.sin(theta) + center[2],
        )
        old_phi = phi

    return points


def find_proximate_axes(
    count: int,
    center: np.ndarray,
    radius: float,
    reference: np.ndarray,
    refinement_points: int = 30000,
) -> np.ndarray:
    """
    Dense sphere points close to a reference point

    A sphere of `refinement_points` points is sampled and the points within
    2 * radius / count + j of `reference` are kept, with j growing from 4 in
    steps of 0.2 until at least `count` points qualify.

    Args:
        count: Minimum number of axes to return
        center: Sphere center (structure centroid)
        radius: Sphere radius (extent)
        reference: Point the selection radius is measured from
        refinement_points: Size of the dense sphere

    Returns:
        np.ndarray: Selected points in sphere order, shape (m, 3), m >= count
    """
    if refinement_points < count:
        raise ConfigurationError(
            f"Cannot select {count} axes from {refinement_points} refinement points"
        )

    points = generate_sphere_points(refinement_points, center, radius)
    tree = KDTree(points)
    reference = np.asarray(reference, dtype=float)

    j = PROXIMAL_START_OFFSET
    while True:
        d = 2 * radius / count + j
        if tree.query_ball_point(reference, d, return_length=True) >= count:
            break
        j += PROXIMAL_INCREMENT

    indices = tree.query_ball_point(reference, d, return_sorted=True)
    return points[np.asarray(indices, dtype=int)]
