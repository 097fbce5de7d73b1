"""Periodic and non-periodic 2D Delaunay neighbour lists.

Neighbour lists are returned in counterclockwise order around each point.
The periodic triangulation builds the nine-sheeted covering of the
domain, the central copy and its eight surrounding images, and
triangulates it without periodicity. Each neighbour is then reported by
the index of the original point it is an image of.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np
from scipy.spatial import Delaunay, QhullError

_SHIFTS = np.array(
    [
        (0.0, 0.0),
        (-1.0, -1.0),
        (-1.0, 0.0),
        (-1.0, 1.0),
        (0.0, -1.0),
        (0.0, 1.0),
        (1.0, -1.0),
        (1.0, 0.0),
        (1.0, 1.0),
    ]
)


def _as_points(points) -> np.ndarray:
    return np.asarray(points, dtype=float).reshape(-1, 2)


def _triangulate(points: np.ndarray) -> Delaunay:
    try:
        return Delaunay(points)
    except (QhullError, ValueError) as exc:
        raise ValueError(f"points cannot be triangulated: {exc}") from exc


def _ordered_neighbors(points: np.ndarray, indptr: np.ndarray, indices: np.ndarray,
                       vertex: int) -> np.ndarray:
    neighbors = indices[indptr[vertex]:indptr[vertex + 1]]
    disp = points[neighbors] - points[vertex]
    order = np.argsort(np.arctan2(disp[:, 1], disp[:, 0]), kind="stable")
    return neighbors[order]


def local_triangulation(points) -> list[int]:
    """Return the Delaunay neighbours of ``points[0]`` in a non-periodic domain.

    The result holds indices into ``points``, in counterclockwise order.
    Raises ValueError if the points cannot be triangulated or if the first
    point is not a vertex of the triangulation.
    """
    pts = _as_points(points)
    if len(pts) < 3:
        raise ValueError("at least three points are needed for a triangulation")
    tri = _triangulate(pts)
    indptr, indices = tri.vertex_neighbor_vertices
    neighbors = _ordered_neighbors(pts, indptr, indices, 0)
    if len(neighbors) == 0:
        raise ValueError("the first point is not a vertex of the triangulation")
    return [int(i) for i in neighbors]


def periodic_triangulation(points, bxx: float, bxy: float, byx: float,
                           byy: float) -> list[list[int]]:
    """Return the Delaunay neighbours of every point in a periodic domain.

    The domain is the box matrix ``((bxx, bxy), (byx, byy))``: a point with
    fractional coordinates ``v`` in the unit square lies at ``M @ v``.
    Points outside the box are wrapped into it first. Entry ``i`` of the
    result lists the neighbours of point ``i`` in counterclockwise order;
    a point may appear more than once when several of its images are
    neighbours.
    """
    pts = _as_points(points)
    count = len(pts)
    if count == 0:
        raise ValueError("at least one point is required")
    box = np.array([[bxx, bxy], [byx, byy]], dtype=float)
    if np.linalg.det(box) == 0:
        raise ValueError("the box matrix is singular")

    fractional = pts @ np.linalg.inv(box).T
    fractional -= np.floor(fractional)
    covering = (fractional[None, :, :] + _SHIFTS[:, None, :]).reshape(-1, 2)
    real = covering @ box.T

    tri = _triangulate(real)
    indptr, indices = tri.vertex_neighbor_vertices
    return [
        [int(j) % count for j in _ordered_neighbors(real, indptr, indices, i)]
        for i in range(count)
    ]