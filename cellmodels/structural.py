"""Structural measures of 2D point patterns in a periodic domain."""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Protocol

import numpy as np


class PeriodicBox(Protocol):
    """A periodic domain.

    ``min_dist(a, b)`` returns the minimum-image displacement ``a - b`` for
    arrays of shape ``(..., 2)``; ``box_dims()`` returns ``(x11, x12, x21, x22)``.
    """

    def min_dist(self, a: np.ndarray, b: np.ndarray) -> np.ndarray: ...

    def box_dims(self) -> tuple[float, float, float, float]: ...


def _as_points(points) -> np.ndarray:
    pts = np.asarray(points, dtype=float).reshape(-1, 2)
    if len(pts) == 0:
        raise ValueError("at least one point is required")
    return pts


class StructuralFeatures:
    """Radial distribution, structure factor and bond order of 2D point patterns."""

    def __init__(self, box: PeriodicBox | None = None) -> None:
        self.box = box

    def _require_box(self) -> PeriodicBox:
        if self.box is None:
            raise ValueError("no periodic box has been set")
        return self.box

    def radial_distribution_function(self, points, bin_width: float = 0.1) -> np.ndarray:
        """Return g(r) as an array of rows ``(bin centre, g)`` out to half the box length."""
        box = self._require_box()
        pts = _as_points(points)
        n = len(pts)
        length = box.box_dims()[0]
        total_bins = math.floor(0.5 * length / bin_width)

        counts = np.zeros(total_bins)
        i, j = np.triu_indices(n, k=1)
        if len(i) and total_bins > 0:
            disp = np.asarray(box.min_dist(pts[i], pts[j]), dtype=float)
            distance = np.hypot(disp[:, 0], disp[:, 1])
            bins = np.floor(distance / bin_width).astype(int)
            bins = bins[bins < total_bins]
            counts = np.bincount(bins, minlength=total_bins).astype(float)

        edges = np.arange(total_bins + 1) * bin_width
        annulus = math.pi * (edges[1:] ** 2 - edges[:-1] ** 2)
        g = (2.0 * counts / n) / annulus
        centres = (np.arange(total_bins) + 0.5) * bin_width
        return np.column_stack((centres, g))

    def structure_factor(self, points, int_k_max: float = 1.0, dk: float = 0.5) -> np.ndarray:
        """Return the isotropically averaged S(k) as rows ``(k, S)``.

        S is evaluated on a lattice of wavevectors with spacing 2*pi/L and
        averaged over annuli of width ``dk`` times that spacing.
        """
        box = self._require_box()
        pts = _as_points(points)
        n = len(pts)
        length = box.box_dims()[0]
        delta_k = 2.0 * math.pi / length
        lattice_size = math.floor(length * int_k_max)
        if lattice_size < 1:
            raise ValueError("int_k_max is too small for this box")

        ks = np.arange(lattice_size) * delta_k
        kx, ky = np.meshgrid(ks, ks, indexing="ij")
        phase = pts[:, 0, None, None] * kx + pts[:, 1, None, None] * ky
        rho = np.exp(1j * phase).sum(axis=0)
        s_k = np.abs(rho) ** 2 / n
        k_norm = np.hypot(kx, ky)

        bin_width = delta_k * dk
        k_max = ks[-1]
        rows = []
        r_min = delta_k - 0.5 * bin_width
        while r_min < k_max - bin_width:
            r_max = r_min + bin_width
            mask = (k_norm >= r_min) & (k_norm < r_max)
            if mask.any():
                rows.append((r_min + 0.5 * bin_width, float(s_k[mask].mean())))
            r_min += bin_width
        return np.array(rows, dtype=float).reshape(-1, 2)

    def bond_order_parameter(self, points, neighbors: Sequence[Sequence[int]], n: int = 6) -> complex:
        """Return the mean n-fold bond order parameter psi_n of the pattern.

        ``neighbors[i]`` lists the indices of the neighbours of point ``i``.
        """
        box = self._require_box()
        pts = _as_points(points)
        if len(neighbors) != len(pts):
            raise ValueError("one neighbour list is required per point")
        total = 0j
        for point, neighbor_list in zip(pts, neighbors):
            indices = np.asarray(neighbor_list, dtype=int)
            if len(indices) == 0:
                continue
            disp = np.asarray(box.min_dist(pts[indices], point), dtype=float)
            theta = np.arctan2(disp[:, 1], disp[:, 0])
            total += complex(np.exp(1j * n * theta).mean())
        return total / len(pts)