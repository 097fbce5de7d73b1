"""Dynamical measures of 2D particle motion relative to a reference configuration."""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np
from scipy.special import j0

from .structural import PeriodicBox


def _as_points(points) -> np.ndarray:
    return np.asarray(points, dtype=float).reshape(-1, 2)


def _local_bond_order(box: PeriodicBox, positions: np.ndarray, index: int,
                      neighbor_list: Sequence[int], n: int) -> complex:
    indices = np.asarray(neighbor_list, dtype=int)
    if len(indices) == 0:
        return 0j
    disp = np.asarray(box.min_dist(positions[indices], positions[index]), dtype=float)
    theta = np.arctan2(disp[:, 1], disp[:, 0])
    return complex(np.exp(1j * n * theta).mean())


class DynamicalFeatures:
    """Displacement-based dynamical features measured against initial positions.

    Only the first ``n`` particles are analysed, where ``n`` is the number of
    initial positions scaled by ``fraction_analyzed`` (when below one).
    """

    def __init__(self, initial_positions, box: PeriodicBox, fraction_analyzed: float = 1.0) -> None:
        self.box = box
        self.initial_positions = _as_points(initial_positions).copy()
        count = len(self.initial_positions)
        if fraction_analyzed < 1:
            count = math.floor(count * fraction_analyzed)
        self.n = count
        self.cage_neighbors: list[list[int]] | None = None
        self._initial_conjugate_bond_order: np.ndarray | None = None

    def set_cage_neighbors(self, neighbors: Sequence[Sequence[int]]) -> None:
        """Record the neighbours forming each analysed particle's initial cage."""
        if len(neighbors) < self.n:
            raise ValueError("a neighbour list is required for every analysed particle")
        self.cage_neighbors = [list(map(int, neighbors[i])) for i in range(self.n)]
        self._initial_conjugate_bond_order = None

    def _require_cages(self) -> list[list[int]]:
        if self.cage_neighbors is None:
            raise ValueError("cage neighbours have not been set")
        return self.cage_neighbors

    def _all_displacements(self, current_positions) -> np.ndarray:
        current = _as_points(current_positions)
        if len(current) != len(self.initial_positions):
            raise ValueError("current positions must match the initial positions in number")
        return np.asarray(self.box.min_dist(current, self.initial_positions), dtype=float)

    def _displacements(self, current_positions) -> np.ndarray:
        return self._all_displacements(current_positions)[: self.n]

    def _cage_relative_displacements(self, current_positions) -> np.ndarray:
        cages = self._require_cages()
        disp = self._all_displacements(current_positions)
        result = np.empty((self.n, 2))
        for i, neighbor_list in enumerate(cages):
            if not neighbor_list:
                raise ValueError(f"particle {i} has no cage neighbours")
            result[i] = disp[i] - disp[neighbor_list].mean(axis=0)
        return result

    def _mean_square(self, displacements: np.ndarray) -> float:
        return float(np.einsum("ij,ij->i", displacements, displacements).sum() / self.n)

    def _angular_average_sisf(self, displacements: np.ndarray, k: float) -> float:
        kr = k * np.hypot(displacements[:, 0], displacements[:, 1])
        return float(j0(kr).sum() / self.n)

    def _fs_squared(self, displacements: np.ndarray, k: float) -> float:
        total = float(self.n)
        i, j = np.triu_indices(len(displacements), k=1)
        if len(i):
            rel = displacements[i] - displacements[j]
            total += 2.0 * float(j0(k * np.hypot(rel[:, 0], rel[:, 1])).sum())
        return total / (self.n * self.n)

    def msd(self, current_positions) -> float:
        """Mean squared displacement from the initial positions."""
        return self._mean_square(self._displacements(current_positions))

    def cage_relative_msd(self, current_positions) -> float:
        """Mean squared displacement relative to the mean motion of each cage."""
        return self._mean_square(self._cage_relative_displacements(current_positions))

    def overlap_function(self, current_positions, cutoff: float = 0.5) -> float:
        """Fraction of particles that moved less than ``cutoff``."""
        current = _as_points(current_positions)[: self.n]
        disp = np.asarray(self.box.min_dist(self.initial_positions[: self.n], current), dtype=float)
        moved = np.hypot(disp[:, 0], disp[:, 1])
        return float(np.count_nonzero(moved < cutoff) / self.n)

    def sisf(self, current_positions, k: float = 6.28319) -> float:
        """Angularly averaged self-intermediate scattering function."""
        return self._angular_average_sisf(self._displacements(current_positions), k)

    def cage_relative_sisf(self, current_positions, k: float = 6.28319) -> float:
        """Cage-relative, angularly averaged self-intermediate scattering function."""
        return self._angular_average_sisf(self._cage_relative_displacements(current_positions), k)

    def fs_chi4(self, current_positions, k: float = 6.28319) -> tuple[float, float]:
        """Return ``(F_s, chi_4)`` for the current positions."""
        disp = self._displacements(current_positions)
        mean_fs = self._angular_average_sisf(disp, k)
        fs_squared = self._fs_squared(disp, k)
        return mean_fs, self.n * (fs_squared - mean_fs * mean_fs)

    def cage_relative_fs_chi4(self, current_positions, k: float = 6.28319) -> tuple[float, float]:
        """Return cage-relative ``(F_s, chi_4)`` for the current positions."""
        disp = self._cage_relative_displacements(current_positions)
        mean_fs = self._angular_average_sisf(disp, k)
        fs_squared = self._fs_squared(disp, k)
        return mean_fs, self.n * (fs_squared - mean_fs * mean_fs)

    def orientational_correlation_function(self, current_positions,
                                           current_neighbors: Sequence[Sequence[int]],
                                           n: int = 6) -> complex:
        """Un-normalised bond-orientational correlation: sum of psi_n(t) * conj(psi_n(0)).

        The initial bond order is computed from the cage neighbours on first use.
        """
        cages = self._require_cages()
        if self._initial_conjugate_bond_order is None:
            self._initial_conjugate_bond_order = np.array(
                [_local_bond_order(self.box, self.initial_positions, i, cages[i], n)
                 for i in range(self.n)],
                dtype=complex,
            ).conj()
        current = _as_points(current_positions)
        if len(current_neighbors) < self.n:
            raise ValueError("a neighbour list is required for every analysed particle")
        total = 0j
        for i in range(self.n):
            psi = _local_bond_order(self.box, current, i, current_neighbors[i], n)
            total += psi * self._initial_conjugate_bond_order[i]
        return total