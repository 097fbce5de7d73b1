"""Record stores for Voronoi-model and vertex-model simulation states."""

from __future__ import annotations

import io
from typing import Any, Protocol

import numpy as np

from .record_store import FileMode, RecordStore


class _Box(Protocol):
    def box_dims(self) -> tuple[float, float, float, float]: ...

    def set_general(self, x11: float, x12: float, x21: float, x22: float) -> None: ...


class VoronoiState(Protocol):
    """What a Voronoi-model state has to provide to be written or read."""

    current_time: float
    box: _Box
    cell_type: Any
    cell_positions: Any
    velocities: Any
    tag_to_idx: Any


class VertexState(Protocol):
    """What a vertex-model state has to provide to be written."""

    current_time: float
    box: _Box
    cell_type: Any
    cell_positions: Any
    vertex_positions: Any
    vertex_neighbors: Any
    vertex_cell_neighbors: Any
    tag_to_idx: Any
    tag_to_idx_vertex: Any
    idx_to_tag_vertex: Any

    def compute_cell_positions(self) -> None: ...


def _in_tag_order(values, tag_to_idx, count: int) -> np.ndarray:
    order = np.asarray(tag_to_idx, dtype=int)[:count]
    return np.asarray(values)[order]


def _reject_record(record: int) -> None:
    if record >= 0:
        raise io.UnsupportedOperation("overwriting specific records is not supported")


class SimpleVoronoiDatabase(RecordStore):
    """Time, box, cell types, positions and velocities of ``n`` Voronoi cells per record."""

    def __init__(self, n: int, filename="temp.nc", mode: FileMode = FileMode.READONLY) -> None:
        super().__init__(filename, mode)
        self.n = int(n)
        if self.mode is FileMode.REPLACE or (
            self.mode is FileMode.READWRITE and "time" not in self.extendable_dataset_names
        ):
            self._register_datasets()

    def _register_datasets(self) -> None:
        self.register_extendable_dataset("time", 1, float)
        self.register_extendable_dataset("boxMatrix", 4, float)
        self.register_extendable_dataset("type", self.n, int)
        self.register_extendable_dataset("position", 2 * self.n, float)
        self.register_extendable_dataset("velocity", 2 * self.n, float)

    def current_number_of_records(self) -> int:
        """Return the number of frames saved so far."""
        if "time" not in self.extendable_dataset_names:
            return 0
        return self.dataset_dimensions("time")

    def write_state(self, state: VoronoiState, time: float = -1.0, record: int = -1) -> None:
        """Append the state; a negative ``time`` means the state's current time."""
        _reject_record(record)
        if time < 0:
            time = state.current_time
        self.extend_dataset("time", [time])
        self.extend_dataset("boxMatrix", list(state.box.box_dims()))
        self.extend_dataset("type", _in_tag_order(state.cell_type, state.tag_to_idx, self.n))
        self.extend_dataset("position", _in_tag_order(state.cell_positions, state.tag_to_idx, self.n))
        self.extend_dataset("velocity", _in_tag_order(state.velocities, state.tag_to_idx, self.n))

    def read_state(self, state: VoronoiState, record: int = -1) -> float:
        """Load a record (the last by default) into ``state`` and return its time."""
        time = float(self.read_dataset("time", record)[0])
        state.box.set_general(*(float(v) for v in self.read_dataset("boxMatrix", record)))
        state.cell_type = self.read_dataset("type", record).astype(int)
        state.cell_positions = self.read_dataset("position", record).reshape(self.n, 2)
        state.velocities = self.read_dataset("velocity", record).reshape(self.n, 2)
        return time


class SimpleVertexDatabase(RecordStore):
    """Per-record vertex-model data for ``n`` vertices and ``n // 2`` cells."""

    def __init__(self, n: int, filename="temp.nc", mode: FileMode = FileMode.READONLY) -> None:
        super().__init__(filename, mode)
        self.n = int(n)
        self.n_cells = self.n // 2
        if self.mode is FileMode.REPLACE or (
            self.mode is FileMode.READWRITE and "time" not in self.extendable_dataset_names
        ):
            self._register_datasets()

    def _register_datasets(self) -> None:
        self.register_extendable_dataset("time", 1, float)
        self.register_extendable_dataset("boxMatrix", 4, float)
        self.register_extendable_dataset("cellType", self.n_cells, int)
        self.register_extendable_dataset("vertexPosition", 2 * self.n, float)
        self.register_extendable_dataset("cellPosition", 2 * self.n_cells, float)
        self.register_extendable_dataset("vertexVertexNeighbors", 3 * self.n, float)
        self.register_extendable_dataset("vertexCellNeighbors", 3 * self.n, float)

    def current_number_of_records(self) -> int:
        """Return the number of frames saved so far."""
        if "time" not in self.extendable_dataset_names:
            return 0
        return self.dataset_dimensions("time")

    def write_state(self, state: VertexState, time: float = -1.0, record: int = -1) -> None:
        """Append the state; a negative ``time`` means the state's current time."""
        _reject_record(record)
        if time < 0:
            time = state.current_time
        self.extend_dataset("time", [time])
        self.extend_dataset("boxMatrix", list(state.box.box_dims()))
        self.extend_dataset("cellType", _in_tag_order(state.cell_type, state.tag_to_idx, self.n_cells))
        self.extend_dataset(
            "vertexPosition", _in_tag_order(state.vertex_positions, state.tag_to_idx_vertex, self.n)
        )
        state.compute_cell_positions()
        self.extend_dataset(
            "cellPosition", _in_tag_order(state.cell_positions, state.tag_to_idx, self.n_cells)
        )

        idx_to_tag = np.asarray(state.idx_to_tag_vertex, dtype=int)
        vertex_neighbors = np.asarray(state.vertex_neighbors, dtype=int).reshape(-1, 3)
        cell_neighbors = np.asarray(state.vertex_cell_neighbors, dtype=int).reshape(-1, 3)
        order = np.asarray(state.tag_to_idx_vertex, dtype=int)[: self.n]
        self.extend_dataset("vertexVertexNeighbors", idx_to_tag[vertex_neighbors[order]])
        self.extend_dataset("vertexCellNeighbors", idx_to_tag[cell_neighbors[order]])