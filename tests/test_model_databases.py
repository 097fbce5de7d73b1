import io
from dataclasses import dataclass, field

import numpy as np
import pytest

from cellmodels.model_databases import SimpleVertexDatabase, SimpleVoronoiDatabase
from cellmodels.record_store import FileMode


@dataclass
class FakeBox:
    dims: tuple = (2.0, 0.0, 0.0, 2.0)

    def box_dims(self):
        return self.dims

    def set_general(self, x11, x12, x21, x22):
        self.dims = (x11, x12, x21, x22)


@dataclass
class VoronoiState:
    cell_positions: np.ndarray
    velocities: np.ndarray
    cell_type: np.ndarray
    tag_to_idx: list
    current_time: float = 0.5
    box: FakeBox = field(default_factory=FakeBox)


def voronoi_state():
    return VoronoiState(
        cell_positions=np.array([[0.1, 0.2], [0.3, 0.4], [0.5, 0.6]]),
        velocities=np.array([[1.0, -1.0], [2.0, -2.0], [3.0, -3.0]]),
        cell_type=np.array([7, 8, 9]),
        tag_to_idx=[2, 0, 1],
    )


def empty_voronoi_state():
    return VoronoiState(
        cell_positions=np.zeros((3, 2)),
        velocities=np.zeros((3, 2)),
        cell_type=np.zeros(3, dtype=int),
        tag_to_idx=[0, 1, 2],
        box=FakeBox((0.0, 0.0, 0.0, 0.0)),
    )


def test_voronoi_round_trip_in_tag_order(tmp_path):
    path = tmp_path / "vor.db"
    original = voronoi_state()
    with SimpleVoronoiDatabase(3, path, FileMode.REPLACE) as db:
        db.write_state(original)
    loaded = empty_voronoi_state()
    with SimpleVoronoiDatabase(3, path, FileMode.READONLY) as db:
        time = db.read_state(loaded)
    order = original.tag_to_idx
    assert time == original.current_time
    assert loaded.box.dims == original.box.dims
    np.testing.assert_array_equal(loaded.cell_type, original.cell_type[order])
    np.testing.assert_allclose(loaded.cell_positions, original.cell_positions[order])
    np.testing.assert_allclose(loaded.velocities, original.velocities[order])


def test_voronoi_records_count_and_explicit_time(tmp_path):
    path = tmp_path / "vor.db"
    with SimpleVoronoiDatabase(3, path, FileMode.REPLACE) as db:
        assert db.current_number_of_records() == 0
        db.write_state(voronoi_state())
        db.write_state(voronoi_state(), time=4.0)
        assert db.current_number_of_records() == 2
        assert db.read_state(empty_voronoi_state(), 1) == 4.0
        assert db.read_state(empty_voronoi_state(), 0) == voronoi_state().current_time


def test_voronoi_readwrite_keeps_existing_records(tmp_path):
    path = tmp_path / "vor.db"
    with SimpleVoronoiDatabase(3, path, FileMode.READWRITE) as db:
        db.write_state(voronoi_state())
    with SimpleVoronoiDatabase(3, path, FileMode.READWRITE) as db:
        db.write_state(voronoi_state())
        assert db.current_number_of_records() == 2


def test_voronoi_rejects_specific_record(tmp_path):
    with SimpleVoronoiDatabase(3, tmp_path / "v.db", FileMode.REPLACE) as db:
        with pytest.raises(io.UnsupportedOperation):
            db.write_state(voronoi_state(), record=0)


def test_voronoi_readonly_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        SimpleVoronoiDatabase(3, tmp_path / "missing.db", FileMode.READONLY)


def test_voronoi_read_past_end(tmp_path):
    with SimpleVoronoiDatabase(3, tmp_path / "v.db", FileMode.REPLACE) as db:
        db.write_state(voronoi_state())
        with pytest.raises(IndexError):
            db.read_state(empty_voronoi_state(), 3)


@dataclass
class VertexState:
    vertex_positions: np.ndarray
    vertex_neighbors: np.ndarray
    vertex_cell_neighbors: np.ndarray
    tag_to_idx_vertex: list
    idx_to_tag_vertex: list
    cell_type: np.ndarray
    tag_to_idx: list
    computed_cells: np.ndarray
    cell_positions: np.ndarray = None
    current_time: float = 2.0
    box: FakeBox = field(default_factory=FakeBox)
    computed: bool = False

    def compute_cell_positions(self):
        self.computed = True
        self.cell_positions = self.computed_cells


def vertex_state(tags):
    inverse = [tags.index(i) for i in range(len(tags))]
    return VertexState(
        vertex_positions=np.arange(8, dtype=float).reshape(4, 2),
        vertex_neighbors=np.array([[1, 2, 3], [0, 2, 3], [0, 1, 3], [0, 1, 2]]),
        vertex_cell_neighbors=np.array([[0, 1, 0], [1, 0, 1], [0, 0, 1], [1, 1, 0]]),
        tag_to_idx_vertex=tags,
        idx_to_tag_vertex=inverse,
        cell_type=np.array([4, 5]),
        tag_to_idx=[1, 0],
        computed_cells=np.array([[0.5, 0.5], [1.5, 1.5]]),
    )


def test_vertex_positions_and_cells_in_tag_order(tmp_path):
    state = vertex_state([3, 2, 1, 0])
    with SimpleVertexDatabase(4, tmp_path / "vx.db", FileMode.REPLACE) as db:
        db.write_state(state)
        positions = db.read_dataset("vertexPosition").reshape(4, 2)
        cells = db.read_dataset("cellPosition").reshape(2, 2)
        types = db.read_dataset("cellType")
        time = db.read_dataset("time")[0]
    assert state.computed
    assert time == state.current_time
    np.testing.assert_allclose(positions, state.vertex_positions[[3, 2, 1, 0]])
    np.testing.assert_allclose(cells, state.computed_cells[[1, 0]])
    np.testing.assert_array_equal(types, state.cell_type[[1, 0]])


def test_vertex_neighbors_with_identity_tags(tmp_path):
    state = vertex_state([0, 1, 2, 3])
    with SimpleVertexDatabase(4, tmp_path / "vx.db", FileMode.REPLACE) as db:
        db.write_state(state)
        vv = db.read_dataset("vertexVertexNeighbors")
        vc = db.read_dataset("vertexCellNeighbors")
        box = db.read_dataset("boxMatrix")
    np.testing.assert_array_equal(vv, state.vertex_neighbors.ravel())
    np.testing.assert_array_equal(vc, state.vertex_cell_neighbors.ravel())
    np.testing.assert_allclose(box, state.box.dims)


def test_vertex_record_count_and_rejection(tmp_path):
    with SimpleVertexDatabase(4, tmp_path / "vx.db", FileMode.REPLACE) as db:
        db.write_state(vertex_state([0, 1, 2, 3]))
        db.write_state(vertex_state([0, 1, 2, 3]))
        assert db.current_number_of_records() == 2
        with pytest.raises(io.UnsupportedOperation):
            db.write_state(vertex_state([0, 1, 2, 3]), record=1)
        assert db.n_cells == 2