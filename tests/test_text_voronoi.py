import io
from dataclasses import dataclass, field

import pytest

from cellmodels.record_store import FileMode
from cellmodels.text_voronoi import TextVoronoiDatabase


@dataclass
class FakeBox:
    dims: tuple = (3.0, 0.0, 0.0, 3.0)

    def box_dims(self):
        return self.dims


@dataclass
class FakeState:
    cell_positions: list
    cell_type: list
    tag_to_idx: list
    current_time: float = 1.5
    box: FakeBox = field(default_factory=FakeBox)

    def number_of_degrees_of_freedom(self):
        return len(self.tag_to_idx)


def make_state():
    return FakeState(
        cell_positions=[[0.25, 0.5], [0.75, 1.0]],
        cell_type=[0, 1],
        tag_to_idx=[1, 0],
    )


def read_lines(path):
    return path.read_text(encoding="utf-8").splitlines()


def test_frame_layout(tmp_path):
    path = tmp_path / "frames.txt"
    with TextVoronoiDatabase(path, FileMode.REPLACE) as db:
        db.write_state(make_state())
    lines = read_lines(path)
    assert lines[0] == "N, time, box:"
    assert lines[1].split("\t") == ["2", "1.5", "3", "0", "0", "3"]
    assert len(lines) == 4


def test_cells_written_in_tag_order(tmp_path):
    path = tmp_path / "frames.txt"
    with TextVoronoiDatabase(path, FileMode.REPLACE) as db:
        db.write_state(make_state())
    lines = read_lines(path)
    assert lines[2].split("\t") == ["0.75", "1", "1"]
    assert lines[3].split("\t") == ["0.25", "0.5", "0"]


def test_explicit_time_overrides_state_time(tmp_path):
    path = tmp_path / "frames.txt"
    with TextVoronoiDatabase(path, FileMode.REPLACE) as db:
        db.write_state(make_state(), time=7.0)
    assert read_lines(path)[1].split("\t")[1] == "7"


def test_readwrite_appends(tmp_path):
    path = tmp_path / "frames.txt"
    for _ in range(2):
        with TextVoronoiDatabase(path, FileMode.READWRITE) as db:
            db.write_state(make_state())
    assert read_lines(path).count("N, time, box:") == 2


def test_replace_truncates(tmp_path):
    path = tmp_path / "frames.txt"
    with TextVoronoiDatabase(path, FileMode.READWRITE) as db:
        db.write_state(make_state())
        db.write_state(make_state())
    with TextVoronoiDatabase(path, FileMode.REPLACE) as db:
        db.write_state(make_state())
    assert read_lines(path).count("N, time, box:") == 1


def test_writing_a_specific_record_is_rejected(tmp_path):
    with TextVoronoiDatabase(tmp_path / "f.txt", FileMode.REPLACE) as db:
        with pytest.raises(io.UnsupportedOperation):
            db.write_state(make_state(), record=0)


def test_reading_is_rejected(tmp_path):
    path = tmp_path / "f.txt"
    path.write_text("", encoding="utf-8")
    with TextVoronoiDatabase(path, FileMode.READONLY) as db:
        with pytest.raises(io.UnsupportedOperation):
            db.read_state(make_state(), 0)


def test_writing_in_readonly_mode_is_rejected(tmp_path):
    path = tmp_path / "f.txt"
    path.write_text("", encoding="utf-8")
    with TextVoronoiDatabase(path, FileMode.READONLY) as db:
        with pytest.raises(io.UnsupportedOperation):
            db.write_state(make_state())