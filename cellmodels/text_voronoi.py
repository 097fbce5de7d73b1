"""Plain-text output of Voronoi-model states, written one frame after another.

Each frame is a line ``N, time, box:``, then a tab-separated line with the
number of cells, the time and the four box matrix entries, then one line per
cell with its position and type. Writing into the middle of a file and
reading back are not supported.
"""

from __future__ import annotations

import io
from typing import Protocol, Sequence

from .record_store import FileMode


class _Box(Protocol):
    def box_dims(self) -> tuple[float, float, float, float]: ...


class CellState(Protocol):
    """What a Voronoi-model state has to provide to be written."""

    current_time: float
    box: _Box
    cell_positions: Sequence[Sequence[float]]
    cell_type: Sequence[int]
    tag_to_idx: Sequence[int]

    def number_of_degrees_of_freedom(self) -> int: ...


def _fmt(value: float) -> str:
    return format(float(value), "g")


class TextVoronoiDatabase:
    """Sequential tab-delimited frames of cell positions and types."""

    def __init__(self, filename="temp.txt", mode: FileMode = FileMode.READWRITE) -> None:
        self.filename = str(filename)
        self.mode = FileMode(mode)
        self._input = None
        self._output = None
        if self.mode is FileMode.READONLY:
            self._input = open(self.filename, encoding="utf-8")
        elif self.mode is FileMode.REPLACE:
            self._output = open(self.filename, "w", encoding="utf-8")
        else:
            self._output = open(self.filename, "a", encoding="utf-8")

    def write_state(self, state: CellState, time: float = -1.0, record: int = -1) -> None:
        """Append a frame; a negative ``time`` means the state's current time."""
        if record != -1:
            raise io.UnsupportedOperation("writing to the middle of text files is not supported")
        if self._output is None:
            raise io.UnsupportedOperation("database is not open for writing")
        n = int(state.number_of_degrees_of_freedom())
        if time < 0:
            time = state.current_time
        x11, x12, x21, x22 = state.box.box_dims()

        lines = ["N, time, box:\n",
                 "\t".join([str(n), _fmt(time), _fmt(x11), _fmt(x12), _fmt(x21), _fmt(x22)]) + "\n"]
        positions = state.cell_positions
        types = state.cell_type
        for tag in range(n):
            idx = state.tag_to_idx[tag]
            x, y = positions[idx][0], positions[idx][1]
            lines.append(f"{_fmt(x)}\t{_fmt(y)}\t{int(types[idx])}\n")
        self._output.writelines(lines)
        self._output.flush()

    def read_state(self, state: CellState, record: int, geometry: bool = True) -> None:
        """Reject reading: the text format only supports sequential writing.

        Always raises :class:`io.UnsupportedOperation`; the message says
        whether the file was opened for reading at all.
        """
        if self._input is None:
            reason = f"database {self.filename!r} is not open for reading"
        else:
            reason = (f"reading record {record} from text database "
                      f"{self.filename!r} is not supported")
        raise io.UnsupportedOperation(reason)

    def close(self) -> None:
        """Close the underlying file."""
        for handle in (self._input, self._output):
            if handle is not None:
                handle.close()
        self._input = None
        self._output = None

    def __enter__(self) -> "TextVoronoiDatabase":
        return self

    def __exit__(self, *args) -> None:
        self.close()