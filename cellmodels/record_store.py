"""A single-file store of named datasets, each a growing table of fixed-width records.

Two kinds of dataset are kept:

* header datasets: a small one-dimensional array written once;
* extendable datasets: a two-dimensional array with a fixed number of
  columns and an unlimited number of rows, one row appended per record.

Values are stored as 32-bit integers, 32-bit floats or 64-bit floats.
"""

from __future__ import annotations

import sqlite3
from enum import Enum
from pathlib import Path

import numpy as np

_HEADER = "header"
_EXTENDABLE = "extendable"

_ALLOWED = {("i", 4), ("f", 4), ("f", 8)}


class FileMode(Enum):
    """How a store file is to be accessed."""

    READONLY = "readonly"
    READWRITE = "readwrite"
    REPLACE = "replace"


def _storage_dtype(dtype) -> np.dtype:
    if dtype is int:
        dt = np.dtype(np.int32)
    elif dtype is float:
        dt = np.dtype(np.float64)
    else:
        dt = np.dtype(dtype)
    if (dt.kind, dt.itemsize) not in _ALLOWED:
        raise TypeError(f"unsupported dataset type {dt}; use int32, float32 or float64")
    return dt.newbyteorder("<")


def _inferred_dtype(array: np.ndarray) -> np.dtype:
    if array.dtype.kind in "iub":
        return _storage_dtype(np.int32)
    if array.dtype.kind == "f" and array.dtype.itemsize == 4:
        return _storage_dtype(np.float32)
    return _storage_dtype(np.float64)


class RecordStore:
    """Named header and extendable datasets kept in one file.

    ``READONLY`` requires an existing file, ``READWRITE`` opens or creates
    one, and ``REPLACE`` discards any existing file. Parent directories are
    created as needed when writing.
    """

    def __init__(self, filename, mode: FileMode = FileMode.READONLY) -> None:
        self.filename = str(filename)
        self.mode = FileMode(mode)
        path = Path(self.filename)
        if self.mode is FileMode.READONLY:
            if not path.is_file():
                raise FileNotFoundError(f"trying to read a file that does not exist: {self.filename}")
            uri = path.resolve().as_uri() + "?mode=ro"
            self._connection = sqlite3.connect(uri, uri=True)
        else:
            path.parent.mkdir(parents=True, exist_ok=True)
            if self.mode is FileMode.REPLACE and path.exists():
                path.unlink()
            self._connection = sqlite3.connect(self.filename)
            with self._connection:
                self._connection.execute(
                    "CREATE TABLE IF NOT EXISTS datasets ("
                    "name TEXT PRIMARY KEY, kind TEXT NOT NULL, "
                    "dtype TEXT NOT NULL, columns INTEGER NOT NULL)"
                )
                self._connection.execute(
                    "CREATE TABLE IF NOT EXISTS records ("
                    "name TEXT NOT NULL, row INTEGER NOT NULL, data BLOB NOT NULL, "
                    "PRIMARY KEY (name, row))"
                )
        self.extendable_dataset_names: set[str] = {
            name
            for (name,) in self._connection.execute(
                "SELECT name FROM datasets WHERE kind = ?", (_EXTENDABLE,)
            )
        }

    def _require_writable(self) -> None:
        if self.mode is FileMode.READONLY:
            raise PermissionError("cannot write to a store opened read-only")

    def _describe(self, name: str) -> tuple[str, np.dtype, int]:
        row = self._connection.execute(
            "SELECT kind, dtype, columns FROM datasets WHERE name = ?", (name,)
        ).fetchone()
        if row is None:
            raise KeyError(f"no dataset named {name!r}")
        kind, dtype, columns = row
        return kind, np.dtype(dtype), columns

    def _create(self, name: str, kind: str, dtype: np.dtype, columns: int) -> None:
        exists = self._connection.execute(
            "SELECT 1 FROM datasets WHERE name = ?", (name,)
        ).fetchone()
        if exists:
            raise ValueError(f"a dataset named {name!r} already exists")
        self._connection.execute(
            "INSERT INTO datasets (name, kind, dtype, columns) VALUES (?, ?, ?, ?)",
            (name, kind, dtype.str, columns),
        )

    def _row_count(self, name: str) -> int:
        (count,) = self._connection.execute(
            "SELECT COUNT(*) FROM records WHERE name = ?", (name,)
        ).fetchone()
        return count

    def add_header_data(self, name: str, data) -> None:
        """Store a small one-dimensional array under ``name``."""
        self._require_writable()
        array = np.ravel(np.asarray(data))
        dtype = _inferred_dtype(array)
        values = np.asarray(array, dtype=dtype)
        with self._connection:
            self._create(name, _HEADER, dtype, len(values))
            self._connection.execute(
                "INSERT INTO records (name, row, data) VALUES (?, 0, ?)",
                (name, values.tobytes()),
            )

    def read_header_data(self, name: str) -> np.ndarray:
        """Return the header array stored under ``name``."""
        kind, dtype, _ = self._describe(name)
        if kind != _HEADER:
            raise ValueError(f"dataset {name!r} is not header data")
        (blob,) = self._connection.execute(
            "SELECT data FROM records WHERE name = ? AND row = 0", (name,)
        ).fetchone()
        return np.frombuffer(blob, dtype=dtype).astype(dtype.newbyteorder("="))

    def register_extendable_dataset(self, name: str, maximum_size_per_record: int, dtype=float) -> None:
        """Create an empty dataset whose records each hold ``maximum_size_per_record`` values."""
        self._require_writable()
        if maximum_size_per_record < 0:
            raise ValueError("record size cannot be negative")
        storage = _storage_dtype(dtype)
        with self._connection:
            self._create(name, _EXTENDABLE, storage, int(maximum_size_per_record))
        self.extendable_dataset_names.add(name)

    def extend_dataset(self, name: str, data) -> None:
        """Append ``data`` as a new record of the named dataset."""
        self._require_writable()
        kind, dtype, columns = self._describe(name)
        if kind != _EXTENDABLE:
            raise ValueError(f"dataset {name!r} cannot be extended")
        array = np.ravel(np.asarray(data))
        if array.size != columns:
            raise ValueError(
                f"trying to write a record of {array.size} values to {name!r}, "
                f"which holds {columns} per record"
            )
        values = np.asarray(array, dtype=dtype)
        with self._connection:
            row = self._row_count(name)
            self._connection.execute(
                "INSERT INTO records (name, row, data) VALUES (?, ?, ?)",
                (name, row, values.tobytes()),
            )

    def dataset_dimensions(self, name: str) -> int:
        """Return the leading dimension: records for extendable data, length for headers."""
        kind, _, columns = self._describe(name)
        if kind == _HEADER:
            return columns
        return self._row_count(name)

    def read_dataset(self, name: str, record: int = -1) -> np.ndarray:
        """Return one record of the named dataset; a negative record means the last one."""
        kind, dtype, _ = self._describe(name)
        if kind != _EXTENDABLE:
            raise ValueError(f"dataset {name!r} is not two dimensional")
        rows = self._row_count(name)
        index = rows - 1 if record < 0 else record
        if index < 0 or index >= rows:
            raise IndexError(f"trying to read past the end of dataset {name!r}")
        (blob,) = self._connection.execute(
            "SELECT data FROM records WHERE name = ? AND row = ?", (name, index)
        ).fetchone()
        return np.frombuffer(blob, dtype=dtype).astype(dtype.newbyteorder("="))

    def close(self) -> None:
        """Close the underlying file."""
        if self._connection is not None:
            self._connection.close()
            self._connection = None

    def __enter__(self) -> "RecordStore":
        return self

    def __exit__(self, *args) -> None:
        self.close()