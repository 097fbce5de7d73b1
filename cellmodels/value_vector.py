"""A store holding, per record, one scalar value and one fixed-length vector."""

from __future__ import annotations

import numpy as np

from .record_store import FileMode, RecordStore


class ValueVectorDatabase(RecordStore):
    """Appends records of a scalar ``value`` and a ``vector`` of fixed length.

    After :meth:`read_state`, ``value_vector[0]`` and ``data_vector`` hold the
    values of the record read.
    """

    def __init__(self, filename, vector_size: int, mode: FileMode = FileMode.READONLY) -> None:
        super().__init__(filename, mode)
        self.maximum_vector_size = int(vector_size)
        self.value_vector = np.zeros(1)
        self.data_vector = np.zeros(self.maximum_vector_size)
        if self.mode is FileMode.REPLACE:
            self.register_datasets()
        elif self.mode is FileMode.READWRITE and self.current_number_of_records() == 0:
            if "value" not in self.extendable_dataset_names:
                self.register_datasets()

    def register_datasets(self) -> None:
        """Create the extendable ``value`` and ``vector`` datasets."""
        self.register_extendable_dataset("value", 1, float)
        self.register_extendable_dataset("vector", self.maximum_vector_size, float)

    def current_number_of_records(self) -> int:
        """Return the number of records saved so far."""
        if "value" not in self.extendable_dataset_names:
            return 0
        return self.dataset_dimensions("value")

    def write_state(self, value: float, data) -> None:
        """Append ``data`` and ``value`` as a new record."""
        self.extend_dataset("vector", data)
        self.value_vector[0] = value
        self.extend_dataset("value", self.value_vector)

    def read_state(self, record: int = -1) -> tuple[float, np.ndarray]:
        """Load a record (the last by default) and return ``(value, vector)``."""
        vector = self.read_dataset("vector", record)
        if len(vector) != self.maximum_vector_size:
            raise ValueError("stored vectors do not match the declared vector size")
        self.value_vector = self.read_dataset("value", record)
        self.data_vector = vector
        return float(self.value_vector[0]), self.data_vector