"""Saving states at log-spaced frames, with a separate start offset per database."""

from __future__ import annotations

from typing import Any, Protocol

from .log_spaced import LogSpacedIntegers

NO_FRAME = 2**63 - 1
"""The value of ``next_frame_to_save`` when no database awaits a frame."""


class StateDatabase(Protocol):
    def write_state(self, state: Any) -> None: ...


class LogEquilibrationStateWriter:
    """Writes a state to each database at its own log-spaced sequence of frames.

    A database added with offset ``s`` saves at frames ``s``, then ``s`` plus
    each successive log-spaced integer.
    """

    def __init__(self, exponent: float = 0.1) -> None:
        self.exponent = exponent
        self.databases: list[StateDatabase] = []
        self.save_offsets: list[int] = []
        self.log_spaces: list[LogSpacedIntegers] = []
        self.next_frames: list[int] = []
        self.next_frame_to_save = NO_FRAME

    def add_database(self, database: StateDatabase, first_frame_to_save: int) -> None:
        """Register a database whose first save happens at ``first_frame_to_save``."""
        self.databases.append(database)
        self.log_spaces.append(LogSpacedIntegers(0, self.exponent))
        self.save_offsets.append(first_frame_to_save)
        self.next_frames.append(first_frame_to_save)
        self.identify_next_frame()

    def identify_next_frame(self) -> int:
        """Update and return the earliest frame at which any database saves."""
        self.next_frame_to_save = min(self.next_frames, default=NO_FRAME)
        return self.next_frame_to_save

    def write_state(self, state: Any, frame: int) -> None:
        """Write ``state`` to every database that is due to save at ``frame``."""
        for i, database in enumerate(self.databases):
            if frame == self.next_frames[i]:
                database.write_state(state)
                self.log_spaces[i].update()
                self.next_frames[i] = self.save_offsets[i] + self.log_spaces[i].next_save
        self.identify_next_frame()