"""Snapshot records for the Rule 30 generator.

A snapshot is the automaton's real cells paired with the extraction cursor.
Both forms are plain immutable values: they hold copies, never views into
the live buffers.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class State:
    """Full snapshot: one bool per real cell plus the cursor."""

    cells: tuple[bool, ...]
    cursor: int

    @property
    def state_length(self) -> int:
        return len(self.cells)


@dataclass(frozen=True, slots=True)
class CompactState:
    """Compact snapshot: real cells packed LSB-first into bytes, plus the cursor.

    ``data`` has ``ceil(state_length / 8)`` bytes; unused high bits of the
    final byte are zero.
    """

    data: bytes
    cursor: int
