"""Rule 30 generator — a bit stream read off an elementary cellular automaton.

The automaton is a ring of ``state_length`` boolean cells.  It is held in two
NumPy buffers of ``state_length + 2`` cells: index 0 and the last index are
guard cells mirroring the opposite real boundary, so the ring can be swept
as a plain slice with no wrap-around branches.  One buffer holds the current
generation; each advance writes the next generation into the other buffer
and flips ownership.

Output bits are read from the current buffer at every ``bit_spacing``-th
position (guard cell 0 included).  Once every stride position of a
generation has been read, the automaton advances.

Identical ``(seed, size, bit_spacing)`` triples give identical streams on
every platform: nothing here depends on float formatting, word size or the
host's random source.
"""

from __future__ import annotations

from typing import Any, Iterable

import numpy as np

from rule30rng.core.errors import InvalidConfigurationError, InvalidSnapshotError
from rule30rng.core.seeding import SEED_BITS, normalize_seed
from rule30rng.generators.base import BitGenerator
from rule30rng.generators.state import CompactState, State

DEFAULT_SIZE = 255
DEFAULT_BIT_SPACING = 8


def _ceil_div(dividend: int, divisor: int) -> int:
    return -(-dividend // divisor)


def _check_positive(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise InvalidConfigurationError(
            f"{name} must be an integer, got {type(value).__name__}."
        )
    if value <= 0:
        raise InvalidConfigurationError(f"{name} must be positive, got {value}.")
    return int(value)


class Rule30Generator(BitGenerator):
    """Deterministic bit generator driven by Rule 30.

    Args:
        seed: Unsigned 64-bit seed.  Completely determines the stream.
            A seed of 0 is replaced by 1, since an empty automaton stays
            empty forever.
        size: Number of real cells (``state_length``).  Must be positive.
            Odd sizes are recommended: the alternating 0101... pattern is a
            fixed point of the rule on even rings.
        bit_spacing: Stride between output positions within one generation.
            Larger values give less correlated consecutive bits and advance
            the automaton less often per generation read.

    Raises:
        InvalidConfigurationError: if ``size`` or ``bit_spacing`` is not a
            positive integer, or ``seed`` is outside ``[0, 2**64)``.

    Not safe for concurrent use; give each thread its own instance.
    """

    def __init__(
        self,
        seed: int,
        size: int = DEFAULT_SIZE,
        bit_spacing: int = DEFAULT_BIT_SPACING,
    ) -> None:
        self._state_length = _check_positive("size", size)
        self._bit_spacing = _check_positive("bit_spacing", bit_spacing)
        self._seed = normalize_seed(seed)

        self._state_bit_capacity = _ceil_div(self._state_length, self._bit_spacing)
        self._cursor = 0

        width = self._state_length + 2
        self._buffers = [
            np.zeros(width, dtype=np.bool_),
            np.zeros(width, dtype=np.bool_),
        ]
        self._current = 0

        # Bit i of the seed goes to real cell i
        count = min(self._state_length, SEED_BITS)
        seed_bits = [(self._seed >> i) & 1 for i in range(count)]
        self._buffers[0][1:count + 1] = np.array(seed_bits, dtype=np.bool_)
        self._refresh_guards(self._buffers[0])

        # Let the seed propagate before anything is read
        for _ in range(self._state_length * 2):
            self._advance()

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def seed(self) -> int:
        """The normalised seed (never 0)."""
        return self._seed

    @property
    def state_length(self) -> int:
        return self._state_length

    @property
    def bit_spacing(self) -> int:
        return self._bit_spacing

    @property
    def state_bit_capacity(self) -> int:
        """Bits read from one generation before the automaton advances."""
        return self._state_bit_capacity

    @property
    def compact_state_length(self) -> int:
        """Bytes used by the compact state form."""
        return _ceil_div(self._state_length, 8)

    @property
    def cursor(self) -> int:
        """Stride position that supplies the next bit."""
        return self._cursor

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(seed={self._seed}, size={self._state_length}, "
            f"bit_spacing={self._bit_spacing})"
        )

    # ------------------------------------------------------------------
    # Automaton
    # ------------------------------------------------------------------

    def _refresh_guards(self, buf: np.ndarray) -> None:
        buf[0] = buf[self._state_length]
        buf[self._state_length + 1] = buf[1]

    def _advance(self) -> None:
        """Compute the next generation into the idle buffer and swap."""
        cur = self._buffers[self._current]
        nxt = self._buffers[1 - self._current]

        self._refresh_guards(cur)
        # next = left XOR (mid OR right), read entirely from the old generation
        np.bitwise_xor(cur[:-2], cur[1:-1] | cur[2:], out=nxt[1:-1])

        self._current = 1 - self._current
        self._refresh_guards(nxt)

    def advance(self) -> None:
        """Advance one generation now and restart reading at cursor 0.

        Never required for correctness; useful to break away from the
        automatic cadence.
        """
        self._cursor = 0
        self._advance()

    def next_bit(self) -> bool:
        bit = bool(self._buffers[self._current][self._cursor * self._bit_spacing])

        self._cursor += 1
        if self._cursor >= self._state_bit_capacity:
            self._cursor = 0
            self._advance()

        return bit

    # ------------------------------------------------------------------
    # Validation helpers
    # ------------------------------------------------------------------

    def _real_cells(self) -> np.ndarray:
        return self._buffers[self._current][1:self._state_length + 1]

    def _coerce_cells(self, cells: Iterable[Any]) -> np.ndarray:
        arr = np.array(cells, dtype=np.bool_)
        if arr.ndim != 1 or arr.shape[0] != self._state_length:
            raise InvalidSnapshotError(
                f"State must hold exactly {self._state_length} cells, "
                f"got shape {arr.shape}."
            )
        return arr

    def _coerce_compact(self, data: Any) -> np.ndarray:
        if isinstance(data, (int, str)):
            raise InvalidSnapshotError(
                f"Compact state must be bytes-like, got {type(data).__name__}."
            )
        raw = np.frombuffer(bytes(data), dtype=np.uint8)
        if raw.shape[0] != self.compact_state_length:
            raise InvalidSnapshotError(
                f"Compact state must be exactly {self.compact_state_length} bytes, "
                f"got {raw.shape[0]}."
            )
        return np.unpackbits(
            raw, count=self._state_length, bitorder="little"
        ).astype(np.bool_)

    def _check_cursor(self, cursor: Any) -> int:
        if isinstance(cursor, bool) or not isinstance(cursor, (int, np.integer)):
            raise InvalidSnapshotError(
                f"Cursor must be an integer, got {type(cursor).__name__}."
            )
        if not 0 <= cursor < self._state_bit_capacity:
            raise InvalidSnapshotError(
                f"Cursor must be in [0, {self._state_bit_capacity}), got {cursor}."
            )
        return int(cursor)

    def _write_cells(self, cells: np.ndarray) -> None:
        cur = self._buffers[self._current]
        cur[1:self._state_length + 1] = cells
        self._refresh_guards(cur)

    # ------------------------------------------------------------------
    # Full state
    # ------------------------------------------------------------------

    def export_cells(self, out: Any = None) -> Any:
        """Copy the real cells out.

        With no *out*, returns a new bool array.  Otherwise *out* (a list or
        array of exactly ``state_length`` items) is filled and returned.
        """
        cells = self._real_cells()
        if out is None:
            return cells.copy()
        if len(out) != self._state_length:
            raise InvalidSnapshotError(
                f"Destination must hold exactly {self._state_length} cells, "
                f"got {len(out)}."
            )
        out[:] = cells.tolist()
        return out

    def import_cells(self, cells: Iterable[Any]) -> None:
        """Overwrite the real cells.  The cursor is left where it is."""
        self._write_cells(self._coerce_cells(cells))

    def export_state(self) -> State:
        """Snapshot the cells and cursor together."""
        return State(cells=tuple(self._real_cells().tolist()), cursor=self._cursor)

    def import_state(self, state: State) -> None:
        """Restore a :class:`State`.  Validates fully before mutating."""
        cells = self._coerce_cells(state.cells)
        cursor = self._check_cursor(state.cursor)
        self._write_cells(cells)
        self._cursor = cursor

    # ------------------------------------------------------------------
    # Compact state
    # ------------------------------------------------------------------

    def export_compact_cells(self, out: Any = None) -> Any:
        """Pack the real cells LSB-first into ``compact_state_length`` bytes.

        Unused high bits of the last byte are zero.  With no *out*, returns
        ``bytes``; otherwise fills the writable buffer *out* and returns it.
        """
        packed = np.packbits(self._real_cells(), bitorder="little").tobytes()
        if out is None:
            return packed
        if len(out) != self.compact_state_length:
            raise InvalidSnapshotError(
                f"Destination must be exactly {self.compact_state_length} bytes, "
                f"got {len(out)}."
            )
        out[:] = packed
        return out

    def import_compact_cells(self, data: Any) -> None:
        """Inverse of :meth:`export_compact_cells`.  Padding bits are ignored."""
        self._write_cells(self._coerce_compact(data))

    def export_compact_state(self) -> CompactState:
        return CompactState(data=self.export_compact_cells(), cursor=self._cursor)

    def import_compact_state(self, state: CompactState) -> None:
        cells = self._coerce_compact(state.data)
        cursor = self._check_cursor(state.cursor)
        self._write_cells(cells)
        self._cursor = cursor
