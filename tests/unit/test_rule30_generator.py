"""Unit tests for the Rule 30 generator.

Covers:
  - construction and parameter validation
  - determinism, seed normalisation and the reference vectors
  - stride / cursor bookkeeping and manual advance
  - full and compact export/import, paired snapshots, round trips
"""

from __future__ import annotations

import numpy as np
import pytest

from rule30rng.core.errors import InvalidConfigurationError, InvalidSnapshotError
from rule30rng.generators import CompactState, Rule30Generator, State
from rule30rng.sampling import BitSampler


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _bits(gen: Rule30Generator, n: int) -> list[bool]:
    return [gen.next_bit() for _ in range(n)]


def _as_bits(pattern: str) -> list[bool]:
    return [c == "1" for c in pattern]


# Reference vectors: (seed, size, bit_spacing) -> first output bits
REFERENCE_VECTORS = {
    (12345, 255, 8): (
        "01101101011011011111011010111110"
        "10011001011001100010000001100111"
    ),
    (42, 13, 3): "1000101111101001110011010101010001011111",
    (7, 64, 1): (
        "0011001000101100001011010000000001110101"
        "1101111011101111001011111110111101101010"
    ),
}

BYTE_COUNT = 2048


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

class TestConstruction:
    def test_defaults(self) -> None:
        gen = Rule30Generator(seed=1)
        assert gen.state_length == 255
        assert gen.bit_spacing == 8
        assert gen.state_bit_capacity == 32
        assert gen.compact_state_length == 32
        assert gen.cursor == 0

    @pytest.mark.parametrize(
        "size, spacing, capacity",
        [(1, 1, 1), (10, 3, 4), (9, 3, 3), (7, 100, 1), (64, 1, 64)],
    )
    def test_capacity_is_ceiling_division(self, size: int, spacing: int, capacity: int) -> None:
        gen = Rule30Generator(seed=3, size=size, bit_spacing=spacing)
        assert gen.state_bit_capacity == capacity

    @pytest.mark.parametrize("size", [0, -1, -255])
    def test_rejects_non_positive_size(self, size: int) -> None:
        with pytest.raises(InvalidConfigurationError, match="size"):
            Rule30Generator(seed=1, size=size)

    @pytest.mark.parametrize("spacing", [0, -8])
    def test_rejects_non_positive_spacing(self, spacing: int) -> None:
        with pytest.raises(InvalidConfigurationError, match="bit_spacing"):
            Rule30Generator(seed=1, bit_spacing=spacing)

    @pytest.mark.parametrize("size", [1.5, "255", True])
    def test_rejects_non_integer_size(self, size) -> None:
        with pytest.raises(InvalidConfigurationError):
            Rule30Generator(seed=1, size=size)

    @pytest.mark.parametrize("seed", [-1, 2**64])
    def test_rejects_out_of_range_seed(self, seed: int) -> None:
        with pytest.raises(InvalidConfigurationError, match="Seed"):
            Rule30Generator(seed=seed)

    def test_accepts_largest_seed(self) -> None:
        gen = Rule30Generator(seed=2**64 - 1)
        assert gen.seed == 2**64 - 1

    def test_configuration_errors_are_value_errors(self) -> None:
        with pytest.raises(ValueError):
            Rule30Generator(seed=1, size=0)

    def test_smallest_automaton_produces_output(self) -> None:
        gen = Rule30Generator(seed=1, size=1, bit_spacing=1)
        bits = _bits(gen, 16)
        assert all(isinstance(b, bool) for b in bits)
        # A one-cell ring dies out: 1 ^ (1 | 1) == 0
        assert bits == [False] * 16

    def test_spacing_wider_than_state(self) -> None:
        gen = Rule30Generator(seed=9, size=5, bit_spacing=64)
        assert gen.state_bit_capacity == 1
        _bits(gen, 10)
        assert gen.cursor == 0

    def test_repr_mentions_parameters(self) -> None:
        text = repr(Rule30Generator(seed=12, size=31, bit_spacing=4))
        assert "seed=12" in text
        assert "size=31" in text
        assert "bit_spacing=4" in text


# ---------------------------------------------------------------------------
# Determinism and reference output
# ---------------------------------------------------------------------------

class TestDeterminism:
    @pytest.mark.parametrize("params", [(1, 255, 8), (12345, 101, 1), (2**63, 33, 5)])
    def test_same_parameters_same_stream(self, params) -> None:
        seed, size, spacing = params
        a = Rule30Generator(seed=seed, size=size, bit_spacing=spacing)
        b = Rule30Generator(seed=seed, size=size, bit_spacing=spacing)
        assert _bits(a, 3000) == _bits(b, 3000)

    def test_different_seeds_diverge(self) -> None:
        a = Rule30Generator(seed=1)
        b = Rule30Generator(seed=2)
        assert _bits(a, 256) != _bits(b, 256)

    def test_zero_seed_behaves_like_one(self) -> None:
        zero = Rule30Generator(seed=0, size=255, bit_spacing=8)
        one = Rule30Generator(seed=1, size=255, bit_spacing=8)
        assert zero.seed == 1
        assert _bits(zero, 1024) == _bits(one, 1024)

    @pytest.mark.parametrize("params", sorted(REFERENCE_VECTORS))
    def test_reference_vectors(self, params) -> None:
        seed, size, spacing = params
        expected = _as_bits(REFERENCE_VECTORS[params])
        gen = Rule30Generator(seed=seed, size=size, bit_spacing=spacing)
        assert _bits(gen, len(expected)) == expected

    def test_reference_first_32_bits(self) -> None:
        gen = Rule30Generator(seed=12345, size=255, bit_spacing=8)
        assert _bits(gen, 32) == _as_bits("01101101011011011111011010111110")

    def test_reference_bytes(self) -> None:
        sampler = BitSampler(Rule30Generator(seed=12345, size=255, bit_spacing=8))
        assert list(sampler.next_bytes(8)) == [182, 182, 111, 125, 153, 102, 4, 230]

    def test_reference_compact_state(self) -> None:
        gen = Rule30Generator(seed=12345, size=255, bit_spacing=8)
        compact = gen.export_compact_cells()
        assert compact[:4] == bytes([0xDB, 0xC0, 0x70, 0x92])
        assert compact[-1] == 0x14


# ---------------------------------------------------------------------------
# Cursor bookkeeping
# ---------------------------------------------------------------------------

class TestCursor:
    def test_cursor_walks_then_wraps(self) -> None:
        gen = Rule30Generator(seed=5, size=255, bit_spacing=8)
        _bits(gen, 31)
        assert gen.cursor == 31
        gen.next_bit()
        assert gen.cursor == 0

    def test_bits_come_from_stride_positions(self) -> None:
        gen = Rule30Generator(seed=77, size=21, bit_spacing=4)
        cells = gen.export_cells()
        # Guarded buffer: index 0 mirrors the last real cell
        guarded = [bool(cells[-1])] + [bool(c) for c in cells] + [bool(cells[0])]
        expected = [guarded[i * 4] for i in range(gen.state_bit_capacity)]
        assert _bits(gen, gen.state_bit_capacity) == expected

    def test_generation_changes_after_capacity(self) -> None:
        gen = Rule30Generator(seed=77, size=21, bit_spacing=4)
        before = gen.export_cells()
        _bits(gen, gen.state_bit_capacity - 1)
        assert np.array_equal(gen.export_cells(), before)
        gen.next_bit()
        assert not np.array_equal(gen.export_cells(), before)

    def test_manual_advance_resets_cursor(self) -> None:
        gen = Rule30Generator(seed=5)
        _bits(gen, 10)
        before = gen.export_cells()
        gen.advance()
        assert gen.cursor == 0
        assert not np.array_equal(gen.export_cells(), before)

    def test_manual_advance_matches_natural_advance(self) -> None:
        a = Rule30Generator(seed=5, size=31, bit_spacing=2)
        b = Rule30Generator(seed=5, size=31, bit_spacing=2)
        _bits(a, 3)
        a.advance()
        _bits(b, b.state_bit_capacity)
        assert _bits(a, 200) == _bits(b, 200)

    def test_rule30_update(self) -> None:
        gen = Rule30Generator(seed=1, size=9, bit_spacing=1)
        cells = [True, False, False, True, True, False, True, False, False]
        gen.import_cells(cells)
        gen.advance()
        n = len(cells)
        expected = [
            cells[(i - 1) % n] ^ (cells[i] or cells[(i + 1) % n]) for i in range(n)
        ]
        assert gen.export_cells().tolist() == expected


# ---------------------------------------------------------------------------
# Full state
# ---------------------------------------------------------------------------

class TestFullState:
    def test_export_returns_copy(self) -> None:
        gen = Rule30Generator(seed=8)
        cells = gen.export_cells()
        cells[:] = ~cells
        assert not np.array_equal(gen.export_cells(), cells)

    def test_export_into_destination(self) -> None:
        gen = Rule30Generator(seed=8, size=17)
        out = [False] * 17
        assert gen.export_cells(out) is out
        assert out == list(gen.export_state().cells)

    def test_export_rejects_wrong_destination_length(self) -> None:
        gen = Rule30Generator(seed=8, size=17)
        with pytest.raises(InvalidSnapshotError):
            gen.export_cells([False] * 16)

    def test_import_rejects_wrong_length(self) -> None:
        gen = Rule30Generator(seed=8, size=17)
        with pytest.raises(InvalidSnapshotError):
            gen.import_cells([True] * 18)

    def test_import_cells_leaves_cursor(self) -> None:
        gen = Rule30Generator(seed=8)
        _bits(gen, 5)
        gen.import_cells([True, False] * 127 + [True])
        assert gen.cursor == 5

    def test_state_is_value_record(self) -> None:
        gen = Rule30Generator(seed=8, size=11, bit_spacing=2)
        _bits(gen, 3)
        state = gen.export_state()
        assert isinstance(state, State)
        assert state.cursor == 3
        assert state.state_length == 11
        assert state == gen.export_state()
        with pytest.raises(AttributeError):
            state.cursor = 0  # type: ignore[misc]

    def test_round_trip(self) -> None:
        gen = Rule30Generator(seed=2024)
        sampler = BitSampler(gen)
        _bits(gen, 13)
        state = gen.export_state()

        first = sampler.next_bytes(BYTE_COUNT)
        gen.import_state(state)
        assert sampler.next_bytes(BYTE_COUNT) == first

    def test_round_trip_into_other_instance(self) -> None:
        source = Rule30Generator(seed=11, size=65, bit_spacing=3)
        _bits(source, 100)
        state = source.export_state()
        expected = _bits(source, 2000)

        target = Rule30Generator(seed=999, size=65, bit_spacing=3)
        target.import_state(state)
        assert _bits(target, 2000) == expected

    def test_bad_cursor_rejected_without_mutation(self) -> None:
        gen = Rule30Generator(seed=8)
        before = gen.export_state()
        other = Rule30Generator(seed=9).export_state()
        for cursor in (-1, gen.state_bit_capacity, True):
            with pytest.raises(InvalidSnapshotError):
                gen.import_state(State(cells=other.cells, cursor=cursor))
        assert gen.export_state() == before

    def test_bad_cells_rejected_without_mutation(self) -> None:
        gen = Rule30Generator(seed=8)
        _bits(gen, 4)
        before = gen.export_state()
        with pytest.raises(InvalidSnapshotError):
            gen.import_state(State(cells=(True,) * 254, cursor=0))
        assert gen.export_state() == before


# ---------------------------------------------------------------------------
# Compact state
# ---------------------------------------------------------------------------

class TestCompactState:
    @pytest.mark.parametrize("size", [1, 7, 8, 9, 13, 63, 64, 65, 100, 255])
    def test_pack_unpack_symmetry(self, size: int) -> None:
        gen = Rule30Generator(seed=99, size=size, bit_spacing=3)
        data = gen.export_compact_cells()
        assert len(data) == -(-size // 8)

        other = Rule30Generator(seed=5, size=size, bit_spacing=3)
        other.import_compact_cells(data)
        assert np.array_equal(other.export_cells(), gen.export_cells())
        assert other.export_compact_cells() == data

    @pytest.mark.parametrize("size", [1, 7, 9, 13, 100, 255])
    def test_padding_bits_are_zero(self, size: int) -> None:
        gen = Rule30Generator(seed=31337, size=size, bit_spacing=1)
        for _ in range(20):
            data = gen.export_compact_cells()
            assert data[-1] >> (size % 8) == 0
            gen.advance()

    def test_lsb_first_packing(self) -> None:
        gen = Rule30Generator(seed=1, size=10, bit_spacing=1)
        cells = [True, False, False, False, False, False, False, True, False, True]
        gen.import_cells(cells)
        assert gen.export_compact_cells() == bytes([0b1000_0001, 0b0000_0010])

    def test_padding_bits_ignored_on_import(self) -> None:
        gen = Rule30Generator(seed=4, size=255)
        data = bytearray(gen.export_compact_cells())
        data[-1] |= 0x80
        gen.import_compact_cells(data)
        assert gen.export_compact_cells()[-1] & 0x80 == 0

    def test_export_into_destination(self) -> None:
        gen = Rule30Generator(seed=4, size=20)
        out = bytearray(3)
        assert gen.export_compact_cells(out) is out
        assert bytes(out) == gen.export_compact_cells()

    def test_wrong_lengths_rejected(self) -> None:
        gen = Rule30Generator(seed=4, size=20)
        with pytest.raises(InvalidSnapshotError):
            gen.export_compact_cells(bytearray(4))
        with pytest.raises(InvalidSnapshotError):
            gen.import_compact_cells(b"\x00\x00")
        with pytest.raises(InvalidSnapshotError):
            gen.import_compact_cells(3)

    def test_round_trip(self) -> None:
        gen = Rule30Generator(seed=2024)
        sampler = BitSampler(gen)
        _bits(gen, 21)
        state = gen.export_compact_state()
        assert isinstance(state, CompactState)
        assert state.cursor == 21

        first = sampler.next_bytes(BYTE_COUNT)
        gen.import_compact_state(state)
        assert sampler.next_bytes(BYTE_COUNT) == first

    def test_compact_and_full_resume_identically(self) -> None:
        gen = Rule30Generator(seed=606, size=101, bit_spacing=5)
        _bits(gen, 7)
        full = gen.export_state()
        compact = gen.export_compact_state()

        baseline = _bits(gen, 1500)
        gen.import_state(full)
        from_full = _bits(gen, 1500)
        gen.import_compact_state(compact)
        from_compact = _bits(gen, 1500)

        assert from_full == baseline
        assert from_compact == baseline

    def test_bad_cursor_rejected_without_mutation(self) -> None:
        gen = Rule30Generator(seed=8)
        before = gen.export_compact_state()
        data = Rule30Generator(seed=9).export_compact_cells()
        with pytest.raises(InvalidSnapshotError):
            gen.import_compact_state(CompactState(data=data, cursor=32))
        assert gen.export_compact_state() == before
