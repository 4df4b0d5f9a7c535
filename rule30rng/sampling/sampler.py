"""Numeric sampling on top of the single-bit contract.

Everything here is assembled from repeated ``next_bit()`` calls; the sampler
never peeks at a generator's internal state, so it works unchanged over any
:class:`~rule30rng.generators.base.BitGenerator`.

Bit order: the *i*-th bit drawn becomes bit *i* of the result (LSB first).
"""

from __future__ import annotations

from rule30rng.core.errors import SamplingExhaustedError
from rule30rng.generators.base import BitGenerator

WORD_BITS = 64
DOUBLE_MANTISSA_BITS = 53
SINGLE_MANTISSA_BITS = 24
DEFAULT_MAX_ATTEMPTS = 8192


class BitSampler:
    """Draws integers, bytes and floats from a bit generator.

    Bounded integers use rejection sampling on the minimal number of bits
    (``max_value.bit_length()``).  A draw that stays out of range for
    ``max_attempts`` tries raises :class:`SamplingExhaustedError` instead of
    looping forever.
    """

    def __init__(
        self,
        source: BitGenerator,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {max_attempts}.")
        self._source = source
        self._max_attempts = max_attempts

    @property
    def source(self) -> BitGenerator:
        return self._source

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    # ------------------------------------------------------------------
    # Raw bits
    # ------------------------------------------------------------------

    def next_bit(self) -> bool:
        return self._source.next_bit()

    def next_bits(self, bit_count: int) -> int:
        """Return an unsigned integer whose low *bit_count* bits are random."""
        if not 0 <= bit_count <= WORD_BITS:
            raise ValueError(f"bit_count must be in [0, {WORD_BITS}], got {bit_count}.")
        num = 0
        for i in range(bit_count):
            if self._source.next_bit():
                num |= 1 << i
        return num

    # ------------------------------------------------------------------
    # Integers
    # ------------------------------------------------------------------

    def next_uint64(self) -> int:
        """Any value in ``[0, 2**64)``."""
        return self.next_bits(WORD_BITS)

    def next_int64(self) -> int:
        """Non-negative signed 64-bit value, ``[0, 2**63)``."""
        return self.next_bits(WORD_BITS - 1)

    def next_int32(self) -> int:
        """Non-negative signed 32-bit value, ``[0, 2**31)``."""
        return self.next_bits(31)

    def next_below(self, max_value: int) -> int:
        """Return a value in ``[0, max_value)``.

        Raises ValueError unless ``0 < max_value < 2**64``, and
        SamplingExhaustedError when the retry ceiling is reached.
        """
        if max_value <= 0:
            raise ValueError(f"max_value must be positive, got {max_value}.")
        if max_value >= 1 << WORD_BITS:
            raise ValueError(f"max_value must be below 2**{WORD_BITS}, got {max_value}.")

        bit_count = max_value.bit_length()
        for _ in range(self._max_attempts):
            candidate = self.next_bits(bit_count)
            if candidate < max_value:
                return candidate

        raise SamplingExhaustedError(
            f"No value below {max_value} after {self._max_attempts} attempts."
        )

    def next_range(self, min_value: int, max_value: int) -> int:
        """Return a value in ``[min_value, max_value)``; equal bounds give *min_value*."""
        if max_value < min_value:
            raise ValueError(
                f"max_value must not be smaller than min_value ({max_value} < {min_value})."
            )
        if max_value == min_value:
            return min_value
        return min_value + self.next_below(max_value - min_value)

    # ------------------------------------------------------------------
    # Bytes
    # ------------------------------------------------------------------

    def next_byte(self) -> int:
        return self.next_bits(8)

    def next_bytes(self, count: int) -> bytes:
        if count < 0:
            raise ValueError(f"count must be non-negative, got {count}.")
        return bytes(self.next_byte() for _ in range(count))

    def fill_bytes(self, buffer: bytearray | memoryview) -> None:
        """Overwrite every byte of a writable *buffer* in order."""
        for i in range(len(buffer)):
            buffer[i] = self.next_byte()

    # ------------------------------------------------------------------
    # Floats
    # ------------------------------------------------------------------

    def next_double(self) -> float:
        """Uniform double in ``[0, 1)`` with 53 random bits."""
        return self.next_bits(DOUBLE_MANTISSA_BITS) / (1 << DOUBLE_MANTISSA_BITS)

    def next_single(self) -> float:
        """Uniform value in ``[0, 1)`` with 24 random bits (exact in float32)."""
        return self.next_bits(SINGLE_MANTISSA_BITS) / (1 << SINGLE_MANTISSA_BITS)
