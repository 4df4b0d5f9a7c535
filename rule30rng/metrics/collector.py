"""Bit-stream metrics collector.

Ingests drawn bits block by block to produce:
  - structured block metric dicts
  - accumulated run-level statistics
  - semantic event records

Respects InstrumentationConfig flags and block_log_frequency.  These are
sanity statistics for spotting a broken stream, not a randomness test suite.
"""

from __future__ import annotations

import math
from typing import Any, Sequence

import numpy as np

from rule30rng.config.schema import InstrumentationConfig
from rule30rng.metrics.definitions import EventType


def _longest_run(bits: np.ndarray) -> int:
    if bits.size == 0:
        return 0
    changes = np.flatnonzero(bits[1:] != bits[:-1]) + 1
    bounds = np.concatenate(([0], changes, [bits.size]))
    return int(np.diff(bounds).max())


class BitStreamCollector:
    """Collects and structures metrics for a single run."""

    def __init__(self, config: InstrumentationConfig) -> None:
        self._config = config
        self._total_bits = 0
        self._total_ones = 0
        self._blocks = 0
        # Adjacent-pair agreement, carried across block boundaries
        self._pairs = 0
        self._agreements = 0
        self._last_bit: bool | None = None
        # Bits not yet forming a full byte, and the byte histogram
        self._pending = np.zeros(0, dtype=np.bool_)
        self._byte_counts = np.zeros(256, dtype=np.int64)
        self._events: list[dict[str, Any]] = []

    # ------------------------------------------------------------------
    # Block metrics
    # ------------------------------------------------------------------

    def collect_block(self, block: int, bits: Sequence[bool]) -> dict[str, Any]:
        """Accumulate one block of bits and build its metric record.

        Returns an empty dict if block metrics are disabled or this block
        is skipped by block_log_frequency.
        """
        arr = np.asarray(bits, dtype=np.bool_)
        n = int(arr.size)
        ones = int(np.count_nonzero(arr))
        transitions = int(np.count_nonzero(arr[1:] != arr[:-1])) if n > 1 else 0

        # Accumulate run totals regardless of logging flags
        self._blocks += 1
        self._total_bits += n
        self._total_ones += ones
        if n:
            if self._last_bit is not None:
                self._pairs += 1
                self._agreements += int(self._last_bit == bool(arr[0]))
            self._pairs += n - 1
            self._agreements += (n - 1) - transitions
            self._last_bit = bool(arr[-1])
        self._accumulate_bytes(arr)

        ones_ratio = ones / n if n > 0 else 0.0

        if self._config.enable_event_log and n > 0:
            if ones in (0, n):
                self._events.append({
                    "event": EventType.CONSTANT_BLOCK.value,
                    "block": block,
                    "value": ones == n,
                })
            elif abs(ones_ratio - 0.5) > self._config.imbalance_threshold:
                self._events.append({
                    "event": EventType.IMBALANCED_BLOCK.value,
                    "block": block,
                    "ones_ratio": ones_ratio,
                })

        if not self._config.enable_block_metrics:
            return {}
        if block % self._config.block_log_frequency != 0:
            return {}

        return {
            "block": block,
            "bits": n,
            "ones": ones,
            "ones_ratio": ones_ratio,
            "transitions": transitions,
            "longest_run": _longest_run(arr),
        }

    def _accumulate_bytes(self, arr: np.ndarray) -> None:
        stream = np.concatenate((self._pending, arr))
        full = stream.size - stream.size % 8
        if full:
            packed = np.packbits(stream[:full], bitorder="little")
            self._byte_counts += np.bincount(packed, minlength=256)
        self._pending = stream[full:]

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    @property
    def events(self) -> list[dict[str, Any]]:
        """All semantic events collected so far."""
        return list(self._events)

    # ------------------------------------------------------------------
    # Run summary
    # ------------------------------------------------------------------

    def summary(self) -> dict[str, Any]:
        """Build run-level summary statistics.

        Returns an empty dict if the summary is disabled.
        """
        if not self._config.enable_summary:
            return {}

        n = self._total_bits
        total_bytes = int(self._byte_counts.sum())
        if total_bytes:
            expected = total_bytes / 256
            chi_square: float | None = float(
                ((self._byte_counts - expected) ** 2).sum() / expected
            )
        else:
            chi_square = None

        return {
            "total_bits": n,
            "total_blocks": self._blocks,
            "ones_ratio": self._total_ones / n if n > 0 else 0.0,
            "monobit_z": (2 * self._total_ones - n) / math.sqrt(n) if n > 0 else 0.0,
            "byte_chi_square": chi_square,
            "lag1_autocorrelation": (
                2 * self._agreements / self._pairs - 1 if self._pairs else None
            ),
        }
