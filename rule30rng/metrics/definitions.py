"""Metric names and minimal schemas for bit-stream runs.

Defines three categories:
  - Block metrics: one record per fixed-size block of drawn bits
  - Summary metrics: statistics over the whole run
  - Event types: semantic events (imbalanced or constant blocks)

All schemas are plain dicts describing expected keys and types,
used for documentation and optional runtime validation.
"""

from __future__ import annotations

from enum import Enum


# ---------------------------------------------------------------------------
# Block metric keys (one record per block)
# ---------------------------------------------------------------------------

BLOCK_METRIC_KEYS: list[str] = [
    "block",
    "bits",
    "ones",
    "ones_ratio",
    "transitions",
    "longest_run",
]

BLOCK_METRIC_SCHEMA: dict[str, str] = {
    "block": "int",
    "bits": "int",
    "ones": "int",
    "ones_ratio": "float",
    "transitions": "int",
    "longest_run": "int",
}


# ---------------------------------------------------------------------------
# Summary metric keys (one record per run)
# ---------------------------------------------------------------------------

SUMMARY_METRIC_KEYS: list[str] = [
    "total_bits",
    "total_blocks",
    "ones_ratio",
    "monobit_z",
    "byte_chi_square",
    "lag1_autocorrelation",
]

SUMMARY_METRIC_SCHEMA: dict[str, str] = {
    "total_bits": "int",
    "total_blocks": "int",
    "ones_ratio": "float",
    "monobit_z": "float",
    "byte_chi_square": "float | None",
    "lag1_autocorrelation": "float | None",
}


# ---------------------------------------------------------------------------
# Semantic event types
# ---------------------------------------------------------------------------

class EventType(Enum):
    """Semantic events emitted while drawing bits."""

    IMBALANCED_BLOCK = "imbalanced_block"
    CONSTANT_BLOCK = "constant_block"


EVENT_SCHEMAS: dict[str, dict[str, str]] = {
    EventType.IMBALANCED_BLOCK.value: {
        "event": "str",
        "block": "int",
        "ones_ratio": "float",
    },
    EventType.CONSTANT_BLOCK.value: {
        "event": "str",
        "block": "int",
        "value": "bool",
    },
}
