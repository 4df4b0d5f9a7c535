"""Sampling runner — draws a configured number of bits block by block.

Uses BitStreamCollector for structured metrics and RunLogger for artifacts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import numpy as np

from rule30rng.config.defaults import build_sampler
from rule30rng.config.schema import RunConfig
from rule30rng.core.seeding import fresh_seed
from rule30rng.metrics.collector import BitStreamCollector
from rule30rng.runner.run_logger import RunLogger


@dataclass
class SampleRunResult:
    """What one sampling run produced."""

    config: RunConfig
    preview: bytes
    summary: dict[str, Any] = field(default_factory=dict)
    events: list[dict[str, Any]] = field(default_factory=list)
    blocks_logged: int = 0


def resolve_seed(config: RunConfig) -> RunConfig:
    """Pin a fresh seed into a Rule 30 config that has none.

    The returned config reproduces the run exactly; platform configs are
    returned unchanged.
    """
    gen = config.generator
    if gen.kind != "rule30" or gen.seed is not None:
        return config
    pinned = gen.model_copy(update={"seed": fresh_seed()})
    return config.model_copy(update={"generator": pinned})


def run_sampling(
    config: RunConfig,
    *,
    logger: RunLogger | None = None,
    preview_bytes: int = 16,
) -> SampleRunResult:
    """Draw ``config.num_bits`` bits, collecting metrics as we go.

    The first ``preview_bytes`` bytes of the stream (LSB-first, the same
    packing as ``BitSampler.next_byte``) are returned for display.
    """
    config = resolve_seed(config)
    sampler = build_sampler(config)
    collector = BitStreamCollector(config.instrumentation)

    if logger is not None:
        logger.write_config(config.model_dump())

    block_size = config.instrumentation.block_size
    preview_bits: list[bool] = []
    blocks_logged = 0
    events_logged = 0
    remaining = config.num_bits
    block = 0

    while remaining > 0:
        n = min(block_size, remaining)
        bits = [sampler.next_bit() for _ in range(n)]
        remaining -= n

        if len(preview_bits) < preview_bytes * 8:
            preview_bits.extend(bits[: preview_bytes * 8 - len(preview_bits)])

        record = collector.collect_block(block, bits)
        block += 1

        # Collect new events since last block
        all_events = collector.events
        new_events = all_events[events_logged:]
        events_logged = len(all_events)

        if record:
            blocks_logged += 1
        if logger is not None:
            logger.log_block_metrics([record] if record else [])
            logger.log_events(new_events)

    summary = collector.summary()
    if logger is not None:
        logger.write_summary(summary)

    full = len(preview_bits) - len(preview_bits) % 8
    preview = np.packbits(
        np.array(preview_bits[:full], dtype=np.bool_), bitorder="little"
    ).tobytes()

    return SampleRunResult(
        config=config,
        preview=preview,
        summary=summary,
        events=collector.events,
        blocks_logged=blocks_logged,
    )
