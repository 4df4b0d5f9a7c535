"""Configuration schema for sampling runs — single source of truth.

These Pydantic models fully describe a reproducible run: which bit source,
how it is seeded and shaped, how bounded sampling behaves, and what gets
measured.  The CLI validates JSON config files against ``RunConfig``.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, Field, model_validator

from rule30rng.core.seeding import MAX_SEED
from rule30rng.generators.rule30 import DEFAULT_BIT_SPACING, DEFAULT_SIZE
from rule30rng.sampling.sampler import DEFAULT_MAX_ATTEMPTS


# ---------------------------------------------------------------------------
# Section 1: Generator
# ---------------------------------------------------------------------------

class GeneratorSettings(BaseModel):
    """Which bit source to build and how."""

    kind: Literal["rule30", "platform"] = Field(
        default="rule30",
        description="Bit source. Only 'rule30' is reproducible across platforms.",
    )
    seed: Annotated[int, Field(ge=0, le=MAX_SEED)] | None = Field(
        default=None,
        description="Unsigned 64-bit seed. None draws a fresh seed from OS entropy.",
    )
    size: int = Field(
        default=DEFAULT_SIZE,
        gt=0,
        description="Automaton width in cells. Odd values are recommended.",
    )
    bit_spacing: int = Field(
        default=DEFAULT_BIT_SPACING,
        gt=0,
        description="Stride between output cells within one generation.",
    )


# ---------------------------------------------------------------------------
# Section 2: Sampling
# ---------------------------------------------------------------------------

class SamplingSettings(BaseModel):
    """Bounded-integer sampling behaviour."""

    max_attempts: int = Field(
        default=DEFAULT_MAX_ATTEMPTS,
        ge=1,
        description="Rejection-sampling retry ceiling before failing loudly.",
    )


# ---------------------------------------------------------------------------
# Section 3: Instrumentation
# ---------------------------------------------------------------------------

class InstrumentationConfig(BaseModel):
    """What bit-stream metrics to collect and how often."""

    enable_block_metrics: bool = Field(
        default=True,
        description="Collect per-block statistics (ones ratio, runs, transitions).",
    )
    enable_summary: bool = Field(
        default=True,
        description="Collect run-level summary statistics.",
    )
    enable_event_log: bool = Field(
        default=True,
        description="Log semantic events (imbalanced or constant blocks).",
    )
    block_size: int = Field(
        default=1024, ge=8,
        description="Bits per metrics block.",
    )
    block_log_frequency: int = Field(
        default=1, ge=1,
        description="Log block metrics every N blocks. 1 = every block.",
    )
    imbalance_threshold: float = Field(
        default=0.1, gt=0.0, le=0.5,
        description="Flag a block when |ones_ratio - 0.5| exceeds this.",
    )


# ---------------------------------------------------------------------------
# Top-level config
# ---------------------------------------------------------------------------

class RunConfig(BaseModel):
    """Complete configuration for one sampling run."""

    generator: GeneratorSettings = GeneratorSettings()
    sampling: SamplingSettings = SamplingSettings()
    instrumentation: InstrumentationConfig = InstrumentationConfig()
    num_bits: int = Field(
        default=65_536, ge=1,
        description="Total number of bits to draw.",
    )

    @model_validator(mode="after")
    def at_least_one_block(self) -> RunConfig:
        if self.num_bits < self.instrumentation.block_size:
            raise ValueError(
                "num_bits must cover at least one metrics block "
                f"(got {self.num_bits} < {self.instrumentation.block_size})."
            )
        return self
