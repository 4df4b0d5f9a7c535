"""Default run configuration and generator construction from config.

All values are explicit: the default is the reference Rule 30 setup
(255 cells, every 8th cell read).
"""

from rule30rng.config.schema import (
    GeneratorSettings,
    InstrumentationConfig,
    RunConfig,
    SamplingSettings,
)
from rule30rng.core.seeding import fresh_seed
from rule30rng.generators import create_generator
from rule30rng.generators.base import BitGenerator
from rule30rng.sampling.sampler import BitSampler


def default_config(seed: int = 12345) -> RunConfig:
    """Return a complete, valid default config."""
    return RunConfig(
        generator=GeneratorSettings(
            kind="rule30",
            seed=seed,
            size=255,
            bit_spacing=8,
        ),
        sampling=SamplingSettings(max_attempts=8192),
        instrumentation=InstrumentationConfig(),
        num_bits=65_536,
    )


def build_generator(settings: GeneratorSettings) -> BitGenerator:
    """Instantiate the bit source described by *settings*.

    A missing seed is replaced by a fresh entropy seed for ``rule30``; the
    platform source seeds itself from OS entropy.
    """
    if settings.kind == "platform":
        return create_generator(settings.kind, seed=settings.seed)
    seed = settings.seed if settings.seed is not None else fresh_seed()
    return create_generator(
        settings.kind,
        seed=seed,
        size=settings.size,
        bit_spacing=settings.bit_spacing,
    )


def build_sampler(config: RunConfig) -> BitSampler:
    """Build the configured generator wrapped in a :class:`BitSampler`."""
    return BitSampler(
        build_generator(config.generator),
        max_attempts=config.sampling.max_attempts,
    )
