"""Deterministic seeding utilities.

Rule 30 streams are driven by a single unsigned 64-bit seed.  These helpers
normalise caller seeds, derive independent child seeds (one generator per
thread or subsystem), and produce fresh seeds when reproducibility is not
wanted.
"""

from __future__ import annotations

import numpy as np

from rule30rng.core.errors import InvalidConfigurationError

SEED_BITS = 64
MAX_SEED = (1 << SEED_BITS) - 1


def normalize_seed(seed: int) -> int:
    """Validate *seed* and map it onto the value the automaton is seeded with.

    A seed of 0 becomes 1: an all-zero automaton is a fixed point of Rule 30
    and would never produce anything but zeros.
    """
    if isinstance(seed, bool) or not isinstance(seed, (int, np.integer)):
        raise InvalidConfigurationError(
            f"Seed must be an integer, got {type(seed).__name__}."
        )
    seed = int(seed)
    if seed < 0 or seed > MAX_SEED:
        raise InvalidConfigurationError(
            f"Seed must be in [0, 2**{SEED_BITS}), got {seed}."
        )
    return seed or 1


def make_rng(seed: int | None = None) -> np.random.Generator:
    """Create a NumPy Generator from an explicit seed.

    If seed is None a fresh (non-reproducible) generator is returned.
    """
    return np.random.default_rng(seed)


def derive_seed(parent_seed: int, index: int) -> int:
    """Derive a 64-bit child seed deterministically from a parent seed + index.

    Useful for giving each thread its own generator while keeping the whole
    run reproducible from one root seed.
    """
    ss = np.random.SeedSequence(parent_seed).spawn(index + 1)
    return int(ss[-1].generate_state(1, dtype=np.uint64)[0])


def fresh_seed() -> int:
    """Return a 64-bit seed drawn from OS entropy."""
    return int(np.random.SeedSequence().generate_state(1, dtype=np.uint64)[0])
