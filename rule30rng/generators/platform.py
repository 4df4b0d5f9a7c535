"""Platform bit source — fair coin flips from a NumPy Generator.

Deterministic given its seed on one NumPy version, but with no promise of
identical streams across platforms or releases.  Use
:class:`rule30rng.generators.rule30.Rule30Generator` when that matters.
"""

from __future__ import annotations

import numpy as np

from rule30rng.core.seeding import make_rng
from rule30rng.generators.base import BitGenerator


class PlatformBitGenerator(BitGenerator):
    """Delegates every bit to a NumPy ``Generator``."""

    def __init__(
        self,
        seed: int | None = None,
        *,
        rng: np.random.Generator | None = None,
    ) -> None:
        self._rng = rng if rng is not None else make_rng(seed)

    @property
    def rng(self) -> np.random.Generator:
        return self._rng

    def next_bit(self) -> bool:
        return bool(self._rng.random() < 0.5)
