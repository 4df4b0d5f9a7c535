"""Base interface for single-bit sources."""

from __future__ import annotations

from abc import ABC, abstractmethod


class BitGenerator(ABC):
    """Interface every bit source must implement.

    ``next_bit`` is the only primitive.  Wider values are assembled by
    :class:`rule30rng.sampling.BitSampler`, which never looks past it.
    """

    @abstractmethod
    def next_bit(self) -> bool:
        """Return the next bit of the stream."""
