"""Numeric sampling built on the single-bit contract."""

from rule30rng.sampling.sampler import DEFAULT_MAX_ATTEMPTS, BitSampler

__all__ = ["BitSampler", "DEFAULT_MAX_ATTEMPTS"]
