"""Shared vocabulary used across generators, config and runners."""

from __future__ import annotations

from enum import Enum


class GeneratorKind(Enum):
    """Which bit source backs a generator.

    ``RULE30`` is reproducible across platforms; ``PLATFORM`` delegates to a
    NumPy generator and is only reproducible within one NumPy version.
    """

    RULE30 = "rule30"
    PLATFORM = "platform"
