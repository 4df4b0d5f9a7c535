"""Bit generators — registry and factory for the available bit sources."""

from __future__ import annotations

from rule30rng.core.errors import InvalidConfigurationError
from rule30rng.core.types import GeneratorKind
from rule30rng.generators.base import BitGenerator
from rule30rng.generators.platform import PlatformBitGenerator
from rule30rng.generators.rule30 import Rule30Generator
from rule30rng.generators.state import CompactState, State

GENERATOR_REGISTRY: dict[str, type[BitGenerator]] = {
    GeneratorKind.RULE30.value: Rule30Generator,
    GeneratorKind.PLATFORM.value: PlatformBitGenerator,
}

ALLOWED_GENERATORS = frozenset(GENERATOR_REGISTRY)


def create_generator(kind: str | GeneratorKind, **kwargs) -> BitGenerator:
    """Instantiate a bit generator by kind name.

    Keyword arguments are passed to the generator's constructor.

    Raises InvalidConfigurationError if the kind is not registered.
    """
    name = kind.value if isinstance(kind, GeneratorKind) else kind
    try:
        cls = GENERATOR_REGISTRY[name]
    except KeyError:
        raise InvalidConfigurationError(
            f"Unknown generator kind {name!r}; expected one of {sorted(ALLOWED_GENERATORS)}."
        ) from None
    return cls(**kwargs)


__all__ = [
    "ALLOWED_GENERATORS",
    "GENERATOR_REGISTRY",
    "BitGenerator",
    "CompactState",
    "PlatformBitGenerator",
    "Rule30Generator",
    "State",
    "create_generator",
]
