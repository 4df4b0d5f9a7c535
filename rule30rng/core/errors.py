"""Error taxonomy for the bit generators.

Every failure is a synchronous caller-contract violation.  Nothing here is
retried or auto-corrected; the call that broke a precondition raises.
"""

from __future__ import annotations


class InvalidConfigurationError(ValueError):
    """A generator was constructed with unusable parameters.

    Raised for non-positive ``size`` / ``bit_spacing``, a seed outside the
    unsigned 64-bit range, or an unknown generator kind.
    """


class InvalidSnapshotError(ValueError):
    """A state buffer or snapshot does not fit the generator.

    Raised for export/import buffers of the wrong length and for cursors
    outside ``[0, state_bit_capacity)``.  The generator is left untouched.
    """


class SamplingExhaustedError(RuntimeError):
    """Rejection sampling hit its retry ceiling without an in-range value."""
