"""
errors.py: Exceptions raised by the factorization engine.

Every failure here is a broken contract (bad index, packed-word overflow,
re-basing invariant) rather than a transient runtime fault, so nothing is
retried.  All of them derive from ValueError so callers that already guard
configuration and input errors catch them too.
"""


class FactorizationError(ValueError):
    """Base class for feature factorization failures."""


class IndexOutOfRangeError(FactorizationError):
    """A compact or packed index falls outside its valid range."""


class FeatureOverflowError(FactorizationError, OverflowError):
    """A packed index or multiplicity would exceed its bit budget."""


class InvariantViolationError(FactorizationError):
    """A training feature landed outside the sub-range reserved for it."""
