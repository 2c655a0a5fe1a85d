from __future__ import annotations

from enum import Enum


class CheckMode(Enum):
    """Select the caching decorator wrapped around scoped creation expressions.

    The generator picks the mode per binding from its scope: reusable scopes
    get ``SINGLE_CHECK`` and every other scope gets ``DOUBLE_CHECK``. The
    concurrency guarantee itself is provided by the runtime decorator the
    rendered code calls into.
    """

    SINGLE_CHECK = "single_check"
    """Cache the first stored value; concurrent first access may compute twice."""

    DOUBLE_CHECK = "double_check"
    """Guarantee at most one execution of the creation logic under concurrent first access."""
