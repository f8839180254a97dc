"""
Cascade — which dependent fields each mutation clears or invalidates.

Usage:
    from fiberorder import cascade as R

    state = R.cascade(R.Mutation.TARIFF, state, policy)
    R.CASCADE[R.Mutation.CUSTOMER]   # () — personal data never cascades
"""

from fiberorder.cascade._table import (
    Mutation,
    Effect,
    CASCADE,
    invalidates_confirmation,
    cascade,
)

__all__ = (
    "Mutation",
    "Effect",
    "CASCADE",
    "invalidates_confirmation",
    "cascade",
)
