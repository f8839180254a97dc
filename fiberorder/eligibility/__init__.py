"""
Eligibility — visible option sets and re-filtering of stale selections.

Usage:
    from fiberorder import eligibility as E

    elig = E.eligibility_of(state)
    elig.router_selector_visible
    state = E.refilter(state, policy)
"""

from fiberorder.eligibility._resolve import (
    Eligibility,
    resolve,
    eligibility_of,
    refilter,
)

__all__ = (
    "Eligibility",
    "resolve",
    "eligibility_of",
    "refilter",
)
