"""
fiberorder — order configuration and pricing core for a fiber-internet funnel.

Modules:
    catalog      — tariffs, add-ons, promotions, promo codes
    state        — immutable order snapshots
    eligibility  — visible option sets, stale-selection re-filtering
    cascade      — declarative reset table per mutation
    pricing      — discount calculator and totals
    order        — the order machine and contract summary
    providers    — external collaborator protocols, in-memory backends
    session      — async lookups with last-request-wins
    web          — FastAPI surface

Usage:
    from fiberorder import order as O, providers as X, session as SS

    session = SS.OrderSession(X.seeded_providers().bundle())
"""

from fiberorder._types import (
    Result,
    Ok,
    Error,
    Option,
    Some,
    Nothing,
    LazyCoroResult,
    LCR,
    Cents,
    floor0,
    euros,
)
from fiberorder.config import (
    PricingPolicy,
    Settings,
    load_settings,
    configure_logging,
)

__all__ = (
    "Result",
    "Ok",
    "Error",
    "Option",
    "Some",
    "Nothing",
    "LazyCoroResult",
    "LCR",
    "Cents",
    "floor0",
    "euros",
    "PricingPolicy",
    "Settings",
    "load_settings",
    "configure_logging",
)
