"""
Session — async lookups applied to one order with last-request-wins.

Usage:
    from fiberorder import session as SS

    session = SS.OrderSession(providers, policy)
    match await session.search_address("Fontanestraße", "12", "Falkensee"):
        case Ok(SS.Outcome.APPLIED): ...
        case Ok(SS.Outcome.STALE): ...      # a newer search won
        case Error(e): ...                  # provider failed, state untouched
"""

from fiberorder.session._tags import (
    Channel,
    Outcome,
    RequestTags,
    input_key,
)
from fiberorder.session._session import OrderSession

__all__ = (
    "Channel",
    "Outcome",
    "RequestTags",
    "input_key",
    "OrderSession",
)
