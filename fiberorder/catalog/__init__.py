"""
Catalog — immutable product and discount data.

Usage:
    from fiberorder import catalog as K

    tariff = K.Tariff("einfach-300", "einfach 300", 3900, 9900, family="einfach")
    choice = K.router_choice(addon)   # RouterSelected | NoRouter | RouterUndecided
"""

from fiberorder.catalog._types import (
    ConnectionType,
    CustomerType,
    AddonCategory,
    PromotionScope,
    NO_ROUTER_ID,
    Address,
    Tariff,
    Addon,
    Offer,
    RouterUndecided,
    NoRouter,
    RouterSelected,
    RouterChoice,
    UNDECIDED,
    NO_ROUTER,
    router_choice,
    Promotion,
    PromoCode,
)

__all__ = (
    "ConnectionType",
    "CustomerType",
    "AddonCategory",
    "PromotionScope",
    "NO_ROUTER_ID",
    "Address",
    "Tariff",
    "Addon",
    "Offer",
    "RouterUndecided",
    "NoRouter",
    "RouterSelected",
    "RouterChoice",
    "UNDECIDED",
    "NO_ROUTER",
    "router_choice",
    "Promotion",
    "PromoCode",
)
