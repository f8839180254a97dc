"""
Pricing — discount calculator and total aggregation.

Usage:
    from fiberorder import pricing as P

    P.total_monthly(state, policy)      # cents, never negative
    P.router_price(state, policy).monthly_saving
    P.breakdown(state, policy)          # every line, for the contract summary
"""

from fiberorder.pricing._discount import (
    RouterPrice,
    FREE_ROUTER,
    applicable_promotions,
    router_price,
    SetupFee,
    setup_fee,
    referral_bonus,
)
from fiberorder.pricing._aggregate import (
    tariff_monthly,
    tv_monthly,
    tv_one_time,
    phone_monthly,
    addons_monthly,
    addons_one_time,
    express_fee,
    PriceBreakdown,
    breakdown,
    total_monthly,
    total_one_time,
)

__all__ = (
    # Discounts
    "RouterPrice",
    "FREE_ROUTER",
    "applicable_promotions",
    "router_price",
    "SetupFee",
    "setup_fee",
    "referral_bonus",
    # Aggregation
    "tariff_monthly",
    "tv_monthly",
    "tv_one_time",
    "phone_monthly",
    "addons_monthly",
    "addons_one_time",
    "express_fee",
    "PriceBreakdown",
    "breakdown",
    "total_monthly",
    "total_one_time",
)
