"""
Discounts — effective router price, setup fee and referral bonus.

Pure functions of an `OrderState`. Each stage of the router pipeline floors
at zero and works on the previous stage's output.
"""

from __future__ import annotations

from dataclasses import dataclass

from fiberorder._types import Cents, floor0
from fiberorder.catalog import Addon, Promotion, RouterSelected
from fiberorder.config import PricingPolicy
from fiberorder.state import OrderState

# ═══════════════════════════════════════════════════════════════════════════════
# Router Price
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class RouterPrice:
    """Catalog vs. effective router price, monthly and one-time."""

    catalog_monthly: Cents = 0
    catalog_one_time: Cents = 0
    monthly: Cents = 0
    one_time: Cents = 0

    @property
    def monthly_saving(self) -> Cents:
        return floor0(self.catalog_monthly - self.monthly)

    @property
    def one_time_saving(self) -> Cents:
        return floor0(self.catalog_one_time - self.one_time)


FREE_ROUTER = RouterPrice()


def applicable_promotions(state: OrderState) -> tuple[Promotion, ...]:
    """Promotions matching the active tariff and building."""
    return tuple(
        p for p in state.promotions if p.applies_to(state.tariff_id, state.building_id)
    )


def _promotion_discounts(state: OrderState, router: Addon) -> tuple[Cents, Cents]:
    """Best (monthly, one-time) router discount over promotions. Non-stacking."""
    monthly = 0
    one_time = 0
    for promo in applicable_promotions(state):
        if not promo.targets_router(router.id):
            continue
        monthly = max(monthly, promo.router_monthly_discount)
        one_time = max(one_time, promo.router_one_time_discount)
    return monthly, one_time


def router_price(state: OrderState, policy: PricingPolicy) -> RouterPrice:
    choice = state.selection.router
    if not isinstance(choice, RouterSelected):
        return FREE_ROUTER
    router = choice.router

    # Stage 1: catalog
    monthly = floor0(router.monthly_price)
    one_time = floor0(router.one_time_price)

    # Stage 2: tariff-bundled substitution, monthly only
    tariff = state.selection.tariff
    if (
        tariff is not None
        and tariff.family in policy.discount_families
        and router.discounted_price is not None
    ):
        monthly = floor0(router.discounted_price)

    # Stage 3: promotion / promo code, best of both
    promo_monthly, promo_one_time = _promotion_discounts(state, router)
    code = state.selection.promo_code
    if code is not None:
        promo_monthly = max(promo_monthly, code.router_discount)
        promo_one_time = max(promo_one_time, code.router_one_time_discount)
    monthly = floor0(monthly - promo_monthly)
    one_time = floor0(one_time - promo_one_time)

    return RouterPrice(
        catalog_monthly=floor0(router.monthly_price),
        catalog_one_time=floor0(router.one_time_price),
        monthly=min(monthly, floor0(router.monthly_price)),
        one_time=min(one_time, floor0(router.one_time_price)),
    )


# ═══════════════════════════════════════════════════════════════════════════════
# Setup Fee
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class SetupFee:
    catalog: Cents = 0
    waived: bool = False

    @property
    def charged(self) -> Cents:
        return 0 if self.waived else self.catalog


def setup_fee(state: OrderState) -> SetupFee:
    """Full catalog fee or exactly zero."""
    tariff = state.selection.tariff
    if tariff is None:
        return SetupFee()

    code = state.selection.promo_code
    waived = (code is not None and code.setup_fee_waived) or any(
        p.setup_fee_waived for p in applicable_promotions(state)
    )
    return SetupFee(catalog=floor0(tariff.setup_fee), waived=waived)


# ═══════════════════════════════════════════════════════════════════════════════
# Referral Bonus
# ═══════════════════════════════════════════════════════════════════════════════


def referral_bonus(state: OrderState, policy: PricingPolicy) -> Cents:
    """Flat one-time bonus for a validated referral; never with a promo code."""
    selection = state.selection
    if selection.promo_code is not None or not selection.referral.earns_bonus:
        return 0
    return floor0(policy.referral_bonus)


__all__ = (
    "RouterPrice",
    "FREE_ROUTER",
    "applicable_promotions",
    "router_price",
    "SetupFee",
    "setup_fee",
    "referral_bonus",
)
