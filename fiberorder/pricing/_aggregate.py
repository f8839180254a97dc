"""
Aggregation — monthly and one-time totals.

Nothing here is cached: every call recomputes from the state it is given.
"""

from __future__ import annotations

from dataclasses import dataclass

from fiberorder._types import Cents, floor0
from fiberorder.config import PricingPolicy
from fiberorder.pricing._discount import (
    RouterPrice,
    SetupFee,
    referral_bonus,
    router_price,
    setup_fee,
)
from fiberorder.state import OrderState, TvKind

# ═══════════════════════════════════════════════════════════════════════════════
# Line Items
# ═══════════════════════════════════════════════════════════════════════════════


def tariff_monthly(state: OrderState, policy: PricingPolicy) -> Cents:
    """Tariff price, using the 12-month variant where the family allows it."""
    selection = state.selection
    tariff = selection.tariff
    if tariff is None:
        return 0
    if (
        selection.contract_months == policy.short_contract_months
        and tariff.family in policy.short_term_families
        and tariff.monthly_price_12 is not None
    ):
        return floor0(tariff.monthly_price_12)
    return floor0(tariff.monthly_price)


def tv_monthly(state: OrderState) -> Cents:
    tv = state.selection.tv
    if tv.kind is TvKind.NONE:
        return 0
    total = tv.package.monthly_price if tv.package else 0
    if tv.hd_addon is not None:
        total += tv.hd_addon.monthly_price
    total += sum(h.monthly_price for h in tv.hardware)
    return floor0(total)


def tv_one_time(state: OrderState, policy: PricingPolicy) -> Cents:
    tv = state.selection.tv
    if tv.kind is TvKind.NONE:
        return 0
    total = sum(h.one_time_price for h in tv.hardware)
    if tv.stick:
        total += (
            tv.stick_price if tv.stick_price is not None else policy.stick_fallback_price
        )
    return floor0(total)


def phone_monthly(state: OrderState, policy: PricingPolicy) -> Cents:
    selection = state.selection
    tariff = selection.tariff
    phone = selection.phone
    if not phone.enabled or (tariff is not None and tariff.includes_phone):
        return 0
    unit = (
        phone.option.monthly_price
        if phone.option is not None
        else policy.phone_line_fallback_price
    )
    return floor0(policy.clamp_lines(phone.lines) * unit)


def addons_monthly(state: OrderState) -> Cents:
    return floor0(
        sum(line.addon.monthly_price * line.quantity for line in state.selection.addons)
    )


def addons_one_time(state: OrderState) -> Cents:
    return floor0(
        sum(line.addon.one_time_price * line.quantity for line in state.selection.addons)
    )


def express_fee(state: OrderState, policy: PricingPolicy) -> Cents:
    selection = state.selection
    if not selection.express:
        return 0
    if selection.express_option is not None:
        return floor0(selection.express_option.one_time_price)
    return floor0(policy.express_fallback_fee)


# ═══════════════════════════════════════════════════════════════════════════════
# Breakdown
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class PriceBreakdown:
    """Every priced line plus both totals, as the contract summary shows them."""

    tariff_monthly: Cents
    router: RouterPrice
    tv_monthly: Cents
    phone_monthly: Cents
    addons_monthly: Cents
    setup_fee: SetupFee
    tv_one_time: Cents
    express_fee: Cents
    addons_one_time: Cents
    referral_bonus: Cents

    @property
    def total_monthly(self) -> Cents:
        return floor0(
            self.tariff_monthly
            + self.router.monthly
            + self.tv_monthly
            + self.phone_monthly
            + self.addons_monthly
        )

    @property
    def one_time_before_bonus(self) -> Cents:
        return floor0(
            self.setup_fee.charged
            + self.router.one_time
            + self.tv_one_time
            + self.express_fee
            + self.addons_one_time
        )

    @property
    def total_one_time(self) -> Cents:
        return floor0(self.one_time_before_bonus - self.referral_bonus)


def breakdown(state: OrderState, policy: PricingPolicy) -> PriceBreakdown:
    return PriceBreakdown(
        tariff_monthly=tariff_monthly(state, policy),
        router=router_price(state, policy),
        tv_monthly=tv_monthly(state),
        phone_monthly=phone_monthly(state, policy),
        addons_monthly=addons_monthly(state),
        setup_fee=setup_fee(state),
        tv_one_time=tv_one_time(state, policy),
        express_fee=express_fee(state, policy),
        addons_one_time=addons_one_time(state),
        referral_bonus=referral_bonus(state, policy),
    )


def total_monthly(state: OrderState, policy: PricingPolicy) -> Cents:
    return breakdown(state, policy).total_monthly


def total_one_time(state: OrderState, policy: PricingPolicy) -> Cents:
    return breakdown(state, policy).total_one_time


__all__ = (
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
