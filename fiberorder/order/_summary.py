"""
Contract summary — the snapshot handed to the document generator.
"""

from __future__ import annotations

from dataclasses import dataclass

from fiberorder import pricing as P
from fiberorder._types import Cents
from fiberorder.catalog import Address, NoRouter, RouterSelected, Tariff
from fiberorder.config import PricingPolicy
from fiberorder.state import (
    AddonLine,
    ApartmentData,
    BankData,
    Consents,
    CustomerData,
    OrderState,
    Person,
    PhoneSelection,
    PreferredDate,
    ProviderCancellation,
    ReferralData,
    TvSelection,
)


@dataclass(frozen=True, slots=True)
class RouterLine:
    id: str | None
    name: str
    price: P.RouterPrice


@dataclass(frozen=True, slots=True)
class ContractSummary:
    """
    Complete, consistent view of one order for the legal documents.

    Built from a single state snapshot; prices and personal data never mix
    two different configurations.
    """

    order_number: str | None
    address: Address | None
    tariff: Tariff | None
    contract_months: int
    router: RouterLine | None
    tv: TvSelection
    phone: PhoneSelection
    addons: tuple[AddonLine, ...]
    express: bool
    promo_code: str | None
    referral: ReferralData
    prices: P.PriceBreakdown
    customer: CustomerData | None
    bank: BankData | None
    billing_person: Person | None
    payment_person: Person | None
    apartment: ApartmentData | None
    preferred_date: PreferredDate | None
    cancellation: ProviderCancellation | None
    consents: Consents

    @property
    def total_monthly(self) -> Cents:
        return self.prices.total_monthly

    @property
    def total_one_time(self) -> Cents:
        return self.prices.total_one_time


def _router_line(state: OrderState, policy: PricingPolicy) -> RouterLine | None:
    match state.selection.router:
        case RouterSelected(router):
            return RouterLine(router.id, router.name, P.router_price(state, policy))
        case NoRouter():
            return RouterLine(None, "Own router", P.FREE_ROUTER)
        case _:
            return None


def summarize(state: OrderState, policy: PricingPolicy) -> ContractSummary:
    selection = state.selection
    return ContractSummary(
        order_number=state.order_number,
        address=state.address,
        tariff=selection.tariff,
        contract_months=selection.contract_months,
        router=_router_line(state, policy),
        tv=selection.tv,
        phone=selection.phone,
        addons=selection.addons,
        express=selection.express,
        promo_code=selection.promo_code.code if selection.promo_code else None,
        referral=selection.referral,
        prices=P.breakdown(state, policy),
        customer=state.customer,
        bank=state.bank,
        billing_person=state.billing_person,
        payment_person=state.payment_person,
        apartment=state.apartment,
        preferred_date=state.preferred_date,
        cancellation=state.cancellation,
        consents=state.consents,
    )


__all__ = (
    "RouterLine",
    "ContractSummary",
    "summarize",
)
