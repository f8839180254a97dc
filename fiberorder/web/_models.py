"""
Wire models — pydantic request/response shapes.

Requests convert with `to_domain()`, responses build with `from_domain()`.
Money is always integer cents.
"""

from __future__ import annotations

from datetime import date
from typing import Literal

from pydantic import BaseModel, Field

from fiberorder import eligibility as E
from fiberorder import order as O
from fiberorder import pricing as P
from fiberorder.catalog import (
    Addon,
    CustomerType,
    NoRouter,
    Offer,
    RouterSelected,
    Tariff,
)
from fiberorder.state import (
    AddonLine,
    ApartmentData,
    BankData,
    Consents,
    CustomerData,
    DateKind,
    OrderState,
    Person,
    PhoneBookEntry,
    PhoneSelection,
    PortingData,
    PreferredDate,
    ProviderCancellation,
    ReferralSource,
    TvKind,
    TvSelection,
)

# ═══════════════════════════════════════════════════════════════════════════════
# Requests — Selection
# ═══════════════════════════════════════════════════════════════════════════════


class AddressIn(BaseModel):
    street: str = Field(min_length=1)
    house_number: str = Field(min_length=1)
    city: str = Field(min_length=1)
    customer_type: Literal["private", "business"] = "private"

    def customer_type_domain(self) -> CustomerType:
        return CustomerType(self.customer_type)


class TariffIn(BaseModel):
    tariff_id: str


class RouterIn(BaseModel):
    router_id: str | None = None


class TvIn(BaseModel):
    kind: Literal["none", "cable", "streaming"] = "none"
    package_id: str | None = None
    hd_addon_id: str | None = None
    hardware_ids: list[str] = []
    stick: bool = False
    stick_price_cents: int | None = Field(default=None, ge=0)

    def to_domain(self, offer: Offer) -> TvSelection:
        """Unknown ids resolve to nothing; eligibility re-filtering does the rest."""
        hardware = tuple(
            a for a in (offer.find(i) for i in self.hardware_ids) if a is not None
        )
        return TvSelection(
            kind=TvKind(self.kind),
            package=offer.find(self.package_id) if self.package_id else None,
            hd_addon=offer.find(self.hd_addon_id) if self.hd_addon_id else None,
            hardware=hardware,
            stick=self.stick,
            stick_price=self.stick_price_cents,
        )


class PortingIn(BaseModel):
    provider: str
    numbers: list[str] = []
    holder_name: str | None = None


class PhoneBookIn(BaseModel):
    listed: bool = False
    reverse_lookup: bool = False
    itemized_bill: bool = False


class PhoneIn(BaseModel):
    enabled: bool = False
    option_id: str | None = None
    lines: int = 1
    porting_required: bool = False
    porting: PortingIn | None = None
    phone_book: PhoneBookIn | None = None

    def to_domain(self, offer: Offer) -> PhoneSelection:
        porting = (
            PortingData(
                provider=self.porting.provider,
                numbers=tuple(self.porting.numbers),
                holder_name=self.porting.holder_name,
            )
            if self.porting and self.porting_required
            else None
        )
        book = (
            PhoneBookEntry(**self.phone_book.model_dump()) if self.phone_book else None
        )
        return PhoneSelection(
            enabled=self.enabled,
            option=offer.find(self.option_id) if self.option_id else None,
            lines=self.lines,
            porting_required=self.porting_required,
            porting=porting,
            phone_book=book,
        )


class AddonItemIn(BaseModel):
    id: str
    quantity: int = Field(default=1, ge=1)


class AddonsIn(BaseModel):
    items: list[AddonItemIn] = []

    def to_domain(self, offer: Offer) -> tuple[AddonLine, ...]:
        lines: list[AddonLine] = []
        for item in self.items:
            addon = offer.find(item.id)
            if addon is not None:
                lines.append(AddonLine(addon, item.quantity))
        return tuple(lines)


class ContractIn(BaseModel):
    months: int


class ExpressIn(BaseModel):
    enabled: bool
    option_id: str | None = None


class PromoCodeIn(BaseModel):
    code: str = Field(min_length=1)


class ReferralIn(BaseModel):
    source: Literal["none", "internet", "social-media", "referral", "promo-code"]
    customer_number: str | None = None

    def source_domain(self) -> ReferralSource:
        return ReferralSource(self.source)


class StepIn(BaseModel):
    step: int


# ═══════════════════════════════════════════════════════════════════════════════
# Requests — Personal Data
# ═══════════════════════════════════════════════════════════════════════════════


class CustomerIn(BaseModel):
    salutation: str
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    phone: str
    birth_date: date | None = None
    company: str | None = None

    def to_domain(self) -> CustomerData:
        return CustomerData(**self.model_dump())


class BankIn(BaseModel):
    account_holder: str = Field(min_length=1)
    iban: str = Field(min_length=15, max_length=34)
    bic: str | None = None
    sepa_mandate: bool = True

    def to_domain(self) -> BankData:
        iban = self.iban.replace(" ", "").upper()
        return BankData(self.account_holder, iban, self.bic, self.sepa_mandate)


class PersonIn(BaseModel):
    salutation: str
    first_name: str
    last_name: str
    street: str | None = None
    house_number: str | None = None
    postal_code: str | None = None
    city: str | None = None

    def to_domain(self) -> Person:
        return Person(**self.model_dump())


class ApartmentIn(BaseModel):
    floor: str | None = None
    apartment: str | None = None

    def to_domain(self) -> ApartmentData:
        return ApartmentData(self.floor, self.apartment)


class PreferredDateIn(BaseModel):
    kind: Literal["asap", "specific"] = "asap"
    day: date | None = None

    def to_domain(self) -> PreferredDate:
        kind = DateKind(self.kind)
        return PreferredDate(kind, self.day if kind is DateKind.SPECIFIC else None)


class CancellationIn(BaseModel):
    cancel_previous: bool = False
    provider_name: str | None = None
    customer_number: str | None = None
    phone_number: str | None = None

    def to_domain(self) -> ProviderCancellation:
        return ProviderCancellation(**self.model_dump())


class ConsentsIn(BaseModel):
    terms: bool = False
    privacy: bool = False
    advertising: bool = False

    def to_domain(self) -> Consents:
        return Consents(**self.model_dump())


# ═══════════════════════════════════════════════════════════════════════════════
# Responses
# ═══════════════════════════════════════════════════════════════════════════════


class SessionOut(BaseModel):
    session_id: str


class AddonOut(BaseModel):
    id: str
    name: str
    category: str
    monthly_cents: int
    one_time_cents: int

    @classmethod
    def from_domain(cls, addon: Addon) -> AddonOut:
        return cls(
            id=addon.id,
            name=addon.name,
            category=addon.category.value,
            monthly_cents=addon.monthly_price,
            one_time_cents=addon.one_time_price,
        )


class TariffOut(BaseModel):
    id: str
    name: str
    family: str
    monthly_cents: int
    monthly_12_cents: int | None
    setup_fee_cents: int
    includes_phone: bool

    @classmethod
    def from_domain(cls, tariff: Tariff) -> TariffOut:
        return cls(
            id=tariff.id,
            name=tariff.name,
            family=tariff.family,
            monthly_cents=tariff.monthly_price,
            monthly_12_cents=tariff.monthly_price_12,
            setup_fee_cents=tariff.setup_fee,
            includes_phone=tariff.includes_phone,
        )


class EligibilityOut(BaseModel):
    router_selector_visible: bool
    routers: list[AddonOut]
    tv_visible: bool
    tv_packages: list[AddonOut]
    tv_addons: list[AddonOut]
    tv_hardware: list[AddonOut]
    phone_visible: bool
    phone_options: list[AddonOut]
    extras: list[AddonOut]

    @classmethod
    def from_domain(cls, elig: E.Eligibility) -> EligibilityOut:
        def out(addons: tuple[Addon, ...]) -> list[AddonOut]:
            return [AddonOut.from_domain(a) for a in addons]

        return cls(
            router_selector_visible=elig.router_selector_visible,
            routers=out(elig.routers),
            tv_visible=elig.tv_visible,
            tv_packages=out(elig.tv_packages),
            tv_addons=out(elig.tv_addons),
            tv_hardware=out(elig.tv_hardware),
            phone_visible=elig.phone_visible,
            phone_options=out(elig.phone_options),
            extras=out(elig.extras),
        )


class PricesOut(BaseModel):
    tariff_monthly_cents: int
    router_monthly_cents: int
    router_monthly_saving_cents: int
    router_one_time_cents: int
    router_one_time_saving_cents: int
    tv_monthly_cents: int
    phone_monthly_cents: int
    addons_monthly_cents: int
    setup_fee_cents: int
    setup_fee_waived: bool
    tv_one_time_cents: int
    express_fee_cents: int
    addons_one_time_cents: int
    referral_bonus_cents: int
    total_monthly_cents: int
    total_one_time_cents: int

    @classmethod
    def from_domain(cls, b: P.PriceBreakdown) -> PricesOut:
        return cls(
            tariff_monthly_cents=b.tariff_monthly,
            router_monthly_cents=b.router.monthly,
            router_monthly_saving_cents=b.router.monthly_saving,
            router_one_time_cents=b.router.one_time,
            router_one_time_saving_cents=b.router.one_time_saving,
            tv_monthly_cents=b.tv_monthly,
            phone_monthly_cents=b.phone_monthly,
            addons_monthly_cents=b.addons_monthly,
            setup_fee_cents=b.setup_fee.charged,
            setup_fee_waived=b.setup_fee.waived,
            tv_one_time_cents=b.tv_one_time,
            express_fee_cents=b.express_fee,
            addons_one_time_cents=b.addons_one_time,
            referral_bonus_cents=b.referral_bonus,
            total_monthly_cents=b.total_monthly,
            total_one_time_cents=b.total_one_time,
        )


def _router_id(state: OrderState) -> str | None:
    match state.selection.router:
        case RouterSelected(router):
            return router.id
        case NoRouter():
            return "router-none"
        case _:
            return None


class OrderOut(BaseModel):
    step: int
    can_navigate: dict[int, bool]
    connection_type: str | None
    tariff_id: str | None
    router_id: str | None
    tv_kind: str
    phone_enabled: bool
    phone_lines: int
    addon_ids: list[str]
    contract_months: int
    express: bool
    referral_source: str
    referral_validated: bool
    referral_error: str | None
    promo_code: str | None
    promo_code_error: str | None
    order_number: str | None
    eligibility: EligibilityOut
    prices: PricesOut

    @classmethod
    def from_domain(cls, machine: O.OrderMachine) -> OrderOut:
        state = machine.state
        selection = state.selection
        return cls(
            step=int(state.step),
            can_navigate={n: machine.can_navigate_to(n) for n in range(1, 5)},
            connection_type=(
                state.address.connection_type.value if state.address else None
            ),
            tariff_id=state.tariff_id,
            router_id=_router_id(state),
            tv_kind=selection.tv.kind.value,
            phone_enabled=selection.phone.enabled,
            phone_lines=selection.phone.lines,
            addon_ids=[line.addon.id for line in selection.addons],
            contract_months=selection.contract_months,
            express=selection.express,
            referral_source=selection.referral.source.value,
            referral_validated=selection.referral.validated,
            referral_error=selection.referral.error,
            promo_code=selection.promo_code.code if selection.promo_code else None,
            promo_code_error=selection.promo_code_error,
            order_number=state.order_number,
            eligibility=EligibilityOut.from_domain(machine.eligibility()),
            prices=PricesOut.from_domain(machine.breakdown()),
        )


class ConfirmOut(BaseModel):
    order_number: str


class SummaryLineOut(BaseModel):
    id: str | None
    name: str
    quantity: int = 1
    monthly_cents: int
    one_time_cents: int


class SummaryOut(BaseModel):
    """What the contract summary document is rendered from."""

    order_number: str | None
    address: str | None
    tariff: TariffOut | None
    contract_months: int
    lines: list[SummaryLineOut]
    promo_code: str | None
    referral_source: str
    prices: PricesOut
    customer_name: str | None
    email: str | None
    iban: str | None
    consents: dict[str, bool]

    @classmethod
    def from_domain(cls, summary: O.ContractSummary) -> SummaryOut:
        lines: list[SummaryLineOut] = []
        if summary.router is not None:
            lines.append(
                SummaryLineOut(
                    id=summary.router.id,
                    name=summary.router.name,
                    monthly_cents=summary.router.price.monthly,
                    one_time_cents=summary.router.price.one_time,
                )
            )
        tv = summary.tv
        for addon in (tv.package, tv.hd_addon, *tv.hardware):
            if addon is not None:
                lines.append(_line(addon))
        if summary.phone.enabled and summary.phone.option is not None:
            lines.append(_line(summary.phone.option, summary.phone.lines))
        for line in summary.addons:
            lines.append(_line(line.addon, line.quantity))

        address = summary.address
        customer = summary.customer
        return cls(
            order_number=summary.order_number,
            address=(
                f"{address.street} {address.house_number}, {address.city}"
                if address
                else None
            ),
            tariff=TariffOut.from_domain(summary.tariff) if summary.tariff else None,
            contract_months=summary.contract_months,
            lines=lines,
            promo_code=summary.promo_code,
            referral_source=summary.referral.source.value,
            prices=PricesOut.from_domain(summary.prices),
            customer_name=(
                f"{customer.first_name} {customer.last_name}" if customer else None
            ),
            email=customer.email if customer else None,
            iban=summary.bank.iban if summary.bank else None,
            consents={
                "terms": summary.consents.terms,
                "privacy": summary.consents.privacy,
                "advertising": summary.consents.advertising,
            },
        )


def _line(addon: Addon, quantity: int = 1) -> SummaryLineOut:
    return SummaryLineOut(
        id=addon.id,
        name=addon.name,
        quantity=quantity,
        monthly_cents=addon.monthly_price * quantity,
        one_time_cents=addon.one_time_price * quantity,
    )


__all__ = (
    "AddressIn",
    "TariffIn",
    "RouterIn",
    "TvIn",
    "PortingIn",
    "PhoneBookIn",
    "PhoneIn",
    "AddonItemIn",
    "AddonsIn",
    "ContractIn",
    "ExpressIn",
    "PromoCodeIn",
    "ReferralIn",
    "StepIn",
    "CustomerIn",
    "BankIn",
    "PersonIn",
    "ApartmentIn",
    "PreferredDateIn",
    "CancellationIn",
    "ConsentsIn",
    "SessionOut",
    "AddonOut",
    "TariffOut",
    "EligibilityOut",
    "PricesOut",
    "OrderOut",
    "ConfirmOut",
    "SummaryLineOut",
    "SummaryOut",
)
