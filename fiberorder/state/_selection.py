"""
Selection state — what the customer has configured so far.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from fiberorder._types import Cents
from fiberorder.catalog import Addon, PromoCode, RouterChoice, Tariff, UNDECIDED

# ═══════════════════════════════════════════════════════════════════════════════
# TV
# ═══════════════════════════════════════════════════════════════════════════════


class TvKind(Enum):
    NONE = "none"
    CABLE = "cable"
    STREAMING = "streaming"


@dataclass(frozen=True, slots=True)
class TvSelection:
    kind: TvKind = TvKind.NONE
    package: Addon | None = None
    hd_addon: Addon | None = None
    hardware: tuple[Addon, ...] = ()
    stick: bool = False
    stick_price: Cents | None = None


NO_TV = TvSelection()


# ═══════════════════════════════════════════════════════════════════════════════
# Phone
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class PortingData:
    provider: str
    numbers: tuple[str, ...] = ()
    holder_name: str | None = None


@dataclass(frozen=True, slots=True)
class PhoneBookEntry:
    listed: bool = False
    reverse_lookup: bool = False
    itemized_bill: bool = False


@dataclass(frozen=True, slots=True)
class PhoneSelection:
    enabled: bool = False
    option: Addon | None = None
    lines: int = 1
    porting_required: bool = False
    porting: PortingData | None = None
    phone_book: PhoneBookEntry | None = None


NO_PHONE = PhoneSelection()


# ═══════════════════════════════════════════════════════════════════════════════
# Service / Installation Add-ons
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class AddonLine:
    addon: Addon
    quantity: int = 1


# ═══════════════════════════════════════════════════════════════════════════════
# Referral & Promo Code
# ═══════════════════════════════════════════════════════════════════════════════


class ReferralSource(Enum):
    """How the customer found us. Only one bonus mechanism per order."""

    NONE = "none"
    INTERNET = "internet"
    SOCIAL_MEDIA = "social-media"
    REFERRAL = "referral"
    PROMO_CODE = "promo-code"


@dataclass(frozen=True, slots=True)
class ReferralData:
    source: ReferralSource = ReferralSource.NONE
    referrer_number: str | None = None
    validated: bool = False
    error: str | None = None

    @property
    def earns_bonus(self) -> bool:
        return self.source is ReferralSource.REFERRAL and self.validated


NO_REFERRAL = ReferralData()


# ═══════════════════════════════════════════════════════════════════════════════
# Selection
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Selection:
    """
    Canonical tariff-and-extras configuration.

    `promo_code` is only ever set while `referral.source` is PROMO_CODE.
    """

    tariff: Tariff | None = None
    router: RouterChoice = UNDECIDED
    tv: TvSelection = NO_TV
    phone: PhoneSelection = NO_PHONE
    addons: tuple[AddonLine, ...] = ()
    contract_months: int = 24
    express: bool = False
    express_option: Addon | None = None
    referral: ReferralData = NO_REFERRAL
    promo_code: PromoCode | None = None
    promo_code_error: str | None = None


EMPTY_SELECTION = Selection()


__all__ = (
    "TvKind",
    "TvSelection",
    "NO_TV",
    "PortingData",
    "PhoneBookEntry",
    "PhoneSelection",
    "NO_PHONE",
    "AddonLine",
    "ReferralSource",
    "ReferralData",
    "NO_REFERRAL",
    "Selection",
    "EMPTY_SELECTION",
)
