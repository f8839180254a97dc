"""
Catalog types — addresses, tariffs, add-ons and discount rules.

Everything here is immutable data as delivered by the external providers.
Prices are integer cents.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from fiberorder._types import Cents

# ═══════════════════════════════════════════════════════════════════════════════
# Enumerations
# ═══════════════════════════════════════════════════════════════════════════════


class ConnectionType(Enum):
    """Infrastructure class of an address. LIMITED means FTTB."""

    FTTH = "ftth"
    LIMITED = "limited"
    NOT_CONNECTED = "not-connected"


class CustomerType(Enum):
    PRIVATE = "private"
    BUSINESS = "business"


class AddonCategory(Enum):
    ROUTER = "router"
    TV = "tv"
    TV_ADDON = "tv-addon"
    TV_HARDWARE = "tv-hardware"
    PHONE = "phone"
    SERVICE = "service"
    INSTALLATION = "installation"


class PromotionScope(Enum):
    ADDRESS = "address"
    BUILDING = "building"
    GLOBAL = "global"


NO_ROUTER_ID = "router-none"
"""Catalog id of the "I bring my own router" entry."""


# ═══════════════════════════════════════════════════════════════════════════════
# Address
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Address:
    street: str
    house_number: str
    city: str
    connection_type: ConnectionType
    building_id: str | None = None
    residential_units: int | None = None
    cable_tv_available: bool = False
    postal_code: str | None = None

    @property
    def is_connected(self) -> bool:
        return self.connection_type is not ConnectionType.NOT_CONNECTED

    @property
    def uses_ftth_hardware(self) -> bool:
        """FTTH-capable hardware serves both ftth and limited buildings."""
        return self.connection_type in (ConnectionType.FTTH, ConnectionType.LIMITED)


# ═══════════════════════════════════════════════════════════════════════════════
# Tariff & Add-ons
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Tariff:
    id: str
    name: str
    monthly_price: Cents
    setup_fee: Cents
    family: str
    contract_months: int = 24
    monthly_price_12: Cents | None = None
    includes_phone: bool = False
    download_mbps: int | None = None
    upload_mbps: int | None = None


@dataclass(frozen=True, slots=True)
class Addon:
    """
    Any purchasable extra.

    `discounted_price` is the monthly catalog price when combined with a
    discount-eligible tariff family. `ftth`/`fttb` flag the infrastructure a
    router works on. `requires_cable_tv` marks cable-based TV packages.
    """

    id: str
    name: str
    category: AddonCategory
    monthly_price: Cents = 0
    one_time_price: Cents = 0
    discounted_price: Cents | None = None
    ftth: bool = True
    fttb: bool = True
    requires_cable_tv: bool = False

    @property
    def is_no_router(self) -> bool:
        return self.id == NO_ROUTER_ID


@dataclass(frozen=True, slots=True)
class Offer:
    """
    What the eligibility provider allows for one tariff at one building.

    Each tuple may be empty; an empty tuple hides the matching selector.
    """

    routers: tuple[Addon, ...] = ()
    tv: tuple[Addon, ...] = ()
    tv_addons: tuple[Addon, ...] = ()
    tv_hardware: tuple[Addon, ...] = ()
    phone: tuple[Addon, ...] = ()
    service: tuple[Addon, ...] = ()
    installation: tuple[Addon, ...] = ()

    @staticmethod
    def empty() -> Offer:
        return Offer()

    def find(self, addon_id: str) -> Addon | None:
        for group in (
            self.routers,
            self.tv,
            self.tv_addons,
            self.tv_hardware,
            self.phone,
            self.service,
            self.installation,
        ):
            for addon in group:
                if addon.id == addon_id:
                    return addon
        return None


# ═══════════════════════════════════════════════════════════════════════════════
# Router Choice — Tagged Variant
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class RouterUndecided:
    """No decision yet."""


@dataclass(frozen=True, slots=True)
class NoRouter:
    """Customer explicitly declined a router. A valid, priced-at-zero choice."""


@dataclass(frozen=True, slots=True)
class RouterSelected:
    router: Addon


type RouterChoice = RouterUndecided | NoRouter | RouterSelected

UNDECIDED = RouterUndecided()
NO_ROUTER = NoRouter()


def router_choice(addon: Addon | None) -> RouterChoice:
    """Map a catalog entry (or None) onto the variant."""
    if addon is None:
        return UNDECIDED
    if addon.is_no_router:
        return NO_ROUTER
    return RouterSelected(addon)


# ═══════════════════════════════════════════════════════════════════════════════
# Discount Rules
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Promotion:
    """
    Active discount rule from the promotion provider.

    `tariff_ids`/`building_ids` narrow who gets it; `router_ids` narrow which
    routers the router discounts target (empty = every router).
    """

    id: str
    name: str
    scope: PromotionScope = PromotionScope.GLOBAL
    tariff_ids: frozenset[str] = frozenset()
    building_ids: frozenset[str] = frozenset()
    router_ids: frozenset[str] = frozenset()
    router_monthly_discount: Cents = 0
    router_one_time_discount: Cents = 0
    setup_fee_waived: bool = False

    @property
    def is_global(self) -> bool:
        return self.scope is PromotionScope.GLOBAL

    def applies_to(self, tariff_id: str | None, building_id: str | None) -> bool:
        has_tariffs = bool(self.tariff_ids)
        has_buildings = bool(self.building_ids)

        if self.is_global and not has_tariffs and not has_buildings:
            return True

        tariff_ok = tariff_id is not None and tariff_id in self.tariff_ids
        building_ok = building_id is not None and building_id in self.building_ids

        match (has_tariffs, has_buildings):
            case (True, True):
                return tariff_ok and building_ok
            case (True, False):
                return tariff_ok
            case (False, True):
                return building_ok
            case _:
                return self.is_global

    def targets_router(self, router_id: str) -> bool:
        return not self.router_ids or router_id in self.router_ids


@dataclass(frozen=True, slots=True)
class PromoCode:
    code: str
    description: str = ""
    valid_addresses: tuple[str, ...] = ()
    router_discount: Cents = 0
    router_one_time_discount: Cents = 0
    setup_fee_waived: bool = False

    def valid_for(self, street: str | None) -> bool:
        """Coarse scope check: substring of the street, case-insensitive."""
        if not self.valid_addresses:
            return True
        if not street:
            return False
        needle = street.lower()
        return any(entry.lower() in needle for entry in self.valid_addresses)


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    # Enums
    "ConnectionType",
    "CustomerType",
    "AddonCategory",
    "PromotionScope",
    "NO_ROUTER_ID",
    # Records
    "Address",
    "Tariff",
    "Addon",
    "Offer",
    # Router choice
    "RouterUndecided",
    "NoRouter",
    "RouterSelected",
    "RouterChoice",
    "UNDECIDED",
    "NO_ROUTER",
    "router_choice",
    # Discount rules
    "Promotion",
    "PromoCode",
)
