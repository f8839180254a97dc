"""
In-memory providers — seeded with the standard fiber catalog.

Each service can simulate latency and outages, which is how the session's
last-request-wins handling and failure paths are exercised.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

from fiberorder.catalog import (
    Address,
    Addon,
    AddonCategory,
    ConnectionType,
    CustomerType,
    NO_ROUTER_ID,
    Offer,
    PromoCode,
    Promotion,
    PromotionScope,
    Tariff,
)
from fiberorder.providers._types import Providers, ProviderUnavailable

logger = logging.getLogger(__name__)

# ═══════════════════════════════════════════════════════════════════════════════
# Catalog Data
# ═══════════════════════════════════════════════════════════════════════════════

EINFACH = "einfach"
FIBER_BASIC = "fiber-basic"


def _einfach(speed: int, price: int) -> Tariff:
    return Tariff(
        id=f"einfach-{speed}",
        name=f"einfach {speed}",
        monthly_price=price,
        setup_fee=9900,
        family=EINFACH,
        download_mbps=speed,
        upload_mbps=speed // 2,
    )


TARIFFS: tuple[Tariff, ...] = (
    _einfach(150, 3500),
    _einfach(300, 3900),
    _einfach(600, 4700),
    _einfach(1000, 5900),
    Tariff(
        id="fiber-basic-100",
        name="FiberBasic 100",
        monthly_price=3490,
        monthly_price_12=4990,
        setup_fee=9900,
        family=FIBER_BASIC,
        includes_phone=True,
        download_mbps=100,
        upload_mbps=50,
    ),
)

ROUTERS: tuple[Addon, ...] = (
    Addon(NO_ROUTER_ID, "Kein Router", AddonCategory.ROUTER, discounted_price=0),
    Addon(
        "router-fritzbox-5690-pro",
        "FRITZ!Box 5690 Pro",
        AddonCategory.ROUTER,
        monthly_price=1000,
        discounted_price=600,
        ftth=True,
        fttb=False,
    ),
    Addon(
        "router-fritzbox-5690",
        "FRITZ!Box 5690",
        AddonCategory.ROUTER,
        monthly_price=400,
        discounted_price=0,
        ftth=True,
        fttb=False,
    ),
    Addon(
        "router-fritzbox-7690",
        "FRITZ!Box 7690",
        AddonCategory.ROUTER,
        monthly_price=700,
        discounted_price=700,
        ftth=False,
        fttb=True,
    ),
)

TV_PACKAGES: tuple[Addon, ...] = (
    Addon("tv-comin", "COM-IN TV", AddonCategory.TV, 1000, requires_cable_tv=True),
    Addon("tv-waipu-comfort", "waipu.tv Comfort", AddonCategory.TV, 799),
    Addon("tv-waipu-premium", "waipu.tv Premium", AddonCategory.TV, 1399),
)

TV_ADDONS: tuple[Addon, ...] = (
    Addon("tv-basishd", "Basis HD", AddonCategory.TV_ADDON, 490),
    Addon("tv-familyhd", "Family HD", AddonCategory.TV_ADDON, 1990),
)

TV_HARDWARE: tuple[Addon, ...] = (
    Addon("tv-smartcard", "Smartcard Aktivierung", AddonCategory.TV_HARDWARE, 0, 2990),
    Addon("tv-receiver", "Technistar 4K ISIO (1TB)", AddonCategory.TV_HARDWARE, 490),
    Addon("tv-ci-module", "CI+ Modul (M7 fähig)", AddonCategory.TV_HARDWARE, 0, 7990),
)

PHONE_OPTIONS: tuple[Addon, ...] = (
    Addon("phone-flat-festnetz", "Telefon-Flat Festnetz", AddonCategory.PHONE, 295),
)

SERVICE_OPTIONS: tuple[Addon, ...] = (
    Addon("service-static-ip", "Feste IP-Adresse", AddonCategory.SERVICE, 500),
    Addon("service-wlan-check", "WLAN-Check vor Ort", AddonCategory.SERVICE, 0, 4900),
)

INSTALLATION_OPTIONS: tuple[Addon, ...] = (
    Addon(
        "installation-express",
        "Express-Aktivierung",
        AddonCategory.INSTALLATION,
        0,
        20000,
    ),
)


# ═══════════════════════════════════════════════════════════════════════════════
# Base — Latency & Outage Simulation
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass
class _Simulated:
    latency: float = 0.0
    failure: Exception | None = None

    async def _call(self, name: str) -> None:
        if self.latency:
            await asyncio.sleep(self.latency)
        if self.failure is not None:
            logger.debug("%s simulating outage: %s", name, self.failure)
            raise self.failure

    def fail_with(self, error: Exception | None = None) -> None:
        """Make every following call raise. `None` restores service."""
        self.failure = error

    def go_down(self) -> None:
        self.fail_with(ProviderUnavailable(f"{type(self).__name__} unavailable"))


# ═══════════════════════════════════════════════════════════════════════════════
# Services
# ═══════════════════════════════════════════════════════════════════════════════


def _address_key(street: str, house_number: str, city: str) -> str:
    parts = (street, house_number, city)
    return "|".join(part.strip().lower() for part in parts)


@dataclass
class MemoryAddressLookup(_Simulated):
    _addresses: dict[str, Address] = field(default_factory=dict[str, Address])

    def add(self, address: Address) -> None:
        key = _address_key(address.street, address.house_number, address.city)
        self._addresses[key] = address

    def seed(self) -> None:
        self._addresses = {}
        self.add(
            Address(
                "Fontanestraße", "12", "Falkensee", ConnectionType.FTTH,
                building_id="B-100", residential_units=24, cable_tv_available=True,
                postal_code="14612",
            )
        )
        self.add(
            Address(
                "Lindenweg", "5", "Falkensee", ConnectionType.FTTH,
                building_id="B-150", residential_units=1, cable_tv_available=False,
                postal_code="14612",
            )
        )
        self.add(
            Address(
                "Bahnhofstraße", "3", "Falkensee", ConnectionType.LIMITED,
                building_id="B-200", residential_units=8, cable_tv_available=True,
                postal_code="14612",
            )
        )
        self.add(
            Address(
                "Feldweg", "9", "Falkensee", ConnectionType.NOT_CONNECTED,
                postal_code="14612",
            )
        )

    async def lookup(
        self,
        street: str,
        house_number: str,
        city: str,
        customer_type: CustomerType,
    ) -> Address | None:
        await self._call("address lookup")
        return self._addresses.get(_address_key(street, house_number, city))


@dataclass
class MemoryTariffCatalog(_Simulated):
    _tariffs: dict[str, Tariff] = field(default_factory=dict[str, Tariff])

    def add(self, tariff: Tariff) -> None:
        self._tariffs[tariff.id] = tariff

    def withdraw(self, tariff_id: str) -> None:
        self._tariffs.pop(tariff_id, None)

    def seed(self) -> None:
        self._tariffs = {t.id: t for t in TARIFFS}

    async def tariffs(self, connection_type: ConnectionType) -> list[Tariff]:
        await self._call("tariff catalog")
        match connection_type:
            case ConnectionType.FTTH:
                return [t for t in self._tariffs.values() if t.family == EINFACH]
            case ConnectionType.LIMITED:
                return [t for t in self._tariffs.values() if t.family == FIBER_BASIC]
            case _:
                return []

    async def tariff(self, tariff_id: str) -> Tariff | None:
        await self._call("tariff catalog")
        return self._tariffs.get(tariff_id)


@dataclass
class MemoryEligibilityProvider(_Simulated):
    """Offers keyed by tariff id; building overrides take precedence."""

    _offers: dict[str, Offer] = field(default_factory=dict[str, Offer])
    _building_offers: dict[tuple[str, str], Offer] = field(
        default_factory=dict[tuple[str, str], Offer]
    )

    def set_offer(
        self, tariff_id: str, offer: Offer, building_id: str | None = None
    ) -> None:
        if building_id is None:
            self._offers[tariff_id] = offer
        else:
            self._building_offers[(tariff_id, building_id)] = offer

    def seed(self) -> None:
        self._offers = {}
        self._building_offers = {}
        full = Offer(
            routers=ROUTERS,
            tv=TV_PACKAGES,
            tv_addons=TV_ADDONS,
            tv_hardware=TV_HARDWARE,
            phone=PHONE_OPTIONS,
            service=SERVICE_OPTIONS,
            installation=INSTALLATION_OPTIONS,
        )
        for tariff in TARIFFS:
            if tariff.family == EINFACH:
                self._offers[tariff.id] = full
        self._offers["fiber-basic-100"] = Offer(
            routers=ROUTERS,
            service=SERVICE_OPTIONS,
            installation=INSTALLATION_OPTIONS,
        )

    async def offer(
        self,
        tariff_id: str,
        building_id: str | None,
        customer_type: CustomerType,
    ) -> Offer:
        await self._call("eligibility")
        if building_id is not None and (tariff_id, building_id) in self._building_offers:
            return self._building_offers[(tariff_id, building_id)]
        return self._offers.get(tariff_id, Offer.empty())


@dataclass
class MemoryPromotionProvider(_Simulated):
    _promotions: list[Promotion] = field(default_factory=list[Promotion])

    def add(self, promotion: Promotion) -> None:
        self._promotions.append(promotion)

    def seed(self) -> None:
        self._promotions = [
            Promotion(
                id="neubau-b200",
                name="Neubau Bahnhofstraße: keine Anschlussgebühr",
                scope=PromotionScope.BUILDING,
                building_ids=frozenset({"B-200"}),
                setup_fee_waived=True,
            ),
        ]

    async def promotions(
        self, building_id: str | None, tariff_id: str | None
    ) -> list[Promotion]:
        await self._call("promotions")
        return [
            p
            for p in self._promotions
            if p.is_global
            or (building_id is not None and building_id in p.building_ids)
            or (tariff_id is not None and tariff_id in p.tariff_ids)
        ]


@dataclass
class MemoryPromoCodeRegistry(_Simulated):
    _codes: dict[str, PromoCode] = field(default_factory=dict[str, PromoCode])

    def add(self, code: PromoCode) -> None:
        self._codes[code.code.upper()] = code

    def seed(self) -> None:
        self._codes = {}
        self.add(
            PromoCode(
                code="GWG-TEST",
                description="GWG Aktion: 4 € Routerrabatt, keine Anschlussgebühr",
                valid_addresses=("fontanestraße", "fontanestrasse"),
                router_discount=400,
                setup_fee_waived=True,
            )
        )

    async def find(self, code: str) -> PromoCode | None:
        await self._call("promo codes")
        return self._codes.get(code.strip().upper())


@dataclass
class MemoryReferralRegistry(_Simulated):
    _customers: set[str] = field(default_factory=set[str])

    def seed(self) -> None:
        self._customers = {"KD123456"}

    async def is_customer(self, customer_number: str) -> bool:
        await self._call("referrals")
        return customer_number.strip().upper() in self._customers


# ═══════════════════════════════════════════════════════════════════════════════
# Bundle
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass
class MemoryProviders:
    """Concrete in-memory services, kept typed so tests can reach them."""

    addresses: MemoryAddressLookup = field(default_factory=MemoryAddressLookup)
    tariffs: MemoryTariffCatalog = field(default_factory=MemoryTariffCatalog)
    eligibility: MemoryEligibilityProvider = field(
        default_factory=MemoryEligibilityProvider
    )
    promotions: MemoryPromotionProvider = field(default_factory=MemoryPromotionProvider)
    promo_codes: MemoryPromoCodeRegistry = field(default_factory=MemoryPromoCodeRegistry)
    referrals: MemoryReferralRegistry = field(default_factory=MemoryReferralRegistry)

    def seed_all(self) -> None:
        self.addresses.seed()
        self.tariffs.seed()
        self.eligibility.seed()
        self.promotions.seed()
        self.promo_codes.seed()
        self.referrals.seed()

    def bundle(self) -> Providers:
        return Providers(
            addresses=self.addresses,
            tariffs=self.tariffs,
            eligibility=self.eligibility,
            promotions=self.promotions,
            promo_codes=self.promo_codes,
            referrals=self.referrals,
        )


def seeded_providers() -> MemoryProviders:
    providers = MemoryProviders()
    providers.seed_all()
    return providers


__all__ = (
    "TARIFFS",
    "ROUTERS",
    "TV_PACKAGES",
    "TV_ADDONS",
    "TV_HARDWARE",
    "PHONE_OPTIONS",
    "SERVICE_OPTIONS",
    "INSTALLATION_OPTIONS",
    "MemoryAddressLookup",
    "MemoryTariffCatalog",
    "MemoryEligibilityProvider",
    "MemoryPromotionProvider",
    "MemoryPromoCodeRegistry",
    "MemoryReferralRegistry",
    "MemoryProviders",
    "seeded_providers",
)
