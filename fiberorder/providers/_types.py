"""
Provider protocols — the external collaborators of the ordering core.

Implement these for real backends (address database, product catalog,
promotion service, CRM). In-memory versions live in `_memory`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Protocol

from fiberorder.catalog import (
    Address,
    ConnectionType,
    CustomerType,
    Offer,
    PromoCode,
    Promotion,
    Tariff,
)

# ═══════════════════════════════════════════════════════════════════════════════
# Protocols
# ═══════════════════════════════════════════════════════════════════════════════


class AddressLookup(Protocol):
    """
    Address availability check.

    Example:
        class GisAddressLookup:
            async def lookup(self, street, house_number, city, customer_type):
                row = await db.fetch_building(street, house_number, city)
                return to_address(row) if row else None
    """

    async def lookup(
        self,
        street: str,
        house_number: str,
        city: str,
        customer_type: CustomerType,
    ) -> Address | None:
        """Returns None when the address is unknown."""
        ...


class TariffCatalog(Protocol):
    async def tariffs(self, connection_type: ConnectionType) -> list[Tariff]:
        """Tariffs bookable on the given infrastructure."""
        ...

    async def tariff(self, tariff_id: str) -> Tariff | None:
        ...


class EligibilityProvider(Protocol):
    async def offer(
        self,
        tariff_id: str,
        building_id: str | None,
        customer_type: CustomerType,
    ) -> Offer:
        """Legal add-ons for one tariff at one building."""
        ...


class PromotionProvider(Protocol):
    async def promotions(
        self, building_id: str | None, tariff_id: str | None
    ) -> list[Promotion]:
        """Active discount rules that may apply to the building or tariff."""
        ...


class PromoCodeRegistry(Protocol):
    async def find(self, code: str) -> PromoCode | None:
        ...


class ReferralRegistry(Protocol):
    async def is_customer(self, customer_number: str) -> bool:
        ...


@dataclass(frozen=True, slots=True)
class Providers:
    """Everything one session talks to."""

    addresses: AddressLookup
    tariffs: TariffCatalog
    eligibility: EligibilityProvider
    promotions: PromotionProvider
    promo_codes: PromoCodeRegistry
    referrals: ReferralRegistry


# ═══════════════════════════════════════════════════════════════════════════════
# Provider Errors
# ═══════════════════════════════════════════════════════════════════════════════


class ProviderErrorKind(Enum):
    UNAVAILABLE = auto()
    NOT_FOUND = auto()


@dataclass(frozen=True, slots=True)
class ProviderError:
    """External lookup failure. The order state is left untouched."""

    kind: ProviderErrorKind
    source: str
    message: str

    @staticmethod
    def unavailable(source: str, exc: Exception) -> ProviderError:
        message = str(exc) or type(exc).__name__
        return ProviderError(ProviderErrorKind.UNAVAILABLE, source, message)

    @staticmethod
    def not_found(source: str, what: str) -> ProviderError:
        return ProviderError(ProviderErrorKind.NOT_FOUND, source, f"{what} not found")


class ProviderUnavailable(Exception):
    """Raised by backends when the collaborator cannot answer."""


__all__ = (
    "AddressLookup",
    "TariffCatalog",
    "EligibilityProvider",
    "PromotionProvider",
    "PromoCodeRegistry",
    "ReferralRegistry",
    "Providers",
    "ProviderErrorKind",
    "ProviderError",
    "ProviderUnavailable",
)
