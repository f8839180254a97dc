"""
Providers — external collaborators behind narrow async protocols.

Usage:
    from fiberorder import providers as X

    memory = X.seeded_providers()
    providers = memory.bundle()
    address = await providers.addresses.lookup("Fontanestraße", "12", "Falkensee", ...)

    memory.eligibility.go_down()     # simulate an outage
"""

from fiberorder.providers._types import (
    AddressLookup,
    TariffCatalog,
    EligibilityProvider,
    PromotionProvider,
    PromoCodeRegistry,
    ReferralRegistry,
    Providers,
    ProviderErrorKind,
    ProviderError,
    ProviderUnavailable,
)
from fiberorder.providers._memory import (
    TARIFFS,
    ROUTERS,
    TV_PACKAGES,
    TV_ADDONS,
    TV_HARDWARE,
    PHONE_OPTIONS,
    SERVICE_OPTIONS,
    INSTALLATION_OPTIONS,
    MemoryAddressLookup,
    MemoryTariffCatalog,
    MemoryEligibilityProvider,
    MemoryPromotionProvider,
    MemoryPromoCodeRegistry,
    MemoryReferralRegistry,
    MemoryProviders,
    seeded_providers,
)

__all__ = (
    # Protocols
    "AddressLookup",
    "TariffCatalog",
    "EligibilityProvider",
    "PromotionProvider",
    "PromoCodeRegistry",
    "ReferralRegistry",
    "Providers",
    # Errors
    "ProviderErrorKind",
    "ProviderError",
    "ProviderUnavailable",
    # In-memory
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
