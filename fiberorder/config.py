"""
Configuration — pricing policy and runtime settings.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, replace

from fiberorder._types import Cents

# ═══════════════════════════════════════════════════════════════════════════════
# Pricing Policy — Business Constants
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class PricingPolicy:
    """
    Pricing constants that are not delivered by any provider.

    Each `with_*` call returns a modified copy.

    Example:
        policy = (
            PricingPolicy()
            .with_referral_bonus(5000)
            .with_express_fallback(20000)
            .with_short_term_families("fiber-basic")
        )
    """

    referral_bonus: Cents = 5000
    express_fallback_fee: Cents = 20000
    stick_fallback_price: Cents = 5999
    phone_line_fallback_price: Cents = 295
    min_phone_lines: int = 1
    max_phone_lines: int = 10
    default_contract_months: int = 24
    short_contract_months: int = 12
    discount_families: frozenset[str] = field(
        default_factory=lambda: frozenset({"einfach"})
    )
    short_term_families: frozenset[str] = field(
        default_factory=lambda: frozenset({"fiber-basic"})
    )

    def with_referral_bonus(self, amount: Cents) -> PricingPolicy:
        """Flat amount subtracted from the one-time total for a validated referral."""
        return replace(self, referral_bonus=amount)

    def with_express_fallback(self, amount: Cents) -> PricingPolicy:
        """Express-activation fee used when no option record is loaded."""
        return replace(self, express_fallback_fee=amount)

    def with_stick_fallback(self, amount: Cents) -> PricingPolicy:
        return replace(self, stick_fallback_price=amount)

    def with_phone_line_fallback(self, amount: Cents) -> PricingPolicy:
        return replace(self, phone_line_fallback_price=amount)

    def with_phone_lines(self, *, minimum: int, maximum: int) -> PricingPolicy:
        """
        Bounds for the phone line count.

        Example:
            .with_phone_lines(minimum=1, maximum=10)
        """
        if minimum < 1 or maximum < minimum:
            raise ValueError(f"Invalid phone line bounds: [{minimum}, {maximum}]")
        return replace(self, min_phone_lines=minimum, max_phone_lines=maximum)

    def with_discount_families(self, *families: str) -> PricingPolicy:
        """Tariff families whose routers use the catalog's discounted price."""
        return replace(self, discount_families=frozenset(families))

    def with_short_term_families(self, *families: str) -> PricingPolicy:
        """Tariff families that may be booked with a 12-month contract."""
        return replace(self, short_term_families=frozenset(families))

    def clamp_lines(self, lines: int) -> int:
        return max(self.min_phone_lines, min(self.max_phone_lines, lines))


# ═══════════════════════════════════════════════════════════════════════════════
# Settings — Runtime Configuration
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Settings:
    """Runtime configuration for the ordering service."""

    policy: PricingPolicy = field(default_factory=PricingPolicy)
    order_number_prefix: str = "COM"
    log_level: str = "INFO"


def _env_cents(name: str, default: Cents) -> Cents:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    value = int(raw)
    if value < 0:
        raise ValueError(f"{name} must not be negative, got {value}")
    return value


def _env_set(name: str, default: frozenset[str]) -> frozenset[str]:
    raw = os.getenv(name)
    if raw is None:
        return default
    return frozenset(part.strip() for part in raw.split(",") if part.strip())


def load_settings() -> Settings:
    """
    Load settings from FIBERORDER_* environment variables.

    Unset variables keep their defaults. Malformed integers raise ValueError.
    """
    defaults = PricingPolicy()
    policy = (
        PricingPolicy()
        .with_referral_bonus(
            _env_cents("FIBERORDER_REFERRAL_BONUS_CENTS", defaults.referral_bonus)
        )
        .with_express_fallback(
            _env_cents("FIBERORDER_EXPRESS_FEE_CENTS", defaults.express_fallback_fee)
        )
        .with_stick_fallback(
            _env_cents("FIBERORDER_STICK_PRICE_CENTS", defaults.stick_fallback_price)
        )
        .with_phone_line_fallback(
            _env_cents(
                "FIBERORDER_PHONE_LINE_CENTS", defaults.phone_line_fallback_price
            )
        )
        .with_discount_families(
            *_env_set("FIBERORDER_DISCOUNT_FAMILIES", defaults.discount_families)
        )
        .with_short_term_families(
            *_env_set("FIBERORDER_SHORT_TERM_FAMILIES", defaults.short_term_families)
        )
    )
    return Settings(
        policy=policy,
        order_number_prefix=os.getenv("FIBERORDER_ORDER_PREFIX", "COM"),
        log_level=os.getenv("FIBERORDER_LOG_LEVEL", "INFO").upper(),
    )


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "PricingPolicy",
    "Settings",
    "load_settings",
    "configure_logging",
)
