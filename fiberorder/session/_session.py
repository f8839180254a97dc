"""
Order session — async boundary between providers and the order machine.

Provider calls are lifted into `Result` with combinators. Responses are
tagged with their input key and dropped when a newer request superseded
them. Failures never touch the order state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import combinators as C
from kungfu import Error, LazyCoroResult, Ok, Result

from fiberorder.catalog import (
    Address,
    CustomerType,
    Offer,
    PromoCode,
    Promotion,
    Tariff,
)
from fiberorder.config import PricingPolicy
from fiberorder.order import OrderMachine, OrderNumberFactory
from fiberorder.providers import ProviderError, Providers
from fiberorder.session._tags import Channel, Outcome, RequestTags, input_key
from fiberorder.state import ReferralSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class _TariffBundle:
    tariff: Tariff | None
    offer: Offer
    promotions: list[Promotion]


def _bundle(results: list[Tariff | Offer | list[Promotion] | None]) -> _TariffBundle:
    match results:
        case [(Tariff() | None) as tariff, Offer() as offer, list() as promotions]:
            return _TariffBundle(tariff, offer, promotions)
        case _:
            raise TypeError(f"Unexpected tariff bundle shape: {results!r}")


class OrderSession:
    """
    One browsing session: an order machine plus its providers.

    Example:
        session = OrderSession(providers, policy)
        await session.search_address("Fontanestraße", "12", "Falkensee")
        await session.choose_tariff("einfach-300")
        session.machine.select_router_id("router-fritzbox-5690-pro")
        await session.apply_promo_code("GWG-TEST")

    Every async operation returns Ok(APPLIED), Ok(STALE) when a newer
    request won, or Error(ProviderError).
    """

    def __init__(
        self,
        providers: Providers,
        policy: PricingPolicy | None = None,
        *,
        mint: OrderNumberFactory | None = None,
    ) -> None:
        self._providers = providers
        self._machine = OrderMachine(policy, mint=mint)
        self._tags = RequestTags()

    @property
    def machine(self) -> OrderMachine:
        return self._machine

    @property
    def tags(self) -> RequestTags:
        return self._tags

    def _superseded(self, channel: Channel, key: str) -> bool:
        if self._tags.is_current(channel, key):
            return False
        logger.debug("Discarding stale %s response for %r", channel.value, key)
        return True

    # ─────────────────────────────────────────────────────────────────────────
    # Address
    # ─────────────────────────────────────────────────────────────────────────

    async def search_address(
        self,
        street: str,
        house_number: str,
        city: str,
        customer_type: CustomerType = CustomerType.PRIVATE,
    ) -> Result[Outcome, ProviderError]:
        key = self._tags.issue(
            Channel.ADDRESS, input_key(street, house_number, city, customer_type.value)
        )
        lookup: LazyCoroResult[Address | None, ProviderError] = C.catching_async(
            lambda: self._providers.addresses.lookup(
                street, house_number, city, customer_type
            ),
            on_error=lambda e: ProviderError.unavailable("address", e),
        )
        result = await lookup()

        if self._superseded(Channel.ADDRESS, key):
            return Ok(Outcome.STALE)

        match result:
            case Ok(None):
                where = f"{street} {house_number}, {city}"
                return Error(ProviderError.not_found("address", where))
            case Ok(address):
                self._machine.set_customer_type(customer_type)
                self._machine.set_address(address)
                logger.info(
                    "Address %s %s: %s",
                    street,
                    house_number,
                    address.connection_type.value,
                )
            case Error(e):
                logger.warning("Address lookup failed: %s", e.message)
                return Error(e)

        if self._machine.state.selection.tariff is None:
            return Ok(Outcome.APPLIED)
        return await self.refresh_offer()

    # ─────────────────────────────────────────────────────────────────────────
    # Tariff & Offer
    # ─────────────────────────────────────────────────────────────────────────

    async def list_tariffs(self) -> Result[list[Tariff], ProviderError]:
        address = self._machine.state.address
        if address is None or not address.is_connected:
            return Ok([])
        fetch: LazyCoroResult[list[Tariff], ProviderError] = C.catching_async(
            lambda: self._providers.tariffs.tariffs(address.connection_type),
            on_error=lambda e: ProviderError.unavailable("tariffs", e),
        )
        return await fetch()

    def _fetch_tariff_bundle(
        self, tariff_id: str
    ) -> LazyCoroResult[_TariffBundle, ProviderError]:
        state = self._machine.state
        building_id = state.building_id
        customer_type = state.customer_type

        fetch_tariff = C.catching_async(
            lambda: self._providers.tariffs.tariff(tariff_id),
            on_error=lambda e: ProviderError.unavailable("tariffs", e),
        )
        fetch_offer = C.catching_async(
            lambda: self._providers.eligibility.offer(
                tariff_id, building_id, customer_type
            ),
            on_error=lambda e: ProviderError.unavailable("eligibility", e),
        )
        fetch_promotions = C.catching_async(
            lambda: self._providers.promotions.promotions(building_id, tariff_id),
            on_error=lambda e: ProviderError.unavailable("promotions", e),
        )
        return C.parallel(fetch_tariff, fetch_offer, fetch_promotions).map(_bundle)

    def _offer_key(self, tariff_id: str) -> str:
        state = self._machine.state
        return input_key(tariff_id, state.building_id, state.customer_type.value)

    async def choose_tariff(self, tariff_id: str) -> Result[Outcome, ProviderError]:
        """Fetch the tariff with its offer and promotions, then select it."""
        key = self._tags.issue(Channel.OFFER, self._offer_key(tariff_id))
        result = await self._fetch_tariff_bundle(tariff_id)()

        if self._superseded(Channel.OFFER, key):
            return Ok(Outcome.STALE)

        match result:
            case Ok(_TariffBundle(tariff=None)):
                return Error(ProviderError.not_found("tariffs", f"Tariff {tariff_id}"))
            case Ok(bundle):
                self._machine.select_tariff(
                    bundle.tariff, offer=bundle.offer, promotions=bundle.promotions
                )
                return Ok(Outcome.APPLIED)
            case Error(e):
                logger.warning("Tariff %s lookup failed: %s", tariff_id, e.message)
                return Error(e)

    async def refresh_offer(self) -> Result[Outcome, ProviderError]:
        """Re-fetch the active tariff with its offer and promotions."""
        tariff = self._machine.state.selection.tariff
        if tariff is None:
            return Ok(Outcome.APPLIED)

        key = self._tags.issue(Channel.OFFER, self._offer_key(tariff.id))
        result = await self._fetch_tariff_bundle(tariff.id)()

        if self._superseded(Channel.OFFER, key):
            return Ok(Outcome.STALE)

        match result:
            case Ok(_TariffBundle(tariff=None)):
                logger.warning("Active tariff %s no longer offered", tariff.id)
                return Error(ProviderError.not_found("tariffs", f"Tariff {tariff.id}"))
            case Ok(bundle):
                self._machine.select_tariff(
                    bundle.tariff, offer=bundle.offer, promotions=bundle.promotions
                )
                return Ok(Outcome.APPLIED)
            case Error(e):
                logger.warning("Offer refresh for %s failed: %s", tariff.id, e.message)
                return Error(e)

    # ─────────────────────────────────────────────────────────────────────────
    # Promo Code & Referral
    # ─────────────────────────────────────────────────────────────────────────

    async def apply_promo_code(self, code: str) -> Result[Outcome, ProviderError]:
        key = self._tags.issue(Channel.PROMO_CODE, input_key(code))
        find: LazyCoroResult[PromoCode | None, ProviderError] = C.catching_async(
            lambda: self._providers.promo_codes.find(code),
            on_error=lambda e: ProviderError.unavailable("promo-codes", e),
        )
        result = await find()

        if self._superseded(Channel.PROMO_CODE, key):
            return Ok(Outcome.STALE)

        match result:
            case Ok(found):
                self._machine.record_promo_code(code, found)
                return Ok(Outcome.APPLIED)
            case Error(e):
                logger.warning("Promo code check failed: %s", e.message)
                return Error(e)

    async def validate_referral(
        self, customer_number: str
    ) -> Result[Outcome, ProviderError]:
        """Select the referral source and verify the referrer's customer number."""
        self._machine.set_referral_source(ReferralSource.REFERRAL)
        key = self._tags.issue(Channel.REFERRAL, input_key(customer_number))
        check: LazyCoroResult[bool, ProviderError] = C.catching_async(
            lambda: self._providers.referrals.is_customer(customer_number),
            on_error=lambda e: ProviderError.unavailable("referrals", e),
        )
        result = await check()

        if self._superseded(Channel.REFERRAL, key):
            return Ok(Outcome.STALE)

        match result:
            case Ok(valid):
                self._machine.record_referral_check(customer_number, valid)
                return Ok(Outcome.APPLIED)
            case Error(e):
                logger.warning("Referral check failed: %s", e.message)
                return Error(e)


__all__ = ("OrderSession",)
