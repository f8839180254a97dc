"""
Reset cascade — declarative table of what each mutation clears.

Every mutation kind maps to an ordered tuple of effects. `cascade` is the
single place that evaluates them; setters never reset fields themselves.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import replace
from enum import Enum, auto
from types import MappingProxyType

from fiberorder.catalog import UNDECIDED
from fiberorder.config import PricingPolicy
from fiberorder.state import (
    EMPTY_SELECTION,
    NO_PHONE,
    OrderState,
    ReferralSource,
    UNCONFIRMED,
)

logger = logging.getLogger(__name__)

# ═══════════════════════════════════════════════════════════════════════════════
# Mutations & Effects
# ═══════════════════════════════════════════════════════════════════════════════


class Mutation(Enum):
    """Named mutation kinds the order machine can apply."""

    ADDRESS = auto()
    CUSTOMER_TYPE = auto()
    TARIFF = auto()
    OFFER = auto()
    ROUTER = auto()
    TV = auto()
    PHONE = auto()
    ADDONS = auto()
    CONTRACT_DURATION = auto()
    EXPRESS = auto()
    REFERRAL = auto()
    PROMO_CODE = auto()
    SELECTION_RESET = auto()
    CUSTOMER = auto()
    BANK = auto()
    BILLING_PERSON = auto()
    PAYMENT_PERSON = auto()
    APARTMENT = auto()
    PREFERRED_DATE = auto()
    CANCELLATION = auto()
    CONSENTS = auto()
    ACKNOWLEDGE = auto()


class Effect(Enum):
    CLEAR_ROUTER = auto()
    CLEAR_OUT_OF_SCOPE_PROMO = auto()
    RESET_BUNDLED_PHONE = auto()
    FORCE_LONG_CONTRACT = auto()
    RESET_TARIFF_SELECTION = auto()
    INVALIDATE_CONFIRMATION = auto()


_PRICED = (Effect.INVALIDATE_CONFIRMATION,)

CASCADE: Mapping[Mutation, tuple[Effect, ...]] = MappingProxyType({
    Mutation.ADDRESS: (
        Effect.CLEAR_ROUTER,
        Effect.CLEAR_OUT_OF_SCOPE_PROMO,
        *_PRICED,
    ),
    Mutation.CUSTOMER_TYPE: (Effect.CLEAR_ROUTER, *_PRICED),
    Mutation.TARIFF: (
        Effect.RESET_BUNDLED_PHONE,
        Effect.FORCE_LONG_CONTRACT,
        *_PRICED,
    ),
    Mutation.OFFER: _PRICED,
    Mutation.ROUTER: _PRICED,
    Mutation.TV: _PRICED,
    Mutation.PHONE: (Effect.RESET_BUNDLED_PHONE, *_PRICED),
    Mutation.ADDONS: _PRICED,
    Mutation.CONTRACT_DURATION: (Effect.FORCE_LONG_CONTRACT, *_PRICED),
    Mutation.EXPRESS: _PRICED,
    Mutation.REFERRAL: _PRICED,
    Mutation.PROMO_CODE: _PRICED,
    Mutation.SELECTION_RESET: (Effect.RESET_TARIFF_SELECTION, *_PRICED),
    # Personal data never touches pricing or confirmation.
    Mutation.CUSTOMER: (),
    Mutation.BANK: (),
    Mutation.BILLING_PERSON: (),
    Mutation.PAYMENT_PERSON: (),
    Mutation.APARTMENT: (),
    Mutation.PREFERRED_DATE: (),
    Mutation.CANCELLATION: (),
    Mutation.CONSENTS: (),
    Mutation.ACKNOWLEDGE: (),
})


def invalidates_confirmation(mutation: Mutation) -> bool:
    return Effect.INVALIDATE_CONFIRMATION in CASCADE[mutation]


# ═══════════════════════════════════════════════════════════════════════════════
# Effect Implementations
# ═══════════════════════════════════════════════════════════════════════════════

type EffectFn = Callable[[OrderState, PricingPolicy], OrderState]


def _clear_router(state: OrderState, policy: PricingPolicy) -> OrderState:
    return replace(state, selection=replace(state.selection, router=UNDECIDED))


def _clear_out_of_scope_promo(state: OrderState, policy: PricingPolicy) -> OrderState:
    selection = state.selection
    code = selection.promo_code
    if code is None:
        return state
    street = state.address.street if state.address else None
    if code.valid_for(street):
        return state
    logger.debug("Promo code %s not valid for %s, clearing", code.code, street)
    return replace(
        state,
        selection=replace(
            selection,
            promo_code=None,
            promo_code_error=None,
            referral=replace(selection.referral, source=ReferralSource.NONE),
        ),
    )


def _reset_bundled_phone(state: OrderState, policy: PricingPolicy) -> OrderState:
    tariff = state.selection.tariff
    if tariff is None or not tariff.includes_phone:
        return state
    return replace(state, selection=replace(state.selection, phone=NO_PHONE))


def _force_long_contract(state: OrderState, policy: PricingPolicy) -> OrderState:
    selection = state.selection
    if selection.contract_months == policy.default_contract_months:
        return state
    tariff = selection.tariff
    short_ok = (
        tariff is not None
        and tariff.family in policy.short_term_families
        and selection.contract_months == policy.short_contract_months
    )
    if short_ok:
        return state
    return replace(
        state,
        selection=replace(selection, contract_months=policy.default_contract_months),
    )


def _reset_tariff_selection(state: OrderState, policy: PricingPolicy) -> OrderState:
    """Drop everything chosen downstream of the tariff; keep the tariff itself."""
    selection = replace(
        EMPTY_SELECTION,
        tariff=state.selection.tariff,
        contract_months=policy.default_contract_months,
    )
    return replace(state, selection=selection)


def _invalidate_confirmation(state: OrderState, policy: PricingPolicy) -> OrderState:
    if state.is_confirmed:
        logger.info("Order %s invalidated by configuration change", state.order_number)
    if not state.is_confirmed and not state.summary_acknowledged:
        return state
    return replace(state, confirmation=UNCONFIRMED, summary_acknowledged=False)


_EFFECTS: Mapping[Effect, EffectFn] = MappingProxyType({
    Effect.CLEAR_ROUTER: _clear_router,
    Effect.CLEAR_OUT_OF_SCOPE_PROMO: _clear_out_of_scope_promo,
    Effect.RESET_BUNDLED_PHONE: _reset_bundled_phone,
    Effect.FORCE_LONG_CONTRACT: _force_long_contract,
    Effect.RESET_TARIFF_SELECTION: _reset_tariff_selection,
    Effect.INVALIDATE_CONFIRMATION: _invalidate_confirmation,
})


# ═══════════════════════════════════════════════════════════════════════════════
# Cascade
# ═══════════════════════════════════════════════════════════════════════════════


def cascade(
    mutation: Mutation,
    state: OrderState,
    policy: PricingPolicy,
) -> OrderState:
    """
    Apply every effect registered for `mutation`, in table order.

    `state` is the state right after the mutation itself was applied.
    """
    effects = CASCADE[mutation]
    for effect in effects:
        state = _EFFECTS[effect](state, policy)
    if effects:
        logger.debug(
            "Cascade %s -> %s", mutation.name, ", ".join(e.name for e in effects)
        )
    return state


__all__ = (
    "Mutation",
    "Effect",
    "CASCADE",
    "invalidates_confirmation",
    "cascade",
)
