"""
Order machine — the only component allowed to change an order.

Each named operation builds the next state, then runs the reset cascade for
its mutation kind and re-filters selections against eligibility. Reads
(totals, eligibility) are recomputed from the current snapshot every time.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Iterable
from dataclasses import replace

from fiberorder import cascade as R
from fiberorder import eligibility as E
from fiberorder import pricing as P
from fiberorder._types import Cents, euros
from fiberorder.catalog import (
    Address,
    Addon,
    CustomerType,
    NO_ROUTER,
    NO_ROUTER_ID,
    Offer,
    PromoCode,
    Promotion,
    RouterChoice,
    Tariff,
    UNDECIDED,
    router_choice,
)
from fiberorder.config import PricingPolicy
from fiberorder.state import (
    AddonLine,
    ApartmentData,
    BankData,
    Confirmed,
    Consents,
    CustomerData,
    INITIAL_STATE,
    OrderState,
    Person,
    PhoneSelection,
    PreferredDate,
    ProviderCancellation,
    ReferralData,
    ReferralSource,
    Step,
    TvSelection,
)

logger = logging.getLogger(__name__)

type OrderNumberFactory = Callable[[], str]

INVALID_PROMO_CODE = "Invalid promo code"
PROMO_CODE_NOT_FOR_ADDRESS = "Promo code is not valid for this address"
REFERRER_NOT_FOUND = "Customer number could not be verified"


def order_number_factory(prefix: str = "COM") -> OrderNumberFactory:
    """Random order numbers like COM-3F9A1C07B2."""

    def _mint() -> str:
        return f"{prefix}-{uuid.uuid4().hex[:10].upper()}"

    return _mint


# ═══════════════════════════════════════════════════════════════════════════════
# Order Machine
# ═══════════════════════════════════════════════════════════════════════════════


class OrderMachine:
    """
    Owns one order's canonical state.

    Example:
        machine = OrderMachine(PricingPolicy())
        machine.set_address(address)
        machine.select_tariff(tariff, offer=offer)
        machine.select_router_id("fritzbox-5690-pro")
        machine.total_monthly()

    Invalid inputs are normalized, never raised.
    """

    def __init__(
        self,
        policy: PricingPolicy | None = None,
        *,
        mint: OrderNumberFactory | None = None,
        state: OrderState = INITIAL_STATE,
    ) -> None:
        self._policy = policy or PricingPolicy()
        self._mint = mint or order_number_factory()
        self._state = state

    # ─────────────────────────────────────────────────────────────────────────
    # Reads
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def state(self) -> OrderState:
        return self._state

    @property
    def policy(self) -> PricingPolicy:
        return self._policy

    def can_navigate_to(self, step: int) -> bool:
        return can_navigate_to(self._state, step)

    def eligibility(self) -> E.Eligibility:
        return E.eligibility_of(self._state)

    def breakdown(self) -> P.PriceBreakdown:
        return P.breakdown(self._state, self._policy)

    def total_monthly(self) -> Cents:
        return P.total_monthly(self._state, self._policy)

    def total_one_time(self) -> Cents:
        return P.total_one_time(self._state, self._policy)

    # ─────────────────────────────────────────────────────────────────────────
    # Commit
    # ─────────────────────────────────────────────────────────────────────────

    def _commit(self, mutation: R.Mutation, state: OrderState) -> OrderState:
        state = R.cascade(mutation, state, self._policy)
        state = E.refilter(state, self._policy)
        self._state = state
        logger.debug("Applied %s (step %d)", mutation.name, state.step)
        return state

    def _with_selection(self, **changes: object) -> OrderState:
        return replace(self._state, selection=replace(self._state.selection, **changes))

    # ─────────────────────────────────────────────────────────────────────────
    # Navigation
    # ─────────────────────────────────────────────────────────────────────────

    def set_step(self, step: int) -> bool:
        """
        Move the cursor. Returns whether the move happened.

        Forward moves need the target's gate. Backward moves always succeed;
        landing on step 1 or 2 from further ahead resets the tariff selection
        but keeps personal data.
        """
        try:
            target = Step(step)
        except ValueError:
            return False

        current = self._state.step
        if target == current:
            return True
        if target > current and not self.can_navigate_to(target):
            logger.debug("Step %d blocked at step %d", target, current)
            return False

        state = replace(self._state, step=target)
        if target < current and target <= Step.TARIFF:
            self._commit(R.Mutation.SELECTION_RESET, state)
        else:
            self._state = state
        return True

    def reset(self) -> None:
        """Start over: back to the empty initial state."""
        logger.info("Order reset")
        self._state = INITIAL_STATE

    # ─────────────────────────────────────────────────────────────────────────
    # Address & Catalog
    # ─────────────────────────────────────────────────────────────────────────

    def set_address(self, address: Address | None) -> None:
        self._commit(R.Mutation.ADDRESS, replace(self._state, address=address))

    def set_customer_type(self, customer_type: CustomerType) -> None:
        if customer_type is self._state.customer_type:
            return
        self._commit(
            R.Mutation.CUSTOMER_TYPE,
            replace(self._state, customer_type=customer_type),
        )

    def select_tariff(
        self,
        tariff: Tariff | None,
        *,
        offer: Offer | None = None,
        promotions: Iterable[Promotion] | None = None,
    ) -> None:
        """Replace the tariff, optionally together with its fresh offer."""
        state = self._with_selection(tariff=tariff)
        if offer is not None:
            state = replace(state, offer=offer)
        if promotions is not None:
            state = replace(state, promotions=tuple(promotions))
        self._commit(R.Mutation.TARIFF, state)

    def set_offer(
        self,
        offer: Offer,
        promotions: Iterable[Promotion] | None = None,
    ) -> None:
        """Install a fresh provider response for the active tariff."""
        state = replace(self._state, offer=offer)
        if promotions is not None:
            state = replace(state, promotions=tuple(promotions))
        self._commit(R.Mutation.OFFER, state)

    # ─────────────────────────────────────────────────────────────────────────
    # Tariff Extras
    # ─────────────────────────────────────────────────────────────────────────

    def select_router(self, choice: RouterChoice) -> None:
        """Kept only if offered; priced from the current offer record."""
        self._commit(R.Mutation.ROUTER, self._with_selection(router=choice))

    def select_router_id(self, router_id: str | None) -> None:
        """Choose by catalog id. Unknown ids fall back to undecided."""
        choice: RouterChoice
        if router_id is None:
            choice = UNDECIDED
        elif router_id == NO_ROUTER_ID:
            choice = NO_ROUTER
        else:
            choice = router_choice(self._state.offer.find(router_id))
        self.select_router(choice)

    def set_tv(self, tv: TvSelection) -> None:
        self._commit(R.Mutation.TV, self._with_selection(tv=tv))

    def set_phone(self, phone: PhoneSelection) -> None:
        phone = replace(phone, lines=self._policy.clamp_lines(phone.lines))
        self._commit(R.Mutation.PHONE, self._with_selection(phone=phone))

    def set_addons(self, lines: Iterable[AddonLine]) -> None:
        kept = tuple(line for line in lines if line.quantity > 0)
        self._commit(R.Mutation.ADDONS, self._with_selection(addons=kept))

    def toggle_addon(self, addon: Addon, quantity: int = 1) -> None:
        """Add the add-on, or remove it if already selected."""
        current = self._state.selection.addons
        if any(line.addon.id == addon.id for line in current):
            lines = tuple(line for line in current if line.addon.id != addon.id)
        else:
            lines = (*current, AddonLine(addon, quantity))
        self.set_addons(lines)

    def set_contract_duration(self, months: int) -> None:
        policy = self._policy
        allowed = (policy.short_contract_months, policy.default_contract_months)
        if months not in allowed:
            return
        self._commit(
            R.Mutation.CONTRACT_DURATION, self._with_selection(contract_months=months)
        )

    def set_express(self, enabled: bool, option: Addon | None = None) -> None:
        """Options outside the offered extras fall back to the fixed fee."""
        self._commit(
            R.Mutation.EXPRESS,
            self._with_selection(
                express=enabled, express_option=option if enabled else None
            ),
        )

    # ─────────────────────────────────────────────────────────────────────────
    # Referral & Promo Code
    # ─────────────────────────────────────────────────────────────────────────

    def set_referral_source(self, source: ReferralSource) -> None:
        """Pick how the customer found us. Leaving PROMO_CODE drops the code."""
        selection = self._state.selection
        if source is selection.referral.source:
            return
        self._commit(
            R.Mutation.REFERRAL,
            self._with_selection(
                referral=ReferralData(source=source),
                promo_code=None,
                promo_code_error=None,
            ),
        )

    def record_referral_check(self, customer_number: str, valid: bool) -> None:
        """Store the registry's answer for a referrer customer number."""
        if self._state.selection.referral.source is not ReferralSource.REFERRAL:
            return
        referral = ReferralData(
            source=ReferralSource.REFERRAL,
            referrer_number=customer_number,
            validated=valid,
            error=None if valid else REFERRER_NOT_FOUND,
        )
        self._commit(R.Mutation.REFERRAL, self._with_selection(referral=referral))

    def record_promo_code(self, code: str, found: PromoCode | None) -> None:
        """
        Apply the registry's answer for a promo code.

        Unknown or out-of-scope codes only set the error field.
        """
        if found is None:
            logger.debug("Promo code %r rejected", code)
            self._state = self._with_selection(promo_code_error=INVALID_PROMO_CODE)
            return

        street = self._state.address.street if self._state.address else None
        if not found.valid_for(street):
            logger.debug("Promo code %r not valid for %s", code, street)
            self._state = self._with_selection(
                promo_code_error=PROMO_CODE_NOT_FOR_ADDRESS
            )
            return

        self._commit(
            R.Mutation.PROMO_CODE,
            self._with_selection(
                promo_code=found,
                promo_code_error=None,
                referral=ReferralData(source=ReferralSource.PROMO_CODE),
            ),
        )

    def clear_promo_code(self) -> None:
        selection = self._state.selection
        referral = selection.referral
        if referral.source is ReferralSource.PROMO_CODE:
            referral = ReferralData()
        self._commit(
            R.Mutation.PROMO_CODE,
            self._with_selection(
                promo_code=None, promo_code_error=None, referral=referral
            ),
        )

    # ─────────────────────────────────────────────────────────────────────────
    # Personal Data
    # ─────────────────────────────────────────────────────────────────────────

    def set_customer(self, customer: CustomerData | None) -> None:
        self._commit(R.Mutation.CUSTOMER, replace(self._state, customer=customer))

    def set_bank(self, bank: BankData | None) -> None:
        self._commit(R.Mutation.BANK, replace(self._state, bank=bank))

    def set_billing_person(self, person: Person | None) -> None:
        self._commit(
            R.Mutation.BILLING_PERSON, replace(self._state, billing_person=person)
        )

    def set_payment_person(self, person: Person | None) -> None:
        self._commit(
            R.Mutation.PAYMENT_PERSON, replace(self._state, payment_person=person)
        )

    def set_apartment(self, apartment: ApartmentData | None) -> None:
        self._commit(R.Mutation.APARTMENT, replace(self._state, apartment=apartment))

    def set_preferred_date(self, preferred: PreferredDate | None) -> None:
        self._commit(
            R.Mutation.PREFERRED_DATE, replace(self._state, preferred_date=preferred)
        )

    def set_cancellation(self, cancellation: ProviderCancellation | None) -> None:
        self._commit(
            R.Mutation.CANCELLATION, replace(self._state, cancellation=cancellation)
        )

    def set_consents(self, consents: Consents) -> None:
        self._commit(R.Mutation.CONSENTS, replace(self._state, consents=consents))

    # ─────────────────────────────────────────────────────────────────────────
    # Confirmation
    # ─────────────────────────────────────────────────────────────────────────

    def acknowledge_summary(self) -> None:
        self._commit(
            R.Mutation.ACKNOWLEDGE, replace(self._state, summary_acknowledged=True)
        )

    def generate_order_number(self) -> str | None:
        """
        Mint an order number for the current configuration.

        Idempotent while confirmed. Returns None without a tariff.
        """
        existing = self._state.order_number
        if existing is not None:
            return existing
        if self._state.selection.tariff is None:
            return None

        number = self._mint()
        self._state = replace(self._state, confirmation=Confirmed(number))
        logger.info(
            "Order %s confirmed: %s, %s EUR/month",
            number,
            self._state.selection.tariff.id,
            euros(self.total_monthly()),
        )
        return number


# ═══════════════════════════════════════════════════════════════════════════════
# Step Gates
# ═══════════════════════════════════════════════════════════════════════════════


def can_navigate_to(state: OrderState, step: int) -> bool:
    """Pure gate predicate for entering `step`."""
    match step:
        case Step.ADDRESS:
            return True
        case Step.TARIFF:
            return state.address is not None and state.address.is_connected
        case Step.CUSTOMER:
            return state.selection.tariff is not None
        case Step.REVIEW:
            return state.customer is not None and state.bank is not None
        case _:
            return False


__all__ = (
    "OrderNumberFactory",
    "order_number_factory",
    "INVALID_PROMO_CODE",
    "PROMO_CODE_NOT_FOR_ADDRESS",
    "REFERRER_NOT_FOUND",
    "OrderMachine",
    "can_navigate_to",
)
