"""Tests for the order machine: navigation, mutations and confirmation."""

import re

import pytest

from fiberorder import order as O
from fiberorder.catalog import (
    NO_ROUTER,
    UNDECIDED,
    Addon,
    AddonCategory,
    CustomerType,
    Offer,
    PromoCode,
    RouterSelected,
)
from fiberorder.state import (
    INITIAL_STATE,
    Consents,
    PhoneSelection,
    PreferredDate,
    ReferralSource,
    Selection,
    Step,
)

# ═══════════════════════════════════════════════════════════════════════════════
# Navigation
# ═══════════════════════════════════════════════════════════════════════════════


def test_fresh_machine_starts_on_address_step(machine):
    assert machine.state == INITIAL_STATE
    assert machine.state.step is Step.ADDRESS
    assert machine.can_navigate_to(1)
    assert not machine.can_navigate_to(2)


@pytest.mark.parametrize("step", [0, 5, -1])
def test_out_of_range_steps_are_rejected(machine, step):
    assert machine.set_step(step) is False
    assert machine.state.step is Step.ADDRESS


def test_failed_gate_leaves_state_unchanged(machine, unconnected_address):
    machine.set_address(unconnected_address)
    before = machine.state

    assert machine.set_step(2) is False
    assert machine.state is before


def test_forward_gates(configured, customer, bank):
    assert configured.state.step is Step.TARIFF
    assert configured.set_step(4) is False

    assert configured.set_step(3) is True
    assert configured.set_step(4) is False

    configured.set_customer(customer)
    assert configured.set_step(4) is False
    configured.set_bank(bank)
    assert configured.set_step(4) is True


def test_tariff_gate_needs_selected_tariff(machine, ftth_address):
    machine.set_address(ftth_address)
    assert machine.set_step(2)
    assert not machine.can_navigate_to(3)


def test_back_to_customer_step_keeps_selection(confirmed):
    router = confirmed.state.selection.router

    assert confirmed.set_step(3)
    assert confirmed.state.selection.router == router
    assert confirmed.state.order_number == "COM-TEST0001"


def test_back_to_tariff_step_resets_selection_but_not_personal_data(
    confirmed, customer, bank, tariffs
):
    assert confirmed.set_step(2)

    state = confirmed.state
    assert state.step is Step.TARIFF
    assert state.selection == Selection(tariff=tariffs["einfach-300"])
    assert state.customer == customer
    assert state.bank == bank
    assert state.order_number is None


def test_reset_returns_to_initial_state(confirmed):
    confirmed.reset()
    assert confirmed.state == INITIAL_STATE


# ═══════════════════════════════════════════════════════════════════════════════
# Selection Mutations
# ═══════════════════════════════════════════════════════════════════════════════


def test_select_router_by_id(configured, full_offer):
    configured.select_router_id("router-fritzbox-5690")
    assert configured.state.selection.router == RouterSelected(
        full_offer.find("router-fritzbox-5690")
    )

    configured.select_router_id("router-none")
    assert configured.state.selection.router == NO_ROUTER

    configured.select_router_id("router-unknown")
    assert configured.state.selection.router == UNDECIDED


def test_ineligible_router_is_not_kept(configured):
    configured.select_router_id("router-fritzbox-7690")
    assert configured.state.selection.router == UNDECIDED


def _router(price):
    return Addon("router-r1", "R1", AddonCategory.ROUTER, monthly_price=price)


def _service(price):
    return Addon("service-s1", "S1", AddonCategory.SERVICE, monthly_price=price)


def test_new_offer_reprices_existing_selections(configured):
    configured.set_offer(Offer(routers=(_router(999),), service=(_service(100),)))
    configured.select_router_id("router-r1")
    configured.toggle_addon(_service(100))
    assert configured.total_monthly() == 3900 + 999 + 100

    configured.set_offer(Offer(routers=(_router(1999),), service=(_service(500),)))

    assert configured.state.selection.router == RouterSelected(_router(1999))
    assert configured.state.selection.addons[0].addon == _service(500)
    assert configured.total_monthly() == 3900 + 1999 + 500


def test_router_priced_from_offer_not_from_caller(configured):
    configured.set_offer(Offer(routers=(_router(999),)))

    configured.select_router(RouterSelected(_router(1)))

    assert configured.state.selection.router == RouterSelected(_router(999))
    assert configured.breakdown().router.catalog_monthly == 999
    assert configured.breakdown().router.monthly == 999


def test_customer_type_change_clears_router(configured):
    configured.select_router_id("router-fritzbox-5690")
    configured.set_customer_type(CustomerType.BUSINESS)
    assert configured.state.selection.router == UNDECIDED


def test_address_change_clears_router(configured, ftth_no_cable_address):
    configured.select_router_id("router-fritzbox-5690")
    configured.set_address(ftth_no_cable_address)
    assert configured.state.selection.router == UNDECIDED


def test_phone_lines_are_clamped(configured, full_offer):
    flat = full_offer.find("phone-flat-festnetz")
    configured.set_phone(PhoneSelection(enabled=True, option=flat, lines=50))
    assert configured.state.selection.phone.lines == 10

    configured.set_phone(PhoneSelection(enabled=True, option=flat, lines=0))
    assert configured.state.selection.phone.lines == 1


def test_phone_disabled_on_tariff_with_bundled_phone(machine, limited_address, tariffs, full_offer):
    machine.set_address(limited_address)
    machine.select_tariff(tariffs["fiber-basic-100"], offer=full_offer)
    flat = full_offer.find("phone-flat-festnetz")

    machine.set_phone(PhoneSelection(enabled=True, option=flat, lines=2))

    assert machine.state.selection.phone.enabled is False
    assert machine.breakdown().phone_monthly == 0


def test_contract_duration_only_accepts_known_terms(configured):
    configured.set_contract_duration(6)
    assert configured.state.selection.contract_months == 24


def test_short_contract_rejected_for_long_term_family(configured):
    configured.set_contract_duration(12)
    assert configured.state.selection.contract_months == 24


def test_toggle_addon_adds_then_removes(configured, full_offer):
    static_ip = full_offer.find("service-static-ip")
    configured.toggle_addon(static_ip)
    assert [line.addon.id for line in configured.state.selection.addons] == [
        "service-static-ip"
    ]

    configured.toggle_addon(static_ip)
    assert configured.state.selection.addons == ()


# ═══════════════════════════════════════════════════════════════════════════════
# Promo Code & Referral
# ═══════════════════════════════════════════════════════════════════════════════


def test_unknown_promo_code_only_sets_error(confirmed):
    before = confirmed.total_monthly(), confirmed.total_one_time()

    confirmed.record_promo_code("NOPE", None)

    selection = confirmed.state.selection
    assert selection.promo_code is None
    assert selection.promo_code_error == O.INVALID_PROMO_CODE
    assert (confirmed.total_monthly(), confirmed.total_one_time()) == before
    assert confirmed.state.order_number == "COM-TEST0001"


def test_promo_code_for_other_street_is_rejected(configured):
    code = PromoCode("GWG", valid_addresses=("lindenweg",), setup_fee_waived=True)
    configured.record_promo_code("GWG", code)

    assert configured.state.selection.promo_code is None
    assert configured.state.selection.promo_code_error == O.PROMO_CODE_NOT_FOR_ADDRESS
    assert configured.breakdown().setup_fee.waived is False


def test_promo_code_replaces_referral(configured):
    configured.set_referral_source(ReferralSource.REFERRAL)
    configured.record_referral_check("KD123456", valid=True)
    assert configured.breakdown().referral_bonus == 5000

    configured.record_promo_code("ANY", PromoCode("ANY"))

    referral = configured.state.selection.referral
    assert referral.source is ReferralSource.PROMO_CODE
    assert referral.validated is False
    assert configured.breakdown().referral_bonus == 0


def test_leaving_promo_code_source_drops_code(configured):
    configured.record_promo_code("ANY", PromoCode("ANY", setup_fee_waived=True))
    assert configured.total_one_time() == 0

    configured.set_referral_source(ReferralSource.REFERRAL)

    assert configured.state.selection.promo_code is None
    assert configured.total_one_time() == 9900


def test_clear_promo_code(configured):
    configured.record_promo_code("ANY", PromoCode("ANY"))
    configured.clear_promo_code()

    selection = configured.state.selection
    assert selection.promo_code is None
    assert selection.referral.source is ReferralSource.NONE


def test_failed_referral_check_records_error(configured):
    configured.set_referral_source(ReferralSource.REFERRAL)
    configured.record_referral_check("KD000000", valid=False)

    referral = configured.state.selection.referral
    assert referral.validated is False
    assert referral.error == O.REFERRER_NOT_FOUND
    assert configured.breakdown().referral_bonus == 0


def test_referral_check_ignored_for_other_sources(configured):
    configured.record_referral_check("KD123456", valid=True)
    assert configured.state.selection.referral.source is ReferralSource.NONE
    assert configured.breakdown().referral_bonus == 0


# ═══════════════════════════════════════════════════════════════════════════════
# Confirmation
# ═══════════════════════════════════════════════════════════════════════════════


def test_order_number_needs_tariff(machine):
    assert machine.generate_order_number() is None
    assert machine.state.order_number is None


def test_generate_is_idempotent_while_confirmed(confirmed):
    assert confirmed.state.order_number == "COM-TEST0001"
    assert confirmed.generate_order_number() == "COM-TEST0001"
    assert confirmed.state.is_confirmed


def test_reselecting_same_router_invalidates(confirmed):
    confirmed.select_router_id("router-fritzbox-5690-pro")

    assert confirmed.state.order_number is None
    assert confirmed.generate_order_number() == "COM-TEST0002"


def test_personal_data_keeps_confirmation(confirmed, customer):
    confirmed.acknowledge_summary()
    confirmed.set_customer(customer)
    confirmed.set_preferred_date(PreferredDate())
    confirmed.set_consents(Consents(terms=True, privacy=True))

    assert confirmed.state.order_number == "COM-TEST0001"
    assert confirmed.state.summary_acknowledged is True


def test_priced_change_drops_acknowledgement(confirmed):
    confirmed.acknowledge_summary()
    confirmed.set_express(True)

    assert confirmed.state.summary_acknowledged is False
    assert not confirmed.state.is_confirmed


def test_default_order_number_format():
    mint = O.order_number_factory("COM")
    first, second = mint(), mint()
    assert re.fullmatch(r"COM-[0-9A-F]{10}", first)
    assert first != second


# ═══════════════════════════════════════════════════════════════════════════════
# Summary
# ═══════════════════════════════════════════════════════════════════════════════


def test_summary_reflects_one_snapshot(confirmed, customer, bank):
    summary = O.summarize(confirmed.state, confirmed.policy)

    assert summary.order_number == "COM-TEST0001"
    assert summary.tariff.id == "einfach-300"
    assert summary.router.id == "router-fritzbox-5690-pro"
    assert summary.router.price.monthly == 600
    assert summary.customer == customer
    assert summary.bank == bank
    assert summary.total_monthly == confirmed.total_monthly() == 3900 + 600
    assert summary.total_one_time == confirmed.total_one_time() == 9900


def test_summary_without_router_choice(configured):
    assert O.summarize(configured.state, configured.policy).router is None

    configured.select_router_id("router-none")
    line = O.summarize(configured.state, configured.policy).router
    assert line.id is None
    assert line.price.monthly == 0
