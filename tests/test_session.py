"""Tests for the async session: provider lookups, stale responses, outages."""

import asyncio
from dataclasses import replace

import pytest
from kungfu import Error, Ok

from fiberorder.catalog import ConnectionType, Offer
from fiberorder.providers import ProviderErrorKind
from fiberorder.session import Channel, OrderSession, Outcome, RequestTags, input_key
from fiberorder.session._session import _bundle, _TariffBundle
from fiberorder.state import ReferralSource


def _value(result):
    match result:
        case Ok(value):
            return value
        case Error(e):
            pytest.fail(f"expected Ok, got {e}")


def _error(result):
    match result:
        case Ok(value):
            pytest.fail(f"expected Error, got Ok({value})")
        case Error(e):
            return e


@pytest.fixture
def session(memory, policy):
    return OrderSession(memory.bundle(), policy)


def _run(coro):
    return asyncio.run(coro)


# ═══════════════════════════════════════════════════════════════════════════════
# Request Tags
# ═══════════════════════════════════════════════════════════════════════════════


def test_request_tags_keep_latest_per_channel():
    tags = RequestTags()
    first = tags.issue(Channel.ADDRESS, "a")
    tags.issue(Channel.PROMO_CODE, "x")
    second = tags.issue(Channel.ADDRESS, "b")

    assert not tags.is_current(Channel.ADDRESS, first)
    assert tags.is_current(Channel.ADDRESS, second)
    assert tags.latest(Channel.PROMO_CODE) == "x"
    assert tags.latest(Channel.REFERRAL) is None


def test_input_key_normalizes_parts():
    assert input_key(" Fontanestraße ", "12", "FALKENSEE") == "fontanestraße|12|falkensee"


# ═══════════════════════════════════════════════════════════════════════════════
# Address
# ═══════════════════════════════════════════════════════════════════════════════


def test_search_address_applies_result(session):
    outcome = _value(_run(session.search_address("Fontanestraße", "12", "Falkensee")))

    assert outcome is Outcome.APPLIED
    address = session.machine.state.address
    assert address.connection_type is ConnectionType.FTTH
    assert address.building_id == "B-100"
    assert session.machine.can_navigate_to(2)


def test_unknown_address_is_not_found(session):
    error = _error(_run(session.search_address("Nirgendwo", "1", "Falkensee")))

    assert error.kind is ProviderErrorKind.NOT_FOUND
    assert session.machine.state.address is None


def test_address_outage_leaves_state_untouched(session, memory):
    _run(session.search_address("Fontanestraße", "12", "Falkensee"))
    before = session.machine.state
    memory.addresses.go_down()

    error = _error(_run(session.search_address("Lindenweg", "5", "Falkensee")))

    assert error.kind is ProviderErrorKind.UNAVAILABLE
    assert error.source == "address"
    assert session.machine.state is before


def test_late_address_response_is_discarded(session, memory):
    async def scenario():
        memory.addresses.latency = 0.2
        slow = asyncio.create_task(
            session.search_address("Fontanestraße", "12", "Falkensee")
        )
        await asyncio.sleep(0.05)
        memory.addresses.latency = 0.0
        fast = await session.search_address("Lindenweg", "5", "Falkensee")
        return fast, await slow

    fast, slow = _run(scenario())

    assert _value(fast) is Outcome.APPLIED
    assert _value(slow) is Outcome.STALE
    assert session.machine.state.address.street == "Lindenweg"


def test_address_change_refreshes_offer(session):
    async def scenario():
        await session.search_address("Fontanestraße", "12", "Falkensee")
        await session.choose_tariff("einfach-300")
        return await session.search_address("Lindenweg", "5", "Falkensee")

    assert _value(_run(scenario())) is Outcome.APPLIED
    elig = session.machine.eligibility()
    assert "tv-comin" not in {a.id for a in elig.tv_packages}
    assert session.machine.state.selection.tariff.id == "einfach-300"


# ═══════════════════════════════════════════════════════════════════════════════
# Tariffs
# ═══════════════════════════════════════════════════════════════════════════════


def test_list_tariffs_by_connection(session):
    assert _value(_run(session.list_tariffs())) == []

    _run(session.search_address("Bahnhofstraße", "3", "Falkensee"))
    tariffs = _value(_run(session.list_tariffs()))
    assert [t.id for t in tariffs] == ["fiber-basic-100"]


def test_choose_tariff_installs_offer_and_promotions(session):
    async def scenario():
        await session.search_address("Bahnhofstraße", "3", "Falkensee")
        return await session.choose_tariff("fiber-basic-100")

    assert _value(_run(scenario())) is Outcome.APPLIED
    state = session.machine.state
    assert state.selection.tariff.id == "fiber-basic-100"
    assert [p.id for p in state.promotions] == ["neubau-b200"]
    assert session.machine.breakdown().setup_fee.waived
    assert session.machine.total_one_time() == 0


def test_refresh_offer_applies_repriced_tariff(session, memory, tariffs):
    _run(session.search_address("Fontanestraße", "12", "Falkensee"))
    _run(session.choose_tariff("einfach-300"))
    memory.tariffs.add(replace(tariffs["einfach-300"], monthly_price=4200))

    assert _value(_run(session.refresh_offer())) is Outcome.APPLIED
    assert session.machine.state.selection.tariff.monthly_price == 4200
    assert session.machine.total_monthly() == 4200


def test_address_change_picks_up_repriced_tariff(session, memory, tariffs):
    _run(session.search_address("Fontanestraße", "12", "Falkensee"))
    _run(session.choose_tariff("einfach-300"))
    memory.tariffs.add(replace(tariffs["einfach-300"], monthly_price=4200))

    _run(session.search_address("Lindenweg", "5", "Falkensee"))

    assert session.machine.state.selection.tariff.monthly_price == 4200


def test_refresh_of_withdrawn_tariff_is_not_found(session, memory):
    _run(session.search_address("Fontanestraße", "12", "Falkensee"))
    _run(session.choose_tariff("einfach-300"))
    memory.tariffs.withdraw("einfach-300")

    error = _error(_run(session.refresh_offer()))

    assert error.kind is ProviderErrorKind.NOT_FOUND
    assert session.machine.state.selection.tariff.id == "einfach-300"


def test_tariff_bundle_shape_is_checked(tariffs):
    bundle = _bundle([tariffs["einfach-300"], Offer(), []])
    assert bundle == _TariffBundle(tariffs["einfach-300"], Offer(), [])
    assert _bundle([None, Offer(), []]).tariff is None

    with pytest.raises(TypeError):
        _bundle([Offer(), tariffs["einfach-300"], []])


def test_choose_unknown_tariff(session):
    _run(session.search_address("Fontanestraße", "12", "Falkensee"))
    error = _error(_run(session.choose_tariff("einfach-9000")))

    assert error.kind is ProviderErrorKind.NOT_FOUND
    assert session.machine.state.selection.tariff is None


def test_eligibility_outage_keeps_previous_tariff(session, memory):
    _run(session.search_address("Fontanestraße", "12", "Falkensee"))
    _run(session.choose_tariff("einfach-300"))
    memory.eligibility.go_down()

    error = _error(_run(session.choose_tariff("einfach-600")))

    assert error.kind is ProviderErrorKind.UNAVAILABLE
    assert session.machine.state.selection.tariff.id == "einfach-300"


# ═══════════════════════════════════════════════════════════════════════════════
# Promo Code & Referral
# ═══════════════════════════════════════════════════════════════════════════════


@pytest.fixture
def fontane(session):
    async def prepare():
        await session.search_address("Fontanestraße", "12", "Falkensee")
        await session.choose_tariff("einfach-300")

    _run(prepare())
    session.machine.select_router_id("router-fritzbox-5690-pro")
    return session


def test_promo_code_at_matching_street(fontane):
    assert fontane.machine.total_monthly() == 3900 + 600

    assert _value(_run(fontane.apply_promo_code("gwg-test"))) is Outcome.APPLIED

    selection = fontane.machine.state.selection
    assert selection.promo_code.code == "GWG-TEST"
    assert selection.referral.source is ReferralSource.PROMO_CODE
    assert fontane.machine.total_monthly() == 3900 + 200
    assert fontane.machine.total_one_time() == 0


def test_promo_code_at_other_street(session):
    async def scenario():
        await session.search_address("Lindenweg", "5", "Falkensee")
        await session.choose_tariff("einfach-300")
        return await session.apply_promo_code("GWG-TEST")

    assert _value(_run(scenario())) is Outcome.APPLIED
    selection = session.machine.state.selection
    assert selection.promo_code is None
    assert selection.promo_code_error is not None


def test_unknown_promo_code(fontane):
    _run(fontane.apply_promo_code("NOPE"))
    assert fontane.machine.state.selection.promo_code_error is not None
    assert fontane.machine.total_one_time() == 9900


def test_promo_code_outage(fontane, memory):
    memory.promo_codes.go_down()
    error = _error(_run(fontane.apply_promo_code("GWG-TEST")))

    assert error.kind is ProviderErrorKind.UNAVAILABLE
    assert fontane.machine.state.selection.promo_code is None


def test_valid_referral(fontane):
    assert _value(_run(fontane.validate_referral("KD123456"))) is Outcome.APPLIED

    referral = fontane.machine.state.selection.referral
    assert referral.source is ReferralSource.REFERRAL
    assert referral.validated
    assert fontane.machine.total_one_time() == 9900 - 5000


def test_invalid_referral(fontane):
    _run(fontane.validate_referral("KD000000"))

    referral = fontane.machine.state.selection.referral
    assert not referral.validated
    assert referral.error is not None
    assert fontane.machine.total_one_time() == 9900
