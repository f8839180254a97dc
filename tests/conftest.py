"""Pytest fixtures: seeded catalog, addresses and ready-made machines."""

import pytest

from fiberorder import providers as X
from fiberorder.catalog import (
    Address,
    Addon,
    AddonCategory,
    ConnectionType,
    Offer,
    Tariff,
)
from fiberorder.config import PricingPolicy
from fiberorder.order import OrderMachine
from fiberorder.state import BankData, CustomerData


def _counter_mint():
    counter = iter(range(1, 10_000))
    return lambda: f"COM-TEST{next(counter):04d}"


@pytest.fixture
def policy() -> PricingPolicy:
    return PricingPolicy()


@pytest.fixture
def memory() -> X.MemoryProviders:
    return X.seeded_providers()


@pytest.fixture
def tariffs() -> dict[str, Tariff]:
    return {t.id: t for t in X.TARIFFS}


@pytest.fixture
def full_offer() -> Offer:
    return Offer(
        routers=X.ROUTERS,
        tv=X.TV_PACKAGES,
        tv_addons=X.TV_ADDONS,
        tv_hardware=X.TV_HARDWARE,
        phone=X.PHONE_OPTIONS,
        service=X.SERVICE_OPTIONS,
        installation=X.INSTALLATION_OPTIONS,
    )


@pytest.fixture
def ftth_address() -> Address:
    return Address(
        "Fontanestraße",
        "12",
        "Falkensee",
        ConnectionType.FTTH,
        building_id="B-100",
        residential_units=24,
        cable_tv_available=True,
    )


@pytest.fixture
def ftth_no_cable_address() -> Address:
    return Address(
        "Lindenweg",
        "5",
        "Falkensee",
        ConnectionType.FTTH,
        building_id="B-150",
        cable_tv_available=False,
    )


@pytest.fixture
def limited_address() -> Address:
    return Address(
        "Bahnhofstraße",
        "3",
        "Falkensee",
        ConnectionType.LIMITED,
        building_id="B-200",
        cable_tv_available=True,
    )


@pytest.fixture
def unconnected_address() -> Address:
    return Address("Feldweg", "9", "Falkensee", ConnectionType.NOT_CONNECTED)


@pytest.fixture
def scenario_tariff() -> Tariff:
    return Tariff("einfach-x", "einfach X", 4990, 9900, family="einfach")


@pytest.fixture
def scenario_router() -> Addon:
    return Addon(
        "router-x",
        "Router X",
        AddonCategory.ROUTER,
        monthly_price=999,
        one_time_price=0,
        discounted_price=599,
    )


@pytest.fixture
def customer() -> CustomerData:
    return CustomerData("Frau", "Erika", "Mustermann", "erika@example.com", "0301234567")


@pytest.fixture
def bank() -> BankData:
    return BankData("Erika Mustermann", "DE89370400440532013000")


@pytest.fixture
def machine(policy: PricingPolicy) -> OrderMachine:
    return OrderMachine(policy, mint=_counter_mint())


@pytest.fixture
def configured(
    machine: OrderMachine,
    ftth_address: Address,
    tariffs: dict[str, Tariff],
    full_offer: Offer,
) -> OrderMachine:
    """Address set, einfach 300 chosen with the full offer, on step 2."""
    machine.set_address(ftth_address)
    machine.set_step(2)
    machine.select_tariff(tariffs["einfach-300"], offer=full_offer)
    return machine


@pytest.fixture
def confirmed(configured: OrderMachine, customer: CustomerData, bank: BankData) -> OrderMachine:
    """Fully configured order on the review step with a minted order number."""
    configured.select_router_id("router-fritzbox-5690-pro")
    configured.set_step(3)
    configured.set_customer(customer)
    configured.set_bank(bank)
    configured.set_step(4)
    configured.generate_order_number()
    return configured
