"""
Order state — the immutable snapshot owned by the order machine.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from fiberorder.catalog import Address, CustomerType, Offer, Promotion
from fiberorder.state._personal import (
    ApartmentData,
    BankData,
    Consents,
    CustomerData,
    NO_CONSENTS,
    Person,
    PreferredDate,
    ProviderCancellation,
)
from fiberorder.state._selection import EMPTY_SELECTION, Selection

# ═══════════════════════════════════════════════════════════════════════════════
# Step Cursor
# ═══════════════════════════════════════════════════════════════════════════════


class Step(IntEnum):
    ADDRESS = 1
    TARIFF = 2
    CUSTOMER = 3
    REVIEW = 4


# ═══════════════════════════════════════════════════════════════════════════════
# Confirmation
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Unconfirmed:
    pass


@dataclass(frozen=True, slots=True)
class Confirmed:
    order_number: str


type Confirmation = Unconfirmed | Confirmed

UNCONFIRMED = Unconfirmed()


# ═══════════════════════════════════════════════════════════════════════════════
# Order State
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class OrderState:
    """
    Everything one browsing session knows about the order.

    `offer` and `promotions` are the last-known provider responses for the
    active tariff and address. Totals are never stored here.
    """

    step: Step = Step.ADDRESS
    customer_type: CustomerType = CustomerType.PRIVATE
    address: Address | None = None
    offer: Offer = Offer()
    promotions: tuple[Promotion, ...] = ()
    selection: Selection = EMPTY_SELECTION
    customer: CustomerData | None = None
    bank: BankData | None = None
    billing_person: Person | None = None
    payment_person: Person | None = None
    apartment: ApartmentData | None = None
    preferred_date: PreferredDate | None = None
    cancellation: ProviderCancellation | None = None
    consents: Consents = NO_CONSENTS
    summary_acknowledged: bool = False
    confirmation: Confirmation = UNCONFIRMED

    @property
    def order_number(self) -> str | None:
        match self.confirmation:
            case Confirmed(number):
                return number
            case _:
                return None

    @property
    def is_confirmed(self) -> bool:
        return isinstance(self.confirmation, Confirmed)

    @property
    def building_id(self) -> str | None:
        return self.address.building_id if self.address else None

    @property
    def tariff_id(self) -> str | None:
        tariff = self.selection.tariff
        return tariff.id if tariff else None


INITIAL_STATE = OrderState()


__all__ = (
    "Step",
    "Unconfirmed",
    "Confirmed",
    "Confirmation",
    "UNCONFIRMED",
    "OrderState",
    "INITIAL_STATE",
)
