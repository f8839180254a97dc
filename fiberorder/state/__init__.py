"""
State — immutable snapshots of one order in progress.

Usage:
    from fiberorder import state as S

    s = S.INITIAL_STATE
    s.selection.router        # RouterChoice
    s.order_number            # None until confirmed
"""

from fiberorder.state._selection import (
    TvKind,
    TvSelection,
    NO_TV,
    PortingData,
    PhoneBookEntry,
    PhoneSelection,
    NO_PHONE,
    AddonLine,
    ReferralSource,
    ReferralData,
    NO_REFERRAL,
    Selection,
    EMPTY_SELECTION,
)
from fiberorder.state._personal import (
    CustomerData,
    BankData,
    Person,
    ApartmentData,
    DateKind,
    PreferredDate,
    ProviderCancellation,
    Consents,
    NO_CONSENTS,
)
from fiberorder.state._order import (
    Step,
    Unconfirmed,
    Confirmed,
    Confirmation,
    UNCONFIRMED,
    OrderState,
    INITIAL_STATE,
)

__all__ = (
    # Selection
    "TvKind",
    "TvSelection",
    "NO_TV",
    "PortingData",
    "PhoneBookEntry",
    "PhoneSelection",
    "NO_PHONE",
    "AddonLine",
    "ReferralSource",
    "ReferralData",
    "NO_REFERRAL",
    "Selection",
    "EMPTY_SELECTION",
    # Personal data
    "CustomerData",
    "BankData",
    "Person",
    "ApartmentData",
    "DateKind",
    "PreferredDate",
    "ProviderCancellation",
    "Consents",
    "NO_CONSENTS",
    # Order
    "Step",
    "Unconfirmed",
    "Confirmed",
    "Confirmation",
    "UNCONFIRMED",
    "OrderState",
    "INITIAL_STATE",
)
