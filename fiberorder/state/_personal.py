"""
Personal data collected in step 3. Survives back-navigation.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum


@dataclass(frozen=True, slots=True)
class CustomerData:
    salutation: str
    first_name: str
    last_name: str
    email: str
    phone: str
    birth_date: date | None = None
    company: str | None = None


@dataclass(frozen=True, slots=True)
class BankData:
    account_holder: str
    iban: str
    bic: str | None = None
    sepa_mandate: bool = True


@dataclass(frozen=True, slots=True)
class Person:
    """Alternate billing or payment person."""

    salutation: str
    first_name: str
    last_name: str
    street: str | None = None
    house_number: str | None = None
    postal_code: str | None = None
    city: str | None = None


@dataclass(frozen=True, slots=True)
class ApartmentData:
    floor: str | None = None
    apartment: str | None = None


class DateKind(Enum):
    ASAP = "asap"
    SPECIFIC = "specific"


@dataclass(frozen=True, slots=True)
class PreferredDate:
    kind: DateKind = DateKind.ASAP
    day: date | None = None


@dataclass(frozen=True, slots=True)
class ProviderCancellation:
    cancel_previous: bool = False
    provider_name: str | None = None
    customer_number: str | None = None
    phone_number: str | None = None


@dataclass(frozen=True, slots=True)
class Consents:
    terms: bool = False
    privacy: bool = False
    advertising: bool = False


NO_CONSENTS = Consents()


__all__ = (
    "CustomerData",
    "BankData",
    "Person",
    "ApartmentData",
    "DateKind",
    "PreferredDate",
    "ProviderCancellation",
    "Consents",
    "NO_CONSENTS",
)
