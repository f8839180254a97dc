"""
Request tags — last-request-wins bookkeeping for async lookups.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Channel(Enum):
    """Independent lookup streams; each keeps its own latest tag."""

    ADDRESS = "address"
    OFFER = "offer"
    PROMO_CODE = "promo-code"
    REFERRAL = "referral"


class Outcome(Enum):
    APPLIED = "applied"
    STALE = "stale"


@dataclass
class RequestTags:
    """
    Latest input key per channel.

    A response is applied only if the key it was issued with is still the
    latest one for its channel when it completes.

    Example:
        key = tags.issue(Channel.ADDRESS, "fontanestraße|12|falkensee|private")
        address = await lookup(...)
        if tags.is_current(Channel.ADDRESS, key):
            machine.set_address(address)
    """

    _latest: dict[Channel, str] = field(default_factory=dict[Channel, str])

    def issue(self, channel: Channel, key: str) -> str:
        self._latest[channel] = key
        return key

    def is_current(self, channel: Channel, key: str) -> bool:
        return self._latest.get(channel) == key

    def latest(self, channel: Channel) -> str | None:
        return self._latest.get(channel)


def input_key(*parts: object) -> str:
    """Join lookup inputs into one comparable tag."""
    return "|".join(str(p).strip().lower() for p in parts)


__all__ = (
    "Channel",
    "Outcome",
    "RequestTags",
    "input_key",
)
