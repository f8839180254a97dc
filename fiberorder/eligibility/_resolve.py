"""
Eligibility — which add-ons the current address and tariff allow.

`resolve` derives the visible option sets from the last offer; `refilter`
drops selections that are no longer members. Both are pure.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from fiberorder.catalog import (
    Address,
    Addon,
    ConnectionType,
    NoRouter,
    Offer,
    RouterSelected,
    RouterUndecided,
    UNDECIDED,
)
from fiberorder.config import PricingPolicy
from fiberorder.state import (
    AddonLine,
    NO_PHONE,
    NO_TV,
    OrderState,
    PhoneSelection,
    Selection,
    TvKind,
    TvSelection,
)

logger = logging.getLogger(__name__)

# ═══════════════════════════════════════════════════════════════════════════════
# Eligibility
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Eligibility:
    """
    Visible option sets for one state.

    `routers` excludes the "no router" entry; declining is always allowed
    while the selector is visible.
    """

    routers: tuple[Addon, ...] = ()
    tv_packages: tuple[Addon, ...] = ()
    tv_addons: tuple[Addon, ...] = ()
    tv_hardware: tuple[Addon, ...] = ()
    tv_visible: bool = False
    phone_options: tuple[Addon, ...] = ()
    extras: tuple[Addon, ...] = ()

    @property
    def router_selector_visible(self) -> bool:
        return bool(self.routers)

    @property
    def phone_visible(self) -> bool:
        return bool(self.phone_options)

    def allows_router(self, router_id: str) -> bool:
        return any(r.id == router_id for r in self.routers)

    def allows_tv_package(self, package_id: str) -> bool:
        return any(p.id == package_id for p in self.tv_packages)


def _matches_infrastructure(router: Addon, address: Address | None) -> bool:
    if address is not None and address.uses_ftth_hardware:
        return router.ftth
    return router.fttb


def _cable_allowed(address: Address | None) -> bool:
    return (
        address is not None
        and address.connection_type is ConnectionType.FTTH
        and address.cable_tv_available
    )


def resolve(offer: Offer, address: Address | None) -> Eligibility:
    """Derive visible option sets from the provider's offer."""
    routers = tuple(
        r
        for r in offer.routers
        if not r.is_no_router and _matches_infrastructure(r, address)
    )

    tv_visible = bool(offer.tv)
    cable = _cable_allowed(address)
    packages = tuple(p for p in offer.tv if cable or not p.requires_cable_tv)

    return Eligibility(
        routers=routers,
        tv_packages=packages if tv_visible else (),
        tv_addons=offer.tv_addons if tv_visible else (),
        tv_hardware=offer.tv_hardware if tv_visible else (),
        tv_visible=tv_visible,
        phone_options=offer.phone,
        extras=offer.service + offer.installation,
    )


def eligibility_of(state: OrderState) -> Eligibility:
    return resolve(state.offer, state.address)


# ═══════════════════════════════════════════════════════════════════════════════
# Re-filter
# ═══════════════════════════════════════════════════════════════════════════════


def _current(addon: Addon, pool: tuple[Addon, ...]) -> Addon | None:
    """The record in `pool` with the same id, i.e. the price currently offered."""
    return next((a for a in pool if a.id == addon.id), None)


def _refilter_router(selection: Selection, elig: Eligibility) -> Selection:
    match selection.router:
        case RouterUndecided():
            return selection
        case NoRouter() if elig.router_selector_visible:
            return selection
        case RouterSelected(router):
            current = _current(router, elig.routers)
            if current is not None:
                if current == router:
                    return selection
                return replace(selection, router=RouterSelected(current))
    logger.debug("Router choice %s no longer eligible", selection.router)
    return replace(selection, router=UNDECIDED)


def _refilter_tv(tv: TvSelection, elig: Eligibility) -> TvSelection:
    if tv.kind is TvKind.NONE:
        return tv if tv == NO_TV else NO_TV

    if not elig.tv_visible:
        logger.debug("TV options withdrawn, clearing TV selection")
        return NO_TV

    package = None
    if tv.package is not None:
        package = _current(tv.package, elig.tv_packages)
        if package is None:
            logger.debug("TV package %s no longer eligible", tv.package.id)
            return NO_TV

    if tv.kind is TvKind.CABLE and package is None:
        return NO_TV

    hd_addon = None
    if tv.hd_addon is not None and tv.kind is TvKind.CABLE:
        hd_addon = _current(tv.hd_addon, elig.tv_addons)
    offered = (_current(item, elig.tv_hardware) for item in tv.hardware)
    hardware = tuple(item for item in offered if item is not None)
    stick = tv.stick and tv.kind is TvKind.STREAMING

    return TvSelection(
        kind=tv.kind,
        package=package,
        hd_addon=hd_addon,
        hardware=hardware,
        stick=stick,
        stick_price=tv.stick_price if stick else None,
    )


def _refilter_phone(
    phone: PhoneSelection, elig: Eligibility, policy: PricingPolicy
) -> PhoneSelection:
    if not phone.enabled:
        return phone

    if not elig.phone_options:
        logger.debug("Phone options withdrawn, resetting phone selection")
        return NO_PHONE

    option = None
    if phone.option is not None:
        option = _current(phone.option, elig.phone_options)
    if option is None:
        option = elig.phone_options[0]

    lines = policy.clamp_lines(phone.lines)
    if option == phone.option and lines == phone.lines:
        return phone
    return replace(phone, option=option, lines=lines)


def _refilter_addons(
    addons: tuple[AddonLine, ...], elig: Eligibility
) -> tuple[AddonLine, ...]:
    kept: list[AddonLine] = []
    for line in addons:
        current = _current(line.addon, elig.extras)
        if current is not None and line.quantity > 0:
            kept.append(line if current == line.addon else replace(line, addon=current))
    if len(kept) != len(addons):
        logger.debug("Dropped %d add-ons no longer offered", len(addons) - len(kept))
    return tuple(kept)


def _refilter_express(option: Addon | None, elig: Eligibility) -> Addon | None:
    """Express options must be a service or installation extra; else the fallback fee."""
    if option is None:
        return None
    current = _current(option, elig.extras)
    if current is None:
        logger.debug("Express option %s not offered, using fallback fee", option.id)
    return current


def refilter(state: OrderState, policy: PricingPolicy) -> OrderState:
    """
    Rebind every selection to the current offer's record, or clear it.

    Kept selections carry the offered prices; illegal selections fall back
    to their defaults. Nothing raises.
    """
    elig = eligibility_of(state)
    selection = _refilter_router(state.selection, elig)
    selection = replace(
        selection,
        tv=_refilter_tv(selection.tv, elig),
        phone=_refilter_phone(selection.phone, elig, policy),
        addons=_refilter_addons(selection.addons, elig),
        express_option=(
            _refilter_express(selection.express_option, elig)
            if selection.express
            else None
        ),
    )
    if selection == state.selection:
        return state
    return replace(state, selection=selection)


__all__ = (
    "Eligibility",
    "resolve",
    "eligibility_of",
    "refilter",
)
