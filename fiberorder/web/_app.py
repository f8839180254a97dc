"""
HTTP surface — FastAPI routes over in-memory order sessions.

One `OrderSession` per session id. Every mutation route answers with the
recomputed order view.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field

import fastapi
from kungfu import Error, Ok, Result

from fiberorder import order as O
from fiberorder.config import Settings, configure_logging, load_settings
from fiberorder.order import order_number_factory
from fiberorder.providers import (
    ProviderError,
    ProviderErrorKind,
    Providers,
    seeded_providers,
)
from fiberorder.session import OrderSession, Outcome
from fiberorder.state import ReferralSource
from fiberorder.web._models import (
    AddonsIn,
    AddressIn,
    ApartmentIn,
    BankIn,
    CancellationIn,
    ConfirmOut,
    ConsentsIn,
    ContractIn,
    CustomerIn,
    ExpressIn,
    OrderOut,
    PersonIn,
    PhoneIn,
    PreferredDateIn,
    PromoCodeIn,
    ReferralIn,
    RouterIn,
    SessionOut,
    StepIn,
    SummaryOut,
    TariffIn,
    TariffOut,
    TvIn,
)

logger = logging.getLogger(__name__)

# ═══════════════════════════════════════════════════════════════════════════════
# Session Registry
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass
class SessionRegistry:
    settings: Settings
    providers: Providers
    _sessions: dict[str, OrderSession] = field(default_factory=dict[str, OrderSession])

    def create(self) -> str:
        session_id = uuid.uuid4().hex
        self._sessions[session_id] = OrderSession(
            self.providers,
            self.settings.policy,
            mint=order_number_factory(self.settings.order_number_prefix),
        )
        logger.info("Session %s started", session_id)
        return session_id

    def get(self, session_id: str) -> OrderSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise fastapi.HTTPException(status_code=404, detail="Unknown session")
        return session

    def drop(self, session_id: str) -> bool:
        return self._sessions.pop(session_id, None) is not None


def _unwrap(result: Result[Outcome, ProviderError]) -> None:
    """Map provider failures onto HTTP errors; stale responses are fine."""
    match result:
        case Ok(_):
            return
        case Error(e) if e.kind is ProviderErrorKind.NOT_FOUND:
            raise fastapi.HTTPException(status_code=404, detail=e.message)
        case Error(e):
            raise fastapi.HTTPException(
                status_code=503, detail=f"{e.source} unavailable: {e.message}"
            )


# ═══════════════════════════════════════════════════════════════════════════════
# Application Factory
# ═══════════════════════════════════════════════════════════════════════════════


def create_app(
    settings: Settings | None = None,
    providers: Providers | None = None,
) -> fastapi.FastAPI:
    """
    Build the ordering API.

    Example:
        app = create_app()                       # env settings, seeded catalog
        app = create_app(settings, my_providers) # real backends
    """
    settings = settings or load_settings()
    configure_logging(settings)
    registry = SessionRegistry(settings, providers or seeded_providers().bundle())

    app = fastapi.FastAPI(title="fiberorder")
    app.state.registry = registry

    def view(session: OrderSession) -> OrderOut:
        return OrderOut.from_domain(session.machine)

    # ─────────────────────────────────────────────────────────────────────────
    # Session lifecycle
    # ─────────────────────────────────────────────────────────────────────────

    @app.post("/sessions", status_code=201)
    async def create_session() -> SessionOut:
        return SessionOut(session_id=registry.create())

    @app.get("/sessions/{session_id}")
    async def read_session(session_id: str) -> OrderOut:
        return view(registry.get(session_id))

    @app.post("/sessions/{session_id}/reset")
    async def reset_session(session_id: str) -> OrderOut:
        session = registry.get(session_id)
        session.machine.reset()
        return view(session)

    @app.delete("/sessions/{session_id}", status_code=204)
    async def drop_session(session_id: str) -> None:
        if not registry.drop(session_id):
            raise fastapi.HTTPException(status_code=404, detail="Unknown session")

    @app.post("/sessions/{session_id}/step")
    async def set_step(session_id: str, req: StepIn) -> OrderOut:
        session = registry.get(session_id)
        session.machine.set_step(req.step)
        return view(session)

    # ─────────────────────────────────────────────────────────────────────────
    # Lookups
    # ─────────────────────────────────────────────────────────────────────────

    @app.post("/sessions/{session_id}/address")
    async def search_address(session_id: str, req: AddressIn) -> OrderOut:
        session = registry.get(session_id)
        _unwrap(
            await session.search_address(
                req.street, req.house_number, req.city, req.customer_type_domain()
            )
        )
        return view(session)

    @app.get("/sessions/{session_id}/tariffs")
    async def list_tariffs(session_id: str) -> list[TariffOut]:
        session = registry.get(session_id)
        match await session.list_tariffs():
            case Ok(tariffs):
                return [TariffOut.from_domain(t) for t in tariffs]
            case Error(e):
                raise fastapi.HTTPException(status_code=503, detail=e.message)

    @app.post("/sessions/{session_id}/tariff")
    async def choose_tariff(session_id: str, req: TariffIn) -> OrderOut:
        session = registry.get(session_id)
        _unwrap(await session.choose_tariff(req.tariff_id))
        return view(session)

    @app.post("/sessions/{session_id}/promo-code")
    async def apply_promo_code(session_id: str, req: PromoCodeIn) -> OrderOut:
        session = registry.get(session_id)
        _unwrap(await session.apply_promo_code(req.code))
        return view(session)

    @app.delete("/sessions/{session_id}/promo-code")
    async def clear_promo_code(session_id: str) -> OrderOut:
        session = registry.get(session_id)
        session.machine.clear_promo_code()
        return view(session)

    @app.post("/sessions/{session_id}/referral")
    async def set_referral(session_id: str, req: ReferralIn) -> OrderOut:
        session = registry.get(session_id)
        source = req.source_domain()
        if req.customer_number and source is ReferralSource.REFERRAL:
            _unwrap(await session.validate_referral(req.customer_number))
        else:
            session.machine.set_referral_source(source)
        return view(session)

    # ─────────────────────────────────────────────────────────────────────────
    # Selection
    # ─────────────────────────────────────────────────────────────────────────

    @app.post("/sessions/{session_id}/router")
    async def select_router(session_id: str, req: RouterIn) -> OrderOut:
        session = registry.get(session_id)
        session.machine.select_router_id(req.router_id)
        return view(session)

    @app.post("/sessions/{session_id}/tv")
    async def set_tv(session_id: str, req: TvIn) -> OrderOut:
        session = registry.get(session_id)
        session.machine.set_tv(req.to_domain(session.machine.state.offer))
        return view(session)

    @app.post("/sessions/{session_id}/phone")
    async def set_phone(session_id: str, req: PhoneIn) -> OrderOut:
        session = registry.get(session_id)
        session.machine.set_phone(req.to_domain(session.machine.state.offer))
        return view(session)

    @app.post("/sessions/{session_id}/addons")
    async def set_addons(session_id: str, req: AddonsIn) -> OrderOut:
        session = registry.get(session_id)
        session.machine.set_addons(req.to_domain(session.machine.state.offer))
        return view(session)

    @app.post("/sessions/{session_id}/contract")
    async def set_contract(session_id: str, req: ContractIn) -> OrderOut:
        session = registry.get(session_id)
        session.machine.set_contract_duration(req.months)
        return view(session)

    @app.post("/sessions/{session_id}/express")
    async def set_express(session_id: str, req: ExpressIn) -> OrderOut:
        session = registry.get(session_id)
        extras = session.machine.eligibility().extras
        option = next((a for a in extras if a.id == req.option_id), None)
        session.machine.set_express(req.enabled, option)
        return view(session)

    # ─────────────────────────────────────────────────────────────────────────
    # Personal data
    # ─────────────────────────────────────────────────────────────────────────

    @app.put("/sessions/{session_id}/customer")
    async def set_customer(session_id: str, req: CustomerIn) -> OrderOut:
        session = registry.get(session_id)
        session.machine.set_customer(req.to_domain())
        return view(session)

    @app.put("/sessions/{session_id}/bank")
    async def set_bank(session_id: str, req: BankIn) -> OrderOut:
        session = registry.get(session_id)
        session.machine.set_bank(req.to_domain())
        return view(session)

    @app.put("/sessions/{session_id}/billing-person")
    async def set_billing_person(session_id: str, req: PersonIn) -> OrderOut:
        session = registry.get(session_id)
        session.machine.set_billing_person(req.to_domain())
        return view(session)

    @app.put("/sessions/{session_id}/payment-person")
    async def set_payment_person(session_id: str, req: PersonIn) -> OrderOut:
        session = registry.get(session_id)
        session.machine.set_payment_person(req.to_domain())
        return view(session)

    @app.put("/sessions/{session_id}/apartment")
    async def set_apartment(session_id: str, req: ApartmentIn) -> OrderOut:
        session = registry.get(session_id)
        session.machine.set_apartment(req.to_domain())
        return view(session)

    @app.put("/sessions/{session_id}/preferred-date")
    async def set_preferred_date(session_id: str, req: PreferredDateIn) -> OrderOut:
        session = registry.get(session_id)
        session.machine.set_preferred_date(req.to_domain())
        return view(session)

    @app.put("/sessions/{session_id}/cancellation")
    async def set_cancellation(session_id: str, req: CancellationIn) -> OrderOut:
        session = registry.get(session_id)
        session.machine.set_cancellation(req.to_domain())
        return view(session)

    @app.put("/sessions/{session_id}/consents")
    async def set_consents(session_id: str, req: ConsentsIn) -> OrderOut:
        session = registry.get(session_id)
        session.machine.set_consents(req.to_domain())
        return view(session)

    # ─────────────────────────────────────────────────────────────────────────
    # Confirmation
    # ─────────────────────────────────────────────────────────────────────────

    @app.post("/sessions/{session_id}/confirm")
    async def confirm(session_id: str) -> ConfirmOut:
        session = registry.get(session_id)
        number = session.machine.generate_order_number()
        if number is None:
            raise fastapi.HTTPException(status_code=409, detail="No tariff selected")
        return ConfirmOut(order_number=number)

    @app.get("/sessions/{session_id}/summary")
    async def summary(session_id: str) -> SummaryOut:
        machine = registry.get(session_id).machine
        return SummaryOut.from_domain(O.summarize(machine.state, machine.policy))

    return app


__all__ = (
    "SessionRegistry",
    "create_app",
)
