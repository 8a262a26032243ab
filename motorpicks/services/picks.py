from decimal import Decimal
from typing import List, Optional
import logging
from sqlalchemy import select
from sqlalchemy.orm import Session
from motorpicks.core.config import settings
from motorpicks.core.errors import InvalidPick
from motorpicks.models.picks import ClerkUser, Pick, PickResult
from motorpicks.schemas.picks import GameMode, PickCreate
from motorpicks.services import notifications, wallet as wallet_service

logger = logging.getLogger(__name__)

MIN_SELECTIONS = 2
MAX_SELECTIONS = 8
MIN_SAFETY_CAR_SELECTIONS = 3

# Headline multiplier shown on the ticket. Safety Car settles against
# settlement.SAFETY_CAR_PAYOUTS; this is its top-tier display value.
FULL_THROTTLE_MULTIPLIERS = {2: 3, 3: 6, 4: 10, 5: 20, 6: 35, 7: 60, 8: 100}
SAFETY_CAR_DISPLAY_MULTIPLIERS = {3: 2, 4: 5, 5: 10, 6: 20, 7: 30, 8: 50}


def multiplier_for(mode: GameMode, count: int) -> int:
    table = FULL_THROTTLE_MULTIPLIERS if mode == GameMode.FULL_THROTTLE else SAFETY_CAR_DISPLAY_MULTIPLIERS
    return table.get(count, 0)

def validate_pick(payload: PickCreate) -> None:
    count = len(payload.picks)
    if count < MIN_SELECTIONS or count > MAX_SELECTIONS:
        raise InvalidPick("Nº de picks inválido")
    if payload.wager_amount < settings.min_wager_cop:
        raise InvalidPick(f"Monto mínimo ${settings.min_wager_cop:,}")
    if payload.mode == GameMode.SAFETY_CAR and count < MIN_SAFETY_CAR_SELECTIONS:
        raise InvalidPick("Safety requiere ≥3 picks")

    seen = set()
    for sel in payload.picks:
        if sel.better_or_worse is None:
            raise InvalidPick(f"Falta elegir mejor/peor para {sel.driver}")
        if sel.gp_name and sel.gp_name != payload.gp_name:
            raise InvalidPick(f"{sel.driver} pertenece a otro GP ({sel.gp_name})")
        key = (sel.driver, sel.session_type)
        if key in seen:
            raise InvalidPick(f"{sel.driver} repetido en la misma sesión")
        seen.add(key)

def _session_type_of(payload: PickCreate) -> str:
    kinds = {sel.session_type.value for sel in payload.picks}
    return kinds.pop() if len(kinds) == 1 else "mixed"

def submit_pick(db: Session, user_id: str, payload: PickCreate, mailer=None) -> Pick:
    """Validate, charge the wager to the wallet and store the pick."""
    validate_pick(payload)
    count = len(payload.picks)
    multiplier = multiplier_for(payload.mode, count)
    wager = Decimal(payload.wager_amount)

    wallet_service.debit_balance(
        db, user_id, wager, "pick_bet", f"Picks {payload.mode.value} - {payload.gp_name}",
    )
    selections = [
        {**sel.model_dump(by_alias=True, mode="json"), "gp_name": payload.gp_name}
        for sel in payload.picks
    ]
    pick = Pick(
        user_id=user_id,
        name=payload.full_name,
        gp_name=payload.gp_name,
        session_type=_session_type_of(payload),
        picks=selections,
        mode=payload.mode.value,
        multiplier=multiplier,
        wager_amount=wager,
        potential_win=wager * multiplier,
    )
    db.add(pick)
    db.commit()
    db.refresh(pick)
    logger.info("Pick %s stored for %s (%s, %d selections)", pick.id, user_id, pick.mode, count)

    if mailer is not None:
        user = db.get(ClerkUser, user_id)
        if user is not None:
            subject, html = notifications.pick_confirmation_email(
                user.full_name or payload.full_name, pick.mode, wager, selections,
                f"{settings.site_url.rstrip('/')}/wallet",
            )
            notifications.send_quietly(mailer, user.email, subject, html)
    return pick

def list_pick_results(db: Session, user_id: str, gp_name: Optional[str] = None) -> List[PickResult]:
    stmt = select(PickResult).where(PickResult.user_id == user_id)
    if gp_name:
        stmt = stmt.where(PickResult.gp_name == gp_name)
    return list(db.scalars(stmt.order_by(PickResult.processed_at.desc(), PickResult.id.desc())))
