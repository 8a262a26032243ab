"""Pick settlement: grade every ungraded pick against the official results.

The grading half (``grade_pick`` and helpers) is pure and works on any object
exposing ``picks``, ``mode``, ``wager_amount`` and ``multiplier``. The
persistence/notification half is ``settle_all_picks``.
"""
from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, Iterable, List, Mapping, Optional
import logging
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from motorpicks.core.config import settings
from motorpicks.models.picks import ClerkUser, OfficialResult, Pick, PickResult
from motorpicks.schemas.picks import Direction, GameMode, PickOutcome, SessionType
from motorpicks.services import notifications

logger = logging.getLogger(__name__)

# Safety Car: total selections -> {correct selections: multiplier}
SAFETY_CAR_PAYOUTS: Dict[int, Dict[int, int]] = {
    3: {3: 5, 2: 1},
    4: {4: 8, 3: 2},
    5: {5: 15, 4: 5, 3: 1},
    6: {6: 30, 5: 10, 4: 2},
    7: {7: 60, 6: 20, 5: 5},
    8: {8: 100, 7: 40, 6: 10},
}


@dataclass(frozen=True)
class Grade:
    correct_count: int
    total_picks: int
    result: PickOutcome
    payout: Decimal


def safety_car_multiplier(total_picks: int, correct_count: int) -> int:
    return SAFETY_CAR_PAYOUTS.get(total_picks, {}).get(correct_count, 0)

def _position_for(official, session_type: Optional[str]) -> Optional[int]:
    if session_type == SessionType.RACE.value:
        return official.race_position
    return official.qualy_position

def selection_is_correct(selection: Mapping, official) -> bool:
    """Strict threshold: landing exactly on the line is a miss either way."""
    if official is None:
        return False
    position = _position_for(official, selection.get("session_type"))
    if not position:
        return False
    try:
        line = float(selection.get("line"))
    except (TypeError, ValueError):
        return False
    direction = selection.get("betterOrWorse")
    if direction == Direction.BETTER.value:
        return position < line
    if direction == Direction.WORSE.value:
        return position > line
    return False

def grade_pick(pick, official_results: Iterable) -> Grade:
    by_driver = {r.driver: r for r in official_results}
    selections = pick.picks or []
    correct = sum(1 for sel in selections if selection_is_correct(sel, by_driver.get(sel.get("driver"))))
    total = len(selections)
    wager = Decimal(str(pick.wager_amount))

    result, payout = PickOutcome.LOST, Decimal("0")
    if pick.mode == GameMode.FULL_THROTTLE.value:
        if correct == total:
            result, payout = PickOutcome.WON, wager * pick.multiplier
    elif pick.mode == GameMode.SAFETY_CAR.value:
        multiplier = safety_car_multiplier(total, correct)
        if multiplier > 0:
            payout = wager * multiplier
            result = PickOutcome.WON if correct == total else PickOutcome.PARTIAL
    else:
        logger.warning("Pick %s has unknown mode %r; grading as lost", getattr(pick, "id", None), pick.mode)

    return Grade(correct_count=correct, total_picks=total, result=result, payout=payout)

# -----------------------
# Effectful shell
# -----------------------
def _already_settled(db: Session, pick_id: int) -> bool:
    return db.execute(
        select(PickResult.id).where(PickResult.pick_id == pick_id).limit(1)
    ).first() is not None

def _official_results(db: Session, gp_name: str) -> List[OfficialResult]:
    return list(db.scalars(select(OfficialResult).where(OfficialResult.gp_name == gp_name)))

def _insert_result(db: Session, pick: Pick, grade: Grade) -> bool:
    """Insert the result row; False when another run got there first."""
    row = PickResult(
        pick_id=pick.id,
        user_id=pick.user_id,
        gp_name=pick.gp_name,
        session_type=pick.session_type,
        picks=pick.picks,
        correct_count=grade.correct_count,
        total_picks=grade.total_picks,
        mode=pick.mode,
        result=grade.result.value,
        payout=grade.payout,
        processed_at=datetime.now(timezone.utc),
    )
    try:
        with db.begin_nested():
            db.add(row)
    except IntegrityError:
        logger.info("Pick %s was settled concurrently; skipping", pick.id)
        return False
    db.commit()
    return True

def _notify(db: Session, mailer, pick: Pick, grade: Grade) -> None:
    if mailer is None:
        return
    user = db.get(ClerkUser, pick.user_id)
    if user is None or not user.email:
        return
    subject, html = notifications.settlement_email(
        user.full_name, pick.gp_name, pick.mode, grade.correct_count,
        grade.total_picks, grade.result.value, settings.dashboard_url,
    )
    notifications.send_quietly(mailer, user.email, subject, html)

def settle_all_picks(db: Session, mailer=None, dry_run: bool = False) -> List[dict]:
    """
    Grade every pick that has no result yet.

    Re-running is safe: settled picks are skipped and left out of the
    returned summaries. Database errors propagate and end the run; results
    committed before the failure stay committed.
    """
    summaries: List[dict] = []
    picks = db.scalars(select(Pick).order_by(Pick.id)).all()
    results_cache: Dict[str, List[OfficialResult]] = {}

    for pick in picks:
        if _already_settled(db, pick.id):
            continue

        if pick.gp_name not in results_cache:
            results_cache[pick.gp_name] = _official_results(db, pick.gp_name)
        grade = grade_pick(pick, results_cache[pick.gp_name])

        if not dry_run:
            if not _insert_result(db, pick, grade):
                continue
            _notify(db, mailer, pick, grade)

        summaries.append({"pick_id": pick.id, "result": grade.result.value, "payout": grade.payout})

    logger.info("Settlement run graded %d pick(s)%s", len(summaries), " (dry run)" if dry_run else "")
    return summaries
