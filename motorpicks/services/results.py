from typing import Dict, Iterable, List, Optional
import logging
from sqlalchemy import select
from sqlalchemy.orm import Session
from motorpicks.models.picks import OfficialResult

logger = logging.getLogger(__name__)


def _opt_position(val) -> Optional[int]:
    if val is None:
        return None
    try:
        pos = int(val)
    except (TypeError, ValueError):
        return None
    return pos if pos > 0 else None

def get_official_results(db: Session, gp_name: str) -> List[OfficialResult]:
    return list(db.scalars(
        select(OfficialResult)
        .where(OfficialResult.gp_name == gp_name)
        .order_by(OfficialResult.race_position.is_(None), OfficialResult.race_position, OfficialResult.driver)
    ))

def upsert_official_results(db: Session, gp_name: str, rows: Iterable[Dict]) -> int:
    """
    Insert or update positions per driver for one GP.

    Each row needs ``driver`` plus optional ``qualy_position`` / ``race_position``.
    A position key that is absent leaves the stored value alone, so the
    qualifying and race sessions can be loaded separately.
    """
    existing = {r.driver: r for r in db.scalars(
        select(OfficialResult).where(OfficialResult.gp_name == gp_name)
    )}
    touched = 0
    for row in rows:
        driver = (row.get("driver") or "").strip()
        if not driver:
            continue
        rec = existing.get(driver)
        if rec is None:
            rec = OfficialResult(gp_name=gp_name, driver=driver)
            db.add(rec)
            existing[driver] = rec
        if "qualy_position" in row:
            rec.qualy_position = _opt_position(row["qualy_position"])
        if "race_position" in row:
            rec.race_position = _opt_position(row["race_position"])
        touched += 1
    db.commit()
    logger.info("Stored %d official result row(s) for %s", touched, gp_name)
    return touched
