"""Load official qualifying and race classifications into official_results via FastF1."""
import argparse
import logging
from datetime import datetime, timezone

import fastf1
import pandas as pd

from motorpicks.core.config import settings
from motorpicks.core.logging import configure_logging
from motorpicks.db.session import SessionLocal
from motorpicks.services.results import upsert_official_results

logger = logging.getLogger("seed_results")

if settings.fastf1_cache_dir:
    fastf1.Cache.enable_cache(settings.fastf1_cache_dir)

# FastF1 session identifier -> official_results column
SESSIONS = {"Q": "qualy_position", "R": "race_position"}

def to_opt_int(val):
    if val is None or pd.isna(val):
        return None
    try:
        return int(val)
    except (TypeError, ValueError):
        return None

def session_positions(year: int, rnd: int, identifier: str) -> dict:
    """driver full name -> classified position for one session; {} if not run yet."""
    session = fastf1.get_session(year, rnd, identifier)
    try:
        session.load(laps=False, telemetry=False, weather=False, messages=False)
    except Exception as exc:  # FastF1 raises a zoo of errors for sessions without data
        logger.warning("No %s classification for %s R%s yet: %s", identifier, year, rnd, exc)
        return {}

    results = session.results
    if results is None or len(results) == 0:
        return {}

    out = {}
    for row in results.itertuples():
        name = getattr(row, "FullName", None) or getattr(row, "BroadcastName", None)
        if not name:
            continue
        pos = getattr(row, "Position", None)
        if pos is None or pd.isna(pos):
            pos = getattr(row, "ClassifiedPosition", None)
        out[str(name)] = to_opt_int(pos)
    return out

def build_rows(year: int, rnd: int) -> list[dict]:
    merged: dict[str, dict] = {}
    for identifier, column in SESSIONS.items():
        for driver, pos in session_positions(year, rnd, identifier).items():
            merged.setdefault(driver, {"driver": driver})[column] = pos
    return list(merged.values())

def rounds_to_seed(year: int, only_round: int | None) -> list[tuple[int, str]]:
    schedule = fastf1.get_event_schedule(year, include_testing=False)
    today = datetime.now(timezone.utc).date()
    events = []
    for _, ev in schedule.iterrows():
        rnd = to_opt_int(ev.get("RoundNumber"))
        if not rnd:
            continue
        if only_round is not None and rnd != only_round:
            continue
        date_val = ev.get("EventDate")
        date = pd.to_datetime(date_val).date() if (date_val is not None and not pd.isna(date_val)) else None
        if only_round is None and (date is None or date > today):
            continue
        events.append((rnd, str(ev.get("EventName") or "Grand Prix")))
    return sorted(events)

def seed(year: int, only_round: int | None, gp_name: str | None):
    with SessionLocal() as db:
        for rnd, event_name in rounds_to_seed(year, only_round):
            rows = build_rows(year, rnd)
            if not rows:
                logger.info("Skipping %s R%s (%s): no classification yet", year, rnd, event_name)
                continue
            name = gp_name if (gp_name and only_round is not None) else event_name
            upsert_official_results(db, name, rows)

if __name__ == "__main__":
    ap = argparse.ArgumentParser()
    ap.add_argument("--season", type=int, default=datetime.now(timezone.utc).year, help="Season, e.g. 2025")
    ap.add_argument("--round", type=int, default=None, help="Only this round. Default: every round run so far")
    ap.add_argument("--gp-name", default=None,
                    help="Store under this gp_name (must match picks.gp_name); requires --round")
    args = ap.parse_args()
    configure_logging(settings.log_level)
    seed(args.season, args.round, args.gp_name)
    logger.info("Done.")
