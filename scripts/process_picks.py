"""Run pick settlement once; meant for cron or a platform scheduler."""
import argparse
import logging
import sys

from motorpicks.core.config import settings
from motorpicks.core.logging import configure_logging
from motorpicks.db.session import SessionLocal
from motorpicks.services.notifications import get_mailer
from motorpicks.services.settlement import settle_all_picks

logger = logging.getLogger("process_picks")

def main(argv=None) -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("--dry-run", action="store_true", help="Grade only; write nothing and send no email")
    args = ap.parse_args(argv)
    configure_logging(settings.log_level)

    mailer = None if args.dry_run else get_mailer()
    if mailer is None and not args.dry_run:
        logger.warning("RESEND_API_KEY not set; settlement emails will be skipped")

    with SessionLocal() as db:
        results = settle_all_picks(db, mailer=mailer, dry_run=args.dry_run)

    for r in results:
        logger.info("pick %s -> %s (payout %s)", r["pick_id"], r["result"], r["payout"])
    return 0

if __name__ == "__main__":
    sys.exit(main())
