"""
Periodic publication of scheduled notices.

The sweep re-checks for due notices on every tick instead of waking up at each
notice's exact publishAt, so a notice goes out at most one interval late.

Usage:
    python -m jobs.scheduler sweep   # one sweep, for an external cron
    python -m jobs.scheduler run     # blocking scheduler loop
"""

import logging
from typing import List, Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.schedulers.base import BaseScheduler

from config import Database, settings
from services.noticeNotifier import NoticeSender
from services.noticePublisher import publish_due_notices

logger = logging.getLogger(__name__)

PUBLISH_JOB_ID = "publish_due_notices"


def run_scheduled_sweep(database: Database, send: Optional[NoticeSender] = None) -> List[str]:
    """One scheduler tick. Never raises, so a failed sweep cannot stop later ones."""
    try:
        return publish_due_notices(database, send=send)
    except Exception:
        logger.exception("Notice publication sweep failed")
        return []


def add_publish_job(
    scheduler: BaseScheduler,
    database: Database,
    interval_seconds: Optional[int] = None,
    send: Optional[NoticeSender] = None,
):
    interval = interval_seconds or settings.PUBLISH_INTERVAL_SECONDS
    # max_instances=1: a sweep slower than the interval skips the next tick
    return scheduler.add_job(
        run_scheduled_sweep,
        trigger="interval",
        seconds=interval,
        id=PUBLISH_JOB_ID,
        kwargs={"database": database, "send": send},
        max_instances=1,
        coalesce=True,
        replace_existing=True,
    )


def build_scheduler(
    database: Database,
    interval_seconds: Optional[int] = None,
    send: Optional[NoticeSender] = None,
) -> BackgroundScheduler:
    scheduler = BackgroundScheduler(timezone="UTC")
    add_publish_job(scheduler, database, interval_seconds=interval_seconds, send=send)
    return scheduler


def main(argv: Optional[List[str]] = None) -> None:
    import argparse

    from apscheduler.schedulers.blocking import BlockingScheduler

    parser = argparse.ArgumentParser(description="Notice publication jobs")
    parser.add_argument("command", choices=["sweep", "run"], help="sweep once or run the scheduler loop")
    parser.add_argument("--interval", type=int, default=None, help="seconds between sweeps (run only)")
    args = parser.parse_args(argv)

    logging.basicConfig(level=settings.LOG_LEVEL)
    database = Database(settings.SQLALCHEMY_DATABASE_URL)
    database.create_all()

    if args.command == "sweep":
        published = run_scheduled_sweep(database)
        logger.info(f"Sweep finished, published {len(published)} notices")
        return

    scheduler = BlockingScheduler(timezone="UTC")
    add_publish_job(scheduler, database, interval_seconds=args.interval)
    logger.info(
        f"Notice publisher started - running every {args.interval or settings.PUBLISH_INTERVAL_SECONDS} seconds"
    )
    try:
        scheduler.start()
    except (KeyboardInterrupt, SystemExit):
        logger.info("Notice publisher stopped")


if __name__ == "__main__":
    main()
