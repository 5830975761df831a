import logging
from datetime import datetime
from typing import List, Optional

from config import Database
from schemas.noticeSchema.noticeSchema import NoticeResponse
from services.noticeNotifier import NoticeSender, notify_students
from store.noticeStore import find_due_notices, get_notice, mark_notice_published
from utils.dates import to_naive_utc, utcnow

logger = logging.getLogger(__name__)


def publish_due_notices(
    database: Database,
    now: Optional[datetime] = None,
    send: Optional[NoticeSender] = None,
) -> List[str]:
    """
    Publish every notice whose publishAt has passed and notify students.

    Each notice is flipped with a conditional update, so a notice already
    published elsewhere (manual publish, another sweep) is skipped and never
    notified twice. A failure on one notice is logged and the rest of the
    batch continues. Returns the ids this sweep published.
    """
    now = to_naive_utc(now) or utcnow()
    published: List[NoticeResponse] = []

    db = database.session()
    try:
        due = find_due_notices(db, now)
        if not due:
            logger.debug("No notices to publish")
            return []

        logger.info(f"Found {len(due)} notices to publish")
        due_ids = [notice.id for notice in due]

        for notice_id in due_ids:
            try:
                if not mark_notice_published(db, notice_id):
                    logger.info(f"Notice {notice_id} was already published, skipping")
                    continue
                notice = get_notice(db, notice_id)
                if notice is None:
                    continue
                published.append(NoticeResponse.model_validate(notice))
                logger.info(f"Published notice: {notice.title} (ID: {notice_id})")
            except Exception:
                db.rollback()
                logger.exception(f"Error publishing notice {notice_id}")
    finally:
        db.close()

    for snapshot in published:
        notify_students(database, snapshot, send=send)

    return [snapshot.id for snapshot in published]
