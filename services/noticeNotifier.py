import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from config import Database, settings
from schemas.noticeSchema.noticeSchema import NoticeResponse
from send_email import send_notice_email
from store.noticeStore import get_student_emails

logger = logging.getLogger(__name__)

NoticeSender = Callable[[str, NoticeResponse], None]


@dataclass
class FanoutResult:
    sent: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)

    @property
    def attempted(self) -> int:
        return len(self.sent) + len(self.failed)


def notify_students(
    database: Database,
    notice: NoticeResponse,
    send: Optional[NoticeSender] = None,
    max_workers: Optional[int] = None,
) -> FanoutResult:
    """
    Email every student account about a freshly published notice.

    Sends run concurrently and are all waited for. A failed send is logged and
    recorded in the result; nothing is raised, so the publish that triggered
    this call is never affected. Calling twice sends twice.
    """
    send = send or send_notice_email
    result = FanoutResult()

    db = database.session()
    try:
        recipients = get_student_emails(db)
    except Exception:
        logger.exception(f"Could not load recipients for notice {notice.id}")
        return result
    finally:
        db.close()

    if not recipients:
        logger.info(f"No students to notify for notice {notice.id}")
        return result

    workers = max(1, min(max_workers or settings.MAIL_MAX_WORKERS, len(recipients)))
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="notice-mail") as pool:
        futures = {email: pool.submit(send, email, notice) for email in recipients}

    for email, future in futures.items():
        error = future.exception()
        if error is None:
            result.sent.append(email)
        else:
            result.failed[email] = str(error)
            logger.error(f"Failed to email notice {notice.id} to {email}: {error}")

    logger.info(
        f"Notice '{notice.title}' ({notice.id}): emailed {len(result.sent)} students, "
        f"{len(result.failed)} failed"
    )
    return result
