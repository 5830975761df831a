"""Query and update contracts over the notice and account tables.

Every component reaches notices and accounts through these functions, each of
which takes an open SQLAlchemy ``Session`` from the shared ``Database`` handle.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models.authModel.authModel import AuthUser, ROLE_STUDENT
from models.noticeModel.noticeModel import Notice


class DuplicateEmailError(ValueError):
    """Raised when an account with the same email already exists."""

    def __init__(self, email: str):
        super().__init__(f"An account with email '{email}' already exists")
        self.email = email


# ----------------------------------------------------------------------
# Notices
# ----------------------------------------------------------------------
def find_due_notices(db: Session, now: datetime) -> List[Notice]:
    return (
        db.query(Notice)
        .filter(Notice.publishAt <= now, Notice.isPublished == False)  # noqa: E712
        .order_by(Notice.publishAt.asc())
        .all()
    )


def mark_notice_published(db: Session, notice_id: str) -> bool:
    """Flip ``isPublished`` to true only where it is currently false.

    Returns True when this call performed the transition. Concurrent callers
    racing on the same notice see exactly one True between them.
    """
    updated = (
        db.query(Notice)
        .filter(Notice.id == notice_id, Notice.isPublished == False)  # noqa: E712
        .update({Notice.isPublished: True}, synchronize_session=False)
    )
    db.commit()
    return updated == 1


def get_notice(db: Session, notice_id: str) -> Optional[Notice]:
    return db.query(Notice).filter(Notice.id == notice_id).first()


def paginate_notices(
    db: Session, page: int, limit: int, published_only: bool
) -> Tuple[List[Notice], int]:
    query = db.query(Notice)
    if published_only:
        query = query.filter(Notice.isPublished == True)  # noqa: E712

    total = query.count()
    items = (
        query.order_by(Notice.publishAt.desc(), Notice.createdAt.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return items, total


def create_notice(
    db: Session,
    *,
    title: str,
    description: str,
    category: str,
    publish_at: datetime,
    created_by_id: int,
    attachment_url: Optional[str] = None,
) -> Notice:
    # always created unpublished; publishing goes through mark_notice_published
    notice = Notice(
        title=title,
        description=description,
        category=category,
        attachmentUrl=attachment_url,
        publishAt=publish_at,
        isPublished=False,
        createdById=created_by_id,
    )
    db.add(notice)
    db.commit()
    db.refresh(notice)
    return notice


def update_notice_fields(db: Session, notice: Notice, changes: Dict[str, Any]) -> Notice:
    """Apply plain field changes. ``isPublished`` is not accepted here."""
    for field, value in changes.items():
        if field == "isPublished":
            raise ValueError("isPublished must be changed with mark_notice_published")
        setattr(notice, field, value)
    db.commit()
    db.refresh(notice)
    return notice


def delete_notice(db: Session, notice: Notice) -> None:
    db.delete(notice)
    db.commit()


# ----------------------------------------------------------------------
# Accounts
# ----------------------------------------------------------------------
def get_student_emails(db: Session) -> List[str]:
    rows = db.query(AuthUser.email).filter(AuthUser.role == ROLE_STUDENT).all()
    return [email for (email,) in rows]


def get_user(db: Session, user_id: int) -> Optional[AuthUser]:
    return db.query(AuthUser).filter(AuthUser.id == user_id).first()


def get_user_by_email(db: Session, email: str) -> Optional[AuthUser]:
    return db.query(AuthUser).filter(AuthUser.email == email.strip().lower()).first()


def create_user(db: Session, *, name: str, email: str, password_hash: str, role: str) -> AuthUser:
    normalized_email = email.strip().lower()
    user = AuthUser(name=name, email=normalized_email, password=password_hash, role=role)
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise DuplicateEmailError(normalized_email) from exc
    db.refresh(user)
    return user
