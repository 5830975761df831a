import logging
import math
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from config import get_db
from decorators.allow_roles import admin_only
from models.authModel.authModel import AuthUser, ROLE_ADMIN
from schemas.noticeSchema.noticeSchema import NoticeCreate, NoticeResponse, NoticeUpdate, PaginatedNotices
from services.noticeNotifier import notify_students
from store import noticeStore
from utils.dates import to_naive_utc, utcnow
from utils.utils import get_notice_reader

router = APIRouter(prefix="/api/notices", tags=["Notices"])
logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


def _paginate(db: Session, page: int, limit: int, published_only: bool) -> dict:
    # oversized pages are clamped, not rejected
    limit = min(limit, MAX_PAGE_SIZE)
    notices, total = noticeStore.paginate_notices(db, page, limit, published_only)
    return {
        "data": notices,
        "page": page,
        "totalPages": math.ceil(total / limit),
        "total": total,
    }


def _publish_and_notify(
    request: Request,
    db: Session,
    notice_id: str,
    background_tasks: BackgroundTasks,
):
    """Publish a notice and, if this call made the transition, queue the fan-out."""
    if noticeStore.mark_notice_published(db, notice_id):
        notice = noticeStore.get_notice(db, notice_id)
        snapshot = NoticeResponse.model_validate(notice)
        background_tasks.add_task(
            notify_students,
            request.app.state.database,
            snapshot,
            request.app.state.send_notice,
        )
        logger.info(f"Notice {notice_id} published manually, notifying students")
    return noticeStore.get_notice(db, notice_id)


# 🔵 READ (PUBLISHED)
@router.get("", response_model=PaginatedNotices)
def get_published_notices(
    db: Session = Depends(get_db),
    reader: Optional[AuthUser] = Depends(get_notice_reader),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
):
    try:
        return _paginate(db, page, limit, published_only=True)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


# 🔵 READ (ALL, admin)
@router.get("/all", response_model=PaginatedNotices)
def get_all_notices(
    db: Session = Depends(get_db),
    admin: AuthUser = Depends(admin_only),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
):
    try:
        return _paginate(db, page, limit, published_only=False)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


# 🔵 READ (BY ID)
@router.get("/{notice_id}", response_model=NoticeResponse)
def get_notice_by_id(
    notice_id: str,
    db: Session = Depends(get_db),
    reader: Optional[AuthUser] = Depends(get_notice_reader),
):
    try:
        notice = noticeStore.get_notice(db, notice_id)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

    is_admin = reader is not None and reader.role == ROLE_ADMIN
    # unpublished notices do not exist for non-admin readers
    if not notice or (not notice.isPublished and not is_admin):
        raise HTTPException(status_code=404, detail="Notice not found")
    return notice


# 🟢 CREATE
@router.post("", response_model=NoticeResponse, status_code=status.HTTP_201_CREATED)
def create_notice(
    request: Request,
    payload: NoticeCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    admin: AuthUser = Depends(admin_only),
):
    try:
        notice = noticeStore.create_notice(
            db,
            title=payload.title,
            description=payload.description,
            category=payload.category,
            attachment_url=payload.attachmentUrl,
            publish_at=to_naive_utc(payload.publishAt) or utcnow(),
            created_by_id=admin.id,
        )
        logger.info(f"Notice {notice.id} created by admin {admin.id}, publishAt {notice.publishAt}")

        if payload.isPublished:
            notice = _publish_and_notify(request, db, notice.id, background_tasks)
        return notice
    except HTTPException as http_exc:
        raise http_exc
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


# 🟠 UPDATE
@router.put("/{notice_id}", response_model=NoticeResponse)
def update_notice(
    request: Request,
    notice_id: str,
    payload: NoticeUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    admin: AuthUser = Depends(admin_only),
):
    try:
        notice = noticeStore.get_notice(db, notice_id)
        if not notice:
            raise HTTPException(status_code=404, detail="Notice not found")

        changes = payload.model_dump(exclude_unset=True)
        publish = changes.pop("isPublished", None)

        if publish is False and notice.isPublished:
            raise HTTPException(status_code=400, detail="Published notices cannot be unpublished")

        # required columns: an explicit null leaves the stored value alone
        for field in ("title", "description", "category", "publishAt"):
            if field in changes and changes[field] is None:
                changes.pop(field)
        if "publishAt" in changes:
            changes["publishAt"] = to_naive_utc(changes["publishAt"])

        if changes:
            notice = noticeStore.update_notice_fields(db, notice, changes)

        if publish:
            notice = _publish_and_notify(request, db, notice_id, background_tasks)
        return notice
    except HTTPException as http_exc:
        raise http_exc
    except Exception as e:
        logger.error(f"Update notice error: {e}")
        raise HTTPException(status_code=500, detail=str(e))


# 🔴 DELETE
@router.delete("/{notice_id}")
def delete_notice(
    notice_id: str,
    db: Session = Depends(get_db),
    admin: AuthUser = Depends(admin_only),
):
    try:
        notice = noticeStore.get_notice(db, notice_id)
        if not notice:
            raise HTTPException(status_code=404, detail="Notice not found")
        noticeStore.delete_notice(db, notice)
    except HTTPException as http_exc:
        raise http_exc
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
    return {"message": "Notice deleted", "id": notice_id}
