from datetime import timedelta

import pytest

from store.noticeStore import (
    DuplicateEmailError,
    create_notice,
    create_user,
    find_due_notices,
    get_notice,
    get_student_emails,
    mark_notice_published,
    paginate_notices,
    update_notice_fields,
)
from utils.dates import utcnow


def _notice(session, author, publish_at, title="Exam schedule"):
    return create_notice(
        session,
        title=title,
        description="Mid-term exams start next week.",
        category="exams",
        publish_at=publish_at,
        created_by_id=author.id,
    )


def test_find_due_notices_only_returns_past_unpublished(session, add_user) -> None:
    admin = add_user("admin@college.edu", role="admin")
    now = utcnow()
    due = _notice(session, admin, now - timedelta(minutes=5), title="due")
    _notice(session, admin, now + timedelta(hours=1), title="future")
    already = _notice(session, admin, now - timedelta(days=1), title="already")
    mark_notice_published(session, already.id)

    found = find_due_notices(session, now)

    assert [notice.id for notice in found] == [due.id]


def test_mark_notice_published_transitions_only_once(session, add_user) -> None:
    admin = add_user("admin@college.edu", role="admin")
    notice = _notice(session, admin, utcnow())

    assert mark_notice_published(session, notice.id) is True
    assert mark_notice_published(session, notice.id) is False
    assert get_notice(session, notice.id).isPublished is True


def test_mark_notice_published_unknown_id(session) -> None:
    assert mark_notice_published(session, "missing") is False


def test_paginate_orders_by_publish_at_descending(session, add_user) -> None:
    admin = add_user("admin@college.edu", role="admin")
    base = utcnow()
    for index in range(25):
        notice = _notice(session, admin, base - timedelta(minutes=index), title=f"notice-{index}")
        mark_notice_published(session, notice.id)
    _notice(session, admin, base, title="draft")

    items, total = paginate_notices(session, page=2, limit=10, published_only=True)

    assert total == 25
    assert [item.title for item in items] == [f"notice-{index}" for index in range(10, 20)]

    _, total_all = paginate_notices(session, page=1, limit=10, published_only=False)
    assert total_all == 26


def test_student_emails_excludes_admins(session, add_user) -> None:
    add_user("admin@college.edu", role="admin")
    add_user("ana@college.edu")
    add_user("ben@college.edu")

    assert sorted(get_student_emails(session)) == ["ana@college.edu", "ben@college.edu"]


def test_create_user_rejects_duplicate_email(session) -> None:
    create_user(session, name="Ana", email="Ana@College.edu", password_hash="x", role="student")

    with pytest.raises(DuplicateEmailError):
        create_user(session, name="Ana 2", email="ana@college.edu", password_hash="y", role="student")


def test_update_notice_fields_refuses_publish_flag(session, add_user) -> None:
    admin = add_user("admin@college.edu", role="admin")
    notice = _notice(session, admin, utcnow())

    with pytest.raises(ValueError):
        update_notice_fields(session, notice, {"isPublished": True})

    updated = update_notice_fields(session, notice, {"title": "Revised"})
    assert updated.title == "Revised"
