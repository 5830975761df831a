import logging

from sqlalchemy.orm import Session
from config import Database, settings
from models.authModel.authModel import AuthUser, ROLE_ADMIN
from store.noticeStore import create_user, get_user_by_email
from utils.utils import hash_password

logger = logging.getLogger(__name__)


def seed_admin(db: Session, name: str, email: str, password: str) -> AuthUser:
    existing = get_user_by_email(db, email)
    if existing:
        return existing

    admin = create_user(
        db,
        name=name,
        email=email,
        password_hash=hash_password(password),
        role=ROLE_ADMIN,
    )
    logger.info(f"Seeded admin account {admin.email}")
    return admin


def seed_from_settings(database: Database, config=settings) -> None:
    if not config.ADMIN_EMAIL or not config.ADMIN_PASSWORD:
        return
    db = database.session()
    try:
        seed_admin(db, config.ADMIN_NAME, config.ADMIN_EMAIL, config.ADMIN_PASSWORD)
    finally:
        db.close()


def main():
    logging.basicConfig(level=settings.LOG_LEVEL)
    database = Database(settings.SQLALCHEMY_DATABASE_URL)
    database.create_all()
    if not settings.ADMIN_EMAIL or not settings.ADMIN_PASSWORD:
        print("ADMIN_EMAIL and ADMIN_PASSWORD must be set to seed the admin account.")
        return
    seed_from_settings(database)
    print("✅ Admin seed applied successfully.")


if __name__ == "__main__":
    main()
