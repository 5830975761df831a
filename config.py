from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from fastapi import Request

import os
from dotenv import load_dotenv

load_dotenv()  # loads from .env


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _database_url() -> str:
    url = os.getenv("DATABASE_URL")
    if url:
        return url

    host = os.getenv("DB_HOSTNAME")
    if host:
        # MySQL connection string
        return (
            f"mysql+pymysql://{os.getenv('DB_USERNAME')}:{os.getenv('DB_PASSWORD')}"
            f"@{host}:{os.getenv('DB_PORT', '3306')}/{os.getenv('DB_NAME')}"
        )
    return "sqlite:///./notice_board.db"


class Settings:
    SQLALCHEMY_DATABASE_URL = _database_url()

    # JWT config
    SECRET_KEY = os.getenv("SECRET_KEY", "change-me")
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_DAYS = int(os.getenv("ACCESS_TOKEN_EXPIRE_DAYS", "7"))

    EMAIL_ADDRESS = os.getenv("EMAIL_ADDRESS")
    EMAIL_PASSWORD = os.getenv("EMAIL_PASSWORD")
    SMTP_HOST = os.getenv("SMTP_HOST", "smtp.gmail.com")
    SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
    SMTP_TIMEOUT_SECONDS = float(os.getenv("SMTP_TIMEOUT_SECONDS", "30"))
    MAIL_MAX_WORKERS = int(os.getenv("MAIL_MAX_WORKERS", "8"))

    # Frontend URL for notice links in emails
    FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")

    PUBLISH_INTERVAL_SECONDS = int(os.getenv("PUBLISH_INTERVAL_SECONDS", "60"))
    SCHEDULER_ENABLED = _env_bool("SCHEDULER_ENABLED", True)
    PUBLIC_NOTICE_READS = _env_bool("PUBLIC_NOTICE_READS", False)

    CORS_ORIGINS = [
        origin.strip()
        for origin in os.getenv(
            "CORS_ORIGINS", "http://localhost:5173,http://localhost:3000"
        ).split(",")
        if origin.strip()
    ]

    ADMIN_NAME = os.getenv("ADMIN_NAME", "Administrator")
    ADMIN_EMAIL = os.getenv("ADMIN_EMAIL")
    ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD")

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


settings = Settings()

Base = declarative_base()


class Database:
    """Handle on the notice store: owns the engine and the session factory.

    One instance is built at startup and handed to the API, the publication
    sweep and the scheduler instead of living in a module-level global.
    """

    def __init__(self, url: str):
        self.url = url
        if url.startswith("sqlite"):
            self.engine = create_engine(url, connect_args={"check_same_thread": False})
        else:
            self.engine = create_engine(
                url,
                pool_pre_ping=True,
                pool_recycle=280,
                pool_size=10,
                max_overflow=20,
            )
        self.SessionLocal = sessionmaker(bind=self.engine, autocommit=False, autoflush=False)

    def create_all(self):
        # models must be imported so their tables are registered on Base
        import models.authModel.authModel  # noqa: F401
        import models.noticeModel.noticeModel  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def session(self):
        return self.SessionLocal()

    def dispose(self):
        self.engine.dispose()


def get_db(request: Request):
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()
