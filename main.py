import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import Database, Settings, settings as default_settings
from jobs.scheduler import build_scheduler
from routes.auth.auth import router as auth_router
from routes.notice.notice import router as notice_router
from seed import seed_from_settings
from send_email import send_notice_email
from services.noticeNotifier import NoticeSender

logger = logging.getLogger(__name__)


def create_app(
    database: Optional[Database] = None,
    settings: Optional[Settings] = None,
    send: Optional[NoticeSender] = None,
    start_scheduler: Optional[bool] = None,
) -> FastAPI:
    """
    Build the notice board application.

    - database: store handle shared by the API and the publication sweep
    - send: per-recipient notice sender, defaults to SMTP email
    - start_scheduler: run the publication sweep in the background
      (defaults to SCHEDULER_ENABLED)
    """
    settings = settings or default_settings
    database = database or Database(settings.SQLALCHEMY_DATABASE_URL)
    send = send or send_notice_email
    if start_scheduler is None:
        start_scheduler = settings.SCHEDULER_ENABLED

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        database.create_all()
        seed_from_settings(database, settings)

        scheduler = None
        if start_scheduler:
            scheduler = build_scheduler(
                database,
                interval_seconds=settings.PUBLISH_INTERVAL_SECONDS,
                send=send,
            )
            scheduler.start()
            logger.info(
                f"Notice publisher started - running every {settings.PUBLISH_INTERVAL_SECONDS} seconds"
            )
        app.state.scheduler = scheduler
        try:
            yield
        finally:
            if scheduler is not None:
                scheduler.shutdown(wait=False)
                logger.info("Notice publisher stopped")

    app = FastAPI(title="College Notice Board", lifespan=lifespan)
    app.state.database = database
    app.state.settings = settings
    app.state.send_notice = send
    app.state.scheduler = None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    async def root():
        return {"message": "Digital Notice Board API Running"}

    @app.get("/health", tags=["health"])
    def health_check() -> dict:
        return {"status": "ok"}

    app.include_router(auth_router)
    app.include_router(notice_router)

    return app


logging.basicConfig(level=default_settings.LOG_LEVEL)

# uvicorn main:app
app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
