import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.application.sweep_worker import NotificationSweepWorker
from app.config import get_settings
from app.infrastructure.database import SessionLocal, engine, initialize_database
from app.infrastructure.sms_health import log_sms_status
from app.interfaces.api.dependencies import get_notification_dispatcher
from app.interfaces.api.routes import register_routes

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Prepare the database, report SMS status and run the sweep worker."""

    settings = get_settings()
    initialize_database()
    log_sms_status(settings)

    worker: NotificationSweepWorker | None = None
    if settings.notification_sweep_enabled:
        worker = NotificationSweepWorker(
            SessionLocal,
            get_notification_dispatcher(),
            interval_seconds=settings.notification_sweep_interval_seconds,
        )
        worker.start()
    else:
        logger.info("Notification sweep worker disabled")

    app.state.sweep_worker = worker
    try:
        yield
    finally:
        if worker is not None:
            worker.stop()
        engine.dispose()


def create_app() -> FastAPI:
    """Create and configure the main FastAPI application."""

    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="HTD Notifications", lifespan=lifespan)

    # Allow requests from the React client.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.client_url],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)
    return app


app = create_app()
