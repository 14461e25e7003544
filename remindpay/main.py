from contextlib import asynccontextmanager
import logging
import sys

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator
from sqlalchemy import inspect
import uvicorn

from remindpay.core.config import settings
from remindpay.db.base import Base
from remindpay.db.session import engine
from remindpay.api.v1.api import api_router
from remindpay.reminders.config import settings as reminder_settings
from remindpay.reminders.scheduler import SweepDriver
import remindpay.models  # noqa: F401  (registers tables on Base.metadata)

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger(__name__)


def _check_tables() -> None:
    try:
        existing_tables = set(inspect(engine).get_table_names())
        missing_tables = [name for name in Base.metadata.tables if name not in existing_tables]
        if missing_tables:
            logger.warning(f"Missing database tables: {missing_tables}")
            logger.warning("Run `alembic upgrade head` before starting the server")
        else:
            logger.info("All required database tables exist")
    except Exception as e:
        logger.warning(f"Could not check database tables: {e}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info(f"Starting up {settings.PROJECT_NAME}...")
    _check_tables()

    sweep_driver = None
    if reminder_settings.SWEEP_IN_PROCESS:
        sweep_driver = SweepDriver()
        sweep_driver.start()
    else:
        logger.info("⏸️ [Startup] In-process sweep disabled - expecting Celery beat to run it")
    app.state.sweep_driver = sweep_driver

    yield

    if sweep_driver is not None:
        await sweep_driver.stop()
    logger.info(f"{settings.PROJECT_NAME} shut down")


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        openapi_url=f"{settings.API_V1_STR}/openapi.json",
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(api_router, prefix=settings.API_V1_STR)

    @app.get("/health")
    def health_check():
        return {"status": "healthy", "service": settings.PROJECT_NAME}

    if reminder_settings.METRICS_ENABLED:
        Instrumentator().instrument(app).expose(app, endpoint="/metrics")
    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("remindpay.main:app", host=settings.SERVER_HOST, port=settings.SERVER_PORT)
