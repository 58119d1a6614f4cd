import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.router import api_router
from app.core.config import settings
from app.core.scheduler import Scheduler
from app.services.scheduled_jobs import register_jobs
from app.services.work_time_tracker import work_time_tracker

# Import all models so relationship targets resolve before the first query
from app.models.user import User  # noqa: F401
from app.models.earning import Earning  # noqa: F401
from app.models.notification import Notification  # noqa: F401
from app.models.admin_audit_log import AdminAuditLog  # noqa: F401

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    scheduler = Scheduler()
    app.state.scheduler = scheduler

    if settings.SCHEDULER_ENABLED:
        register_jobs(scheduler, work_time_tracker)
        scheduler.start()
    else:
        logger.warning(
            "Scheduler disabled: daily resets and suspension checks will not run in this process"
        )

    yield

    await scheduler.shutdown()
    await work_time_tracker.checkpoint()


app = FastAPI(
    title="EarnPay API",
    description="Work-time compliance and account suspension for EarnPay",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api")


@app.get("/health")
async def health():
    return {"status": "ok", "service": "earnpay-api", "version": "0.1.0"}
