"""
FastAPI application entry point.
logsift - JSON log explorer with SQL filters
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI

from logsift import __version__
from logsift.api.dependencies import get_session_holder
from logsift.api.routes import router
from logsift.config import get_settings
from logsift.session import LogSession


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    settings = get_settings()
    holder = get_session_holder()

    # Startup: load the configured log file, if any
    if settings.log_file and not holder.is_loaded:
        logger.info("Loading logs from %s", settings.log_file)
        holder.install(LogSession.from_file(settings.log_file, settings))
    yield
    # Shutdown: release the store connection
    holder.close()


settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title=settings.app_name,
    description="Explore newline-delimited JSON logs with SQL WHERE filters.",
    version=__version__,
    lifespan=lifespan,
)

# Include API routes
app.include_router(router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "logsift.main:app",
        host="127.0.0.1",
        port=8000,
        reload=settings.debug,
    )
