"""
Auth Service - registration, login and user records
"""
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..core.errors import register_exception_handlers
from ..core.health import build_health_router
from . import db
from .config import get_settings
from .routes import auth

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper()),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Create tables and seed the default group on startup"""
    db.init_db()
    logger.info("Auth Service ready on %s:%s", settings.HOST, settings.PORT)
    yield
    logger.info("Auth Service shutting down")


app = FastAPI(
    title="Auth Service",
    description="User registration and JWT issuing",
    version="1.0.0",
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include routers
app.include_router(auth.router)
app.include_router(build_health_router("auth", lambda: db.check_db_connection()))


def run():
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
