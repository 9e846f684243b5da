"""
Chat Service - group chats and messages behind the bearer-token gate
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging

from ..core.errors import register_exception_handlers
from ..core.health import build_health_router
from . import db
from .config import get_settings
from .routes import chats, messages

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper()),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Initialize database on startup"""
    db.init_db()
    yield


app = FastAPI(
    title="Chat Service",
    description="Group chats and messages",
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
app.include_router(chats.router)
app.include_router(messages.router)
app.include_router(build_health_router("chat", lambda: db.check_db_connection()))


def run():
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
