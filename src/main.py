"""Application factory and process entry point."""

import logging
from functools import partial

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.router import MessageRouter, create_router
from src.core.config import Settings
from src.db.memory_repository import InMemorySessionRepository, random_room_code
from src.services.game_service import GameService

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Wire repository -> service -> router. Every app gets its own, empty, registry."""
    settings = settings or Settings()

    repository = InMemorySessionRepository(
        code_factory=partial(random_room_code, settings.room_code_length)
    )
    service = GameService(repository)
    message_router = MessageRouter(service, repository)

    app = FastAPI(
        title="Guards & Towers",
        description="Real-time two player matches of Guards & Towers over WebSockets",
        version="0.1.0",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(create_router(message_router))
    app.state.message_router = message_router
    return app


def run() -> None:
    settings = Settings()
    configure_logging(settings.log_level)
    logger.info("Server running at http://%s:%s", settings.host, settings.port)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
