"""PanAI Sage API server."""

import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from panai_sage.api import router
from panai_sage.config import Settings, get_settings
from panai_sage.errors import register_exception_handlers
from panai_sage.generator import ResponseGenerator
from panai_sage.generator.gemini import GeminiGenerator
from panai_sage.logging_config import setup_logging
from panai_sage.store.conversations import ConversationStore
from panai_sage.store.sweeper import run_sweeper
from panai_sage.store.tasks import TaskStore
from panai_sage.summit import BOT_NAME

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    generator: ResponseGenerator | None = None,
) -> FastAPI:
    """
    Build the application.

    Stores are created when the app starts (lifespan) and live on app.state
    until shutdown. Pass a generator to bypass Gemini (tests, local runs).
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        conversations = ConversationStore()
        gen = generator or GeminiGenerator.from_settings(settings)
        tasks = TaskStore(
            conversations,
            gen,
            workers=settings.task_workers,
            timeout=settings.generation_timeout,
        )
        app.state.settings = settings
        app.state.generator = gen
        app.state.conversations = conversations
        app.state.tasks = tasks

        tasks.start()
        sweeper = None
        if settings.sweep_interval_seconds > 0:
            sweeper = asyncio.create_task(
                run_sweeper(
                    conversations,
                    tasks,
                    settings.session_ttl_seconds,
                    settings.task_ttl_seconds,
                    settings.sweep_interval_seconds,
                )
            )

        logger.info("%s started (environment: %s)", BOT_NAME, settings.app_env)
        try:
            yield
        finally:
            if sweeper is not None:
                sweeper.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await sweeper
            await tasks.stop()
            logger.info("%s stopped", BOT_NAME)

    app = FastAPI(title=BOT_NAME, version=settings.app_version, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app, expose_details=not settings.is_production)
    app.include_router(router)
    return app


setup_logging(get_settings())
app = create_app()
