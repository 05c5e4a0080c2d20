"""
Test fixtures for PanAI Sage API tests.
"""

import asyncio

import pytest
from httpx import ASGITransport, AsyncClient

from panai_sage.config import Settings
from panai_sage.generator import GenerationResult
from panai_sage.main import create_app
from panai_sage.store.conversations import ConversationStore
from panai_sage.store.tasks import TaskStore


class FakeGenerator:
    """Stand-in for Gemini that answers instantly unless gated."""

    def __init__(self):
        self.model = "fake-model"
        self.calls: list[tuple[str, list]] = []
        self.gates: dict[str, asyncio.Event] = {}
        self.gate: asyncio.Event | None = None
        self.failure: str | None = None
        self.exception: Exception | None = None
        self.connection_ok = True

    async def generate(self, prompt, history):
        self.calls.append((prompt, list(history)))
        gate = self.gates.get(prompt) or self.gate
        if gate is not None:
            await gate.wait()
        if self.exception is not None:
            raise self.exception
        if self.failure is not None:
            return GenerationResult.failure("Failed to generate response", self.failure, model=self.model)
        return GenerationResult(success=True, text=f"Reply to: {prompt}", model=self.model)

    async def test_connection(self):
        if self.connection_ok:
            return {"success": True, "message": "API connection successful", "model": self.model}
        return {"success": False, "error": "quota exceeded", "model": self.model}


async def wait_until_finished(tasks: TaskStore, task_id: str) -> None:
    """Yield to the event loop until a task reaches a terminal state."""
    for _ in range(1000):
        if tasks.get(task_id).status.is_terminal:
            return
        await asyncio.sleep(0)
    raise AssertionError(f"task {task_id} never finished")


@pytest.fixture
def settings():
    """Settings with the sweeper disabled so tests control eviction."""
    s = Settings()
    s.app_env = "test"
    s.task_workers = 2
    s.generation_timeout = None
    s.sweep_interval_seconds = 0
    return s


@pytest.fixture
def generator():
    return FakeGenerator()


@pytest.fixture
async def app(settings, generator):
    """Application with its lifespan running (stores and workers live)."""
    application = create_app(settings=settings, generator=generator)
    async with application.router.lifespan_context(application):
        yield application


@pytest.fixture
async def client(app):
    """Async HTTP client for testing FastAPI app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def conversations():
    return ConversationStore()


@pytest.fixture
async def task_store(conversations, generator):
    """Task store with running workers, stopped after the test."""
    store = TaskStore(conversations, generator, workers=2)
    store.start()
    yield store
    await store.stop()


@pytest.fixture
def wait_finished():
    return wait_until_finished
