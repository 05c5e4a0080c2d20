"""Submit-then-poll task pipeline."""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from uuid import uuid4

from panai_sage.errors import NotFoundError
from panai_sage.generator import GenerationResult, ResponseGenerator
from panai_sage.store.conversations import ConversationStore, Turn, utcnow

logger = logging.getLogger(__name__)

PREVIEW_LENGTH = 50


class TaskStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (TaskStatus.COMPLETED, TaskStatus.FAILED)


@dataclass
class Task:
    """One submitted message awaiting a generated reply."""
    session_id: str
    message: str
    history: list[Turn]  # session history at submission time
    id: str = field(default_factory=lambda: str(uuid4()))
    status: TaskStatus = TaskStatus.PENDING
    submitted_at: datetime = field(default_factory=utcnow)
    started_at: datetime | None = None
    completed_at: datetime | None = None
    result: GenerationResult | None = None
    error: str | None = None
    processing_time_ms: int | None = None

    @property
    def message_preview(self) -> str:
        if len(self.message) <= PREVIEW_LENGTH:
            return self.message
        return self.message[:PREVIEW_LENGTH] + "..."


class TaskStore:
    """
    Owns every task from submission to its terminal state.

    - submit() stores the task as pending and queues it, never waiting on
      the generator
    - a small pool of workers drains the queue and calls process()
    - process() moves each task to the completed map exactly once
    """

    def __init__(
        self,
        conversations: ConversationStore,
        generator: ResponseGenerator,
        workers: int = 4,
        timeout: float | None = None,
    ):
        self.conversations = conversations
        self.generator = generator
        self.workers = max(1, workers)
        self.timeout = timeout
        self._pending: dict[str, Task] = {}
        self._completed: dict[str, Task] = {}
        self._queue: asyncio.Queue[str] = asyncio.Queue()
        self._worker_tasks: list[asyncio.Task] = []

    # --- Lifecycle ---

    def start(self) -> None:
        """Spawn the worker pool on the running event loop."""
        if self._worker_tasks:
            return
        self._worker_tasks = [
            asyncio.create_task(self._worker(), name=f"task-worker-{i}")
            for i in range(self.workers)
        ]
        logger.info("Started %d task workers", self.workers)

    async def stop(self) -> None:
        for worker in self._worker_tasks:
            worker.cancel()
        await asyncio.gather(*self._worker_tasks, return_exceptions=True)
        self._worker_tasks = []

    async def join(self) -> None:
        """Wait until every queued task has been processed."""
        await self._queue.join()

    async def _worker(self) -> None:
        while True:
            task_id = await self._queue.get()
            try:
                await self.process(task_id)
            finally:
                self._queue.task_done()

    # --- Operations ---

    def submit(self, session_id: str, message: str) -> Task:
        """Record a pending task and queue it. Returns immediately."""
        session = self.conversations.touch(session_id)
        task = Task(session_id=session_id, message=message, history=list(session.history))
        self._pending[task.id] = task
        self._queue.put_nowait(task.id)
        logger.info(
            'Submitted task %s for session %s: "%s"',
            task.id, session_id, message[:PREVIEW_LENGTH],
        )
        return task

    async def process(self, task_id: str) -> None:
        task = self._pending.get(task_id)
        if task is None:
            logger.warning("Task %s not found, skipping", task_id)
            return

        logger.info("Processing task %s...", task_id)
        task.status = TaskStatus.PROCESSING
        task.started_at = utcnow()

        try:
            result = await self._generate(task)
        except asyncio.TimeoutError:
            logger.warning("Task %s timed out after %ss", task_id, self.timeout)
            self._finish(task, TaskStatus.FAILED, error=f"Generation timed out after {self.timeout} seconds")
            return
        except Exception as e:
            logger.exception("Task %s processing error", task_id)
            self._finish(task, TaskStatus.FAILED, error=str(e) or type(e).__name__)
            return

        if result.success:
            # Append to the live session, not the snapshot; a cleared session stays cleared
            self.conversations.append_exchange(task.session_id, task.message, result.text, create=False)
            self._finish(task, TaskStatus.COMPLETED, result=result)
        else:
            self._finish(task, TaskStatus.FAILED, result=result, error=result.error)

    async def _generate(self, task: Task) -> GenerationResult:
        call = self.generator.generate(task.message, task.history)
        if self.timeout is None:
            return await call
        return await asyncio.wait_for(call, timeout=self.timeout)

    def _finish(
        self,
        task: Task,
        status: TaskStatus,
        result: GenerationResult | None = None,
        error: str | None = None,
    ) -> None:
        task.status = status
        task.result = result
        task.error = error
        task.completed_at = utcnow()
        started = task.started_at or task.completed_at
        task.processing_time_ms = int((task.completed_at - started).total_seconds() * 1000)

        self._pending.pop(task.id, None)
        self._completed[task.id] = task
        logger.info("Task %s %s in %dms", task.id, status.value, task.processing_time_ms)

    def get(self, task_id: str) -> Task:
        task = self._completed.get(task_id) or self._pending.get(task_id)
        if task is None:
            raise NotFoundError(
                "The task ID does not exist or has expired",
                error="Task not found",
                taskId=task_id,
            )
        return task

    def list_pending(self) -> list[Task]:
        return list(self._pending.values())

    def stats(self) -> dict[str, int]:
        return {"pending": len(self._pending), "completed": len(self._completed)}

    def cleanup_expired(self, ttl_seconds: int) -> int:
        """Drop terminal tasks finished more than ttl_seconds ago. Returns count removed."""
        cutoff = utcnow() - timedelta(seconds=ttl_seconds)
        expired = [
            tid for tid, task in self._completed.items()
            if task.completed_at is not None and task.completed_at < cutoff
        ]
        for tid in expired:
            del self._completed[tid]
        return len(expired)
