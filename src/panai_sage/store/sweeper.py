"""Periodic eviction of idle sessions and old finished tasks."""

import asyncio
import logging

from panai_sage.store.conversations import ConversationStore
from panai_sage.store.tasks import TaskStore

logger = logging.getLogger(__name__)


def sweep_once(
    conversations: ConversationStore,
    tasks: TaskStore,
    session_ttl_seconds: int,
    task_ttl_seconds: int,
) -> tuple[int, int]:
    """Run one eviction pass. A ttl of 0 leaves that store untouched."""
    sessions_removed = conversations.cleanup_expired(session_ttl_seconds) if session_ttl_seconds > 0 else 0
    tasks_removed = tasks.cleanup_expired(task_ttl_seconds) if task_ttl_seconds > 0 else 0
    if sessions_removed or tasks_removed:
        logger.info("Evicted %d sessions and %d tasks", sessions_removed, tasks_removed)
    return sessions_removed, tasks_removed


async def run_sweeper(
    conversations: ConversationStore,
    tasks: TaskStore,
    session_ttl_seconds: int,
    task_ttl_seconds: int,
    interval_seconds: int,
) -> None:
    """Sweep forever; cancelled on application shutdown."""
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            sweep_once(conversations, tasks, session_ttl_seconds, task_ttl_seconds)
        except Exception:
            logger.exception("Sweep failed")
