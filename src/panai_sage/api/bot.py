"""Bot chat, polling and session endpoints."""

import logging
from datetime import datetime
from typing import Any, Literal
from uuid import uuid4

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from panai_sage.config import Settings
from panai_sage.errors import ValidationError
from panai_sage.generator import ResponseGenerator
from panai_sage.store.conversations import ConversationStore, utcnow
from panai_sage.store.tasks import TaskStatus, TaskStore
from panai_sage.summit import BOT_DESCRIPTION, BOT_NAME, load_summit_data

from .dependencies import get_app_settings, get_conversations, get_generator, get_tasks

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/bot", tags=["bot"])

MAX_MESSAGE_LENGTH = 1000
ESTIMATED_WAIT = "10-30 seconds"
NO_RESPONSE = "Sorry, I could not generate a response."


# --- Schemas ---


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ChatRequest(CamelModel):
    message: Any = None  # type checked by validate_message for a 400, not a 422
    session_id: Any = None  # coerced by resolve_session_id


class SubmitResponse(CamelModel):
    success: bool = True
    task_id: str
    session_id: str
    status: Literal["processing"] = "processing"
    message: str = "Your request is being processed"
    timestamp: datetime
    check_status_at: str


class GeneratedReply(CamelModel):
    success: bool
    message: str
    model_used: str
    is_fallback: bool = False
    timestamp: datetime


class TaskCompletedResponse(CamelModel):
    success: bool = True
    task_id: str
    session_id: str
    status: Literal["completed"] = "completed"
    response: GeneratedReply
    submitted_at: datetime
    completed_at: datetime
    processing_time: int


class TaskFailedResponse(CamelModel):
    success: bool = False
    task_id: str
    session_id: str
    status: Literal["failed"] = "failed"
    error: str
    details: str | None = None
    submitted_at: datetime
    completed_at: datetime
    processing_time: int


class TaskPendingResponse(CamelModel):
    success: bool = True
    task_id: str
    session_id: str
    status: Literal["pending", "processing"]
    message: str = "Your request is still being processed"
    submitted_at: datetime
    estimated_wait: str = ESTIMATED_WAIT


class SummitSummary(CamelModel):
    name: str
    tagline: str
    next_summit: Any = None


class BotStats(CamelModel):
    active_sessions: int
    pending_tasks: int
    completed_tasks: int


class BotInfoResponse(CamelModel):
    bot_name: str = BOT_NAME
    description: str = BOT_DESCRIPTION
    version: str
    summit: SummitSummary
    endpoints: dict[str, str]
    stats: BotStats


class SessionSummary(CamelModel):
    id: str
    message_count: int
    created_at: datetime
    last_active: datetime
    active: bool


class SessionListResponse(CamelModel):
    total_sessions: int
    active_sessions: int
    sessions: list[SessionSummary]


class TaskSummary(CamelModel):
    id: str
    session_id: str
    status: str
    submitted_at: datetime
    message_preview: str


class PendingTasksResponse(CamelModel):
    total_pending: int
    tasks: list[TaskSummary]


class ClearAllResponse(CamelModel):
    message: str
    sessions_cleared: int


class ClearOneResponse(CamelModel):
    message: str = "Session cleared successfully"
    session_id: str


class SyncChatResponse(CamelModel):
    success: bool
    session_id: str
    bot_name: str = BOT_NAME
    response: str
    timestamp: datetime
    session_activity: datetime
    message_count: int
    model_used: str


# --- Helpers ---


def validate_message(message: Any) -> str:
    """Return the message unchanged, or raise ValidationError."""
    if not message or not isinstance(message, str):
        raise ValidationError("Message field is required and must be a string")
    if not message.strip():
        raise ValidationError("Message cannot be empty")
    # Length in UTF-16 code units, as JavaScript clients count it
    if len(message.encode("utf-16-le")) // 2 > MAX_MESSAGE_LENGTH:
        raise ValidationError(f"Message must be less than {MAX_MESSAGE_LENGTH} characters")
    return message


def new_session_id() -> str:
    return f"session_{uuid4()}"


def resolve_session_id(value: Any) -> str:
    """Use the caller's session id (numbers become strings) or generate one."""
    if value is None or value == "":
        return new_session_id()
    if isinstance(value, (dict, list)):
        raise ValidationError("sessionId must be a string")
    return str(value)


# --- Routes ---


@router.post("/chat", response_model=SubmitResponse)
async def submit_message(
    data: ChatRequest,
    tasks: TaskStore = Depends(get_tasks),
) -> SubmitResponse:
    """Queue a message for generation and return a task id to poll."""
    message = validate_message(data.message)
    session_id = resolve_session_id(data.session_id)

    task = tasks.submit(session_id, message)

    return SubmitResponse(
        task_id=task.id,
        session_id=session_id,
        timestamp=utcnow(),
        check_status_at=f"{router.prefix}/response/{task.id}",
    )


@router.get(
    "/response/{task_id}",
    response_model=TaskCompletedResponse | TaskFailedResponse | TaskPendingResponse,
)
async def get_response(
    task_id: str,
    tasks: TaskStore = Depends(get_tasks),
) -> TaskCompletedResponse | TaskFailedResponse | TaskPendingResponse:
    """Report a task's progress, or its result once finished."""
    logger.debug("Get response for task: %s", task_id)
    task = tasks.get(task_id)

    if task.status == TaskStatus.COMPLETED:
        result = task.result
        return TaskCompletedResponse(
            task_id=task.id,
            session_id=task.session_id,
            response=GeneratedReply(
                success=result.success,
                message=result.text or NO_RESPONSE,
                model_used=result.model or "unknown",
                is_fallback=result.is_fallback,
                timestamp=result.timestamp,
            ),
            submitted_at=task.submitted_at,
            completed_at=task.completed_at,
            processing_time=task.processing_time_ms,
        )

    if task.status == TaskStatus.FAILED:
        return TaskFailedResponse(
            task_id=task.id,
            session_id=task.session_id,
            error=task.error or "Failed to generate response",
            details=task.result.details if task.result else None,
            submitted_at=task.submitted_at,
            completed_at=task.completed_at,
            processing_time=task.processing_time_ms,
        )

    return TaskPendingResponse(
        task_id=task.id,
        session_id=task.session_id,
        status=task.status.value,
        submitted_at=task.submitted_at,
    )


@router.get("/info", response_model=BotInfoResponse)
async def get_bot_info(
    settings: Settings = Depends(get_app_settings),
    conversations: ConversationStore = Depends(get_conversations),
    tasks: TaskStore = Depends(get_tasks),
) -> BotInfoResponse:
    """Bot metadata plus live store counts."""
    summit = load_summit_data()["summit"]
    stats = tasks.stats()
    return BotInfoResponse(
        version=settings.app_version,
        summit=SummitSummary(
            name=summit["name"],
            tagline=summit["tagline"],
            next_summit=summit.get("next_summit"),
        ),
        endpoints={
            "chat": "POST /api/bot/chat",
            "getResponse": "GET /api/bot/response/:taskId",
            "info": "GET /api/bot/info",
        },
        stats=BotStats(
            active_sessions=len(conversations),
            pending_tasks=stats["pending"],
            completed_tasks=stats["completed"],
        ),
    )


@router.get("/sessions", response_model=SessionListResponse)
async def list_sessions(
    conversations: ConversationStore = Depends(get_conversations),
) -> SessionListResponse:
    """List every known session."""
    now = utcnow()
    sessions = [
        SessionSummary(
            id=s.id,
            message_count=s.message_count,
            created_at=s.created_at,
            last_active=s.last_active,
            active=s.is_active(now),
        )
        for s in conversations.list()
    ]
    return SessionListResponse(
        total_sessions=len(sessions),
        active_sessions=sum(1 for s in sessions if s.active),
        sessions=sessions,
    )


@router.get("/tasks/pending", response_model=PendingTasksResponse)
async def list_pending_tasks(
    tasks: TaskStore = Depends(get_tasks),
) -> PendingTasksResponse:
    """List tasks that have not finished yet."""
    pending = [
        TaskSummary(
            id=t.id,
            session_id=t.session_id,
            status=t.status.value,
            submitted_at=t.submitted_at,
            message_preview=t.message_preview,
        )
        for t in tasks.list_pending()
    ]
    return PendingTasksResponse(total_pending=len(pending), tasks=pending)


@router.delete("/sessions/{session_id}", response_model=ClearAllResponse | ClearOneResponse)
async def clear_session(
    session_id: str,
    conversations: ConversationStore = Depends(get_conversations),
) -> ClearAllResponse | ClearOneResponse:
    """Clear one session, or all of them with session_id "all"."""
    count = conversations.clear(session_id)
    if session_id == "all":
        return ClearAllResponse(message=f"Cleared all {count} sessions", sessions_cleared=count)
    return ClearOneResponse(session_id=session_id)


@router.post("/chat/sync", response_model=SyncChatResponse)
async def chat_sync(
    data: ChatRequest,
    conversations: ConversationStore = Depends(get_conversations),
    generator: ResponseGenerator = Depends(get_generator),
    settings: Settings = Depends(get_app_settings),
):
    """Generate a reply within the request (blocking variant of /chat)."""
    message = validate_message(data.message)
    session_id = resolve_session_id(data.session_id)
    session = conversations.touch(session_id)

    logger.info('Sync chat - session: %s, message: "%s"', session_id, message[:50])

    try:
        result = await generator.generate(message, list(session.history))
    except Exception as e:
        logger.exception("Sync chat failed for session %s", session_id)
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": "Internal server error",
                "message": "Failed to process your request" if settings.is_production else str(e),
                "timestamp": utcnow().isoformat(),
            },
        )

    if result.success:
        session = conversations.append_exchange(session_id, message, result.text, create=False) or session

    return SyncChatResponse(
        success=result.success,
        session_id=session_id,
        response=result.text or NO_RESPONSE,
        timestamp=utcnow(),
        session_activity=session.last_active,
        message_count=session.message_count,
        model_used=result.model or "unknown",
    )
