"""FastAPI dependencies resolving the stores owned by the running app."""

from fastapi import Request

from panai_sage.config import Settings
from panai_sage.generator import ResponseGenerator
from panai_sage.store.conversations import ConversationStore
from panai_sage.store.tasks import TaskStore


def get_conversations(request: Request) -> ConversationStore:
    return request.app.state.conversations


def get_tasks(request: Request) -> TaskStore:
    return request.app.state.tasks


def get_generator(request: Request) -> ResponseGenerator:
    return request.app.state.generator


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings
