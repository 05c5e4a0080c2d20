"""Response generation contract used by the task pipeline."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol, Sequence

from panai_sage.store.conversations import Turn, utcnow


@dataclass
class GenerationResult:
    """Outcome of a single generate() call, success or failure."""
    success: bool
    text: str | None = None
    model: str | None = None
    is_fallback: bool = False
    error: str | None = None
    details: str | None = None
    timestamp: datetime = field(default_factory=utcnow)

    @classmethod
    def failure(cls, error: str, details: str | None = None, model: str | None = None) -> "GenerationResult":
        return cls(success=False, error=error, details=details, model=model)


class ResponseGenerator(Protocol):
    """Anything that turns a prompt plus history into generated text."""

    async def generate(self, prompt: str, history: Sequence[Turn]) -> GenerationResult: ...

    async def test_connection(self) -> dict: ...


__all__ = ["GenerationResult", "ResponseGenerator"]
