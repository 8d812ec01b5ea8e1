"""Server-sent event payloads of the chat-completion stream. All frames are Pydantic models."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class Delta(BaseModel):
    content: Optional[str] = None


class Choice(BaseModel):
    delta: Delta = Field(default_factory=Delta)


class FrameError(BaseModel):
    message: str = ""


class StreamFrame(BaseModel):
    """One ``data:`` event. Unknown fields (id, model, usage...) are ignored."""

    choices: list[Choice] = Field(default_factory=list)
    error: Optional[FrameError] = None

    @property
    def content(self) -> str:
        """Content of the first choice, or empty string when the frame has none."""
        if not self.choices:
            return ""
        return self.choices[0].delta.content or ""


class ChatMessage(BaseModel):
    role: str = "user"
    content: str


class ChatCompletionRequest(BaseModel):
    """Outbound request body."""

    model: str
    messages: list[ChatMessage]
    temperature: float = 0.3
    stream: bool = True
