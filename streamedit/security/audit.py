"""Audit trail for generation runs.

Events record mode, sizes and outcome. Prompts, document text and keys are not
fields of :class:`AuditEvent`, so they cannot end up in the audit log.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger("streamedit.audit")

GenerationMode = Literal["insert", "replace"]


class AuditEvent(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    event: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    mode: Optional[GenerationMode] = None
    chars: Optional[int] = None
    cancelled: Optional[bool] = None
    error: Optional[str] = None
    store: Optional[str] = None


def _emit(event: AuditEvent) -> AuditEvent:
    logger.info(
        "audit %s", event.event, extra={"audit": event.model_dump(mode="json", exclude_none=True)}
    )
    return event


def generation_started(mode: GenerationMode, chars: int) -> AuditEvent:
    return _emit(AuditEvent(event="generation_started", mode=mode, chars=chars))


def generation_finished(mode: GenerationMode, chars: int, *, cancelled: bool) -> AuditEvent:
    return _emit(
        AuditEvent(event="generation_finished", mode=mode, chars=chars, cancelled=cancelled)
    )


def generation_failed(mode: GenerationMode, error: BaseException) -> AuditEvent:
    """Only the exception type is recorded; messages may quote server output."""
    return _emit(AuditEvent(event="generation_failed", mode=mode, error=type(error).__name__))


def api_key_stored(store_path: Path) -> AuditEvent:
    return _emit(AuditEvent(event="api_key_stored", store=str(store_path)))
