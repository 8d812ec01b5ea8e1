"""DeepSeek chat-completion client: streaming POST with rate-limit backoff."""

from __future__ import annotations

import asyncio
import logging
from typing import AsyncIterator, Awaitable, Callable

import httpx

from streamedit.config.loader import ModelSettings, RetrySettings
from streamedit.core.errors import classify_error
from streamedit.core.events import ChatCompletionRequest, ChatMessage
from streamedit.models.prompts import build_full_file_prompt
from streamedit.models.retry import RetryPolicy, decide_retry
from streamedit.models.sse import decode_stream

logger = logging.getLogger(__name__)


class DeepSeekClient:
    """Streams completions from an OpenAI-compatible ``/chat/completions`` endpoint.

    Every attempt opens a fresh connection and a fresh decoder. A retried
    attempt restarts the sequence from the top, so fragments yielded before a
    rate-limit failure are stale once the sequence continues.
    """

    def __init__(
        self,
        api_key: str,
        *,
        settings: ModelSettings | None = None,
        retry_policy: RetryPolicy | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._api_key = api_key
        self._settings = settings or ModelSettings()
        self._retry_policy = retry_policy or RetryPolicy()
        self._transport = transport
        self._sleep = sleep

    @classmethod
    def from_settings(
        cls, api_key: str, model: ModelSettings, retry: RetrySettings, **kwargs
    ) -> "DeepSeekClient":
        policy = RetryPolicy(
            max_attempts=retry.max_attempts, base_delay=retry.base_delay_seconds
        )
        return cls(api_key, settings=model, retry_policy=policy, **kwargs)

    @property
    def url(self) -> str:
        return self._settings.base_url.rstrip("/") + "/chat/completions"

    def _build_body(self, prompt: str) -> dict:
        request = ChatCompletionRequest(
            model=self._settings.name,
            messages=[ChatMessage(role="user", content=prompt)],
            temperature=self._settings.temperature,
            stream=True,
        )
        return request.model_dump()

    def _build_headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._api_key}",
        }

    async def _stream_once(self, body: dict) -> AsyncIterator[str]:
        async with httpx.AsyncClient(
            timeout=self._settings.timeout_seconds, transport=self._transport
        ) as client:
            async with client.stream(
                "POST", self.url, json=body, headers=self._build_headers()
            ) as resp:
                resp.raise_for_status()
                async for fragment in decode_stream(resp.aiter_text()):
                    yield fragment

    async def generate(self, prompt: str) -> AsyncIterator[str]:
        """Yield content fragments for ``prompt``; raises once retries are exhausted."""
        body = self._build_body(prompt)
        attempt = 0
        while True:
            try:
                logger.debug(
                    "chat completion attempt %d/%d", attempt + 1, self._retry_policy.max_attempts
                )
                async for fragment in self._stream_once(body):
                    yield fragment
                return
            except Exception as e:
                decision = decide_retry(attempt, e, self._retry_policy)
                if not decision.retry:
                    logger.warning(
                        "chat completion failed (attempt %d, %s): %s",
                        attempt + 1,
                        classify_error(e).value,
                        e,
                    )
                    raise
                logger.info(
                    "rate limited (attempt %d), retrying in %.1fs", attempt + 1, decision.delay
                )
                await self._sleep(decision.delay)
                attempt += 1

    def generate_for_full_file(self, content: str) -> AsyncIterator[str]:
        """Yield the fragments of a whole-file refactor of ``content``."""
        return self.generate(build_full_file_prompt(content))
