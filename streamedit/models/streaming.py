"""Streaming contract between the model client and the patchers.

A fragment sequence is an ``AsyncIterator[str]`` of non-empty content deltas.
It is lazy, finite and not restartable; it only becomes meaningful once it
completes without raising, since a retried request starts over from scratch.

- OpenAI-style Chat Completions stream: ``choices[0].delta.content`` per frame.
- Error frames (``{"error": {"message": ...}}``) end the sequence with StreamError.
"""

from __future__ import annotations

from typing import AsyncIterator, Protocol, runtime_checkable


@runtime_checkable
class FragmentSource(Protocol):
    """Protocol for clients that stream completion fragments."""

    def generate(self, prompt: str) -> AsyncIterator[str]:
        """Yield fragments for a direct prompt completion."""
        ...

    def generate_for_full_file(self, content: str) -> AsyncIterator[str]:
        """Yield the fragments of a whole-file rewrite of ``content``."""
        ...
