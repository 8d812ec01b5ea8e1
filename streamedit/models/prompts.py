"""Instruction templates for the two request shapes."""

from __future__ import annotations

INSERT_TEMPLATE = """You are a professional Unreal Engine C++ developer. Generate high-quality code for the request below.
Requirements:
1. Follow the Unreal Engine coding standard.
2. Add the comments that matter, especially for UE macros and reflection declarations.
3. Use modern C++ (smart pointers, move semantics).
4. Handle edge cases.
5. Only generate new code; do not repeat existing content.
6. The code is inserted directly after the context below and must continue it.

Existing context:
```
{context}
```

Generate the code to insert after the context above:"""

FULL_FILE_TEMPLATE = """You are a professional Unreal Engine C++ developer. Refactor the complete file below.
Requirements:
1. Follow the Unreal Engine coding standard.
2. Keep the existing behaviour unless it is clearly a bug.
3. Output the full new file content only: no explanations, no markdown fences.

File content:
```
{content}
```"""


def build_insert_prompt(context: str) -> str:
    return INSERT_TEMPLATE.format(context=context)


def build_full_file_prompt(content: str) -> str:
    return FULL_FILE_TEMPLATE.format(content=content)
