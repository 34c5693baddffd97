"""Lift a single fenced code block out of free-form model output.

Two stages run in order and the first hit wins:

1. tagged blocks: ```` ```lang\\n body ``` ```` with a non-blank body; the body is
   trimmed and re-fenced with the same tag.
2. any block: the first ```` ``` ... ``` ```` pair; its inner text is trimmed
   and re-fenced without a tag.

Text without fences comes back trimmed. The output is always a fixed point:
extracting it again returns it unchanged.
"""

from __future__ import annotations

import re
from collections.abc import Iterator

FENCE = "```"

_TAGGED_BLOCK_RE = re.compile(r"```(?P<lang>[\w+#-]+)[ \t]*\r?\n(?P<body>.*?)```", re.DOTALL)
_ANY_BLOCK_RE = re.compile(r"```(?P<body>.*?)```", re.DOTALL)


def fence(body: str, lang: str = "") -> str:
    return f"{FENCE}{lang}\n{body}\n{FENCE}"


def iter_tagged_blocks(text: str) -> Iterator[tuple[str, str]]:
    for m in _TAGGED_BLOCK_RE.finditer(text):
        body = m.group("body").strip()
        if body:
            yield m.group("lang"), body


def iter_any_blocks(text: str) -> Iterator[str]:
    for m in _ANY_BLOCK_RE.finditer(text):
        yield m.group("body").strip()


def extract_code_block(text: str) -> str:
    tagged = next(iter_tagged_blocks(text), None)
    if tagged is not None:
        lang, body = tagged
        return fence(body, lang)

    body = next(iter_any_blocks(text), None)
    if body is not None:
        return fence(body)

    return text.strip()
