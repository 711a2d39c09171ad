from __future__ import annotations

import json
import re
from typing import Any, Callable, Iterator

from shopkeep.domain.errors import ExtractionError


_FENCE_RE = re.compile(r"```[^\n`]*\n?(.*?)```", re.DOTALL)
_UNTAGGED_FENCE_RE = re.compile(r"```[ \t]*\n(.*?)```", re.DOTALL)


def _first_fenced_block(text: str) -> str | None:
    match = _FENCE_RE.search(text)
    return match.group(1).strip() if match else None


def _first_untagged_block(text: str) -> str | None:
    match = _UNTAGGED_FENCE_RE.search(text)
    return match.group(1).strip() if match else None


def _brace_span(text: str) -> str | None:
    first = text.find("{")
    last = text.rfind("}")
    if first < 0 or last <= first:
        return None
    return text[first : last + 1]


_STRATEGIES: tuple[Callable[[str], str | None], ...] = (
    lambda text: text,
    _first_fenced_block,
    _first_untagged_block,
    _brace_span,
)


def _candidates(text: str) -> Iterator[str]:
    for strategy in _STRATEGIES:
        candidate = strategy(text)
        if candidate:
            yield candidate


def extract_json(raw: str) -> Any:
    """Pull the first parseable JSON document out of a model reply.

    Tries the whole reply, then fenced code blocks, then the outermost
    brace-delimited span. Only syntax is checked here.
    """
    text = str(raw or "").strip()
    for candidate in _candidates(text):
        try:
            return json.loads(candidate)
        except ValueError:
            continue
    raise ExtractionError("could not extract valid JSON from curator response", raw_response=str(raw or ""))
