"""Text helpers for cache keys, tokenisation and de-duplication."""

from __future__ import annotations

import re
from typing import Hashable, Iterable, Protocol, TypeVar

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9._-]")
_ALPHA_RUN = re.compile(r"[^\W\d_]+")


class _HasId(Protocol):
    @property
    def id(self) -> Hashable: ...


_T = TypeVar("_T", bound=_HasId)


def sanitize_cache_key(key: str) -> str:
    """Map every character outside ``[A-Za-z0-9._-]`` to ``-``."""

    return _UNSAFE_KEY_CHARS.sub("-", key)


def alpha_tokens(text: str) -> list[str]:
    """Lower-case *text* and split it into maximal runs of letters.

    Digits, punctuation and whitespace are all separators.
    """

    if not text:
        return []
    return _ALPHA_RUN.findall(text.lower())


def unique_by_id(items: Iterable[_T]) -> list[_T]:
    """Drop repeated ids while keeping the first occurrence and the input order."""

    seen: set[Hashable] = set()
    result: list[_T] = []
    for item in items:
        if item.id in seen:
            continue
        seen.add(item.id)
        result.append(item)
    return result


def safe_filename(key: str) -> str:
    """Sanitise *key* and reject names that resolve to the directory itself or its parent."""

    safe = sanitize_cache_key(key)
    if not safe.strip("."):
        return "-" * max(len(safe), 1)
    return safe
