"""Whitespace, casing and sentence helpers shared by the heuristic analyzer."""
from __future__ import annotations

import re
from typing import Iterable, List

ELLIPSIS = "…"
DEFAULT_MAX_LEN = 160

_WS_RE = re.compile(r"\s+")
_SENTENCE_BOUNDARY_RE = re.compile(r"(?<=[.!?])\s+(?=[A-Z0-9])")
_TRAILING_CUT_RE = re.compile(r"[,:;\-\s]+$")


def normalize(line: str) -> str:
    return _WS_RE.sub(" ", line or "").strip()


def title_case(text: str) -> str:
    """Lowercase, then capitalize the first letter of every space-delimited token."""
    return " ".join(seg[:1].upper() + seg[1:] for seg in (text or "").lower().split(" "))


def split_sentences(text: str) -> List[str]:
    """Split on ``.``/``!``/``?`` followed by whitespace and an uppercase letter or digit."""
    text = (text or "").replace("\r", " ")
    parts = (normalize(part) for part in _SENTENCE_BOUNDARY_RE.split(text))
    return [part for part in parts if part]


def truncate(sentence: str, max_len: int = DEFAULT_MAX_LEN) -> str:
    if len(sentence) <= max_len:
        return sentence
    cut = _TRAILING_CUT_RE.sub("", sentence[: max_len - 1]).strip()
    return f"{cut}{ELLIPSIS}"


def clip_words(text: str, max_words: int) -> str:
    words = normalize(text).split(" ")
    if len(words) <= max_words:
        return " ".join(words)
    clipped = _TRAILING_CUT_RE.sub("", " ".join(words[:max_words]))
    return f"{clipped}{ELLIPSIS}"


def dedupe(items: Iterable[str]) -> List[str]:
    """Drop case-insensitive repeats, keeping the first spelling."""
    seen = set()
    out: List[str] = []
    for item in items:
        key = item.lower()
        if key in seen:
            continue
        seen.add(key)
        out.append(item)
    return out
