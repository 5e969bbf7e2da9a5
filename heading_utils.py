"""Section-heading detection over the raw line stream of a paper."""
from __future__ import annotations

import re
from typing import Iterable, List

from text_utils import normalize, title_case

MAX_HEADINGS = 12
MIN_HEADING_LEN = 3
MAX_HEADING_LEN = 70
MAX_TITLE_CASE_WORDS = 8

_NUMBERED_RE = re.compile(r"^\d+(\.\d+)*\s+")
_KEYWORD_RE = re.compile(
    r"(introduction|background|related work|method|approach|model|experiment|evaluation"
    r"|result|discussion|conclusion|future work|summary)",
    re.IGNORECASE,
)
_TERMINAL_PUNCT_RE = re.compile(r"[.!?]$")
_TRAILING_SEP_RE = re.compile(r"[:;,.\-\s]+$")
_NON_ALNUM_RE = re.compile(r"[^a-z0-9]")


def strip_numbering(line: str) -> str:
    return _NUMBERED_RE.sub("", line)


def heading_key(text: str) -> str:
    """Numbering-stripped, lowercase, alphanumeric-only key used to match headings to lines."""
    return _NON_ALNUM_RE.sub("", strip_numbering(normalize(text)).lower())


def _is_short_numbered_section(line: str) -> bool:
    # "1 Introduction", "2 Method": numbered lines whose remainder is a known section word.
    return bool(_NUMBERED_RE.match(line)) and bool(_KEYWORD_RE.search(strip_numbering(line)))


def _is_candidate(line: str, word_count: int) -> bool:
    looks_numbered = bool(_NUMBERED_RE.match(line))
    looks_keyword = bool(_KEYWORD_RE.search(line))
    looks_title_case = (
        word_count <= MAX_TITLE_CASE_WORDS
        and not _TERMINAL_PUNCT_RE.search(line)
        and line == title_case(line)
    )
    return looks_numbered or looks_keyword or looks_title_case


def detect_headings(lines: Iterable[str]) -> List[str]:
    """Return up to 12 unique, title-cased headings in first-seen order."""
    headings: List[str] = []
    seen = set()

    for raw in lines:
        line = normalize(raw)
        if not line:
            continue

        word_count = len(line.split(" "))
        if word_count <= 2 and not _is_short_numbered_section(line):
            continue
        if not _is_candidate(line, word_count):
            continue

        text = _TRAILING_SEP_RE.sub("", strip_numbering(line)).strip()
        if not (MIN_HEADING_LEN <= len(text) <= MAX_HEADING_LEN):
            continue

        key = text.lower()
        if key in seen:
            continue
        seen.add(key)
        headings.append(title_case(text))

        if len(headings) >= MAX_HEADINGS:
            break

    return headings
