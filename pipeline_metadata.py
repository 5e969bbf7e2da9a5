"""Title, venue and author heuristics over the first page and embedded PDF info."""
from __future__ import annotations

import re
from typing import List, Optional, Sequence

from heading_utils import heading_key
from models import FALLBACK_TITLE, DocumentMetadata
from text_utils import dedupe, normalize, truncate

MIN_TITLE_LEN = 8
MIN_AUTHOR_LEN = 4
MAX_AUTHOR_WORDS = 15
MAX_NAME_LINE_LEN = 80
MAX_AUTHOR_BULLETS = 6
AFFILIATION_LEN = 160

_VENUE_RE = re.compile(
    r"\b(conference|journal|symposium|workshop|university|college|laboratory|institute|department)\b",
    re.IGNORECASE,
)
_AUTHOR_MARKER_RE = re.compile(r"\b(author|by|student|advisor)\b", re.IGNORECASE)
_AUTHOR_PREFIX_RE = re.compile(r"^(author|by)[:\s]+", re.IGNORECASE)
_AFFILIATION_RE = re.compile(
    r"\b(university|universit[äéà]t?|institute|laboratory|labs?|department|dept\.|college|school"
    r"|cent(?:er|re)|academy|faculty|inc\.|corporation|research)\b",
    re.IGNORECASE,
)
_NAME_SPLIT_RE = re.compile(r"\s*(?:[,;]|\band\b|&)\s*")
_NAME_MARKS_RE = re.compile(r"[\d*†‡§¶✉]+")
_NAME_TOKEN_RE = re.compile(r"[^\W\d_](?:[^\W\d_]|['’.\-])*")
_STOP_KEYS = ("abstract", "keywords", "keyword", "indexterms", "introduction")


def derive_title(first_page: Sequence[str], meta: Optional[DocumentMetadata] = None) -> str:
    candidates = [meta.title if meta else None, *first_page]
    for raw in candidates:
        candidate = normalize(raw or "")
        if len(candidate) < MIN_TITLE_LEN:
            continue
        if candidate.lower() == "paper":
            continue
        return candidate
    return FALLBACK_TITLE


def derive_subtitle(first_page: Sequence[str], meta: Optional[DocumentMetadata] = None) -> Optional[str]:
    subject = normalize((meta.subject if meta else None) or "")
    if subject:
        return subject
    for raw in first_page[1:5]:
        line = normalize(raw)
        if line and _VENUE_RE.search(line):
            return line
    return None


def derive_authors(first_page: Sequence[str], meta: Optional[DocumentMetadata] = None) -> Optional[str]:
    author = normalize((meta.author if meta else None) or "")
    if len(author) >= MIN_AUTHOR_LEN:
        return author

    for raw in first_page[1:6]:
        line = normalize(raw)
        if not line:
            continue
        if _AUTHOR_MARKER_RE.search(line):
            return _AUTHOR_PREFIX_RE.sub("", line).strip() or None
        if ("," in line or " and " in line) and len(line.split(" ")) <= MAX_AUTHOR_WORDS:
            return line
    return None


def _looks_like_name(part: str) -> bool:
    tokens = part.split(" ")
    if not 2 <= len(tokens) <= 4:
        return False
    for tok in tokens:
        if not _NAME_TOKEN_RE.fullmatch(tok):
            return False
        if not tok[0].isupper():
            return False
    return not _AFFILIATION_RE.search(part)


def _names_from(line: str) -> List[str]:
    names = []
    for part in _NAME_SPLIT_RE.split(_AUTHOR_PREFIX_RE.sub("", line)):
        part = normalize(_NAME_MARKS_RE.sub(" ", part))
        if part and _looks_like_name(part):
            names.append(part)
    return names


def _is_stop_line(line: str) -> bool:
    key = heading_key(line)
    return any(key.startswith(stop) for stop in _STOP_KEYS)


def derive_author_bullets(
    first_page: Sequence[str],
    meta: Optional[DocumentMetadata] = None,
    title: str = "",
) -> List[str]:
    """Collect ``Author:``/``Affiliation:`` bullets from the header block of the first page."""
    names: List[str] = []
    affiliations: List[str] = []

    author_field = normalize((meta.author if meta else None) or "")
    if author_field:
        names.extend(_names_from(author_field))

    title_key = normalize(title).lower()
    for raw in first_page[:12]:
        line = normalize(raw)
        if not line:
            continue
        if line.lower() == title_key:
            continue
        if _is_stop_line(line):
            break
        if _AFFILIATION_RE.search(line):
            affiliations.append(line)
            continue
        if len(line) > MAX_NAME_LINE_LEN or "@" in line:
            continue
        names.extend(_names_from(line))

    bullets = [f"Author: {name}" for name in dedupe(names)]
    bullets += [truncate(f"Affiliation: {aff}", AFFILIATION_LEN) for aff in dedupe(affiliations)]
    return bullets[:MAX_AUTHOR_BULLETS]
