from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import reduce
from typing import Dict, List, Optional, Sequence, Tuple

from heading_utils import heading_key
from models import ExtractedDocument
from pipeline_common import logger
from text_utils import dedupe, normalize, split_sentences, truncate

ABSTRACT = "Abstract"
KEYWORDS = "Keywords"

SECTION_SENTENCE_LEN = 150
MIN_SECTION_SENTENCE_LEN = 20
MAX_SECTION_SENTENCES = 5
MAX_ABSTRACT_SENTENCES = 5
MAX_KEYWORDS = 6
MIN_QUEUE_SENTENCE_LEN = 25
QUEUE_SENTENCE_LEN = 160

_KEYWORD_LINE_RE = re.compile(r"^\s*keywords?[:\-]?\s*(.*)", re.IGNORECASE)
_KEYWORD_SPLIT_RE = re.compile(r"[,;•·▪‣]")
_BOILERPLATE_RE = re.compile(
    r"(\bdoi\b|copyright|licen[cs]e|creative commons|arxiv|e-?mail|www\.|https?://|\S+@\S+\.\w+)",
    re.IGNORECASE,
)

Pools = Dict[str, List[str]]
ScanState = Tuple[Optional[str], Pools]


@dataclass
class SectionPools:
    sections: Dict[str, List[str]] = field(default_factory=dict)
    abstract: List[str] = field(default_factory=list)
    keywords: List[str] = field(default_factory=list)


def _match_heading(key: str, heading_keys: Sequence[Tuple[str, str]]) -> Optional[str]:
    if not key:
        return None
    for heading, hkey in heading_keys:
        if not hkey:
            continue
        # Prefix match in both directions; "Results" can capture "Results and Discussion".
        if key == hkey or key.startswith(hkey) or hkey.startswith(key):
            return heading
    return None


def _scan_step(heading_keys: Sequence[Tuple[str, str]]):
    def step(state: ScanState, raw: str) -> ScanState:
        cursor, pools = state
        key = heading_key(raw)
        if key == "abstract":
            return ABSTRACT, pools
        if key == "keywords":
            return KEYWORDS, pools
        matched = _match_heading(key, heading_keys)
        if matched is not None:
            return matched, pools
        if cursor is not None and normalize(raw):
            pools.setdefault(cursor, []).append(raw)
        return cursor, pools

    return step


def scan_pools(lines: Sequence[str], headings: Sequence[str]) -> Pools:
    """Fold the line stream into raw-line pools keyed by the heading current at each line."""
    heading_keys = [(h, heading_key(h)) for h in headings]
    _cursor, pools = reduce(_scan_step(heading_keys), lines, (None, {}))
    return pools


def pool_sentences(lines: Sequence[str], max_len: int = SECTION_SENTENCE_LEN, limit: int = MAX_SECTION_SENTENCES) -> List[str]:
    sentences = dedupe(split_sentences(" ".join(lines)))
    out = [truncate(s, max_len) for s in sentences]
    return [s for s in out if len(s) > MIN_SECTION_SENTENCE_LEN][:limit]


def _keyword_source(keyword_lines: Sequence[str], first_page: Sequence[str], embedded: Optional[str] = None) -> str:
    if keyword_lines:
        return " ".join(normalize(line) for line in keyword_lines)
    if normalize(embedded or ""):
        return normalize(embedded)
    for raw in first_page:
        m = _KEYWORD_LINE_RE.search(normalize(raw))
        if m and m.group(1).strip():
            return m.group(1)
    return ""


def split_keywords(source: str) -> List[str]:
    tokens = (normalize(tok).rstrip(".") for tok in _KEYWORD_SPLIT_RE.split(source or ""))
    kept = [tok for tok in tokens if 2 < len(tok) <= 60]
    return dedupe(kept)[:MAX_KEYWORDS]


def associate_sections(doc: ExtractedDocument, headings: Sequence[str]) -> SectionPools:
    """Attribute free text to the nearest preceding heading and turn each pool into bullets."""
    pools = scan_pools(doc.all_lines, headings)

    result = SectionPools()
    for heading in headings:
        lines = pools.get(heading)
        if not lines:
            continue
        sentences = pool_sentences(lines)
        if sentences:
            result.sections[heading] = sentences

    result.abstract = pool_sentences(pools.get(ABSTRACT, []), limit=MAX_ABSTRACT_SENTENCES)
    result.keywords = split_keywords(
        _keyword_source(pools.get(KEYWORDS, []), doc.first_page, doc.metadata.keywords)
    )

    logger.debug(
        "Section pools: %d headed, %d abstract sentences, %d keywords",
        len(result.sections),
        len(result.abstract),
        len(result.keywords),
    )
    return result


def is_boilerplate(sentence: str) -> bool:
    return bool(_BOILERPLATE_RE.search(sentence))


def build_sentence_queue(sentences: Sequence[str]) -> List[str]:
    """Deduplicated document sentences worth putting on a slide, in reading order."""
    kept = [
        truncate(s, QUEUE_SENTENCE_LEN)
        for s in sentences
        if len(s) >= MIN_QUEUE_SENTENCE_LEN and not is_boilerplate(s)
    ]
    return dedupe(kept)
