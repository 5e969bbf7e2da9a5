"""Slide budget allocation for the heuristic deck."""
from __future__ import annotations

import re
from collections import deque
from typing import Dict, Iterable, Iterator, List, Optional, Sequence

from models import BulletsBlock, Slide
from pipeline_common import (
    DEFAULT_TARGET_SLIDES,
    FIXED_FRAMES,
    MAX_CONTENT_SLIDES,
    MIN_CONTENT_SLIDES,
    logger,
)
from pipeline_outline import FALLBACK_OUTLINE
from text_utils import ELLIPSIS, truncate

BULLETS_PER_SLIDE = 4
CLOSING_SENTENCE_LEN = 140
MIN_MEANINGFUL_LEN = 20

CLOSING_TITLE = "Takeaways & Next Steps"
CLOSING_SECTION = "Conclusion"
FILLER_TITLE = "Additional Discussion"
FILLER_SECTION = "Discussion"
PLACEHOLDER_TITLE = "Additional Notes"
SECTION_PLACEHOLDER = "Key points for this section need manual content."
PLACEHOLDER_BULLET = "This slide needs manual content."
CLOSING_FALLBACK = (
    "Revisit the problem, dataset, or theoretical gap addressed by the paper.",
    "Summarize the proposed approach and why it matters.",
    "Highlight the most important quantitative or qualitative results.",
)

_WORD_RE = re.compile(r"[a-z0-9]+")
_STOP_WORDS = {
    "and", "the", "for", "with", "from", "into", "over", "that", "this", "using",
    "based", "toward", "towards", "core", "key", "work", "future", "statement",
}


def content_slide_budget(target_slides: int) -> int:
    """Content slides for a requested total, leaving room for the title and agenda frames."""
    return max(MIN_CONTENT_SLIDES, min(target_slides - FIXED_FRAMES, MAX_CONTENT_SLIDES))


def _stem(sentence: str) -> str:
    s = sentence[:-1] if sentence.endswith(ELLIPSIS) else sentence
    return s.lower()


def same_sentence(a: str, b: str) -> bool:
    """True when two bullets come from the same sentence, even if truncated differently."""
    sa, sb = _stem(a), _stem(b)
    if sa == sb:
        return True
    if a.endswith(ELLIPSIS) or b.endswith(ELLIPSIS):
        return bool(sa) and bool(sb) and (sa.startswith(sb) or sb.startswith(sa))
    return False


def heading_terms(heading: str) -> List[str]:
    terms = []
    for word in _WORD_RE.findall(heading.lower()):
        if len(word) < 4 or word in _STOP_WORDS:
            continue
        terms.append(word[:6])
    return terms


class SentenceQueue:
    """Document sentences not yet placed on a slide.

    Owned by a single ``allocate_slides`` call; every take removes what it
    returns so no sentence appears on two slides.
    """

    def __init__(self, sentences: Iterable[str] = ()) -> None:
        self._items = deque(sentences)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._items))

    def snapshot(self) -> List[str]:
        return list(self._items)

    def take(self, n: int) -> List[str]:
        out = []
        while self._items and len(out) < n:
            out.append(self._items.popleft())
        return out

    def take_matching(self, terms: Sequence[str], n: int) -> List[str]:
        """Take up to ``n`` sentences, those mentioning any term first, then the oldest rest."""
        patterns = [re.compile(r"\b" + re.escape(t)) for t in terms]
        matched = [s for s in self._items if any(p.search(s.lower()) for p in patterns)][:n]
        for s in matched:
            self._items.remove(s)
        return matched + self.take(n - len(matched))

    def discard(self, sentences: Iterable[str]) -> None:
        used = list(sentences)
        self._items = deque(s for s in self._items if not any(same_sentence(s, u) for u in used))


def bullet_slide(
    slide_id: str,
    title: str,
    bullets: Sequence[str],
    section: Optional[str] = None,
    subsection: Optional[str] = None,
) -> Slide:
    return Slide(
        id=slide_id,
        title=title,
        section=section,
        subsection=subsection,
        blocks=[BulletsBlock(items=list(bullets))],
    )


def build_closing_slide(sentences: Sequence[str]) -> Slide:
    meaningful = [s for s in sentences if len(s) > MIN_MEANINGFUL_LEN]
    picks: List[str] = []
    if meaningful:
        for s in (meaningful[0], meaningful[len(meaningful) // 2], meaningful[-1]):
            if s not in picks:
                picks.append(s)
    bullets = [truncate(s, CLOSING_SENTENCE_LEN) for s in picks]
    if len(bullets) < 2:
        bullets = list(CLOSING_FALLBACK)
    return bullet_slide("closing-slide", CLOSING_TITLE, bullets, section=CLOSING_SECTION)


def _prefix_slides(
    author_bullets: Sequence[str],
    keyword_bullets: Sequence[str],
    abstract_bullets: Sequence[str],
    queue: SentenceQueue,
) -> List[Slide]:
    slides: List[Slide] = []
    if author_bullets:
        slides.append(bullet_slide("authors-slide", "Authors & Affiliations", author_bullets, section="Overview"))
    if keyword_bullets:
        slides.append(bullet_slide("keywords-slide", "Keywords", keyword_bullets, section="Overview"))
    if abstract_bullets:
        items = list(abstract_bullets[:BULLETS_PER_SLIDE])
        queue.discard(items)
        slides.append(bullet_slide("abstract-slide", "Abstract", items, section="Overview"))
    return slides


def _section_slides(
    headings: Sequence[str],
    section_pools: Dict[str, List[str]],
    queue: SentenceQueue,
) -> List[Slide]:
    slides = []
    for idx, heading in enumerate(headings, 1):
        pooled = section_pools.get(heading) or []
        if pooled:
            bullets = list(pooled[:BULLETS_PER_SLIDE])
            queue.discard(bullets)
        else:
            bullets = queue.take_matching(heading_terms(heading), BULLETS_PER_SLIDE)
        if not bullets:
            bullets = [SECTION_PLACEHOLDER]
        slides.append(bullet_slide(f"section-{idx}", heading, bullets, section=heading))
    return slides


def allocate_slides(
    outline: Sequence[str],
    section_pools: Dict[str, List[str]],
    sentences: Sequence[str],
    author_bullets: Sequence[str] = (),
    keyword_bullets: Sequence[str] = (),
    abstract_bullets: Sequence[str] = (),
    target_slides: int = DEFAULT_TARGET_SLIDES,
    closing_sentences: Optional[Sequence[str]] = None,
) -> List[Slide]:
    """Lay out the content slides for one deck.

    The result always holds exactly ``content_slide_budget(target_slides)``
    slides: overview slides (authors, keywords, abstract), one slide per
    outline section, filler slides from leftover sentences, placeholder
    slides once text runs out, and a closing slide.

    Args:
        outline (Sequence[str]): ordered section names.
        section_pools (Dict[str, List[str]]): bullets already attributed to a heading.
        sentences (Sequence[str]): global deduplicated sentence queue, in reading order.
        author_bullets (Sequence[str]):
        keyword_bullets (Sequence[str]):
        abstract_bullets (Sequence[str]):
        target_slides (int): requested deck size including title and agenda frames.
        closing_sentences (Optional[Sequence[str]]): source for the takeaways slide;
            defaults to the sentence queue before anything is consumed.

    Returns:
        List[Slide]:
    """
    max_content = content_slide_budget(target_slides)
    core_slots = max(1, max_content - 1)
    queue = SentenceQueue(sentences)
    closing_source = list(closing_sentences) if closing_sentences is not None else queue.snapshot()

    slides = _prefix_slides(author_bullets, keyword_bullets, abstract_bullets, queue)[:core_slots]
    prefix_len = len(slides)

    headings = list(outline) or list(FALLBACK_OUTLINE)
    slides += _section_slides(headings[: core_slots - prefix_len], section_pools, queue)
    section_len = len(slides) - prefix_len

    filler_idx = 0
    while len(slides) < core_slots and len(queue):
        filler_idx += 1
        bullets = queue.take(BULLETS_PER_SLIDE)
        slides.append(bullet_slide(f"filler-{filler_idx}", FILLER_TITLE, bullets, section=FILLER_SECTION))

    placeholder_idx = 0
    while len(slides) < core_slots:
        placeholder_idx += 1
        slides.append(
            bullet_slide(f"placeholder-{placeholder_idx}", PLACEHOLDER_TITLE, [PLACEHOLDER_BULLET], section=FILLER_SECTION)
        )

    slides.append(build_closing_slide(closing_source))
    slides = slides[:max_content]

    logger.debug(
        "Allocated %d slides: %d overview, %d section, %d filler, %d placeholder, 1 closing",
        len(slides),
        prefix_len,
        section_len,
        filler_idx,
        placeholder_idx,
    )
    return slides
