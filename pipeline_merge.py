from __future__ import annotations

import re
from typing import List, Optional, Tuple

from llm import ChatCompletionClient
from models import AnalysisResult, BulletsBlock, GeneratedDeck, LlmResponsePayload, LlmSlidePayload, Slide
from pipeline_common import FIXED_FRAMES, logger
from pipeline_outline import MAX_OUTLINE_ITEMS
from text_utils import clip_words, normalize, truncate

PROMPT_SENTENCES = 18
PROMPT_SENTENCE_LEN = 200
MAX_BULLET_WORDS = 22
LLM_PLACEHOLDER_BULLET = "(slide content pending refinement)"
DEFAULT_OUTLINE_HINT = "1. Introduction\n2. Method\n3. Results\n4. Conclusion"

DEFAULT_LLM_PROMPT = """Structure the deck into the following thematic order and only create additional slides when strictly necessary:
1. Motivation
2. Method
3. Experiments
4. Results
5. Discussion
6. Conclusion

When producing the JSON response:
- Set the "section" field to one of the headings above in the same order.
- For every slide provide a "subsection" string.
- Each slide must contain 4-6 bullet points that capture concrete technical details (datasets, metrics, numerical values, qualitative observations, limitations, implications, etc.).
- Bullets should be declarative sentences under 22 words, without trailing punctuation or numbering, and use active voice.
- Define new terminology or abbreviations the first time they appear.
- Add up to 3 sentences of speaker notes when they help explain transitions or interpret results.
- Respect the requested slide count exactly (excluding title and agenda frames). If information is sparse, merge concepts rather than invent content.
- Highlight limitations or future work explicitly in the Discussion slide and summarise actionable insights in the Conclusion slide.
"""


def build_prompt(baseline: AnalysisResult, target_slides: int, instructions: str = "") -> Tuple[str, str]:
    """Build the (system, user) prompt pair from the heuristic baseline."""
    meta = baseline.metadata
    key_sentences = "\n".join(
        f"{i}. {truncate(s, PROMPT_SENTENCE_LEN)}" for i, s in enumerate(baseline.sentences[:PROMPT_SENTENCES], 1)
    )
    outline_text = "\n".join(f"{i}. {item}" for i, item in enumerate(baseline.outline, 1))

    user = f"Paper title: {meta.paper_title}\n"
    if meta.paper_subtitle:
        user += f"Subtitle or venue: {meta.paper_subtitle}\n"
    if meta.authors:
        user += f"Author line: {meta.authors}\n"
    user += (
        f"Suggested outline:\n{outline_text or DEFAULT_OUTLINE_HINT}\n\n"
        f"Important sentences from the paper (truncated):\n{key_sentences}\n\n"
        f"Target slide count (including conclusion): {target_slides}.\n"
        "Produce a structured LaTeX-friendly outline.\n\n"
        f"{(instructions or DEFAULT_LLM_PROMPT).strip()}"
    )

    system = " ".join(
        [
            "You are Paper2Deck, an expert technical writer who transforms academic papers into slide decks.",
            "Return JSON ONLY with the schema:",
            "{",
            '  "paperTitle": string,',
            '  "paperSubtitle": string,',
            '  "authors": string,',
            '  "outline": string[],',
            '  "slides": [',
            '     { "section": string, "subsection": string, "title": string, "bullets": string[], "notes": string }',
            "  ]",
            "}",
            f"Limit slides to {target_slides - FIXED_FRAMES} content slides plus one conclusion slide.",
            f"Bullets must be concise (max {MAX_BULLET_WORDS} words) and factual.",
        ]
    )
    return system, user


def try_extract_json(text: str) -> Optional[str]:
    """Return the first balanced ``{...}`` object in ``text``, tolerating code fences."""
    t = (text or "").strip()
    if t.startswith("```"):
        t = re.sub(r"^```[a-zA-Z]*\n", "", t)
        t = re.sub(r"\n```$", "", t).strip()

    start = t.find("{")
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for j in range(start, len(t)):
        ch = t[j]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return t[start : j + 1]
    return None


def parse_llm_payload(content: str) -> LlmResponsePayload:
    js = try_extract_json(content)
    if js is None:
        raise ValueError("LLM response did not contain a JSON object.")
    return LlmResponsePayload.model_validate_json(js)


def _clean(value: Optional[str]) -> Optional[str]:
    value = normalize(value or "")
    return value or None


def map_slide_payload(slide: LlmSlidePayload, index: int) -> Slide:
    bullets = [clip_words(b, MAX_BULLET_WORDS) for b in (slide.bullets or []) if normalize(b)]
    if not bullets:
        paragraph = _clean(slide.paragraph)
        bullets = [truncate(paragraph)] if paragraph else [LLM_PLACEHOLDER_BULLET]
    return Slide(
        id=f"llm-slide-{index + 1}",
        title=_clean(slide.title) or f"Topic {index + 1}",
        section=_clean(slide.section),
        subsection=_clean(slide.subsection),
        blocks=[BulletsBlock(items=bullets)],
        notes=_clean(slide.notes),
    )


def baseline_deck(baseline: AnalysisResult, mode: str = "static") -> GeneratedDeck:
    metadata = baseline.metadata.model_copy(update={"mode": mode})
    return GeneratedDeck(metadata=metadata, outline=list(baseline.outline), slides=list(baseline.slides))


def merge_llm_payload(baseline: AnalysisResult, payload: LlmResponsePayload) -> GeneratedDeck:
    """Overlay well-formed, non-empty payload fields on the heuristic baseline."""
    meta = baseline.metadata
    outline = [item for item in (normalize(o) for o in payload.outline or []) if item][:MAX_OUTLINE_ITEMS]
    slides: List[Slide] = [map_slide_payload(s, i) for i, s in enumerate(payload.slides or [])]
    if not slides:
        slides = list(baseline.slides)

    metadata = meta.model_copy(
        update={
            "paper_title": _clean(payload.paper_title) or meta.paper_title,
            "paper_subtitle": _clean(payload.paper_subtitle) or meta.paper_subtitle,
            "authors": _clean(payload.authors) or meta.authors,
            "mode": "llm",
            "slide_count": len(slides) + FIXED_FRAMES,
        }
    )
    return GeneratedDeck(metadata=metadata, outline=outline or list(baseline.outline), slides=slides)


def generate_deck_with_llm(
    baseline: AnalysisResult,
    client: ChatCompletionClient,
    target_slides: int,
    instructions: str = "",
) -> GeneratedDeck:
    """Ask the LLM for a deck and merge it; any failure returns the static baseline untouched."""
    system, user = build_prompt(baseline, target_slides, instructions)
    try:
        logger.info("Requesting slide outline from LLM...")
        content = client.complete(system, user)
        payload = parse_llm_payload(content)
        deck = merge_llm_payload(baseline, payload)
    except Exception as exc:
        logger.warning("LLM augmentation failed (%s); using heuristic deck.", exc)
        return baseline_deck(baseline, mode="static")
    logger.info("LLM deck merged: %d slides, %d outline items.", len(deck.slides), len(deck.outline))
    return deck
