from __future__ import annotations

from typing import List, Sequence

from pipeline_common import logger

FALLBACK_OUTLINE = (
    "Motivation & Problem Statement",
    "Core Methodology",
    "Key Findings",
    "Implications & Future Work",
)
MIN_DETECTED_HEADINGS = 3
MAX_OUTLINE_ITEMS = 8
MAX_SPLICED_ITEMS = 6


def build_outline(headings: Sequence[str]) -> List[str]:
    """Turn detected headings into the deck outline.

    With at least three headings the first eight are used as-is. Otherwise the
    detected headings are spliced into the fixed fallback outline right after
    its first item, so the outline is never empty.

    Args:
        headings (Sequence[str]): detected headings in reading order.

    Returns:
        List[str]: between one and eight section names.
    """
    if len(headings) >= MIN_DETECTED_HEADINGS:
        return list(headings[:MAX_OUTLINE_ITEMS])

    outline = list(FALLBACK_OUTLINE)
    for heading in reversed(headings):
        if len(outline) >= MAX_OUTLINE_ITEMS:
            break
        outline.insert(1, heading)
    logger.debug("Only %d headings detected; using fallback outline.", len(headings))
    return outline[:MAX_SPLICED_ITEMS]
