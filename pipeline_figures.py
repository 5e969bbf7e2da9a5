from __future__ import annotations

import json
from typing import List, Optional, Sequence

from pydantic import ValidationError

from models import FigureDescriptor, GeneratedDeck, ImageBlock, Slide
from pipeline_common import FIXED_FRAMES, logger

FIGURE_DIR = "figuras"
FIGURE_SECTION = "Figures"


def _default_title(index: int) -> str:
    return f"Figure {index + 1}"


def _normalize_caption(caption: Optional[str]) -> Optional[str]:
    if not caption:
        return None
    caption = caption.strip()
    return caption or None


def apply_figures(slides: Sequence[Slide], figures: Sequence[FigureDescriptor]) -> List[Slide]:
    """Swap matched slides' blocks for an image block and append unmatched figures.

    Args:
        slides (Sequence[Slide]): slides with stable ids (``section-N``, ``closing-slide``, ...).
        figures (Sequence[FigureDescriptor]):

    Returns:
        List[Slide]: a new list; the input slides are not modified.
    """
    out = list(slides)
    for index, figure in enumerate(figures):
        caption = _normalize_caption(figure.caption)
        label = caption or _default_title(index)
        image = ImageBlock(path=f"{FIGURE_DIR}/{figure.filename}", caption=caption)

        pos = next((i for i, s in enumerate(out) if s.id == figure.id), None)
        if pos is not None:
            current = out[pos]
            out[pos] = current.model_copy(
                update={
                    "blocks": [image],
                    "section": current.section or FIGURE_SECTION,
                    "subsection": current.subsection or label,
                }
            )
            continue

        out.append(
            Slide(
                id=figure.id,
                title=label,
                section=FIGURE_SECTION,
                subsection=label,
                blocks=[image],
            )
        )
    return out


def integrate_figures(deck: GeneratedDeck, figures: Sequence[FigureDescriptor]) -> GeneratedDeck:
    if not figures:
        return deck
    slides = apply_figures(deck.slides, figures)
    metadata = deck.metadata.model_copy(update={"slide_count": len(slides) + FIXED_FRAMES})
    logger.info("Applied %d figure(s); deck now has %d content slides.", len(figures), len(slides))
    return deck.model_copy(update={"slides": slides, "metadata": metadata})


def load_figure_descriptors(raw: str) -> List[FigureDescriptor]:
    """Parse a JSON array of ``{id, filename, caption?}``; bad entries are skipped."""
    if not (raw or "").strip():
        return []
    try:
        items = json.loads(raw)
    except json.JSONDecodeError as exc:
        logger.warning("Failed to parse figure metadata (%s); continuing without figures.", exc)
        return []
    if not isinstance(items, list):
        logger.warning("Figure metadata must be a JSON array; continuing without figures.")
        return []

    figures: List[FigureDescriptor] = []
    for item in items:
        try:
            figures.append(FigureDescriptor.model_validate(item))
        except ValidationError:
            logger.warning("Skipping figure descriptor without id/filename: %r", item)
    return figures
