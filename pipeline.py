from __future__ import annotations

"""Heuristic paper analysis and deck assembly."""
import textwrap
from typing import Optional, Sequence

from heading_utils import detect_headings
from llm import ChatCompletionClient
from models import AnalysisResult, DeckMetadata, ExtractedDocument, FigureDescriptor, GeneratedDeck
from pipeline_common import DEFAULT_TARGET_SLIDES, FIXED_FRAMES, RunConfig, logger, now_iso
from pipeline_figures import integrate_figures
from pipeline_merge import baseline_deck, generate_deck_with_llm
from pipeline_metadata import derive_author_bullets, derive_authors, derive_subtitle, derive_title
from pipeline_outline import build_outline
from pipeline_sections import associate_sections, build_sentence_queue, is_boilerplate
from pipeline_slides import allocate_slides
from text_utils import split_sentences


def analyze_paper(doc: ExtractedDocument, target_slides: int = DEFAULT_TARGET_SLIDES) -> AnalysisResult:
    """Build the heuristic deck for one extracted document.

    Never raises on thin or empty input: missing text turns into fallback
    metadata, the fallback outline and placeholder slides.

    Args:
        doc (ExtractedDocument):
        target_slides (int): requested total including title and agenda frames.

    Returns:
        AnalysisResult:
    """
    first_page = doc.first_page
    title = derive_title(first_page, doc.metadata)

    headings = detect_headings(doc.all_lines)
    outline = build_outline(headings)
    pools = associate_sections(doc, headings)

    sentences = split_sentences(doc.text)
    slides = allocate_slides(
        outline,
        pools.sections,
        build_sentence_queue(sentences),
        author_bullets=derive_author_bullets(first_page, doc.metadata, title=title),
        keyword_bullets=pools.keywords,
        abstract_bullets=pools.abstract,
        target_slides=target_slides,
        closing_sentences=[s for s in sentences if not is_boilerplate(s)],
    )

    metadata = DeckMetadata(
        paper_title=title,
        paper_subtitle=derive_subtitle(first_page, doc.metadata),
        authors=derive_authors(first_page, doc.metadata),
        generated_at=now_iso(),
        mode="static",
        slide_count=len(slides) + FIXED_FRAMES,
    )
    logger.info(
        "Analyzed %r: %d headings, %d sentences, %d content slides.",
        title,
        len(headings),
        len(sentences),
        len(slides),
    )
    logger.debug("Detected headings: %s", headings)
    return AnalysisResult(metadata=metadata, outline=outline, slides=slides, sentences=sentences)


def print_deck(deck: GeneratedDeck) -> None:
    width = 96
    meta = deck.metadata
    print("\n" + "=" * width)
    print(f"DECK: {meta.paper_title}")
    if meta.paper_subtitle:
        print(f"VENUE: {meta.paper_subtitle}")
    if meta.authors:
        print(f"AUTHORS: {meta.authors}")
    print(f"MODE: {meta.mode}   SLIDES: {meta.slide_count}")
    print("OUTLINE: " + " | ".join(deck.outline))
    print("=" * width)
    for i, sl in enumerate(deck.slides, 1):
        section = f" [{sl.section}]" if sl.section else ""
        print(f"\n{i:02d}. {sl.title}{section}")
        for b in sl.bullet_items():
            print(textwrap.fill(b, width=width - 6, initial_indent="   - ", subsequent_indent="     "))
        for block in sl.blocks:
            if block.kind == "image":
                print(f"   [figure] {block.path}")
        if sl.notes:
            note = sl.notes[:220] + ("..." if len(sl.notes) > 220 else "")
            print(textwrap.fill(f"[notes] {note}", width=width, initial_indent="   ", subsequent_indent="   "))
    print("\n" + "=" * width)


class Pipeline:
    def __init__(self, cfg: RunConfig, llm: Optional[ChatCompletionClient] = None) -> None:
        """Initialize.

        Args:
            cfg (RunConfig):
            llm (Optional[ChatCompletionClient]): required only in ``llm`` mode.

        Returns:
            None:
        """
        self.cfg = cfg
        self.llm = llm

    def run(self, doc: ExtractedDocument, figures: Sequence[FigureDescriptor] = ()) -> GeneratedDeck:
        """Run.

        Args:
            doc (ExtractedDocument):
            figures (Sequence[FigureDescriptor]): rendered figures to place on slides.

        Returns:
            GeneratedDeck:
        """
        baseline = analyze_paper(doc, self.cfg.target_slides)
        if self.cfg.mode == "llm" and self.llm is not None:
            deck = generate_deck_with_llm(baseline, self.llm, self.cfg.target_slides, self.cfg.prompt)
        else:
            if self.cfg.mode == "llm":
                logger.warning("LLM mode requested without a client; using heuristic deck.")
            deck = baseline_deck(baseline)

        deck = integrate_figures(deck, figures)
        deck.metadata.generated_at = now_iso()
        return deck
