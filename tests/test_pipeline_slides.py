import pytest

from pipeline_slides import (
    CLOSING_FALLBACK,
    PLACEHOLDER_BULLET,
    SECTION_PLACEHOLDER,
    SentenceQueue,
    allocate_slides,
    build_closing_slide,
    content_slide_budget,
    heading_terms,
    same_sentence,
)
from text_utils import ELLIPSIS

SENTENCES = [
    "The encoder uses graph attention over neighbouring road sensors.",
    "Experiments cover two public traffic benchmarks from California.",
    "Results show a twelve percent reduction in mean absolute error.",
    "The method trains in under an hour on a single commodity GPU.",
    "Future work will explore transfer of models across different cities.",
]


@pytest.mark.parametrize("target", range(6, 31))
def test_slide_count_matches_budget_for_every_target(target):
    slides = allocate_slides(["Introduction", "Method"], {}, SENTENCES, target_slides=target)
    assert len(slides) == max(3, min(target - 2, 15))
    assert slides[-1].id == "closing-slide"
    assert len({s.id for s in slides}) == len(slides)


def test_budget_bounds():
    assert content_slide_budget(6) == 4
    assert content_slide_budget(12) == 10
    assert content_slide_budget(30) == 15
    assert content_slide_budget(3) == 3


def test_overview_slides_come_first():
    slides = allocate_slides(
        ["Introduction"],
        {"Introduction": ["Intro bullet that is long enough."]},
        [],
        author_bullets=["Author: Jane Doe"],
        keyword_bullets=["graphs"],
        abstract_bullets=["Abstract sentence one is here.", "Abstract sentence two is here."],
        target_slides=8,
    )
    assert [s.id for s in slides] == [
        "authors-slide",
        "keywords-slide",
        "abstract-slide",
        "section-1",
        "placeholder-1",
        "closing-slide",
    ]
    assert slides[0].section == "Overview"
    assert slides[3].bullet_items() == ["Intro bullet that is long enough."]
    assert slides[4].bullet_items() == [PLACEHOLDER_BULLET]


def test_sections_without_pool_pull_matching_sentences():
    slides = allocate_slides(["Experimental Results"], {}, SENTENCES, target_slides=6)
    section = slides[0]
    assert section.id == "section-1"
    # "experi" and "result" stems pick these two before falling back to queue order.
    assert section.bullet_items()[:2] == [SENTENCES[1], SENTENCES[2]]
    assert len(section.bullet_items()) == 4


def test_section_placeholder_when_nothing_left():
    slides = allocate_slides(["Method"], {}, [], target_slides=6)
    assert slides[0].bullet_items() == [SECTION_PLACEHOLDER]


def test_no_sentence_is_used_twice():
    slides = allocate_slides(["Introduction", "Method"], {}, SENTENCES, target_slides=12)
    used = [b for s in slides if s.id != "closing-slide" for b in s.bullet_items() if b in SENTENCES]
    assert len(used) == len(set(used)) == len(SENTENCES)


def test_outline_larger_than_budget_is_cut():
    outline = [f"Topic {i}" for i in range(10)]
    slides = allocate_slides(outline, {}, [], target_slides=6)
    assert [s.id for s in slides] == ["section-1", "section-2", "section-3", "closing-slide"]


def test_closing_slide_picks_first_middle_last():
    slide = build_closing_slide(SENTENCES)
    assert slide.title == "Takeaways & Next Steps"
    assert slide.bullet_items() == [SENTENCES[0], SENTENCES[2], SENTENCES[4]]


def test_closing_slide_fallback_when_text_is_thin():
    assert build_closing_slide([]).bullet_items() == list(CLOSING_FALLBACK)
    assert build_closing_slide(["Only one meaningful sentence here."]).bullet_items() == list(CLOSING_FALLBACK)


def test_queue_take_and_discard():
    queue = SentenceQueue(SENTENCES)
    queue.discard([SENTENCES[0][:30] + ELLIPSIS])
    assert len(queue) == 4
    assert queue.take(2) == SENTENCES[1:3]
    assert queue.snapshot() == SENTENCES[3:]


def test_same_sentence_and_heading_terms():
    assert same_sentence("Alpha beta gamma", "alpha beta gamma")
    assert same_sentence("Alpha beta" + ELLIPSIS, "Alpha beta gamma delta")
    assert not same_sentence("Alpha beta", "Alpha beta gamma")
    assert heading_terms("Core Methodology and Results") == ["method", "result"]
