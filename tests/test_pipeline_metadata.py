from models import FALLBACK_TITLE, DocumentMetadata
from pipeline_metadata import derive_author_bullets, derive_authors, derive_subtitle, derive_title


def test_metadata_fields_take_priority(doc_with_metadata):
    page = doc_with_metadata.first_page
    meta = doc_with_metadata.metadata
    assert derive_title(page, meta) == "Learning to Rank with Sparse Feedback"
    assert derive_subtitle(page, meta) == "Proceedings of the Web Conference 2024"
    assert derive_authors(page, meta) == "Alice Martin, Bob Chen"
    assert derive_author_bullets(page, meta, title="Learning to Rank with Sparse Feedback") == [
        "Author: Alice Martin",
        "Author: Bob Chen",
    ]


def test_first_page_heuristics(sample_doc):
    page = sample_doc.first_page
    title = derive_title(page)
    assert title == "Graph Attention Networks for Traffic Forecasting"
    assert derive_subtitle(page) == "Department of Computer Science, Example University"
    assert derive_authors(page) == "Jane Doe and John Smith"
    assert derive_author_bullets(page, title=title) == [
        "Author: Jane Doe",
        "Author: John Smith",
        "Affiliation: Department of Computer Science, Example University",
    ]


def test_title_falls_back_when_nothing_qualifies():
    assert derive_title(["paper", "short"]) == FALLBACK_TITLE
    assert derive_title([], DocumentMetadata(title="  ")) == FALLBACK_TITLE
    assert derive_title([]) == FALLBACK_TITLE


def test_author_marker_prefix_is_removed():
    page = ["A Long Enough Title Here", "By Maria Lopez"]
    assert derive_authors(page) == "Maria Lopez"


def test_author_bullets_stop_at_abstract():
    page = ["A Long Enough Title Here", "Abstract", "Jane Doe"]
    assert derive_author_bullets(page, title=page[0]) == []


def test_missing_subtitle_and_authors_are_none(empty_doc):
    assert derive_subtitle(empty_doc.first_page, empty_doc.metadata) is None
    assert derive_authors(empty_doc.first_page, empty_doc.metadata) is None
