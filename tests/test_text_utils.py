from text_utils import ELLIPSIS, clip_words, dedupe, normalize, split_sentences, title_case, truncate


def test_normalize_collapses_whitespace_and_is_idempotent():
    raw = "  Deep \t learning\n for   graphs  "
    once = normalize(raw)
    assert once == "Deep learning for graphs"
    assert normalize(once) == once


def test_normalize_handles_none_and_blank():
    assert normalize(None) == ""
    assert normalize(" \n\t ") == ""


def test_title_case_lowercases_the_rest_of_each_token():
    assert title_case("RELATED work") == "Related Work"
    assert title_case("experimental setup") == "Experimental Setup"


def test_split_sentences_needs_uppercase_or_digit_after_boundary():
    text = "First sentence here. Second one follows! 3 items remain? e.g. not a split."
    assert split_sentences(text) == [
        "First sentence here.",
        "Second one follows!",
        "3 items remain? e.g. not a split.",
    ]


def test_split_sentences_drops_empty_parts():
    assert split_sentences("") == []
    assert split_sentences("   ") == []


def test_truncate_long_sentence_ends_with_ellipsis():
    sentence = "word " * 60
    out = truncate(sentence.strip())
    assert len(out) <= 160
    assert out.endswith(ELLIPSIS)
    assert not out[:-1].endswith(" ")


def test_truncate_strips_trailing_separators_before_ellipsis():
    sentence = "a" * 10 + ", " + "b" * 20
    out = truncate(sentence, max_len=13)
    assert out == "a" * 10 + ELLIPSIS


def test_truncate_keeps_short_sentence():
    assert truncate("Short enough.") == "Short enough."


def test_clip_words():
    assert clip_words("one two three", 5) == "one two three"
    assert clip_words("one two three four", 2) == "one two" + ELLIPSIS


def test_dedupe_is_case_insensitive_and_keeps_first_spelling():
    assert dedupe(["Graph", "graph", "Node", "GRAPH"]) == ["Graph", "Node"]
