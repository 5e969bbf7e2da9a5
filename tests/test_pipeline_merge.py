import json

import pytest

from llm import ChatCompletionClient, LLMError
from pipeline import analyze_paper
from pipeline_merge import (
    LLM_PLACEHOLDER_BULLET,
    build_prompt,
    generate_deck_with_llm,
    merge_llm_payload,
    parse_llm_payload,
    try_extract_json,
)
from text_utils import ELLIPSIS


class FakeClient(ChatCompletionClient):
    def __init__(self, reply):
        self.reply = reply
        self.calls = []

    def complete(self, system, user):
        self.calls.append((system, user))
        if isinstance(self.reply, Exception):
            raise self.reply
        return self.reply


@pytest.fixture
def baseline(sample_doc):
    return analyze_paper(sample_doc, target_slides=8)


def test_prompt_mentions_title_outline_and_slide_limit(baseline):
    system, user = build_prompt(baseline, 8)
    assert "Return JSON ONLY" in system
    assert "Limit slides to 6 content slides" in system
    assert "Paper title: Graph Attention Networks for Traffic Forecasting" in user
    assert "1. Introduction" in user
    assert "Target slide count (including conclusion): 8." in user


def test_custom_instructions_replace_default_prompt(baseline):
    _system, user = build_prompt(baseline, 8, "Only three slides please.")
    assert user.endswith("Only three slides please.")
    assert "thematic order" not in user


def test_try_extract_json_handles_fences_and_braces_in_strings():
    text = '```json\n{"paperTitle": "A {weird} title", "outline": []}\n```'
    assert json.loads(try_extract_json(text)) == {"paperTitle": "A {weird} title", "outline": []}
    assert try_extract_json("Sure! {\"a\": 1} trailing") == '{"a": 1}'
    assert try_extract_json("no json here") is None


def test_parse_llm_payload_rejects_non_json():
    with pytest.raises(ValueError):
        parse_llm_payload("I cannot help with that.")


def test_valid_reply_is_merged(baseline):
    reply = json.dumps(
        {
            "paperTitle": "Refined Title",
            "outline": ["Motivation", "Method", "Results"],
            "slides": [
                {"section": "Motivation", "title": "Why traffic", "bullets": ["Congestion is costly", "  "]},
                {"section": "Method", "paragraph": "A graph attention encoder."},
                {"title": "Empty"},
            ],
        }
    )
    client = FakeClient(reply)
    deck = generate_deck_with_llm(baseline, client, 8)
    assert len(client.calls) == 1
    assert deck.metadata.mode == "llm"
    assert deck.metadata.paper_title == "Refined Title"
    assert deck.metadata.authors == baseline.metadata.authors
    assert deck.outline == ["Motivation", "Method", "Results"]
    assert [s.id for s in deck.slides] == ["llm-slide-1", "llm-slide-2", "llm-slide-3"]
    assert deck.slides[0].bullet_items() == ["Congestion is costly"]
    assert deck.slides[1].title == "Topic 2"
    assert deck.slides[1].bullet_items() == ["A graph attention encoder."]
    assert deck.slides[2].bullet_items() == [LLM_PLACEHOLDER_BULLET]
    assert deck.metadata.slide_count == 5


def test_empty_fields_keep_baseline_values(baseline):
    deck = merge_llm_payload(baseline, parse_llm_payload('{"paperTitle": "  ", "outline": [], "slides": []}'))
    assert deck.metadata.paper_title == baseline.metadata.paper_title
    assert deck.outline == baseline.outline
    assert deck.slides == baseline.slides
    assert deck.metadata.mode == "llm"


def test_long_bullets_are_clipped(baseline):
    words = " ".join(f"w{i}" for i in range(40))
    deck = merge_llm_payload(baseline, parse_llm_payload(json.dumps({"slides": [{"bullets": [words]}]})))
    bullet = deck.slides[0].bullet_items()[0]
    assert bullet.endswith(ELLIPSIS)
    assert len(bullet.split(" ")) == 22


@pytest.mark.parametrize(
    "reply",
    [
        "not json at all",
        '{"slides": "should be a list"}',
        LLMError("LLM request failed: 500"),
        RuntimeError("connection reset"),
    ],
)
def test_any_failure_falls_back_to_baseline(baseline, reply):
    deck = generate_deck_with_llm(baseline, FakeClient(reply), 8)
    assert deck.metadata.mode == "static"
    assert deck.outline == baseline.outline
    assert deck.slides == baseline.slides
    assert deck.metadata.paper_title == baseline.metadata.paper_title
    assert deck.metadata.slide_count == baseline.metadata.slide_count
