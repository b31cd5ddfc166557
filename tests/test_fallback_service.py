from __future__ import annotations

import sys
from pathlib import Path

import pytest

repo_root = Path(__file__).resolve().parents[1]
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from src.services.fallback_service import (
    DEFAULT_FALLBACK_REPLY,
    FALLBACK_RULES,
    FallbackResponder,
)


@pytest.fixture
def responder() -> FallbackResponder:
    return FallbackResponder()


@pytest.mark.parametrize(
    ("text", "rule_index"),
    [
        ("Who is PM of India?", 0),
        ("Tell me about the Prime Minister of India", 0),
        ("I am moving to Bengaluru next month", 1),
        ("Hello there", 2),
        ("How are you?", 3),
        ("What are you exactly?", 4),
        ("Tell me about Rome", 5),
        ("Who won the match?", 6),
        ("When does the store open?", 7),
        ("Where is Paris?", 8),
    ],
)
def test_each_rule_is_reachable(responder: FallbackResponder, text: str, rule_index: int) -> None:
    assert responder.respond(text) == FALLBACK_RULES[rule_index].reply


def test_priority_beats_position_in_text(responder: FallbackResponder) -> None:
    reply = responder.respond("Hi, tell me about Karnataka")

    assert reply.startswith("Karnataka is a state in southern India.")


def test_specific_question_precedes_generic_what(responder: FallbackResponder) -> None:
    assert responder.respond("what are you") == FALLBACK_RULES[4].reply
    assert responder.respond("what is rain") == FALLBACK_RULES[5].reply


def test_matching_is_case_insensitive(responder: FallbackResponder) -> None:
    assert responder.respond("WHO IS PM") == responder.respond("who is pm")


def test_substring_match_inside_words(responder: FallbackResponder) -> None:
    # "hi" inside "this" still counts as a greeting
    assert responder.respond("Is this working?") == FALLBACK_RULES[2].reply


def test_default_reply_when_nothing_matches(responder: FallbackResponder) -> None:
    assert responder.respond("Good morning") == DEFAULT_FALLBACK_REPLY
    assert responder.respond("") == DEFAULT_FALLBACK_REPLY


def test_respond_is_idempotent(responder: FallbackResponder) -> None:
    text = "Where can I eat in Bangalore?"

    assert responder.respond(text) == responder.respond(text)
    assert FallbackResponder().respond(text) == responder.respond(text)
