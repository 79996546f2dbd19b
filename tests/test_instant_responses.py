"""
Tests for the instant-response matcher.
"""

import re

from chat_cache.services import InstantResponder, InstantRule


def test_greeting_matches_after_trimming():
    responder = InstantResponder.default()
    answer = responder.match("   Hello there  ")
    assert answer is not None
    assert answer.startswith("Hello!")


def test_unrelated_question_does_not_match():
    responder = InstantResponder.default()
    assert responder.match("Explain the CAP theorem with examples") is None


def test_greeting_needs_word_boundary():
    """'history' must not be mistaken for 'hi'."""
    responder = InstantResponder.default()
    assert responder.match("history of the roman empire") is None


def test_short_only_rules():
    responder = InstantResponder.default()
    assert responder.match("write code") is not None
    assert responder.match("please review this code for race conditions") is None


def test_empty_text_never_matches():
    assert InstantResponder.default().match("   ") is None


def test_first_matching_rule_wins():
    responder = InstantResponder(
        [
            InstantRule(re.compile(r"^build .*app"), "specific"),
            InstantRule(re.compile(r"^build"), "general"),
        ]
    )
    assert responder.match("build me an app") == "specific"
    assert responder.match("build a shed") == "general"


def test_matching_is_case_insensitive():
    responder = InstantResponder([InstantRule(re.compile(r"^thanks"), "welcome")])
    assert responder.match("THANKS a lot") == "welcome"


def test_len_reports_rule_count():
    assert len(InstantResponder.default()) == len(InstantResponder.default().rules)
