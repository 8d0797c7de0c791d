"""Tests for the keyword domain classifier."""

import pytest

from personachat.services.classifier import is_in_domain
from personachat.utils.bot_data import CHALLENGE_KEYWORDS, LEGAL_KEYWORDS


class TestLegalClassifier:
    def test_tenant_rights_question_is_legal(self):
        assert is_in_domain("What are my rights as a tenant?", LEGAL_KEYWORDS) is True

    def test_case_insensitive(self):
        assert is_in_domain("MY LANDLORD KEPT MY DEPOSIT", LEGAL_KEYWORDS) is True

    def test_substring_without_word_boundary(self):
        assert is_in_domain("lawsuitology", LEGAL_KEYWORDS) is True

    def test_unrelated_text_is_not_legal(self):
        assert is_in_domain("Tell me a joke about cats", LEGAL_KEYWORDS) is False


class TestChallengeClassifier:
    def test_routine_request_is_challenge(self):
        assert is_in_domain("Give me a morning routine", CHALLENGE_KEYWORDS) is True

    def test_multi_word_keyword(self):
        assert is_in_domain("tips on Time Management please", CHALLENGE_KEYWORDS) is True

    def test_unrelated_text_is_not_challenge(self):
        assert is_in_domain("What is the capital of France?", CHALLENGE_KEYWORDS) is False

    def test_empty_text(self):
        assert is_in_domain("", CHALLENGE_KEYWORDS) is False


@pytest.mark.parametrize("keywords", [CHALLENGE_KEYWORDS, LEGAL_KEYWORDS])
def test_every_keyword_matches_itself_in_any_case(keywords):
    for keyword in keywords:
        assert is_in_domain(f"xx {keyword.upper()} yy", keywords)


def test_challenge_keyword_list_is_reproduced():
    assert len(CHALLENGE_KEYWORDS) == len(set(CHALLENGE_KEYWORDS))
    assert CHALLENGE_KEYWORDS[0] == "challenge"
    assert CHALLENGE_KEYWORDS[-1] == "keystone habit"
    assert "self-improvement" in CHALLENGE_KEYWORDS
