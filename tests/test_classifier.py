"""Tests for the keyword toxicity classifier."""

import pytest

from pulsemind.moderation.classifier import (
    HIGH_SEVERITY,
    LOW_SEVERITY,
    MEDIUM_SEVERITY,
    KeywordToxicityClassifier,
    evaluate,
)


@pytest.mark.parametrize(
    "text",
    ["", "Had a lovely walk in the park today", "Yoga at 7am, everyone welcome!"],
)
def test_clean_text_scores_zero(text):
    verdict = evaluate(text)
    assert not verdict.is_toxic
    assert verdict.score == 0
    assert verdict.flagged_terms == []


def test_single_high_severity_term():
    verdict = evaluate("that is murder")
    assert verdict.score == pytest.approx(0.8)
    assert verdict.is_toxic
    assert verdict.flagged_terms == ["murder"]


def test_single_medium_term_is_below_threshold():
    verdict = evaluate("what a moron")
    assert verdict.score == pytest.approx(0.4)
    assert not verdict.is_toxic


def test_matching_is_case_insensitive():
    assert evaluate("MURDER").flagged_terms == ["murder"]


def test_substring_matching_counts_overlaps():
    # "die" and "death" both match; neither is tokenized away
    verdict = evaluate("Death is not the end, we all die")
    assert verdict.flagged_terms == ["die", "death"]
    assert verdict.score == pytest.approx(0.8)
    assert verdict.is_toxic


def test_substring_inside_other_words():
    # "harm" sits inside "harmony"
    verdict = evaluate("Find your harmony")
    assert verdict.flagged_terms == ["harm"]
    assert not verdict.is_toxic


def test_score_saturates_at_one():
    verdict = evaluate("kill yourself, idiot, you are worthless and ugly")
    assert verdict.score == 1.0
    assert verdict.is_toxic
    # "kill yourself" also contains "kill you"
    assert verdict.flagged_terms[:2] == ["kill yourself", "kill you"]


def test_flagged_terms_follow_tier_order():
    verdict = evaluate("ugly stupid suicide")
    assert verdict.flagged_terms == ["suicide", "stupid", "ugly"]


def test_low_terms_accumulate_past_threshold():
    verdict = evaluate("dumb and annoying, this sucks")
    assert verdict.flagged_terms == ["dumb", "annoying", "sucks"]
    assert verdict.score == pytest.approx(0.6)
    assert verdict.is_toxic


def test_duplicate_terms_across_tiers_are_kept():
    clf = KeywordToxicityClassifier(tiers=[(["bad"], 0.3), (["bad"], 0.3)])
    verdict = clf.evaluate("bad")
    assert verdict.flagged_terms == ["bad", "bad"]
    assert verdict.score == pytest.approx(0.6)
    assert verdict.is_toxic


def test_every_listed_term_is_detected_on_its_own():
    for terms, weight in ((HIGH_SEVERITY, 0.8), (MEDIUM_SEVERITY, 0.4), (LOW_SEVERITY, 0.2)):
        for term in terms:
            verdict = evaluate(term)
            assert term in verdict.flagged_terms
            assert verdict.score >= weight - 1e-9
            assert 0.0 <= verdict.score <= 1.0
