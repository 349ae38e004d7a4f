"""Unit tests for the language resolution policy."""

import pytest

from language_engine import (
    EMPTY_RESULT,
    ClassificationResult,
    LanguageDecision,
    LanguageGuess,
    decide_language,
    resolve_language,
)

CONFIDENT_RUST = ClassificationResult(
    (LanguageGuess("rust", 0.91), LanguageGuess("cpp", 0.05))
)
UNSURE_PYTHON = ClassificationResult(
    (LanguageGuess("python", 0.30), LanguageGuess("ruby", 0.28))
)


def test_user_value_wins_over_confident_guess():
    decision = decide_language("python", CONFIDENT_RUST, 0.35)
    assert decision == LanguageDecision("python", "user")


def test_user_value_is_stripped():
    assert decide_language("  go ", EMPTY_RESULT, 0.35) == ("go", "user")


def test_confident_guess_used():
    assert decide_language(None, CONFIDENT_RUST, 0.35) == ("rust", "classifier")


def test_guess_below_floor_defers_to_engine():
    assert decide_language(None, UNSURE_PYTHON, 0.35) == (None, "engine")


def test_guess_at_floor_is_accepted():
    result = ClassificationResult((LanguageGuess("sql", 0.35),))
    assert decide_language(None, result, 0.35).language == "sql"


def test_empty_result_defers_to_engine():
    assert decide_language(None, EMPTY_RESULT, 0.35) == (None, "engine")


@pytest.mark.parametrize("blank", ["", "   "])
def test_blank_user_value_counts_as_absent(blank):
    assert decide_language(blank, CONFIDENT_RUST, 0.35) == ("rust", "classifier")


def test_zero_floor_accepts_any_guess():
    assert decide_language(None, UNSURE_PYTHON, 0.0).language == "python"


def test_resolve_language_returns_only_language():
    assert resolve_language(None, CONFIDENT_RUST, 0.35) == "rust"
    assert resolve_language(None, EMPTY_RESULT, 0.35) is None
