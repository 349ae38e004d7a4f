"""Language detection: trained classifier and language resolution policy."""

from .classifier import (
    EMPTY_RESULT,
    ClassificationResult,
    LanguageClassifier,
    LanguageGuess,
    load_classifier,
)
from .exceptions import ClassifierLoadError, LanguageEngineError
from .policy import LanguageDecision, decide_language, resolve_language

__all__ = [
    "EMPTY_RESULT",
    "ClassificationResult",
    "LanguageClassifier",
    "LanguageGuess",
    "load_classifier",
    "ClassifierLoadError",
    "LanguageEngineError",
    "LanguageDecision",
    "decide_language",
    "resolve_language",
]
