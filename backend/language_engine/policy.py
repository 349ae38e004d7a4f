"""
Language resolution policy.

Explicit user value > confident classifier guess > engine-side detection.
Pure functions with no hidden state.
"""

from typing import Literal, NamedTuple, Optional

from .classifier import ClassificationResult

LanguageSource = Literal["user", "classifier", "engine"]


class LanguageDecision(NamedTuple):
    """Resolved language and where it came from."""

    language: Optional[str]
    source: LanguageSource


def decide_language(
    user_value: Optional[str],
    result: ClassificationResult,
    confidence_floor: float,
) -> LanguageDecision:
    """
    Decide the final language of a render job.

    Args:
        user_value: Language supplied by the caller, if any. Not checked
            against any catalog.
        result: Classifier output (ignored when user_value is given)
        confidence_floor: Minimum confidence for the top guess to be used

    Returns:
        LanguageDecision; language None leaves detection to the engine
    """
    if user_value and user_value.strip():
        return LanguageDecision(user_value.strip(), "user")

    top = result.top
    if top is not None and top.confidence >= confidence_floor:
        return LanguageDecision(top.label, "classifier")

    return LanguageDecision(None, "engine")


def resolve_language(
    user_value: Optional[str],
    result: ClassificationResult,
    confidence_floor: float,
) -> Optional[str]:
    """Final language only; see decide_language."""
    return decide_language(user_value, result, confidence_floor).language
