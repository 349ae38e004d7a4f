"""Custom exceptions for the language detection module."""


class LanguageEngineError(Exception):
    """Base exception for language detection errors."""

    pass


class ClassifierLoadError(LanguageEngineError):
    """Model directory missing, malformed, or unusable."""

    pass
