"""
Engine and orchestrator factory.

The rendering engine is a process-wide singleton; the classifier is loaded
in the application lifespan and kept on app.state. Both are read-only
after startup.
"""

import logging

from fastapi import Request

from app.config import settings
from language_engine import LanguageClassifier
from render_engine import PygmentsRenderEngine, RenderEngine
from .parameter_resolver import build_rules
from .render_orchestrator import RenderOrchestrator

logger = logging.getLogger(__name__)

# Singleton engine instance
_engine_instance: RenderEngine | None = None


def get_render_engine() -> RenderEngine:
    """
    Get the configured rendering engine instance.

    Returns:
        RenderEngine: PygmentsRenderEngine configured from settings
    """
    global _engine_instance

    if _engine_instance is not None:
        return _engine_instance

    logger.info("Initializing PygmentsRenderEngine")
    _engine_instance = PygmentsRenderEngine(
        default_font=settings.DEFAULT_FONT,
        default_font_size=settings.DEFAULT_FONT_SIZE,
        background_timeout=settings.BACKGROUND_IMAGE_TIMEOUT,
        max_background_bytes=settings.MAX_BACKGROUND_IMAGE_BYTES,
    )
    return _engine_instance


def reset_render_engine() -> None:
    """
    Reset the engine singleton (for testing purposes).

    Clears the cached engine instance, allowing a fresh
    engine to be created on next get_render_engine() call.
    """
    global _engine_instance
    _engine_instance = None
    logger.info("Render engine singleton reset")


def get_classifier(request: Request) -> LanguageClassifier:
    """FastAPI dependency returning the classifier loaded at startup."""
    return request.app.state.classifier


def get_orchestrator(request: Request) -> RenderOrchestrator:
    """FastAPI dependency wiring the startup classifier and the engine singleton."""
    return RenderOrchestrator(
        classifier=get_classifier(request),
        engine=get_render_engine(),
        confidence_floor=settings.CONFIDENCE_FLOOR,
        rules=build_rules(settings.DEFAULT_THEME, settings.DEFAULT_FONT),
    )
