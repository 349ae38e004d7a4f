"""Service layer: parameter resolution, orchestration and integrations."""

from .analytics import UmamiAnalytics, umami_analytics
from .engine_factory import get_orchestrator, get_render_engine, reset_render_engine
from .parameter_resolver import build_rules, resolve_parameters
from .render_orchestrator import GenerateOutcome, RenderOrchestrator, RenderStage

__all__ = [
    "UmamiAnalytics",
    "umami_analytics",
    "get_orchestrator",
    "get_render_engine",
    "reset_render_engine",
    "build_rules",
    "resolve_parameters",
    "GenerateOutcome",
    "RenderOrchestrator",
    "RenderStage",
]
