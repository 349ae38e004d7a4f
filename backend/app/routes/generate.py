"""
Image generation endpoint.

Provides GET /generate, which turns a code snippet and optional styling
parameters into a PNG image.
"""

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Request
from fastapi.responses import Response

from app.models import ErrorResponse
from app.services import RenderOrchestrator, get_orchestrator, umami_analytics

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/generate",
    summary="Generate Code Image",
    description="""
Generate a PNG image of the given code.

Only `code` is required. When `language` is omitted it is detected by the
language classifier; low-confidence guesses are left to the rendering
engine's own detection.

Pipeline: `resolving` → `classifying` (if needed) → `language_resolved`
→ `delegating` → `completed` | `failed`

The resolved language is reported in the `X-Inkify-Language` header and
its origin (`user`, `classifier`, `engine`) in `X-Inkify-Language-Source`.
""",
    response_class=Response,
    responses={
        200: {"content": {"image/png": {}}, "description": "Rendered image"},
        400: {"model": ErrorResponse, "description": "Invalid parameter or unknown theme/font/language"},
        500: {"model": ErrorResponse, "description": "Rendering failed"},
    },
)
async def generate(
    request: Request,
    background_tasks: BackgroundTasks,
    orchestrator: RenderOrchestrator = Depends(get_orchestrator),
) -> Response:
    """
    Render code to an image.

    Args:
        request: Incoming request; all query parameters are passed through
        background_tasks: Used for analytics reporting
        orchestrator: Pipeline wired with the startup classifier and engine

    Returns:
        Response with PNG bytes, or a JSON error body
    """
    outcome = await orchestrator.handle_generate(dict(request.query_params))

    headers = dict(request.headers)
    background_tasks.add_task(umami_analytics.pageview, "/generate", headers)
    if outcome.status_code == 200 and outcome.job is not None:
        background_tasks.add_task(
            umami_analytics.event,
            "/generate",
            "generation",
            {
                "language": outcome.job.language,
                "language_source": outcome.job.language_source,
                "theme": outcome.job.theme,
            },
            headers,
        )

    return Response(
        content=outcome.body,
        status_code=outcome.status_code,
        media_type=outcome.content_type,
        headers=outcome.headers,
    )
