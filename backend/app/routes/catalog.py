"""
Catalog API endpoints.

Lists the themes, languages and fonts the rendering engine accepts.
"""

import asyncio
import logging

from fastapi import APIRouter, BackgroundTasks, Request

from app.services import umami_analytics
from render_engine import list_fonts, list_languages, list_themes

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/themes", response_model=list[str])
async def get_themes(request: Request, background_tasks: BackgroundTasks) -> list[str]:
    """Return the available syntax themes."""
    background_tasks.add_task(umami_analytics.pageview, "/themes", dict(request.headers))
    return list_themes()


@router.get("/languages", response_model=list[str])
async def get_languages(request: Request, background_tasks: BackgroundTasks) -> list[str]:
    """Return the languages that can be highlighted."""
    background_tasks.add_task(umami_analytics.pageview, "/languages", dict(request.headers))
    return list_languages()


@router.get("/fonts", response_model=list[str])
async def get_fonts(request: Request, background_tasks: BackgroundTasks) -> list[str]:
    """
    Return the installed font families.

    Queries fontconfig, so the call runs in the default executor.
    """
    fonts = await asyncio.get_running_loop().run_in_executor(None, list_fonts)
    logger.info(f"Listed {len(fonts)} font families")
    background_tasks.add_task(umami_analytics.pageview, "/fonts", dict(request.headers))
    return fonts
