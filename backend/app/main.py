"""
Inkify API

Main FastAPI application entry point.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

import uvicorn
from fastapi import BackgroundTasks, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.middleware import ErrorHandlerMiddleware
from app.routes import catalog, generate
from app.services import umami_analytics
from language_engine import LanguageClassifier, load_classifier

VERSION = "1.0.0"

logger = logging.getLogger(__name__)

GENERATE_PARAMETERS = {
    "code": "The code to generate an image from. Required.",
    "language": "The language to use for syntax highlighting. Optional, will attempt to guess if not provided.",
    "theme": "The theme to use for syntax highlighting. Optional, defaults to Dracula.",
    "font": "The font to use. Optional, defaults to Fira Code. Fallbacks and sizes as 'Hack; SimSun=31'.",
    "shadow_color": "The color of the shadow. Optional, defaults to transparent.",
    "background": "The background color. Optional, defaults to transparent.",
    "tab_width": "The tab width. Optional, defaults to 4.",
    "line_pad": "The line padding. Optional, defaults to 2.",
    "line_offset": "The line offset. Optional, defaults to 1.",
    "window_title": 'The window title. Optional, defaults to "Inkify".',
    "no_line_number": "Whether to hide the line numbers. Optional, defaults to false.",
    "no_round_corner": "Whether to round the corners. Optional, defaults to false.",
    "no_window_controls": "Whether to hide the window controls. Optional, defaults to false.",
    "shadow_blur_radius": "The shadow blur radius. Optional, defaults to 0.",
    "shadow_offset_x": "The shadow offset x. Optional, defaults to 0.",
    "shadow_offset_y": "The shadow offset y. Optional, defaults to 0.",
    "pad_horiz": "The horizontal padding. Optional, defaults to 80.",
    "pad_vert": "The vertical padding. Optional, defaults to 100.",
    "highlight_lines": "The lines to highlight, e.g. '3,5-7'. Optional, defaults to none.",
    "background_image": "The background image for the padding area as a URL. Optional, defaults to none.",
}


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def create_app(classifier: Optional[LanguageClassifier] = None) -> FastAPI:
    """
    Build the application.

    Args:
        classifier: Preloaded classifier. When None, the model is loaded from
            settings.MODEL_DIR at startup; a load failure aborts startup.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager for startup/shutdown events."""
        # Startup
        configure_logging()
        if classifier is not None:
            app.state.classifier = classifier
        else:
            logger.info(f"Loading language model from {settings.MODEL_DIR}")
            app.state.classifier = load_classifier(
                settings.MODEL_DIR,
                max_input_chars=settings.MAX_CLASSIFY_CHARS,
            )
        logger.info(f"Inkify listening on {settings.HOST}:{settings.PORT}")
        yield
        # Shutdown
        app.state.classifier = None

    app = FastAPI(
        title="Inkify API",
        description="Generate beautiful images of source code",
        version=VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # CORS configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Error handling middleware
    app.add_middleware(ErrorHandlerMiddleware)

    # Register routers
    app.include_router(catalog.router, tags=["Catalog"])
    app.include_router(generate.router, tags=["Generate"])

    @app.get("/")
    async def help(request: Request, background_tasks: BackgroundTasks):
        """
        Usage help for the API.

        Always returns 200, so it doubles as an up-check.
        """
        background_tasks.add_task(umami_analytics.pageview, "/", dict(request.headers))
        return {
            "message": (
                "Welcome to Inkify, a simple API for generating images from code. "
                "Think of it like Carbon in API form."
            ),
            "version": VERSION,
            "routes": {
                "GET /": "This help text.",
                "GET /health": "Service health status.",
                "GET /themes": "Return a list of available syntax themes.",
                "GET /languages": "Returns a list of languages which can be parsed.",
                "GET /fonts": "Returns a list of available fonts.",
                "GET /generate": {
                    "description": "Generate an image from the given code.",
                    "parameters": GENERATE_PARAMETERS,
                },
            },
        }

    @app.get("/health")
    async def health_check():
        """
        Detailed health check endpoint.

        Returns service health status for monitoring and deployment health checks.
        """
        return {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": VERSION,
            "classifier_loaded": getattr(app.state, "classifier", None) is not None,
        }

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
