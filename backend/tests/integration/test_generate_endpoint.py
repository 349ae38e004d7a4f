"""
Integration Tests for GET /generate

Runs requests through the FastAPI app with the classifier and engine
doubles from conftest, then once end to end with the bundled model.
"""

from unittest.mock import AsyncMock, patch

import pytest

from app.config import settings
from language_engine import ClassificationResult, LanguageGuess
from render_engine import RenderInternalError, UnknownLanguageError, UnknownThemeError, list_fonts
from render_engine.fonts import FALLBACK_FONT_FAMILIES


class TestGenerateSuccess:
    """Tests for successful generation."""

    def test_returns_png(self, fake_client, fake_png):
        response = fake_client.get("/generate", params={"code": "print('hi')", "language": "python"})

        assert response.status_code == 200
        assert response.headers["content-type"] == "image/png"
        assert response.content == fake_png
        assert response.headers["x-inkify-language"] == "python"
        assert response.headers["x-inkify-language-source"] == "user"

    def test_classifier_language_reported(self, fake_client, stub_classifier, fake_engine):
        stub_classifier.result = ClassificationResult((LanguageGuess("rust", 0.88),))

        response = fake_client.get("/generate", params={"code": "fn main() {}"})

        assert response.status_code == 200
        assert response.headers["x-inkify-language"] == "rust"
        assert response.headers["x-inkify-language-source"] == "classifier"
        assert fake_engine.jobs[0].language == "rust"

    def test_engine_detection_when_unsure(self, fake_client, stub_classifier, fake_engine):
        stub_classifier.result = ClassificationResult((LanguageGuess("rust", 0.1),))

        response = fake_client.get("/generate", params={"code": "???"})

        assert response.status_code == 200
        assert "x-inkify-language" not in response.headers
        assert response.headers["x-inkify-language-source"] == "engine"
        assert fake_engine.jobs[0].language is None

    def test_parameters_reach_engine(self, fake_client, fake_engine):
        response = fake_client.get(
            "/generate",
            params={
                "code": "x",
                "theme": "monokai",
                "font": "Hack=20",
                "background": "#ffffff",
                "no_line_number": "true",
                "highlight_lines": "1",
                "unknown": "ignored",
            },
        )

        assert response.status_code == 200
        job = fake_engine.jobs[0]
        assert job.theme == "monokai"
        assert job.font == "Hack=20"
        assert job.background == (255, 255, 255, 255)
        assert job.no_line_number is True
        assert job.highlight_lines == (1,)

    def test_analytics_recorded(self, fake_client):
        with patch("app.routes.generate.umami_analytics") as analytics:
            analytics.pageview = AsyncMock()
            analytics.event = AsyncMock()

            response = fake_client.get("/generate", params={"code": "x", "language": "go"})

        assert response.status_code == 200
        analytics.pageview.assert_awaited_once()
        path, name, data, _ = analytics.event.await_args.args
        assert (path, name) == ("/generate", "generation")
        assert data == {"language": "go", "language_source": "user", "theme": "Dracula"}


class TestGenerateErrors:
    """Tests for error responses."""

    def test_missing_code(self, fake_client, fake_engine):
        response = fake_client.get("/generate")

        assert response.status_code == 400
        assert response.headers["content-type"] == "application/json"
        assert response.json()["error"] == "code parameter is required"
        assert fake_engine.jobs == []

    def test_invalid_parameter_names_field(self, fake_client, fake_engine):
        response = fake_client.get("/generate", params={"code": "x", "tab_width": "-1"})

        assert response.status_code == 400
        assert response.json()["details"]["field"] == "tab_width"
        assert fake_engine.jobs == []

    @pytest.mark.parametrize(
        "error, kind",
        [
            (UnknownThemeError("Invalid theme: nope"), "unknown_theme"),
            (UnknownLanguageError("Invalid language: klingon"), "unknown_language"),
        ],
    )
    def test_engine_rejection(self, fake_client, fake_engine, error, kind):
        fake_engine.error = error

        response = fake_client.get("/generate", params={"code": "x"})

        assert response.status_code == 400
        assert response.json() == {"error": str(error), "details": {"kind": kind}}

    def test_engine_failure(self, fake_client, fake_engine):
        fake_engine.error = RenderInternalError("boom")

        response = fake_client.get("/generate", params={"code": "x"})

        assert response.status_code == 500
        assert response.json()["error"] == "Failed to render image"

    def test_no_generation_event_on_error(self, fake_client):
        with patch("app.routes.generate.umami_analytics") as analytics:
            analytics.pageview = AsyncMock()
            analytics.event = AsyncMock()

            fake_client.get("/generate")

        analytics.pageview.assert_awaited_once()
        analytics.event.assert_not_called()


class TestGenerateWithBundledModel:
    """End to end through the real classifier and Pygments engine."""

    def test_unknown_theme_with_real_engine(self, client):
        response = client.get("/generate", params={"code": "x = 1", "theme": "nope"})

        assert response.status_code == 400
        assert response.json()["details"] == {"kind": "unknown_theme"}

    def test_unknown_language_with_real_engine(self, client):
        response = client.get("/generate", params={"code": "x = 1", "language": "klingon"})

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid language: klingon"

    @pytest.mark.skipif(
        not {settings.DEFAULT_FONT, *FALLBACK_FONT_FAMILIES} & set(list_fonts()),
        reason="no default or fallback monospace font installed",
    )
    def test_code_only_request_renders_with_defaults(self, client):
        response = client.get("/generate", params={"code": "print(1)"})

        assert response.status_code == 200
        assert response.headers["content-type"] == "image/png"
        assert response.content.startswith(b"\x89PNG")
        assert response.headers["x-inkify-language-source"] in {"classifier", "engine"}
