"""
Pytest configuration and fixtures
"""

from io import BytesIO
from typing import Callable, Optional

import pytest
from fastapi import Request
from fastapi.testclient import TestClient
from PIL import Image

from app.main import app, create_app
from app.models import RenderJob
from app.services import RenderOrchestrator, get_orchestrator, reset_render_engine
from language_engine import EMPTY_RESULT, ClassificationResult
from render_engine import RenderEngine


def make_png(width: int = 4, height: int = 3, color=(40, 42, 54, 255)) -> bytes:
    """Encode a small solid PNG."""
    buffer = BytesIO()
    Image.new("RGBA", (width, height), color).save(buffer, format="PNG")
    return buffer.getvalue()


FAKE_PNG = make_png()


class StubClassifier:
    """Classifier double returning a fixed result, or one chosen per code."""

    def __init__(
        self,
        result: ClassificationResult = EMPTY_RESULT,
        by_code: Optional[Callable[[str], ClassificationResult]] = None,
    ):
        self.result = result
        self.by_code = by_code
        self.calls: list[str] = []

    def classify(self, code: str) -> ClassificationResult:
        self.calls.append(code)
        if self.by_code is not None:
            return self.by_code(code)
        return self.result


class FakeRenderEngine(RenderEngine):
    """Engine double that records jobs and returns FAKE_PNG, or raises `error`."""

    def __init__(self, error: Optional[Exception] = None):
        self.error = error
        self.jobs: list[RenderJob] = []

    @property
    def engine_name(self) -> str:
        return "fake"

    def render(self, job: RenderJob) -> bytes:
        self.jobs.append(job)
        if self.error is not None:
            raise self.error
        return FAKE_PNG


@pytest.fixture
def client():
    """FastAPI test client fixture running the real lifespan (bundled model)"""
    reset_render_engine()
    with TestClient(app) as c:
        yield c
    reset_render_engine()


@pytest.fixture
def fake_png():
    return FAKE_PNG


@pytest.fixture
def png_factory():
    return make_png


@pytest.fixture
def stub_classifier():
    return StubClassifier()


@pytest.fixture
def fake_engine():
    return FakeRenderEngine()


@pytest.fixture
def orchestrator(stub_classifier, fake_engine):
    """Orchestrator wired to test doubles."""
    return RenderOrchestrator(classifier=stub_classifier, engine=fake_engine)


@pytest.fixture
def fake_client(stub_classifier, fake_engine):
    """Test client whose /generate pipeline uses the classifier and engine doubles."""
    test_app = create_app(classifier=stub_classifier)

    def override_orchestrator(request: Request) -> RenderOrchestrator:
        return RenderOrchestrator(
            classifier=request.app.state.classifier,
            engine=fake_engine,
        )

    test_app.dependency_overrides[get_orchestrator] = override_orchestrator
    with TestClient(test_app) as c:
        yield c
    test_app.dependency_overrides.clear()
