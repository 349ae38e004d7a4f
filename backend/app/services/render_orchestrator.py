"""
Render orchestration for GET /generate.

Sequences one request through the pipeline:
received → resolving → classifying (only when no language was given)
→ language_resolved → delegating → completed | failed

Every outcome, including failures, becomes a GenerateOutcome
(status code, content type, body). Nothing is retried.
"""

import asyncio
import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Optional

from app.middleware import (
    InkifyError,
    ParameterError,
    RenderFailedError,
    RenderRejectedError,
    format_error_response,
)
from app.models import PartialRenderJob, RenderJob
from language_engine import EMPTY_RESULT, LanguageClassifier, decide_language
from render_engine import RenderEngine, RenderEngineError
from .parameter_resolver import DEFAULT_RULES, FieldRule, resolve_parameters

logger = logging.getLogger(__name__)

PNG_CONTENT_TYPE = "image/png"
JSON_CONTENT_TYPE = "application/json"


class RenderStage(str, Enum):
    """Pipeline stages, in order."""

    RECEIVED = "received"
    RESOLVING = "resolving"
    CLASSIFYING = "classifying"
    LANGUAGE_RESOLVED = "language_resolved"
    DELEGATING = "delegating"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class GenerateOutcome:
    """Everything the HTTP layer needs to answer a /generate request."""

    status_code: int
    content_type: str
    body: bytes
    headers: dict[str, str] = field(default_factory=dict)
    job: Optional[RenderJob] = None


class RenderOrchestrator:
    """
    Runs the /generate pipeline against a classifier and a rendering engine.

    Holds only read-only collaborators, so a single instance can serve
    concurrent requests. Classification and rendering are CPU-bound and run
    in the default executor.
    """

    def __init__(
        self,
        classifier: LanguageClassifier,
        engine: RenderEngine,
        confidence_floor: float = 0.35,
        rules: tuple[FieldRule, ...] = DEFAULT_RULES,
    ):
        self.classifier = classifier
        self.engine = engine
        self.confidence_floor = confidence_floor
        self.rules = rules

    async def prepare_job(self, raw_params: Mapping[str, str]) -> RenderJob:
        """
        Resolve parameters and language into a complete RenderJob.

        Raises:
            ParameterError: If any parameter fails validation
        """
        logger.debug(f"Stage {RenderStage.RESOLVING.value}")
        partial = resolve_parameters(raw_params, self.rules)

        result = EMPTY_RESULT
        if partial.language is None:
            logger.debug(f"Stage {RenderStage.CLASSIFYING.value}")
            result = await asyncio.get_running_loop().run_in_executor(
                None, self.classifier.classify, partial.code
            )
            if not result:
                logger.info("Classification degraded: no candidates, deferring to engine")

        decision = decide_language(partial.language, result, self.confidence_floor)
        job = _complete(partial, decision.language, decision.source)
        logger.debug(
            f"Stage {RenderStage.LANGUAGE_RESOLVED.value}: "
            f"language={job.language} source={job.language_source}"
        )
        return job

    async def render(self, job: RenderJob) -> bytes:
        """
        Delegate a complete job to the rendering engine.

        Raises:
            RenderRejectedError: Engine rejected the job (unknown theme/font/language)
            RenderFailedError: Engine failed internally
        """
        logger.debug(f"Stage {RenderStage.DELEGATING.value} to {self.engine.engine_name}")
        try:
            return await asyncio.get_running_loop().run_in_executor(
                None, self.engine.render, job
            )
        except RenderEngineError as e:
            if e.client_error:
                logger.warning(f"Render rejected ({e.kind}): {e}")
                raise RenderRejectedError(str(e), e.kind) from e
            logger.error(
                f"Render failed: {e}",
                extra={"job": job.log_context()},
            )
            raise RenderFailedError(str(e)) from e
        except Exception as e:
            logger.exception(
                f"Unexpected engine failure: {e}",
                extra={"job": job.log_context()},
            )
            raise RenderFailedError(str(e)) from e

    async def handle_generate(self, raw_params: Mapping[str, str]) -> GenerateOutcome:
        """
        Run the whole pipeline for one request.

        Args:
            raw_params: Query parameters as received

        Returns:
            GenerateOutcome with PNG bytes (200) or a JSON error body (4xx/5xx)
        """
        logger.debug(f"Stage {RenderStage.RECEIVED.value}")
        job: Optional[RenderJob] = None
        try:
            job = await self.prepare_job(raw_params)
            image = await self.render(job)
        except InkifyError as e:
            if isinstance(e, ParameterError):
                logger.info(f"Validation failed: {e.message}")
            logger.debug(f"Stage {RenderStage.FAILED.value}: {e.status_code}")
            return _error_outcome(e, job)

        logger.info(
            f"Generated {len(image)} byte image: language={job.language} "
            f"({job.language_source}), theme={job.theme}"
        )
        logger.debug(f"Stage {RenderStage.COMPLETED.value}")
        headers = {"X-Inkify-Language-Source": job.language_source}
        if job.language is not None:
            headers["X-Inkify-Language"] = job.language
        return GenerateOutcome(200, PNG_CONTENT_TYPE, image, headers, job)


def _complete(partial: PartialRenderJob, language: Optional[str], source: str) -> RenderJob:
    return RenderJob(
        **partial.model_dump(exclude={"language"}),
        language=language,
        language_source=source,
    )


def _error_outcome(error: InkifyError, job: Optional[RenderJob]) -> GenerateOutcome:
    body = json.dumps(format_error_response(error.message, error.details)).encode("utf-8")
    return GenerateOutcome(error.status_code, JSON_CONTENT_TYPE, body, job=job)
