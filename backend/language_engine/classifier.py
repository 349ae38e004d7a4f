"""
Language classifier for code snippets.

A multinomial naive Bayes model over code tokens. The model directory
holds a manifest.yaml and one labelled training corpus per language; the
model is fitted into read-only NumPy arrays when loaded, once per process.
"""

import logging
from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

import numpy as np
import yaml
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ClassifierLoadError
from .tokenizer import tokenize

logger = logging.getLogger(__name__)

MANIFEST_FILE = "manifest.yaml"
DEFAULT_MAX_INPUT_CHARS = 20000


class LabelEntry(BaseModel):
    """One language in the model manifest."""

    label: str = Field(..., min_length=1, description="Pygments lexer alias")
    corpus: str = Field(..., min_length=1, description="Corpus path relative to the model directory")


class ModelManifest(BaseModel):
    """Contents of manifest.yaml."""

    name: str
    version: int = Field(..., ge=1)
    alpha: float = Field(0.5, gt=0, description="Additive smoothing")
    temperature: float = Field(0.5, gt=0, description="Softmax temperature over per-token log-likelihood")
    min_score: float = Field(0.02, ge=0, le=1, description="Candidates below this are dropped")
    top_k: int = Field(5, ge=1)
    labels: list[LabelEntry] = Field(..., min_length=2)


@dataclass(frozen=True)
class LanguageGuess:
    """A single ranked candidate."""

    label: str
    confidence: float


@dataclass(frozen=True)
class ClassificationResult:
    """Candidates ordered by descending confidence; may be empty."""

    candidates: tuple[LanguageGuess, ...] = ()

    @property
    def top(self) -> Optional[LanguageGuess]:
        return self.candidates[0] if self.candidates else None

    def __iter__(self) -> Iterator[LanguageGuess]:
        return iter(self.candidates)

    def __len__(self) -> int:
        return len(self.candidates)

    def __bool__(self) -> bool:
        return bool(self.candidates)


EMPTY_RESULT = ClassificationResult()


class LanguageClassifier:
    """
    Ranks candidate languages for a code snippet.

    Instances are immutable after construction: classify() only reads the
    fitted arrays, so one instance is shared across concurrent requests.
    """

    def __init__(
        self,
        labels: list[str],
        vocabulary: dict[str, int],
        log_likelihoods: np.ndarray,
        temperature: float = 0.5,
        min_score: float = 0.02,
        top_k: int = 5,
        max_input_chars: int = DEFAULT_MAX_INPUT_CHARS,
        name: str = "inkify-langid",
    ):
        self.labels = tuple(labels)
        self.name = name
        self.temperature = temperature
        self.min_score = min_score
        self.top_k = top_k
        self.max_input_chars = max_input_chars
        self._vocabulary = dict(vocabulary)
        self._log_likelihoods = log_likelihoods
        self._log_likelihoods.flags.writeable = False

    @property
    def vocabulary_size(self) -> int:
        return len(self._vocabulary)

    @classmethod
    def from_directory(
        cls,
        model_dir: str | Path,
        max_input_chars: int = DEFAULT_MAX_INPUT_CHARS,
    ) -> "LanguageClassifier":
        """
        Load the manifest and fit the model from its training corpora.

        Args:
            model_dir: Directory containing manifest.yaml and corpus files
            max_input_chars: Inputs longer than this are not classified

        Returns:
            LanguageClassifier ready for inference

        Raises:
            ClassifierLoadError: If the directory, manifest or any corpus is
                missing, unreadable, malformed or empty
        """
        model_path = Path(model_dir)
        manifest = _read_manifest(model_path)

        counts_by_label: list[Counter] = []
        for entry in manifest.labels:
            corpus_path = model_path / entry.corpus
            try:
                text = corpus_path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                raise ClassifierLoadError(
                    f"Cannot read corpus for '{entry.label}': {corpus_path}"
                ) from e
            counts = Counter(tokenize(text))
            if not counts:
                raise ClassifierLoadError(f"Corpus for '{entry.label}' is empty: {corpus_path}")
            counts_by_label.append(counts)

        labels = [entry.label for entry in manifest.labels]
        if len(set(labels)) != len(labels):
            raise ClassifierLoadError("Duplicate labels in manifest")

        vocabulary = {
            token: index
            for index, token in enumerate(sorted(set().union(*counts_by_label)))
        }
        matrix = np.zeros((len(labels), len(vocabulary)), dtype=np.float64)
        for row, counts in enumerate(counts_by_label):
            for token, count in counts.items():
                matrix[row, vocabulary[token]] = count

        smoothed = matrix + manifest.alpha
        log_likelihoods = np.log(smoothed / smoothed.sum(axis=1, keepdims=True))

        logger.info(
            f"Language model '{manifest.name}' v{manifest.version} loaded: "
            f"{len(labels)} labels, {len(vocabulary)} tokens"
        )
        return cls(
            labels=labels,
            vocabulary=vocabulary,
            log_likelihoods=log_likelihoods,
            temperature=manifest.temperature,
            min_score=manifest.min_score,
            top_k=manifest.top_k,
            max_input_chars=max_input_chars,
            name=manifest.name,
        )

    def classify(self, code: str) -> ClassificationResult:
        """
        Rank candidate languages for the code.

        Never raises: oversized input, input without known tokens and
        inference errors all give an empty result.

        Args:
            code: Raw code text

        Returns:
            ClassificationResult ordered by descending confidence, ties by label
        """
        if len(code) > self.max_input_chars:
            logger.debug(
                f"Classification skipped: {len(code)} chars exceeds {self.max_input_chars}"
            )
            return EMPTY_RESULT

        try:
            return self._classify(code)
        except Exception as e:
            logger.warning(f"Classification failed: {e}")
            return EMPTY_RESULT

    def _classify(self, code: str) -> ClassificationResult:
        indices = [self._vocabulary[t] for t in tokenize(code) if t in self._vocabulary]
        if not indices:
            return EMPTY_RESULT

        counts = np.bincount(np.asarray(indices), minlength=len(self._vocabulary))
        # Mean per-token log-likelihood keeps confidence independent of snippet length
        scores = (self._log_likelihoods @ counts) / len(indices)
        logits = scores / self.temperature
        probabilities = np.exp(logits - logits.max())
        probabilities /= probabilities.sum()

        ranked = sorted(
            (LanguageGuess(label, float(p)) for label, p in zip(self.labels, probabilities)),
            key=lambda guess: (-guess.confidence, guess.label),
        )
        kept = [guess for guess in ranked if guess.confidence >= self.min_score]
        return ClassificationResult(tuple(kept[: self.top_k]))


def _read_manifest(model_path: Path) -> ModelManifest:
    manifest_path = model_path / MANIFEST_FILE
    if not model_path.is_dir():
        raise ClassifierLoadError(f"Model directory not found: {model_path}")

    try:
        with open(manifest_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise ClassifierLoadError(f"Model manifest not found: {manifest_path}") from e
    except (OSError, yaml.YAMLError) as e:
        raise ClassifierLoadError(f"Cannot parse model manifest {manifest_path}: {e}") from e

    if not isinstance(data, dict):
        raise ClassifierLoadError(f"Model manifest must be a mapping: {manifest_path}")

    try:
        return ModelManifest(**data)
    except PydanticValidationError as e:
        raise ClassifierLoadError(f"Invalid model manifest {manifest_path}: {e}") from e


def load_classifier(
    model_dir: str | Path,
    max_input_chars: int = DEFAULT_MAX_INPUT_CHARS,
) -> LanguageClassifier:
    """Load the classifier from a model directory; see LanguageClassifier.from_directory."""
    return LanguageClassifier.from_directory(model_dir, max_input_chars=max_input_chars)
