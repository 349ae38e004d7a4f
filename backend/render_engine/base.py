"""
RenderEngine abstraction layer for image backends.

Defines the interface the render orchestrator depends on, so the
Pygments engine can be swapped (or stubbed in tests) without touching
request handling.
"""

from abc import ABC, abstractmethod

from app.models import RenderJob


class RenderEngine(ABC):
    """
    Abstract base class for rendering engines.

    Implementations:
    - PygmentsRenderEngine: Pygments highlighting + Pillow window composition
    """

    @abstractmethod
    def render(self, job: RenderJob) -> bytes:
        """
        Render a resolved job to an image.

        Called from a worker thread; implementations must not mutate
        shared state.

        Args:
            job: Fully resolved RenderJob. ``job.language`` None means the
                engine auto-detects the language itself.

        Returns:
            bytes: PNG image data

        Raises:
            UnknownThemeError: If job.theme is not in the theme catalog
            UnknownFontError: If no family in job.font can be loaded
            UnknownLanguageError: If job.language matches no lexer
            RenderInternalError: On any other rendering failure
        """
        pass

    @property
    @abstractmethod
    def engine_name(self) -> str:
        """
        Return engine identifier for logs.

        Returns:
            str: Engine name, e.g. "pygments"
        """
        pass
