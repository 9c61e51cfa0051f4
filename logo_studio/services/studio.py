from enum import Enum
from typing import Callable, Optional

from ..config import DEFAULT_PROMPT
from ..logging import get_logger
from .error_classifier import (
    DailyLimitReachedError,
    GenerationError,
    LogoStudioError,
    UserFacingError,
)
from .logo_generator import LogoGenerator
from .usage_quota import UsageQuotaTracker

logger = get_logger(__name__)


class StudioState(Enum):
    AWAITING_KEY = "awaiting_key"
    READY = "ready"
    LOADING = "loading"
    RESULT = "result"
    ERROR = "error"


class LogoStudio:
    """Session state for one user: key entry, prompt editing and generation.

    Every generation attempt is gated by the usage tracker. A reservation is
    taken before the call and given back exactly once if the call does not
    succeed.
    """

    def __init__(
        self,
        tracker: UsageQuotaTracker,
        generator_factory: Callable[[str], LogoGenerator] = LogoGenerator,
        prompt: str = DEFAULT_PROMPT,
    ):
        self.tracker = tracker
        self.generator_factory = generator_factory
        self.prompt = prompt
        self.api_key = ""
        self.state = StudioState.AWAITING_KEY
        self.concept: Optional[str] = None
        self.image_b64: Optional[str] = None
        self.error: Optional[str] = None
        self._generator: Optional[LogoGenerator] = None
        self.tracker.purge_stale()

    @property
    def usage_count(self) -> int:
        return self.tracker.current_count()

    @property
    def remaining(self) -> int:
        return self.tracker.remaining()

    @property
    def can_generate(self) -> bool:
        return self.state is not StudioState.LOADING and self.remaining > 0

    def submit_key(self, api_key: str) -> bool:
        key = (api_key or "").strip()
        if not key:
            return False
        self.api_key = key
        self._generator = None
        if self.state is StudioState.AWAITING_KEY:
            self.state = StudioState.READY
        return True

    def add_style(self, style: str) -> str:
        # Replaces any previously appended style instead of stacking them.
        base = ",".join(self.prompt.split(",")[:2])
        self.prompt = f"{base}, in a {style.lower()} style."
        return self.prompt

    def _get_generator(self) -> LogoGenerator:
        if self._generator is None:
            self._generator = self.generator_factory(self.api_key)
        return self._generator

    def _fail(self, exc: LogoStudioError) -> None:
        self.state = StudioState.ERROR
        self.error = str(exc)

    def _run(self, call: Callable[[LogoGenerator], str]) -> Optional[str]:
        if not self.api_key:
            self._fail(GenerationError.of(UserFacingError.MISSING_CREDENTIAL))
            return None
        if not self.tracker.try_reserve():
            self._fail(DailyLimitReachedError(self.tracker.daily_limit))
            return None

        self.state = StudioState.LOADING
        self.error = None
        succeeded = False
        try:
            result = call(self._get_generator())
            succeeded = True
        except GenerationError as exc:
            logger.info("Generation failed (%s)", exc.category.name)
            self._fail(exc)
            return None
        finally:
            if not succeeded:
                self.tracker.rollback()
                if self.state is StudioState.LOADING:
                    self.state = StudioState.ERROR
                    self.error = "Generation was interrupted."

        self.state = StudioState.RESULT
        return result

    def generate_concept(self) -> Optional[str]:
        self.concept = None
        self.image_b64 = None
        concept = self._run(lambda generator: generator.generate_concept(self.prompt))
        if concept is not None:
            self.concept = concept
        return concept

    def generate_image(self, prompt: Optional[str] = None) -> Optional[str]:
        """Render an image from ``prompt``, the current concept, or the description."""
        source = prompt or self.concept or self.prompt
        self.image_b64 = None
        image_b64 = self._run(lambda generator: generator.generate_image(source))
        if image_b64 is not None:
            self.image_b64 = image_b64
        return image_b64
