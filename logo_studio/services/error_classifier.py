from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class UserFacingError(Enum):
    """Stable categories shown to the user instead of raw provider text."""

    MISSING_CREDENTIAL = "API Key is missing. Please enter your API key before generating."
    INVALID_CREDENTIAL = "The API key is not valid. Please check the key in your provider account."
    BILLING_REQUIRED = (
        "Billing is not enabled for the project. Image generation requires a billed account."
    )
    PERMISSION_DENIED = (
        "API permission denied. Ensure the image and text generation APIs are enabled for your project."
    )
    QUOTA_EXCEEDED = "You have exceeded your API quota. Please check your usage limits."
    EMPTY_RESULT = (
        "No content was generated. The response might have been blocked due to safety policies."
    )
    UNKNOWN = "Failed to generate logo: {raw}"


@dataclass(frozen=True)
class ClassificationRule:
    category: UserFacingError
    phrases: Tuple[str, ...]
    case_sensitive: bool = False

    def matches(self, raw_message: str) -> bool:
        if self.case_sensitive:
            return any(phrase in raw_message for phrase in self.phrases)
        lowered = raw_message.lower()
        return any(phrase.lower() in lowered for phrase in self.phrases)


# Evaluated in order; the first matching rule wins.
RULES: Tuple[ClassificationRule, ...] = (
    ClassificationRule(UserFacingError.MISSING_CREDENTIAL, ("API key is missing",)),
    ClassificationRule(
        UserFacingError.INVALID_CREDENTIAL,
        ("API key not valid", "Incorrect API key provided"),
        case_sensitive=True,
    ),
    ClassificationRule(UserFacingError.BILLING_REQUIRED, ("billing",)),
    ClassificationRule(UserFacingError.PERMISSION_DENIED, ("permission denied", "api not enabled")),
    ClassificationRule(UserFacingError.QUOTA_EXCEEDED, ("quota",)),
    ClassificationRule(
        UserFacingError.EMPTY_RESULT,
        ("no image was generated", "no concept was generated"),
    ),
)


@dataclass(frozen=True)
class ClassifiedError:
    category: UserFacingError
    raw_message: str

    @property
    def message(self) -> str:
        if self.category is UserFacingError.UNKNOWN:
            return self.category.value.format(raw=self.raw_message)
        return self.category.value


def classify(raw_message: Optional[str], rules: Tuple[ClassificationRule, ...] = RULES) -> ClassifiedError:
    """Map a raw provider error message to a user-facing category.

    Never raises. Unrecognised messages fall through to ``UNKNOWN`` with the
    original text preserved for display.
    """
    raw = raw_message or ""
    for rule in rules:
        if rule.matches(raw):
            return ClassifiedError(rule.category, raw)
    return ClassifiedError(UserFacingError.UNKNOWN, raw)


class LogoStudioError(RuntimeError):
    """Base class for errors surfaced to the user."""


class GenerationError(LogoStudioError):
    """A generation call failed; carries the classified error."""

    def __init__(self, classified: ClassifiedError):
        super().__init__(classified.message)
        self.classified = classified

    @classmethod
    def from_raw(cls, raw_message: str) -> "GenerationError":
        return cls(classify(raw_message))

    @classmethod
    def of(cls, category: UserFacingError, raw_message: str = "") -> "GenerationError":
        return cls(ClassifiedError(category, raw_message or category.value))

    @property
    def category(self) -> UserFacingError:
        return self.classified.category


class DailyLimitReachedError(LogoStudioError):
    """Local policy rejection: the daily generation ceiling was hit."""

    def __init__(self, daily_limit: int):
        super().__init__(f"You have reached your daily limit of {daily_limit} logo concepts.")
        self.daily_limit = daily_limit
