import base64
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

from openai import OpenAI, OpenAIError

from ..config import IMAGE_SIZE, MODEL_CONCEPT, MODEL_IMAGE
from ..logging import get_logger
from .error_classifier import GenerationError, UserFacingError

logger = get_logger(__name__)

# Shared render constraints appended to every image prompt.
IMAGE_RENDER_CONSTRAINTS = (
    " Render a bold, clearly visible logo mark centered in frame, high contrast, "
    "on a clean background. Do not output an empty or nearly blank canvas."
)

CONCEPT_INSTRUCTIONS = (
    "You are a senior brand designer who writes logo concepts for clients. "
    "Turn the client's short description into one rich, well-structured logo concept "
    "that a designer could execute without further questions. "
    "Write in plain text with short headed sections. No preamble."
)


def build_concept_prompt(description: str) -> str:
    """Wrap the user's description in the concept brief sent to the text model."""
    return f"""
Client description:
\"\"\"{description.strip()}\"\"\"

Write a logo concept covering:
- Concept name: a short evocative title.
- Core idea: what the mark communicates and why it fits the description.
- Symbol: the shapes, geometry and any letterform treatment, precisely.
- Typography: typeface character, weight, spacing and case.
- Color palette: 2-4 colors with hex codes and the role of each.
- Composition: layout of symbol and wordmark, plus a compact icon variant.
- Style notes: how any requested style (e.g. minimalist, neon, vintage) shows up.

Keep it under 300 words.
"""


def _raw_message(exc: Exception) -> str:
    return getattr(exc, "message", None) or str(exc)


class LogoGenerator:
    """Thin wrappers around the text and image models."""

    def __init__(self, api_key: Optional[str], client: Optional[OpenAI] = None):
        self.api_key = (api_key or "").strip()
        self._client = client

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            self._client = OpenAI(api_key=self.api_key)
        return self._client

    def _require_key(self) -> None:
        if not self.api_key:
            raise GenerationError.of(UserFacingError.MISSING_CREDENTIAL, "API key is missing.")

    def generate_concept(self, description: str) -> str:
        self._require_key()
        try:
            response = self.client.responses.create(
                model=MODEL_CONCEPT,
                instructions=CONCEPT_INSTRUCTIONS,
                input=build_concept_prompt(description),
            )
        except OpenAIError as exc:
            logger.error("Concept generation failed: %s", exc)
            raise GenerationError.from_raw(_raw_message(exc)) from exc

        text = (response.output_text or "").strip()
        if not text:
            raise GenerationError.of(UserFacingError.EMPTY_RESULT, "No concept was generated.")
        return text

    def generate_image(self, prompt: str) -> str:
        """Return the generated logo as a base64-encoded PNG."""
        self._require_key()
        try:
            image_response = self.client.images.generate(
                model=MODEL_IMAGE,
                prompt=prompt + IMAGE_RENDER_CONSTRAINTS,
                n=1,
                size=IMAGE_SIZE,
                output_format="png",
            )
        except OpenAIError as exc:
            logger.error("Image generation failed: %s", exc)
            raise GenerationError.from_raw(_raw_message(exc)) from exc

        data = image_response.data or []
        if data and data[0].b64_json:
            return data[0].b64_json
        raise GenerationError.of(
            UserFacingError.EMPTY_RESULT,
            "No image was generated. The response might have been blocked due to safety policies.",
        )


def save_image(image_base64: str, out_dir: Union[str, Path], prefix: str = "logo") -> Path:
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    run_id = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S%f")
    path = out_dir / f"{prefix}_{run_id}.png"
    with open(path, "wb") as f:
        f.write(base64.b64decode(image_base64))
    return path
