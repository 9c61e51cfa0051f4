import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from a local .env file if present.
load_dotenv()

# Where the daily usage counter is persisted between runs.
USAGE_FILE = Path(os.getenv("LOGO_USAGE_FILE", Path.home() / ".logo_studio" / "usage.json"))
USAGE_KEY = os.getenv("LOGO_USAGE_KEY", "logoConceptUsage")

# Maximum generation attempts per calendar day.
DAILY_LIMIT = int(os.getenv("LOGO_DAILY_LIMIT", "5"))

# Model choices can be overridden via environment variables if desired.
MODEL_CONCEPT = os.getenv("LOGO_MODEL_CONCEPT", "gpt-4.1-mini")
MODEL_IMAGE = os.getenv("LOGO_MODEL_IMAGE", "gpt-image-1")

# Image generation defaults.
IMAGE_SIZE = os.getenv("LOGO_IMAGE_SIZE", "1024x1024")

# Credential held by the image proxy; never sent to the browser.
SERVER_API_KEY = os.getenv("API_KEY") or os.getenv("OPENAI_API_KEY")

# Optional key for the command-line client so it does not have to prompt.
CLIENT_API_KEY = os.getenv("LOGO_STUDIO_API_KEY")

LOGO_STYLES = [
    "Minimalist",
    "Neon",
    "Vintage",
    "Futuristic",
    "3D",
    "Abstract",
    "Vector",
    "Graffiti",
]

DEFAULT_PROMPT = (
    'A dynamic and modern logo for a channel named "kaar", featuring a stylized letter K.'
)

