"""Core constants for the Mockfinity backend."""

from typing import Tuple

APP_NAME = "mockfinity"
CONFIG_FILE = "config.json"
DEFAULT_OUTPUT_DIR = "output"

MODEL_NAME = "gemini-2.5-flash-image"
API_KEY_ENV_VARS: Tuple[str, ...] = ("GEMINI_API_KEY", "API_KEY")

OUTPUT_SIZE = 1200
DEFAULT_FRAME_WIDTH = 500

MIN_SCALE = 0.5
MAX_SCALE = 3.0
SCALE_STEP = 0.1
ROTATION_STEP = 90

DEFAULT_ASPECT_RATIO = "1:1"

THEME_LIGHT = "light"
THEME_DARK = "dark"
THEMES: Tuple[str, ...] = (THEME_LIGHT, THEME_DARK)
DEFAULT_THEME = THEME_DARK

DEFAULT_MIME_TYPE = "image/png"
SUPPORTED_IMAGE_FORMATS = (".png", ".jpg", ".jpeg", ".gif", ".bmp", ".webp")

MOCKUP_FIDELITY_SUFFIX = (
    " IMPORTANT: Maintain the exact visual appearance, logo, colors, and identity of the "
    "product in the input image. Ensure high fidelity product consistency."
)

GENERIC_FAILURE_MESSAGE = "Failed to generate image."
NO_IMAGE_DATA_MESSAGE = "No image data returned from Gemini."
