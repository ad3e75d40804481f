"""Static instruction presets and prompt assembly."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Sequence, Tuple

from .constants import MOCKUP_FIDELITY_SUFFIX
from .models import CATEGORIES, CATEGORY_MOCKUP


@dataclass(frozen=True)
class StylePreset:
    """A named instruction the user can pick instead of typing one."""

    id: str
    label: str
    instruction: str


BACKGROUND_STYLES: Tuple[StylePreset, ...] = (
    StylePreset(
        "white",
        "White",
        "Remove the background from this image and isolate the main subject on a pure white "
        "background. Ensure clean edges.",
    ),
    StylePreset(
        "gradient",
        "Gradient",
        "Remove the background from this image and isolate the main subject on a smooth, "
        "aesthetic soft gradient background (pastel colors).",
    ),
    StylePreset(
        "studio",
        "Studio",
        "Remove the background from this image and isolate the main subject on a neutral studio "
        "grey background with professional studio lighting effect and soft shadows.",
    ),
    StylePreset(
        "luxury",
        "Luxury",
        "Remove the background from this image and isolate the main subject on a premium dark "
        "matte black background.",
    ),
    StylePreset(
        "nature",
        "Nature",
        "Remove the background from this image and isolate the main subject against a soft-focus "
        "natural outdoor background with greenery and bokeh.",
    ),
    StylePreset(
        "urban",
        "Urban",
        "Remove the background from this image and isolate the main subject against a blurred "
        "modern city street background with urban tones.",
    ),
)

SCENARIOS: Tuple[StylePreset, ...] = (
    StylePreset(
        "mug",
        "Ceramic Mug",
        "Place the product from the input image onto a ceramic coffee mug on a wooden table. "
        "Ensure the product logo and branding are clearly visible and wrapped naturally around "
        "the mug. Cinematic lighting, photorealistic.",
    ),
    StylePreset(
        "tshirt",
        "Cotton Tee",
        "Display the design/product from the input image on a high-quality white cotton t-shirt "
        "worn by a model in an urban setting. Realistic fabric texture and lighting.",
    ),
    StylePreset(
        "billboard",
        "City Billboard",
        "Show the product from the input image on a large city billboard in Times Square. Night "
        "time, neon lights, high contrast, impressive advertising shot.",
    ),
    StylePreset(
        "social",
        "Social Media",
        "Create a flat-lay Instagram style marketing photo for the product in the input image. "
        "Minimalist pastel background, soft shadows, high aesthetic appeal.",
    ),
)

_BACKGROUND_INDEX: Dict[str, StylePreset] = {preset.id: preset for preset in BACKGROUND_STYLES}
_SCENARIO_INDEX: Dict[str, StylePreset] = {preset.id: preset for preset in SCENARIOS}


def _lookup(index: Dict[str, StylePreset], catalog: Sequence[StylePreset], preset_id: str) -> StylePreset:
    # unknown ids fall back to the first entry instead of failing
    return index.get(preset_id, catalog[0])


def lookup(preset_id: str) -> StylePreset:
    """Return the background style with ``preset_id``, or the first style."""
    return _lookup(_BACKGROUND_INDEX, BACKGROUND_STYLES, preset_id)


def lookup_scenario(preset_id: str) -> StylePreset:
    return _lookup(_SCENARIO_INDEX, SCENARIOS, preset_id)


def build_prompt(base_prompt: str, category: str) -> str:
    """Return the instruction actually sent for a submission of ``category``."""
    if category not in CATEGORIES:
        raise ValueError(f"Unknown category '{category}'")
    if category == CATEGORY_MOCKUP:
        return f"{base_prompt}{MOCKUP_FIDELITY_SUFFIX}"
    return base_prompt
