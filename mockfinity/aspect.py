"""Aspect-ratio tags and the geometry derived from them."""
from __future__ import annotations

from typing import Dict, Tuple

from .constants import OUTPUT_SIZE

ASPECT_RATIOS: Tuple[Tuple[str, str], ...] = (
    ("1:1", "Square"),
    ("16:9", "Landscape"),
    ("9:16", "Portrait"),
    ("4:3", "Classic"),
    ("3:4", "Social"),
)

ASPECT_LABELS: Dict[str, str] = dict(ASPECT_RATIOS)


def validate_tag(tag: str) -> str:
    if tag not in ASPECT_LABELS:
        raise ValueError(f"Unsupported aspect ratio '{tag}'. Expected one of: {', '.join(ASPECT_LABELS)}")
    return tag


def ratio_value(tag: str) -> float:
    """Return width / height for an aspect tag such as ``"16:9"``."""
    validate_tag(tag)
    width, height = (int(part) for part in tag.split(":"))
    return width / height


def output_size(tag: str, long_side: int = OUTPUT_SIZE) -> Tuple[int, int]:
    """Pixel size of the exported raster; the longer side is ``long_side``."""
    ratio = ratio_value(tag)
    if ratio >= 1:
        return long_side, int(long_side / ratio)
    return int(long_side * ratio), long_side


def display_frame_size(tag: str, width: float) -> Tuple[float, float]:
    return float(width), width / ratio_value(tag)


def cover_fit(source_w: float, source_h: float, frame_w: float, frame_h: float) -> Tuple[float, float]:
    """Smallest undistorted rectangle that covers the frame when centred.

    A source relatively wider than the frame is matched on height,
    otherwise on width.
    """
    source_aspect = source_w / source_h
    frame_aspect = frame_w / frame_h

    if source_aspect > frame_aspect:
        draw_h = frame_h
        draw_w = draw_h * source_aspect
    else:
        draw_w = frame_w
        draw_h = draw_w / source_aspect
    return draw_w, draw_h
