"""Pan, zoom and rotation state for one editing session."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from .constants import MAX_SCALE, MIN_SCALE, ROTATION_STEP


def clamp_scale(value: float) -> float:
    return max(MIN_SCALE, min(MAX_SCALE, float(value)))


@dataclass
class TransformState:
    """Framing of the working image inside the editor frame.

    ``position`` is measured in on-screen (display) pixels and is never
    clamped. ``rotation`` accumulates in steps of 90 degrees and is kept
    as the raw sum, so ``450`` stays ``450``.
    """

    scale: float = 1.0
    rotation: int = 0
    position: Tuple[float, float] = field(default=(0.0, 0.0))

    def __post_init__(self) -> None:
        self.scale = clamp_scale(self.scale)
        self.rotation = int(self.rotation)
        x, y = self.position
        self.position = (float(x), float(y))

    def pan(self, dx: float, dy: float) -> None:
        x, y = self.position
        self.position = (x + dx, y + dy)

    def set_position(self, x: float, y: float) -> None:
        self.position = (float(x), float(y))

    def set_scale(self, value: float) -> float:
        self.scale = clamp_scale(value)
        return self.scale

    def rotate(self, delta_degrees: int) -> int:
        if delta_degrees % ROTATION_STEP != 0:
            raise ValueError(f"Rotation must be a multiple of {ROTATION_STEP} degrees, got {delta_degrees}")
        self.rotation += int(delta_degrees)
        return self.rotation

    def rotate_left(self) -> int:
        return self.rotate(-ROTATION_STEP)

    def rotate_right(self) -> int:
        return self.rotate(ROTATION_STEP)

    def reset(self) -> None:
        self.scale = 1.0
        self.rotation = 0
        self.position = (0.0, 0.0)

    def copy(self) -> "TransformState":
        return TransformState(self.scale, self.rotation, self.position)

    @property
    def is_identity(self) -> bool:
        return self.scale == 1.0 and self.rotation == 0 and self.position == (0.0, 0.0)

    @property
    def scale_label(self) -> str:
        return f"{self.scale * 100:.0f}%"

    @property
    def rotation_label(self) -> str:
        return f"{self.rotation}°"


class DragTracker:
    """Turn pointer down/move/up events into absolute pan positions."""

    def __init__(self, state: TransformState) -> None:
        self.state = state
        self.dragging = False
        self._anchor: Tuple[float, float] = (0.0, 0.0)

    def begin(self, x: float, y: float) -> None:
        px, py = self.state.position
        self._anchor = (x - px, y - py)
        self.dragging = True

    def move(self, x: float, y: float) -> bool:
        if not self.dragging:
            return False
        ax, ay = self._anchor
        self.state.set_position(x - ax, y - ay)
        return True

    def end(self) -> None:
        # pointer up and pointer leave both land here
        self.dragging = False
