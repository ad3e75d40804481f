"""Interactive editing session: framing, export and background regeneration."""
from __future__ import annotations

import logging
import threading
from concurrent.futures import Future
from typing import Optional, Tuple

from .aspect import display_frame_size, validate_tag
from .compositor import Compositor
from .constants import DEFAULT_FRAME_WIDTH
from .models import CATEGORY_EDIT, GeneratedImage
from .orchestrator import GenerationOrchestrator
from .styles import BACKGROUND_STYLES, StylePreset, lookup
from .transform import DragTracker, TransformState

logger = logging.getLogger(__name__)


class EditorSession:
    """One open editor over a working image.

    The working image starts as the image the editor was opened with and is
    replaced when a background regeneration succeeds; :meth:`reset` goes
    back to the initial image.
    """

    def __init__(
        self,
        image: str,
        aspect_ratio: str,
        compositor: Optional[Compositor] = None,
        frame_width: float = DEFAULT_FRAME_WIDTH,
    ) -> None:
        self.initial_image = image
        self.working_image = image
        self.aspect_ratio = validate_tag(aspect_ratio)
        self.frame_size: Tuple[float, float] = display_frame_size(aspect_ratio, frame_width)
        self.compositor = compositor or Compositor()

        self.transform = TransformState()
        self.drag = DragTracker(self.transform)
        self.selected_style: str = BACKGROUND_STYLES[0].id

        self.processing = False
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Interaction
    # ------------------------------------------------------------------
    def set_frame_width(self, width: float) -> None:
        self.frame_size = display_frame_size(self.aspect_ratio, width)

    def pointer_down(self, x: float, y: float) -> None:
        self.drag.begin(x, y)

    def pointer_move(self, x: float, y: float) -> bool:
        return self.drag.move(x, y)

    def pointer_up(self) -> None:
        self.drag.end()

    def zoom(self, value: float) -> float:
        return self.transform.set_scale(value)

    def rotate_left(self) -> int:
        return self.transform.rotate_left()

    def rotate_right(self) -> int:
        return self.transform.rotate_right()

    def select_style(self, style_id: str) -> StylePreset:
        style = lookup(style_id)
        self.selected_style = style.id
        return style

    def reset(self) -> None:
        with self._lock:
            self.working_image = self.initial_image
        self.transform.reset()

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------
    def export(self) -> Optional[str]:
        """Composite the current framing as a PNG data URI."""
        return self.compositor.render_data_uri(self.working_image, self.transform, self.aspect_ratio, self.frame_size)

    def regenerate_background(self, orchestrator: GenerationOrchestrator) -> "Optional[Future[Optional[GeneratedImage]]]":
        """Send the current framing with the selected style's instruction.

        On success the result becomes the working image and the framing is
        reset, even if the results list was cleared in the meantime. On
        failure the working image is left as it was. The returned future
        completes with the request's record (``None`` once cleared) after
        the outcome has been applied to the session.
        """
        with self._lock:
            if self.processing:
                logger.debug("Regeneration already running")
                return None
            self.processing = True

        future = None
        try:
            composite = self.export()
            if composite is not None:
                style = lookup(self.selected_style)
                future = orchestrator.submit(
                    composite,
                    style.instruction,
                    CATEGORY_EDIT,
                    self.aspect_ratio,
                    on_outcome=self._apply_regenerated,
                )
        finally:
            if future is None:
                with self._lock:
                    self.processing = False
        if future is None:
            return None

        applied: "Future[Optional[GeneratedImage]]" = Future()
        future.add_done_callback(lambda done: self._finish_regeneration(done, applied))
        return applied

    def _apply_regenerated(self, generated: Optional[str]) -> None:
        if not generated:
            logger.warning("Background regeneration failed; keeping current image")
            return

        with self._lock:
            self.working_image = generated
        self.transform.reset()
        logger.info("Background regenerated with style '%s'", self.selected_style)

    def _finish_regeneration(
        self,
        future: "Future[Optional[GeneratedImage]]",
        applied: "Future[Optional[GeneratedImage]]",
    ) -> None:
        record = None
        try:
            record = future.result()
        except Exception:
            logger.exception("Background regeneration failed")
        finally:
            with self._lock:
                self.processing = False
            applied.set_result(record)
