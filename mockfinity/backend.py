"""Session backend tying the editor, orchestrator and preferences together."""
from __future__ import annotations

import logging
from concurrent.futures import Future
from typing import Any, Dict, List, Optional, Tuple

from . import exporter
from .aspect import validate_tag
from .compositor import Compositor
from .config import PreferenceStore, SystemThemeSignal
from .constants import CONFIG_FILE, DEFAULT_ASPECT_RATIO, DEFAULT_FRAME_WIDTH, DEFAULT_OUTPUT_DIR
from .editor import EditorSession
from .intake import file_to_data_uri
from .models import CATEGORY_MOCKUP, GeneratedImage
from .orchestrator import GenerationOrchestrator
from .remote import GeminiImageService, ImageService
from .styles import lookup_scenario

logger = logging.getLogger(__name__)


class Backend:
    """Backend logic for one Mockfinity session."""

    def __init__(
        self,
        service: Optional[ImageService] = None,
        config_path: str = CONFIG_FILE,
        system_prefers_dark: Optional[SystemThemeSignal] = None,
    ) -> None:
        self.preferences = PreferenceStore(config_path, system_prefers_dark)
        self.config_data: Dict[str, Any] = self.preferences.data

        self.aspect_ratio: str = DEFAULT_ASPECT_RATIO
        self.output_dir: str = self.config_data.get("output_dir") or DEFAULT_OUTPUT_DIR

        if service is None:
            service = GeminiImageService(timeout_ms=self.config_data.get("request_timeout_ms"))
        self.compositor = Compositor()
        self.orchestrator = GenerationOrchestrator(service)

        self.source_image: Optional[str] = None
        self.editor: Optional[EditorSession] = None

    # ------------------------------------------------------------------
    # Preferences
    # ------------------------------------------------------------------
    @property
    def theme(self) -> str:
        return self.preferences.theme

    def toggle_theme(self) -> str:
        return self.preferences.toggle_theme()

    def set_aspect_ratio(self, tag: str) -> str:
        self.aspect_ratio = validate_tag(tag)
        return self.aspect_ratio

    # ------------------------------------------------------------------
    # Source image
    # ------------------------------------------------------------------
    def load_source(self, path: str) -> bool:
        data_uri = file_to_data_uri(path)
        if data_uri is None:
            return False
        self.source_image = data_uri
        return True

    def set_source(self, data_uri: str) -> None:
        self.source_image = data_uri

    def clear_source(self) -> None:
        self.source_image = None

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------
    @property
    def is_processing(self) -> bool:
        return self.orchestrator.busy

    @property
    def results(self) -> List[GeneratedImage]:
        return self.orchestrator.results

    def generate(self, prompt: str, category: str) -> "Optional[Future[Optional[GeneratedImage]]]":
        if not self.source_image:
            return None
        if self.orchestrator.busy:
            logger.debug("Generate ignored: a request is already running")
            return None
        return self.orchestrator.submit(self.source_image, prompt, category, self.aspect_ratio)

    def generate_scenario(self, scenario_id: str) -> "Optional[Future[Optional[GeneratedImage]]]":
        scenario = lookup_scenario(scenario_id)
        return self.generate(scenario.instruction, CATEGORY_MOCKUP)

    def clear_results(self) -> None:
        self.orchestrator.clear_all()

    # ------------------------------------------------------------------
    # Editor
    # ------------------------------------------------------------------
    def open_editor(self, image: Optional[str] = None, frame_width: float = DEFAULT_FRAME_WIDTH) -> Optional[EditorSession]:
        image = image or self.source_image
        if not image:
            return None
        self.editor = EditorSession(image, self.aspect_ratio, self.compositor, frame_width)
        return self.editor

    def save_edit(self) -> bool:
        if self.editor is None:
            return False
        exported = self.editor.export()
        if exported is None:
            return False
        self.source_image = exported
        self.editor = None
        return True

    def cancel_edit(self) -> None:
        self.editor = None

    def regenerate_background(self, style_id: Optional[str] = None) -> "Optional[Future[Optional[GeneratedImage]]]":
        if self.editor is None:
            return None
        if style_id is not None:
            self.editor.select_style(style_id)
        return self.editor.regenerate_background(self.orchestrator)

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------
    def save_result(self, record_id: str, output_dir: Optional[str] = None) -> Optional[str]:
        record = self.orchestrator.get(record_id)
        if record is None:
            return None
        return exporter.save_record(record, output_dir or self.output_dir)

    def save_session(self, output_dir: Optional[str] = None) -> Tuple[bool, str, int, int]:
        return exporter.save_session_output(self.results, output_dir or self.output_dir)

    def copy_prompt(self, record_id: str) -> bool:
        record = self.orchestrator.get(record_id)
        if record is None:
            return False
        return exporter.copy_prompt(record)

    # ------------------------------------------------------------------
    # Housekeeping
    # ------------------------------------------------------------------
    def shutdown(self, wait: bool = True) -> None:
        self.orchestrator.shutdown(wait=wait)


__all__ = ["Backend"]
