"""Utilities for exporting generated images."""
from __future__ import annotations

import base64
import binascii
import datetime
import logging
import os
from typing import Iterable, Optional, Tuple

import pyperclip

from .constants import APP_NAME
from .models import STATUS_SUCCESS, GeneratedImage
from .remote import strip_data_uri_header

logger = logging.getLogger(__name__)


def download_name(record_id: str) -> str:
    return f"{APP_NAME}-{record_id}.png"


def data_uri_to_bytes(uri: str) -> bytes:
    return base64.b64decode(strip_data_uri_header(uri))


def save_record(record: GeneratedImage, output_dir: str, original: bool = False) -> Optional[str]:
    """Write a record's generated (or source) image and return the file path."""
    payload = record.original_image if original else record.generated_image
    if not payload:
        return None

    filename = download_name(record.id)
    if original:
        filename = filename.replace(".png", "-source.png")

    try:
        os.makedirs(output_dir, exist_ok=True)
        path = os.path.join(output_dir, filename)
        with open(path, "wb") as handle:
            handle.write(data_uri_to_bytes(payload))
    except (OSError, binascii.Error, ValueError):
        logger.exception("Could not save %s", filename)
        return None
    return path


def save_session_output(
    records: Iterable[GeneratedImage],
    output_dir: str,
    output_prefix: str = "",
) -> Tuple[bool, str, int, int]:
    """Save every successful record into a timestamped folder.

    Returns ``(ok, folder_name_or_error, saved, failed)``.
    """
    try:
        timestamp = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
        folder_name = f"{output_prefix}_Session_{timestamp}" if output_prefix else f"Session_{timestamp}"
        session_folder = os.path.join(output_dir, folder_name)
        os.makedirs(session_folder, exist_ok=True)

        saved = 0
        failed = 0
        prompt_lines = []
        for record in records:
            if record.status != STATUS_SUCCESS:
                continue
            if save_record(record, session_folder):
                saved += 1
                prompt_lines.append(f"{download_name(record.id)} [{record.aspect_ratio}, {record.category}]: {record.prompt}")
            else:
                failed += 1

        if prompt_lines:
            with open(os.path.join(session_folder, "prompts.txt"), "w", encoding="utf-8") as handle:
                handle.write("\n".join(prompt_lines) + "\n")

        return True, folder_name, saved, failed
    except OSError as exc:
        logger.exception("Session export failed")
        return False, str(exc), 0, 0


def copy_prompt(record: GeneratedImage) -> bool:
    try:
        pyperclip.copy(record.prompt)
        return True
    except pyperclip.PyperclipException:
        logger.warning("Clipboard not available", exc_info=True)
        return False
