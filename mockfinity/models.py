"""Generation request records."""
from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from typing import Optional

STATUS_LOADING = "loading"
STATUS_SUCCESS = "success"
STATUS_ERROR = "error"

CATEGORY_MOCKUP = "mockup"
CATEGORY_EDIT = "edit"
CATEGORIES = (CATEGORY_MOCKUP, CATEGORY_EDIT)


class InvalidTransition(RuntimeError):
    """Raised when a record that already resolved is resolved again."""


def new_record_id() -> str:
    return uuid.uuid4().hex[:9]


@dataclass
class GeneratedImage:
    """One submission to the image service and, eventually, its outcome."""

    id: str
    original_image: str
    prompt: str
    category: str
    aspect_ratio: str
    generated_image: str = ""
    timestamp: float = field(default_factory=time.time)
    status: str = STATUS_LOADING
    error: Optional[str] = None

    @property
    def is_loading(self) -> bool:
        return self.status == STATUS_LOADING

    def resolve(self, generated_image: str) -> None:
        if self.status != STATUS_LOADING:
            raise InvalidTransition(f"Record {self.id} already {self.status}")
        if not generated_image:
            raise ValueError("A successful record needs image data")
        self.generated_image = generated_image
        self.status = STATUS_SUCCESS

    def fail(self, message: str) -> None:
        if self.status != STATUS_LOADING:
            raise InvalidTransition(f"Record {self.id} already {self.status}")
        self.error = message
        self.status = STATUS_ERROR

    def __repr__(self) -> str:  # pragma: no cover - utility repr
        return f"<GeneratedImage {self.id} {self.category} {self.status}>"
