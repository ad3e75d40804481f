"""Lifecycle of generation requests against the remote image service."""
from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, List, Optional

from .aspect import validate_tag
from .constants import GENERIC_FAILURE_MESSAGE, NO_IMAGE_DATA_MESSAGE
from .models import GeneratedImage, new_record_id
from .remote import ImageService, RemoteServiceError
from .styles import build_prompt

logger = logging.getLogger(__name__)

Listener = Callable[[Optional[GeneratedImage]], None]
OutcomeCallback = Callable[[Optional[str]], None]


class GenerationOrchestrator:
    """Own the ordered request collection and drive each record to an outcome.

    Records are prepended as ``loading`` before the remote call starts and
    are updated in place when it finishes. Remote calls run one at a time
    on a single worker thread, so they resolve in submission order. The
    ``busy`` flag covers every outstanding request and callers are
    expected to hold off new submissions while it is set.

    Listeners receive the affected record after insertion and after
    resolution, and ``None`` after :meth:`clear_all`.
    """

    def __init__(self, service: ImageService) -> None:
        self.service = service
        self.executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="mockfinity-gen")
        self._records: List[GeneratedImage] = []
        self._in_flight = 0
        self._lock = threading.Lock()
        self._listeners: List[Listener] = []
        self._closed = False

    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------
    @property
    def busy(self) -> bool:
        with self._lock:
            return self._in_flight > 0

    @property
    def results(self) -> List[GeneratedImage]:
        """Snapshot of the collection, newest first."""
        with self._lock:
            return list(self._records)

    def get(self, record_id: str) -> Optional[GeneratedImage]:
        with self._lock:
            return self._find(record_id)

    def _find(self, record_id: str) -> Optional[GeneratedImage]:
        for record in self._records:
            if record.id == record_id:
                return record
        return None

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------
    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, record: Optional[GeneratedImage]) -> None:
        for listener in list(self._listeners):
            try:
                listener(record)
            except Exception:
                logger.exception("Result listener failed")

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def submit(
        self,
        source_image: Optional[str],
        base_prompt: str,
        category: str,
        aspect_ratio: str,
        on_outcome: Optional[OutcomeCallback] = None,
    ) -> Optional["Future[Optional[GeneratedImage]]"]:
        """Queue a generation request.

        Returns ``None`` without touching any state when there is no source
        image. Otherwise returns a future for the record as it stands once
        its outcome has been applied (``None`` if it was cleared first).

        ``on_outcome`` is called on the worker thread with the generated
        data URI, or ``None`` on failure, whether or not the record is
        still in the collection. Raises ``RuntimeError`` after
        :meth:`shutdown`.
        """
        if not source_image:
            logger.debug("Submit ignored: no source image")
            return None

        prompt = build_prompt(base_prompt, category)
        validate_tag(aspect_ratio)

        record = GeneratedImage(
            id=new_record_id(),
            original_image=source_image,
            prompt=prompt,
            category=category,
            aspect_ratio=aspect_ratio,
        )
        with self._lock:
            if self._closed:
                raise RuntimeError("Cannot submit requests after shutdown")
            self._records.insert(0, record)
            self._in_flight += 1

        logger.info("Submitted %s request %s (%s)", category, record.id, aspect_ratio)
        self._notify(record)

        try:
            return self.executor.submit(self._run, record.id, source_image, prompt, aspect_ratio, on_outcome)
        except RuntimeError:
            with self._lock:
                self._in_flight -= 1
            self.fail(record.id, GENERIC_FAILURE_MESSAGE)
            raise

    def _run(
        self,
        record_id: str,
        source_image: str,
        prompt: str,
        aspect_ratio: str,
        on_outcome: Optional[OutcomeCallback] = None,
    ) -> Optional[GeneratedImage]:
        generated: Optional[str] = None
        try:
            generated = self.service.generate(source_image, prompt, aspect_ratio)
            if not generated:
                raise RemoteServiceError(NO_IMAGE_DATA_MESSAGE)
        except Exception:
            logger.exception("Generation request %s failed", record_id)
            generated = None
        finally:
            with self._lock:
                self._in_flight -= 1

        if on_outcome is not None:
            try:
                on_outcome(generated)
            except Exception:
                logger.exception("Outcome callback for request %s failed", record_id)

        if generated is None:
            return self.fail(record_id, GENERIC_FAILURE_MESSAGE)
        return self.resolve(record_id, generated)

    def resolve(self, record_id: str, generated_image: str) -> Optional[GeneratedImage]:
        """Mark a record successful. Unknown ids are ignored."""
        with self._lock:
            record = self._find(record_id)
            if record is None:
                logger.debug("Dropping result for cleared request %s", record_id)
                return None
            if not record.is_loading:
                logger.warning("Request %s already %s, ignoring result", record_id, record.status)
                return record
            record.resolve(generated_image)

        logger.info("Request %s succeeded", record_id)
        self._notify(record)
        return record

    def fail(self, record_id: str, message: str = GENERIC_FAILURE_MESSAGE) -> Optional[GeneratedImage]:
        """Mark a record failed. Unknown ids are ignored."""
        with self._lock:
            record = self._find(record_id)
            if record is None:
                logger.debug("Dropping failure for cleared request %s", record_id)
                return None
            if not record.is_loading:
                logger.warning("Request %s already %s, ignoring failure", record_id, record.status)
                return record
            record.fail(message)

        self._notify(record)
        return record

    def clear_all(self) -> None:
        """Empty the collection. Outstanding requests keep running."""
        with self._lock:
            self._records.clear()
        self._notify(None)

    def shutdown(self, wait: bool = True) -> None:
        with self._lock:
            self._closed = True
        self.executor.shutdown(wait=wait)
