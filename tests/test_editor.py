"""
Tests for the editing session and its background regeneration loop.
"""
import pytest

from mockfinity.compositor import decode_data_uri
from mockfinity.editor import EditorSession
from mockfinity.models import CATEGORY_EDIT
from mockfinity.styles import lookup

TIMEOUT = 5


@pytest.fixture
def editor(source_uri):
    return EditorSession(source_uri, "1:1")


class TestInteraction:

    def test_pointer_drag_pans(self, editor):
        editor.pointer_down(100, 100)
        editor.pointer_move(150, 90)
        editor.pointer_up()
        assert editor.transform.position == (50, -10)
        assert editor.pointer_move(300, 300) is False

    def test_zoom_is_clamped(self, editor):
        assert editor.zoom(9) == 3.0
        assert editor.zoom(0.2) == 0.5

    def test_rotation_buttons(self, editor):
        editor.rotate_right()
        editor.rotate_right()
        editor.rotate_left()
        assert editor.transform.rotation == 90

    def test_unknown_style_falls_back_to_first(self, editor):
        assert editor.select_style("neon").id == "white"
        assert editor.select_style("urban").id == "urban"
        assert editor.selected_style == "urban"

    def test_frame_follows_aspect(self, source_uri):
        session = EditorSession(source_uri, "16:9", frame_width=480)
        assert session.frame_size == pytest.approx((480, 270))

    def test_bad_aspect_rejected(self, source_uri):
        with pytest.raises(ValueError):
            EditorSession(source_uri, "5:4")


class TestExport:

    def test_export_uses_output_resolution(self, source_uri):
        session = EditorSession(source_uri, "9:16")
        exported = session.export()
        assert exported.startswith("data:image/png;base64,")
        assert decode_data_uri(exported).size == (675, 1200)

    def test_export_of_broken_image_is_none(self):
        session = EditorSession("data:image/png;base64,AAAA", "1:1")
        assert session.export() is None

    def test_reset_restores_initial_image_and_identity(self, editor):
        editor.working_image = "data:image/png;base64,other"
        editor.zoom(2)
        editor.rotate_right()
        editor.reset()
        assert editor.working_image == editor.initial_image
        assert editor.transform.is_identity


class TestRegeneration:

    def test_success_replaces_image_and_resets_framing(self, editor, orchestrator, service):
        editor.select_style("studio")
        editor.zoom(2)
        editor.transform.pan(30, 30)

        record = editor.regenerate_background(orchestrator).result(TIMEOUT)

        assert editor.working_image == service.result
        assert editor.transform.is_identity
        assert not editor.processing
        assert record.category == CATEGORY_EDIT
        assert record.prompt == lookup("studio").instruction
        assert record.original_image.startswith("data:image/png;base64,")
        assert editor.initial_image != editor.working_image

    def test_failure_keeps_previous_image(self, editor, orchestrator, service, source_uri):
        service.error = RuntimeError("offline")
        editor.zoom(2)

        editor.regenerate_background(orchestrator).result(TIMEOUT)

        assert editor.working_image == source_uri
        assert editor.transform.scale == 2
        assert not editor.processing

    def test_second_request_while_processing_is_ignored(self, editor, orchestrator, service):
        service.gate.clear()
        first = editor.regenerate_background(orchestrator)
        assert editor.processing
        assert editor.regenerate_background(orchestrator) is None

        service.gate.set()
        first.result(TIMEOUT)
        assert len(service.calls) == 1

    def test_unrenderable_image_submits_nothing(self, orchestrator, service):
        session = EditorSession("data:image/png;base64,AAAA", "1:1")
        assert session.regenerate_background(orchestrator) is None
        assert not session.processing
        assert service.calls == []

    def test_success_applies_even_after_results_cleared(self, editor, orchestrator, service):
        service.gate.clear()
        editor.zoom(2)
        applied = editor.regenerate_background(orchestrator)
        orchestrator.clear_all()

        service.gate.set()
        assert applied.result(TIMEOUT) is None
        assert editor.working_image == service.result
        assert editor.transform.is_identity
        assert not editor.processing
        assert orchestrator.results == []

    def test_failure_after_results_cleared_keeps_image(self, editor, orchestrator, service, source_uri):
        service.gate.clear()
        service.error = RuntimeError("offline")
        applied = editor.regenerate_background(orchestrator)
        orchestrator.clear_all()

        service.gate.set()
        applied.result(TIMEOUT)
        assert editor.working_image == source_uri
        assert not editor.processing

    def test_submit_error_clears_processing(self, editor, orchestrator, service):
        orchestrator.shutdown()
        with pytest.raises(RuntimeError):
            editor.regenerate_background(orchestrator)
        assert not editor.processing
        assert service.calls == []
