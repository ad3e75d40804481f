"""
Tests for the session backend and the command line entry point.
"""
import json
import os

import pytest

import app
from mockfinity import Backend
from mockfinity.compositor import decode_data_uri
from mockfinity.constants import MOCKUP_FIDELITY_SUFFIX
from mockfinity.models import STATUS_SUCCESS
from mockfinity.styles import lookup_scenario

TIMEOUT = 5


@pytest.fixture
def backend(service, config_path):
    instance = Backend(service=service, config_path=config_path)
    yield instance
    service.gate.set()
    instance.shutdown()


@pytest.fixture
def product_file(tmp_path, quadrants):
    path = tmp_path / "product.png"
    quadrants.save(path)
    return str(path)


class TestSource:

    def test_generate_without_source_does_nothing(self, backend, service):
        assert backend.generate("P", "edit") is None
        assert backend.results == []
        assert service.calls == []

    def test_load_source(self, backend, product_file):
        assert backend.load_source(product_file)
        assert backend.source_image.startswith("data:image/png;base64,")

    def test_load_non_image_keeps_previous(self, backend, product_file, tmp_path):
        backend.load_source(product_file)
        previous = backend.source_image
        notes = tmp_path / "notes.txt"
        notes.write_text("x")
        assert not backend.load_source(str(notes))
        assert backend.source_image == previous


class TestGenerate:

    def test_scenario_uses_preset_and_suffix(self, backend, product_file):
        backend.load_source(product_file)
        record = backend.generate_scenario("mug").result(TIMEOUT)
        assert record.status == STATUS_SUCCESS
        assert record.category == "mockup"
        assert record.prompt == lookup_scenario("mug").instruction + MOCKUP_FIDELITY_SUFFIX

    def test_aspect_ratio_frozen_at_submission(self, backend, service, product_file):
        backend.load_source(product_file)
        backend.set_aspect_ratio("16:9")
        service.gate.clear()
        future = backend.generate("P", "edit")
        backend.set_aspect_ratio("3:4")
        service.gate.set()
        record = future.result(TIMEOUT)
        assert record.aspect_ratio == "16:9"
        assert service.calls[0][2] == "16:9"

    def test_busy_blocks_new_submissions(self, backend, service, product_file):
        backend.load_source(product_file)
        service.gate.clear()
        first = backend.generate("A", "edit")
        assert backend.is_processing
        assert backend.generate("B", "edit") is None
        service.gate.set()
        first.result(TIMEOUT)
        assert len(backend.results) == 1

    def test_clear_results(self, backend, product_file):
        backend.load_source(product_file)
        backend.generate("P", "edit").result(TIMEOUT)
        backend.clear_results()
        assert backend.results == []

    def test_invalid_aspect_ratio(self, backend):
        with pytest.raises(ValueError):
            backend.set_aspect_ratio("21:9")
        assert backend.aspect_ratio == "1:1"

    def test_aspect_ratio_resets_each_session(self, backend, config_path, service):
        backend.set_aspect_ratio("4:3")
        backend.toggle_theme()
        reopened = Backend(service=service, config_path=config_path)
        try:
            assert reopened.aspect_ratio == "1:1"
        finally:
            reopened.shutdown()
        with open(config_path, encoding="utf-8") as handle:
            assert "aspect_ratio" not in json.load(handle)


class TestEditor:

    def test_open_without_image(self, backend):
        assert backend.open_editor() is None

    def test_save_edit_replaces_source(self, backend, product_file):
        backend.load_source(product_file)
        backend.set_aspect_ratio("16:9")
        editor = backend.open_editor()
        editor.zoom(1.5)
        assert backend.save_edit()
        assert backend.editor is None
        assert decode_data_uri(backend.source_image).size == (1200, 675)

    def test_cancel_edit_keeps_source(self, backend, product_file):
        backend.load_source(product_file)
        original = backend.source_image
        backend.open_editor().zoom(2)
        backend.cancel_edit()
        assert backend.editor is None
        assert backend.source_image == original

    def test_regenerate_background(self, backend, service, product_file):
        backend.load_source(product_file)
        backend.open_editor()
        record = backend.regenerate_background("nature").result(TIMEOUT)
        assert backend.editor.working_image == service.result
        assert record in backend.results


class TestExportAndTheme:

    def test_save_result(self, backend, product_file, tmp_path):
        backend.load_source(product_file)
        record = backend.generate("P", "edit").result(TIMEOUT)
        path = backend.save_result(record.id, str(tmp_path / "out"))
        assert os.path.basename(path) == f"mockfinity-{record.id}.png"

    def test_save_unknown_result(self, backend):
        assert backend.save_result("nope") is None
        assert backend.copy_prompt("nope") is False

    def test_toggle_theme(self, backend):
        assert backend.theme == "dark"
        assert backend.toggle_theme() == "light"
        assert backend.theme == "light"


class TestCommandLine:

    @pytest.fixture
    def cli_backend(self, monkeypatch, service, config_path):
        created = []

        def factory():
            instance = Backend(service=service, config_path=config_path)
            created.append(instance)
            return instance

        monkeypatch.setattr(app, "Backend", factory)
        return created

    def test_generates_and_saves(self, cli_backend, service, product_file, tmp_path, capsys):
        out_dir = tmp_path / "out"
        code = app.main([product_file, "--scenario", "social", "--ratio", "9:16",
                         "--zoom", "1.2", "--rotate", "90", "--output", str(out_dir)])
        assert code == 0
        saved = capsys.readouterr().out.strip().splitlines()[-1]
        assert os.path.dirname(saved) == str(out_dir)
        sent_image, _, ratio = service.calls[0]
        assert ratio == "9:16"
        assert decode_data_uri(sent_image).size == (675, 1200)

    def test_failed_generation_exit_code(self, cli_backend, service, product_file, tmp_path):
        service.error = RuntimeError("down")
        assert app.main([product_file, "--prompt", "make it pop", "--output", str(tmp_path)]) == 1

    def test_unreadable_source(self, cli_backend, tmp_path):
        assert app.main([str(tmp_path / "missing.png"), "--prompt", "x"]) == 1
