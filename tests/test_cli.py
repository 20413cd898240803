"""
Tests for the cia-paper command line interface.

Exit codes: 0 success, 2 invalid payload, 1 build or storage failure.
"""

import json

import pytest

from cia_toolkit import cli
from cia_toolkit.builder import controller


@pytest.fixture
def payload_file(tmp_path, payload):
    path = tmp_path / "paper.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


class TestBuildCommand:
    """Tests for `cia-paper build`."""

    def test_build_when_valid_then_exit_zero_and_paths_printed(self, payload_file, tmp_path, capsys):
        out_dir = tmp_path / "generated"
        assert cli.main(["build", str(payload_file), "--out", str(out_dir)]) == cli.EXIT_OK
        output = capsys.readouterr().out
        assert "__ccs336__cia2" in output
        assert "CCS336_CIAII.pdf" in output
        assert len(list(out_dir.glob("*/CCS336_CIAII.docx"))) == 1

    def test_build_when_institution_given_then_recorded(self, payload_file, tmp_path):
        out_dir = tmp_path / "generated"
        cli.main(["build", str(payload_file), "--out", str(out_dir), "--institution", "Example Institute", "--no-parallel"])
        (metadata_path,) = out_dir.glob("*/paper.json")
        assert json.loads(metadata_path.read_text(encoding="utf-8"))["institution"] == "Example Institute"

    def test_build_when_payload_invalid_then_exit_two(self, payload, tmp_path, capsys):
        payload["partA"][0]["btl"] = "L4"
        path = tmp_path / "bad.json"
        path.write_text(json.dumps(payload), encoding="utf-8")
        assert cli.main(["build", str(path), "--out", str(tmp_path / "out")]) == cli.EXIT_INVALID
        assert "partA[0].btl" in capsys.readouterr().err

    def test_build_when_json_malformed_then_exit_two(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{", encoding="utf-8")
        assert cli.main(["build", str(path), "--out", str(tmp_path / "out")]) == cli.EXIT_INVALID

    def test_build_when_file_missing_then_exit_one(self, tmp_path):
        assert cli.main(["build", str(tmp_path / "absent.json"), "--out", str(tmp_path)]) == cli.EXIT_FAILURE

    def test_build_when_renderer_fails_then_exit_one(self, payload_file, tmp_path, monkeypatch):
        def broken(paper, weightage, config):
            raise RuntimeError("boom")

        monkeypatch.setitem(controller.RENDERERS, "pdf", broken)
        out_dir = tmp_path / "out"
        assert cli.main(["build", str(payload_file), "--out", str(out_dir)]) == cli.EXIT_FAILURE
        assert not out_dir.exists() or not any(out_dir.iterdir())


class TestListAndPurgeCommands:
    """Tests for `cia-paper list` and `cia-paper purge`."""

    def test_list_when_empty_then_message(self, tmp_path, capsys):
        assert cli.main(["list", "--out", str(tmp_path)]) == cli.EXIT_OK
        assert "No papers stored" in capsys.readouterr().out

    def test_list_when_built_then_paper_listed(self, payload_file, tmp_path, capsys):
        out_dir = tmp_path / "generated"
        cli.main(["build", str(payload_file), "--out", str(out_dir)])
        capsys.readouterr()
        assert cli.main(["list", "--out", str(out_dir)]) == cli.EXIT_OK
        assert "CCS336 – Cloud Services Management" in capsys.readouterr().out

    def test_purge_when_within_retention_then_nothing_removed(self, payload_file, tmp_path, capsys):
        out_dir = tmp_path / "generated"
        cli.main(["build", str(payload_file), "--out", str(out_dir)])
        capsys.readouterr()
        assert cli.main(["purge", "--out", str(out_dir), "--hours", "24"]) == cli.EXIT_OK
        assert "Removed 0 paper(s)" in capsys.readouterr().out

    def test_purge_when_negative_hours_then_exit_two(self, tmp_path):
        assert cli.main(["purge", "--out", str(tmp_path), "--hours", "-1"]) == cli.EXIT_INVALID

    def test_main_when_no_command_then_usage_error(self):
        with pytest.raises(SystemExit) as exc_info:
            cli.main([])
        assert exc_info.value.code == 2
