"""Tests for the __main__.py CLI."""

import io
from unittest.mock import MagicMock, patch

import pytest

from clipdeck.__main__ import main, read_input, run_classify, run_render, run_watch
from clipdeck.config import MonitorSettings


class TestReadInput:
    def test_reads_file(self, tmp_path):
        path = tmp_path / "notes.md"
        path.write_text("# Title", encoding="utf-8")
        assert read_input(str(path)) == "# Title"

    @pytest.mark.parametrize("path", [None, "-"])
    def test_reads_stdin(self, path):
        with patch("sys.stdin", io.StringIO("from stdin")):
            assert read_input(path) == "from stdin"


class TestRender:
    def test_renders_file(self, tmp_path, capsys):
        path = tmp_path / "doc.md"
        path.write_text("# Hello\n\nThis is **bold**.", encoding="utf-8")
        assert run_render(str(path)) == 0
        out = capsys.readouterr().out
        assert "<h1>Hello</h1>" in out
        assert "<p>This is <strong>bold</strong>.</p>" in out

    def test_missing_file(self, tmp_path, capsys):
        assert run_render(str(tmp_path / "missing.md")) == 1
        assert "Cannot read" in capsys.readouterr().err


class TestClassify:
    def test_markdown(self, tmp_path, capsys):
        path = tmp_path / "doc.md"
        path.write_text("# Title\n- one\n- two", encoding="utf-8")
        assert run_classify(str(path)) == 0
        out = capsys.readouterr().out
        assert "markdown score: 4" in out
        assert "markdown" in out.splitlines()[1]
        assert "password-like:  no" in out

    def test_code(self, capsys):
        with patch("sys.stdin", io.StringIO("def f():\n    return 1")):
            assert run_classify(None) == 0
        assert "code(python)" in capsys.readouterr().out

    def test_password(self, capsys):
        with patch("sys.stdin", io.StringIO("hunter2!x")):
            run_classify("-")
        assert "password-like:  yes" in capsys.readouterr().out

    def test_missing_file(self, tmp_path, capsys):
        assert run_classify(str(tmp_path / "nope.txt")) == 1


class TestWatch:
    @patch("clipdeck.__main__.time.sleep", side_effect=KeyboardInterrupt)
    @patch("clipdeck.__main__.configure_logging")
    @patch("clipdeck.monitor.ClipboardManager")
    def test_starts_and_closes_manager(self, mock_manager_cls, _mock_logging, _mock_sleep):
        manager = MagicMock()
        mock_manager_cls.return_value = manager

        assert run_watch() == 0

        manager.start_monitoring.assert_called_once()
        manager.close.assert_called_once()

    @patch("clipdeck.__main__.time.sleep", side_effect=KeyboardInterrupt)
    @patch("clipdeck.__main__.configure_logging")
    @patch("clipdeck.monitor.ClipboardManager")
    def test_applies_environment_overrides(self, mock_manager_cls, _mock_logging, _mock_sleep):
        with patch("clipdeck.config.MAX_ENTRIES", 120):
            run_watch()
        settings = mock_manager_cls.call_args.kwargs["settings"]
        assert isinstance(settings, MonitorSettings)
        assert settings.max_entries == 120


class TestMain:
    @patch("clipdeck.__main__.run_render", return_value=0)
    def test_render_command(self, mock_render):
        with pytest.raises(SystemExit) as exc:
            main(["render", "doc.md"])
        assert exc.value.code == 0
        mock_render.assert_called_once_with("doc.md")

    @patch("clipdeck.__main__.run_classify", return_value=1)
    def test_classify_command(self, mock_classify):
        with pytest.raises(SystemExit) as exc:
            main(["classify"])
        assert exc.value.code == 1
        mock_classify.assert_called_once_with(None)

    @patch("clipdeck.__main__.run_watch", return_value=0)
    def test_default_is_watch(self, mock_watch):
        with pytest.raises(SystemExit):
            main([])
        mock_watch.assert_called_once_with(False)

    @patch("clipdeck.__main__.run_watch", return_value=0)
    def test_verbose(self, mock_watch):
        with pytest.raises(SystemExit):
            main(["-v", "watch"])
        mock_watch.assert_called_once_with(True)

    def test_unknown_command(self):
        with pytest.raises(SystemExit) as exc:
            main(["frobnicate"])
        assert exc.value.code == 2

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["--version"])
        assert exc.value.code == 0
        assert "clipdeck" in capsys.readouterr().out
