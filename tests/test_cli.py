"""Tests for CLI module."""

import io
import pytest
from pathlib import Path

from src.cli import ConsoleListener, build_parser, main
from src.dirwatch.models import EventKind, WatchEvent


class TestConsoleListener:
    """Tests for ConsoleListener class."""

    def test_create_file(self):
        stream = io.StringIO()
        listener = ConsoleListener(stream)

        listener.on_create(WatchEvent(EventKind.CREATE, Path("a.txt"), Path("/root")))

        assert stream.getvalue() == f"CREATE File: {Path('/root/a.txt')}\n"

    def test_create_directory(self):
        stream = io.StringIO()
        listener = ConsoleListener(stream)

        listener.on_create(
            WatchEvent(EventKind.CREATE, Path("d"), Path("/root"), is_directory=True)
        )

        assert stream.getvalue().startswith("CREATE Directory:")

    def test_modify(self):
        stream = io.StringIO()
        listener = ConsoleListener(stream)

        listener.on_modify(WatchEvent(EventKind.MODIFY, Path("a.txt"), Path("/root")))

        assert stream.getvalue().startswith("MODIFY File:")

    def test_delete_uses_directory_flag(self):
        stream = io.StringIO()
        listener = ConsoleListener(stream)

        listener.on_delete(WatchEvent(EventKind.DELETE, Path("d"), Path("/root")), True)

        assert stream.getvalue().startswith("DELETE Directory:")

    def test_overflow(self):
        stream = io.StringIO()
        listener = ConsoleListener(stream)

        listener.on_overflow(WatchEvent(EventKind.OVERFLOW, count=7))

        assert stream.getvalue() == "OVERFLOW: 7 event(s) dropped\n"


class TestParser:
    """Tests for argument parsing."""

    def test_defaults(self):
        args = build_parser().parse_args(["./docs"])
        assert args.path == "./docs"
        assert args.polling is False
        assert args.interval == 1.0
        assert args.follow_symlinks is False
        assert args.ignore is None

    def test_options(self):
        args = build_parser().parse_args(
            ["./docs", "--polling", "--interval", "2", "--ignore", "*.tmp", "*.swp", "-v"]
        )
        assert args.polling is True
        assert args.interval == 2.0
        assert args.ignore == ["*.tmp", "*.swp"]
        assert args.verbose is True

    def test_path_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


class TestMain:
    """Tests for the main entry point."""

    def test_missing_directory_exits(self, tmp_path):
        with pytest.raises(SystemExit) as exc_info:
            main([str(tmp_path / "missing")])
        assert exc_info.value.code == 1

    def test_file_path_exits(self, tmp_path):
        file_path = tmp_path / "file.txt"
        file_path.write_text("x")

        with pytest.raises(SystemExit) as exc_info:
            main([str(file_path)])
        assert exc_info.value.code == 1
