"""
Tests for the error hierarchy and the structured logging helpers.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from filedeck.shared.errors import (
    ArchiveError,
    ErrorCode,
    ErrorContext,
    FiledeckError,
    InfrastructureError,
    TrashError,
    create_cli_error,
    wrap_os_error,
)
from filedeck.shared.logging import StructuredFormatter, log_error, setup_structured_logger


class TestErrors:
    def test_hierarchy(self) -> None:
        assert issubclass(TrashError, InfrastructureError)
        assert issubclass(ArchiveError, FiledeckError)

    def test_to_dict(self) -> None:
        cause = OSError("disk")
        error = TrashError(
            ErrorCode.TRASH_MOVE_FAILED,
            "move failed",
            ErrorContext(file_path="/x", operation="trash"),
            cause,
        )

        data = error.to_dict()

        assert data["code"] == "TRASH_MOVE_FAILED"
        assert data["context"]["file_path"] == "/x"
        assert data["original_error"] == "disk"
        assert str(error) == "TRASH_MOVE_FAILED: move failed"

    @pytest.mark.parametrize(
        ("raised", "expected"),
        [
            (FileNotFoundError("gone"), ErrorCode.FILE_NOT_FOUND),
            (PermissionError("denied"), ErrorCode.PERMISSION_DENIED),
            (OSError("other"), ErrorCode.FILE_COPY_ERROR),
        ],
    )
    def test_wrap_os_error(self, raised: OSError, expected: ErrorCode) -> None:
        wrapped = wrap_os_error(raised, "/a", "copy", ErrorCode.FILE_COPY_ERROR)
        assert wrapped.code == expected
        assert wrapped.original_error is raised

    def test_cli_error_exit_code(self) -> None:
        error = create_cli_error("bad", command="copy", exit_code=3)
        assert error.exit_code == 3
        assert error.command == "copy"


class TestLogging:
    def test_formatter_emits_json(self) -> None:
        record = logging.LogRecord("filedeck.test", logging.ERROR, __file__, 1, "boom %s", ("x",), None)
        record.error_code = "FILE_NOT_FOUND"

        entry = json.loads(StructuredFormatter().format(record))

        assert entry["message"] == "boom x"
        assert entry["error_code"] == "FILE_NOT_FOUND"
        assert entry["level"] == "ERROR"

    def test_log_file_receives_errors(self, tmp_path: Path) -> None:
        log_file = tmp_path / "logs" / "filedeck.log"
        logger = setup_structured_logger("filedeck.test_sink", "DEBUG", log_file, use_rich_console=False)
        try:
            log_error(
                "trash error: /a",
                TrashError(ErrorCode.FILE_NOT_FOUND, "File not found: /a", ErrorContext(file_path="/a")),
                logger,
            )
            for handler in logger.handlers:
                handler.flush()

            entries = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
        finally:
            for handler in list(logger.handlers):
                logger.removeHandler(handler)
                handler.close()

        assert entries[-1]["error_code"] == "FILE_NOT_FOUND"
        assert entries[-1]["context"]["file_path"] == "/a"
