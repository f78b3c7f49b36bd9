"""Create and rename, applied synchronously on the interactive thread."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from filedeck.core.operations.base import OperationHandler
from filedeck.core.panel import Panel, PanelElement
from filedeck.core.paths import resolve_collision_free_name
from filedeck.shared.constants import FileSystem
from filedeck.shared.errors import (
    DomainError,
    ErrorCode,
    ErrorContext,
    FiledeckError,
    wrap_os_error,
)
from filedeck.shared.logging import log_error, log_file_operation

logger = logging.getLogger(__name__)


def _validate_name(name: str, operation: str, *, nested: bool = False) -> str:
    stripped = name.strip()
    bare = stripped.rstrip("/")
    parts = bare.split("/")
    if (
        not bare
        or bare.startswith("/")
        or "\0" in bare
        or any(part in ("", ".", "..") for part in parts)
        or (len(parts) > 1 and not nested)
    ):
        raise DomainError(
            ErrorCode.INVALID_PATH,
            f"Invalid name: {name!r}",
            ErrorContext(operation=operation, additional_data={"name": name}),
        )
    return stripped


class NamingHandler(OperationHandler):
    """New files and directories, and in-place renames.

    Neither operation creates a Process; failures are logged and reported
    through the return value.
    """

    operation = "naming"

    def create_item(self, panel: Panel, name: str) -> Path | None:
        """
        Create ``name`` in the panel directory.

        A trailing ``/`` creates a directory, anything else an empty file.
        Intermediate directories in ``name`` are created as needed.
        An existing name gets a `` (N)`` suffix.

        Returns:
            The created path, or None on failure
        """
        try:
            name = _validate_name(name, "create", nested=True)
            is_dir = name.endswith("/")
            target = resolve_collision_free_name(Path(panel.location) / name.rstrip("/"))
            try:
                if is_dir:
                    target.mkdir(mode=FileSystem.DIRECTORY_MODE, parents=True)
                else:
                    target.parent.mkdir(mode=FileSystem.DIRECTORY_MODE, parents=True, exist_ok=True)
                    with open(target, "x"):
                        pass
            except OSError as e:
                raise wrap_os_error(e, target, "create", ErrorCode.FILE_CREATE_ERROR) from e
        except FiledeckError as e:
            log_error(f"create error: {name}", e, logger)
            return None

        log_file_operation(logger, "create", target)
        if target.parent == Path(panel.location):
            panel.elements.append(PanelElement.from_path(target))
        return target

    def rename_item(self, panel: Panel, new_name: str) -> Path | None:
        """
        Rename the element under the cursor to ``new_name``.

        Refuses to replace an existing entry. The panel element and any
        selection entry for it are updated in place.

        Returns:
            The new path, or None on failure
        """
        element = panel.current_element()
        if element is None:
            return None
        source = element.location

        try:
            new_name = _validate_name(new_name, "rename").rstrip("/")
            target = source.parent / new_name
            if os.path.lexists(target):
                raise DomainError(
                    ErrorCode.RENAME_TARGET_EXISTS,
                    f"Target already exists: {target}",
                    ErrorContext(file_path=str(target), operation="rename"),
                )
            try:
                os.rename(source, target)
            except OSError as e:
                raise wrap_os_error(e, source, "rename", ErrorCode.FILE_MOVE_ERROR) from e
        except FiledeckError as e:
            log_error(f"rename error: {source}", e, logger)
            return None

        log_file_operation(logger, "rename", source, target)
        panel.elements[panel.cursor] = PanelElement.from_path(target)
        panel.selected = [target if p == source else p for p in panel.selected]
        return target
