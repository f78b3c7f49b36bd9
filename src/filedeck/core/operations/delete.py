"""Delete handlers: confirmation, move-to-trash and permanent delete."""

from __future__ import annotations

import logging
import os
import uuid
from collections.abc import Sequence
from concurrent.futures import Future
from pathlib import Path

from filedeck.core.models import (
    ActionKind,
    ConfirmationRequest,
    Message,
    PendingAction,
    Process,
    WarnKind,
)
from filedeck.core.operations.base import OperationHandler
from filedeck.core.panel import Panel, PanelMode
from filedeck.core.paths import is_external_volume
from filedeck.shared.constants import Icons

logger = logging.getLogger(__name__)

TRASH_TITLE = "Are you sure you want to move this to trash can"
TRASH_BODY = "This operation will move file or directory to trash can."
PERMANENT_TITLE = "Are you sure you want to completely delete"
PERMANENT_BODY = "This operation cannot be undone and your data will be completely lost."


def _delete_label(path: Path) -> str:
    return Icons.label(Icons.DELETE, path.name)


class DeleteHandler(OperationHandler):
    """Routes deletes through a confirmation, then trashes or removes items."""

    operation = "delete"

    def request_delete(self, panel: Panel) -> ConfirmationRequest | None:
        """
        Announce a confirmation request for deleting the panel targets.

        Items on an external volume need acknowledgement of permanent loss;
        everything else is described as a trash relocation. Control returns
        immediately; the modal calls ``confirm`` on an affirmative answer.

        Returns:
            The request, or None when there is nothing to delete
        """
        targets = panel.targets()
        if not any(os.path.lexists(p) for p in targets):
            return None

        if is_external_volume(panel.location, self.context.trash.trash_root):
            kind, title, body = ActionKind.PERMANENT_DELETE, PERMANENT_TITLE, PERMANENT_BODY
        else:
            kind, title, body = ActionKind.TRASH, TRASH_TITLE, TRASH_BODY

        request = ConfirmationRequest(
            title=title,
            body=body,
            kind=WarnKind.CONFIRM_DELETE,
            action=PendingAction(
                kind=kind,
                paths=tuple(targets),
                single=panel.mode is PanelMode.BROWSER,
            ),
        )
        self.registry.bus.announce(Message.for_confirmation(uuid.uuid4().hex, request))
        return request

    def confirm(self, request: ConfirmationRequest, panel: Panel) -> Future[Process] | None:
        """Continuation for an accepted delete confirmation."""
        action = request.action
        permanent = action.kind is ActionKind.PERMANENT_DELETE
        return self.delete(panel, list(action.paths), permanent=permanent, single=action.single)

    def trash_items(self, panel: Panel, paths: Sequence[Path] | None = None) -> Future[Process] | None:
        return self.delete(panel, paths, permanent=False)

    def permanently_delete_items(
        self, panel: Panel, paths: Sequence[Path] | None = None
    ) -> Future[Process] | None:
        return self.delete(panel, paths, permanent=True)

    def delete(
        self,
        panel: Panel,
        paths: Sequence[Path] | None = None,
        *,
        permanent: bool,
        single: bool | None = None,
    ) -> Future[Process] | None:
        """
        Delete ``paths`` (the panel targets by default) as one batch.

        The panel selection is cleared and the cursor clamped before the
        batch starts.

        Returns:
            Future resolving to the terminal Process, or None when none of
            the items exist
        """
        items = [Path(p) for p in (paths if paths is not None else panel.targets())]
        if not any(os.path.lexists(p) for p in items):
            logger.debug("Nothing to delete")
            return None
        if single is None:
            single = panel.mode is PanelMode.BROWSER

        process = self.registry.start(_delete_label(items[0]), total=len(items))

        if single:
            panel.after_single_removal()
        else:
            panel.after_batch(removed=len(items))

        remove = self.context.trash.permanently_delete if permanent else self.context.trash.move_to_trash
        logger.info(
            "%s %d item(s)",
            "Permanently deleting" if permanent else "Trashing",
            len(items),
        )
        return self.submit(
            lambda pid: self.run_items(pid, items, remove, _delete_label),
            process,
        )
