"""
Data models for filedeck core operations.

Process records, bus messages and confirmation requests. These are the
only shapes that cross from the engine to the renderer.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class ProcessState(str, Enum):
    """Lifecycle of a Process. Terminal states are final."""

    IN_PROGRESS = "in_progress"
    SUCCESSFUL = "successful"
    FAILURE = "failure"

    @property
    def is_terminal(self) -> bool:
        return self is not ProcessState.IN_PROGRESS


class MessageKind(str, Enum):
    """Kinds of messages the engine puts on the bus."""

    PROCESS_UPDATE = "process_update"
    CONFIRMATION_REQUEST = "confirmation_request"


class WarnKind(str, Enum):
    """What a confirmation modal is asking about."""

    CONFIRM_DELETE = "confirm_delete"


class ActionKind(str, Enum):
    """Continuation to run once a confirmation is accepted."""

    TRASH = "trash"
    PERMANENT_DELETE = "permanent_delete"


class Process(BaseModel):
    """
    One user-visible operation.

    Handlers mutate a working copy obtained from the ProgressRegistry and
    write it back through the registry, which validates every transition.
    """

    id: str = Field(..., description="Opaque identifier, stable for the operation lifetime")
    name: str = Field(..., description="Icon plus the basename of the current item")
    state: ProcessState = Field(default=ProcessState.IN_PROGRESS)
    total: int = Field(default=0, ge=0)
    done: int = Field(default=0, ge=0)
    done_time: datetime | None = Field(default=None, description="Set on entering a terminal state")

    @property
    def is_terminal(self) -> bool:
        return self.state.is_terminal

    def __str__(self) -> str:
        return f"{self.name} [{self.state.value}] {self.done}/{self.total}"


class PendingAction(BaseModel):
    """The continuation carried by a ConfirmationRequest."""

    model_config = ConfigDict(frozen=True)

    kind: ActionKind
    paths: tuple[Path, ...] = Field(..., min_length=1)
    # True when the delete targets the element under the cursor (browser mode).
    single: bool = False


class ConfirmationRequest(BaseModel):
    """A yes/no gate shown before a destructive action."""

    model_config = ConfigDict(frozen=True)

    title: str
    body: str
    kind: WarnKind = WarnKind.CONFIRM_DELETE
    action: PendingAction


class Message(BaseModel):
    """An immutable event on the message bus.

    Exactly one of ``process`` and ``confirmation`` is set, matching
    ``kind``.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    kind: MessageKind
    process: Process | None = None
    confirmation: ConfirmationRequest | None = None
    # Intermediate progress snapshot that the bus may coalesce.
    tick: bool = False

    @classmethod
    def for_process(cls, process: Process, *, tick: bool = False) -> Message:
        """Snapshot ``process`` into a process-update message."""
        return cls(
            id=process.id,
            kind=MessageKind.PROCESS_UPDATE,
            process=process.model_copy(),
            tick=tick and not process.is_terminal,
        )

    @classmethod
    def for_confirmation(cls, message_id: str, request: ConfirmationRequest) -> Message:
        return cls(
            id=message_id,
            kind=MessageKind.CONFIRMATION_REQUEST,
            confirmation=request,
        )

    @property
    def is_essential(self) -> bool:
        """Essential messages are never coalesced by the bus."""
        return not self.tick

    @property
    def is_terminal(self) -> bool:
        return self.process is not None and self.process.is_terminal
