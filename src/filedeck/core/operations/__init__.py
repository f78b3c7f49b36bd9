"""Operation handlers and the engine facade."""

from .archive_ops import ArchiveHandler
from .base import EngineContext, OperationHandler
from .delete import DeleteHandler
from .engine import FileOperationEngine
from .naming import NamingHandler
from .transfer import TransferHandler, copy_tree

__all__ = [
    "ArchiveHandler",
    "DeleteHandler",
    "EngineContext",
    "FileOperationEngine",
    "NamingHandler",
    "OperationHandler",
    "TransferHandler",
    "copy_tree",
]
