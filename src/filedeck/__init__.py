"""filedeck - file operation engine for a terminal file manager."""

from filedeck.shared.constants import Application

__version__ = Application.VERSION

__all__ = ["__version__"]
