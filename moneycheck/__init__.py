"""Mini README: Core package initializer for the Money Check ledger.

This module exposes convenience imports so callers can reach the workspace
and logging helpers without knowing the exact module structure. Heavy
collaborators (the FastAPI interface, the CLI) are deliberately not imported
here so that the arithmetic core can be used on its own.
"""

from .logging_utils import get_logger
from .workspace import LedgerWorkspace

__all__ = ["LedgerWorkspace", "get_logger"]
