"""Pantry import exception hierarchy.

Fatal errors abort the whole run before or after the row loop.
Per-row errors are raised by the storage collaborator for a single
record and never stop the batch. Skips are not exceptions at all.
"""

from __future__ import annotations


class PantryImportError(Exception):
    """Base exception for all import failures."""


class PantryFatalError(PantryImportError):
    """Raised when the run cannot start or complete at all."""


class SourceReadError(PantryFatalError):
    """Raised when the CSV source cannot be opened or decoded."""


class StorageConnectionError(PantryFatalError):
    """Raised when the storage session cannot be established or released."""


class StorageWriteError(PantryImportError):
    """Raised when a single record fails to persist."""
