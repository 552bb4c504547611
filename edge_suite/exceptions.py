"""Custom exceptions for the Edge Suite composition builder."""

from __future__ import annotations


class EdgeSuiteError(Exception):
    """Base exception for all builder errors."""


class ConfigurationError(EdgeSuiteError):
    """Raised when a required directory cannot be created or is not writable."""


class DestinationExistsError(EdgeSuiteError):
    """Raised when a previous build occupies the destination and replace was not requested."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(
            f"Project directory '{path}' already exists. Use replace to overwrite it."
        )


class ArchiveNotFoundError(EdgeSuiteError):
    """Raised when the archive path does not exist."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Archive '{path}' not found.")


class ExtractionFailedError(EdgeSuiteError):
    """Raised when the archive cannot be unpacked."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Could not extract '{path}': {reason}")


class NoEntryScriptError(EdgeSuiteError):
    """Raised when no ``*_edge.js`` file exists in the extracted archive."""


class InvalidProjectNameError(EdgeSuiteError):
    """Raised when the derived project name contains forbidden characters."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(
            f"Invalid project name '{name}': only letters, digits, '_' and '-' are allowed."
        )


class StageIdentifierNotFoundError(EdgeSuiteError):
    """Raised when the composition identifier cannot be read from the entry script."""


class CompanionDocumentMissingError(EdgeSuiteError):
    """Raised when the runtime version fallback needs ``<project>.html`` and it is absent."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Companion document '{path}' not found.")


class FileReadError(EdgeSuiteError):
    """Raised when a composition script cannot be read."""

    def __init__(self, path: str, reason: str = ""):
        self.path = path
        super().__init__(f"Could not read '{path}'" + (f": {reason}" if reason else ""))


class FileWriteError(EdgeSuiteError):
    """Raised when a composition script cannot be written back."""

    def __init__(self, path: str, reason: str = ""):
        self.path = path
        super().__init__(f"Could not write '{path}'" + (f": {reason}" if reason else ""))


class LibraryMoveFailedError(EdgeSuiteError):
    """Raised when a runtime library cannot be moved into the shared store.

    Non-fatal: the reconciler reports it and continues with the next file.
    """

    def __init__(self, name: str, reason: str):
        self.name = name
        self.reason = reason
        super().__init__(f"Could not move library '{name}': {reason}")
