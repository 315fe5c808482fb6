"""Custom exceptions for canvas generation and expansion."""

from __future__ import annotations

from pathlib import Path


class LinkCanvasError(Exception):
    """Base exception for linkcanvas operations."""
    pass


class NotFoundError(LinkCanvasError):
    """Raised when a note or canvas the operation needs does not exist."""
    pass


class NoteNotFoundError(NotFoundError):
    """Raised when a note cannot be resolved in the vault."""
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Note '{name}' not found in vault")


class DiagramNotFoundError(NotFoundError):
    """Raised when a canvas file does not exist."""
    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"Canvas '{path}' does not exist")


class DiagramParseError(LinkCanvasError):
    """Raised when a canvas file is not valid JSON or not a diagram."""
    def __init__(self, path: Path, detail: str):
        self.path = path
        self.detail = detail
        super().__init__(f"Invalid canvas data in '{path}': {detail}")


class ConfigError(LinkCanvasError, ValueError):
    """Raised when a configuration value is invalid."""
    pass
