"""Exceptions raised while scanning a source tree."""

from __future__ import annotations

from typing import Optional


class ClassScanError(RuntimeError):
    """Base class for discovery and extraction failures."""


class DiscoveryError(ClassScanError):
    """A scan root does not exist, is not a directory, or cannot be read."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot scan {path}: {reason}")


class ParseError(ClassScanError):
    """A source file could not be read or parsed as valid PHP."""

    def __init__(self, file: str, cause: object):
        self.file = file
        self.cause: Optional[object] = cause
        super().__init__(f"Failed to parse {file}: {cause}")
