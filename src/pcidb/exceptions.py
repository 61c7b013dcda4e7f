"""Exceptions raised while locating and parsing pci.ids files."""

from typing import Optional, Sequence


class PciDbError(Exception):
    """Base exception for pcidb errors."""


class LoadError(PciDbError):
    """A database could not be loaded."""


class NoSourceFoundError(LoadError):
    """None of the candidate pci.ids paths could be opened."""

    def __init__(self, candidates: Sequence):
        self.candidates = list(candidates)
        if self.candidates:
            tried = ", ".join(str(c) for c in self.candidates)
            message = f"no readable pci.ids file found, tried: {tried}"
        else:
            message = "no readable pci.ids file found, no candidate paths given"
        super().__init__(message)


class ParseError(LoadError):
    """A line is malformed for the block it belongs to."""

    def __init__(self, line_number: int, reason: str, path: Optional[str] = None):
        self.line_number = line_number
        self.reason = reason
        self.path = path
        super().__init__(str(self))

    def __str__(self):
        if self.path:
            return f"{self.path}:{self.line_number}: {self.reason}"
        return f"line {self.line_number}: {self.reason}"

    def with_path(self, path) -> "ParseError":
        return ParseError(self.line_number, self.reason, path=str(path))


class SourceReadError(LoadError):
    """The chosen pci.ids file could not be opened or decoded."""

    def __init__(self, path, reason: str):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"{self.path}: {reason}")


class ConfigError(LoadError):
    """The loader configuration is invalid."""
