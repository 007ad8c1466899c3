"""Error envelopes raised by the editor layer."""

from __future__ import annotations

from dataclasses import dataclass


class TrellisError(Exception):
    """Base class for errors a user should see."""


@dataclass(eq=False)
class Rejected(TrellisError):
    """An intent refused by policy before it reached the model."""

    code: str
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(eq=False)
class InvalidDocument(TrellisError):
    """An import that could not be turned into a snapshot."""

    message: str
    path: str = ""

    def __str__(self) -> str:
        return f"{self.path}: {self.message}" if self.path else self.message
