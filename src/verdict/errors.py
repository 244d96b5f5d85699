"""Verification error types."""

from __future__ import annotations


class UsageError(ValueError):
    """A verification was called with invalid arguments."""


class VerdictError(Exception):
    """A failed verification, carrying its full diagnostic text."""

    def __init__(self, reason: str, diagnostic: str = ""):
        super().__init__(reason)
        self.reason = reason
        self.diagnostic = diagnostic or reason

    def __str__(self) -> str:
        return self.diagnostic


class CaptureFailure(VerdictError):
    """The renderer could not produce an image."""


class MissingArtifact(VerdictError, AssertionError):
    """The processed or the expected screenshot does not exist."""


class VisualMismatch(VerdictError, AssertionError):
    """Processed and expected screenshots differ perceptually."""


class StructuralMismatch(VerdictError, AssertionError):
    """An element presence assertion did not hold."""
