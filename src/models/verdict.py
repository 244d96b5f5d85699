"""Verdict produced by a single verification."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict

from src.verdict.errors import (
    CaptureFailure,
    MissingArtifact,
    StructuralMismatch,
    VerdictError,
    VisualMismatch,
)


class FailureKind(str, Enum):
    CAPTURE_FAILURE = "capture_failure"
    MISSING_ARTIFACT = "missing_artifact"
    VISUAL_MISMATCH = "visual_mismatch"
    STRUCTURAL_MISMATCH = "structural_mismatch"


_ERROR_TYPES: dict[FailureKind, type[VerdictError]] = {
    FailureKind.CAPTURE_FAILURE: CaptureFailure,
    FailureKind.MISSING_ARTIFACT: MissingArtifact,
    FailureKind.VISUAL_MISMATCH: VisualMismatch,
    FailureKind.STRUCTURAL_MISMATCH: StructuralMismatch,
}


class Verdict(BaseModel):
    """Pass, or Fail with a reason and a diagnostic fixed at construction."""
    model_config = ConfigDict(frozen=True)

    passed: bool
    kind: Optional[FailureKind] = None
    reason: str = ""
    diagnostic: str = ""

    @classmethod
    def ok(cls) -> "Verdict":
        return cls(passed=True)

    @classmethod
    def fail(cls, kind: FailureKind, reason: str, diagnostic: str = "") -> "Verdict":
        return cls(passed=False, kind=kind, reason=reason, diagnostic=diagnostic or reason)

    def to_error(self) -> VerdictError | None:
        if self.passed:
            return None
        return _ERROR_TYPES[self.kind](self.reason, self.diagnostic)

    def raise_for_failure(self) -> None:
        """Raise the error matching this verdict's failure kind, if any."""
        error = self.to_error()
        if error is not None:
            raise error
