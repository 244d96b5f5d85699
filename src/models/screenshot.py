"""Screenshot test data structures shared by the verdict engines."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SuiteContext(BaseModel):
    """The suite a verification runs in: its title and its directory."""
    model_config = ConfigDict(frozen=True)

    title: str
    base_directory: Path


class ScreenshotTest(BaseModel):
    """One capture attempt. Paths are None when the file does not exist."""
    model_config = ConfigDict(frozen=True)

    name: str
    expected_path: Optional[Path] = None
    processed_path: Optional[Path] = None
    base_directory: Path


class MismatchResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    percentage: float = Field(ge=0, le=100)
