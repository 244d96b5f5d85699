"""Configuration models for the visual verdict pipeline."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class ViewportConfig(BaseModel):
    width: int = 1280
    height: int = 720
    name: str = "desktop"


class RendererConfig(BaseModel):
    headless: bool = True
    viewport: ViewportConfig = Field(default_factory=ViewportConfig)
    full_page: bool = True
    wait_until: str = "networkidle"
    settle_timeout_ms: int = 3000
    user_agent: Optional[str] = None
    disable_animations: bool = True


class ScreenshotConfig(BaseModel):
    # Target
    base_url: str = ""

    # Directory names, relative to the suite directory
    expected_screenshots_dir: str = "expected-screenshots"
    processed_screenshots_dir: str = "processed-screenshots"
    screenshot_diff_dir: str = "screenshot-diffs"

    # Output
    print_logs: bool = False

    # Redirect processed + diff images to a shared UI tests checkout
    store_in_ui_tests_repo: bool = False
    ui_tests_dir: str = ""

    renderer: RendererConfig = Field(default_factory=RendererConfig)

    @field_validator("base_url", mode="before")
    @classmethod
    def resolve_env_base_url(cls, v: str) -> str:
        if isinstance(v, str) and v.startswith("env:"):
            env_var = v[4:]
            resolved = os.environ.get(env_var)
            if resolved is None:
                raise ValueError(f"Environment variable '{env_var}' not set")
            return resolved
        return v

    @model_validator(mode="after")
    def check_ui_tests_dir(self) -> "ScreenshotConfig":
        if self.store_in_ui_tests_repo and not self.ui_tests_dir:
            raise ValueError("store_in_ui_tests_repo requires ui_tests_dir")
        return self

    @classmethod
    def load(cls, path: str | Path) -> "ScreenshotConfig":
        """Load config from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        with open(path) as f:
            data = json.load(f)
        return cls(**data)

    def save(self, path: str | Path) -> None:
        """Save config to a JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(self.model_dump(), f, indent=2)
