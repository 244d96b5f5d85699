"""Perceptual diff client: measures how much two screenshots differ."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Protocol
from urllib.parse import urlparse
from urllib.request import url2pathname

from PIL import Image, ImageChops

from src.models.screenshot import MismatchResult

logger = logging.getLogger(__name__)

# Per-channel difference below which two pixels count as equal. Absorbs
# encoder and anti-aliasing noise the same way resemble.js does by default.
DEFAULT_CHANNEL_TOLERANCE = 16

DIFF_HIGHLIGHT = (255, 0, 255)


class PerceptualDiffClient(Protocol):
    async def compare(self, uri_a: str, uri_b: str) -> MismatchResult:
        ...


def path_from_uri(uri: str) -> Path:
    """Turn a file:// URI (or a plain path) into a Path."""
    parsed = urlparse(uri)
    if parsed.scheme == "file":
        return Path(url2pathname(parsed.path))
    return Path(uri)


def _load_pair(path_a: Path, path_b: Path) -> tuple[Image.Image, Image.Image]:
    """Open both images as RGBA on a common canvas.

    Images of different size are padded with transparent pixels, so the
    uncovered area counts as mismatching.
    """
    img_a = Image.open(path_a).convert("RGBA")
    img_b = Image.open(path_b).convert("RGBA")
    if img_a.size == img_b.size:
        return img_a, img_b

    size = (max(img_a.width, img_b.width), max(img_a.height, img_b.height))
    padded = []
    for img in (img_a, img_b):
        canvas = Image.new("RGBA", size, (0, 0, 0, 0))
        canvas.paste(img, (0, 0))
        padded.append(canvas)
    return padded[0], padded[1]


def _mismatch_mask(img_a: Image.Image, img_b: Image.Image, tolerance: int) -> Image.Image:
    """Return an "L" mask that is 255 wherever any channel differs by more than tolerance."""
    diff = ImageChops.difference(img_a, img_b)
    red, green, blue, alpha = diff.split()
    strongest = ImageChops.lighter(ImageChops.lighter(red, green), ImageChops.lighter(blue, alpha))
    return strongest.point(lambda v: 255 if v > tolerance else 0)


class PillowDiffClient:
    """Perceptual diff backed by Pillow, run off the event loop."""

    def __init__(self, channel_tolerance: int = DEFAULT_CHANNEL_TOLERANCE):
        self.channel_tolerance = channel_tolerance

    async def compare(self, uri_a: str, uri_b: str) -> MismatchResult:
        path_a, path_b = path_from_uri(uri_a), path_from_uri(uri_b)
        percentage = await asyncio.to_thread(self.mismatch_percentage, path_a, path_b)
        logger.debug("Perceptual diff %s vs %s: %s%%", path_a.name, path_b.name, percentage)
        return MismatchResult(percentage=percentage)

    def mismatch_percentage(self, path_a: Path, path_b: Path) -> float:
        img_a, img_b = _load_pair(path_a, path_b)
        total = img_a.width * img_a.height
        if total == 0:
            return 0.0
        mask = _mismatch_mask(img_a, img_b, self.channel_tolerance)
        mismatched = mask.histogram()[255]
        return round(mismatched * 100 / total, 2)

    def write_diff_image(self, path_a: Path, path_b: Path, destination: Path) -> Path:
        """Render mismatched pixels in magenta over a faded copy of the second image."""
        img_a, img_b = _load_pair(path_a, path_b)
        mask = _mismatch_mask(img_a, img_b, self.channel_tolerance)

        white = Image.new("RGB", img_b.size, (255, 255, 255))
        canvas = Image.blend(img_b.convert("RGB"), white, 0.7)
        canvas.paste(DIFF_HIGHLIGHT, (0, 0, canvas.width, canvas.height), mask)

        destination = Path(destination)
        destination.parent.mkdir(parents=True, exist_ok=True)
        canvas.save(destination)
        return destination
