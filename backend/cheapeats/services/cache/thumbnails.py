"""
Thumbnail fetch: download an image, shrink it to fit a square box, save it as JPEG.
Only the store calls this, from its worker pool.
"""
import logging
from io import BytesIO
from pathlib import Path
from typing import Protocol

import httpx
from PIL import Image

from cheapeats.core.cache_config import THUMBNAIL_FETCH_TIMEOUT_SECONDS
from cheapeats.core.constants import THUMBNAIL_EXTENSION, THUMBNAIL_JPEG_QUALITY

logger = logging.getLogger(__name__)


class ImageFetcher(Protocol):
    """Returns an image already scaled to fit within size x size. Raises on any failure."""

    def fetch(self, url: str, size: int) -> Image.Image:
        ...


class HttpImageFetcher:
    """httpx GET with a hard timeout, decoded and downscaled by Pillow."""

    def __init__(self, timeout: float = THUMBNAIL_FETCH_TIMEOUT_SECONDS) -> None:
        self._timeout = timeout

    def fetch(self, url: str, size: int) -> Image.Image:
        with httpx.Client(timeout=self._timeout, follow_redirects=True) as client:
            r = client.get(url)
        r.raise_for_status()
        img = Image.open(BytesIO(r.content))
        img.load()
        img.thumbnail((size, size))
        return img


def thumbnail_path_for(thumbnail_dir: Path, restaurant_id: str) -> Path:
    return thumbnail_dir / f"{restaurant_id}{THUMBNAIL_EXTENSION}"


def is_safe_file_stem(restaurant_id: str) -> bool:
    """Ids become file names; refuse anything that could escape the thumbnail directory."""
    if not restaurant_id or restaurant_id in (".", ".."):
        return False
    return "/" not in restaurant_id and "\\" not in restaurant_id and "\x00" not in restaurant_id


def save_thumbnail(img: Image.Image, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    if img.mode != "RGB":
        img = img.convert("RGB")
    img.save(path, format="JPEG", quality=THUMBNAIL_JPEG_QUALITY)
    return path
