from __future__ import annotations

import time
from io import BytesIO
from pathlib import Path
from typing import Callable, Optional

import requests
from PIL import Image, UnidentifiedImageError

_DEFAULT_UA = "WeatherPanel/1.0 (+contact)"


class ImageCache:
    """Decoded RGBA images keyed by URL or path, with a TTL."""

    def __init__(self, user_agent: str = _DEFAULT_UA, ttl: float = 900, timeout: float = 15):
        self.user_agent = user_agent
        self.ttl = ttl
        self.timeout = timeout
        self._images: dict[str, tuple[float, Image.Image]] = {}
        self._misses: set[str] = set()

    def _get(self, key: str) -> Optional[Image.Image]:
        entry = self._images.get(key)
        if not entry:
            return None
        ts, img = entry
        if time.time() - ts > self.ttl:
            return None
        return img

    def _put(self, key: str, img: Image.Image) -> None:
        self._images[key] = (time.time(), img)

    def _fetch(self, url: str) -> Optional[bytes]:
        try:
            resp = requests.get(url, headers={"User-Agent": self.user_agent}, timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            self._warn(url, e)
            return None
        return resp.content

    def _warn(self, key: str, err: Exception) -> None:
        # one line per bad source, not one per frame
        if key in self._misses:
            return
        self._misses.add(key)
        print(f"[ImageCache] could not load {key}: {err!r}", flush=True)

    def load(self, src: Optional[str]) -> Optional[Image.Image]:
        if not src:
            return None
        cached = self._get(src)
        if cached is not None:
            return cached
        if src.startswith(("http://", "https://")):
            data = self._fetch(src)
            if data is None:
                return None
            source = BytesIO(data)
        else:
            path = Path(src[7:] if src.startswith("file://") else src)
            if not path.exists():
                self._warn(src, FileNotFoundError(str(path)))
                return None
            source = path
        try:
            with Image.open(source) as im:
                img = im.convert("RGBA")
        except (UnidentifiedImageError, OSError) as e:
            self._warn(src, e)
            return None
        self._misses.discard(src)
        self._put(src, img)
        return img

    def loader(self) -> Callable[[str], Optional[Image.Image]]:
        """Preload hook for the background crossfade."""
        return self.load
