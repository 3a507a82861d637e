"""Archive entry naming derived from source video URLs."""

from __future__ import annotations

import re

_EXTENSION_RE = re.compile(r"\.[^/.]+$")

IMAGE_EXTENSION = ".webp"


def url_basename(url: str) -> str:
    """Return everything after the last '/', or the whole string if there is none."""
    return url[url.rfind("/") + 1:]


def derive_image_filename(url: str) -> str:
    """Map a video URL to the name of its extracted frame.

    >>> derive_image_filename("https://x.com/a/clip.mp4")
    'clip.webp'
    >>> derive_image_filename("https://x.com/a.b.c.mov")
    'a.b.c.webp'
    """
    return _EXTENSION_RE.sub("", url_basename(url)) + IMAGE_EXTENSION


def deduplicate_names(names: list[str]) -> list[str]:
    """Suffix repeated names with _1, _2, ... keeping the first occurrence as is."""
    seen: set[str] = set()
    unique = []
    for name in names:
        candidate = name
        if candidate in seen:
            stem, dot, ext = name.rpartition(".")
            if not dot:
                stem, ext = name, ""
            counter = 1
            while candidate in seen:
                candidate = f"{stem}_{counter}{dot}{ext}"
                counter += 1
        seen.add(candidate)
        unique.append(candidate)
    return unique
