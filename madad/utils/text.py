"""Text helpers shared by the import script and the API."""

from __future__ import annotations

import re

_VIDEO_ID_RE = re.compile(r"[?&]v=([a-zA-Z0-9_-]{11})")


def slugify(text: str) -> str:
    """
    URL-friendly slug: lowercase, word characters and dashes only.
    Non-word characters outside [A-Za-z0-9_] are dropped, so a purely Hebrew
    name yields "" and callers fall back to another field.
    """
    slug = text.lower().strip()
    slug = re.sub(r"[^\w\s-]", "", slug, flags=re.ASCII)
    slug = re.sub(r"[\s_]+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


def extract_video_id(url: str) -> str:
    """YouTube video id from a watch URL (?v=…), or "" if absent."""
    match = _VIDEO_ID_RE.search(url or "")
    return match.group(1) if match else ""
