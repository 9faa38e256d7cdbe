"""Letterboxd star-glyph ratings.

Ratings never appear as numbers in listing markup, only as a run of ``★``
glyphs with an optional trailing ``½``. They are converted to a half-star
scale: each full star is worth 2, the half star 1, so ``★★★½`` is 7 and the
range is 0-10.
"""

from __future__ import annotations

FULL_STAR = "★"
HALF_STAR = "½"
VIEWING_MARKERS = ("Watched", "Liked")


def encode_rating(text: str | None) -> int:
    if not text:
        return 0
    total = 0
    for ch in text:
        if ch == FULL_STAR:
            total += 2
        elif ch == HALF_STAR:
            total += 1
    return total


def strip_viewing_markers(text: str | None) -> str:
    """Drop a trailing "Watched ..." or "Liked ..." suffix from viewing data."""
    if not text:
        return ""
    for marker in VIEWING_MARKERS:
        if marker in text:
            return text.split(marker, 1)[0].strip()
    return text.strip()
