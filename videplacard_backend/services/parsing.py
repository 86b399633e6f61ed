"""Utilities for turning free text into clean ingredient names."""

from __future__ import annotations

import re
from typing import Iterable

_BULK_SEPARATORS = re.compile(r"[\n,;]+")
# Bullets, list numbering and the whitespace around them.
_LEADING_DECORATION = re.compile(r"^[-•*\d.)\s]+")


def strip_decoration(raw_name: str) -> str:
    """Remove leading bullet/number decorations and surrounding whitespace."""

    return _LEADING_DECORATION.sub("", raw_name or "").strip()


def clean_names(raw_names: Iterable[str]) -> list[str]:
    """Strip every name and drop the ones left empty."""

    cleaned = []
    for raw_name in raw_names:
        if not isinstance(raw_name, str):
            continue
        name = strip_decoration(raw_name)
        if name:
            cleaned.append(name)
    return cleaned


def split_bulk_text(text: str) -> list[str]:
    """Split pasted text on newlines, commas and semicolons."""

    return clean_names(_BULK_SEPARATORS.split(text or ""))


def split_lines(text: str) -> list[str]:
    """Split a one-item-per-line model response."""

    return clean_names((text or "").splitlines())
