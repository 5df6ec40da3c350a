"""
Front-matter parser for site documents.

Front-matter is a YAML mapping at the very top of a markdown file:

---
layout: post
title: "Type inference"
description: "How the compiler figures out types"
nav: thinking-functionally
seriesId: "Thinking functionally"
seriesOrder: 3
categories: [Types, Inference]
---
Body text...
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple

import yaml


class FrontMatterError(ValueError):
    """Exception raised when front-matter is invalid."""
    pass


OPEN_DELIMITER = "---"
CLOSE_DELIMITERS = ("---", "...")


def split_front_matter(text: str) -> Tuple[Optional[str], str]:
    """Split raw text into (front-matter text, body).

    Returns (None, text) when the document does not start with a
    front-matter block.

    Raises:
        FrontMatterError: If the block is opened but never closed
    """
    if text.startswith("\ufeff"):
        text = text[1:]

    lines = text.splitlines(keepends=True)
    if not lines or lines[0].rstrip() != OPEN_DELIMITER:
        return None, text

    for index, line in enumerate(lines[1:], start=1):
        if line.rstrip() in CLOSE_DELIMITERS:
            header = "".join(lines[1:index])
            body = "".join(lines[index + 1:])
            return header, body

    raise FrontMatterError("Front-matter block is not closed")


def parse_front_matter(text: str, source: str = "unknown") -> Tuple[Optional[Dict[str, Any]], str]:
    """Parse front-matter and return it with the remaining body.

    Keys are lower-cased so lookups are case-insensitive.

    Args:
        text: Full document text
        source: Name of the document (for error reporting)

    Returns:
        Tuple of (metadata dict or None, body)

    Raises:
        FrontMatterError: If the YAML is malformed or not a mapping

    Example:
        >>> meta, body = parse_front_matter("---\\ntitle: Hi\\nseriesOrder: 2\\n---\\nBody\\n")
        >>> meta['seriesorder']
        2
        >>> body
        'Body\\n'
    """
    try:
        header, body = split_front_matter(text)
    except FrontMatterError as exc:
        raise FrontMatterError(f"{source}: {exc}") from exc

    if header is None:
        return None, body

    try:
        data = yaml.safe_load(header)
    except yaml.YAMLError as exc:
        raise FrontMatterError(f"{source}: malformed front-matter: {exc}") from exc

    if data is None:
        return {}, body
    if not isinstance(data, dict):
        raise FrontMatterError(
            f"{source}: front-matter must be a mapping, got {type(data).__name__}"
        )

    return {str(key).strip().lower(): value for key, value in data.items()}, body


def get_str(metadata: Dict[str, Any], key: str, default: str = "") -> str:
    value = metadata.get(key.lower())
    if value is None:
        return default
    return str(value).strip()


def get_int(metadata: Dict[str, Any], key: str, default: int = 0, source: str = "unknown") -> int:
    """Read an integer field, accepting numeric strings."""
    value = metadata.get(key.lower())
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        raise FrontMatterError(f"{source}: '{key}' must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip().strip('"'))
    except ValueError:
        raise FrontMatterError(f"{source}: '{key}' must be an integer, got {value!r}") from None


def get_bool(metadata: Dict[str, Any], key: str, default: bool = False) -> bool:
    value = metadata.get(key.lower())
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("true", "yes", "1")


def get_list(metadata: Dict[str, Any], key: str) -> List[str]:
    """Read a list field.

    Accepts a YAML list or a comma-separated string such as "[a, b]".
    """
    value = metadata.get(key.lower())
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        items = [str(item) for item in value if item is not None]
    else:
        text = str(value).strip()
        if text.startswith("[") and text.endswith("]"):
            text = text[1:-1]
        items = text.split(",")

    cleaned = [item.strip().strip('"').strip("'").strip() for item in items]
    return [item for item in cleaned if item]


def get_date(metadata: Dict[str, Any], key: str = "date", source: str = "unknown") -> Optional[datetime]:
    """Read a date field. YAML already parses ISO dates; strings are parsed here."""
    value = metadata.get(key.lower())
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)

    text = str(value).strip()
    match = re.match(r"^(\d{4})-(\d{2})-(\d{2})", text)
    if not match:
        raise FrontMatterError(f"{source}: '{key}' is not a valid date: {value!r}")
    year, month, day = (int(part) for part in match.groups())
    try:
        return datetime(year, month, day)
    except ValueError as exc:
        raise FrontMatterError(f"{source}: '{key}' is not a valid date: {value!r}") from exc
