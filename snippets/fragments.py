"""
Code fragment extraction.

A companion code file marks the regions used in a post with comments:

    //>fragment-id            or   (*>fragment-id
    let add x y = x + y
    //<                       or   <*)

Each region becomes a Fragment. Its indentation is normalized so that the
distinct indents used map to 0, tab_stop, 2*tab_stop, ... and placeholder
identifiers such as dotDotDot are turned back into "...".
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

START_PATTERN = re.compile(r"^\s*(//>|\(\*>)(\S+)")
END_PATTERN = re.compile(r"^\s*(//<|<\*\))")
INDENT_PATTERN = re.compile(r"^\s*")

# Order matters: longer placeholders first
PLACEHOLDERS: Tuple[Tuple[str, str], ...] = (
    ("//...", "..."),
    ("PrivateDotDotDot", "private ..."),
    ("DotDotDot", "..."),
    ("dotDotDot()", "..."),
    ("dotDotDot", "..."),
    ("question()", "???"),
)


@dataclass(frozen=True)
class Fragment:
    id: str
    source: Path
    content: Tuple[str, ...] = field(default_factory=tuple)


def classify_line(line: str) -> Tuple[str, Optional[str]]:
    """Classify a code line as ("start", id), ("end", None) or ("normal", None).

    Example:
        >>> classify_line("   //>mySnip 2  ")
        ('start', 'mySnip')
        >>> classify_line("   <*)   ")
        ('end', None)
    """
    match = START_PATTERN.match(line)
    if match:
        return "start", match.group(2)
    if END_PATTERN.match(line):
        return "end", None
    return "normal", None


def _indent_of(line: str) -> int:
    return len(INDENT_PATTERN.match(line).group(0))


def replace_placeholders(line: str) -> str:
    for old, new in PLACEHOLDERS:
        line = line.replace(old, new)
    return line


def reformat_content(lines: List[str], tab_stop: int = 2) -> List[str]:
    """Normalize indentation and placeholders of a fragment.

    Example:
        >>> reformat_content(["    depth4", "     depth5", "    depth4"])
        ['depth4', '  depth5', 'depth4']
    """
    indents = sorted({_indent_of(line) for line in lines if line.strip()})
    indent_map = {old: " " * (position * tab_stop) for position, old in enumerate(indents)}

    result = []
    for line in lines:
        if not line.strip():
            result.append("")
            continue
        new_line = indent_map[_indent_of(line)] + line.lstrip()
        result.append(replace_placeholders(new_line.rstrip()))
    return result


def parse_fragments(lines: List[str], source: Path, tab_stop: int = 2) -> Dict[str, Fragment]:
    """Extract every marked fragment from the lines of a code file.

    Unclosed or unopened markers are logged and skipped. A fragment id used
    twice keeps the last occurrence.
    """
    fragments: Dict[str, Fragment] = {}
    current_id: Optional[str] = None
    current_lines: List[str] = []
    name = f"{source.parent.name}/{source.name}"

    for line_no, line in enumerate(lines, start=1):
        kind, fragment_id = classify_line(line)

        if kind == "start":
            if current_id is not None:
                logger.warning(f"{name}, {line_no}: unclosed fragment '{current_id}'")
            logger.debug(f"{name}, {line_no}: starting fragment {fragment_id}")
            current_id, current_lines = fragment_id, []

        elif kind == "end":
            if current_id is None:
                logger.warning(f"{name}, {line_no}: closing unopened fragment")
                continue
            if current_id in fragments:
                logger.warning(f"{name}, {line_no}: fragment '{current_id}' defined more than once")
            fragments[current_id] = Fragment(
                id=current_id,
                source=source,
                content=tuple(reformat_content(current_lines, tab_stop)),
            )
            current_id, current_lines = None, []

        elif current_id is not None:
            current_lines.append(line)

    if current_id is not None:
        logger.warning(f"{name}, {len(lines)}: unclosed fragment '{current_id}'")

    return fragments


def extract_fragments(path: Path, tab_stop: int = 2) -> Dict[str, Fragment]:
    """Read a code file and return its fragments keyed by id.

    Raises:
        FileNotFoundError: If the code file does not exist
    """
    path = Path(path)
    lines = path.read_text(encoding="utf-8").splitlines()
    fragments = parse_fragments(lines, path, tab_stop)
    logger.debug(f"{path.name}: {len(fragments)} fragments")
    return fragments


def strip_fragment_markers(lines: List[str]) -> List[str]:
    """Return the code without fragment marker lines, for publishing."""
    return [line for line in lines if classify_line(line)[0] == "normal"]
