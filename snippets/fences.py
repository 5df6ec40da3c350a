"""
Fill fenced code blocks in a post from code fragments.

A fence that names a fragment has its body replaced:

    ```fsharp src=#add
    (whatever was here before)
    ```

`src=#none` marks a block that is intentionally not synced.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .fragments import Fragment, extract_fragments

logger = logging.getLogger(__name__)

FENCE_WITH_ID = re.compile(r"^```(\w+).*src=#([\w-]+)")
NAMED_FENCE = re.compile(r"^```(\w+)")
PLAIN_FENCE = re.compile(r"^```\s*$")

NO_FRAGMENT = "none"


def classify_fence(line: str) -> Tuple[str, Optional[str]]:
    """Classify a markdown line.

    Returns ("fence_with_id", id), ("named_fence", None), ("fence", None)
    or ("normal", None).

    Example:
        >>> classify_fence("```fsharp {src=#mySnip}")
        ('fence_with_id', 'mySnip')
        >>> classify_fence("```text abc=123")
        ('named_fence', None)
    """
    match = FENCE_WITH_ID.match(line)
    if match:
        return "fence_with_id", match.group(2)
    if NAMED_FENCE.match(line):
        return "named_fence", None
    if PLAIN_FENCE.match(line):
        return "fence", None
    return "normal", None


def fill_fences(lines: List[str], fragments: Dict[str, Fragment], name: str = "post") -> List[str]:
    """Replace the body of every fence that references a known fragment.

    Lines of a fence being replaced are buffered, so an unclosed fence keeps
    its original text.
    """
    output: List[str] = []
    current: Optional[Fragment] = None
    pending: List[str] = []

    def flush_unclosed(line_no: int) -> None:
        nonlocal current, pending
        if current is not None:
            logger.warning(f"{name}, {line_no}: unclosed fence '{current.id}'")
            output.extend(pending)
        current, pending = None, []

    for line_no, line in enumerate(lines, start=1):
        kind, fragment_id = classify_fence(line)

        if kind == "fence_with_id":
            flush_unclosed(line_no)
            output.append(line)
            if fragment_id == NO_FRAGMENT:
                continue
            if fragment_id in fragments:
                logger.debug(f"{name}, {line_no}: found fragment {fragment_id}")
                current = fragments[fragment_id]
            else:
                logger.warning(f"{name}, {line_no}: no fragment found with id '{fragment_id}'")

        elif kind == "named_fence":
            flush_unclosed(line_no)
            output.append(line)
            logger.warning(f"{name}, {line_no}: named fence found without id")

        elif kind == "fence" and current is not None:
            output.extend(current.content)
            output.append(line)
            current, pending = None, []

        elif current is not None:
            pending.append(line)

        else:
            output.append(line)

    flush_unclosed(len(lines))
    return output


def code_file_for(md_path: Path, code_ext: str = ".fsx") -> Path:
    return Path(md_path).with_suffix(code_ext)


def sync_post(md_path: Path, tab_stop: int = 2, code_ext: str = ".fsx") -> bool:
    """Refresh the code blocks of a post from its companion code file.

    Args:
        md_path: Markdown post (e.g. posts/records/index.md)
        tab_stop: Indent width for fragments
        code_ext: Extension of the companion code file

    Returns:
        True if the post was rewritten

    Raises:
        FileNotFoundError: If the post or its code file is missing
    """
    md_path = Path(md_path)
    code_path = code_file_for(md_path, code_ext)
    if not code_path.exists():
        raise FileNotFoundError(f"Code file not found: {code_path}")

    fragments = extract_fragments(code_path, tab_stop)
    with md_path.open(encoding="utf-8", newline="") as handle:
        original = handle.read()
    newline = "\r\n" if "\r\n" in original else "\n"
    name = f"{md_path.parent.name}/{md_path.name}"

    updated_lines = fill_fences(original.splitlines(), fragments, name)
    updated = newline.join(updated_lines)
    if original.endswith("\n"):
        updated += newline

    if updated == original:
        logger.debug(f"{name}: up to date")
        return False

    with md_path.open("w", encoding="utf-8", newline="") as handle:
        handle.write(updated)
    logger.info(f"{name}: code blocks updated from {code_path.name}")
    return True


def sync_directory(root: Path, tab_stop: int = 2, code_ext: str = ".fsx") -> Dict[str, bool]:
    """Sync every post under root that has a companion code file.

    Returns:
        Mapping of post path to whether it changed
    """
    results: Dict[str, bool] = {}
    for md_path in sorted(Path(root).rglob("*.md")):
        if not code_file_for(md_path, code_ext).exists():
            continue
        results[str(md_path)] = sync_post(md_path, tab_stop, code_ext)
    return results
