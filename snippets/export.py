"""
Export a post's code for publishing.

The post's own code file (index.fsx) is written without fragment markers,
renamed after the post folder and prefixed with a generated-file header.
Any other code files in the folder are copied unchanged.

    posts/records/index.fsx    ->  <export_dir>/records/records.fsx
    posts/records/Helpers.fsx  ->  <export_dir>/records/Helpers.fsx
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import List

from .fences import code_file_for
from .fragments import strip_fragment_markers

logger = logging.getLogger(__name__)

GENERATED_HEADER = """\
//=====================================================================
// Source code related to post: {url}
//
// THIS IS A GENERATED FILE. DO NOT EDIT.
//====================================================================="""


def post_url(md_path: Path, base_url: str = "") -> str:
    return f"{base_url.rstrip('/')}/posts/{Path(md_path).parent.name}/"


def export_post_code(md_path: Path, export_dir: Path, code_ext: str = ".fsx", base_url: str = "") -> List[Path]:
    """Export the code files of one post.

    Args:
        md_path: Markdown post (e.g. posts/records/index.md)
        export_dir: Root of the published code
        code_ext: Extension of code files
        base_url: Site URL used in the header

    Returns:
        Paths written, the post's own code file first

    Raises:
        FileNotFoundError: If the post has no companion code file
    """
    md_path = Path(md_path)
    code_path = code_file_for(md_path, code_ext)
    if not code_path.exists():
        raise FileNotFoundError(f"Code file not found: {code_path}")

    folder = code_path.parent.name
    target_dir = Path(export_dir) / folder
    target_dir.mkdir(parents=True, exist_ok=True)

    target = target_dir / f"{folder}{code_ext}"
    lines = strip_fragment_markers(code_path.read_text(encoding="utf-8").splitlines())
    header = GENERATED_HEADER.format(url=post_url(md_path, base_url))
    target.write_text(header + "\n" + "\n".join(lines) + "\n", encoding="utf-8")
    logger.info(f"{folder}: exported {code_path.name} to {target}")
    written = [target]

    for other in sorted(code_path.parent.glob(f"*{code_ext}")):
        if other == code_path:
            continue
        copied = target_dir / other.name
        shutil.copyfile(other, copied)
        logger.debug(f"{folder}: copied {other.name}")
        written.append(copied)

    return written
