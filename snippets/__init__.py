"""
Code snippet sync for posts.

Keeps the fenced code blocks of a post identical to the fragments marked in
its companion code file, and exports the code for publishing.
"""

from .export import export_post_code
from .fences import fill_fences, sync_directory, sync_post
from .fragments import Fragment, extract_fragments, parse_fragments, strip_fragment_markers

__all__ = [
    "Fragment",
    "export_post_code",
    "extract_fragments",
    "parse_fragments",
    "strip_fragment_markers",
    "fill_fences",
    "sync_directory",
    "sync_post",
]
