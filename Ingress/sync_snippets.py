#!/usr/bin/env python3
"""
Refresh the code blocks of posts from their companion code files.

For each post (e.g. posts/records/index.md) with a code file next to it
(posts/records/index.fsx), fenced blocks written as ```fsharp src=#id are
filled with the fragment marked //>id ... //< in the code file.

With --export-dir, the code file is also written there with the fragment
markers stripped and a generated-file header, ready to publish as a
download. Other code files in the post folder are copied unchanged.

Usage:
    python Ingress/sync_snippets.py
    python Ingress/sync_snippets.py records
    python Ingress/sync_snippets.py --export-dir ../site_code
"""

import argparse
import logging
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))
from siteindex import SiteConfig
from snippets import export_post_code, sync_directory, sync_post


def main():
    config = SiteConfig.from_env()
    posts_dir = config.content_dir / "posts"

    parser = argparse.ArgumentParser(
        description="Fill fenced code blocks in posts from code fragments",
    )
    parser.add_argument(
        "post",
        nargs="?",
        help="Post folder or markdown file to process (default: all posts)"
    )
    parser.add_argument(
        "--posts-dir",
        type=Path,
        default=posts_dir,
        help=f"Directory holding the posts (default: {posts_dir})"
    )
    parser.add_argument(
        "--export-dir",
        type=Path,
        help="Also export code files with fragment markers stripped"
    )
    parser.add_argument(
        "--tab-stop",
        type=int,
        default=config.tab_stop,
        help=f"Indent width for fragments (default: {config.tab_stop})"
    )
    parser.add_argument(
        "--verbose",
        "-d",
        action="store_true",
        help="Show debug output"
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    print("\n" + "=" * 70)
    print("Snippet Sync")
    print("=" * 70)

    try:
        if args.post:
            target = args.posts_dir / args.post
            md_path = target / "index.md" if target.is_dir() else target
            print(f"\nProcessing: {md_path}")
            results = {str(md_path): sync_post(md_path, args.tab_stop, config.code_ext)}
        else:
            if not args.posts_dir.exists():
                print(f"\n✗ Error: Directory not found: {args.posts_dir}")
                return 1
            print(f"\nProcessing all posts in {args.posts_dir}")
            results = sync_directory(args.posts_dir, args.tab_stop, config.code_ext)

        if args.export_dir:
            for md_path in results:
                for exported in export_post_code(Path(md_path), args.export_dir, config.code_ext, config.base_url):
                    print(f"  ✓ Exported {exported}")

    except FileNotFoundError as e:
        print(f"\n✗ Error: {e}")
        return 1

    changed = [path for path, was_changed in results.items() if was_changed]
    print("\n" + "=" * 70)
    print("SNIPPET SYNC COMPLETE")
    print("=" * 70)
    print(f"  Posts checked: {len(results)}")
    print(f"  Posts updated: {len(changed)}")
    for path in changed:
        print(f"  • {path}")
    print("=" * 70 + "\n")

    return 0


if __name__ == "__main__":
    sys.exit(main())
