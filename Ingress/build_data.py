#!/usr/bin/env python3
"""
Build the site data files from the markdown content.

This script:
1. Loads every markdown document and its front-matter
2. Groups documents into series ordered by seriesOrder
3. Writes series, seriesIndex and archives data files into _data/

Usage:
    python Ingress/build_data.py
    python Ingress/build_data.py --content-dir path/to/content
    python Ingress/build_data.py --reset --no-strict
"""

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))
from siteindex import FrontMatterError, SeriesOrderError, SiteConfig, SiteDataBuilder


def main():
    config = SiteConfig.from_env()

    parser = argparse.ArgumentParser(
        description="Build site data files from markdown content",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Build data files for the default content directory
    python Ingress/build_data.py

    # Emit JSON instead of YAML
    python Ingress/build_data.py --format json

    # Write files even if a series reuses an order value
    python Ingress/build_data.py --no-strict
        """
    )

    parser.add_argument(
        "--content-dir",
        type=Path,
        default=config.content_dir,
        help=f"Root of the markdown content (default: {config.content_dir})"
    )

    parser.add_argument(
        "--format",
        choices=["yaml", "json"],
        default=config.data_format,
        help=f"Data file format (default: {config.data_format})"
    )

    parser.add_argument(
        "--drafts",
        action="store_true",
        help="Include documents marked as draft"
    )

    parser.add_argument(
        "--no-strict",
        action="store_true",
        help="Write data files even when series orders are duplicated"
    )

    parser.add_argument(
        "--reset",
        action="store_true",
        help="Remove existing data files before building"
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Show detailed output"
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    config = replace(
        config,
        content_dir=args.content_dir,
        data_format=args.format,
        include_drafts=args.drafts or config.include_drafts,
    )

    print("\n" + "=" * 70)
    print("Site Data Builder")
    print("=" * 70)
    print(f"\nInput: {args.content_dir}")
    print(f"Output: {config.data_dir}")
    print("=" * 70)

    builder = SiteDataBuilder(args.content_dir, config)

    try:
        stats = builder.build(strict=not args.no_strict, clean_existing=args.reset)

    except FileNotFoundError as e:
        print(f"\n✗ Error: {e}")
        return 1

    except FrontMatterError as e:
        print(f"\n✗ Front-matter error: {e}")
        return 1

    except SeriesOrderError as e:
        print(f"\n✗ Series error: {e}")
        print("  Fix the seriesOrder values or rerun with --no-strict")
        return 1

    print("\n" + "=" * 70)
    print("DATA BUILD COMPLETE")
    print("=" * 70)
    print(f"  Documents: {stats['documents_count']} ({stats['posts_count']} posts, {stats['pages_count']} pages)")
    print(f"  Drafts skipped: {stats['drafts_skipped']}")
    print(f"  Series: {stats['series_count']}")
    if args.verbose:
        print(f"  By Layout: {stats['by_layout']}")

    print(f"\nData location: {stats['data_dir']}")
    for path in stats["files"]:
        print(f"  • {Path(path).name}")
    print("=" * 70 + "\n")

    return 0


if __name__ == "__main__":
    sys.exit(main())
