#!/usr/bin/env python3
"""
Check the markdown content for integrity problems.

Reports:
- documents without a title, reused slugs
- duplicated or missing seriesOrder values, series without a landing page
- missing images (markdown and front-matter)
- internal links that resolve to no page or static file
- broken external links (with --external)

Usage:
    python Ingress/check_content.py
    python Ingress/check_content.py --external
    python Ingress/check_content.py --warnings-as-errors
"""

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))
from siteindex import FrontMatterError, SiteConfig, lint_site, load_documents


def main():
    config = SiteConfig.from_env()

    parser = argparse.ArgumentParser(
        description="Check markdown content for integrity problems",
    )
    parser.add_argument(
        "--content-dir",
        type=Path,
        default=config.content_dir,
        help=f"Root of the markdown content (default: {config.content_dir})"
    )
    parser.add_argument(
        "--static-dir",
        type=Path,
        default=config.static_dir,
        help="Static assets directory used for rooted image links"
    )
    parser.add_argument(
        "--external",
        action="store_true",
        help="Also request every external link (slow)"
    )
    parser.add_argument(
        "--warnings-as-errors",
        action="store_true",
        help="Exit non-zero when any warning is reported"
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Show detailed output"
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    config = replace(config, content_dir=args.content_dir, static_dir=args.static_dir)

    print("\n" + "=" * 70)
    print("Content Checker")
    print("=" * 70)

    try:
        site = load_documents(args.content_dir, config)
    except FileNotFoundError as e:
        print(f"\n✗ Error: {e}")
        return 1
    except FrontMatterError as e:
        print(f"\n✗ Front-matter error: {e}")
        return 1

    print(f"\nChecking {len(site.documents)} documents in {args.content_dir}")
    report = lint_site(site, config, check_external=args.external)

    for issue in report.issues:
        marker = "✗" if issue.severity == "error" else "⚠"
        print(f"  {marker} {issue}")

    print("\n" + "=" * 70)
    print("CHECK COMPLETE")
    print("=" * 70)
    print(f"  Errors: {len(report.errors)}")
    print(f"  Warnings: {len(report.warnings)}")
    if args.verbose and report.issues:
        print(f"  By Code: {report.by_code()}")

    if not report.issues:
        print("  ✓ All content checks passed!")
    print("=" * 70 + "\n")

    if report.errors or (args.warnings_as_errors and report.warnings):
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
