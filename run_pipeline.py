#!/usr/bin/env python3
"""
End-to-end content pipeline runner.

WORKFLOW:
1. Sync code snippets into posts (optional, --sync-snippets)
2. Check content integrity (stops on errors)
3. Build series, seriesIndex and archives data files
4. Start the preview API (optional, --start-server)

Usage:
    python run_pipeline.py [options]

Options:
    --sync-snippets     Refresh post code blocks from companion code files first
    --skip-check        Skip the content check
    --skip-build        Skip building data files
    --external          Also check external links
    --start-server      Start the preview API after the pipeline completes

Examples:
    # Check and build
    python run_pipeline.py

    # Full run, then browse http://localhost:8800/api/series
    python run_pipeline.py --sync-snippets --start-server
"""

import argparse
import os
import subprocess
import sys
from pathlib import Path
from typing import List, Optional

sys.path.insert(0, str(Path(__file__).resolve().parent))
from siteindex import SiteConfig


BASE_DIR = Path(__file__).resolve().parent
INGRESS_DIR = BASE_DIR / "Ingress"
BACKEND_DIR = BASE_DIR / "Backend"


def run_command(cmd: List[str], description: str, cwd: Optional[Path] = None) -> bool:
    """Run a command and return success status."""
    print(f"\n{'='*70}")
    print(f"STEP: {description}")
    print(f"{'='*70}")
    print(f"Running: {' '.join(str(c) for c in cmd)}")
    print()

    try:
        subprocess.run(
            cmd,
            cwd=cwd or BASE_DIR,
            check=True,
            capture_output=False,
            text=True,
        )
        print(f"\n✓ {description} completed successfully")
        return True
    except subprocess.CalledProcessError as exc:
        print(f"\n✗ {description} failed with exit code {exc.returncode}")
        return False
    except FileNotFoundError:
        print(f"\n✗ Command not found: {cmd[0]}")
        print("Make sure Python is in your PATH")
        return False


def check_prerequisites(content_dir: Path) -> bool:
    """Check if required directories and files exist."""
    print("Checking prerequisites...")

    checks = [
        (content_dir.exists(), f"Content directory exists: {content_dir}"),
        ((INGRESS_DIR / "sync_snippets.py").exists(), "sync_snippets.py exists"),
        ((INGRESS_DIR / "check_content.py").exists(), "check_content.py exists"),
        ((INGRESS_DIR / "build_data.py").exists(), "build_data.py exists"),
        ((BACKEND_DIR / "app.py").exists(), "app.py exists"),
    ]

    all_passed = True
    for check, message in checks:
        status = "✓" if check else "✗"
        print(f"  {status} {message}")
        if not check:
            all_passed = False

    print()
    return all_passed


def main():
    config = SiteConfig.from_env()

    parser = argparse.ArgumentParser(
        description="Run the complete content pipeline",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--content-dir",
        type=Path,
        default=config.content_dir,
        help="Root of the markdown content",
    )
    parser.add_argument(
        "--sync-snippets",
        action="store_true",
        help="Refresh post code blocks from companion code files first",
    )
    parser.add_argument(
        "--skip-check",
        action="store_true",
        help="Skip the content check",
    )
    parser.add_argument(
        "--skip-build",
        action="store_true",
        help="Skip building data files",
    )
    parser.add_argument(
        "--external",
        action="store_true",
        help="Also check external links",
    )
    parser.add_argument(
        "--start-server",
        action="store_true",
        help="Start the preview API after the pipeline completes",
    )
    args = parser.parse_args()

    print("\n" + "="*70)
    print("Content Pipeline Runner")
    print("="*70)

    if not check_prerequisites(args.content_dir):
        print("\n✗ Prerequisite check failed. Please fix the issues above.")
        return 1

    content_args = ["--content-dir", str(args.content_dir)]

    # Step 1: Snippets
    if args.sync_snippets:
        cmd = [
            sys.executable,
            str(INGRESS_DIR / "sync_snippets.py"),
            "--posts-dir", str(args.content_dir / "posts"),
        ]
        if not run_command(cmd, "Sync code snippets into posts"):
            return 1

    # Step 2: Content check
    if not args.skip_check:
        cmd = [sys.executable, str(INGRESS_DIR / "check_content.py"), *content_args]
        if args.external:
            cmd.append("--external")
        if not run_command(cmd, "Check content integrity"):
            return 1

    # Step 3: Data files
    if not args.skip_build:
        cmd = [sys.executable, str(INGRESS_DIR / "build_data.py"), *content_args]
        if not run_command(cmd, "Build site data files"):
            return 1

    print("\n" + "="*70)
    print("PIPELINE COMPLETE!")
    print("="*70)
    print(f"\n  • Content: {args.content_dir}")
    print(f"  • Data files: {args.content_dir / config.data_dir_name}")

    # Step 4: Preview server (optional)
    if args.start_server:
        print("\n" + "="*70)
        print("Starting Preview API")
        print("="*70)
        print(f"\nThe server will run at http://localhost:{config.preview_port}")
        print("Press Ctrl+C to stop\n")

        cmd = [sys.executable, str(BACKEND_DIR / "app.py")]
        try:
            subprocess.run(cmd, cwd=BACKEND_DIR, check=True, env={**os.environ, "SITE_CONTENT_DIR": str(args.content_dir.resolve())})
        except KeyboardInterrupt:
            print("\n\nServer stopped by user")
        except subprocess.CalledProcessError as exc:
            print(f"\n✗ Server failed with exit code {exc.returncode}")
            return 1
    else:
        print("\nTo start the preview API, run:")
        print(f"  cd {BACKEND_DIR}")
        print("  python app.py")
        print("\nOr run this script with --start-server flag")

    return 0


if __name__ == "__main__":
    sys.exit(main())
