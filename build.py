#!/usr/bin/env python3
"""
Build script for transmission_py.

This script helps with installing, testing and packaging the bindings.
"""

import os
import sys
import subprocess
import argparse
import shutil
from pathlib import Path


def run_command(cmd, cwd=None, check=True):
    """Run a shell command."""
    print(f"Running: {' '.join(cmd) if not isinstance(cmd, str) else cmd}")
    if isinstance(cmd, str):
        cmd = cmd.split()

    result = subprocess.run(cmd, cwd=cwd, capture_output=False)
    if check and result.returncode != 0:
        print(f"Command failed with exit code {result.returncode}")
        sys.exit(1)
    return result


def check_native_library():
    """Locate the libtransmission shared library the bindings will load."""
    print("Looking for libtransmission...")

    sys.path.insert(0, str(Path(__file__).parent))
    from transmission_py.ctypes_wrapper import (
        LibtransmissionCtypes, LibtransmissionNotFoundError, find_libtransmission_library
    )

    try:
        lib_path = find_libtransmission_library()
        lib = LibtransmissionCtypes(lib_path)
    except (LibtransmissionNotFoundError, AttributeError) as e:
        print(f"✗ {e}")
        print("Install libtransmission or set TRANSMISSION_LIBRARY to its path")
        sys.exit(1)

    print(f"✓ Found {lib_path}")
    if not lib.supports_piece_size:
        print("  (this build cannot set the piece size of new torrents)")


def install_python_package(development=True):
    """Install the Python package."""
    print("Installing Python package...")

    if development:
        run_command([sys.executable, "-m", "pip", "install", "-e", "."])
    else:
        run_command([sys.executable, "-m", "pip", "install", "."])

    print("✓ Python package installed successfully")


def run_tests(integration=False):
    """Run the test suite."""
    print("Running tests...")

    # Install test dependencies
    run_command([sys.executable, "-m", "pip", "install", "-e", ".[dev]"])

    cmd = [sys.executable, "-m", "pytest", "transmission_py/tests/", "-v"]
    if not integration:
        cmd += ["-m", "not integration"]
    run_command(cmd)

    print("✓ Tests completed")


def run_examples():
    """Test the examples."""
    print("Testing examples...")

    # Just import them to check for syntax errors
    examples = [
        "transmission_py.examples.download_torrent",
        "transmission_py.examples.create_torrent",
    ]

    for example in examples:
        result = run_command([sys.executable, "-c", f"import {example}"], check=False)
        if result.returncode == 0:
            print(f"✓ {example} imports successfully")
        else:
            print(f"✗ {example} failed to import")


def clean():
    """Clean build artifacts."""
    print("Cleaning build artifacts...")

    # Remove common build/cache directories
    to_remove = [
        "build",
        "dist",
        "*.egg-info",
        "__pycache__",
        ".pytest_cache",
        ".coverage",
        "htmlcov",
        ".mypy_cache",
    ]

    for pattern in to_remove:
        for path in Path(".").glob(f"**/{pattern}"):
            if path.is_dir():
                shutil.rmtree(path)
                print(f"Removed directory: {path}")
            else:
                path.unlink()
                print(f"Removed file: {path}")

    print("✓ Cleanup completed")


def package():
    """Create distribution packages."""
    print("Creating distribution packages...")

    # Install build dependencies
    run_command([sys.executable, "-m", "pip", "install", "build"])

    # Build packages
    run_command([sys.executable, "-m", "build"])

    print("✓ Distribution packages created in dist/")


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Build script for transmission_py")
    parser.add_argument("--check-native", action="store_true",
                        help="Check that libtransmission can be found and loaded")
    parser.add_argument("--install", action="store_true",
                        help="Install the Python package")
    parser.add_argument("--install-release", action="store_true",
                        help="Install the Python package (non-development)")
    parser.add_argument("--test", action="store_true",
                        help="Run the unit tests")
    parser.add_argument("--integration", action="store_true",
                        help="With --test, also run the tests that need libtransmission")
    parser.add_argument("--examples", action="store_true",
                        help="Test examples")
    parser.add_argument("--clean", action="store_true",
                        help="Clean build artifacts")
    parser.add_argument("--package", action="store_true",
                        help="Create distribution packages")
    parser.add_argument("--all", action="store_true",
                        help="Run all build steps")

    args = parser.parse_args()

    # Change to script directory
    os.chdir(Path(__file__).parent)

    try:
        if args.all:
            check_native_library()
            install_python_package(development=True)
            run_tests(integration=True)
            run_examples()
        else:
            if args.check_native:
                check_native_library()

            if args.install:
                install_python_package(development=True)

            if args.install_release:
                install_python_package(development=False)

            if args.test:
                run_tests(integration=args.integration)

            if args.examples:
                run_examples()

            if args.clean:
                clean()

            if args.package:
                package()

    except KeyboardInterrupt:
        print("\n❌ Build interrupted by user")
        sys.exit(1)
    except Exception as e:
        print(f"❌ Build failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
