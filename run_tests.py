#!/usr/bin/env python
"""
Test runner script for the library catalog.

Usage examples:
    python run_tests.py                  # Run all tests
    python run_tests.py --unit           # Run only unit tests
    python run_tests.py --integration    # Run only integration tests
    python run_tests.py -v -c            # Verbose output and coverage
    TEST_DATABASE_URL=postgresql://... python run_tests.py --integration
"""

import os
import sys
import argparse
import subprocess


def run_tests(test_path=None, verbose=False, coverage=False):
    """Run tests with pytest."""
    cmd = ["pytest"]

    if verbose:
        cmd.append("-v")

    if coverage:
        cmd.extend(["--cov=src", "--cov-report=term", "--cov-report=html"])

    cmd.append(test_path or "tests/")

    env = dict(os.environ, TESTING="true")

    print(f"Running: {' '.join(cmd)}")
    return subprocess.call(cmd, env=env)


def main():
    """Parse arguments and run tests."""
    parser = argparse.ArgumentParser(description="Run tests for the library catalog.")
    parser.add_argument(
        "test_path",
        nargs="?",
        help="Path to specific test file or directory"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output"
    )
    parser.add_argument(
        "-c", "--coverage",
        action="store_true",
        help="Generate coverage report"
    )
    parser.add_argument(
        "--unit",
        action="store_true",
        help="Run only unit tests"
    )
    parser.add_argument(
        "--integration",
        action="store_true",
        help="Run only integration tests"
    )

    args = parser.parse_args()

    test_path = args.test_path
    if args.unit:
        test_path = "tests/unit/"
    elif args.integration:
        test_path = "tests/integration/"

    return run_tests(test_path, args.verbose, args.coverage)


if __name__ == "__main__":
    sys.exit(main())
