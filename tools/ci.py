#!/usr/bin/env python3
# Copyright 2026 ScriptBind Contributors
# SPDX-License-Identifier: Apache-2.0

"""Run all CI checks locally: format, lint, type check, tests, a smoke run and the build."""

import argparse
import subprocess
import sys
import time
from pathlib import Path

from yachalk import chalk

# ###############
# Public Interface
# ###############

SAMPLE_DOCUMENT = "tests/data/engine.yaml"

STEPS: list[tuple[str, list[str]]] = [
    ("Format check", ["uv", "run", "ruff", "format", "--check", "src/", "tests/", "tools/"]),
    ("Lint", ["uv", "run", "ruff", "check", "src/", "tests/", "tools/"]),
    ("Type check", ["uv", "run", "ty", "check", "src/"]),
    ("Tests", ["uv", "run", "pytest", "--cov=scriptbind", "--cov-report=term-missing"]),
    ("Smoke run", ["uv", "run", "scriptbind", "check", SAMPLE_DOCUMENT]),
    ("Build", ["uv", "build"]),
]


def main() -> int:
    """Run the selected CI steps and print a coloured summary."""
    parser = argparse.ArgumentParser(description="Run scriptbind CI checks locally.")
    parser.add_argument("--skip", action="append", default=[], metavar="STEP", help="Skip a step by name")
    args = parser.parse_args()
    skipped = {name.lower() for name in args.skip}

    results: list[tuple[str, bool, float]] = []
    for name, cmd in STEPS:
        if name.lower() in skipped:
            print(chalk.yellow(f"Skipping {name}"))
            continue
        _banner(name)
        start = time.monotonic()
        proc = subprocess.run(cmd, cwd=_REPO_ROOT)
        results.append((name, proc.returncode == 0, time.monotonic() - start))

    _banner("  Summary")
    for name, passed, elapsed in results:
        status = "PASS" if passed else "FAIL"
        colour = chalk.green if passed else chalk.red
        print(colour(f"  {status}  {name} ({elapsed:.1f}s)"))

    print()
    return 0 if all(passed for _, passed, _ in results) else 1


# ################
# Implementation
# ################

_REPO_ROOT = Path(__file__).resolve().parent.parent


def _banner(title: str) -> None:
    sep = chalk.blue("=" * 60)
    print(f"\n{sep}")
    print(chalk.blue(title))
    print(sep)


if __name__ == "__main__":
    sys.exit(main())
