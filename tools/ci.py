#!/usr/bin/env python3
# Copyright 2026 DjangoBuilder Contributors
# SPDX-License-Identifier: Apache-2.0

"""Run all CI checks locally: format, lint, type check, tests, and build.

Steps can be selected by the first word of their name, e.g. ``ci.py lint tests``.
"""

import pathlib
import subprocess
import sys
import time

from yachalk import chalk

# ###############
# Public Interface
# ###############

STEPS: list[tuple[str, list[str]]] = [
    ("Format check", ["uv", "run", "ruff", "format", "--check", "src/", "tests/"]),
    ("Lint", ["uv", "run", "ruff", "check", "src/", "tests/"]),
    ("Type check", ["uv", "run", "ty", "check", "src/"]),
    ("Tests", ["uv", "run", "pytest", "--cov=djangobuilder", "--cov-report=term-missing"]),
    ("Build", ["uv", "build"]),
]


def main(selected: list[str] | None = None) -> int:
    """Run the CI steps (all of them, or those named in *selected*) and report results.

    A step is selected by the lowercased first word of its name, so ``format``
    picks "Format check" and ``type`` picks "Type check".
    """
    steps = [step for step in STEPS if not selected or _step_key(step[0]) in selected]
    results = [_run_step(name, cmd) for name, cmd in steps]

    sep = chalk.blue("=" * 60)
    print(f"\n{sep}")
    print(chalk.blue("  Summary"))
    print(sep)
    for name, passed, elapsed in results:
        colour = chalk.green if passed else chalk.red
        print(colour(f"  {'PASS' if passed else 'FAIL'}  {name} ({elapsed:.1f}s)"))
    print()
    return 0 if all(passed for _, passed, _ in results) else 1


# ################
# Implementation
# ################


def _step_key(name: str) -> str:
    return name.split()[0].lower()


def _run_step(name: str, cmd: list[str]) -> tuple[str, bool, float]:
    sep = chalk.blue("=" * 60)
    print(f"\n{sep}")
    print(chalk.blue(name))
    print(sep)
    start = time.monotonic()
    proc = subprocess.run(cmd, cwd=pathlib.Path(__file__).parent.parent)
    return name, proc.returncode == 0, time.monotonic() - start


if __name__ == "__main__":
    sys.exit(main([arg.lower() for arg in sys.argv[1:]]))
