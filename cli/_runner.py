"""
Shared helper for the project scripts declared in pyproject.toml.

Each script runs a tool module with the interpreter it was installed into,
forwards any extra command-line arguments, and exits with the tool's code.
"""

from __future__ import annotations

import subprocess
import sys

SOURCE_DIRS = ("ummah_api", "cli", "tests")


def run_module(module: str, *args: str) -> None:
    """
    Run `python -m <module> <args> <extra argv>` and exit with its code.

    Example:
        >>> run_module("pytest", "-q")
    """
    cmd = [sys.executable, "-m", module, *args, *sys.argv[1:]]
    raise SystemExit(subprocess.run(cmd).returncode)
