"""`lint`: ruff checks over the package, the scripts and the tests."""

from __future__ import annotations

from cli._runner import SOURCE_DIRS, run_module


def main() -> None:
    run_module("ruff", "check", *SOURCE_DIRS)
