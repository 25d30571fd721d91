"""`dev`: uvicorn with reload on port 8888; demo mode unless DATABASE_URL is set."""

from __future__ import annotations

from cli._runner import run_module


def main() -> None:
    run_module(
        "uvicorn",
        "ummah_api.main:create_app",
        "--factory",
        "--reload",
        "--host",
        "127.0.0.1",
        "--port",
        "8888",
    )
