"""Ummah Social API: storage layer, HTTP routes and serverless entrypoint."""

__version__ = "0.1.0"
