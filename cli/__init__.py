"""Command-line wrappers exposed as project scripts."""
