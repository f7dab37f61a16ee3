"""
CLI Command Handlers Facade.

Re-exports handlers from `use_spray.cli.handlers` so the dispatcher and tests
can patch a single module.
"""

from use_spray.cli.handlers.format import (
  handle_format,
  handle_stdin,
  collect_rust_files,
)

__all__ = [
  "collect_rust_files",
  "handle_format",
  "handle_stdin",
]
