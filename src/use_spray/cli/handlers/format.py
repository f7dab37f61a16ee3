"""
Format Command Handler.

This module implements the file-level logic of the `use-spray` command:
1. Configuration loading (Cargo.toml metadata + CLI overrides).
2. Rewriting via the Engine.
3. Optional rustfmt pass.
4. Output: stdout, in-place rewrite or check-only reporting.
"""

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, TextIO

from rich.markup import escape
from rich.table import Table

from use_spray.config import FormatConfig
from use_spray.core.engine import FormatResult, SprayEngine
from use_spray.core.rustfmt import run_rustfmt
from use_spray.exceptions import ConfigError, UseSprayError
from use_spray.utils.console import (
  console,
  log_error,
  log_info,
  log_success,
  log_warning,
)

SKIPPED_DIRS = {"target"}


def handle_stdin(overrides: Dict[str, Any], stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None) -> int:
  """
  Rewrites Rust source read from stdin and writes it to stdout.

  Args:
      overrides: CLI values passed to :meth:`FormatConfig.load`.
      stdin: Input stream (defaults to ``sys.stdin``).
      stdout: Output stream (defaults to ``sys.stdout``).

  Returns:
      int: Exit code (0 for success, 1 for failure).
  """
  stdin = stdin or sys.stdin
  stdout = stdout or sys.stdout

  try:
    config = FormatConfig.load(**overrides)
  except ConfigError as e:
    log_error(escape(str(e)))
    return 1

  result = _format_code(stdin.read(), config, "<stdin>")
  if not result.success:
    return 1

  stdout.write(result.code)
  stdout.flush()
  return 0


def handle_format(
  paths: List[Path],
  overrides: Dict[str, Any],
  write: bool = False,
  check: bool = False,
) -> int:
  """
  Handles rewriting of files and directories.

  Args:
      paths: Files or directories (searched recursively for ``*.rs``).
      overrides: CLI values passed to :meth:`FormatConfig.load`.
      write: Rewrite changed files in place.
      check: Only report files that would change.

  Returns:
      int: Exit code (0 for success; 1 for failures or, with ``check``, pending changes).
  """
  batch_results: Dict[str, FormatResult] = {}
  failed = False

  jobs = []
  for path in paths:
    if not path.exists():
      log_error(f"Input not found: [path]{escape(str(path))}[/path]")
      failed = True
      continue

    try:
      config = FormatConfig.load(search_path=path, **overrides)
    except ConfigError as e:
      log_error(escape(str(e)))
      failed = True
      continue

    files = collect_rust_files(path)
    if not files:
      log_warning(f"No .rs files found in {escape(str(path))}")
    jobs.extend((src_file, config) for src_file in files)

  if len(jobs) > 1 and not (write or check):
    log_error("Multiple input files require --write or --check.")
    return 1

  if len(jobs) > 1:
    log_info(f"Processing {len(jobs)} files...")

  pending = []
  for src_file, config in jobs:
    result = _format_single_file(src_file, config, write, check)
    batch_results[str(src_file)] = result
    if not result.success:
      failed = True
    elif result.changed:
      pending.append(src_file)

  if len(batch_results) > 1:
    _print_batch_summary(batch_results)

  if check and pending:
    log_warning(f"{len(pending)} file(s) would be rewritten.")
    return 1
  return 1 if failed else 0


def collect_rust_files(path: Path) -> List[Path]:
  """
  Expands a path into the Rust files to process.

  Directories are searched recursively, skipping ``target/`` and hidden
  directories.

  Args:
      path: A file or directory.

  Returns:
      List[Path]: Files in sorted order.
  """
  if path.is_file():
    return [path]

  files = []
  for candidate in sorted(path.rglob("*.rs")):
    rel_parts = candidate.relative_to(path).parts[:-1]
    if any(part in SKIPPED_DIRS or part.startswith(".") for part in rel_parts):
      continue
    if candidate.is_file():
      files.append(candidate)
  return files


def _format_code(code: str, config: FormatConfig, label: str) -> FormatResult:
  """
  Runs the engine and, unless skipped, rustfmt on one unit of code.

  Diagnostics are logged; failures are returned in the result.
  """
  result = SprayEngine(config).run(code)
  for warning in result.warnings:
    log_warning(f"{escape(label)}: {escape(warning)}")

  if not result.success:
    for error in result.errors:
      log_error(f"{escape(label)}: {escape(error)}")
    return result

  if not config.skip_rustfmt:
    try:
      formatted = run_rustfmt(result.code, config.rustfmt_command, config.edition, config.rustfmt_args)
    except UseSprayError as e:
      log_error(f"{escape(label)}: {escape(str(e))}")
      return FormatResult(code=code, errors=[str(e)], success=False, warnings=result.warnings)
    result.code = formatted
    result.changed = formatted != code

  return result


def _format_single_file(input_path: Path, config: FormatConfig, write: bool, check: bool) -> FormatResult:
  """
  Helper to rewrite a single file.

  Args:
      input_path: Source file path.
      config: Resolved configuration.
      write: Whether to write changes back.
      check: Whether to only report changes.

  Returns:
      FormatResult: Result object containing status and code.
  """
  try:
    with open(input_path, "rt", encoding="utf-8", newline="") as f:
      code = f.read()
  except (OSError, UnicodeDecodeError) as e:
    log_error(f"Failed to read {escape(str(input_path))}: {escape(str(e))}")
    return FormatResult(success=False, errors=[str(e)])

  result = _format_code(code, config, str(input_path))
  if not result.success:
    return result

  if check:
    if result.changed:
      log_warning(f"Would rewrite [path]{escape(str(input_path))}[/path]")
  elif write:
    if result.changed:
      with open(input_path, "wt", encoding="utf-8", newline="") as f:
        f.write(result.code)
      log_success(f"Rewrote [path]{escape(str(input_path))}[/path]")
  else:
    sys.stdout.write(result.code)
    sys.stdout.flush()

  return result


def _print_batch_summary(results: Dict[str, FormatResult]) -> None:
  """
  Renders a summary table of results to the console.

  Args:
      results: Dictionary mapping filenames to results.
  """
  total = len(results)
  changed = sum(1 for r in results.values() if r.success and r.changed)
  failures = sum(1 for r in results.values() if not r.success)

  if failures == 0 and not any(r.warnings for r in results.values()):
    log_success(f"Batch Complete: {total} files processed, {changed} changed.")
    return

  table = Table(title="use-spray Report")
  table.add_column("File", style="cyan")
  table.add_column("Status", justify="center")
  table.add_column("Issues", style="red")

  for filename, res in results.items():
    if res.success and not res.warnings:
      continue
    status = "❌ Failed" if not res.success else "⚠️ Warnings"
    issues = "; ".join(res.errors or res.warnings)
    table.add_row(escape(filename), status, escape(issues))

  console.print(table)
  console.print(f"\n[bold]Summary:[/bold] {total - failures} Passed ({changed} changed), {failures} Failed.")
