"""
Main Entry Point for the use-spray CLI.

This module handles argument parsing and dispatches to the handlers defined in
`use_spray.cli.commands`. Arguments after ``--`` are forwarded to rustfmt.
"""

import argparse
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from use_spray.cli import commands
from use_spray.utils.console import set_verbosity
from use_spray import __version__


def split_passthrough(argv: List[str]) -> Tuple[List[str], List[str]]:
  """
  Splits the argument list at the first ``--``.

  Args:
      argv: Raw command line arguments.

  Returns:
      Tuple[List[str], List[str]]: (own arguments, rustfmt arguments).
  """
  if "--" in argv:
    idx = argv.index("--")
    return argv[:idx], argv[idx + 1 :]
  return argv, []


def build_parser() -> argparse.ArgumentParser:
  parser = argparse.ArgumentParser(
    prog="use-spray",
    description="Regroup and merge Rust `use` declarations, then format with rustfmt.",
    epilog="Arguments after `--` are passed to rustfmt.",
  )
  parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
  parser.add_argument(
    "paths",
    nargs="*",
    type=Path,
    help="Rust files or directories. Reads stdin and writes stdout when omitted.",
  )
  parser.add_argument("--skip-rustfmt", action="store_true", default=None, help="Don't pass results through rustfmt")
  parser.add_argument("--rustfmt", dest="rustfmt_command", default=None, help="rustfmt executable (default: rustfmt)")
  parser.add_argument("--edition", default=None, help="Rust edition passed to rustfmt (default: 2021)")
  parser.add_argument(
    "--std-root",
    dest="std_roots",
    action="append",
    default=None,
    help="Crate treated as part of the standard library family (repeatable; default: std core alloc)",
  )

  mode = parser.add_mutually_exclusive_group()
  mode.add_argument("-w", "--write", action="store_true", help="Rewrite files in place")
  mode.add_argument("--check", action="store_true", help="Exit with status 1 if any file would change")

  noise = parser.add_mutually_exclusive_group()
  noise.add_argument("-v", "--verbose", action="store_true", help="Show debug logging")
  noise.add_argument("-q", "--quiet", action="store_true", help="Only show warnings and errors")
  return parser


def main(argv: Optional[List[str]] = None) -> int:
  """
  Main CLI entry point.

  Args:
      argv: Optional list of command line arguments (defaults to sys.argv).

  Returns:
      int: Exit code (0 for success, non-zero for failure).
  """
  own_args, rustfmt_args = split_passthrough(list(sys.argv[1:] if argv is None else argv))
  args = build_parser().parse_args(own_args)

  set_verbosity(verbose=args.verbose, quiet=args.quiet)

  overrides: Dict[str, Any] = {
    "skip_rustfmt": args.skip_rustfmt,
    "rustfmt_command": args.rustfmt_command,
    "rustfmt_args": rustfmt_args,
    "edition": args.edition,
    "std_roots": args.std_roots,
  }

  if not args.paths:
    if args.write or args.check:
      print("use-spray: --write and --check need at least one path", file=sys.stderr)
      return 2
    return commands.handle_stdin(overrides)

  return commands.handle_format(args.paths, overrides, write=args.write, check=args.check)


if __name__ == "__main__":
  sys.exit(main())
