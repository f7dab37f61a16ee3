"""
External Formatter Bridge.

Pipes rewritten source through ``rustfmt`` (stdin -> stdout). rustfmt owns the
final sibling order, indentation and line wrapping of the merged `use` items.
"""

import logging
import shutil
import subprocess
from typing import List, Optional, Sequence

from use_spray.exceptions import RustfmtError, RustfmtNotFound

logger = logging.getLogger(__name__)


def build_command(command: str = "rustfmt", edition: Optional[str] = None, args: Sequence[str] = ()) -> List[str]:
  """
  Assembles the rustfmt command line.

  Args:
      command: Executable name or path.
      edition: Rust edition passed as ``--edition`` unless ``args`` sets one.
      args: Extra arguments forwarded verbatim.

  Returns:
      List[str]: The argv list.
  """
  argv = [command]
  if edition and not any(arg == "--edition" or arg.startswith("--edition=") for arg in args):
    argv.extend(["--edition", edition])
  argv.extend(args)
  return argv


def run_rustfmt(
  code: str,
  command: str = "rustfmt",
  edition: Optional[str] = None,
  args: Sequence[str] = (),
  timeout: Optional[float] = None,
) -> str:
  """
  Formats ``code`` with rustfmt.

  Args:
      code: Rust source text.
      command: Executable name or path.
      edition: Rust edition (e.g. "2021").
      args: Extra rustfmt arguments.
      timeout: Seconds to wait before giving up.

  Returns:
      str: The formatted source.

  Raises:
      RustfmtNotFound: If the executable cannot be located.
      RustfmtError: If rustfmt exits with a non-zero status or times out.
  """
  executable = shutil.which(command)
  if executable is None:
    raise RustfmtNotFound(f"rustfmt executable not found: {command!r}")

  argv = build_command(executable, edition, args)
  logger.debug("running %s", " ".join(argv))
  try:
    proc = subprocess.run(argv, input=code, capture_output=True, text=True, timeout=timeout)
  except subprocess.TimeoutExpired as e:
    raise RustfmtError(-1, f"timed out after {e.timeout} seconds") from e

  if proc.returncode != 0:
    raise RustfmtError(proc.returncode, proc.stderr)
  return proc.stdout
