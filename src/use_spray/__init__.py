"""
use-spray Package.

Regroups and merges the top-level `use` declarations of Rust source files.
Declarations are grouped by origin (standard library, each external crate,
intra-crate paths) and declarations sharing a path prefix are merged into
nested `use` trees. Final formatting is left to rustfmt.

Usage
-----

.. code-block:: python

    import use_spray
    code = "use std::fmt; use std::io::Read; use serde::Serialize;"
    print(use_spray.format_source(code))
    # use std::{fmt, io::Read};
    #
    # use serde::Serialize;

Advanced Usage (Engine)
^^^^^^^^^^^^^^^^^^^^^^^

.. code-block:: python

    from use_spray import FormatConfig, SprayEngine

    engine = SprayEngine(FormatConfig(std_roots=["std", "core"]))
    res = engine.run(code)
    if res.success:
        print(res.code)
    else:
        print(f"Errors: {res.errors}")
"""

from typing import Optional

from use_spray.config import FormatConfig
from use_spray.core.engine import FormatResult, SprayEngine
from use_spray.core.rustfmt import run_rustfmt

__version__ = "0.1.0"


def format_source(code: str, rustfmt: bool = False, config: Optional[FormatConfig] = None) -> str:
  """
  Rewrites the top-level `use` declarations of a string of Rust code.

  Args:
      code (str): The source code.
      rustfmt (bool): If True, pipe the result through rustfmt using the
          command, edition and arguments from ``config``.
      config (FormatConfig, optional): Settings. Defaults are used if None.

  Returns:
      str: The rewritten source code.

  Raises:
      ValueError: If the source cannot be parsed.
      RustfmtError: If rustfmt was requested and failed.
  """
  config = config or FormatConfig()
  result = SprayEngine(config).run(code)

  if not result.success:
    error_msg = "\n".join(result.errors)
    raise ValueError(f"Rewrite failed:\n{error_msg}")

  if rustfmt:
    return run_rustfmt(result.code, config.rustfmt_command, config.edition, config.rustfmt_args)
  return result.code


__all__ = [
  "FormatConfig",
  "FormatResult",
  "SprayEngine",
  "format_source",
  "__version__",
]
