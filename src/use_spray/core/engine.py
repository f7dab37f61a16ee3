"""
Rewrite Engine.

This module provides the `SprayEngine`, the driver that rewrites one Rust file:

1.  **Scanning**: Tokenizes the file and locates top-level `use` items with spans.
2.  **Run detection**: Splits the items into runs of consecutive, unattached
    items separated only by whitespace. Items carrying attributes, doc comments
    or inner comments are left as they are.
3.  **Merging**: Classifies every declaration of a run and builds the group trees.
4.  **Rendering**: Replaces each run's span with the rendered statements.

Everything outside the replaced spans is copied verbatim. Passing the result
through rustfmt is done by the caller.
"""

import logging
from typing import List, Optional

from pydantic import BaseModel, Field

from use_spray.config import FormatConfig
from use_spray.core.merge import build_groups, find_name_collisions
from use_spray.core.nodes import UseItem
from use_spray.core.renderer import render_result
from use_spray.core.scanner import SourceScanner
from use_spray.exceptions import UseSpraySyntaxError

logger = logging.getLogger(__name__)


class FormatResult(BaseModel):
  """
  Structured result of rewriting a single file.
  """

  code: str = Field(default="", description="The rewritten source code.")
  errors: List[str] = Field(default_factory=list, description="Fatal problems; the code is returned unchanged.")
  warnings: List[str] = Field(default_factory=list, description="Non-blocking diagnostics (e.g. name collisions).")
  success: bool = Field(default=True, description="True if the file was parsed and rewritten.")
  changed: bool = Field(default=False, description="True if the output differs from the input.")
  runs: int = Field(default=0, description="Number of `use` runs rewritten.")
  declarations: int = Field(default=0, description="Number of flattened declarations merged.")

  @property
  def has_errors(self) -> bool:
    """
    Returns True if any errors were recorded.

    Returns:
        bool: True if errors list is non-empty.
    """
    return len(self.errors) > 0


def split_runs(code: str, items: List[UseItem]) -> List[List[UseItem]]:
  """
  Groups consecutive mergeable `use` items.

  An item joins the current run when it is not attached to attributes or doc
  comments, carries no comments of its own and only whitespace separates it
  from the previous item.

  Args:
      code: The full source text.
      items: Top-level `use` items in textual order.

  Returns:
      List[List[UseItem]]: Non-empty runs in textual order.
  """
  runs: List[List[UseItem]] = []
  current: List[UseItem] = []
  for item in items:
    if item.attached or item.commented:
      if current:
        runs.append(current)
      current = []
      continue
    if current and code[current[-1].end : item.start].strip():
      runs.append(current)
      current = []
    current.append(item)
  if current:
    runs.append(current)
  return runs


class SprayEngine:
  """
  Rewrites the top-level `use` items of one file.
  """

  def __init__(self, config: Optional[FormatConfig] = None):
    """
    Initializes the Engine.

    Args:
        config: Settings; only ``std_roots`` and ``warn_collisions`` matter here.
    """
    self.config = config or FormatConfig()

  def run(self, code: str) -> FormatResult:
    """
    Rewrites ``code``.

    Lexing and parsing errors are captured in the result instead of raised;
    the returned code is then the unchanged input.

    Args:
        code: Rust source text.

    Returns:
        FormatResult: The rewritten code and statistics.
    """
    try:
      items = SourceScanner(code).scan()
    except UseSpraySyntaxError as e:
      logger.debug("scan failed: %s", e)
      return FormatResult(code=code, errors=[str(e)], success=False)

    runs = split_runs(code, items)
    newline = "\r\n" if "\r\n" in code else "\n"
    pieces: List[str] = []
    warnings: List[str] = []
    cursor = 0
    total = 0

    for run in runs:
      declarations = [decl for item in run for decl in item.declarations]
      total += len(declarations)
      merged = build_groups(declarations, self.config.std_roots)
      logger.debug("run at line %d: %d declarations, %d groups", run[0].line, len(declarations), len(merged))

      if self.config.warn_collisions:
        for collision in find_name_collisions(merged):
          warnings.append(
            f"line {run[0].line}: '{collision.name}' is imported more than once ({', '.join(collision.sources)})"
          )

      pieces.append(code[cursor : run[0].start])
      pieces.append(render_result(merged, newline))
      cursor = run[-1].end

    pieces.append(code[cursor:])
    new_code = "".join(pieces)
    return FormatResult(
      code=new_code,
      warnings=warnings,
      changed=new_code != code,
      runs=len(runs),
      declarations=total,
    )
