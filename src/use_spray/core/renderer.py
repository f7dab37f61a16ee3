"""
Renderer.

Serializes merge trees back into nested `use` syntax. The output is not final
formatting: siblings keep first-appearance order, groups are written on one line
and wrapping is left to rustfmt.
"""

from typing import List

from use_spray.core.merge import GroupKey, MergeNode, MergeResult
from use_spray.core.ordering import GroupOrderer


def render_items(node: MergeNode) -> List[str]:
  """
  Renders the content of ``node`` (leaves first, then children) as a list of
  use-tree fragments relative to the node.
  """
  items = [leaf.to_text() for leaf in node.leaves]
  items.extend(render_node(child) for child in node.children.values())
  return items


def render_node(node: MergeNode) -> str:
  """
  Renders a non-root node.

  Single-item nodes stay flat (``a::b::c``); a lone ``self`` or ``self as x``
  leaf keeps its braces since ``a::self`` is not valid. Anything else nests:
  ``a::{self, b, c::d}``.
  """
  items = render_items(node)
  if len(items) == 1:
    lone_self = len(node.leaves) == 1 and next(iter(node.leaves)).refers_to_parent
    if not lone_self:
      return f"{node.segment}::{items[0]}"
  return f"{node.segment}::{{{', '.join(items)}}}"


def render_group(key: GroupKey, tree: MergeNode) -> List[str]:
  """
  Renders one group as complete `use` statements.

  Each root-level branch (and each root-level leaf, e.g. ``use serde;``) becomes
  its own statement carrying the group's visibility.

  Args:
      key: The group key supplying visibility and leading colon.
      tree: The synthetic root of the group's merge tree.

  Returns:
      List[str]: Statements without trailing newlines.
  """
  prefix = f"{key.visibility.to_text()}use {'::' if key.leading_colon else ''}"
  return [f"{prefix}{item};" for item in render_items(tree)]


def render_result(result: MergeResult, newline: str = "\n") -> str:
  """
  Renders every group of a run, in group order, with blank lines between
  groups of different categories.

  Args:
      result: The merged groups of one run.
      newline: Line separator, matching the source file.

  Returns:
      str: Replacement text without a trailing newline.
  """
  lines: List[str] = []
  for key, separated in GroupOrderer(result).layout():
    if separated:
      lines.append("")
    lines.extend(render_group(key, result.groups[key]))
  return newline.join(lines)
