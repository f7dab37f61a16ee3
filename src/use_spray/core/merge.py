"""
Merge Tree Builder.

Inserts flattened declarations into one insertion-ordered prefix tree per
group key. Children and leaves keep first-appearance order; nothing is sorted.

A plain import of a path (``use a::b;``) is stored as a ``self`` leaf on node
``b`` as soon as ``b`` also has members imported (``use a::b::c;``), so the two
merge into ``a::b::{self, c}`` regardless of which declaration came first. A
node holding nothing but ``self`` imports (``use a::b::{self};``) has no members
and leaves a plain ``use a::b;`` where it is.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from use_spray.core.classifier import DEFAULT_STD_ROOTS, Category, classify
from use_spray.core.nodes import Declaration, Leaf, Visibility
from use_spray.enums import LeafKind


@dataclass(frozen=True)
class GroupKey:
  """
  All declarations sharing a key render as one statement cluster.
  """

  category: Category
  visibility: Visibility
  leading_colon: bool = False


@dataclass
class MergeNode:
  """
  A node of a group's prefix tree.

  Attributes:
      segment: Path component of this node; None for the synthetic root.
      children: Child nodes keyed by segment, in first-appearance order.
      leaves: Leaves attached to this node, in first-appearance order.
  """

  segment: Optional[str] = None
  children: Dict[str, "MergeNode"] = field(default_factory=dict)
  leaves: Dict[Leaf, None] = field(default_factory=dict)

  @property
  def has_members(self) -> bool:
    """True if anything below this node is imported besides the node itself."""
    return bool(self.children) or any(not leaf.refers_to_parent for leaf in self.leaves)

  def child(self, segment: str, member: bool = True) -> "MergeNode":
    """
    Returns the child for ``segment``, appending a new one on first need.

    When ``member`` is set the caller is about to import something below the
    child, and a plain-name leaf with the same name moves onto it as ``self``.
    """
    node = self.children.get(segment)
    if node is None:
      node = MergeNode(segment)
      self.children[segment] = node
    if member:
      promoted = Leaf.named(segment)
      if promoted in self.leaves:
        del self.leaves[promoted]
        node.add_leaf(Leaf.self_target())
    return node

  def add_leaf(self, leaf: Leaf) -> None:
    if leaf.kind == LeafKind.NAME and leaf.name in self.children and self.children[leaf.name].has_members:
      self.children[leaf.name].add_leaf(Leaf.self_target())
      return
    self.leaves[leaf] = None

  def insert(self, path: Iterable[str], leaf: Leaf) -> None:
    segments = tuple(path)
    node = self
    for index, segment in enumerate(segments):
      last = index == len(segments) - 1
      node = node.child(segment, member=not (last and leaf.refers_to_parent))
    node.add_leaf(leaf)

  @property
  def content_size(self) -> int:
    return len(self.leaves) + len(self.children)

  def iter_leaves(self, prefix: Tuple[str, ...] = ()) -> Iterable[Tuple[Tuple[str, ...], Leaf]]:
    """
    Walks the subtree, yielding the path of every node carrying a leaf.

    Yields:
        Tuple[Tuple[str, ...], Leaf]: (path to node, leaf) pairs, depth first.
    """
    here = prefix + (self.segment,) if self.segment is not None else prefix
    for leaf in self.leaves:
      yield here, leaf
    for node in self.children.values():
      yield from node.iter_leaves(here)


@dataclass
class MergeResult:
  """
  Output of the merge pass.

  Attributes:
      groups: One tree per group key. Dict order is the first-appearance order.
  """

  groups: Dict[GroupKey, MergeNode] = field(default_factory=dict)

  @property
  def order(self) -> List[GroupKey]:
    return list(self.groups)

  def __len__(self) -> int:
    return len(self.groups)


def group_key(declaration: Declaration, std_roots: Iterable[str] = DEFAULT_STD_ROOTS) -> GroupKey:
  return GroupKey(classify(declaration, std_roots), declaration.visibility, declaration.leading_colon)


def build_groups(declarations: Iterable[Declaration], std_roots: Iterable[str] = DEFAULT_STD_ROOTS) -> MergeResult:
  """
  Builds the per-group merge trees.

  Args:
      declarations: Declarations in original textual order.
      std_roots: Root names forming the standard library family.

  Returns:
      MergeResult: Trees keyed by group key, in first-appearance order.
  """
  std_roots = tuple(std_roots)
  result = MergeResult()
  for declaration in declarations:
    key = group_key(declaration, std_roots)
    tree = result.groups.get(key)
    if tree is None:
      tree = result.groups[key] = MergeNode()
    tree.insert(declaration.path, declaration.leaf)
  return result


@dataclass(frozen=True)
class NameCollision:
  """
  A local name bound by more than one distinct leaf.

  Attributes:
      name: The colliding local name.
      sources: Human-readable source paths, in first-appearance order.
  """

  name: str
  sources: Tuple[str, ...]


def find_name_collisions(result: MergeResult) -> List[NameCollision]:
  """
  Reports local names bound more than once across all groups.

  The rewrite never introduces a collision; this only surfaces ones that were
  already present so they can be logged. ``as _`` imports and globs bind no name.

  Args:
      result: Merged groups of one run of `use` items.

  Returns:
      List[NameCollision]: Collisions in first-appearance order of the name.
  """
  bound: Dict[str, List[str]] = {}
  for key, tree in result.groups.items():
    colon = "::" if key.leading_colon else ""
    for path, leaf in tree.iter_leaves():
      if leaf.kind == LeafKind.SELF:
        name = path[-1]
        source = "::".join(path)
      elif leaf.kind == LeafKind.GLOB:
        continue
      else:
        name = leaf.local_name
        source = "::".join([*path, leaf.to_text()])
      if name == "_":
        continue
      bound.setdefault(name, []).append(colon + source)

  return [NameCollision(name, tuple(sources)) for name, sources in bound.items() if len(sources) > 1]
