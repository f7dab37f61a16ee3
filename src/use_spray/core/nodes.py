"""
Declaration Model.

This module defines the typed representation of a single Rust `use`
declaration after flattening: one visibility, one path, one leaf.
A source item such as ``pub use a::{b, c as d};`` yields two declarations.

All types are frozen dataclasses; the rewrite only reads and re-emits them.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from use_spray.enums import LeafKind, VisibilityKind


@dataclass(frozen=True)
class Visibility:
  """
  Visibility modifier of a `use` item.

  Attributes:
      kind: Private, public or restricted.
      scope: Path inside ``pub(...)`` for restricted visibilities.
      in_token: True when written as ``pub(in path)``.
  """

  kind: VisibilityKind = VisibilityKind.PRIVATE
  scope: Tuple[str, ...] = ()
  in_token: bool = False

  @classmethod
  def private(cls) -> "Visibility":
    return cls()

  @classmethod
  def public(cls) -> "Visibility":
    return cls(VisibilityKind.PUBLIC)

  @classmethod
  def restricted(cls, scope: Tuple[str, ...], in_token: bool = False) -> "Visibility":
    return cls(VisibilityKind.RESTRICTED, tuple(scope), in_token)

  def to_text(self) -> str:
    """
    Renders the modifier including its trailing space.

    Returns:
        str: ``""``, ``"pub "``, ``"pub(crate) "`` or ``"pub(in a::b) "``.
    """
    if self.kind == VisibilityKind.PUBLIC:
      return "pub "
    if self.kind == VisibilityKind.RESTRICTED:
      prefix = "in " if self.in_token else ""
      return f"pub({prefix}{'::'.join(self.scope)}) "
    return ""


@dataclass(frozen=True)
class Leaf:
  """
  Terminal item of a declaration. Identity is kind + name + alias.
  """

  kind: LeafKind
  name: Optional[str] = None
  alias: Optional[str] = None

  @classmethod
  def named(cls, name: str) -> "Leaf":
    return cls(LeafKind.NAME, name)

  @classmethod
  def renamed(cls, name: str, alias: str) -> "Leaf":
    return cls(LeafKind.RENAME, name, alias)

  @classmethod
  def glob(cls) -> "Leaf":
    return cls(LeafKind.GLOB)

  @classmethod
  def self_target(cls) -> "Leaf":
    return cls(LeafKind.SELF)

  @property
  def refers_to_parent(self) -> bool:
    """True for `self` and `self as x`, which import the enclosing path itself."""
    return self.kind == LeafKind.SELF or (self.kind == LeafKind.RENAME and self.name == "self")

  @property
  def local_name(self) -> Optional[str]:
    """
    The name this leaf binds in the importing scope.

    Globs bind no single name. A self-target binds the last path segment,
    which the caller has to supply, so it also returns None here.
    """
    if self.kind == LeafKind.RENAME:
      return self.alias
    if self.kind == LeafKind.NAME:
      return self.name
    return None

  def to_text(self) -> str:
    if self.kind == LeafKind.NAME:
      return str(self.name)
    if self.kind == LeafKind.RENAME:
      return f"{self.name} as {self.alias}"
    if self.kind == LeafKind.GLOB:
      return "*"
    return "self"


@dataclass(frozen=True)
class Declaration:
  """
  One flattened `use` declaration.

  Attributes:
      visibility: Visibility of the enclosing item.
      path: Segments leading up to the leaf (possibly empty, e.g. ``use serde;``).
      leaf: The imported item.
      leading_colon: True for absolute paths written as ``use ::foo;``.
  """

  visibility: Visibility
  path: Tuple[str, ...]
  leaf: Leaf
  leading_colon: bool = False

  @property
  def root(self) -> str:
    """
    The first path component, used for classification.

    Falls back to the leaf name for empty paths and to ``"*"`` for a bare glob.
    """
    if self.path:
      return self.path[0]
    if self.leaf.name is not None:
      return self.leaf.name
    return "*"

  def to_text(self) -> str:
    """Renders the declaration as a standalone, non-nested `use` item."""
    colon = "::" if self.leading_colon else ""
    if self.leaf.refers_to_parent:
      body = "::".join(self.path) + f"::{{{self.leaf.to_text()}}}"
    else:
      body = "::".join([*self.path, self.leaf.to_text()])
    return f"{self.visibility.to_text()}use {colon}{body};"


@dataclass
class UseItem:
  """
  A top-level `use` item located in the source text.

  Attributes:
      start: Offset of the first character of the item (visibility or `use`).
      end: Offset one past the terminating semicolon.
      declarations: Flattened declarations in textual order.
      attached: True if outer attributes or doc comments precede the item.
          Attached items are never rewritten.
      commented: True if comments appear inside the item. Commented items
          are never rewritten.
      line: 1-based line of the item start.
  """

  start: int
  end: int
  declarations: List[Declaration] = field(default_factory=list)
  attached: bool = False
  commented: bool = False
  line: int = 1
