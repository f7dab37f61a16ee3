"""
Path Classifier.

Maps the root segment of a declaration to its grouping :class:`Category`.
Classification is pure and total: every declaration has a root.
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from use_spray.core.nodes import Declaration
from use_spray.core.tokens import SELF_MARKERS
from use_spray.enums import CategoryKind

DEFAULT_STD_ROOTS = ("std", "core", "alloc")


@dataclass(frozen=True)
class Category:
  """
  Grouping bucket of a declaration.

  Attributes:
      kind: Standard library family, external crate or intra-crate reference.
      root: The literal crate name for external categories, None otherwise.
  """

  kind: CategoryKind
  root: Optional[str] = None

  def describe(self) -> str:
    return self.root if self.kind == CategoryKind.EXTERNAL else self.kind.value


def classify(declaration: Declaration, std_roots: Iterable[str] = DEFAULT_STD_ROOTS) -> Category:
  """
  Classifies a declaration by its root segment.

  Args:
      declaration: The declaration to classify.
      std_roots: Root names treated as one standard library family.

  Returns:
      Category: ``STD`` for family members (all share one bucket), ``CRATE`` for
      ``self``/``super``/``crate``, otherwise ``EXTERNAL`` keyed by the root.
  """
  root = declaration.root
  if root in std_roots:
    return Category(CategoryKind.STD)
  if root in SELF_MARKERS:
    return Category(CategoryKind.CRATE)
  return Category(CategoryKind.EXTERNAL, root)
