"""
Enumerations for use-spray.

This module defines the standard enumerations used across the codebase for
describing `use` declarations and their grouping buckets.
"""

from enum import Enum


class VisibilityKind(str, Enum):
  """
  Visibility of a `use` declaration.
  """

  PRIVATE = "private"  # no modifier
  PUBLIC = "public"  # pub
  RESTRICTED = "restricted"  # pub(crate), pub(super), pub(in path)


class LeafKind(str, Enum):
  """
  The terminal item a `use` declaration brings into scope.
  """

  NAME = "name"  # use a::b;
  RENAME = "rename"  # use a::b as c;
  GLOB = "glob"  # use a::*;
  SELF = "self"  # use a::b::{self};


class CategoryKind(str, Enum):
  """
  Grouping bucket derived from the root segment of a declaration.

  Members are listed in the order the original tool emitted them, but the
  rewrite itself orders groups by first appearance.
  """

  STD = "std"
  EXTERNAL = "external"
  CRATE = "crate"
