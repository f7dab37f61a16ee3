"""
Tests for the Merge Tree Builder.

Verifies:
1. Prefix sharing and first-appearance order of children and leaves.
2. Self-target merging in both declaration orders.
3. Deduplication of identical declarations only.
4. Group keys (category, visibility, leading colon) and their order.
5. Collision reporting.
"""

from use_spray.core.classifier import Category
from use_spray.core.merge import GroupKey, MergeNode, build_groups, find_name_collisions
from use_spray.core.nodes import Declaration, Leaf, Visibility
from use_spray.core.scanner import SourceScanner
from use_spray.enums import CategoryKind


def decls(code):
  return [d for item in SourceScanner(code).scan() for d in item.declarations]


def only_tree(code):
  result = build_groups(decls(code))
  assert len(result) == 1
  return next(iter(result.groups.values()))


def test_shared_prefix():
  tree = only_tree("use std::io::Read; use std::io::Write; use std::fmt;")
  std = tree.children["std"]
  assert list(std.children) == ["io"]
  assert list(std.leaves) == [Leaf.named("fmt")]
  assert list(std.children["io"].leaves) == [Leaf.named("Read"), Leaf.named("Write")]


def test_fmt_is_a_leaf_until_it_gains_children():
  tree = only_tree("use std::fmt;")
  assert list(tree.children["std"].leaves) == [Leaf.named("fmt")]
  assert tree.children["std"].children == {}


def test_self_target_when_member_comes_second():
  tree = only_tree("use a::b; use a::b::c;")
  a = tree.children["a"]
  assert a.leaves == {}
  assert list(a.children["b"].leaves) == [Leaf.self_target(), Leaf.named("c")]


def test_self_target_when_member_comes_first():
  tree = only_tree("use a::b::c; use a::b;")
  b = tree.children["a"].children["b"]
  assert list(b.leaves) == [Leaf.named("c"), Leaf.self_target()]


def test_self_only_child_does_not_absorb_plain_import():
  tree = only_tree("use a::b::{self}; use a::b;")
  a = tree.children["a"]
  assert list(a.leaves) == [Leaf.named("b")]
  assert list(a.children["b"].leaves) == [Leaf.self_target()]


def test_plain_import_promoted_once_a_member_arrives():
  tree = only_tree("use a::b::{self}; use a::b; use a::b::c;")
  a = tree.children["a"]
  assert a.leaves == {}
  assert list(a.children["b"].leaves) == [Leaf.self_target(), Leaf.named("c")]


def test_self_rename_is_not_a_member():
  tree = only_tree("use a::b; use a::b::{self as q};")
  a = tree.children["a"]
  assert list(a.leaves) == [Leaf.named("b")]
  assert list(a.children["b"].leaves) == [Leaf.renamed("self", "q")]


def test_self_target_at_root():
  tree = only_tree("use regex; use regex::Regex;")
  assert tree.leaves == {}
  assert list(tree.children["regex"].leaves) == [Leaf.self_target(), Leaf.named("Regex")]


def test_duplicates_collapse():
  tree = only_tree("use a::b; use a::b; use a::{b, c};")
  assert list(tree.children["a"].leaves) == [Leaf.named("b"), Leaf.named("c")]


def test_rename_and_plain_stay_distinct():
  tree = only_tree("use a::b as c; use a::b;")
  assert list(tree.children["a"].leaves) == [Leaf.renamed("b", "c"), Leaf.named("b")]


def test_rename_does_not_promote_to_self():
  tree = only_tree("use a::b as x; use a::b::c;")
  a = tree.children["a"]
  assert list(a.leaves) == [Leaf.renamed("b", "x")]
  assert list(a.children["b"].leaves) == [Leaf.named("c")]


def test_group_keys_in_first_appearance_order():
  result = build_groups(decls("use tokio::x; use std::y; pub use crate::z; use serde::w; use core::v; use crate::u;"))
  assert [(k.category.describe(), k.visibility.to_text()) for k in result.order] == [
    ("tokio", ""),
    ("std", ""),
    ("crate", "pub "),
    ("serde", ""),
    ("crate", ""),
  ]
  std_key = GroupKey(Category(CategoryKind.STD), Visibility.private())
  assert list(result.groups[std_key].children) == ["std", "core"]


def test_leading_colon_is_separate_group():
  result = build_groups(decls("use ::serde::de; use serde::ser;"))
  assert [k.leading_colon for k in result.order] == [True, False]


def test_every_declaration_lands_in_one_leaf():
  code = "use std::{io::{self, Read}, fmt::Display}; pub use crate::a::*; use anyhow::Result as R;"
  declarations = decls(code)
  result = build_groups(declarations)
  recovered = set()
  for key, tree in result.groups.items():
    for path, leaf in tree.iter_leaves():
      recovered.add((key.visibility, path, leaf))
  assert recovered == {(d.visibility, d.path, d.leaf) for d in declarations}


def test_insert_on_bare_node():
  node = MergeNode()
  node.insert(("x", "y"), Leaf.glob())
  assert node.children["x"].children["y"].segment == "y"
  assert node.content_size == 1


def test_collisions_reported():
  result = build_groups(decls("use a::Error; use b::Error; use c::Thing as Error; use d::Other as _; use e::Other as _;"))
  collisions = find_name_collisions(result)
  assert len(collisions) == 1
  assert collisions[0].name == "Error"
  assert collisions[0].sources == ("a::Error", "b::Error", "c::Thing as Error")


def test_no_collision_for_duplicates_or_globs():
  result = build_groups(decls("use a::Error; use a::Error; use b::*; use c::*;"))
  assert find_name_collisions(result) == []


def test_self_target_collision_uses_segment():
  result = build_groups(decls("use a::io::{self, Read}; use std::io;"))
  collisions = find_name_collisions(result)
  assert [c.name for c in collisions] == ["io"]
  assert collisions[0].sources == ("a::io", "std::io")
