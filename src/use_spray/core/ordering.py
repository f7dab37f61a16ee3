"""
Group Orderer.

Decides the top-level order of groups and where blank lines separate them.
"""

from typing import List, Optional, Tuple

from use_spray.core.merge import GroupKey, MergeResult


class GroupOrderer:
  """
  Orders the groups of a :class:`MergeResult` for rendering.

  Groups are emitted in the order their keys first appeared in the input.
  A blank line separates consecutive groups whose categories differ; groups of
  one category that differ only by visibility stay adjacent.
  """

  def __init__(self, result: MergeResult):
    self.result = result

  def ordered(self) -> List[GroupKey]:
    return self.result.order

  @staticmethod
  def needs_separator(previous: Optional[GroupKey], current: GroupKey) -> bool:
    """
    Args:
        previous: The group rendered just before, or None for the first group.
        current: The group about to be rendered.

    Returns:
        bool: True if a blank line goes between the two groups.
    """
    if previous is None:
      return False
    return previous.category != current.category

  def layout(self) -> List[Tuple[GroupKey, bool]]:
    """
    Returns:
        List[Tuple[GroupKey, bool]]: Each group key with a flag telling whether a
        blank line precedes it.
    """
    plan = []
    previous = None
    for key in self.ordered():
      plan.append((key, self.needs_separator(previous, key)))
      previous = key
    return plan
