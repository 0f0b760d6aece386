"""
Enum definitions for the application.

These enums are used across models and provide type-safe status/strategy values.
"""

from enum import Enum, IntEnum


class DepthLevel(IntEnum):
    """
    Cognitive depth of a block.

    1 = Shallow work (admin, email)
    2 = Medium focus
    3 = Deep work
    """

    SHALLOW = 1
    MEDIUM = 2
    DEEP = 3


class BlockStatus(str, Enum):
    """Execution status of a day block."""

    PLANNED = "planned"
    ACTIVE = "active"
    DONE = "done"
    SKIPPED = "skipped"


class ItemOrigin(str, Enum):
    """Where a schedule item came from."""

    STANDING = "standing"  # 曜日ごとのルーティン
    SINGLE_DAY = "single-day"  # その日だけの予定


class ResolutionStrategy(str, Enum):
    """How a conflicting proposal is applied to the existing items."""

    REPLACE = "replace"
    MERGE_OVERWRITE = "merge-overwrite"
    ONLY_NEW_IN_GAPS = "only-new-in-gaps"


class ResolutionOutcome(str, Enum):
    """Whether a proposal had to go through conflict resolution."""

    CLEAN = "clean"
    CONFLICTED = "conflicted"


class WindowMode(str, Enum):
    """Window enforcement mode."""

    REJECT = "reject"
    CLIP = "clip"
