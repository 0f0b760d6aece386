"""
Split a block into sprints around its breaks.
"""

from __future__ import annotations

from typing import Iterable

from app.core.exceptions import FullyCoveredError, ValidationError
from app.models.schedule import Interval, ScheduleItem, SprintComposition
from app.services.range_algebra import merge, subtract, within

DEFAULT_SPRINT_LABEL_TEMPLATE = "{label} — Sprint {index}"


def compose_sprints(block: Interval, breaks: Iterable[Interval]) -> SprintComposition:
    """
    Subtract the block's breaks from its span.

    Args:
        block: The block's full span
        breaks: Break intervals, each nested inside the block; may overlap

    Returns:
        SprintComposition with chronological sprints and the merged breaks

    Raises:
        ValidationError: If a break lies outside the block
        FullyCoveredError: If the breaks leave nothing of the block
    """
    breaks = list(breaks)
    outside = [b for b in breaks if not within(b, block)]
    if outside:
        raise ValidationError(
            "Break must be within the block",
            details={
                "block": block.model_dump(),
                "breaks": [b.model_dump() for b in outside],
            },
        )

    normalized = merge(breaks)
    sprints = subtract(block, normalized)
    if not sprints:
        raise FullyCoveredError(block, normalized)
    return SprintComposition(sprints=sprints, normalized_breaks=normalized)


def build_sprint_items(
    block: ScheduleItem,
    breaks: Iterable[Interval],
    label_template: str = DEFAULT_SPRINT_LABEL_TEMPLATE,
) -> list[ScheduleItem]:
    """
    Turn a proposed block into one schedule item per sprint.

    Sprints keep the block's depth, goal and origin. A labelled block gives
    each sprint a numbered label, unlabelled blocks give unlabelled sprints.
    """
    composition = compose_sprints(block.interval, breaks)
    items: list[ScheduleItem] = []
    for index, sprint in enumerate(composition.sprints, start=1):
        label = None
        if block.label:
            label = label_template.format(label=block.label, index=index)
        items.append(
            block.model_copy(update={"interval": sprint, "label": label, "id": None})
        )
    return items
