"""Manual editing of an interval step list (add, remove, drag-and-drop reorder).

Every edit switches the form to 'detailed' entry mode.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from interval_sync.models import IntervalStep
from interval_sync.services.interval_sync import ModeCallback, ReplaceCallback
from interval_sync.services.step_utils import build_step, renumber_steps

logger = logging.getLogger(__name__)


def append_step(steps: Optional[List[IntervalStep]]) -> List[IntervalStep]:
    """Append a blank warmup step numbered one past the highest existing number."""
    steps = list(steps or [])
    next_number = max((step.step_number or 0 for step in steps), default=0) + 1
    new_step = build_step('warmup').model_copy(update={"step_number": next_number})
    return steps + [new_step]


def remove_step(steps: Optional[List[IntervalStep]], index: int) -> List[IntervalStep]:
    """Remove the step at `index` and renumber. Out-of-range indices are ignored."""
    steps = list(steps or [])
    if not 0 <= index < len(steps):
        logger.debug("Ignoring removal of step %d from %d steps", index, len(steps))
        return steps
    del steps[index]
    return renumber_steps(steps)


def move_step(steps: Optional[List[IntervalStep]], old_index: int, new_index: int) -> List[IntervalStep]:
    """Move the step at `old_index` to `new_index` and renumber."""
    steps = list(steps or [])
    if old_index == new_index or not (0 <= old_index < len(steps) and 0 <= new_index < len(steps)):
        return steps
    step = steps.pop(old_index)
    steps.insert(new_index, step)
    return renumber_steps(steps)


class StepEditor:
    """Applies manual edits and reports them through the form callbacks."""

    def __init__(self, replace: ReplaceCallback, on_entry_mode_change: ModeCallback):
        self.replace = replace
        self.on_entry_mode_change = on_entry_mode_change

    def _emit(self, steps: List[IntervalStep]) -> List[IntervalStep]:
        self.on_entry_mode_change('detailed')
        self.replace(steps)
        return steps

    def append(self, steps: Optional[List[IntervalStep]]) -> List[IntervalStep]:
        return self._emit(append_step(steps))

    def remove(self, steps: Optional[List[IntervalStep]], index: int) -> List[IntervalStep]:
        return self._emit(remove_step(steps, index))

    def move(self, steps: Optional[List[IntervalStep]], old_index: int, new_index: int) -> List[IntervalStep]:
        """Drag and drop; dropping a step onto itself is not an edit."""
        if old_index == new_index:
            return list(steps or [])
        return self._emit(move_step(steps, old_index, new_index))
