"""
Interval Step Synchronizer

Keeps the ordered step list of an interval workout consistent with the
quick-entry controls (repetition count, effort and recovery values).

Two independent flows:
- Structural reconciliation, when the repetition count changed: generate a
  fresh warmup/effort/recovery/cooldown list, or insert/remove
  effort+recovery pairs in an existing one.
- Content synchronization, when only effort/recovery values changed: copy
  them into every effort/recovery step that is not manually detailed.

reconcile() is a pure function of (state, controls, steps, disabled).
IntervalSyncService wraps it for callers that want the replace/mode
callbacks of a form.
"""
from __future__ import annotations

import logging
from typing import Callable, List, Optional

from interval_sync.config import settings
from interval_sync.models import (
    EntryMode,
    IntervalControls,
    IntervalStep,
    ReconcileResult,
    SyncState,
)
from interval_sync.services.step_utils import (
    build_step,
    effort_indices,
    find_cooldown_index,
    is_manually_detailed,
    last_effort_index,
    renumber_steps,
)

logger = logging.getLogger(__name__)

ReplaceCallback = Callable[[List[IntervalStep]], None]
ModeCallback = Callable[[EntryMode], None]


def _effort_step(controls: IntervalControls) -> IntervalStep:
    return build_step('effort', controls.effort_duration, controls.effort_distance)


def _recovery_step(controls: IntervalControls) -> IntervalStep:
    return build_step('recovery', controls.recovery_duration, controls.recovery_distance)


def generate_steps(count: int, controls: IntervalControls) -> List[IntervalStep]:
    """Build warmup, `count` efforts separated by recoveries, then cooldown."""
    steps = [build_step('warmup')]
    for i in range(count):
        steps.append(_effort_step(controls))
        if i < count - 1:
            steps.append(_recovery_step(controls))
    steps.append(build_step('cooldown'))
    return renumber_steps(steps)


def grow_steps(steps: List[IntervalStep], target: int, controls: IntervalControls) -> List[IntervalStep]:
    """
    Add effort steps until there are `target` of them.

    New efforts go just before cooldown (or at the end). A recovery is first
    inserted there if the current last effort is not already followed by
    one, so the sequence keeps alternating.
    """
    updated = list(steps)

    last_effort = last_effort_index(updated)
    if last_effort is not None:
        has_recovery_after = (
            last_effort + 1 < len(updated) and updated[last_effort + 1].step_type == 'recovery'
        )
        if not has_recovery_after:
            updated.insert(find_cooldown_index(updated), _recovery_step(controls))

    efforts_to_add = target - len(effort_indices(steps))
    for i in range(efforts_to_add):
        insert_at = find_cooldown_index(updated)
        updated.insert(insert_at, _effort_step(controls))
        # No recovery after the final effort
        if i < efforts_to_add - 1:
            updated.insert(insert_at + 1, _recovery_step(controls))

    return renumber_steps(updated)


def shrink_steps(steps: List[IntervalStep], target: int) -> List[IntervalStep]:
    """
    Remove effort steps from the end until `target` remain.

    Each removed effort takes its preceding recovery with it. A recovery
    left dangling after the new last effort is removed as well.
    """
    indices = effort_indices(steps)
    efforts_to_remove = max(len(indices) - max(target, 0), 0)

    to_remove = set()
    for effort_index in indices[len(indices) - efforts_to_remove:]:
        to_remove.add(effort_index)
        if effort_index > 0 and steps[effort_index - 1].step_type == 'recovery':
            to_remove.add(effort_index - 1)

    updated = [step for index, step in enumerate(steps) if index not in to_remove]

    last_effort = last_effort_index(updated)
    if (
        last_effort is not None
        and last_effort + 1 < len(updated)
        and updated[last_effort + 1].step_type == 'recovery'
    ):
        del updated[last_effort + 1]

    return renumber_steps(updated)


def sync_step_values(steps: List[IntervalStep], controls: IntervalControls) -> Optional[List[IntervalStep]]:
    """
    Copy effort/recovery control values into non-detailed steps.

    Returns the updated list, or None when no step changed.
    """
    has_changes = False
    updated_steps = []

    for step in steps:
        if is_manually_detailed(step) or step.step_type not in ('effort', 'recovery'):
            updated_steps.append(step)
            continue

        if step.step_type == 'effort':
            duration, distance = controls.effort_duration, controls.effort_distance
        else:
            duration, distance = controls.recovery_duration, controls.recovery_distance

        update = {}
        if duration and step.duration != duration:
            update["duration"] = duration
        if distance is not None and step.distance != distance:
            update["distance"] = distance

        if update:
            has_changes = True
            updated_steps.append(step.model_copy(update=update))
        else:
            updated_steps.append(step)

    if not has_changes:
        return None
    return renumber_steps(updated_steps)


def reconcile(
    state: SyncState,
    controls: IntervalControls,
    steps: Optional[List[IntervalStep]],
    disabled: bool = False,
) -> ReconcileResult:
    """
    Decide what, if anything, should replace the current step list.

    Args:
        state: Repetition count remembered from the previous evaluation
        controls: Current quick-entry control values
        steps: Current step list (never mutated)
        disabled: When True nothing is ever emitted, e.g. for completed sessions

    Returns:
        ReconcileResult carrying the updated state and, when something
        changed, the full replacement list and the 'detailed' mode
    """
    steps = steps or []
    count = controls.count

    if count != state.previous_count:
        new_state = SyncState(previous_count=count)

        if count <= 0:
            logger.debug("Repetition count %d -> %d, nothing to generate", state.previous_count, count)
            return ReconcileResult(state=new_state, action='cleared')

        if disabled:
            logger.debug("Auto regeneration disabled, recorded repetition count %d", count)
            return ReconcileResult(state=new_state, action='disabled')

        if not steps:
            generated = generate_steps(count, controls)
            logger.info("Generated %d interval steps for %d repetitions", len(generated), count)
            return ReconcileResult(state=new_state, steps=generated, mode='detailed', action='generated')

        current_effort_count = len(effort_indices(steps))
        if current_effort_count == count:
            return ReconcileResult(state=new_state, action='noop')

        if count > current_effort_count:
            updated = grow_steps(steps, count, controls)
            action = 'grown'
        else:
            updated = shrink_steps(steps, count)
            action = 'shrunk'

        logger.info(
            "Reconciled interval steps from %d to %d efforts (%d steps)",
            current_effort_count, count, len(updated),
        )
        return ReconcileResult(state=new_state, steps=updated, mode='detailed', action=action)

    if disabled:
        return ReconcileResult(state=state, action='disabled')

    synced = sync_step_values(steps, controls)
    if synced is None:
        return ReconcileResult(state=state, action='noop')

    logger.info("Synchronized effort/recovery values into %d steps", len(synced))
    return ReconcileResult(state=state, steps=synced, mode='detailed', action='synced')


class IntervalSyncService:
    """
    Stateful wrapper around reconcile() for a single form.

    Holds the remembered repetition count and forwards every emitted
    replacement to the form's callbacks. Each instance is independent.

    Without `initial_count`, the first update() only records the form's
    count, so a form opened on a saved session keeps its steps as loaded.
    """

    def __init__(
        self,
        replace: ReplaceCallback,
        on_entry_mode_change: ModeCallback,
        disable_auto_regeneration: Optional[bool] = None,
        initial_count: Optional[int] = None,
    ):
        self.replace = replace
        self.on_entry_mode_change = on_entry_mode_change
        if disable_auto_regeneration is None:
            disable_auto_regeneration = settings.DISABLE_AUTO_REGENERATION
        self.disable_auto_regeneration = disable_auto_regeneration
        self.state: Optional[SyncState] = (
            SyncState(previous_count=initial_count) if initial_count is not None else None
        )

    @property
    def previous_count(self) -> Optional[int]:
        return self.state.previous_count if self.state is not None else None

    def update(self, controls: IntervalControls, steps: Optional[List[IntervalStep]]) -> ReconcileResult:
        """Re-evaluate after any watched value changed."""
        if self.state is None:
            self.state = SyncState(previous_count=controls.count)
            logger.debug("Seeded remembered repetition count with %d", controls.count)

        result = reconcile(self.state, controls, steps, disabled=self.disable_auto_regeneration)
        self.state = result.state

        if result.steps is not None:
            self.replace(result.steps)
            self.on_entry_mode_change(result.mode or 'detailed')
        return result
