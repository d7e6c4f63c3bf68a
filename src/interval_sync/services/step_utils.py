"""Helpers for filtering, labeling, and rebuilding interval step lists.

Every function here is pure: input lists are never mutated, and any step
whose fields change is returned as a copy.
"""
from __future__ import annotations

import logging
import re
from typing import Any, Dict, Iterable, List, Literal, Optional, Union

from pydantic import ValidationError

from interval_sync.config import settings
from interval_sync.models import IntervalControls, IntervalStep, StepType

logger = logging.getLogger(__name__)

STEP_TYPES: tuple = ('warmup', 'effort', 'recovery', 'cooldown')

StepTypeFilter = Union[Literal['all'], StepType]

_LABELS: Dict[str, Dict[str, str]] = {
    "fr": {"warmup": "Échauf.", "cooldown": "Retour", "effort": "E", "recovery": "R"},
    "en": {"warmup": "Warmup", "cooldown": "Cooldown", "effort": "E", "recovery": "R"},
}


def is_manually_detailed(step: IntervalStep) -> bool:
    """A step with non-empty pace or non-null hr is never overwritten by content sync."""
    return step.is_manually_detailed()


def build_step(
    step_type: StepType,
    duration: Optional[str] = "",
    distance: Optional[float] = None,
) -> IntervalStep:
    """Build a fresh, non-detailed step. Numbering is left to renumber_steps()."""
    return IntervalStep(
        step_number=1,
        step_type=step_type,
        duration=duration or "",
        distance=distance or None,
        pace="",
        hr=None,
    )


def renumber_steps(steps: Iterable[IntervalStep]) -> List[IntervalStep]:
    """Return copies with step_number set to 1..len in order."""
    return [
        step if step.step_number == index else step.model_copy(update={"step_number": index})
        for index, step in enumerate(steps, start=1)
    ]


def find_cooldown_index(steps: List[IntervalStep]) -> int:
    """Index of the first cooldown step, or len(steps) when there is none."""
    for index, step in enumerate(steps):
        if step.step_type == 'cooldown':
            return index
    return len(steps)


def effort_indices(steps: List[IntervalStep]) -> List[int]:
    return [index for index, step in enumerate(steps) if step.step_type == 'effort']


def last_effort_index(steps: List[IntervalStep]) -> Optional[int]:
    indices = effort_indices(steps)
    return indices[-1] if indices else None


def filter_steps_by_type(steps: List[IntervalStep], step_type: StepTypeFilter) -> List[IntervalStep]:
    """Filter steps by type; 'all' returns the list unchanged."""
    if step_type == 'all':
        return steps
    return [step for step in steps if step.step_type == step_type]


def filter_work_steps(steps: List[IntervalStep]) -> List[IntervalStep]:
    """Filter steps excluding warmup and cooldown."""
    return [step for step in steps if step.step_type not in ('warmup', 'cooldown')]


def group_steps_by_type(steps: List[IntervalStep]) -> Dict[str, List[IntervalStep]]:
    groups: Dict[str, List[IntervalStep]] = {step_type: [] for step_type in STEP_TYPES}
    for step in steps:
        groups[step.step_type].append(step)
    return groups


def count_steps_by_type(steps: List[IntervalStep]) -> Dict[str, int]:
    return {step_type: len(group) for step_type, group in group_steps_by_type(steps).items()}


def get_step_index_in_type(step: IntervalStep, steps: List[IntervalStep]) -> int:
    """Position of a step among the steps of its own type, -1 when absent.

    Matches by identity first so two equal-valued steps get distinct indices.
    """
    same_type = filter_steps_by_type(steps, step.step_type)
    for index, candidate in enumerate(same_type):
        if candidate is step:
            return index
    for index, candidate in enumerate(same_type):
        if candidate == step:
            return index
    return -1


def get_step_label(step: IntervalStep, index_within_type: int, locale: Optional[str] = None) -> str:
    """
    Generate a display label for a step.

    Warmup and cooldown get a fixed label; efforts and recoveries are
    numbered within their type ("E1", "R2").

    Args:
        step: Step to label
        index_within_type: 0-based position among steps of the same type
        locale: 'fr' or 'en'; defaults to settings.LABEL_LOCALE

    Returns:
        Display label
    """
    labels = _LABELS.get(locale or settings.LABEL_LOCALE, _LABELS["fr"])
    if step.step_type in ('effort', 'recovery'):
        return f"{labels[step.step_type]}{index_within_type + 1}"
    return labels.get(step.step_type, step.step_type)


def get_step_label_auto(step: IntervalStep, steps: List[IntervalStep], locale: Optional[str] = None) -> str:
    """Generate a display label, finding the index within type automatically."""
    return get_step_label(step, get_step_index_in_type(step, steps), locale)


def clean_interval_steps(steps: Optional[List[IntervalStep]]) -> List[IntervalStep]:
    """Drop any recovery that is the last step or immediately followed by cooldown."""
    if not steps:
        return []

    cleaned = []
    for index, step in enumerate(steps):
        if step.step_type == 'recovery':
            next_step = steps[index + 1] if index + 1 < len(steps) else None
            if next_step is None or next_step.step_type == 'cooldown':
                continue
        cleaned.append(step)
    return cleaned


def steps_from_payload(payload: Optional[List[Dict[str, Any]]]) -> List[IntervalStep]:
    """Build steps from raw form dicts, skipping entries that fail validation."""
    steps: List[IntervalStep] = []
    for index, raw in enumerate(payload or []):
        try:
            steps.append(IntervalStep.model_validate(raw))
        except ValidationError as e:
            logger.warning("Skipping invalid interval step at index %d: %s", index, e)
    return steps


# Summary strings such as "VMA: 8x5'00 R:2'00", "8x5'00/2'00" or "SEUIL: 4x10'"
_STRUCTURE_WITH_RECOVERY = re.compile(r"^([A-Z]+):\s*(\d+)x([\d':]+)\s*R:([\d':]+)$", re.IGNORECASE)
_STRUCTURE_SLASHED = re.compile(r"^(\d+)x([\d':]+)/([\d':]+)$")
_STRUCTURE_EFFORT_ONLY = re.compile(r"^([A-Z]+):\s*(\d+)x([\d':]+)$", re.IGNORECASE)
_MINUTES_SECONDS = re.compile(r"^(\d+)'(\d{0,2})$")


def normalize_duration(duration: str) -> str:
    """Normalize "5'00", "5'" or "5" to "05:00"; "4:30" becomes "04:30"."""
    cleaned = duration.strip().replace('"', "")

    match = _MINUTES_SECONDS.match(cleaned)
    if match:
        return f"{int(match.group(1)):02d}:{int(match.group(2) or 0):02d}"

    parts = cleaned.split(":")
    if len(parts) == 2 and all(part.isdigit() for part in parts):
        return f"{parts[0].zfill(2)}:{parts[1].zfill(2)}"

    if cleaned.isdigit():
        return f"{int(cleaned):02d}:00"
    return cleaned


def generate_interval_structure(
    controls: Optional[IntervalControls],
    steps: Optional[List[IntervalStep]] = None,
) -> str:
    """
    Build a one-line summary of an interval session, e.g. "VMA: 8x05:00 R:02:00".

    Uses the quick-entry controls when they are complete, otherwise the
    first effort/recovery of the step list. Falls back to the bare workout
    type, or "" when there is none.
    """
    if controls is None:
        return ""

    workout_type = controls.workout_type
    if workout_type and controls.repetition_count and controls.effort_duration and controls.recovery_duration:
        return (
            f"{workout_type}: {controls.repetition_count}x{controls.effort_duration}"
            f" R:{controls.recovery_duration}"
        )

    if workout_type and steps:
        groups = group_steps_by_type(steps)
        if groups["effort"]:
            effort_duration = groups["effort"][0].duration or ""
            recovery_duration = (groups["recovery"][0].duration or "") if groups["recovery"] else ""
            count = len(groups["effort"])
            if effort_duration and recovery_duration:
                return f"{workout_type}: {count}x{effort_duration} R:{recovery_duration}"
            if effort_duration:
                return f"{workout_type}: {count}x{effort_duration}"

    return workout_type or ""


def parse_interval_structure(structure: Optional[str]) -> Optional[IntervalControls]:
    """
    Parse a summary string back into quick-entry controls.

    Args:
        structure: "VMA: 8x5'00 R:2'00", "8x5'00/2'00" or "VMA: 8x5'00"

    Returns:
        IntervalControls with workout type upper-cased and durations
        normalized to MM:SS, or None when the text is not recognized
    """
    if not structure or "x" not in structure:
        return None
    structure = structure.strip()

    match = _STRUCTURE_WITH_RECOVERY.match(structure)
    if match:
        workout_type, reps, effort, recovery = match.groups()
        return IntervalControls(
            workout_type=workout_type.upper(),
            repetition_count=int(reps),
            effort_duration=normalize_duration(effort),
            recovery_duration=normalize_duration(recovery),
        )

    match = _STRUCTURE_SLASHED.match(structure)
    if match:
        reps, effort, recovery = match.groups()
        return IntervalControls(
            repetition_count=int(reps),
            effort_duration=normalize_duration(effort),
            recovery_duration=normalize_duration(recovery),
        )

    match = _STRUCTURE_EFFORT_ONLY.match(structure)
    if match:
        workout_type, reps, effort = match.groups()
        return IntervalControls(
            workout_type=workout_type.upper(),
            repetition_count=int(reps),
            effort_duration=normalize_duration(effort),
        )

    logger.debug("Unrecognized interval structure: %r", structure)
    return None
