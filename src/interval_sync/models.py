"""Data models for interval workout steps."""
from dataclasses import dataclass
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

StepType = Literal['warmup', 'effort', 'recovery', 'cooldown']
EntryMode = Literal['quick', 'detailed']

# Which branch of the reconciler produced a result
SyncAction = Literal['noop', 'disabled', 'cleared', 'generated', 'grown', 'shrunk', 'synced']


class IntervalStep(BaseModel):
    """One row of a structured workout."""
    step_number: int = Field(default=1, alias="stepNumber")  # Positional, re-assigned after every structural change
    step_type: StepType = Field(..., alias="stepType")
    duration: Optional[str] = ""
    distance: Optional[float] = None  # km
    pace: Optional[str] = ""
    hr: Optional[float] = None  # bpm; lap averages can be fractional
    hr_range: Optional[str] = Field(default=None, alias="hrRange")

    class Config:
        extra = "ignore"  # Ignore extra fields like 'id' from UI
        populate_by_name = True

    def is_manually_detailed(self) -> bool:
        """True when pace or heart rate was filled in by hand or by an import."""
        return bool(self.pace) or self.hr is not None


class IntervalControls(BaseModel):
    """
    The quick-entry controls of an interval form.

    These are the "last known good" target values broadcast to every
    effort/recovery step that has not been manually detailed. Empty strings
    and nulls mean "do not overwrite that field".
    """
    repetition_count: Optional[int] = Field(default=None, alias="repetitionCount")
    effort_duration: Optional[str] = Field(default=None, alias="effortDuration")
    effort_distance: Optional[float] = Field(default=None, alias="effortDistance")
    recovery_duration: Optional[str] = Field(default=None, alias="recoveryDuration")
    recovery_distance: Optional[float] = Field(default=None, alias="recoveryDistance")
    workout_type: Optional[str] = Field(default=None, alias="workoutType")  # e.g. "VMA", "SEUIL"; summary text only

    class Config:
        extra = "ignore"
        populate_by_name = True

    @property
    def count(self) -> int:
        """Repetition count with null/absent read as 0."""
        return self.repetition_count or 0


@dataclass(frozen=True)
class SyncState:
    """Remembered repetition count, carried between evaluations by the caller."""
    previous_count: int = 0


@dataclass
class ReconcileResult:
    """Outcome of a single reconciliation pass."""
    state: SyncState
    steps: Optional[List[IntervalStep]] = None  # Replacement sequence, None when nothing is emitted
    mode: Optional[EntryMode] = None
    action: SyncAction = 'noop'

    @property
    def emitted(self) -> bool:
        return self.steps is not None
