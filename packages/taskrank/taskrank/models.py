"""
Data models for task ranking using Pydantic.
"""

import math
import threading
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


PRIORITY_LEVELS = {
    5: "Critical",
    4: "High",
    3: "Medium",
    2: "Low",
    1: "Very Low",
}


class Task(BaseModel):
    """Task to be ranked. Immutable once built."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., ge=1, description="Unique task identifier")
    title: str = Field(..., min_length=1, description="Task title")
    priority: int = Field(3, ge=1, le=5, description="Priority level (1=lowest, 5=highest)")
    deadline: Optional[datetime] = Field(None, description="Deadline, None when the task has none")
    duration: int = Field(..., gt=0, description="Estimated work in minutes")
    completed: bool = Field(False, description="Whether the task is done")

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Task title cannot be empty")
        return v

    @property
    def priority_level(self) -> str:
        """Human readable priority label."""
        return PRIORITY_LEVELS.get(self.priority, "Unknown")

    def hours_until_deadline(self, now: datetime) -> float:
        """Fractional hours left before the deadline, negative once passed.

        Tasks without a deadline have infinite time left.
        """
        if self.deadline is None:
            return math.inf
        return (self.deadline - now).total_seconds() / 3600.0

    def is_overdue(self, now: datetime) -> bool:
        if self.deadline is None or self.completed:
            return False
        return self.deadline < now


class TaskIdAllocator:
    """Hands out increasing task ids.

    Owned by whoever creates tasks; ranking never looks at ids.
    """

    def __init__(self, start: int = 1):
        self._next = start
        self._lock = threading.Lock()

    def allocate(self) -> int:
        with self._lock:
            task_id = self._next
            self._next += 1
            return task_id

    def observe(self, task_id: int) -> None:
        """Make sure future ids stay above an id loaded from elsewhere."""
        with self._lock:
            if task_id >= self._next:
                self._next = task_id + 1


class ScoreBreakdown(BaseModel):
    """Per-component view of a task score."""
    task_id: int = Field(..., description="Task identifier")
    priority_term: float = Field(..., description="priority / 5")
    urgency_term: float = Field(..., description="Deadline proximity term")
    effort_term: float = Field(..., description="Short-task bias term")
    weighted: Dict[str, float] = Field(default_factory=dict, description="Weighted contributions")
    total: float = Field(..., description="Combined score")


class ScheduleSummary(BaseModel):
    """Counts over a task snapshot at a reference instant."""
    total_tasks: int = Field(0, ge=0)
    completed_tasks: int = Field(0, ge=0)
    pending_tasks: int = Field(0, ge=0)
    overdue_tasks: int = Field(0, ge=0)
    completion_rate: float = Field(0.0, ge=0.0, le=100.0, description="Completed share in percent")


class ScheduleResult(BaseModel):
    """Result of a ranking or budget selection."""
    success: bool = Field(..., description="Whether ranking succeeded")
    tasks: List[Task] = Field(default_factory=list, description="Tasks in execution order")
    scores: Dict[int, float] = Field(default_factory=dict, description="Score per task id")
    skipped_task_ids: List[int] = Field(
        default_factory=list, description="Pending tasks left out by the budget"
    )
    total_duration: int = Field(0, ge=0, description="Total minutes of the returned tasks")
    budget_minutes: Optional[int] = Field(None, description="Budget applied, if any")
    feasible: bool = Field(True, description="Whether the result fits the budget")
    status: str = Field("", description="RANKED, SELECTED, NO_TASKS or ERROR: ...")


class ScheduleRequest(BaseModel):
    """Request model for the ranking API."""
    tasks: List[Task] = Field(default_factory=list, description="Task snapshot to rank")
    now: Optional[datetime] = Field(None, description="Reference instant, defaults to the current time")
    budget_minutes: Optional[int] = Field(None, description="Time budget in minutes")
    use_budget: bool = Field(False, description="Restrict the result to the budget")

    @field_validator("tasks")
    @classmethod
    def unique_ids(cls, v: List[Task]) -> List[Task]:
        seen = set()
        for task in v:
            if task.id in seen:
                raise ValueError(f"Duplicate task id: {task.id}")
            seen.add(task.id)
        return v


class ScheduleResponse(BaseModel):
    """Response model for the ranking API."""
    result: ScheduleResult = Field(..., description="Ranking result")
    summary: ScheduleSummary = Field(default_factory=ScheduleSummary, description="Snapshot counts")
    request_id: Optional[str] = Field(None, description="Request identifier")
    generated_at: datetime = Field(default_factory=datetime.now, description="Response generation time")
