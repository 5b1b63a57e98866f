"""
Task Ranking Package

Deterministic ranking of tasks by deadline, priority and duration, with
greedy selection inside a time budget.
"""

from .api import rank_tasks_api
from .core import (
    is_feasible,
    rank,
    score,
    score_breakdown,
    select_within_budget,
    sort_by_deadline,
    summarize,
    total_duration,
)
from .models import ScheduleResult, ScheduleSummary, Task, TaskIdAllocator

__version__ = "0.1.0"
__all__ = [
    "rank",
    "select_within_budget",
    "score",
    "score_breakdown",
    "sort_by_deadline",
    "total_duration",
    "is_feasible",
    "summarize",
    "rank_tasks_api",
    "Task",
    "TaskIdAllocator",
    "ScheduleResult",
    "ScheduleSummary",
]
