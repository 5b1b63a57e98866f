"""
Core task ranking and budget selection.

Every function here is pure: the reference instant ``now`` is passed in
by the caller and the given task collection is never modified.
"""

import logging
import math
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple

from .models import ScheduleSummary, ScoreBreakdown, Task

logger = logging.getLogger(__name__)

# Score weights, summing to 1.0
WEIGHT_PRIORITY = 0.5
WEIGHT_URGENCY = 0.3
WEIGHT_EFFORT = 0.2

NO_DEADLINE_URGENCY = 0.1
OVERDUE_URGENCY = 1.0
DUE_NOW_URGENCY = 0.99

# Normalisation constants: one day of remaining time, one hour of work
URGENCY_HALF_LIFE_HOURS = 24.0
EFFORT_HALF_LIFE_MINUTES = 60.0


def priority_term(task: Task) -> float:
    return task.priority / 5.0


def urgency_term(task: Task, now: datetime) -> float:
    """Deadline proximity in (0, 1]: 1h ~ 0.96, 24h = 0.5, one week = 0.125.

    Remaining time counts in whole hours, so anything due within the next
    hour gets the due-now urgency and urgency never drops as the deadline
    gets closer.
    """
    if task.deadline is None:
        return NO_DEADLINE_URGENCY

    if task.deadline < now:
        return OVERDUE_URGENCY
    hours = math.floor(task.hours_until_deadline(now))
    if hours == 0:
        return DUE_NOW_URGENCY
    return 1.0 / (1.0 + hours / URGENCY_HALF_LIFE_HOURS)


def effort_term(task: Task) -> float:
    """Short-task bias: 15 min = 0.8, 60 min = 0.5, 240 min = 0.2."""
    return 1.0 / (1.0 + task.duration / EFFORT_HALF_LIFE_MINUTES)


def score(task: Task, now: datetime) -> float:
    """
    Importance-under-urgency score of a single task.

    Args:
        task: Task to score
        now: Reference instant

    Returns:
        Weighted score in (0, 1.0], higher is more important
    """
    return (
        WEIGHT_PRIORITY * priority_term(task)
        + WEIGHT_URGENCY * urgency_term(task, now)
        + WEIGHT_EFFORT * effort_term(task)
    )


def score_breakdown(task: Task, now: datetime) -> ScoreBreakdown:
    """Score a task and keep each component for display."""
    p = priority_term(task)
    u = urgency_term(task, now)
    e = effort_term(task)
    weighted = {
        "priority": WEIGHT_PRIORITY * p,
        "urgency": WEIGHT_URGENCY * u,
        "effort": WEIGHT_EFFORT * e,
    }
    return ScoreBreakdown(
        task_id=task.id,
        priority_term=p,
        urgency_term=u,
        effort_term=e,
        weighted=weighted,
        total=score(task, now),
    )


def _rank_key(
    position: int, task: Task, task_score: float, now: datetime
) -> Tuple[int, float, float, int]:
    # overdue first, then closest deadline, then higher score, then input order
    return (
        0 if task.is_overdue(now) else 1,
        task.hours_until_deadline(now),
        -task_score,
        position,
    )


def rank_with_scores(
    tasks: Optional[Iterable[Task]], now: datetime
) -> Tuple[List[Task], Dict[int, float]]:
    """
    Rank pending tasks and return the scores used for the ordering.

    Args:
        tasks: Task snapshot, may be None or empty
        now: Reference instant, fixed for the whole call

    Returns:
        Tuple of (tasks in execution order, score per task id)
    """
    if not tasks:
        return [], {}

    pending = [task for task in tasks if not task.completed]
    if not pending:
        return [], {}

    # Scores are computed once so a single call never sees two values for a task
    scores = [score(task, now) for task in pending]
    order = sorted(
        range(len(pending)),
        key=lambda i: _rank_key(i, pending[i], scores[i], now),
    )

    logger.debug(f"Ranked {len(pending)} pending tasks at {now.isoformat()}")
    return [pending[i] for i in order], {task.id: scores[i] for i, task in enumerate(pending)}


def rank(tasks: Optional[Iterable[Task]], now: datetime) -> List[Task]:
    """
    Order pending tasks for execution.

    Overdue tasks come first, then tasks by closest deadline (tasks without
    a deadline last), then by score, then by input position.

    Args:
        tasks: Task snapshot, may be None or empty
        now: Reference instant

    Returns:
        New list of pending tasks in execution order
    """
    ranked, _ = rank_with_scores(tasks, now)
    return ranked


def select_from_ranked(ranked: List[Task], budget_minutes: int) -> List[Task]:
    """Greedy single pass over an already ranked list.

    A task that does not fit is skipped and the scan continues, so a later
    shorter task may still be picked.
    """
    if budget_minutes <= 0:
        return []

    selected = []
    accumulated = 0
    for task in ranked:
        if accumulated + task.duration <= budget_minutes:
            selected.append(task)
            accumulated += task.duration

    logger.debug(
        f"Selected {len(selected)}/{len(ranked)} tasks, "
        f"{accumulated} of {budget_minutes} minutes"
    )
    return selected


def select_within_budget(
    tasks: Optional[Iterable[Task]], now: datetime, budget_minutes: int
) -> List[Task]:
    """
    Pick ranked tasks whose total duration fits the budget.

    Args:
        tasks: Task snapshot
        now: Reference instant
        budget_minutes: Available minutes, non-positive means nothing fits

    Returns:
        Selected tasks in ranked order
    """
    if budget_minutes <= 0:
        return []
    return select_from_ranked(rank(tasks, now), budget_minutes)


def sort_by_deadline(tasks: Optional[Iterable[Task]]) -> List[Task]:
    """Earliest deadline first, tasks without a deadline last. Stable."""
    if not tasks:
        return []
    return sorted(
        tasks,
        key=lambda task: (task.deadline is None, task.deadline or datetime.min),
    )


def total_duration(schedule: Optional[Iterable[Task]]) -> int:
    if not schedule:
        return 0
    return sum(task.duration for task in schedule)


def is_feasible(schedule: Optional[Iterable[Task]], budget_minutes: int) -> bool:
    return total_duration(schedule) <= budget_minutes


def summarize(tasks: Optional[Iterable[Task]], now: datetime) -> ScheduleSummary:
    """Counts of total, completed, pending and overdue tasks."""
    tasks = list(tasks or [])
    completed = sum(1 for task in tasks if task.completed)
    overdue = sum(1 for task in tasks if task.is_overdue(now))

    completion_rate = 0.0
    if tasks:
        completion_rate = completed / len(tasks) * 100

    return ScheduleSummary(
        total_tasks=len(tasks),
        completed_tasks=completed,
        pending_tasks=len(tasks) - completed,
        overdue_tasks=overdue,
        completion_rate=completion_rate,
    )
