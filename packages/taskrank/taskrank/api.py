"""
API wrapper functions for task ranking.
"""

import logging
import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from .config import get_settings
from .core import is_feasible, rank_with_scores, select_from_ranked, summarize, total_duration
from .errors import InvalidRequestError, SchedulingError
from .models import (
    ScheduleRequest,
    ScheduleResponse,
    ScheduleResult,
    ScheduleSummary,
    Task,
    TaskIdAllocator,
)

logger = logging.getLogger(__name__)

COMPLETED_KEYS = ("completed", "is_completed", "isCompleted")


def rank_tasks_api(request_data: Dict[str, Any]) -> Dict[str, Any]:
    """
    API wrapper for ranking and budget selection.

    Args:
        request_data: Dictionary with "tasks" and optional "now",
            "budget_minutes" and "use_budget"

    Returns:
        Dictionary containing schedule response data. Invalid input yields
        a result with success=False instead of raising.
    """
    request_id = str(uuid.uuid4())
    try:
        error = validate_schedule_request(request_data)
        if error:
            raise InvalidRequestError(error)

        allocator = TaskIdAllocator()
        for task_data in request_data["tasks"]:
            if task_data.get("id") is not None:
                allocator.observe(int(task_data["id"]))
        tasks = [create_task_from_dict(t, allocator) for t in request_data["tasks"]]

        request = ScheduleRequest(
            tasks=tasks,
            now=request_data.get("now"),
            budget_minutes=request_data.get("budget_minutes"),
            use_budget=request_data.get("use_budget", False),
        )
        # Sampled once so every task in this request sees the same instant
        now = request.now or datetime.now()
        logger.info(f"Ranking request {request_id}: {len(request.tasks)} tasks")

        result = build_schedule_result(request, now)
        response = ScheduleResponse(
            result=result,
            summary=summarize(request.tasks, now),
            request_id=request_id,
            generated_at=datetime.now(),
        )
        return response.model_dump(mode="json")

    except (SchedulingError, ValueError, TypeError) as e:
        logger.warning(f"Rejected ranking request {request_id}: {e}")
        error_result = ScheduleResult(success=False, status=f"ERROR: {str(e)}")
        response = ScheduleResponse(
            result=error_result,
            summary=ScheduleSummary(),
            request_id=request_id,
            generated_at=datetime.now(),
        )
        return response.model_dump(mode="json")


def build_schedule_result(request: ScheduleRequest, now: datetime) -> ScheduleResult:
    """Rank the request's tasks and apply its budget when asked to."""
    ranked, scores = rank_with_scores(request.tasks, now)

    budget = request.budget_minutes
    if request.use_budget and budget is None:
        budget = get_settings().default_budget_minutes

    if not ranked:
        return ScheduleResult(
            success=True,
            budget_minutes=budget,
            feasible=is_feasible([], budget) if budget is not None else True,
            status="NO_TASKS",
        )

    if request.use_budget:
        chosen = select_from_ranked(ranked, budget)
        chosen_ids = {task.id for task in chosen}
        skipped = [task.id for task in ranked if task.id not in chosen_ids]
        status = "SELECTED"
    else:
        chosen = ranked
        skipped = []
        status = "RANKED"

    return ScheduleResult(
        success=True,
        tasks=chosen,
        scores=scores,
        skipped_task_ids=skipped,
        total_duration=total_duration(chosen),
        budget_minutes=budget,
        feasible=is_feasible(chosen, budget) if budget is not None else True,
        status=status,
    )


def create_task_from_dict(
    task_data: Dict[str, Any], allocator: Optional[TaskIdAllocator] = None
) -> Task:
    """
    Create Task instance from dictionary data.

    Args:
        task_data: Dictionary containing task data
        allocator: Source of ids for tasks that arrive without one

    Returns:
        Task instance

    Raises:
        InvalidRequestError: If the data is not a mapping, has no id and no
            allocator was given, or carries an unparseable deadline
    """
    if not isinstance(task_data, dict):
        raise InvalidRequestError("Task data must be a dictionary")

    task_id = task_data.get("id")
    if task_id is None:
        if allocator is None:
            raise InvalidRequestError("Task id is required", field="id")
        task_id = allocator.allocate()
    elif allocator is not None:
        allocator.observe(int(task_id))

    deadline = task_data.get("deadline")
    if isinstance(deadline, str):
        try:
            deadline = datetime.fromisoformat(deadline) if deadline.strip() else None
        except ValueError:
            raise InvalidRequestError(f"Invalid deadline: {deadline}", field="deadline")
    elif deadline is not None and not isinstance(deadline, datetime):
        raise InvalidRequestError(f"Invalid deadline: {deadline!r}", field="deadline")

    completed = False
    for key in COMPLETED_KEYS:
        if key in task_data:
            completed = task_data[key]
            break

    return Task(
        id=task_id,
        title=task_data.get("title", ""),
        priority=task_data.get("priority", 3),
        deadline=deadline,
        duration=task_data.get("duration"),
        completed=completed,
    )


def validate_schedule_request(request_data: Dict[str, Any]) -> Optional[str]:
    """
    Validate ranking request data.

    Args:
        request_data: Dictionary containing request data

    Returns:
        Error message if validation fails, None if valid
    """
    if not isinstance(request_data, dict):
        return "Request must be a dictionary"

    if "tasks" not in request_data:
        return "Missing required field: tasks"

    tasks = request_data["tasks"]
    if not isinstance(tasks, list):
        return "Tasks must be a list"

    for i, task in enumerate(tasks):
        if not isinstance(task, dict):
            return f"Task {i} must be a dictionary"

        for field in ("title", "duration"):
            if field not in task:
                return f"Task {i} missing required field: {field}"

    budget = request_data.get("budget_minutes")
    if budget is not None and (isinstance(budget, bool) or not isinstance(budget, int)):
        return "budget_minutes must be an integer"

    if not isinstance(request_data.get("use_budget", False), bool):
        return "use_budget must be a boolean"

    return None
