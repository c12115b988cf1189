"""
What-If Simulation Service.

Lets users try changes to tasks without keeping them, showing the ripple
effect on the schedule: which tasks move, how far the project end shifts,
and how the critical path changes.
"""

from dataclasses import dataclass
from datetime import date
from typing import Iterable

from ganttline.logging_config import get_logger
from ganttline.models import ScheduleConfiguration, Task
from ganttline.services.scheduler import ScheduleResult, schedule_tasks

logger = get_logger(__name__)


@dataclass
class TaskChange:
    """A hypothetical change to a task."""
    task_id: str
    estimated_hours: float | None = None
    manual_start: date | None = None
    clear_manual_start: bool = False  # Unpin the task


@dataclass
class TaskImpact:
    """The impact of simulation on a single task."""
    task_id: str
    original_start: date
    original_end: date
    simulated_start: date
    simulated_end: date
    delta_days: int  # Positive = delayed, negative = earlier


@dataclass
class SimulationResult:
    """Complete result of a what-if simulation."""
    original_end_date: date
    simulated_end_date: date
    impact_days: int  # How many calendar days the project end moved
    affected_tasks: list[TaskImpact]
    newly_critical: list[str]
    no_longer_critical: list[str]
    total_tasks: int
    skipped_changes: list[str]  # Task ids that matched nothing


def apply_changes(tasks: list[Task], changes: Iterable[TaskChange]) -> tuple[list[Task], list[str]]:
    """
    Return a copy of tasks with the changes applied, plus unknown task ids.

    The input tasks are never modified.
    """
    changes_map = {c.task_id: c for c in changes}
    known_ids = {task.id for task in tasks}

    skipped = []
    for task_id in changes_map:
        if task_id not in known_ids:
            logger.warning(f"Task {task_id} not found in task set, skipping")
            skipped.append(task_id)

    changed = []
    for task in tasks:
        change = changes_map.get(task.id)
        if change is None:
            changed.append(task)
            continue

        update: dict = {}
        if change.estimated_hours is not None:
            update["estimated_hours"] = change.estimated_hours
        if change.clear_manual_start:
            update["manual_start"] = None
        elif change.manual_start is not None:
            update["manual_start"] = change.manual_start
        changed.append(task.model_copy(update=update))

    return changed, skipped


def simulate_changes(
    tasks: Iterable[Task],
    config: ScheduleConfiguration,
    changes: list[TaskChange],
) -> SimulationResult:
    """
    Simulate changes to tasks and calculate the ripple effect.

    Both schedules are computed in memory. Invalid simulated input (for
    example a change to zero hours) raises the same errors as scheduling.
    """
    task_list = list(tasks)
    simulated_tasks, skipped = apply_changes(task_list, changes)

    original = schedule_tasks(task_list, config)
    simulated = schedule_tasks(simulated_tasks, config)

    affected_tasks = _diff(original, simulated)
    original_critical = set(original.critical_path)
    simulated_critical = set(simulated.critical_path)

    result = SimulationResult(
        original_end_date=original.project_end,
        simulated_end_date=simulated.project_end,
        impact_days=(simulated.project_end - original.project_end).days,
        affected_tasks=affected_tasks,
        newly_critical=[t for t in simulated.critical_path if t not in original_critical],
        no_longer_critical=[t for t in original.critical_path if t not in simulated_critical],
        total_tasks=len(task_list),
        skipped_changes=skipped,
    )

    logger.info(
        f"Simulated {len(changes)} changes: {len(affected_tasks)} tasks moved, "
        f"project end {result.impact_days:+d} days"
    )
    return result


def _diff(original: ScheduleResult, simulated: ScheduleResult) -> list[TaskImpact]:
    """Tasks whose placement differs, in input order."""
    affected = []
    for before, after in zip(original.tasks, simulated.tasks):
        if (before.scheduled_start, before.scheduled_end) == (after.scheduled_start, after.scheduled_end):
            continue
        affected.append(TaskImpact(
            task_id=before.id,
            original_start=before.scheduled_start,
            original_end=before.scheduled_end,
            simulated_start=after.scheduled_start,
            simulated_end=after.scheduled_end,
            delta_days=(after.scheduled_end - before.scheduled_end).days,
        ))
    return affected
