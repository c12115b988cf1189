"""
Schedule computation entry point.

schedule_tasks() is a pure function from (tasks, configuration) to a
ScheduleResult:

1. Build and validate the dependency graph (fails closed on bad input)
2. Resolve manual pins and check the schedule fits the calendar
3. CPM forward and backward passes
4. Resource leveling, with pins as fixed points
5. Annotate tasks and report conflicts caused by pins

Nothing is cached between calls; the same inputs always give the same output.
"""

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Literal, Optional

from ganttline.exceptions import InvalidDurationError
from ganttline.logging_config import get_logger
from ganttline.models import ScheduleConfiguration, Task
from ganttline.services.calendar import (
    ONE_DAY,
    iso_week,
    roll_back,
    working_day_count,
    working_days_between,
)
from ganttline.services.critical_path import analyze_critical_path
from ganttline.services.graph import DependencyGraph, build_dependency_graph
from ganttline.services.leveling import level_resources
from ganttline.services.overrides import ScheduleConflict, find_conflicts, resolve_pins

logger = get_logger(__name__)

TaskStatus = Literal["past", "current", "future"]


@dataclass(frozen=True)
class ScheduledTask:
    """A task with its CPM window and final placement."""
    task: Task
    # CPM results
    earliest_start: date
    earliest_finish: date
    latest_start: date
    latest_finish: date
    slack: int  # Working days, 0 = critical
    is_critical: bool
    # Final placement (end is exclusive)
    scheduled_start: date
    scheduled_end: date
    # Display helpers
    duration_days: int
    is_manual: bool
    start_variance: int  # Working days from earliest_start to scheduled_start
    week_number: int
    last_working_day: date
    dependent_ids: list[str]
    status: Optional[TaskStatus] = None

    @property
    def id(self) -> str:
        return self.task.id


@dataclass(frozen=True)
class ScheduleResult:
    """Complete schedule for a task set."""
    tasks: list[ScheduledTask]  # Same order as the input
    project_start: date
    project_end: date  # Max scheduled_end
    cpm_project_end: date  # Max earliest_finish, ignoring resources and pins
    critical_path: list[str]  # Topological order
    conflicts: list[ScheduleConflict]

    def by_id(self, task_id: str) -> ScheduledTask:
        for scheduled in self.tasks:
            if scheduled.id == task_id:
                return scheduled
        raise KeyError(task_id)


def schedule_tasks(
    tasks: Iterable[Task],
    config: ScheduleConfiguration,
) -> ScheduleResult:
    """
    Compute the schedule for a task snapshot.

    Raises:
        DuplicateTaskError, InvalidDurationError, SelfDependencyError,
        DanglingDependencyError, CycleDetectedError: invalid input; no
        partial schedule is produced. InvalidDurationError also when the
        estimates would run the schedule past the last representable date.
    """
    task_list = list(tasks)
    dag = build_dependency_graph(task_list)
    pins = resolve_pins(task_list, config)
    _check_horizon(dag, config, pins)

    analysis = analyze_critical_path(dag, config)
    placements = level_resources(dag, analysis, config, pins)
    conflicts = find_conflicts(dag, placements, pins, config)

    scheduled: list[ScheduledTask] = []
    for task in task_list:
        cpm = analysis.task_analyses[task.id]
        placement = placements[task.id]

        scheduled.append(ScheduledTask(
            task=task,
            earliest_start=cpm.earliest_start,
            earliest_finish=cpm.earliest_finish,
            latest_start=cpm.latest_start,
            latest_finish=cpm.latest_finish,
            slack=cpm.slack,
            is_critical=cpm.is_critical,
            scheduled_start=placement.start,
            scheduled_end=placement.end,
            duration_days=working_day_count(task.estimated_hours, config.hours_per_working_day),
            is_manual=task.id in pins,
            start_variance=working_days_between(
                cpm.earliest_start, placement.start, config.working_days
            ),
            week_number=iso_week(placement.start),
            last_working_day=roll_back(placement.end - ONE_DAY, config.working_days),
            dependent_ids=dag.dependents(task.id),
            status=_status(placement.start, placement.end, config.today),
        ))

    project_end = max((p.end for p in placements.values()), default=analysis.project_start)

    logger.info(
        f"Scheduled {len(scheduled)} tasks: {analysis.project_start} -> {project_end}, "
        f"{len(analysis.critical_path_task_ids)} critical, {len(pins)} pinned, "
        f"{len(conflicts)} conflicts"
    )

    return ScheduleResult(
        tasks=scheduled,
        project_start=analysis.project_start,
        project_end=project_end,
        cpm_project_end=analysis.project_end,
        critical_path=analysis.critical_path_task_ids,
        conflicts=conflicts,
    )


def _check_horizon(
    dag: DependencyGraph,
    config: ScheduleConfiguration,
    pins: dict[str, date],
) -> None:
    """
    Reject estimates whose combined span cannot fit before date.max.

    Serializing every task after the latest anchor (project start or pin)
    bounds any placement the scheduler can produce.
    """
    if not len(dag):
        return
    anchor = max([config.project_start_date, *pins.values()])
    days = {
        task_id: dag.task(task_id).estimated_hours / config.hours_per_working_day
        for task_id in dag.order
    }
    weeks = (sum(days.values()) + len(days)) / len(config.working_days)
    if (weeks + 2) * 7 < (date.max - anchor).days:
        return

    worst = max(dag.order, key=lambda task_id: days[task_id])
    logger.error(f"Task estimates overflow the calendar, largest is {worst}")
    raise InvalidDurationError(
        worst,
        dag.task(worst).estimated_hours,
        reason="Estimated hours run the schedule past the last supported date",
    )


def _status(start: date, end: date, today: Optional[date]) -> Optional[TaskStatus]:
    """Where a task sits relative to today, for status coloring."""
    if today is None:
        return None
    if end <= today:
        return "past"
    if start <= today:
        return "current"
    return "future"
