"""
Team workload summary.

Aggregates a computed schedule per assignee and per phase for the team
summary view: how many tasks and hours each member carries, how many
working days they are busy, and how the hours fall across ISO weeks.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date

from ganttline.models import ScheduleConfiguration
from ganttline.services.calendar import working_days_between
from ganttline.services.scheduler import ScheduledTask, ScheduleResult


@dataclass
class AssigneeWorkload:
    assignee: str
    is_whole_team: bool
    task_count: int = 0
    total_hours: float = 0.0
    busy_days: int = 0
    first_start: date | None = None
    last_end: date | None = None
    hours_by_week: dict[int, float] = field(default_factory=dict)
    utilization: float = 0.0  # Estimated hours / capacity of busy days


@dataclass
class PhaseWorkload:
    phase: int | None
    task_count: int = 0
    total_hours: float = 0.0


@dataclass
class WorkloadSummary:
    total_tasks: int
    total_hours: float
    assignees: list[AssigneeWorkload]
    phases: list[PhaseWorkload]


def summarize_workload(result: ScheduleResult, config: ScheduleConfiguration) -> WorkloadSummary:
    """Build per-assignee and per-phase totals from a schedule."""
    by_assignee: dict[str, list[ScheduledTask]] = defaultdict(list)
    phases: dict[int | None, PhaseWorkload] = {}

    for scheduled in result.tasks:
        task = scheduled.task
        by_assignee[task.assignee].append(scheduled)

        phase = phases.setdefault(task.phase, PhaseWorkload(phase=task.phase))
        phase.task_count += 1
        phase.total_hours += task.estimated_hours

    assignees = [
        _assignee_workload(name, items, config)
        for name, items in by_assignee.items()
    ]
    assignees.sort(key=lambda w: (w.is_whole_team, w.assignee))

    return WorkloadSummary(
        total_tasks=len(result.tasks),
        total_hours=sum(s.task.estimated_hours for s in result.tasks),
        assignees=assignees,
        phases=sorted(phases.values(), key=lambda p: (p.phase is None, p.phase or 0)),
    )


def _assignee_workload(
    assignee: str,
    items: list[ScheduledTask],
    config: ScheduleConfiguration,
) -> AssigneeWorkload:
    workload = AssigneeWorkload(
        assignee=assignee,
        is_whole_team=assignee == config.whole_team_assignee,
    )

    hours_by_week: dict[int, float] = defaultdict(float)
    for scheduled in items:
        workload.task_count += 1
        workload.total_hours += scheduled.task.estimated_hours
        workload.busy_days += working_days_between(
            scheduled.scheduled_start, scheduled.scheduled_end, config.working_days
        )
        hours_by_week[scheduled.week_number] += scheduled.task.estimated_hours

    workload.first_start = min(s.scheduled_start for s in items)
    workload.last_end = max(s.scheduled_end for s in items)
    workload.hours_by_week = dict(sorted(hours_by_week.items()))

    capacity = workload.busy_days * config.hours_per_working_day
    workload.utilization = workload.total_hours / capacity if capacity else 0.0

    return workload
