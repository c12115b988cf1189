"""
Manual scheduling overrides.

A task is pinned when:
- it has a manual_start (always wins), or
- auto scheduling is off for the whole project and the task declares a
  week_number; it is then pinned to the first working day of that week.

Pinned tasks never move. Their dependents are placed after the pinned
task's actual end, and the CPM values they still carry are advisory only.
Problems a pin makes unavoidable are reported as conflicts, not repaired.
"""

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Literal

from ganttline.logging_config import get_logger
from ganttline.models import ScheduleConfiguration, Task
from ganttline.services.calendar import iso_week_start, roll_forward
from ganttline.services.graph import DependencyGraph
from ganttline.services.leveling import Placement

logger = get_logger(__name__)

ConflictKind = Literal["dependency", "overbooked"]


@dataclass(frozen=True)
class ScheduleConflict:
    """
    A constraint broken by a pinned task.

    dependency: task_id is pinned to start before other_task_id ends.
    overbooked: pinned tasks task_id and other_task_id overlap for one assignee.
    """
    kind: ConflictKind
    task_id: str
    other_task_id: str


def resolve_pins(tasks: Iterable[Task], config: ScheduleConfiguration) -> dict[str, date]:
    """Return task id -> pinned start date for every manually placed task."""
    pins: dict[str, date] = {}

    for task in tasks:
        if task.manual_start is not None:
            pins[task.id] = task.manual_start
        elif not config.auto_scheduling:
            if task.week_number is None:
                logger.debug(f"Task {task.id} has no week number, placing by dependencies")
                continue
            week_start = iso_week_start(task.week_number, config.project_start_date)
            pins[task.id] = roll_forward(
                max(week_start, config.project_start_date),
                config.working_days,
            )

    return pins


def find_conflicts(
    dag: DependencyGraph,
    placements: dict[str, Placement],
    pins: dict[str, date],
    config: ScheduleConfiguration,
) -> list[ScheduleConflict]:
    """Detect dependency and double-booking violations caused by pins."""
    conflicts: list[ScheduleConflict] = []

    for task_id in dag.order:
        if task_id not in pins:
            continue
        for dep_id in dag.dependencies(task_id):
            if placements[dep_id].end > placements[task_id].start:
                conflicts.append(ScheduleConflict("dependency", task_id, dep_id))

    pinned_ids = sorted(pins)
    for i, first in enumerate(pinned_ids):
        assignee = dag.task(first).assignee
        if assignee == config.whole_team_assignee:
            continue
        for second in pinned_ids[i + 1:]:
            if dag.task(second).assignee != assignee:
                continue
            if placements[first].overlaps(placements[second]):
                conflicts.append(ScheduleConflict("overbooked", first, second))

    for conflict in conflicts:
        logger.warning(
            f"Pinned schedule conflict ({conflict.kind}): "
            f"{conflict.task_id} vs {conflict.other_task_id}"
        )

    return conflicts
