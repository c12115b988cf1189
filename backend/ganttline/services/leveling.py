"""
Resource leveling.

CPM assumes every task can run in parallel. Real assignees work on one
task at a time, so this pass turns the CPM result into final dates:

- Tasks are visited in one global order sorted by (earliest_start, id).
  Every task lasts at least one working day, so earliest starts strictly
  increase along dependency edges and this order is topological. Within a
  single assignee it is "by earliest start, ties by ascending id".
- A task starts no earlier than the actual end of all its dependencies
  and no earlier than its assignee's next free day.
- Pinned tasks keep their dates. Their intervals are reserved up front so
  auto-placed work of the same assignee flows around them.
- The whole-team assignee is exempt and only waits on dependencies.

Because the walk is global, a delay for one assignee cascades to every
transitive dependent, whoever owns it. Splitting the work per assignee
would lose that, so this stays single-threaded.
"""

from collections import defaultdict
from dataclasses import dataclass
from datetime import date

from ganttline.logging_config import get_logger
from ganttline.models import ScheduleConfiguration, Task
from ganttline.services.calendar import add_working_span, roll_forward
from ganttline.services.critical_path import ProjectAnalysis
from ganttline.services.graph import DependencyGraph

logger = get_logger(__name__)


@dataclass(frozen=True)
class Placement:
    """Final dates for one task; end is exclusive."""
    start: date
    end: date

    def overlaps(self, other: "Placement") -> bool:
        return self.start < other.end and other.start < self.end


def level_resources(
    dag: DependencyGraph,
    analysis: ProjectAnalysis,
    config: ScheduleConfiguration,
    pins: dict[str, date] | None = None,
) -> dict[str, Placement]:
    """
    Assign a start and end date to every task.

    Args:
        dag: Validated dependency graph
        analysis: CPM results, used for the visiting order
        config: Calendar and capacity settings
        pins: task id -> fixed start date for manually placed tasks

    Returns:
        task id -> Placement
    """
    pins = pins or {}
    sentinel = config.whole_team_assignee

    placements: dict[str, Placement] = {}
    reserved: dict[str, list[Placement]] = defaultdict(list)

    for task_id, pin in pins.items():
        task = dag.task(task_id)
        placements[task_id] = Placement(pin, _span_end(pin, task, config))
        if task.assignee != sentinel:
            reserved[task.assignee].append(placements[task_id])

    for windows in reserved.values():
        windows.sort(key=lambda p: (p.start, p.end))

    next_free: dict[str, date] = {}
    order = sorted(
        dag.order,
        key=lambda tid: (analysis.task_analyses[tid].earliest_start, tid),
    )

    for task_id in order:
        if task_id in pins:
            continue

        task = dag.task(task_id)
        dependencies = dag.dependencies(task_id)

        if dependencies:
            ready = max(placements[dep_id].end for dep_id in dependencies)
        else:
            ready = analysis.project_start

        if task.assignee == sentinel:
            start = roll_forward(ready, config.working_days)
            placements[task_id] = Placement(start, _span_end(start, task, config))
            continue

        free = next_free.get(task.assignee, ready)
        placement = _first_fit(max(ready, free), task, reserved[task.assignee], config)
        if placement.start > ready:
            logger.debug(
                f"Leveled {task_id} ({task.assignee}): {ready} -> {placement.start}"
            )

        placements[task_id] = placement
        next_free[task.assignee] = placement.end

    return placements


def _span_end(start: date, task: Task, config: ScheduleConfiguration) -> date:
    return add_working_span(
        start,
        task.estimated_hours,
        config.hours_per_working_day,
        config.working_days,
    )


def _first_fit(
    earliest: date,
    task: Task,
    reserved: list[Placement],
    config: ScheduleConfiguration,
) -> Placement:
    """Earliest placement at or after earliest that avoids every reserved window."""
    start = roll_forward(earliest, config.working_days)
    placement = Placement(start, _span_end(start, task, config))

    moved = True
    while moved:
        moved = False
        for window in reserved:
            if placement.overlaps(window):
                start = roll_forward(window.end, config.working_days)
                placement = Placement(start, _span_end(start, task, config))
                moved = True

    return placement
