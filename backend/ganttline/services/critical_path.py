"""
Critical Path Method (CPM) implementation.

Calculates:
- Forward pass: Earliest Start (ES), Earliest Finish (EF)
- Backward pass: Latest Start (LS), Latest Finish (LF)
- Slack: working days between ES and LS
- Critical Path: tasks whose slack is within the configured tolerance

Finish dates are exclusive (see services.calendar), so a dependent's ES is
exactly its latest dependency's EF with no extra day added.
CPM assumes unlimited resources; leveling happens afterwards.
"""

from dataclasses import dataclass
from datetime import date

from ganttline.logging_config import get_logger
from ganttline.models import ScheduleConfiguration
from ganttline.services.calendar import (
    add_working_span,
    roll_forward,
    subtract_working_span,
    working_days_between,
)
from ganttline.services.graph import DependencyGraph

logger = get_logger(__name__)


@dataclass(frozen=True)
class TaskAnalysis:
    """CPM results for a single task."""
    task_id: str
    # Forward pass results
    earliest_start: date
    earliest_finish: date
    # Backward pass results
    latest_start: date
    latest_finish: date
    # Slack in working days (0 = critical)
    slack: int
    is_critical: bool


@dataclass(frozen=True)
class ProjectAnalysis:
    """Complete CPM analysis for a task set."""
    project_start: date
    project_end: date  # Max earliest finish (exclusive)
    task_analyses: dict[str, TaskAnalysis]
    critical_path_task_ids: list[str]  # In topological order


def analyze_critical_path(
    dag: DependencyGraph,
    config: ScheduleConfiguration,
) -> ProjectAnalysis:
    """
    Perform complete CPM analysis on a validated dependency graph.

    Returns ES/EF/LS/LF, slack and critical flags for every task.
    """
    project_start = roll_forward(config.project_start_date, config.working_days)

    if not len(dag):
        return ProjectAnalysis(
            project_start=project_start,
            project_end=project_start,
            task_analyses={},
            critical_path_task_ids=[],
        )

    earliest = forward_pass(dag, config, project_start)
    project_end = max(finish for _, finish in earliest.values())
    latest = backward_pass(dag, config, project_end)

    # =========================================================================
    # Calculate Slack and Identify Critical Path
    # =========================================================================
    task_analyses: dict[str, TaskAnalysis] = {}
    critical_path_ids: list[str] = []

    for task_id in dag.order:
        es, ef = earliest[task_id]
        ls, lf = latest[task_id]

        slack = working_days_between(es, ls, config.working_days)
        is_critical = slack <= config.critical_slack_tolerance

        if is_critical:
            critical_path_ids.append(task_id)

        task_analyses[task_id] = TaskAnalysis(
            task_id=task_id,
            earliest_start=es,
            earliest_finish=ef,
            latest_start=ls,
            latest_finish=lf,
            slack=slack,
            is_critical=is_critical,
        )

    logger.debug(
        f"CPM: {len(critical_path_ids)}/{len(dag)} tasks critical, "
        f"project {project_start} -> {project_end}"
    )

    return ProjectAnalysis(
        project_start=project_start,
        project_end=project_end,
        task_analyses=task_analyses,
        critical_path_task_ids=critical_path_ids,
    )


def forward_pass(
    dag: DependencyGraph,
    config: ScheduleConfiguration,
    project_start: date,
) -> dict[str, tuple[date, date]]:
    """
    Earliest (start, finish) for every task.

    Roots start on the project start; every other task starts when its
    last dependency finishes. Ties need no special handling: the shared
    finish date is used directly.
    """
    earliest: dict[str, tuple[date, date]] = {}

    for task_id in dag.order:
        task = dag.task(task_id)
        dependencies = dag.dependencies(task_id)

        if not dependencies:
            es = project_start
        else:
            es = max(earliest[dep_id][1] for dep_id in dependencies)

        ef = add_working_span(
            es,
            task.estimated_hours,
            config.hours_per_working_day,
            config.working_days,
        )
        earliest[task_id] = (es, ef)

    return earliest


def backward_pass(
    dag: DependencyGraph,
    config: ScheduleConfiguration,
    project_end: date,
) -> dict[str, tuple[date, date]]:
    """
    Latest (start, finish) for every task.

    Sinks must finish by project_end; every other task must finish before
    its earliest-latest dependent has to start.
    """
    latest: dict[str, tuple[date, date]] = {}

    for task_id in reversed(dag.order):
        task = dag.task(task_id)
        dependents = dag.dependents(task_id)

        if not dependents:
            lf = project_end
        else:
            lf = min(latest[succ_id][0] for succ_id in dependents)

        ls = subtract_working_span(
            lf,
            task.estimated_hours,
            config.hours_per_working_day,
            config.working_days,
        )
        latest[task_id] = (ls, lf)

    return latest
