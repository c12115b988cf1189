from datetime import date

from pydantic import BaseModel, Field

from ganttline.config import Settings
from ganttline.models import MONDAY_TO_FRIDAY, ScheduleConfiguration, Task
from ganttline.services.scheduler import ScheduledTask


class ScheduleConfigIn(BaseModel):
    """Schedule configuration as sent by clients; omitted values use settings."""
    project_start_date: date
    working_days: list[int] | None = None  # ISO weekdays, default Mon-Fri
    hours_per_working_day: float | None = Field(default=None, gt=0)
    auto_scheduling: bool = True
    whole_team_assignee: str | None = None
    critical_slack_tolerance: float = Field(default=0.0, ge=0)
    today: date | None = None

    def to_configuration(self, settings: Settings) -> ScheduleConfiguration:
        return ScheduleConfiguration(
            project_start_date=self.project_start_date,
            working_days=(
                frozenset(self.working_days)
                if self.working_days is not None
                else MONDAY_TO_FRIDAY
            ),
            hours_per_working_day=(
                self.hours_per_working_day or settings.default_hours_per_working_day
            ),
            auto_scheduling=self.auto_scheduling,
            whole_team_assignee=self.whole_team_assignee or settings.whole_team_assignee,
            critical_slack_tolerance=self.critical_slack_tolerance,
            today=self.today,
        )


class ScheduleRequest(BaseModel):
    """Schema for a scheduling request."""
    tasks: list[Task]
    config: ScheduleConfigIn


class ScheduledTaskRead(BaseModel):
    """Schema for one scheduled task, flattened for rendering and export."""
    id: str
    name: str | None
    assignee: str
    phase: int | None
    difficulty: int | None
    estimated_hours: float
    dependency_ids: list[str]
    dependent_ids: list[str]

    earliest_start: date
    earliest_finish: date
    latest_start: date
    latest_finish: date
    slack: int
    is_critical: bool

    scheduled_start: date
    scheduled_end: date
    last_working_day: date
    duration_days: int
    is_manual: bool
    start_variance: int
    week_number: int
    status: str | None

    @classmethod
    def from_scheduled(cls, scheduled: ScheduledTask) -> "ScheduledTaskRead":
        task = scheduled.task
        return cls(
            id=task.id,
            name=task.name,
            assignee=task.assignee,
            phase=task.phase,
            difficulty=task.difficulty,
            estimated_hours=task.estimated_hours,
            dependency_ids=list(task.dependency_ids),
            dependent_ids=scheduled.dependent_ids,
            earliest_start=scheduled.earliest_start,
            earliest_finish=scheduled.earliest_finish,
            latest_start=scheduled.latest_start,
            latest_finish=scheduled.latest_finish,
            slack=scheduled.slack,
            is_critical=scheduled.is_critical,
            scheduled_start=scheduled.scheduled_start,
            scheduled_end=scheduled.scheduled_end,
            last_working_day=scheduled.last_working_day,
            duration_days=scheduled.duration_days,
            is_manual=scheduled.is_manual,
            start_variance=scheduled.start_variance,
            week_number=scheduled.week_number,
            status=scheduled.status,
        )


class ConflictRead(BaseModel):
    kind: str
    task_id: str
    other_task_id: str

    model_config = {"from_attributes": True}


class ScheduleResponse(BaseModel):
    """Schema for a computed schedule."""
    project_start: date
    project_end: date
    cpm_project_end: date
    critical_path: list[str]
    tasks: list[ScheduledTaskRead]
    conflicts: list[ConflictRead]
