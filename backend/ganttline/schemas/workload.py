from datetime import date

from pydantic import BaseModel


class AssigneeWorkloadRead(BaseModel):
    assignee: str
    is_whole_team: bool
    task_count: int
    total_hours: float
    busy_days: int
    first_start: date | None
    last_end: date | None
    hours_by_week: dict[int, float]
    utilization: float

    model_config = {"from_attributes": True}


class PhaseWorkloadRead(BaseModel):
    phase: int | None
    task_count: int
    total_hours: float

    model_config = {"from_attributes": True}


class WorkloadResponse(BaseModel):
    """Schema for the team workload summary."""
    total_tasks: int
    total_hours: float
    assignees: list[AssigneeWorkloadRead]
    phases: list[PhaseWorkloadRead]

    model_config = {"from_attributes": True}
