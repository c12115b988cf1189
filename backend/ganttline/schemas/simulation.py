from datetime import date

from pydantic import BaseModel

from ganttline.models import Task
from ganttline.schemas.schedule import ScheduleConfigIn
from ganttline.services.simulation import TaskChange


class TaskChangeIn(BaseModel):
    """A hypothetical change; unset fields are left as they are."""
    task_id: str
    estimated_hours: float | None = None
    manual_start: date | None = None
    clear_manual_start: bool = False

    def to_change(self) -> TaskChange:
        return TaskChange(**self.model_dump())


class SimulationRequest(BaseModel):
    tasks: list[Task]
    config: ScheduleConfigIn
    changes: list[TaskChangeIn]


class TaskImpactRead(BaseModel):
    task_id: str
    original_start: date
    original_end: date
    simulated_start: date
    simulated_end: date
    delta_days: int

    model_config = {"from_attributes": True}


class SimulationResponse(BaseModel):
    """Schema for a what-if simulation result."""
    original_end_date: date
    simulated_end_date: date
    impact_days: int
    affected_tasks: list[TaskImpactRead]
    newly_critical: list[str]
    no_longer_critical: list[str]
    total_tasks: int
    skipped_changes: list[str]

    model_config = {"from_attributes": True}
