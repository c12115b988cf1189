"""
Schedule routes for the Ganttline API.

Every endpoint is stateless: the client sends the full task snapshot and
configuration, and gets a freshly computed answer back.
"""

import pydantic
from fastapi import APIRouter, Depends

from ganttline.config import Settings, get_settings
from ganttline.exceptions import ValidationError
from ganttline.logging_config import get_logger
from ganttline.models import ScheduleConfiguration
from ganttline.schemas import (
    ConflictRead,
    ScheduleConfigIn,
    ScheduledTaskRead,
    ScheduleRequest,
    ScheduleResponse,
    SimulationRequest,
    SimulationResponse,
    WorkloadResponse,
)
from ganttline.services.scheduler import schedule_tasks
from ganttline.services.simulation import simulate_changes
from ganttline.services.workload import summarize_workload

logger = get_logger(__name__)

router = APIRouter()


def _configuration(config_in: ScheduleConfigIn, settings: Settings) -> ScheduleConfiguration:
    try:
        return config_in.to_configuration(settings)
    except pydantic.ValidationError as exc:
        raise ValidationError(
            "Invalid schedule configuration",
            details=[
                {"loc": ["config", *map(str, err["loc"])], "msg": err["msg"], "type": err["type"]}
                for err in exc.errors()
            ],
        )


@router.post("/", response_model=ScheduleResponse)
async def compute_schedule(
    request: ScheduleRequest,
    settings: Settings = Depends(get_settings),
) -> ScheduleResponse:
    """
    Compute the full schedule for a task set.

    Returns 400 for cycles, dangling or duplicate references and
    422 for invalid durations or configuration.
    """
    config = _configuration(request.config, settings)
    logger.info(f"Scheduling {len(request.tasks)} tasks from {config.project_start_date}")

    result = schedule_tasks(request.tasks, config)

    return ScheduleResponse(
        project_start=result.project_start,
        project_end=result.project_end,
        cpm_project_end=result.cpm_project_end,
        critical_path=result.critical_path,
        tasks=[ScheduledTaskRead.from_scheduled(s) for s in result.tasks],
        conflicts=[ConflictRead.model_validate(c) for c in result.conflicts],
    )


@router.post("/simulate", response_model=SimulationResponse)
async def simulate_schedule(
    request: SimulationRequest,
    settings: Settings = Depends(get_settings),
) -> SimulationResponse:
    """Show how hypothetical changes would move the schedule, without keeping them."""
    config = _configuration(request.config, settings)
    logger.info(f"Simulating {len(request.changes)} changes on {len(request.tasks)} tasks")

    result = simulate_changes(
        request.tasks,
        config,
        [change.to_change() for change in request.changes],
    )
    return SimulationResponse.model_validate(result)


@router.post("/workload", response_model=WorkloadResponse)
async def team_workload(
    request: ScheduleRequest,
    settings: Settings = Depends(get_settings),
) -> WorkloadResponse:
    """Per-assignee and per-phase workload for the computed schedule."""
    config = _configuration(request.config, settings)
    result = schedule_tasks(request.tasks, config)
    return WorkloadResponse.model_validate(summarize_workload(result, config))
