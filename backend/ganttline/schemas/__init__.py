from ganttline.schemas.schedule import (
    ConflictRead,
    ScheduleConfigIn,
    ScheduledTaskRead,
    ScheduleRequest,
    ScheduleResponse,
)
from ganttline.schemas.simulation import (
    SimulationRequest,
    SimulationResponse,
    TaskChangeIn,
    TaskImpactRead,
)
from ganttline.schemas.workload import (
    AssigneeWorkloadRead,
    PhaseWorkloadRead,
    WorkloadResponse,
)

__all__ = [
    "ConflictRead",
    "ScheduleConfigIn",
    "ScheduledTaskRead",
    "ScheduleRequest",
    "ScheduleResponse",
    "SimulationRequest",
    "SimulationResponse",
    "TaskChangeIn",
    "TaskImpactRead",
    "AssigneeWorkloadRead",
    "PhaseWorkloadRead",
    "WorkloadResponse",
]
