from datetime import date

from pydantic import BaseModel, ConfigDict, Field


class Task(BaseModel):
    """
    A unit of work to be scheduled.

    Key fields:
    - estimated_hours: effort needed to finish the task
    - assignee: the one team member doing it, or the whole-team sentinel
    - dependency_ids: tasks that must finish before this one starts
    - manual_start: when set the task is pinned to this date

    Scheduling invariants (unique ids, positive hours, acyclic dependencies)
    are checked by the graph builder, not here, so they can be reported with
    a specific error instead of a generic validation failure.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    estimated_hours: float
    assignee: str
    dependency_ids: list[str] = Field(default_factory=list)

    # Display-only attributes
    name: str | None = None
    phase: int | None = None
    difficulty: int | None = None

    # Manual placement
    manual_start: date | None = None
    week_number: int | None = Field(default=None, ge=1, le=53)
