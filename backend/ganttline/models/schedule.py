from datetime import date

from pydantic import BaseModel, ConfigDict, Field, field_validator

# ISO weekday numbers: Monday = 1 ... Sunday = 7
MONDAY_TO_FRIDAY = frozenset({1, 2, 3, 4, 5})


class ScheduleConfiguration(BaseModel):
    """
    Inputs that shape a schedule besides the tasks themselves.

    project_start_date and today are always passed in explicitly; the
    scheduler never looks at the system clock.
    """

    model_config = ConfigDict(frozen=True)

    project_start_date: date
    working_days: frozenset[int] = MONDAY_TO_FRIDAY
    hours_per_working_day: float = Field(default=8.0, gt=0)
    auto_scheduling: bool = True

    whole_team_assignee: str = "All"
    critical_slack_tolerance: float = Field(default=0.0, ge=0)
    today: date | None = None

    @field_validator("working_days")
    @classmethod
    def check_working_days(cls, value: frozenset[int]) -> frozenset[int]:
        if not value:
            raise ValueError("at least one working day is required")
        invalid = sorted(day for day in value if day < 1 or day > 7)
        if invalid:
            raise ValueError(f"working days must be ISO weekdays 1-7, got {invalid}")
        return value
