from ganttline.models.task import Task
from ganttline.models.schedule import MONDAY_TO_FRIDAY, ScheduleConfiguration

__all__ = ["Task", "ScheduleConfiguration", "MONDAY_TO_FRIDAY"]
