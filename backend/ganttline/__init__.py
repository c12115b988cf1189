"""
Ganttline - dependency-aware task scheduling.

Usage:
    from ganttline import ScheduleConfiguration, Task, schedule_tasks
    result = schedule_tasks(tasks, ScheduleConfiguration(project_start_date=start))
"""

from ganttline.models import ScheduleConfiguration, Task
from ganttline.services.scheduler import ScheduledTask, ScheduleResult, schedule_tasks

__all__ = [
    "ScheduleConfiguration",
    "Task",
    "ScheduledTask",
    "ScheduleResult",
    "schedule_tasks",
]
