"""
End-to-end scheduling tests: the guarantees the Gantt view relies on.
"""

import random
from datetime import date, timedelta

import pytest

from ganttline import ScheduleConfiguration, Task, schedule_tasks
from ganttline.exceptions import CycleDetectedError, DanglingDependencyError, InvalidDurationError

MON = date(2025, 8, 11)
TUE = date(2025, 8, 12)
WED = date(2025, 8, 13)
THU = date(2025, 8, 14)
NEXT_MON = date(2025, 8, 18)
NEXT_TUE = date(2025, 8, 19)

ASSIGNEES = ["Aldo", "Nuri", "Luis", "Silvia", "Caro", "All"]


def random_project(seed: int, size: int = 40) -> list[Task]:
    """A reproducible random DAG; dependencies always point at earlier tasks."""
    rng = random.Random(seed)
    tasks = []
    for i in range(size):
        candidates = [f"T{j:02d}" for j in range(i)]
        deps = rng.sample(candidates, k=min(len(candidates), rng.randint(0, 3)))
        tasks.append(Task(
            id=f"T{i:02d}",
            estimated_hours=rng.choice([1, 2.5, 4, 8, 12, 16, 30]),
            assignee=rng.choice(ASSIGNEES),
            dependency_ids=deps,
            phase=1 + i // 10,
        ))
    rng.shuffle(tasks)
    return tasks


class TestExampleScenario:
    """
    A (8h, Ana), B (8h, Ana, after A), C (4h, Beto, after A), start Monday.
    """

    @pytest.fixture
    def result(self, make_task, config):
        tasks = [
            make_task("A", hours=8, assignee="Ana"),
            make_task("B", hours=8, assignee="Ana", deps=["A"]),
            make_task("C", hours=4, assignee="Beto", deps=["A"]),
        ]
        return schedule_tasks(tasks, config)

    def test_dates(self, result):
        a, b, c = (result.by_id(t) for t in "ABC")

        assert (a.scheduled_start, a.last_working_day) == (MON, MON)
        assert (b.scheduled_start, b.last_working_day) == (TUE, TUE)
        assert (c.scheduled_start, c.last_working_day) == (TUE, TUE)
        assert a.scheduled_end == b.scheduled_start

    def test_critical_path(self, result):
        assert result.by_id("A").is_critical
        assert result.by_id("B").is_critical
        assert result.critical_path[:2] == ["A", "B"]

        # C runs beside B and fills the same whole-day slot, so it has no slack
        c = result.by_id("C")
        assert c.slack == 0
        assert c.is_critical
        assert result.critical_path == ["A", "B", "C"]
        assert result.project_end == result.cpm_project_end == WED

    def test_display_fields(self, result):
        a = result.by_id("A")
        assert a.dependent_ids == ["B", "C"]
        assert a.duration_days == 1
        assert a.week_number == 33
        assert not a.is_manual
        assert a.status is None


class TestScheduleProperties:

    @pytest.mark.parametrize("seed", [1, 2, 3])
    def test_dependency_ordering(self, config, seed):
        result = schedule_tasks(random_project(seed), config)
        for scheduled in result.tasks:
            for dep_id in scheduled.task.dependency_ids:
                assert result.by_id(dep_id).scheduled_end <= scheduled.scheduled_start

    @pytest.mark.parametrize("seed", [1, 2, 3])
    def test_no_double_booking(self, config, seed):
        result = schedule_tasks(random_project(seed), config)
        by_assignee = {}
        for scheduled in result.tasks:
            if scheduled.task.assignee != "All":
                by_assignee.setdefault(scheduled.task.assignee, []).append(scheduled)

        for items in by_assignee.values():
            items.sort(key=lambda s: s.scheduled_start)
            for first, second in zip(items, items[1:]):
                assert first.scheduled_end <= second.scheduled_start

    @pytest.mark.parametrize("seed", [1, 2, 3])
    def test_critical_path_connects_start_to_end(self, config, seed):
        """Walk back from a critical sink to a critical root through critical tasks."""
        result = schedule_tasks(random_project(seed), config)
        critical = {s.id: s for s in result.tasks if s.is_critical}

        current = next(s for s in critical.values() if s.earliest_finish == result.cpm_project_end)
        assert current.dependent_ids == []

        while current.task.dependency_ids:
            current = next(
                critical[dep_id]
                for dep_id in current.task.dependency_ids
                if dep_id in critical and critical[dep_id].earliest_finish == current.earliest_start
            )
        assert current.earliest_start == result.project_start

    def test_idempotent(self, config):
        tasks = random_project(5)
        assert schedule_tasks(tasks, config) == schedule_tasks(tasks, config)

    def test_output_keeps_input_order(self, config):
        tasks = random_project(4)
        result = schedule_tasks(tasks, config)
        assert [s.id for s in result.tasks] == [t.id for t in tasks]

    def test_empty_task_set(self, config):
        result = schedule_tasks([], config)
        assert result.tasks == []
        assert result.project_end == result.project_start == MON


class TestFailClosed:

    def test_cycle_raises(self, make_task, config):
        tasks = [make_task("A", deps=["B"]), make_task("B", deps=["A"]), make_task("C")]
        with pytest.raises(CycleDetectedError):
            schedule_tasks(tasks, config)

    def test_missing_dependency_raises(self, make_task, config):
        with pytest.raises(DanglingDependencyError):
            schedule_tasks([make_task("A", deps=["deleted"])], config)

    def test_self_dependency_raises_cycle(self, make_task, config):
        with pytest.raises(CycleDetectedError):
            schedule_tasks([make_task("A", deps=["A"])], config)

    @pytest.mark.parametrize("hours", [1e8, 1e300])
    def test_estimate_past_calendar_end_raises(self, make_task, config, hours):
        tasks = [make_task("A"), make_task("B", hours=hours, deps=["A"])]
        with pytest.raises(InvalidDurationError) as exc_info:
            schedule_tasks(tasks, config)
        assert exc_info.value.task_id == "B"

    def test_pin_near_calendar_end_raises(self, make_task, config):
        tasks = [make_task("A", hours=8 * 40, manual_start=date(9999, 12, 1))]
        with pytest.raises(InvalidDurationError):
            schedule_tasks(tasks, config)

    def test_long_estimate_is_scheduled(self, make_task, config):
        """A century of work still fits the calendar."""
        result = schedule_tasks([make_task("A", hours=8 * 5 * 52 * 100)], config)
        assert result.project_end == MON + timedelta(weeks=5200)


class TestManualScheduling:

    def test_pinned_task_keeps_its_date(self, make_task, config):
        tasks = [
            make_task("A", assignee="Ana"),
            make_task("B", assignee="Beto", deps=["A"], manual_start=NEXT_MON),
            make_task("C", assignee="Caro", deps=["B"]),
        ]
        result = schedule_tasks(tasks, config)
        b, c = result.by_id("B"), result.by_id("C")

        assert b.is_manual
        assert b.scheduled_start == NEXT_MON
        assert c.scheduled_start == b.scheduled_end == NEXT_TUE
        assert result.conflicts == []

    def test_pin_survives_changes_elsewhere(self, make_task, config):
        base = [
            make_task("A", assignee="Ana"),
            make_task("B", assignee="Beto", deps=["A"], manual_start=NEXT_MON),
        ]
        longer = [make_task("A", hours=24, assignee="Ana"), base[1]]

        for tasks in (base, longer):
            assert schedule_tasks(tasks, config).by_id("B").scheduled_start == NEXT_MON

    def test_pinned_task_keeps_advisory_cpm_values(self, make_task, config):
        tasks = [
            make_task("A"),
            make_task("B", assignee="Beto", deps=["A"], manual_start=NEXT_MON),
        ]
        b = schedule_tasks(tasks, config).by_id("B")

        assert b.earliest_start == TUE
        assert b.start_variance == 4  # Tue -> next Mon

    def test_dependents_use_actual_end_of_early_pin(self, make_task, config):
        """A task pinned before its dependency ends is reported, and its own
        dependents still start right after its actual end."""
        tasks = [
            make_task("A", hours=24, assignee="Ana"),
            make_task("B", assignee="Beto", deps=["A"], manual_start=TUE),
            make_task("C", assignee="Caro", deps=["B"]),
        ]
        result = schedule_tasks(tasks, config)

        assert result.by_id("B").scheduled_start == TUE
        assert result.by_id("C").scheduled_start == WED
        assert [c.kind for c in result.conflicts] == ["dependency"]

    def test_whole_project_manual_mode(self, make_task):
        config = ScheduleConfiguration(project_start_date=MON, auto_scheduling=False)
        tasks = [
            make_task("A", week_number=34),
            make_task("B", assignee="Beto", week_number=33),
            make_task("C", assignee="Caro", deps=["A"]),
        ]
        result = schedule_tasks(tasks, config)

        assert result.by_id("A").scheduled_start == NEXT_MON
        assert result.by_id("B").scheduled_start == MON
        assert result.by_id("C").scheduled_start == NEXT_TUE
        assert not result.by_id("C").is_manual


class TestStatus:

    def test_status_relative_to_today(self, make_task):
        config = ScheduleConfiguration(project_start_date=MON, today=TUE)
        tasks = [
            make_task("done"),
            make_task("doing", hours=16, deps=["done"]),
            make_task("todo", deps=["doing"]),
        ]
        result = schedule_tasks(tasks, config)

        assert result.by_id("done").status == "past"
        assert result.by_id("doing").status == "current"
        assert result.by_id("todo").status == "future"
        assert result.by_id("todo").scheduled_start == THU
