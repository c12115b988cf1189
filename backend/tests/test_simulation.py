"""
Test what-if simulation: changes are applied in memory only and the
result describes how the schedule would move.
"""

from datetime import date

import pytest

from ganttline.exceptions import InvalidDurationError
from ganttline.services.simulation import TaskChange, apply_changes, simulate_changes

MON = date(2025, 8, 11)
TUE = date(2025, 8, 12)
WED = date(2025, 8, 13)
THU = date(2025, 8, 14)
FRI = date(2025, 8, 15)
NEXT_MON = date(2025, 8, 18)


class TestSimulation:

    def test_longer_critical_task_delays_project(self, make_task, config):
        """
        Scenario: A (1 day) -> B (1 day), A grows to 3 days
        Expected: both tasks end 2 days later, and so does the project
        """
        tasks = [make_task("A"), make_task("B", deps=["A"])]
        result = simulate_changes(tasks, config, [TaskChange("A", estimated_hours=24)])

        assert result.original_end_date == WED
        assert result.simulated_end_date == FRI
        assert result.impact_days == 2
        assert [(t.task_id, t.delta_days) for t in result.affected_tasks] == [("A", 2), ("B", 2)]
        assert result.affected_tasks[1].simulated_start == THU

    def test_change_absorbed_by_slack(self, make_task, config):
        """
        Scenario: X (1 day, Ana) runs beside Y (3 days, Beto); X grows to 2 days
        Expected: X moves but the project end does not
        """
        tasks = [make_task("X", assignee="Ana"), make_task("Y", hours=24, assignee="Beto")]
        result = simulate_changes(tasks, config, [TaskChange("X", estimated_hours=16)])

        assert result.impact_days == 0
        assert [t.task_id for t in result.affected_tasks] == ["X"]

    def test_critical_path_changes(self, make_task, config):
        tasks = [make_task("X", assignee="Ana"), make_task("Y", hours=24, assignee="Beto")]
        result = simulate_changes(tasks, config, [TaskChange("X", estimated_hours=32)])

        assert result.newly_critical == ["X"]
        assert result.no_longer_critical == ["Y"]

    def test_pin_a_task(self, make_task, config):
        tasks = [make_task("A"), make_task("B", deps=["A"])]
        result = simulate_changes(tasks, config, [TaskChange("B", manual_start=NEXT_MON)])

        impact = result.affected_tasks[0]
        assert (impact.task_id, impact.original_start, impact.simulated_start) == ("B", TUE, NEXT_MON)

    def test_unpin_a_task(self, make_task, config):
        tasks = [make_task("A"), make_task("B", deps=["A"], manual_start=NEXT_MON)]
        result = simulate_changes(tasks, config, [TaskChange("B", clear_manual_start=True)])

        assert result.affected_tasks[0].simulated_start == TUE
        assert result.impact_days < 0

    def test_unknown_task_is_skipped(self, make_task, config):
        tasks = [make_task("A")]
        result = simulate_changes(tasks, config, [TaskChange("ghost", estimated_hours=8)])

        assert result.skipped_changes == ["ghost"]
        assert result.affected_tasks == []
        assert result.total_tasks == 1

    def test_invalid_change_fails_closed(self, make_task, config):
        with pytest.raises(InvalidDurationError):
            simulate_changes([make_task("A")], config, [TaskChange("A", estimated_hours=0)])


class TestApplyChanges:

    def test_input_tasks_untouched(self, make_task):
        tasks = [make_task("A", hours=8)]
        changed, skipped = apply_changes(tasks, [TaskChange("A", estimated_hours=40)])

        assert tasks[0].estimated_hours == 8
        assert changed[0].estimated_hours == 40
        assert skipped == []
