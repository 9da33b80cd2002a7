import unittest
from datetime import date, datetime

from planning_engine.domain.errors import (
    CyclicDependencyError,
    InvalidDurationError,
    InvalidStartDateError,
    InvalidTaskError,
    PlanningError,
    UnknownDependencyError,
)
from planning_engine.domain.task import CPMTask
from planning_engine.examples.simple_project import create_sample_project
from planning_engine.services.scheduler import (
    CPMScheduler,
    auto_schedule,
    calculate_cpm,
    run_planning_session,
)

MONDAY = date(2025, 4, 7)
SATURDAY = date(2025, 4, 5)


class CPMSchedulerTest(unittest.TestCase):
    def setUp(self):
        self.scheduler = CPMScheduler()
        self.scheduler.set_start_date(MONDAY)
        self.scheduler.add_task(CPMTask("A", 3))
        self.scheduler.add_task({"id": "B", "duration": 4, "dependencies": ["A"]})
        self.scheduler.add_tasks([CPMTask("C", 2, ["A"]), CPMTask("D", 5, ["B", "C"])])

    def test_schedule(self):
        report = self.scheduler.schedule()
        self.assertIs(self.scheduler.report, report)
        self.assertIsNotNone(self.scheduler.task_graph)
        self.assertEqual(report.critical_path, ["A", "B", "D"])
        self.assertEqual(report.total_duration, 12)

    def test_invalid_input_computes_nothing(self):
        self.scheduler.add_task(CPMTask("E", 1, ["missing"]))
        with self.assertRaises(UnknownDependencyError):
            self.scheduler.schedule()
        self.assertIsNone(self.scheduler.report)

    def test_cycle_is_reported(self):
        scheduler = CPMScheduler().set_start_date(MONDAY)
        scheduler.add_tasks([CPMTask("A", 1, ["B"]), CPMTask("B", 1, ["A"])])
        with self.assertRaises(CyclicDependencyError):
            scheduler.schedule()

    def test_weekend_start_rolls_to_monday(self):
        self.scheduler.set_start_date(SATURDAY)
        with self.assertLogs("planning_engine.services.scheduler", level="WARNING"):
            report = self.scheduler.schedule()
        self.assertEqual(report.project_start, MONDAY)
        self.assertEqual(report.result_for("A").earliest_start, MONDAY)

    def test_weekend_start_kept_when_requested(self):
        report = calculate_cpm([CPMTask("A", 3)], SATURDAY, roll_weekend_start=False)
        result = report.result_for("A")
        self.assertEqual(result.earliest_start, SATURDAY)
        self.assertEqual(result.earliest_finish, date(2025, 4, 9))
        self.assertTrue(result.is_critical)
        self.assertEqual(report.total_duration, 3)

    def test_datetime_start(self):
        report = calculate_cpm([CPMTask("A", 1)], datetime(2025, 4, 11, 9, 0))
        self.assertEqual(report.result_for("A").earliest_finish, datetime(2025, 4, 14, 9, 0))

    def test_empty_project(self):
        with self.assertLogs("planning_engine.services.scheduler", level="WARNING"):
            report = calculate_cpm([], MONDAY)
        self.assertEqual(report.results, [])
        self.assertEqual(report.critical_path, [])
        self.assertEqual(report.total_duration, 0)
        self.assertEqual(report.project_end, MONDAY)

    def test_report_output_contract(self):
        data = self.scheduler.schedule().to_dict()
        self.assertEqual(data["criticalPath"], ["A", "B", "D"])
        self.assertEqual(data["totalDuration"], 12)
        first = data["results"][0]
        self.assertEqual(
            set(first),
            {
                "taskId",
                "earliestStart",
                "earliestFinish",
                "latestStart",
                "latestFinish",
                "slack",
                "isCritical",
            },
        )
        self.assertEqual(first["earliestStart"], "2025-04-07")

    def test_result_lookup(self):
        report = self.scheduler.schedule()
        self.assertEqual(report.result_for("C").slack, 2)
        self.assertIsNone(report.result_for("Z"))


class TaskInputTest(unittest.TestCase):
    def test_from_dict_hours(self):
        task = CPMTask.from_dict({"id": "T", "estimatedHours": 20, "predecessors": ["S"]})
        self.assertEqual(task.duration, 2.5)
        self.assertEqual(task.dependencies, ("S",))

    def test_from_dict_custom_hours_per_day(self):
        task = CPMTask.from_dict({"id": "T", "estimatedHours": 12}, hours_per_day=6)
        self.assertEqual(task.duration, 2)

    def test_missing_duration_is_rejected_when_scheduling(self):
        task = CPMTask.from_dict({"id": "T"})
        with self.assertRaises(InvalidDurationError):
            calculate_cpm([task], MONDAY)

    def test_non_mapping_record_is_rejected(self):
        for record in ("A", 3, ["A", 1]):
            with self.assertRaises(InvalidTaskError):
                CPMTask.from_dict(record)
        with self.assertRaises(InvalidTaskError):
            CPMScheduler().add_task("A")

    def test_start_date_must_be_a_date(self):
        for value in ("2025-04-07", 20250407, None):
            with self.assertRaises(InvalidStartDateError):
                CPMScheduler().set_start_date(value)

    def test_task_is_immutable(self):
        task = CPMTask("T", 1, ["S"])
        with self.assertRaises(AttributeError):
            task.duration = 2

    def test_round_trip_dict(self):
        task = CPMTask("T", 2, ["S"], name="Testing")
        self.assertEqual(CPMTask.from_dict(task.to_dict()), task)
        self.assertEqual(task.label, "Testing")


class AutoScheduleTest(unittest.TestCase):
    def test_planned_dates_follow_earliest_dates(self):
        report = calculate_cpm([CPMTask("A", 3), CPMTask("B", 2, ["A"])], MONDAY)
        planned = auto_schedule(report)
        self.assertEqual(planned["A"], (MONDAY, date(2025, 4, 10)))
        self.assertEqual(planned["B"], (date(2025, 4, 10), date(2025, 4, 14)))


class PlanningSessionTest(unittest.TestCase):
    def test_cpm_session(self):
        report, session = run_planning_session(
            "cpm", tasks=[{"id": "A", "duration": 2}], start_date=MONDAY
        )
        self.assertEqual(session.algorithm_used, "cpm")
        self.assertEqual(session.input_parameters["startDate"], "2025-04-07")
        self.assertEqual(session.output_results, report.to_dict())
        self.assertGreaterEqual(session.execution_time_ms, 0)
        self.assertEqual(session.to_dict()["algorithmUsed"], "cpm")

    def test_cpm_session_records_rolled_start(self):
        report, session = run_planning_session(
            "cpm", tasks=[{"id": "A", "duration": 2}], start_date=SATURDAY
        )
        self.assertEqual(report.project_start, MONDAY)
        self.assertEqual(session.input_parameters["startDate"], "2025-04-07")
        self.assertEqual(session.input_parameters["requestedStartDate"], "2025-04-05")
        self.assertEqual(
            session.input_parameters["startDate"], session.output_results["projectStart"]
        )

    def test_pert_session(self):
        estimate, session = run_planning_session(
            "pert", optimistic=10, most_likely=15, pessimistic=20
        )
        self.assertEqual(estimate.expected, 15.0)
        self.assertEqual(session.output_results["expected"], 15.0)
        self.assertEqual(session.input_parameters["mostLikely"], 15)

    def test_unknown_algorithm(self):
        with self.assertRaises(PlanningError):
            run_planning_session("gantt")


class SampleProjectTest(unittest.TestCase):
    def test_sample_project(self):
        scheduler = create_sample_project()
        report = scheduler.schedule()
        self.assertEqual(report.critical_path, ["REQ", "API", "TEST"])
        self.assertEqual(report.total_duration, 12)
        self.assertGreater(report.result_for("DOCS").slack, 0)


if __name__ == "__main__":
    unittest.main()
