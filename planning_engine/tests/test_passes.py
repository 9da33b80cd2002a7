"""
Invariant checks for the forward and backward passes.

Random DAGs are generated with a fixed seed so failures are reproducible.
"""

import random
import unittest
from datetime import date

from planning_engine.domain.errors import SchedulingError
from planning_engine.domain.task import CPMTask
from planning_engine.services.backward_pass import backward_pass
from planning_engine.services.forward_pass import forward_pass, project_end_date
from planning_engine.services.scheduler import calculate_cpm
from planning_engine.utils.calendar import offset_working_days, working_days_between
from planning_engine.utils.graph import build_dependency_graph

START = date(2025, 4, 7)  # Monday


def random_project(seed, size=40, max_deps=3):
    """Random DAG: each task may only depend on tasks created before it."""
    rng = random.Random(seed)
    tasks = []
    for i in range(size):
        candidates = list(range(i))
        deps = rng.sample(candidates, k=min(len(candidates), rng.randint(0, max_deps)))
        duration = rng.choice([0, 1, 2, 3, 5, 8, 1.5, 0.25])
        tasks.append(CPMTask(f"T{i}", duration, dependencies=[f"T{d}" for d in deps]))
    rng.shuffle(tasks)
    return tasks


class ForwardPassTest(unittest.TestCase):
    def setUp(self):
        self.graph = build_dependency_graph(
            [
                CPMTask("A", 3),
                CPMTask("B", 4, dependencies=["A"]),
                CPMTask("C", 2, dependencies=["A"]),
                CPMTask("D", 5, dependencies=["B", "C"]),
                CPMTask("E", 1),
            ]
        )

    def test_earliest_dates(self):
        es, ef = forward_pass(self.graph, START)
        by_id = {self.graph.task_id(i): (es[i], ef[i]) for i in range(len(self.graph))}
        self.assertEqual(by_id["A"], (date(2025, 4, 7), date(2025, 4, 10)))
        self.assertEqual(by_id["B"], (date(2025, 4, 10), date(2025, 4, 16)))
        self.assertEqual(by_id["C"], (date(2025, 4, 10), date(2025, 4, 14)))
        self.assertEqual(by_id["D"], (date(2025, 4, 16), date(2025, 4, 23)))

    def test_independent_roots_start_at_project_start(self):
        es, _ = forward_pass(self.graph, START)
        self.assertEqual(es[self.graph.index_of("E")], START)
        self.assertEqual(es[self.graph.index_of("A")], START)

    def test_project_end(self):
        _, ef = forward_pass(self.graph, START)
        self.assertEqual(project_end_date(ef, START), date(2025, 4, 23))
        self.assertEqual(project_end_date([], START), START)


class BackwardPassTest(unittest.TestCase):
    def setUp(self):
        self.graph = build_dependency_graph(
            [
                CPMTask("A", 3),
                CPMTask("B", 4, dependencies=["A"]),
                CPMTask("C", 2, dependencies=["A"]),
                CPMTask("D", 5, dependencies=["B", "C"]),
            ]
        )
        _, self.ef = forward_pass(self.graph, START)
        self.end = project_end_date(self.ef, START)

    def test_latest_dates(self):
        ls, lf = backward_pass(self.graph, self.ef, self.end)
        by_id = {self.graph.task_id(i): (ls[i], lf[i]) for i in range(len(self.graph))}
        self.assertEqual(by_id["D"], (date(2025, 4, 16), date(2025, 4, 23)))
        self.assertEqual(by_id["B"], (date(2025, 4, 10), date(2025, 4, 16)))
        self.assertEqual(by_id["C"], (date(2025, 4, 14), date(2025, 4, 16)))
        self.assertEqual(by_id["A"], (date(2025, 4, 7), date(2025, 4, 10)))

    def test_requires_forward_pass(self):
        with self.assertRaises(SchedulingError):
            backward_pass(self.graph, [None] * len(self.graph), self.end)


class ScheduleInvariantTest(unittest.TestCase):
    """Properties that must hold on every well-formed project."""

    def check_invariants(self, tasks):
        report = calculate_cpm(tasks, START)
        results = report.by_task()
        lookup = {task.id: task for task in tasks}

        for task in tasks:
            result = results[task.id]
            self.assertEqual(
                result.earliest_finish,
                offset_working_days(result.earliest_start, task.duration),
            )
            self.assertEqual(
                result.latest_start,
                offset_working_days(result.latest_finish, -task.duration),
            )
            self.assertGreaterEqual(result.slack, 0)
            self.assertEqual(
                result.slack,
                working_days_between(result.earliest_start, result.latest_start),
            )
            self.assertEqual(result.is_critical, result.slack == 0)

            for dep in task.dependencies:
                pred = results[dep]
                self.assertGreaterEqual(result.earliest_start, pred.earliest_finish)
                self.assertLessEqual(pred.latest_finish, result.latest_start)

        self.assertTrue(report.critical_path)
        self.assertTrue(all(results[t].is_critical for t in report.critical_path))

        # The traced chain is connected and its durations add up to the project length
        chain = report.critical_chain
        self.assertTrue(chain)
        self.assertEqual(results[chain[0]].earliest_start, report.project_start)
        self.assertEqual(results[chain[-1]].earliest_finish, report.project_end)
        for u, v in zip(chain, chain[1:]):
            self.assertIn(u, lookup[v].dependencies)
        chain_days = sum(
            working_days_between(results[t].earliest_start, results[t].earliest_finish)
            for t in chain
        )
        self.assertEqual(chain_days, report.total_duration)

    def test_random_projects(self):
        for seed in range(25):
            with self.subTest(seed=seed):
                self.check_invariants(random_project(seed))

    def test_whole_day_chain_sum_matches_duration(self):
        tasks = random_project(99)
        tasks = [CPMTask(t.id, int(t.duration) + 1, t.dependencies) for t in tasks]
        report = calculate_cpm(tasks, START)
        lookup = {task.id: task for task in tasks}
        self.assertEqual(
            sum(lookup[t].duration for t in report.critical_chain), report.total_duration
        )

    def test_long_chain(self):
        count = 5000
        tasks = [CPMTask(0, 1)] + [CPMTask(i, 1, dependencies=[i - 1]) for i in range(1, count)]
        report = calculate_cpm(tasks, START)
        self.assertEqual(report.total_duration, count)
        self.assertEqual(len(report.critical_path), count)


if __name__ == "__main__":
    unittest.main()
