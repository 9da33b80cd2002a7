from datetime import date

from planning_engine.domain.task import CPMTask
from planning_engine.services.pert import calculate_pert, estimate_to_task
from planning_engine.services.scheduler import CPMScheduler


def create_sample_project():
    # Testing duration comes from a three-point estimate: (3 + 4*4 + 11) / 6 = 5
    testing = calculate_pert(3, 4, 11)

    tasks = [
        CPMTask("REQ", 3, name="Requirements"),
        CPMTask("API", 4, dependencies=["REQ"], name="Backend API"),
        CPMTask("UI", 2, dependencies=["REQ"], name="User interface"),
        estimate_to_task("TEST", testing, dependencies=["API", "UI"], name="Testing"),
        CPMTask("DOCS", 1, dependencies=["REQ"], name="Documentation"),
    ]

    scheduler = CPMScheduler()
    scheduler.set_start_date(date(2025, 4, 7))
    scheduler.add_tasks(tasks)
    return scheduler


def print_report(report, tasks):
    names = {task.id: task.label for task in tasks}

    print("CPM Project Schedule Report")
    print("===========================")
    print(f"Project Start Date: {report.project_start.isoformat()}")
    print(f"Project End Date: {report.project_end.isoformat()}")
    print(f"Project Duration: {report.total_duration} working days")

    print("\nCritical Path:")
    for task_id in report.critical_path:
        print(f"  {task_id}: {names.get(task_id, task_id)}")

    print("\nTasks:")
    for result in report.results:
        marker = "*" if result.is_critical else " "
        print(
            f" {marker} {str(result.task_id):<6} ES {result.earliest_start}  EF {result.earliest_finish}"
            f"  LS {result.latest_start}  LF {result.latest_finish}  slack {result.slack}"
        )


if __name__ == "__main__":
    scheduler = create_sample_project()
    print_report(scheduler.schedule(), scheduler.tasks)
