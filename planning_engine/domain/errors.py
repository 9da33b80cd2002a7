class PlanningError(Exception):
    """Base class for errors raised by the planning engine."""

    pass


class DuplicateTaskError(PlanningError):
    """Raised when two tasks in one snapshot share an id."""

    def __init__(self, task_id):
        self.task_id = task_id
        super().__init__(f"Duplicate task id '{task_id}'")


class UnknownDependencyError(PlanningError):
    """Raised when a task depends on an id that is not in the task set."""

    def __init__(self, dependency_id, task_id=None):
        self.dependency_id = dependency_id
        self.task_id = task_id
        if task_id is None:
            message = f"Unknown dependency '{dependency_id}'"
        else:
            message = f"Task '{task_id}' depends on unknown task '{dependency_id}'"
        super().__init__(message)


class CyclicDependencyError(PlanningError):
    """Raised when the dependency graph is not a DAG."""

    def __init__(self, task_id, cycle=None):
        self.task_id = task_id
        self.cycle = list(cycle) if cycle else [task_id]
        path = " -> ".join(str(t) for t in self.cycle + self.cycle[:1])
        super().__init__(f"Dependency cycle detected at task '{task_id}': {path}")


class InvalidDurationError(PlanningError):
    """Raised for negative, non-finite or non-numeric durations."""

    def __init__(self, duration, task_id=None):
        self.duration = duration
        self.task_id = task_id
        if task_id is None:
            message = f"Invalid duration {duration!r}"
        else:
            message = f"Task '{task_id}' has invalid duration {duration!r}"
        super().__init__(message)


class InvalidTaskError(PlanningError):
    """Raised when a task record is not a mapping or a task list is malformed."""

    def __init__(self, record, reason=None):
        self.record = record
        super().__init__(reason or f"Cannot build a task from {type(record).__name__} {record!r}")


class InvalidStartDateError(PlanningError):
    """Raised when a project start date is missing, mistyped or unparsable."""

    def __init__(self, value):
        self.value = value
        super().__init__(f"Invalid project start date {value!r}; expected YYYY-MM-DD")


class InvalidPERTInputError(PlanningError):
    """Raised when a PERT estimate is non-positive or out of order."""

    def __init__(self, message, field=None, value=None):
        self.field = field
        self.value = value
        super().__init__(message)


class SchedulingError(PlanningError):
    """Raised when a computed schedule breaks an invariant of the passes."""

    pass
