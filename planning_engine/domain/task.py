from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from planning_engine.domain.errors import InvalidTaskError
from planning_engine.utils.calendar import hours_to_working_days


@dataclass(frozen=True)
class CPMTask:
    """
    One node of the task-dependency graph, as supplied by the caller.

    Instances are immutable for the duration of a calculation. Validation of
    durations and references happens when the dependency graph is built, so a
    task can be constructed from untrusted data and rejected there with a
    typed error.
    """

    id: Any
    duration: float
    dependencies: Tuple[Any, ...] = field(default_factory=tuple)
    name: Optional[str] = None

    def __post_init__(self):
        deps = self.dependencies
        if deps is None:
            deps = ()
        elif isinstance(deps, (str, bytes)):
            deps = (deps,)
        # Drop repeated references while keeping their first position
        object.__setattr__(self, "dependencies", tuple(dict.fromkeys(deps)))

    @property
    def label(self) -> str:
        return self.name or str(self.id)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], hours_per_day: Optional[float] = None):
        """
        Build a task from a plain mapping.

        Accepts ``duration`` in working days, or ``estimatedHours`` which is
        converted with ``hours_to_working_days``. ``predecessors`` is accepted
        as an alias of ``dependencies``.

        Raises:
            InvalidTaskError: If ``data`` is not a mapping
        """
        if not isinstance(data, Mapping):
            raise InvalidTaskError(data)
        if "duration" in data:
            duration = data["duration"]
        elif "estimatedHours" in data:
            if hours_per_day is None:
                duration = hours_to_working_days(data["estimatedHours"])
            else:
                duration = hours_to_working_days(data["estimatedHours"], hours_per_day)
        else:
            duration = None

        dependencies = data.get("dependencies")
        if dependencies is None:
            dependencies = data.get("predecessors", ())

        return cls(
            id=data.get("id"),
            duration=duration,
            dependencies=dependencies,
            name=data.get("name"),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "duration": self.duration,
            "dependencies": list(self.dependencies),
        }
        if self.name is not None:
            data["name"] = self.name
        return data
