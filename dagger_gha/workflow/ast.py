from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class Workflow:
    name_: str
    on_: Dict[str, Any]
    jobs_: Dict[str, "Job"]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name_,
            "on": self.on_,
            "jobs": {job_id: job.to_dict() for job_id, job in self.jobs_.items()},
        }


# region Jobs
@dataclass(frozen=True)
class Job:
    runs_on_: str
    steps_: List["JobStep"]
    outputs_: Dict[str, str] = field(default_factory=dict)
    if_: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        job: Dict[str, Any] = {"runs-on": self.runs_on_}
        if self.if_:
            job["if"] = self.if_
        job["steps"] = [step.to_dict() for step in self.steps_]
        if self.outputs_:
            job["outputs"] = dict(self.outputs_)
        return job


@dataclass(frozen=True)
class JobStep:
    name_: str
    exec: "Exec"
    id_: Optional[str] = None
    # None if the step sets no variables
    env_: Optional[Dict[str, str]] = None

    def to_dict(self) -> Dict[str, Any]:
        step: Dict[str, Any] = {"name": self.name_}
        if self.id_:
            step["id"] = self.id_
        step.update(self.exec.to_dict())
        if self.env_:
            step["env"] = dict(self.env_)
        return step


@dataclass(frozen=True)
class Exec(ABC):
    @abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        pass


@dataclass(frozen=True)
class ExecAction(Exec):
    uses_: str
    # None if no inputs
    with_: Optional[Dict[str, str]] = None

    def to_dict(self) -> Dict[str, Any]:
        step: Dict[str, Any] = {"uses": self.uses_}
        if self.with_:
            step["with"] = dict(self.with_)
        return step


@dataclass(frozen=True)
class ExecRun(Exec):
    run_: str
    shell_: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        step: Dict[str, Any] = {}
        if self.shell_:
            step["shell"] = self.shell_
        step["run"] = self.run_
        return step


# endregion Jobs
