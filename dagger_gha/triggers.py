"""Events that run a Dagger pipeline.

Each trigger pairs one :class:`~dagger_gha.pipeline.Pipeline` with the
conditions of a GitHub event, and renders the complete workflow file for it.
Filter fields (branches, paths, types...) are passed through verbatim to the
``on:`` section.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, ClassVar, Dict, List, Optional, Tuple

from dagger_gha.globals.container_runner import ContainerRunner
from dagger_gha.pipeline import JOB_ID, Pipeline
from dagger_gha.workflow import ast
from dagger_gha.workflow.serializer import render

DEFAULT_ISSUE_COMMENT_TYPES = ("created", "edited")


def _filters(**filters: Optional[Tuple[str, ...]]) -> Dict[str, List[str]]:
    """Event filters that were actually set, as lists."""
    return {key: list(value) for key, value in filters.items() if value is not None}


class Trigger(ABC):
    """Interface shared by all trigger kinds."""

    # discriminator used in generated filenames
    KIND: ClassVar[str]
    # key of the event in the 'on:' section
    EVENT: ClassVar[str]

    pipeline: Pipeline

    @abstractmethod
    def on(self) -> Dict[str, Any]:
        """The 'on:' section of the workflow."""
        pass

    def workflow(self) -> ast.Workflow:
        return replace(self.pipeline.as_workflow(), on_=self.on())

    def check(
        self,
        repo: Path,
        runner: Optional[ContainerRunner] = None,
        timeout: Optional[float] = None,
    ) -> None:
        """Pre-flight check of the triggered pipeline, see Pipeline.check."""
        self.pipeline.check(repo, runner, timeout)

    def filename(self, prefix: str, index: int, as_json: bool = False) -> str:
        """Name of the workflow file of the `index`-th (1-based) trigger of this kind."""
        extension = "json" if as_json else "yml"
        return f"{prefix}{self.KIND}-{index}.{extension}"

    def config(self, filename: str, as_json: bool = False) -> Dict[str, str]:
        """Render the workflow into a single-file tree."""
        return {filename: render(self.workflow(), as_json)}


@dataclass(frozen=True)
class PushTrigger(Trigger):
    KIND: ClassVar[str] = "push"
    EVENT: ClassVar[str] = "push"

    pipeline: Pipeline
    branches: Optional[Tuple[str, ...]] = None
    tags: Optional[Tuple[str, ...]] = None
    paths: Optional[Tuple[str, ...]] = None

    def on(self) -> Dict[str, Any]:
        return {self.EVENT: _filters(branches=self.branches, tags=self.tags, paths=self.paths)}


@dataclass(frozen=True)
class PullRequestTrigger(Trigger):
    KIND: ClassVar[str] = "pr"
    EVENT: ClassVar[str] = "pull_request"

    pipeline: Pipeline
    types: Optional[Tuple[str, ...]] = None
    branches: Optional[Tuple[str, ...]] = None
    paths: Optional[Tuple[str, ...]] = None

    def on(self) -> Dict[str, Any]:
        return {self.EVENT: _filters(types=self.types, branches=self.branches, paths=self.paths)}


@dataclass(frozen=True)
class DispatchTrigger(Trigger):
    KIND: ClassVar[str] = "dispatch"
    EVENT: ClassVar[str] = "workflow_dispatch"

    pipeline: Pipeline

    def on(self) -> Dict[str, Any]:
        return {self.EVENT: {}}


@dataclass(frozen=True)
class IssueCommentTrigger(Trigger):
    """Runs the pipeline on issue and pull request comments.

    GitHub has no filter on the comment body, so `comment_prefix` becomes a
    condition on the job instead of a filter in 'on:'.
    """

    KIND: ClassVar[str] = "issue-comment"
    EVENT: ClassVar[str] = "issue_comment"

    pipeline: Pipeline
    types: Tuple[str, ...] = DEFAULT_ISSUE_COMMENT_TYPES
    comment_prefix: Optional[str] = None

    def on(self) -> Dict[str, Any]:
        return {self.EVENT: {"types": list(self.types)}}

    def condition(self) -> Optional[str]:
        if not self.comment_prefix:
            return None
        prefix = self.comment_prefix.replace("'", "''")
        return f"startsWith(github.event.comment.body, '{prefix}')"

    def workflow(self) -> ast.Workflow:
        workflow = super().workflow()
        condition = self.condition()
        if condition is None:
            return workflow
        jobs = {
            job_id: replace(job, if_=condition) if job_id == JOB_ID else job
            for job_id, job in workflow.jobs_.items()
        }
        return replace(workflow, jobs_=jobs)
