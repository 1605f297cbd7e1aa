"""Manage GitHub Actions configurations with Dagger.

Daggerizing your CI makes your YAML configurations smaller, but they still
exist, and they're still a pain to maintain by hand. :class:`Gha` finishes
the job: register the pipelines that should run on each event, then generate
the remaining workflow files from them.

Example:
    gha = Gha(Settings(stop_engine=True))
    gha.on_push("build --source=.", branches=["main"])
    gha.on_dispatch("deploy --source=.", secrets=["DEPLOY_TOKEN"])
    gha.write_config(Path(".github/workflows"))
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from dagger_gha.globals.container_runner import ContainerRunner, DockerContainerRunner
from dagger_gha.globals.errors import DuplicateWorkflowFile
from dagger_gha.globals.settings import Settings
from dagger_gha.pipeline import new_pipeline
from dagger_gha.triggers import (
    DEFAULT_ISSUE_COMMENT_TYPES,
    DispatchTrigger,
    IssueCommentTrigger,
    PullRequestTrigger,
    PushTrigger,
    Trigger,
)

logger = logging.getLogger(__name__)


def _tuple(values: Optional[Iterable[str]]) -> Optional[Tuple[str, ...]]:
    return None if values is None else tuple(values)


class Gha:
    """Collection of triggered pipelines sharing the same settings.

    Triggers of each kind keep their registration order, which numbers the
    generated files: the same registrations always give the same files.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or Settings()
        self.push_triggers: List[PushTrigger] = []
        self.pull_request_triggers: List[PullRequestTrigger] = []
        self.dispatch_triggers: List[DispatchTrigger] = []
        self.issue_comment_triggers: List[IssueCommentTrigger] = []

    def on_push(
        self,
        command: str,
        module: Optional[str] = None,
        runner: Optional[str] = None,
        secrets: Optional[Iterable[str]] = None,
        sparse_checkout: Optional[Iterable[str]] = None,
        branches: Optional[Iterable[str]] = None,
        tags: Optional[Iterable[str]] = None,
        paths: Optional[Iterable[str]] = None,
    ) -> "Gha":
        """Run `command` when commits or tags are pushed."""
        pipeline = new_pipeline(self.settings, command, module, runner, secrets, sparse_checkout)
        self.push_triggers.append(
            PushTrigger(pipeline, branches=_tuple(branches), tags=_tuple(tags), paths=_tuple(paths))
        )
        return self

    def on_pull_request(
        self,
        command: str,
        module: Optional[str] = None,
        runner: Optional[str] = None,
        secrets: Optional[Iterable[str]] = None,
        sparse_checkout: Optional[Iterable[str]] = None,
        types: Optional[Iterable[str]] = None,
        branches: Optional[Iterable[str]] = None,
        paths: Optional[Iterable[str]] = None,
    ) -> "Gha":
        """Run `command` on pull request activity."""
        pipeline = new_pipeline(self.settings, command, module, runner, secrets, sparse_checkout)
        self.pull_request_triggers.append(
            PullRequestTrigger(
                pipeline, types=_tuple(types), branches=_tuple(branches), paths=_tuple(paths)
            )
        )
        return self

    def on_dispatch(
        self,
        command: str,
        module: Optional[str] = None,
        runner: Optional[str] = None,
        secrets: Optional[Iterable[str]] = None,
        sparse_checkout: Optional[Iterable[str]] = None,
    ) -> "Gha":
        """Run `command` when the workflow is dispatched manually."""
        pipeline = new_pipeline(self.settings, command, module, runner, secrets, sparse_checkout)
        self.dispatch_triggers.append(DispatchTrigger(pipeline))
        return self

    def on_issue_comment(
        self,
        command: str,
        module: Optional[str] = None,
        runner: Optional[str] = None,
        secrets: Optional[Iterable[str]] = None,
        sparse_checkout: Optional[Iterable[str]] = None,
        types: Optional[Iterable[str]] = None,
        comment_prefix: Optional[str] = None,
    ) -> "Gha":
        """Run `command` when an issue or pull request is commented."""
        pipeline = new_pipeline(self.settings, command, module, runner, secrets, sparse_checkout)
        self.issue_comment_triggers.append(
            IssueCommentTrigger(
                pipeline,
                types=DEFAULT_ISSUE_COMMENT_TYPES if types is None else tuple(types),
                comment_prefix=comment_prefix,
            )
        )
        return self

    def triggers(self) -> Iterator[Trigger]:
        """All triggers: push, pull request, dispatch then issue comment."""
        yield from self.push_triggers
        yield from self.pull_request_triggers
        yield from self.dispatch_triggers
        yield from self.issue_comment_triggers

    def check(
        self,
        repo: Path,
        runner: Optional[ContainerRunner] = None,
        timeout: Optional[float] = None,
        max_workers: int = 1,
    ) -> "Gha":
        """Check every pipeline, stopping at the first failure.

        Args:
            repo: Repository the workflows will run against.
            runner: Container runner for the dry runs, defaults to docker.
            timeout: Seconds before each dry run is aborted.
            max_workers: Number of dry runs in flight. Above 1, the failure
                of the earliest registered pipeline is reported, and the
                dry runs not started yet are cancelled.

        Raises:
            DaggerGhaError: The first failure, unchanged.
        """
        runner = runner or DockerContainerRunner()
        triggers = list(self.triggers())
        logger.info(f"Checking {len(triggers)} pipelines")
        if max_workers <= 1:
            for trigger in triggers:
                trigger.check(repo, runner, timeout)
            return self

        executor = ThreadPoolExecutor(max_workers=max_workers)
        try:
            futures = [
                executor.submit(trigger.check, repo, runner, timeout) for trigger in triggers
            ]
            # Waited in registration order: the first error raised is the earliest one
            for future in futures:
                future.result()
        finally:
            executor.shutdown(wait=True, cancel_futures=True)
        return self

    def _indexed(self) -> Iterator[Tuple[int, Trigger]]:
        groups: Sequence[Sequence[Trigger]] = (
            self.push_triggers,
            self.pull_request_triggers,
            self.dispatch_triggers,
            self.issue_comment_triggers,
        )
        for group in groups:
            for i, trigger in enumerate(group):
                yield i + 1, trigger

    def config(self, prefix: str = "") -> Dict[str, str]:
        """Generate the workflow files, keyed by filename.

        Args:
            prefix: Prefix to use for generated workflow filenames

        Raises:
            DuplicateWorkflowFile: If two triggers end up with the same filename.
        """
        tree: Dict[str, str] = {}
        for index, trigger in self._indexed():
            filename = trigger.filename(prefix, index, self.settings.as_json)
            for name, contents in trigger.config(filename, self.settings.as_json).items():
                if name in tree:
                    raise DuplicateWorkflowFile(name)
                tree[name] = contents
        logger.debug(f"Generated {len(tree)} workflow files")
        return tree

    def write_config(self, directory: Path, prefix: str = "") -> List[Path]:
        """Write the workflow files under `directory` and return their paths."""
        directory.mkdir(parents=True, exist_ok=True)
        written: List[Path] = []
        for name, contents in self.config(prefix).items():
            path = directory / name
            path.write_text(contents, encoding="utf-8")
            logger.info(f"Wrote {path}")
            written.append(path)
        return written
