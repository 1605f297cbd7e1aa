import logging
import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional, Tuple

from dagger_gha.globals.container_runner import ContainerRunner, DockerContainerRunner
from dagger_gha.globals.errors import ConfigError, ContainerRuntimeError, PipelineInvalid
from dagger_gha.globals.secret_names import check_secret_names
from dagger_gha.globals.settings import Settings
from dagger_gha.workflow import ast
from dagger_gha.workflow.steps_builder import EXEC_STEP_ID, DefaultStepsBuilder, StepsBuilder

logger = logging.getLogger(__name__)

JOB_ID = "dagger"
CHECK_PACKAGES = ("dagger", "bash")


@dataclass(frozen=True)
class Pipeline:
    """
    A Dagger pipeline to be called from a GitHub Actions workflow.

    Attributes:
        command: The Dagger command to execute, e.g. 'build --source=.'
        settings: Settings of the workflow, with the runner already resolved
        module: Dagger module to load, empty for the default module
        secrets: Names of the GitHub secrets exposed to the command
        sparse_checkout: Paths to check out. None checks out everything,
            an empty tuple still enables sparse checkout.
    """

    command: str
    settings: Settings = field(default_factory=Settings)
    module: Optional[str] = None
    secrets: Tuple[str, ...] = ()
    sparse_checkout: Optional[Tuple[str, ...]] = None

    def __post_init__(self):
        if not self.command or not self.command.strip():
            raise ConfigError("pipeline command must not be empty")
        # set semantics, first-seen order
        object.__setattr__(self, "secrets", tuple(dict.fromkeys(self.secrets)))
        if self.sparse_checkout is not None:
            object.__setattr__(self, "sparse_checkout", tuple(self.sparse_checkout))

    @property
    def name(self) -> str:
        return self.command.split(maxsplit=1)[0]

    def check(
        self,
        repo: Path,
        runner: Optional[ContainerRunner] = None,
        timeout: Optional[float] = None,
    ) -> None:
        """Check that the pipeline is valid, in a best effort way.

        Secret names are checked first, without any I/O: they must be valid
        and must not shadow a variable of the Dagger step. Then the command
        is dry-run with --help in a container where `repo` is mounted.

        Args:
            repo: Repository the workflow will run against.
            runner: Container runner, defaults to docker.
            timeout: Seconds before the dry run is aborted.

        Raises:
            InvalidSecretName: If a secret name can't be used in a workflow.
            PipelineInvalid: If the dry run didn't succeed.
        """
        check_secret_names(self.secrets, DefaultStepsBuilder().reserved_env_names(self))
        self._check_command_and_module(repo, runner or DockerContainerRunner(), timeout)

    def check_script(self) -> str:
        script = "dagger call"
        if self.module:
            script += f" -m {shlex.quote(self.module)}"
        return f"{script} {self.command} --help"

    def _check_command_and_module(
        self, repo: Path, runner: ContainerRunner, timeout: Optional[float]
    ) -> None:
        script = self.check_script()
        logger.info(f"Checking pipeline '{self.name}': {script}")
        try:
            result = runner.run(script, repo, packages=CHECK_PACKAGES, timeout=timeout)
        except ContainerRuntimeError as e:
            raise PipelineInvalid(self.command, str(e)) from e
        if result.exit_code != 0:
            detail = result.stderr.strip() or result.stdout.strip()
            cause = f"exit code {result.exit_code}"
            if detail:
                cause += f": {detail}"
            raise PipelineInvalid(self.command, cause)
        logger.debug(f"Pipeline '{self.name}' passed pre-flight check")

    def as_workflow(self, steps_builder: Optional[StepsBuilder] = None) -> ast.Workflow:
        """Generate a workflow running this pipeline.

        The workflow has no triggers, they should be filled separately.
        """
        steps = (steps_builder or DefaultStepsBuilder()).build(self)
        job = ast.Job(
            runs_on_=self.settings.runner,
            steps_=steps,
            outputs_={
                "stdout": f"${{{{ steps.{EXEC_STEP_ID}.outputs.stdout }}}}",
                "stderr": f"${{{{ steps.{EXEC_STEP_ID}.outputs.stderr }}}}",
            },
        )
        return ast.Workflow(name_=self.command, on_={}, jobs_={JOB_ID: job})


def new_pipeline(
    settings: Settings,
    command: str,
    module: Optional[str] = None,
    runner: Optional[str] = None,
    secrets: Optional[Iterable[str]] = None,
    sparse_checkout: Optional[Iterable[str]] = None,
) -> Pipeline:
    """Build a pipeline, overriding the runner of `settings` if one is given."""
    return Pipeline(
        command=command,
        settings=settings.with_runner(runner),
        module=module or None,
        secrets=tuple(secrets or ()),
        sparse_checkout=None if sparse_checkout is None else tuple(sparse_checkout),
    )
