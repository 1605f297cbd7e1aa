from dataclasses import dataclass, replace
from typing import Optional

DEFAULT_DAGGER_VERSION = "latest"
DEFAULT_RUNNER = "ubuntu-latest"


@dataclass(frozen=True)
class Settings:
    """
    Settings shared by every generated workflow.

    Attributes:
        public_token: Public Dagger Cloud token for open-source projects.
            Never pass a private token here, it ends up in the workflow file.
        dagger_version: Dagger version installed by the workflows
        no_traces: Don't send traces to Dagger Cloud
        stop_engine: Explicitly stop the Dagger Engine after the pipeline
        as_json: Encode generated files as JSON instead of YAML
        runner: Default runner label for all workflows
    """

    public_token: Optional[str] = None
    dagger_version: str = DEFAULT_DAGGER_VERSION
    no_traces: bool = False
    stop_engine: bool = False
    as_json: bool = False
    runner: str = DEFAULT_RUNNER

    def __post_init__(self):
        if not self.dagger_version:
            object.__setattr__(self, "dagger_version", DEFAULT_DAGGER_VERSION)
        if not self.runner:
            object.__setattr__(self, "runner", DEFAULT_RUNNER)

    def with_runner(self, runner: Optional[str]) -> "Settings":
        """Copy of these settings running on `runner`, if one is given."""
        if not runner:
            return self
        return replace(self, runner=runner)
