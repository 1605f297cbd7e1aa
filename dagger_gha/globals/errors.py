"""Exception hierarchy for dagger-gha.

Every error raised on purpose by the compiler or the pre-flight checks
derives from :class:`DaggerGhaError`, so callers (and the CLI) can catch
the whole family with a single ``except`` clause.
"""

from typing import Optional


class DaggerGhaError(Exception):
    """Base class for all dagger-gha errors."""


class ConfigError(DaggerGhaError):
    """A pipeline definition or setting is malformed."""


class InvalidSecretName(DaggerGhaError):
    """A secret name can't be referenced from a workflow.

    Attributes:
        name: The offending secret name, verbatim.
        reason: Why the name was rejected.
    """

    def __init__(
        self,
        name: str,
        reason: str = "must contain only alphanumeric characters and underscores",
    ):
        self.name = name
        self.reason = reason
        super().__init__(f"invalid secret name: '{name}' {reason}")


class PipelineInvalid(DaggerGhaError):
    """The pre-flight dry run of a pipeline failed.

    Attributes:
        command: Command of the pipeline that failed.
        cause: Description of the underlying exec failure.
    """

    def __init__(self, command: str, cause: str):
        self.command = command
        self.cause = cause
        super().__init__(f"pipeline '{command}' is invalid: {cause}")


class ScriptUnavailable(DaggerGhaError):
    """A script bundled with the package can't be read."""

    def __init__(self, name: str, reason: Optional[str] = None):
        self.name = name
        message = f"bundled script '{name}' is unavailable"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class EnvCollision(DaggerGhaError):
    """Two entries of a step environment claim the same variable."""

    def __init__(self, key: str, existing: str, new: str):
        self.key = key
        super().__init__(
            f"environment variable '{key}' is already set to '{existing}', "
            f"refusing to override it with '{new}'"
        )


class DuplicateWorkflowFile(DaggerGhaError):
    """Two triggers rendered a workflow file with the same name."""

    def __init__(self, filename: str):
        self.filename = filename
        super().__init__(f"workflow file '{filename}' generated twice")


class ContainerRuntimeError(DaggerGhaError):
    """The container runtime used for pre-flight checks is unusable."""
