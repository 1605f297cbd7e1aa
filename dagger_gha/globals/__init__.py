from .cli_config import CLIConfig
from .container_runner import ContainerRunner, DockerContainerRunner, ExecResult
from .errors import (
    ConfigError,
    ContainerRuntimeError,
    DaggerGhaError,
    DuplicateWorkflowFile,
    EnvCollision,
    InvalidSecretName,
    PipelineInvalid,
    ScriptUnavailable,
)
from .script_fetcher import BundledScriptFetcher, ScriptFetcher
from .secret_names import check_secret_names, is_valid_secret_name
from .settings import Settings

__all__ = [
    "CLIConfig",
    "ContainerRunner",
    "DockerContainerRunner",
    "ExecResult",
    "ConfigError",
    "ContainerRuntimeError",
    "DaggerGhaError",
    "DuplicateWorkflowFile",
    "EnvCollision",
    "InvalidSecretName",
    "PipelineInvalid",
    "ScriptUnavailable",
    "BundledScriptFetcher",
    "ScriptFetcher",
    "check_secret_names",
    "is_valid_secret_name",
    "Settings",
]
