"""dagger-gha: generate GitHub Actions workflows from Dagger pipelines.

Daggerizing your CI makes your YAML configurations smaller, but they still
exist, and they're still a pain to maintain by hand. This package generates
the remaining workflow files from a description of the Dagger pipelines to
run on each event, and checks those pipelines before they reach GitHub.

Example:
    CLI usage:
        $ dagger-gha check                   # Dry-run every pipeline
        $ dagger-gha config                  # Write .github/workflows/*.yml
        $ dagger-gha --as-json config        # Write JSON workflows instead

    Library usage:
        from dagger_gha import Gha, Settings

        gha = Gha(Settings(runner="ubuntu-22.04"))
        gha.on_push("build --source=.", branches=["main"])
        for filename, contents in gha.config(prefix="dagger-").items():
            print(filename)
"""

from .gha import Gha
from .globals import (
    ConfigError,
    DaggerGhaError,
    InvalidSecretName,
    PipelineInvalid,
    ScriptUnavailable,
    Settings,
)
from .loader import YAMLDefinitionLoader
from .pipeline import Pipeline
from .triggers import DispatchTrigger, IssueCommentTrigger, PullRequestTrigger, PushTrigger, Trigger

__all__ = [
    # Aggregator and settings
    "Gha",
    "Settings",
    "YAMLDefinitionLoader",

    # Core types
    "Pipeline",
    "Trigger",
    "PushTrigger",
    "PullRequestTrigger",
    "DispatchTrigger",
    "IssueCommentTrigger",

    # Errors
    "DaggerGhaError",
    "ConfigError",
    "InvalidSecretName",
    "PipelineInvalid",
    "ScriptUnavailable",
]
