from abc import ABC, abstractmethod
from dataclasses import replace
from typing import TYPE_CHECKING, Dict, List, Optional, Set

from dagger_gha.globals.errors import EnvCollision
from dagger_gha.globals.script_fetcher import BundledScriptFetcher, ScriptFetcher
from dagger_gha.workflow import ast
from dagger_gha.workflow.contexts import (
    GITHUB_CONTEXT_KEYS,
    github_env_name,
    github_expression,
    secret_expression,
)

if TYPE_CHECKING:
    from dagger_gha.pipeline import Pipeline

CHECKOUT_ACTION = "actions/checkout@v4"
EXEC_STEP_ID = "exec"
CLOUD_TOKEN_SECRET = "DAGGER_CLOUD_TOKEN"
# Older engines only read the experimental name
CLOUD_TOKEN_ENV_NAMES = ("DAGGER_CLOUD_TOKEN", "_EXPERIMENTAL_DAGGER_CLOUD_TOKEN")
# FIXME: this is only a guess, the 'source' field of dagger.json is the only
#  reliable way to know where the module lives.
DAGGER_DISCOVERY_PATHS = ("dagger.json", ".dagger", "dagger", "ci")


class StepsBuilder(ABC):
    """
    Builder for the steps of a Dagger workflow job.
    Converts a pipeline into the ordered list of steps that run it.
    """

    @abstractmethod
    def build(self, pipeline: "Pipeline") -> List[ast.JobStep]:
        pass


class DefaultStepsBuilder(StepsBuilder):
    def __init__(self, script_fetcher: Optional[ScriptFetcher] = None) -> None:
        self.script_fetcher = script_fetcher or BundledScriptFetcher()

    def build(self, pipeline: "Pipeline") -> List[ast.JobStep]:
        steps = [
            self.checkout_step(pipeline),
            self.install_dagger_step(pipeline),
            self.warm_engine_step(pipeline),
            self.call_dagger_step(pipeline),
        ]
        if pipeline.settings.stop_engine:
            steps.append(self.stop_engine_step(pipeline))
        return steps

    def checkout_step(self, pipeline: "Pipeline") -> ast.JobStep:
        with_ = None
        if pipeline.sparse_checkout is not None:
            # Also check out common dagger paths, so local modules work by default
            paths = list(pipeline.sparse_checkout) + list(DAGGER_DISCOVERY_PATHS)
            with_ = {"sparse-checkout": "\n".join(paths)}
        return ast.JobStep(name_="Checkout", exec=ast.ExecAction(uses_=CHECKOUT_ACTION, with_=with_))

    def install_dagger_step(self, pipeline: "Pipeline") -> ast.JobStep:
        return self._bash_step(
            "install-dagger", {"DAGGER_VERSION": pipeline.settings.dagger_version}
        )

    def warm_engine_step(self, pipeline: "Pipeline") -> ast.JobStep:
        return self._bash_step("warm-engine")

    def call_dagger_step(self, pipeline: "Pipeline") -> ast.JobStep:
        return self._bash_step(EXEC_STEP_ID, self.exec_env(pipeline))

    def stop_engine_step(self, pipeline: "Pipeline") -> ast.JobStep:
        return self._bash_step("stop-engine")

    def exec_env(self, pipeline: "Pipeline") -> Dict[str, str]:
        """Environment of the step running the Dagger command.

        Raises:
            EnvCollision: If two entries want different values for one variable,
                e.g. a secret named like a github context variable.
        """
        env: Dict[str, str] = {}
        _set_env(env, "COMMAND", "dagger call -q " + pipeline.command)
        for secret in pipeline.secrets:
            _set_env(env, secret, secret_expression(secret))
        if pipeline.module:
            _set_env(env, "DAGGER_MODULE", pipeline.module)
        if not pipeline.settings.no_traces:
            token = pipeline.settings.public_token or secret_expression(CLOUD_TOKEN_SECRET)
            for name in CLOUD_TOKEN_ENV_NAMES:
                _set_env(env, name, token)
        # github.ref becomes $GITHUB_REF, etc.
        for key, _ in GITHUB_CONTEXT_KEYS:
            _set_env(env, github_env_name(key), github_expression(key))
        return env

    def reserved_env_names(self, pipeline: "Pipeline") -> Set[str]:
        """Variables of the Dagger step that no secret of `pipeline` may be named after.

        A secret may only share a name with a variable already bound to that
        same secret, like DAGGER_CLOUD_TOKEN when no public token is set.
        """
        env = self.exec_env(replace(pipeline, secrets=()))
        return {key for key, value in env.items() if value != secret_expression(key)}

    def _bash_step(self, id_: str, env: Optional[Dict[str, str]] = None) -> ast.JobStep:
        """Step running the bundled script scripts/<id_>.sh with bash."""
        script = self.script_fetcher.fetch(id_)
        return ast.JobStep(
            name_=f"scripts/{id_}.sh",
            id_=id_,
            exec=ast.ExecRun(run_=script, shell_="bash"),
            env_=env,
        )


def _set_env(env: Dict[str, str], key: str, value: str) -> None:
    existing = env.get(key)
    if existing is not None and existing != value:
        raise EnvCollision(key, existing, value)
    env[key] = value
