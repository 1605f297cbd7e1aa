"""Unit tests for the steps of generated jobs."""

import pytest

from dagger_gha.globals.errors import EnvCollision, ScriptUnavailable
from dagger_gha.globals.settings import Settings
from dagger_gha.pipeline import Pipeline
from dagger_gha.workflow import ast
from dagger_gha.workflow.contexts import GITHUB_CONTEXT_KEYS
from dagger_gha.workflow.steps_builder import DAGGER_DISCOVERY_PATHS, DefaultStepsBuilder
from tests.helper import StaticScriptFetcher


def github_env_keys(env):
    return [key for key in env if key.startswith("GITHUB_")]


class TestStepsOrder:
    def test_default_steps(self, steps_builder, build_pipeline):
        """Test that steps come in a fixed order."""
        steps = steps_builder.build(build_pipeline)

        assert [step.name_ for step in steps] == [
            "Checkout",
            "scripts/install-dagger.sh",
            "scripts/warm-engine.sh",
            "scripts/exec.sh",
        ]
        assert [step.id_ for step in steps] == [None, "install-dagger", "warm-engine", "exec"]

    def test_stop_engine_step(self, steps_builder):
        pipeline = Pipeline("build", settings=Settings(stop_engine=True))
        steps = steps_builder.build(pipeline)

        assert len(steps) == 5
        assert steps[-1].id_ == "stop-engine"
        assert steps[-1].name_ == "scripts/stop-engine.sh"
        assert steps[-1].exec == ast.ExecRun(run_="echo stop\n", shell_="bash")

    def test_bash_steps_inline_scripts(self, steps_builder, build_pipeline, script_fetcher):
        """Test that bash steps inline the bundled script bodies."""
        steps = steps_builder.build(build_pipeline)

        for step in steps[1:]:
            assert isinstance(step.exec, ast.ExecRun)
            assert step.exec.shell_ == "bash"
            assert step.exec.run_ == script_fetcher.scripts[step.id_]

    def test_missing_script(self, build_pipeline):
        builder = DefaultStepsBuilder(StaticScriptFetcher({}))
        with pytest.raises(ScriptUnavailable):
            builder.build(build_pipeline)


class TestCheckoutStep:
    def test_full_checkout(self, steps_builder, build_pipeline):
        step = steps_builder.checkout_step(build_pipeline)

        assert step.exec == ast.ExecAction(uses_="actions/checkout@v4")
        assert step.to_dict() == {"name": "Checkout", "uses": "actions/checkout@v4"}

    def test_sparse_checkout(self, steps_builder, settings):
        """Test that dagger discovery paths are added to user paths."""
        pipeline = Pipeline("build", settings=settings, sparse_checkout=("src", "docs"))
        step = steps_builder.checkout_step(pipeline)

        assert step.exec.with_ == {
            "sparse-checkout": "src\ndocs\ndagger.json\n.dagger\ndagger\nci"
        }

    def test_empty_sparse_checkout(self, steps_builder, settings):
        """Test that an empty list still enables sparse checkout."""
        pipeline = Pipeline("build", settings=settings, sparse_checkout=())
        step = steps_builder.checkout_step(pipeline)

        assert step.exec.with_ == {"sparse-checkout": "\n".join(DAGGER_DISCOVERY_PATHS)}

    def test_duplicate_paths_are_tolerated(self, steps_builder, settings):
        pipeline = Pipeline("build", settings=settings, sparse_checkout=("ci",))
        paths = steps_builder.checkout_step(pipeline).exec.with_["sparse-checkout"].split("\n")

        assert paths.count("ci") == 2
        assert set(DAGGER_DISCOVERY_PATHS) <= set(paths)


class TestInstallStep:
    def test_version(self, steps_builder):
        pipeline = Pipeline("build", settings=Settings(dagger_version="v0.13.0"))
        assert steps_builder.install_dagger_step(pipeline).env_ == {"DAGGER_VERSION": "v0.13.0"}

    def test_warm_engine_has_no_env(self, steps_builder, build_pipeline):
        step = steps_builder.warm_engine_step(build_pipeline)
        assert step.env_ is None
        assert "env" not in step.to_dict()


class TestExecEnv:
    def test_build_scenario(self, steps_builder, build_pipeline):
        """Test the environment of 'build --source=.' with a cloud token secret."""
        env = steps_builder.call_dagger_step(build_pipeline).env_

        assert env["COMMAND"] == "dagger call -q build --source=."
        assert env["DAGGER_CLOUD_TOKEN"] == "${{ secrets.DAGGER_CLOUD_TOKEN }}"
        assert "DAGGER_MODULE" not in env

    def test_secrets(self, steps_builder, settings):
        pipeline = Pipeline("build", settings=settings, secrets=("A", "B_2"))
        env = steps_builder.exec_env(pipeline)

        assert env["A"] == "${{ secrets.A }}"
        assert env["B_2"] == "${{ secrets.B_2 }}"

    def test_module(self, steps_builder, settings):
        pipeline = Pipeline("build", settings=settings, module="github.com/org/repo/ci")
        assert steps_builder.exec_env(pipeline)["DAGGER_MODULE"] == "github.com/org/repo/ci"

    def test_github_context(self, steps_builder, build_pipeline):
        """Test that every context key is mirrored exactly once."""
        env = steps_builder.exec_env(build_pipeline)
        keys = github_env_keys(env)

        assert len(GITHUB_CONTEXT_KEYS) == 38
        assert len(keys) == len(GITHUB_CONTEXT_KEYS)
        assert env["GITHUB_REF"] == "${{ github.ref }}"
        assert env["GITHUB_REPOSITORYURL"] == "${{ github.repositoryUrl }}"
        assert env["GITHUB_SHA"] == "${{ github.sha }}"

    def test_github_context_independent_of_pipeline(self, steps_builder):
        minimal = Pipeline("a", settings=Settings(no_traces=True))
        loaded = Pipeline(
            "b --x", settings=Settings(public_token="p"), module="m", secrets=("S",)
        )
        assert github_env_keys(steps_builder.exec_env(minimal)) == github_env_keys(
            steps_builder.exec_env(loaded)
        )

    def test_cloud_token_from_secret(self, steps_builder):
        env = steps_builder.exec_env(Pipeline("build", settings=Settings()))

        assert env["DAGGER_CLOUD_TOKEN"] == "${{ secrets.DAGGER_CLOUD_TOKEN }}"
        assert env["_EXPERIMENTAL_DAGGER_CLOUD_TOKEN"] == env["DAGGER_CLOUD_TOKEN"]

    def test_public_cloud_token(self, steps_builder):
        env = steps_builder.exec_env(Pipeline("build", settings=Settings(public_token="pub-123")))

        assert env["DAGGER_CLOUD_TOKEN"] == "pub-123"
        assert env["_EXPERIMENTAL_DAGGER_CLOUD_TOKEN"] == "pub-123"

    def test_no_traces(self, steps_builder):
        settings = Settings(no_traces=True, public_token="pub-123")
        env = steps_builder.exec_env(Pipeline("build", settings=settings))

        assert "DAGGER_CLOUD_TOKEN" not in env
        assert "_EXPERIMENTAL_DAGGER_CLOUD_TOKEN" not in env

    def test_secret_shadowing_context(self, steps_builder, settings):
        """Test that a secret can't silently replace a github context variable."""
        pipeline = Pipeline("build", settings=settings, secrets=("GITHUB_SHA",))
        with pytest.raises(EnvCollision) as exc_info:
            steps_builder.exec_env(pipeline)
        assert exc_info.value.key == "GITHUB_SHA"

    def test_secret_conflicting_with_public_token(self, steps_builder):
        settings = Settings(public_token="pub")
        pipeline = Pipeline("build", settings=settings, secrets=("DAGGER_CLOUD_TOKEN",))
        with pytest.raises(EnvCollision):
            steps_builder.exec_env(pipeline)


class TestReservedEnvNames:
    def test_fixed_variables(self, steps_builder, settings):
        """Test that every variable set by the workflow itself is reserved."""
        reserved = steps_builder.reserved_env_names(Pipeline("build", settings=settings, module="ci"))

        assert {"COMMAND", "DAGGER_MODULE", "GITHUB_TOKEN", "GITHUB_SHA"} <= reserved
        assert "_EXPERIMENTAL_DAGGER_CLOUD_TOKEN" in reserved
        assert len([key for key in reserved if key.startswith("GITHUB_")]) == len(GITHUB_CONTEXT_KEYS)

    def test_cloud_token_secret_is_allowed(self, steps_builder, build_pipeline):
        assert "DAGGER_CLOUD_TOKEN" not in steps_builder.reserved_env_names(build_pipeline)

    def test_cloud_token_with_public_token(self, steps_builder):
        pipeline = Pipeline("build", settings=Settings(public_token="pub"))
        assert "DAGGER_CLOUD_TOKEN" in steps_builder.reserved_env_names(pipeline)

    def test_no_traces(self, steps_builder):
        pipeline = Pipeline("build", settings=Settings(no_traces=True))
        reserved = steps_builder.reserved_env_names(pipeline)

        assert "DAGGER_CLOUD_TOKEN" not in reserved
        assert "_EXPERIMENTAL_DAGGER_CLOUD_TOKEN" not in reserved
        assert "DAGGER_MODULE" not in reserved
