"""Shared test configuration and fixtures for dagger-gha tests."""

import tempfile
from pathlib import Path

import pytest

from dagger_gha.globals.settings import Settings
from dagger_gha.pipeline import Pipeline
from dagger_gha.workflow.steps_builder import DefaultStepsBuilder
from tests.helper import RecordingContainerRunner, StaticScriptFetcher


@pytest.fixture
def sample_definition():
    """Standard valid definition file for testing."""
    return """
settings:
  runner: ubuntu-latest
  dagger-version: latest
push:
  - command: build --source=.
    branches: [main]
  - command: lint --source=.
    secrets: [GH_TOKEN]
pull-request:
  - command: test --source=.
    types: [opened, synchronize]
    sparse-checkout: [src]
dispatch:
  - command: deploy --source=.
    module: ./ci
    runner: self-hosted
issue-comment:
  - command: review --source=.
    comment-prefix: /review
"""


@pytest.fixture
def temp_definition_file():
    """Create a temporary definition file for testing."""

    def _create_temp_file(content: str) -> Path:
        temp_file = tempfile.NamedTemporaryFile(suffix=".yml", mode="w+", delete=False)
        temp_file.write(content)
        temp_file.close()
        return Path(temp_file.name)

    return _create_temp_file


@pytest.fixture
def settings():
    return Settings(runner="ubuntu-latest", dagger_version="latest")


@pytest.fixture
def script_fetcher():
    return StaticScriptFetcher()


@pytest.fixture
def steps_builder(script_fetcher):
    return DefaultStepsBuilder(script_fetcher)


@pytest.fixture
def container_runner():
    return RecordingContainerRunner()


@pytest.fixture
def build_pipeline(settings):
    """Pipeline of the README example: build with a cloud token secret."""
    return Pipeline(
        command="build --source=.",
        settings=settings,
        secrets=("DAGGER_CLOUD_TOKEN",),
    )
