import time
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from dagger_gha.globals.container_runner import ContainerRunner, ExecResult
from dagger_gha.globals.errors import ContainerRuntimeError, ScriptUnavailable
from dagger_gha.globals.script_fetcher import ScriptFetcher


class RecordingContainerRunner(ContainerRunner):
    """Container runner recording every invocation instead of running containers.

    Outcomes are scripted per call, in order: an ExecResult is returned, an
    exception is raised. Once the script is exhausted every run succeeds.
    """

    def __init__(self, outcomes: Optional[Sequence[Union[ExecResult, Exception]]] = None):
        self.outcomes = list(outcomes or [])
        self.calls: List[Dict] = []

    def run(
        self,
        script: str,
        repo: Path,
        packages: Sequence[str] = (),
        timeout: Optional[float] = None,
    ) -> ExecResult:
        self.calls.append(
            {"script": script, "repo": repo, "packages": tuple(packages), "timeout": timeout}
        )
        if not self.outcomes:
            return ExecResult(exit_code=0)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    @property
    def scripts(self) -> List[str]:
        return [call["script"] for call in self.calls]


class FailingContainerRunner(ContainerRunner):
    """Container runner failing every script containing one of `markers`.

    Failures return at once, successful runs take `delay` seconds.
    """

    def __init__(self, *markers: str, delay: float = 0):
        self.markers = markers
        self.delay = delay
        self.scripts: List[str] = []

    def run(self, script, repo, packages=(), timeout=None) -> ExecResult:
        self.scripts.append(script)
        if any(marker in script for marker in self.markers):
            return ExecResult(exit_code=1, stderr=f"unknown command in: {script}")
        time.sleep(self.delay)
        return ExecResult(exit_code=0)


class StaticScriptFetcher(ScriptFetcher):
    """Script fetcher serving predictable script bodies."""

    def __init__(self, scripts: Optional[Dict[str, str]] = None):
        self.scripts = scripts if scripts is not None else {
            "install-dagger": "echo install\n",
            "warm-engine": "echo warm\n",
            "exec": "echo exec\n",
            "stop-engine": "echo stop\n",
        }
        self.fetched: List[str] = []

    def fetch(self, name: str) -> str:
        self.fetched.append(name)
        if name not in self.scripts:
            raise ScriptUnavailable(name)
        return self.scripts[name]

    def clear_cache(self) -> None:
        self.fetched.clear()


TIMEOUT = ContainerRuntimeError("timed out after 5s")
