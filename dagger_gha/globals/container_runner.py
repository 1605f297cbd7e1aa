"""Isolated command execution for pre-flight checks.

Pre-flight checks run ``dagger call ... --help`` against the target
repository inside a throwaway container, so a bad command or module is caught
before the workflow ever reaches GitHub. The checks only depend on the
:class:`ContainerRunner` interface, which keeps them testable without a
container runtime.

Typical usage:
    runner = DockerContainerRunner()
    result = runner.run("dagger call build --help", Path("."), packages=("dagger", "bash"))
    if result.exit_code != 0:
        print(result.stderr)
"""

import logging
import shlex
import shutil
import subprocess
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from dagger_gha.globals.errors import ContainerRuntimeError

logger = logging.getLogger(__name__)

MOUNT_PATH = "/src"
DEFAULT_IMAGE = "cgr.dev/chainguard/wolfi-base:latest"
DOCKER_SOCKET = "/var/run/docker.sock"


@dataclass(frozen=True)
class ExecResult:
    """Outcome of a command run in a container."""

    exit_code: int
    stdout: str = ""
    stderr: str = ""


class ContainerRunner(ABC):
    """Abstract interface for running a shell script in an isolated environment."""

    @abstractmethod
    def run(
        self,
        script: str,
        repo: Path,
        packages: Sequence[str] = (),
        timeout: Optional[float] = None,
    ) -> ExecResult:
        """Run `script` with bash in a fresh container.

        The container has `packages` installed, `repo` mounted read-write at
        /src, and /src as its working directory.

        Args:
            script: Bash script to run.
            repo: Directory to mount.
            packages: Packages to install in the base image.
            timeout: Seconds before the run is aborted. None waits forever.

        Returns:
            ExecResult with the exit code and captured output.

        Raises:
            ContainerRuntimeError: If the container couldn't be run or the
                timeout expired.
        """
        pass


class DockerContainerRunner(ContainerRunner):
    """Runs scripts with the docker CLI on a Wolfi base image.

    The host's docker socket is mounted and the container is privileged, so
    the Dagger CLI inside it can provision an engine.
    """

    def __init__(self, image: str = DEFAULT_IMAGE, docker: str = "docker") -> None:
        self.image = image
        self.docker = docker

    def command(self, name: str, script: str, repo: Path, packages: Sequence[str]) -> List[str]:
        """Build the docker CLI invocation for one run."""
        inner = "exec bash -c " + shlex.quote(script)
        if packages:
            install = " ".join(shlex.quote(p) for p in packages)
            inner = f"apk add --no-cache {install} >/dev/null && {inner}"
        return [
            self.docker,
            "run",
            "--rm",
            "--name",
            name,
            "--privileged",
            "-v",
            f"{DOCKER_SOCKET}:{DOCKER_SOCKET}",
            "-v",
            f"{repo.resolve()}:{MOUNT_PATH}",
            "-w",
            MOUNT_PATH,
            self.image,
            "sh",
            "-c",
            inner,
        ]

    def run(
        self,
        script: str,
        repo: Path,
        packages: Sequence[str] = (),
        timeout: Optional[float] = None,
    ) -> ExecResult:
        if shutil.which(self.docker) is None:
            raise ContainerRuntimeError(f"'{self.docker}' not found in PATH")

        name = f"dagger-gha-check-{uuid.uuid4().hex[:12]}"
        cmd = self.command(name, script, repo, packages)
        logger.debug(f"Running {shlex.join(cmd)}")

        try:
            completed = subprocess.run(
                cmd, capture_output=True, text=True, timeout=timeout, check=False
            )
        except subprocess.TimeoutExpired as e:
            self._kill(name)
            raise ContainerRuntimeError(f"timed out after {timeout}s") from e
        except OSError as e:
            raise ContainerRuntimeError(f"could not run {self.docker}: {e}") from e
        except BaseException:
            # Interrupted: the docker client is gone but the container isn't
            self._kill(name)
            raise

        return ExecResult(
            exit_code=completed.returncode,
            stdout=completed.stdout,
            stderr=completed.stderr,
        )

    def _kill(self, name: str) -> None:
        """Stop a container left behind by an aborted run."""
        try:
            subprocess.run(
                [self.docker, "kill", name], capture_output=True, timeout=30, check=False
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.warning(f"Could not kill container {name}: {e}")
