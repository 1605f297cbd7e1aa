"""Access to the shell scripts shipped with dagger-gha.

Generated workflows inline the body of a few bash scripts (install Dagger,
warm the engine, run the command, stop the engine). The scripts are checked
in under ``dagger_gha/scripts/`` and shipped as package data, so they are
looked up by logical name rather than by path:

- ``install-dagger``
- ``warm-engine``
- ``exec``
- ``stop-engine``

Typical usage:
    fetcher = BundledScriptFetcher()
    body = fetcher.fetch("exec")
"""

import logging
from abc import ABC, abstractmethod
from importlib import resources
from typing import Dict

from dagger_gha.globals.errors import ScriptUnavailable

logger = logging.getLogger(__name__)

SCRIPTS_PACKAGE = "dagger_gha"
SCRIPTS_DIR = "scripts"


class ScriptFetcher(ABC):
    """Abstract interface for fetching script bodies by logical name."""

    @abstractmethod
    def fetch(self, name: str) -> str:
        """Return the contents of the script `name`.

        Args:
            name: Logical script name, without directory or extension.

        Returns:
            The script body.

        Raises:
            ScriptUnavailable: If the script can't be read. This points to a
                packaging defect, not to a user error.
        """
        pass

    @abstractmethod
    def clear_cache(self) -> None:
        """Forget all previously fetched scripts."""
        pass


class BundledScriptFetcher(ScriptFetcher):
    """Reads scripts from the package data, caching every body it reads.

    Scripts never change during a run, so each one is read at most once per
    fetcher instance.
    """

    def __init__(self, package: str = SCRIPTS_PACKAGE, directory: str = SCRIPTS_DIR) -> None:
        self.cache: Dict[str, str] = {}
        self.package = package
        self.directory = directory

    def path(self, name: str) -> str:
        """Relative path of a script inside the module source."""
        return f"{self.directory}/{name}.sh"

    def fetch(self, name: str) -> str:
        if name in self.cache:
            return self.cache[name]

        resource = resources.files(self.package).joinpath(self.directory).joinpath(f"{name}.sh")
        try:
            body = resource.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Could not read bundled script {self.path(name)}: {e}")
            raise ScriptUnavailable(name, str(e)) from e

        logger.debug(f"Loaded bundled script {self.path(name)} ({len(body)} bytes)")
        self.cache[name] = body
        return body

    def clear_cache(self) -> None:
        self.cache.clear()
