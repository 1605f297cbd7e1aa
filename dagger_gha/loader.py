"""Load pipeline definitions from a YAML file.

A definition file lists the pipelines to run on each event, plus optional
settings shared by all of them:

    settings:
      runner: ubuntu-latest
      dagger-version: latest
      stop-engine: true
    push:
      - command: build --source=.
        branches: [main]
    pull-request:
      - command: test --source=.
        secrets: [DOCKERHUB_TOKEN]
    dispatch:
      - command: deploy --source=.
    issue-comment:
      - command: review --source=.
        comment-prefix: /review
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import replace
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import yaml

from dagger_gha.gha import Gha
from dagger_gha.globals.errors import ConfigError
from dagger_gha.globals.settings import Settings

logger = logging.getLogger(__name__)

DEFAULT_DEFINITION_FILE = "dagger-gha.yml"

SETTINGS_KEYS = {
    "public-token": ("public_token", str),
    "dagger-version": ("dagger_version", str),
    "no-traces": ("no_traces", bool),
    "stop-engine": ("stop_engine", bool),
    "as-json": ("as_json", bool),
    "runner": ("runner", str),
}

PIPELINE_KEYS = {
    "command": ("command", str),
    "module": ("module", str),
    "runner": ("runner", str),
    "secrets": ("secrets", list),
    "sparse-checkout": ("sparse_checkout", list),
}

TRIGGER_KEYS = {
    "push": {"branches": ("branches", list), "tags": ("tags", list), "paths": ("paths", list)},
    "pull-request": {
        "types": ("types", list),
        "branches": ("branches", list),
        "paths": ("paths", list),
    },
    "dispatch": {},
    "issue-comment": {"types": ("types", list), "comment-prefix": ("comment_prefix", str)},
}


class DefinitionLoader(ABC):
    """Abstract base class for pipeline definition loaders."""

    @abstractmethod
    def load(self, file: Path, overrides: Optional[Dict[str, Any]] = None) -> Gha:
        """Load a definition file into a Gha.

        Args:
            file: Path to the definition file.
            overrides: Settings fields taking precedence over the file.

        Raises:
            ConfigError: If the file can't be read or is malformed.
        """
        pass


class YAMLDefinitionLoader(DefinitionLoader):
    """Definition loader using PyYAML."""

    def load(self, file: Path, overrides: Optional[Dict[str, Any]] = None) -> Gha:
        try:
            with open(file, "r", encoding="utf-8") as f:
                buffer = f.read()
        except OSError as e:
            raise ConfigError(f"could not read {file}: {e}") from e

        try:
            data = yaml.safe_load(buffer)
        except yaml.YAMLError as e:
            raise ConfigError(f"{file} is not valid YAML: {e}") from e

        return self.from_dict(data or {}, overrides, source=str(file))

    def from_dict(
        self, data: Any, overrides: Optional[Dict[str, Any]] = None, source: str = "<definition>"
    ) -> Gha:
        """Build a Gha from already parsed definitions."""
        if not isinstance(data, dict):
            raise ConfigError(f"{source}: expected a mapping at the top level")
        unknown = set(data) - {"settings"} - set(TRIGGER_KEYS)
        if unknown:
            raise ConfigError(f"{source}: unknown keys {', '.join(sorted(map(str, unknown)))}")

        settings = self.parse_settings(data.get("settings") or {}, source)
        if overrides:
            settings = replace(settings, **overrides)

        gha = Gha(settings)
        factories: Dict[str, Callable[..., Gha]] = {
            "push": gha.on_push,
            "pull-request": gha.on_pull_request,
            "dispatch": gha.on_dispatch,
            "issue-comment": gha.on_issue_comment,
        }
        for kind, factory in factories.items():
            entries = data.get(kind) or []
            if not isinstance(entries, list):
                raise ConfigError(f"{source}: '{kind}' must be a list of pipelines")
            for i, entry in enumerate(entries):
                where = f"{source}: {kind}[{i}]"
                factory(**self._parse_entry(entry, {**PIPELINE_KEYS, **TRIGGER_KEYS[kind]}, where))
        logger.debug(f"Loaded {len(list(gha.triggers()))} pipelines from {source}")
        return gha

    def parse_settings(self, data: Any, source: str) -> Settings:
        fields = self._parse_entry(data, SETTINGS_KEYS, f"{source}: settings")
        return replace(Settings(), **fields)

    def _parse_entry(
        self, entry: Any, keys: Dict[str, Any], where: str
    ) -> Dict[str, Any]:
        if not isinstance(entry, dict):
            raise ConfigError(f"{where}: expected a mapping")
        out: Dict[str, Any] = {}
        for key, value in entry.items():
            if key not in keys:
                raise ConfigError(f"{where}: unknown key '{key}'")
            name, type_ = keys[key]
            if value is None:
                continue
            if type_ is list:
                value = self._string_list(value, f"{where}.{key}")
            elif not isinstance(value, type_):
                raise ConfigError(f"{where}.{key}: expected {type_.__name__}")
            out[name] = value
        if "command" in keys and not out.get("command"):
            raise ConfigError(f"{where}: missing 'command'")
        return out

    def _string_list(self, value: Any, where: str) -> List[str]:
        if isinstance(value, str):
            return [value]
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise ConfigError(f"{where}: expected a list of strings")
        return value
