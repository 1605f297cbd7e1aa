import json
from typing import Any

import yaml

from dagger_gha.workflow.ast import Workflow


class _WorkflowDumper(yaml.SafeDumper):
    """SafeDumper writing multi-line strings (inlined scripts) as literal blocks."""


def _represent_str(dumper: yaml.SafeDumper, data: str) -> Any:
    if "\n" in data:
        return dumper.represent_scalar("tag:yaml.org,2002:str", data, style="|")
    return dumper.represent_scalar("tag:yaml.org,2002:str", data)


_WorkflowDumper.add_representer(str, _represent_str)


def to_yaml(workflow: Workflow) -> str:
    return yaml.dump(
        workflow.to_dict(),
        Dumper=_WorkflowDumper,
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
        width=4096,
    )


def to_json(workflow: Workflow) -> str:
    # JSON is also valid YAML, GitHub reads either
    return json.dumps(workflow.to_dict(), indent=2) + "\n"


def render(workflow: Workflow, as_json: bool = False) -> str:
    """Serialize a workflow document to YAML, or JSON if `as_json`."""
    if as_json:
        return to_json(workflow)
    return to_yaml(workflow)
