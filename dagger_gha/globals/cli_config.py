from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional


@dataclass
class CLIConfig:
    """
    Configuration for CLI operations.

    Attributes:
        definition_file: Path to the pipeline definition file
        repo: Repository mounted for pre-flight checks
        output_dir: Directory receiving generated workflow files
        prefix: Prefix of generated workflow filenames
        timeout: Seconds before each pre-flight check is aborted, or None
        jobs: Number of pre-flight checks running at once
        settings_overrides: Settings fields given on the command line,
            taking precedence over the definition file
    """

    definition_file: Path
    repo: Path = Path(".")
    output_dir: Path = Path(".github/workflows")
    prefix: str = ""
    timeout: Optional[float] = None
    jobs: int = 1
    settings_overrides: Dict[str, Any] = field(default_factory=dict)
