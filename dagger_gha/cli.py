from abc import ABC, abstractmethod
from typing import Optional

from rich.progress import Progress, SpinnerColumn, TextColumn

from dagger_gha.cli_components.output_formatter import ColoredFormatter, OutputFormatter
from dagger_gha.gha import Gha
from dagger_gha.globals.cli_config import CLIConfig
from dagger_gha.globals.container_runner import ContainerRunner, DockerContainerRunner
from dagger_gha.globals.errors import DaggerGhaError
from dagger_gha.loader import DefinitionLoader, YAMLDefinitionLoader


class CLI(ABC):
    """Interface for CLI implementations."""

    @abstractmethod
    def check(self) -> int:
        """
        Run pre-flight checks and return exit code.

        Returns:
            int: Exit code (0=success, 1=errors)
        """
        pass

    @abstractmethod
    def config(self) -> int:
        """
        Generate workflow files and return exit code.

        Returns:
            int: Exit code (0=success, 1=errors)
        """
        pass


class StandardCLI(CLI):
    """
    Standard CLI implementation with separated concerns.

    Coordinates pluggable components:
    - DefinitionLoader: reads the pipeline definition file
    - ContainerRunner: runs pre-flight checks
    - OutputFormatter: handles display formatting
    """

    def __init__(
        self,
        config: CLIConfig,
        formatter: Optional[OutputFormatter] = None,
        loader: Optional[DefinitionLoader] = None,
        runner: Optional[ContainerRunner] = None,
    ):
        """
        Initialize CLI with configuration and optional component overrides.

        Args:
            config: CLI configuration (definition file, paths, settings overrides)
            formatter: Output formatter (defaults to ColoredFormatter)
            loader: Definition loader (defaults to YAMLDefinitionLoader)
            runner: Container runner (defaults to DockerContainerRunner)
        """
        self.config_ = config
        self.formatter = formatter or ColoredFormatter()
        self.loader = loader or YAMLDefinitionLoader()
        self.runner = runner or DockerContainerRunner()

    def check(self) -> int:
        """Dry-run every pipeline of the definition file against the repository.

        Stops at the first pipeline failing its check, like Gha.check does.

        Returns:
            int: 0 if all pipelines passed, 1 otherwise.
        """
        try:
            gha = self._load()
            n_pipelines = len(list(gha.triggers()))
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                transient=True,
            ) as progress:
                progress.add_task(
                    description=f"Checking {n_pipelines} pipelines...", total=None
                )
                gha.check(
                    self.config_.repo,
                    runner=self.runner,
                    timeout=self.config_.timeout,
                    max_workers=self.config_.jobs,
                )
        except DaggerGhaError as e:
            print(self.formatter.format_error(e))
            return 1

        print(self.formatter.format_check_passed(n_pipelines))
        return 0

    def config(self) -> int:
        """Generate the workflow files into the output directory.

        Returns:
            int: 0 if the files were written, 1 otherwise.
        """
        try:
            gha = self._load()
            written = gha.write_config(self.config_.output_dir, self.config_.prefix)
        except DaggerGhaError as e:
            print(self.formatter.format_error(e))
            return 1
        except OSError as e:
            print(f"Could not write workflow files to {self.config_.output_dir}: {e}")
            return 1

        for path in written:
            print(self.formatter.format_written_file(path))
        print(self.formatter.format_summary(len(written), self.config_.output_dir))
        return 0

    def _load(self) -> Gha:
        return self.loader.load(
            self.config_.definition_file, self.config_.settings_overrides
        )
