from abc import ABC, abstractmethod
from pathlib import Path

from dagger_gha.globals.errors import DaggerGhaError


class OutputFormatter(ABC):
    """Interface for formatting CLI output."""

    @abstractmethod
    def format_written_file(self, path: Path) -> str:
        """Format a line for a generated workflow file."""
        pass

    @abstractmethod
    def format_check_passed(self, n_pipelines: int) -> str:
        """Format message when all pre-flight checks passed."""
        pass

    @abstractmethod
    def format_error(self, error: DaggerGhaError) -> str:
        """Format an error stopping the command."""
        pass

    @abstractmethod
    def format_summary(self, n_files: int, output_dir: Path) -> str:
        """Format final summary of generated files."""
        pass


class ColoredFormatter(OutputFormatter):
    """
    Colored console output formatter.

    Formats CLI output with ANSI color codes and consistent spacing.
    Used as the default formatter for interactive terminal sessions.
    """

    STYLE = {
        "success": {"color_bold": "\033[1;92m", "color": "\033[92m", "sign": "✓"},
        "error": {"color_bold": "\033[1;31m", "color": "\033[31m", "sign": "✗"},
    }

    DEF_STYLE = {
        "format_end": "\033[0m",
        "neutral": "\033[2m",
        "underline": "\033[4m",
    }

    def format_written_file(self, path: Path) -> str:
        return f'  {self.DEF_STYLE["neutral"]}wrote{self.DEF_STYLE["format_end"]} {path}'

    def format_check_passed(self, n_pipelines: int) -> str:
        style = self.STYLE["success"]
        return (
            f'{style["color_bold"]}{style["sign"]} {n_pipelines} pipelines passed '
            f'pre-flight checks{self.DEF_STYLE["format_end"]}'
        )

    def format_error(self, error: DaggerGhaError) -> str:
        style = self.STYLE["error"]
        line = f'{style["color_bold"]}{style["sign"]} {type(error).__name__}{self.DEF_STYLE["format_end"]}'
        line += max(38 - len(line), 0) * " "
        return line + str(error)

    def format_summary(self, n_files: int, output_dir: Path) -> str:
        style = self.STYLE["success"]
        return (
            f'\n{style["color_bold"]}{style["sign"]} {n_files} workflow files written to '
            f'{self.DEF_STYLE["underline"]}{output_dir}{self.DEF_STYLE["format_end"]}\n'
        )
