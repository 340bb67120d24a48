"""
Base Command

Abstract base for all pctl CLI commands.
Provides common functionality and structure.
"""

from abc import ABC, abstractmethod
from typing import Optional

from rich.console import Console
from rich.markup import escape

from pctl.config import Settings, load_settings
from pctl.exceptions import PctlError
from pctl.logger import CommandLogger
from pctl.ui_components import show_header


class BaseCommand(ABC):
    """
    Abstract base command class.

    Provides:
    - Settings loading
    - Logger initialization
    - Header display
    - Error handling and exit codes
    """

    def __init__(
        self,
        verbose: bool = False,
        settings: Optional[Settings] = None,
        console: Optional[Console] = None,
    ):
        self.verbose = verbose
        self.console = console or Console()
        self.settings = settings or load_settings()
        self.logger: Optional[CommandLogger] = None

    def init_logger(self, command_name: str) -> CommandLogger:
        """
        Initialize command logger.

        Args:
            command_name: Command name (used in the log file name)

        Returns:
            CommandLogger instance
        """
        self.logger = CommandLogger(
            command_name,
            self.settings.log_dir,
            verbose=self.verbose,
            console=self.console,
        )
        return self.logger

    def show_header(
        self,
        title: str,
        subtitle: Optional[str] = None,
        details: Optional[dict] = None,
    ) -> None:
        """Show command header (skip in verbose mode)."""
        if not self.verbose:
            show_header(
                title=title,
                subtitle=subtitle,
                details=details,
                console=self.console,
            )

    def print_success(self, message: str) -> None:
        self.console.print(f"[green]✓ {escape(message)}[/green]")

    def print_error(self, message: str) -> None:
        self.console.print(f"[red]✗ {escape(message)}[/red]")

    def print_warning(self, message: str) -> None:
        self.console.print(f"[yellow]⚠ {escape(message)}[/yellow]")

    def print_dim(self, message: str) -> None:
        self.console.print(f"[dim]{escape(message)}[/dim]")

    def handle_error(self, error: Exception, context: Optional[str] = None) -> None:
        """
        Handle error with consistent formatting.

        Args:
            error: Exception object
            context: Optional context message
        """
        message = error.message if isinstance(error, PctlError) else str(error)
        if context is None and isinstance(error, PctlError):
            context = error.context

        if self.logger:
            self.logger.log_error(message, context=context)
        else:
            self.print_error(message)
            if context:
                self.print_dim(f"Context: {context}")

    def cleanup(self) -> None:
        """Release resources held by the command (runs after every execute)."""
        pass

    @abstractmethod
    def execute(self) -> None:
        """
        Execute command logic.

        Must be implemented by subclasses.
        """
        pass

    def run(self) -> None:
        """Run command with error handling."""
        try:
            self.execute()
        except KeyboardInterrupt:
            self.console.print("\n[yellow]⚠️  Operation cancelled by user[/yellow]")
            self._print_log_location()
            raise SystemExit(130)
        except SystemExit:
            raise
        except PctlError as e:
            self.handle_error(e)
            self._print_log_location()
            raise SystemExit(1)
        except Exception as e:
            error_type = type(e).__name__
            self.console.print(f"\n[bold red]✗ {error_type}:[/bold red] {escape(str(e))}\n")
            if self.logger:
                self.logger.log_error(f"{error_type}: {e}")
            self._print_log_location()
            raise SystemExit(1)
        finally:
            self.cleanup()
            if self.logger:
                self.logger.close()

    def _print_log_location(self) -> None:
        if self.logger:
            self.console.print(f"\n[dim]Logs saved to:[/dim] {escape(str(self.logger.log_path))}\n")
