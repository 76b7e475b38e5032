"""Base command class for Rivet CLI commands."""

import json
import os
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import click
from rich.console import Console
from rich.markup import escape

from ..backends import resolve_credentials
from ..config import RivetConfig
from ..errors import (
    ConfigurationError,
    EmptyAnalysisError,
    EmptyGenerationError,
    GitHubCLIError,
    MalformedPayloadError,
)
from ..orchestrator import TurnOrchestrator
from ..session import AgentSession, open_session


class BaseCommand(ABC):
    """Base class for all CLI commands.

    Provides console output helpers, the interactive prompts used by the
    refinement loop, and the validate-then-execute lifecycle.
    """

    def __init__(self, console: Optional[Console] = None,
                 config: Optional[RivetConfig] = None, **kwargs):
        """Initialize command with options.

        Args:
            console: Rich console (a default one is created if omitted)
            config: Loaded configuration (read from disk if omitted)
            **kwargs: Command options passed from CLI
        """
        self.options = kwargs
        self.console = console or Console()
        self.config = config if config is not None else RivetConfig.load().with_env_overrides()

    @abstractmethod
    def validate(self) -> None:
        """Validate command options and environment.

        Raises:
            RivetError: If validation fails
        """
        pass

    @abstractmethod
    def execute(self) -> Any:
        """Execute the command logic."""
        pass

    def run(self) -> Any:
        """Template method: validate then execute."""
        self.validate()
        return self.execute()

    def get_option(self, key: str, default: Any = None) -> Any:
        """Get a command option value (None counts as unset)."""
        value = self.options.get(key)
        return default if value is None else value

    # Output

    def print_header(self, title: str) -> None:
        self.console.print(f"\n[bold blue]{title}[/bold blue]\n")

    def print_success(self, message: str) -> None:
        self.console.print(f"[green]{message}[/green]")

    def print_warning(self, message: str) -> None:
        self.console.print(f"[yellow]{message}[/yellow]")

    def print_error(self, message: str) -> None:
        self.console.print(f"[red]{message}[/red]")

    def print_info(self, message: str) -> None:
        self.console.print(f"[cyan]{message}[/cyan]")

    def print_debug(self, label: str, detail: Any) -> None:
        """Print diagnostic detail (conversation structure, raw output)."""
        if not isinstance(detail, str):
            detail = json.dumps(detail, indent=2)
        self.console.print(f"\n[dim]Debug: {label}[/dim]")
        self.console.print(detail, style="dim", markup=False, highlight=False)

    def print_verbose(self, label: str, detail: Any) -> None:
        if self.get_option('verbose', False):
            self.print_debug(label, detail)

    def status(self, message: str):
        """Spinner context manager."""
        return self.console.status(f"[blue]{message}[/blue]")

    # Prompts

    def confirm(self, message: str, default: bool = True) -> bool:
        return click.confirm(message, default=default)

    def text_input(self, message: str, default: str = "") -> str:
        return click.prompt(message, default=default, show_default=bool(default))

    # Agent wiring

    def _session_options(self) -> Dict[str, Any]:
        options = {
            'api_key': self.get_option('api_key') or self.config.api_key,
            'model': self.get_option('model') or self.config.model,
            'backend': self.get_option('backend') or self.config.backend,
        }
        ollama_url = self.get_option('ollama_url') or self.config.ollama_url
        if ollama_url:
            options['ollama_url'] = ollama_url
        return options

    def open_session(self) -> AgentSession:
        return open_session(working_directory=os.getcwd(), **self._session_options())

    def create_orchestrator(self) -> TurnOrchestrator:
        options = self._session_options()
        # Fail before any git or agent work when no credential is available.
        resolve_credentials(backend=options['backend'], api_key=options['api_key'])
        return TurnOrchestrator(self.open_session, self.config)

    def report_error(self, error: Exception) -> None:
        """Print a fatal error with whatever diagnostic detail it carries."""
        self.print_error(f"\nError: {escape(str(error))}")

        if isinstance(error, ConfigurationError) and error.hint:
            self.console.print(f"\n[dim]{escape(error.hint)}[/dim]")
        elif isinstance(error, (EmptyAnalysisError, EmptyGenerationError)):
            self.print_debug("Conversation structure:", error.conversation_structure)
        elif isinstance(error, MalformedPayloadError) and error.raw_text:
            self.print_debug("Agent response:", error.raw_text)
        elif isinstance(error, GitHubCLIError) and error.stderr:
            self.print_debug("GitHub CLI error:", error.stderr)
