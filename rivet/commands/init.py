"""Init command implementation: write rivet.config.json interactively."""

import os
from pathlib import Path
from typing import Optional

import click

from .base import BaseCommand
from ..backends import BACKEND_NAMES
from ..backends.router import API_KEY_ENV_VARS
from ..config import RivetConfig, default_config_path
from ..errors import NotAGitRepositoryError
from ..git_repo import GitRepository
from ..prompts import COMMIT_STYLES

STYLE_DESCRIPTIONS = {
    'conventional': "feat(scope): subject",
    'angular': "detailed body format",
    'simple': "clear one-line message",
    'emoji': "🎉 type: subject",
}


class InitCommand(BaseCommand):
    """Prompt for every setting and save the project configuration."""

    def __init__(self, config_path: Optional[Path] = None, **kwargs):
        super().__init__(**kwargs)
        self.config_path = Path(config_path) if config_path else default_config_path()

    def validate(self) -> None:
        pass

    def execute(self) -> Optional[Path]:
        self.print_header("Rivet Configuration")

        existing = RivetConfig.load(self.config_path)
        if self.config_path.exists():
            if not self.confirm("Configuration file already exists. Overwrite?", default=False):
                self.print_warning("\nCancelled.")
                return None

        backend = click.prompt(
            "Backend",
            type=click.Choice(BACKEND_NAMES),
            default=existing.backend or 'anthropic',
        )

        api_key = None
        if backend != 'ollama':
            env_var = API_KEY_ENV_VARS[backend]
            api_key = click.prompt(
                f"API key (leave empty to use ${env_var})",
                default=existing.api_key or "",
                show_default=False,
                hide_input=True,
            ).strip() or None
            if not api_key and not os.environ.get(env_var):
                self.print_warning(f"No API key saved; remember to export {env_var}.")

        model = self.text_input(
            "Default model (empty for the backend default)", default=existing.model or ""
        ).strip() or None

        base_branch = self.text_input(
            "Default base branch for PRs",
            default=existing.default_base_branch or self._detect_base_branch(),
        ).strip() or None

        for style in COMMIT_STYLES:
            self.console.print(f"[dim]  {style} - {STYLE_DESCRIPTIONS[style]}[/dim]")
        commit_style = click.prompt(
            "Default commit message style",
            type=click.Choice(COMMIT_STYLES),
            default=existing.commit_style or 'conventional',
        )

        commit_system_prompt = self.text_input(
            "Custom commit instructions (optional)",
            default=existing.commit_system_prompt or "",
        ).strip() or None
        pr_system_prompt = self.text_input(
            "Custom PR instructions (optional)",
            default=existing.pr_system_prompt or "",
        ).strip() or None

        config = RivetConfig(
            api_key=api_key,
            backend=backend,
            model=model,
            ollama_url=existing.ollama_url,
            default_base_branch=base_branch,
            commit_style=commit_style,
            commit_system_prompt=commit_system_prompt,
            pr_system_prompt=pr_system_prompt,
        )
        path = config.save(self.config_path)

        self.print_success(f"\nConfiguration saved to {path.name}")
        self.console.print("[dim]\nNote: an API key in the config file takes precedence over environment variables.[/dim]")
        self.console.print("[dim]You can override settings with environment variables:\n[/dim]")
        self.console.print("[dim]  export RIVET_API_KEY=your_key[/dim]")
        self.console.print("[dim]  export RIVET_MODEL=gpt-4o[/dim]")
        self.console.print("[dim]  export RIVET_BACKEND=openai[/dim]")
        return path

    def _detect_base_branch(self) -> str:
        try:
            return GitRepository(str(self.config_path.parent)).default_base_branch()
        except NotAGitRepositoryError:
            return "main"
