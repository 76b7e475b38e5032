"""Command-line interface for Rivet."""

import sys

import click
from git import GitCommandError
from rich.console import Console

from . import __version__
from .backends import BACKEND_NAMES
from .commands import BaseCommand, CommitCommand, InitCommand, PullRequestCommand
from .errors import RivetError

console = Console()


@click.group()
@click.version_option(version=__version__)
def cli():
    """Rivet - commit messages and pull requests written by an LLM agent.

    \b
    Every command runs two agent turns: one to analyze your changes, one to
    write the result. You can then accept it, or reject it with feedback and
    get a new version (empty feedback cancels).

    \b
    Quick Start:
      export ANTHROPIC_API_KEY="your-key"     # or OPENAI_API_KEY
      rivet init                              # optional, writes rivet.config.json
      rivet commit
      rivet pr --base main
    """
    pass


def agent_options(func):
    """Options shared by every command that talks to the agent."""
    func = click.option('--verbose', '-v', is_flag=True,
                        help="Print the analysis synopsis")(func)
    func = click.option('--ollama-url', default=None,
                        help="Ollama server URL (default: http://localhost:11434)")(func)
    func = click.option('--api-key', default=None,
                        help="API key for the backend (default: config file, then env)")(func)
    func = click.option('--model', '-m', default=None,
                        help="Model to use (default: RIVET_MODEL, config, backend default)")(func)
    func = click.option('--backend', type=click.Choice(BACKEND_NAMES), default=None,
                        help="LLM backend (default: auto-detect from API key env vars)")(func)
    return func


def _run(command: BaseCommand):
    try:
        return command.run()
    except (RivetError, GitCommandError) as e:
        command.report_error(e)
        sys.exit(1)


COMMIT_HELP = """Stage all changes and commit them with a generated message.

\b
EXAMPLES:
  rivet commit
  rivet commit --yes --push
  rivet commit --backend ollama --model llama3
"""


@cli.command(help=COMMIT_HELP)
@click.option('--no-verify', is_flag=True, help="Skip git hooks")
@click.option('--yes', '-y', is_flag=True, help="Skip confirmation (auto-approve)")
@click.option('--push/--no-push', default=None,
              help="Push after committing (default: ask; skipped with --yes)")
@agent_options
def commit(no_verify, yes, push, backend, model, api_key, ollama_url, verbose):
    _run(CommitCommand(
        console=console,
        no_verify=no_verify,
        yes=yes,
        push=push,
        backend=backend,
        model=model,
        api_key=api_key,
        ollama_url=ollama_url,
        verbose=verbose,
    ))


PR_HELP = """Generate a pull request for the current branch and create it with gh.

\b
Uses .github/PULL_REQUEST_TEMPLATE.md when the repository has one.

\b
EXAMPLES:
  rivet pr
  rivet pr --base develop --draft
  rivet pr --yes --apply-labels
"""


@cli.command(help=PR_HELP)
@click.option('--base', '-b', default=None,
              help="Base branch (default: config, then main or master)")
@click.option('--draft', is_flag=True, help="Create as draft PR")
@click.option('--yes', '-y', is_flag=True, help="Skip confirmation (auto-approve)")
@click.option('--apply-labels', is_flag=True,
              help="Apply the suggested labels (they must exist on GitHub)")
@agent_options
def pr(base, draft, yes, apply_labels, backend, model, api_key, ollama_url, verbose):
    _run(PullRequestCommand(
        console=console,
        base=base,
        draft=draft,
        yes=yes,
        apply_labels=apply_labels,
        backend=backend,
        model=model,
        api_key=api_key,
        ollama_url=ollama_url,
        verbose=verbose,
    ))


@cli.command()
def init():
    """Create rivet.config.json in the current directory."""
    _run(InitCommand(console=console))


def main():
    cli()


if __name__ == '__main__':
    main()
