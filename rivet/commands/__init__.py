"""Rivet CLI commands.

Each command is a BaseCommand subclass so it can be driven from click or
constructed directly with injected collaborators.
"""

from .base import BaseCommand
from .commit import CommitCommand
from .init import InitCommand
from .pr import PullRequestCommand

__all__ = [
    'BaseCommand',
    'CommitCommand',
    'InitCommand',
    'PullRequestCommand',
]
