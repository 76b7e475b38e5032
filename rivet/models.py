"""Data structures shared by the analysis and generation turns."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class AnalysisMode(Enum):
    """Which artifact a command is producing."""
    COMMIT = "commit"
    PR = "pr"


@dataclass(frozen=True)
class FileChangeStats:
    """Insertion/deletion counts for one changed file."""
    file: str
    insertions: int = 0
    deletions: int = 0

    def format_line(self) -> str:
        return f"{self.file} (+{self.insertions}/-{self.deletions})"


@dataclass
class AnalysisContext:
    """Raw change data handed to the analysis turn.

    Built once per command invocation and never persisted. ``stats`` is the
    primary input; ``diff`` and ``files`` carry the legacy raw-diff form and
    are used when no stats are available (or as an excerpt alongside them).
    """

    branch: str
    stats: List[FileChangeStats] = field(default_factory=list)
    diff: Optional[str] = None
    files: List[str] = field(default_factory=list)
    commits: Optional[str] = None  # PR mode only
    pr_template: Optional[str] = None  # PR mode only
    base_branch: Optional[str] = None

    @property
    def total_insertions(self) -> int:
        return sum(s.insertions for s in self.stats)

    @property
    def total_deletions(self) -> int:
        return sum(s.deletions for s in self.stats)

    @property
    def commit_lines(self) -> List[str]:
        if not self.commits:
            return []
        return [line for line in self.commits.strip().split("\n") if line.strip()]

    def is_empty(self) -> bool:
        return not self.stats and not (self.diff or "").strip() and not self.commit_lines


@dataclass
class PrData:
    """Validated pull request payload."""
    title: str
    body: str
    labels: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'title': self.title,
            'body': self.body,
            'labels': list(self.labels),
        }
