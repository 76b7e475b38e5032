"""Git access for the commit and PR commands."""

from pathlib import Path
from typing import List, Optional

from git import GitCommandError, InvalidGitRepositoryError, NoSuchPathError, Repo

from .errors import NotAGitRepositoryError
from .models import FileChangeStats

# Diff text handed to prompts is cut to this many characters.
MAX_DIFF_CHARS = 12000

PR_TEMPLATE_PATHS = (
    ".github/PULL_REQUEST_TEMPLATE.md",
    ".github/pull_request_template.md",
    "docs/PULL_REQUEST_TEMPLATE.md",
    "PULL_REQUEST_TEMPLATE.md",
)


def parse_numstat(output: str) -> List[FileChangeStats]:
    """Parse ``git diff --numstat`` output.

    Binary files report ``-`` for both counts and are recorded as 0/0.
    Malformed lines are skipped.
    """
    stats = []
    for line in output.strip().split("\n"):
        if not line.strip():
            continue
        parts = line.split("\t")
        if len(parts) != 3 or not parts[2]:
            continue
        insertions, deletions, file_path = parts
        stats.append(FileChangeStats(
            file=file_path,
            insertions=int(insertions) if insertions.isdigit() else 0,
            deletions=int(deletions) if deletions.isdigit() else 0,
        ))
    return stats


def truncate_diff(diff: str, limit: int = MAX_DIFF_CHARS) -> str:
    if len(diff) <= limit:
        return diff
    return diff[:limit] + f"\n... (diff truncated, {len(diff) - limit} more characters)"


class GitRepository:
    """Thin wrapper over a GitPython ``Repo`` for the operations Rivet needs."""

    def __init__(self, path: str = "."):
        try:
            self.repo = Repo(path, search_parent_directories=True)
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            raise NotAGitRepositoryError(f"Not in a git repository: {path}") from e
        if self.repo.bare:
            raise NotAGitRepositoryError(f"Repository has no working tree: {path}")

    @property
    def root(self) -> Path:
        return Path(self.repo.working_tree_dir)

    def status_lines(self) -> List[str]:
        output = self.repo.git.status('--porcelain')
        return [line for line in output.split("\n") if line.strip()]

    def has_changes(self) -> bool:
        return bool(self.status_lines())

    def has_staged_changes(self) -> bool:
        # First porcelain column is the index status.
        return any(line[0] in 'AMDRC' for line in self.status_lines())

    def stage_all(self) -> None:
        self.repo.git.add('.')

    def staged_stats(self) -> List[FileChangeStats]:
        return parse_numstat(self.repo.git.diff('--cached', '--numstat'))

    def staged_diff(self, limit: int = MAX_DIFF_CHARS) -> str:
        return truncate_diff(self.repo.git.diff('--cached'), limit)

    def staged_files(self) -> List[str]:
        output = self.repo.git.diff('--cached', '--name-only')
        return [line for line in output.split("\n") if line.strip()]

    def branch_stats(self, base_branch: str) -> List[FileChangeStats]:
        return parse_numstat(self.repo.git.diff('--numstat', f'{base_branch}...HEAD'))

    def branch_diff(self, base_branch: str, limit: int = MAX_DIFF_CHARS) -> str:
        return truncate_diff(self.repo.git.diff(f'{base_branch}...HEAD'), limit)

    def changed_files(self, base_branch: str) -> List[str]:
        output = self.repo.git.diff('--name-only', f'{base_branch}...HEAD')
        return [line for line in output.split("\n") if line.strip()]

    def branch_commits(self, base_branch: str) -> str:
        return self.repo.git.log(f'{base_branch}..HEAD', '--oneline')

    def current_branch(self) -> str:
        return self.repo.git.branch('--show-current').strip()

    def default_base_branch(self) -> str:
        head_names = {head.name for head in self.repo.heads}
        return 'main' if 'main' in head_names else 'master'

    def has_upstream(self) -> bool:
        try:
            self.repo.git.rev_parse('--abbrev-ref', '@{upstream}')
            return True
        except GitCommandError:
            return False

    def commit(self, message: str, no_verify: bool = False) -> None:
        # Through the git CLI so commit hooks run unless skipped.
        args = ['-m', message]
        if no_verify:
            args.append('--no-verify')
        self.repo.git.commit(*args)

    def push(self, branch: str, set_upstream: bool = False) -> None:
        if set_upstream:
            self.repo.git.push('-u', 'origin', branch)
        else:
            self.repo.git.push()

    def pr_template(self) -> Optional[str]:
        for relative in PR_TEMPLATE_PATHS:
            path = self.root / relative
            if path.is_file():
                try:
                    return path.read_text(encoding='utf-8')
                except OSError:
                    continue
        return None

    def pr_template_path(self) -> Optional[str]:
        for relative in PR_TEMPLATE_PATHS:
            if (self.root / relative).is_file():
                return relative
        return None
