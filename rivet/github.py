"""Pull request creation through the GitHub CLI (``gh``)."""

import subprocess
from typing import List, Optional

from .errors import GitHubCLIError

GH_INSTALL_URL = "https://cli.github.com/"


class GitHubCLI:
    """Runs ``gh`` commands in a repository's working tree."""

    def __init__(self, cwd: Optional[str] = None, executable: str = "gh"):
        self.cwd = cwd
        self.executable = executable

    def _run(self, args: List[str]) -> subprocess.CompletedProcess:
        return subprocess.run(
            [self.executable] + args,
            cwd=self.cwd,
            capture_output=True,
            text=True,
            check=True,
        )

    def is_available(self) -> bool:
        try:
            self._run(['--version'])
            return True
        except (FileNotFoundError, subprocess.CalledProcessError):
            return False

    def create_pull_request(self, title: str, body: str, base: str,
                            draft: bool = False,
                            labels: Optional[List[str]] = None) -> str:
        """Create a pull request and return its URL.

        Raises:
            GitHubCLIError: If gh is missing or exits non-zero
        """
        args = ['pr', 'create', '--title', title, '--body', body, '--base', base]
        if draft:
            args.append('--draft')
        for label in labels or []:
            args.extend(['--label', label])

        try:
            result = self._run(args)
        except FileNotFoundError as e:
            raise GitHubCLIError("GitHub CLI (gh) is not installed") from e
        except subprocess.CalledProcessError as e:
            raise GitHubCLIError(
                "Failed to create PR", stderr=(e.stderr or "").strip()
            ) from e
        return result.stdout.strip()
