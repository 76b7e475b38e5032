"""Tests for the gh CLI wrapper."""

import subprocess
from unittest.mock import patch

import pytest

from rivet.errors import GitHubCLIError
from rivet.github import GitHubCLI


def completed(stdout=""):
    return subprocess.CompletedProcess(args=[], returncode=0, stdout=stdout, stderr="")


class TestGitHubCLI:

    @patch('rivet.github.subprocess.run')
    def test_is_available(self, mock_run):
        mock_run.return_value = completed("gh version 2.40.0")
        assert GitHubCLI().is_available()
        assert mock_run.call_args[0][0] == ['gh', '--version']

    @patch('rivet.github.subprocess.run', side_effect=FileNotFoundError)
    def test_not_installed(self, mock_run):
        assert not GitHubCLI().is_available()

    @patch('rivet.github.subprocess.run')
    def test_create_pull_request(self, mock_run):
        mock_run.return_value = completed("https://github.com/acme/app/pull/7\n")
        gh = GitHubCLI(cwd='/work')

        url = gh.create_pull_request("Add login", "Adds OAuth.", base="main",
                                     draft=True, labels=["feature", "auth"])

        assert url == "https://github.com/acme/app/pull/7"
        args = mock_run.call_args[0][0]
        assert args[:3] == ['gh', 'pr', 'create']
        assert args[args.index('--title') + 1] == "Add login"
        assert args[args.index('--body') + 1] == "Adds OAuth."
        assert args[args.index('--base') + 1] == "main"
        assert '--draft' in args
        assert args.count('--label') == 2
        assert mock_run.call_args[1]['cwd'] == '/work'

    @patch('rivet.github.subprocess.run')
    def test_no_labels_no_draft(self, mock_run):
        mock_run.return_value = completed("https://github.com/acme/app/pull/8")
        GitHubCLI().create_pull_request("T", "B", base="develop")
        args = mock_run.call_args[0][0]
        assert '--draft' not in args
        assert '--label' not in args

    @patch('rivet.github.subprocess.run')
    def test_failure_carries_stderr(self, mock_run):
        mock_run.side_effect = subprocess.CalledProcessError(
            1, ['gh'], stderr="a pull request already exists\n"
        )
        with pytest.raises(GitHubCLIError) as exc_info:
            GitHubCLI().create_pull_request("T", "B", base="main")
        assert exc_info.value.stderr == "a pull request already exists"

    @patch('rivet.github.subprocess.run', side_effect=FileNotFoundError)
    def test_create_without_gh(self, mock_run):
        with pytest.raises(GitHubCLIError):
            GitHubCLI().create_pull_request("T", "B", base="main")
