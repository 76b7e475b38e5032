"""Tests for the git collaborator, run against throwaway repositories."""

import pytest
from git import Repo

from rivet.errors import NotAGitRepositoryError
from rivet.git_repo import GitRepository, parse_numstat, truncate_diff
from rivet.models import FileChangeStats


@pytest.fixture
def git_dir(tmp_path):
    """A repository on ``main`` with one commit."""
    repo = Repo.init(tmp_path)
    with repo.config_writer() as writer:
        writer.set_value('user', 'name', 'Test User')
        writer.set_value('user', 'email', 'test@example.com')
        writer.set_value('commit', 'gpgsign', 'false')
    (tmp_path / 'app.py').write_text("print('hello')\n")
    repo.git.add('.')
    repo.git.commit('-m', 'Initial commit')
    repo.git.branch('-M', 'main')
    return tmp_path


class TestParseNumstat:

    def test_parses_lines(self):
        output = "10\t2\tsrc/auth.py\n3\t0\tREADME.md\n"
        assert parse_numstat(output) == [
            FileChangeStats('src/auth.py', 10, 2),
            FileChangeStats('README.md', 3, 0),
        ]

    def test_binary_files_count_zero(self):
        assert parse_numstat("-\t-\tlogo.png") == [FileChangeStats('logo.png', 0, 0)]

    def test_skips_malformed(self):
        assert parse_numstat("garbage\n\n5\t1\n1\t1\tok.py") == [FileChangeStats('ok.py', 1, 1)]

    def test_empty(self):
        assert parse_numstat("") == []


class TestTruncateDiff:

    def test_short_diff_unchanged(self):
        assert truncate_diff("abc", limit=10) == "abc"

    def test_long_diff_marked(self):
        result = truncate_diff("x" * 30, limit=10)
        assert result.startswith("x" * 10)
        assert "20 more characters" in result


class TestGitRepository:

    def test_not_a_repository(self, tmp_path):
        with pytest.raises(NotAGitRepositoryError):
            GitRepository(str(tmp_path))

    def test_finds_root_from_subdirectory(self, git_dir):
        sub = git_dir / 'pkg'
        sub.mkdir()
        assert GitRepository(str(sub)).root == git_dir

    def test_clean_tree(self, git_dir):
        repo = GitRepository(str(git_dir))
        assert not repo.has_changes()
        assert not repo.has_staged_changes()
        assert repo.current_branch() == 'main'
        assert repo.default_base_branch() == 'main'

    def test_stage_and_stats(self, git_dir):
        (git_dir / 'app.py').write_text("print('hello')\nprint('bye')\n")
        (git_dir / 'new.py').write_text("x = 1\n")
        repo = GitRepository(str(git_dir))

        assert repo.has_changes()
        assert not repo.has_staged_changes()

        repo.stage_all()
        assert repo.has_staged_changes()
        assert sorted(repo.staged_stats(), key=lambda s: s.file) == [
            FileChangeStats('app.py', 1, 0),
            FileChangeStats('new.py', 1, 0),
        ]
        assert sorted(repo.staged_files()) == ['app.py', 'new.py']
        assert "+print('bye')" in repo.staged_diff()

    def test_commit(self, git_dir):
        (git_dir / 'app.py').write_text("print('changed')\n")
        repo = GitRepository(str(git_dir))
        repo.stage_all()
        repo.commit("fix: change greeting")

        assert not repo.has_changes()
        assert repo.repo.head.commit.message.strip() == "fix: change greeting"

    def test_branch_against_base(self, git_dir):
        repo = GitRepository(str(git_dir))
        repo.repo.git.checkout('-b', 'feature/auth')
        (git_dir / 'auth.py').write_text("def login():\n    pass\n")
        repo.stage_all()
        repo.commit("feat: add login")

        assert repo.current_branch() == 'feature/auth'
        assert repo.branch_stats('main') == [FileChangeStats('auth.py', 2, 0)]
        assert repo.changed_files('main') == ['auth.py']
        assert repo.branch_commits('main').endswith("feat: add login")
        assert "+def login():" in repo.branch_diff('main')

    def test_default_base_falls_back_to_master(self, git_dir):
        repo = GitRepository(str(git_dir))
        repo.repo.git.branch('-M', 'trunk')
        assert repo.default_base_branch() == 'master'

    def test_no_upstream(self, git_dir):
        assert not GitRepository(str(git_dir)).has_upstream()

    def test_pr_template(self, git_dir):
        repo = GitRepository(str(git_dir))
        assert repo.pr_template() is None

        (git_dir / '.github').mkdir()
        (git_dir / '.github' / 'PULL_REQUEST_TEMPLATE.md').write_text("## Summary\n")
        assert repo.pr_template() == "## Summary\n"
        assert repo.pr_template_path() == ".github/PULL_REQUEST_TEMPLATE.md"
