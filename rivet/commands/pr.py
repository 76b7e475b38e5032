"""Pull request command implementation."""

from typing import Optional

from rich.markup import escape

from .base import BaseCommand
from .commit import CommitCommand
from ..errors import GitHubCLIError, NoChangesError
from ..git_repo import GitRepository
from ..github import GH_INSTALL_URL, GitHubCLI
from ..models import AnalysisContext, AnalysisMode, PrData
from ..refinement import RefinementLoop
from ..ui import display_pr, print_stats_summary


class PullRequestCommand(BaseCommand):
    """Describe the current branch with the agent and open a PR on acceptance.

    Options:
        base: Base branch (falls back to config, then main/master)
        draft: Create the PR as a draft
        yes: Accept the first generated PR without prompting
        apply_labels: Pass suggested labels to gh instead of only showing them
        verbose: Print the analysis synopsis
    """

    def __init__(self, repo: Optional[GitRepository] = None,
                 github: Optional[GitHubCLI] = None, **kwargs):
        super().__init__(**kwargs)
        self.repo = repo
        self.github = github

    def validate(self) -> None:
        if self.repo is None:
            with self.status("Checking git repository..."):
                self.repo = GitRepository(self.get_option('repo', '.'))
        self.print_success("Git repository found")

        if self.github is None:
            self.github = GitHubCLI(cwd=str(self.repo.root))
        with self.status("Checking GitHub CLI..."):
            available = self.github.is_available()
        if not available:
            self.print_error("GitHub CLI (gh) is not installed")
            self.console.print(f"\n[dim]Install it from: {GH_INSTALL_URL}[/dim]")
            raise GitHubCLIError("GitHub CLI (gh) is not installed")
        self.print_success("GitHub CLI found")

    def execute(self) -> Optional[str]:
        """Run the PR flow.

        Returns:
            URL of the created PR, or None if the user cancelled
        """
        orchestrator = self.create_orchestrator()

        current_branch = self.repo.current_branch()
        base_branch = (
            self.get_option('base')
            or self.config.default_base_branch
            or self.repo.default_base_branch()
        )

        with self.status("Staging changes..."):
            self.repo.stage_all()
        self.print_success("Changes staged")

        if self.repo.has_changes():
            self._offer_commit_first()

        stats = self.repo.branch_stats(base_branch)
        commits = self.repo.branch_commits(base_branch)
        context = AnalysisContext(
            branch=current_branch,
            base_branch=base_branch,
            stats=stats,
            commits=commits,
            diff=self.repo.branch_diff(base_branch),
            files=self.repo.changed_files(base_branch),
            pr_template=self.repo.pr_template(),
        )
        if not stats and not context.commit_lines:
            raise NoChangesError(
                f"No changes found between {base_branch} and {current_branch}"
            )

        if context.pr_template:
            self.console.print(
                f"[dim]✓ Found PR template: {self.repo.pr_template_path()}[/dim]"
            )

        print_stats_summary(
            self.console, current_branch, stats,
            base_branch=base_branch, commits=context.commit_lines,
        )

        # Turn 1
        with self.status("Analyzing changes..."):
            summary = orchestrator.analyze(context, AnalysisMode.PR)
        self.print_success("Changes analyzed")
        self.print_verbose("Analysis:", summary)

        # Turn 2
        with self.status("Generating PR content..."):
            generation = orchestrator.generate_pr(summary, pr_template=context.pr_template)
        self.print_success("PR content generated")

        result = RefinementLoop(self).run(
            generation.value,
            display=lambda data: display_pr(self.console, data),
            regenerate=generation.regenerate,
            confirm_prompt="Accept this PR content?",
            auto_accept=self.get_option('yes', False),
            spinner_text="Regenerating PR content...",
        )

        if not result.accepted:
            self.print_warning("Cancelled. No PR created.")
            return None

        return self._create_pull_request(result.value, base_branch)

    def _offer_commit_first(self) -> None:
        if self.get_option('yes', False):
            commit_first = True
        else:
            commit_first = self.confirm(
                "You have uncommitted changes. Commit them first?", default=True
            )

        if not commit_first:
            self.print_warning("Warning: Uncommitted changes will not be included in the PR.\n")
            return

        self.print_info("\nCommitting changes first...\n")
        CommitCommand(
            repo=self.repo,
            console=self.console,
            config=self.config,
            **{k: v for k, v in self.options.items() if k in (
                'yes', 'backend', 'model', 'api_key', 'ollama_url', 'verbose'
            )},
        ).run()
        self.console.print()

    def _create_pull_request(self, data: PrData, base_branch: str) -> str:
        apply_labels = self.get_option('apply_labels', False)
        with self.status("Creating PR on GitHub..."):
            url = self.github.create_pull_request(
                title=data.title,
                body=data.body,
                base=base_branch,
                draft=self.get_option('draft', False),
                labels=data.labels if apply_labels else None,
            )
        self.print_success("PR created successfully!")
        self.console.print(f"\n[green]PR created:[/green] [cyan underline]{escape(url)}[/cyan underline]")

        if data.labels and not apply_labels:
            self.console.print(
                f"\n[dim]Tip: Suggested labels ({escape(', '.join(data.labels))}) "
                "can be added with --apply-labels or manually on GitHub.[/dim]"
            )
        return url
