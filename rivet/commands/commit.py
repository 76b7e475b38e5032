"""Commit command implementation."""

from typing import Optional

from git import GitCommandError

from .base import BaseCommand
from ..errors import NoChangesError
from ..git_repo import GitRepository
from ..models import AnalysisContext, AnalysisMode
from ..refinement import RefinementLoop
from ..ui import StreamPrinter, display_commit_message, print_rule, print_stats_summary


class CommitCommand(BaseCommand):
    """Stage everything, describe it with the agent, and commit on acceptance.

    Options:
        no_verify: Skip git hooks
        yes: Accept the first generated message without prompting
        push: True/False to push or not; None asks (or skips under ``yes``)
        verbose: Print the analysis synopsis
    """

    def __init__(self, repo: Optional[GitRepository] = None, **kwargs):
        super().__init__(**kwargs)
        self.repo = repo

    def validate(self) -> None:
        if self.repo is None:
            with self.status("Checking git repository..."):
                self.repo = GitRepository(self.get_option('repo', '.'))
        self.print_success("Git repository found")

    def execute(self) -> bool:
        """Run the commit flow.

        Returns:
            True if a commit was created, False if the user cancelled
        """
        if not self.repo.has_changes():
            self.print_warning(
                "\nTip: Make some changes to your files first, then run this command again."
            )
            raise NoChangesError("No changes to commit")

        orchestrator = self.create_orchestrator()

        with self.status("Staging all changes..."):
            self.repo.stage_all()
            stats = self.repo.staged_stats()
        if stats:
            self.print_success(f"Staged {len(stats)} file(s)")
        else:
            self.print_success("Changes staged")

        if not self.repo.has_staged_changes():
            raise NoChangesError("No changes to commit")

        branch = self.repo.current_branch()
        print_stats_summary(self.console, branch, stats)

        context = AnalysisContext(
            branch=branch,
            stats=stats,
            diff=self.repo.staged_diff(),
            files=self.repo.staged_files(),
        )

        # Turn 1
        with self.status("Analyzing changes..."):
            summary = orchestrator.analyze(context, AnalysisMode.COMMIT)
        self.print_success("Changes analyzed")
        self.print_verbose("Analysis:", summary)

        # Turn 2, streamed as it arrives
        self.print_info("\nGenerating commit message...")
        print_rule(self.console)
        stream = StreamPrinter(self.console)
        try:
            generation = orchestrator.generate_commit(summary, on_delta=stream)
        finally:
            stream.finish()
        print_rule(self.console)

        def regenerate(feedback: str) -> Optional[str]:
            print_rule(self.console)
            try:
                return generation.regenerate(feedback)
            finally:
                stream.finish()
                print_rule(self.console)

        result = RefinementLoop(self).run(
            generation.value,
            display=lambda message: display_commit_message(self.console, message),
            regenerate=regenerate,
            confirm_prompt="Accept this commit message?",
            auto_accept=self.get_option('yes', False),
        )

        if not result.accepted:
            self.print_warning("Cancelled. No commit created.")
            return False

        with self.status("Creating commit..."):
            self.repo.commit(result.value, no_verify=self.get_option('no_verify', False))
        self.print_success("Commit created successfully!")

        if self._should_push():
            self._push()

        self.print_success("\nDone!")
        return True

    def _should_push(self) -> bool:
        push = self.get_option('push')
        if push is not None:
            return push
        if self.get_option('yes', False):
            self.console.print("[dim]Skipping push (use --push to push automatically).[/dim]")
            return False
        return self.confirm("Push to remote?", default=True)

    def _push(self) -> None:
        # A failed push is reported but the commit stays.
        branch = self.repo.current_branch()
        try:
            with self.status("Pushing to remote..."):
                has_upstream = self.repo.has_upstream()
                self.repo.push(branch, set_upstream=not has_upstream)
        except GitCommandError:
            self.print_error("Failed to push to remote")
            self.console.print("[dim]You can push manually with: git push[/dim]")
            return

        if has_upstream:
            self.print_success("Pushed to remote")
        else:
            self.print_success(f"Pushed to remote (set upstream to origin/{branch})")
