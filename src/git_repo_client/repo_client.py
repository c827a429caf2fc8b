"""
Facade over the git command line for a single working tree.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

from .models import (
    BranchRef,
    CommandResult,
    ExitError,
    GitCommandHalted,
    RebaseOutcome,
    SubmoduleEntry,
)
from .parsing import classify_rebase, parse_submodule_listing, trim_output
from .runner import CommandRunner, GitPythonRunner


logger = logging.getLogger(__name__)


class RepoClient:
    """Runs git subcommands against one repository and classifies their output.

    Every operation takes an explicit ``halt_on_error`` keyword. When true, a
    non-zero exit raises :class:`GitCommandHalted`; otherwise the failure is
    returned to the caller as ``None``, ``False`` or a failed outcome.
    """

    def __init__(
        self, repo_path: Union[str, Path], runner: Optional[CommandRunner] = None
    ) -> None:
        self.repo_path = Path(repo_path)
        self.runner = runner if runner is not None else GitPythonRunner()

    def __repr__(self) -> str:
        return f"RepoClient({str(self.repo_path)!r})"

    @property
    def git_dir(self) -> Path:
        return self.repo_path / ".git"

    @property
    def repo_name(self) -> str:
        return self.repo_path.name

    def command_args(self, subcommand_args: Sequence[str]) -> List[str]:
        """Full argument vector for a git subcommand bound to this repository."""
        return [
            "git",
            "--git-dir",
            str(self.git_dir),
            "--work-tree",
            str(self.repo_path),
            *subcommand_args,
        ]

    def run_git(self, subcommand_args: Sequence[str], halt_on_error: bool = True) -> CommandResult:
        """Invoke git once and wrap its output and exit code."""
        args = self.command_args(subcommand_args)
        output, code = self.runner.run(args)
        output = output or ""
        if code == 0:
            return CommandResult(output=output)

        error = ExitError(code=str(code))
        if halt_on_error:
            logger.error(f"Error Code: {code}. Error: {output} Command: {args}")
            raise GitCommandHalted(error.code, output, args)
        logger.debug(f"git {' '.join(subcommand_args)} exited {code} in {self.repo_path}")
        return CommandResult(output=output, error=error)

    def _trimmed_or_none(self, subcommand_args: Sequence[str], halt_on_error: bool) -> Optional[str]:
        result = self.run_git(subcommand_args, halt_on_error=halt_on_error)
        if result.error is not None:
            return None
        return trim_output(result.output)

    # --- Working tree changes ---
    def stage_all_changes(self, halt_on_error: bool = False) -> None:
        """Stage modifications and deletions of tracked files."""
        self.run_git(["add", "-u"], halt_on_error=halt_on_error)

    def commit(self, message: str, halt_on_error: bool = False) -> None:
        self.run_git(["commit", "-m", message], halt_on_error=halt_on_error)

    def push(
        self,
        source_branch: str,
        target_branch: str,
        remote: str,
        force: bool = False,
        halt_on_error: bool = False,
    ) -> None:
        """Push ``source_branch`` to ``refs/heads/<target_branch>`` on ``remote``."""
        args = ["push"]
        if force:
            args.append("--force")
        args.extend([remote, f"{source_branch}:refs/heads/{target_branch}"])
        self.run_git(args, halt_on_error=halt_on_error)

    # --- Commit resolution ---
    def fetched_hash(self, halt_on_error: bool = False) -> Optional[str]:
        return self._trimmed_or_none(["rev-parse", "--verify", "FETCH_HEAD"], halt_on_error)

    def most_recent_ancestor_commit(
        self, reference1: str, reference2: str, halt_on_error: bool = False
    ) -> Optional[str]:
        """Best common ancestor of two references, or None."""
        return self._trimmed_or_none(["merge-base", reference1, reference2], halt_on_error)

    def fetch_commit(self, branch: BranchRef, halt_on_error: bool = False) -> Optional[str]:
        """
        Resolve a branch to a commit hash.

        When the branch names a non-empty remote, that remote is refreshed
        first and a failed refresh resolves to None.

        Returns:
            Trimmed commit hash, or None if resolution failed
        """
        if branch.has_remote:
            update = self.run_git(["remote", "update", branch.remote], halt_on_error=halt_on_error)
            if update.error is not None:
                logger.warning(f"Failed to update remote {branch.remote} in {self.repo_path}")
                return None

        return self._trimmed_or_none(["rev-parse", branch.remote_qualified_name()], halt_on_error)

    def add_remote(self, remote_name: str, remote_url: str, halt_on_error: bool = False) -> None:
        """Point ``remote_name`` at ``remote_url``, creating it if needed.

        Both steps are always attempted; whichever does not apply fails quietly.
        """
        self.run_git(["remote", "set-url", remote_name, remote_url], halt_on_error=halt_on_error)
        self.run_git(["remote", "add", remote_name, remote_url], halt_on_error=halt_on_error)

    # --- Merge / rebase ---
    def merge(self, commit: str, message: str, halt_on_error: bool = False) -> bool:
        result = self.run_git(["merge", commit, "-m", message], halt_on_error=halt_on_error)
        return result.error is None

    def merge_branch(self, branch: BranchRef, message: str, halt_on_error: bool = False) -> bool:
        commit = self.fetch_commit(branch, halt_on_error=halt_on_error)
        if commit is None:
            return False
        return self.merge(commit, message, halt_on_error=halt_on_error)

    def rebase(self, commit: str, halt_on_error: bool = False) -> RebaseOutcome:
        result = self.run_git(["rebase", commit], halt_on_error=halt_on_error)
        outcome = classify_rebase(result.output, result.error)
        logger.info(f"Rebase of {self.repo_name} onto {commit}: {outcome.status.value}")
        return outcome

    def rebase_with_branch(self, branch: BranchRef, halt_on_error: bool = False) -> RebaseOutcome:
        commit = self.fetch_commit(branch, halt_on_error=halt_on_error)
        if commit is None:
            return RebaseOutcome.failed(ExitError(code="1"))
        return self.rebase(commit, halt_on_error=halt_on_error)

    def rebase_continue(self, halt_on_error: bool = False) -> None:
        self.run_git(["rebase", "--continue"], halt_on_error=halt_on_error)

    def rebase_after_commit(self, commit: str, message: str, halt_on_error: bool = True) -> None:
        """Collapse everything after ``commit`` into a single new commit.

        Only the soft reset honours ``halt_on_error``; staging and committing
        never halt.
        """
        self.run_git(["reset", "--soft", commit], halt_on_error=halt_on_error)
        self.stage_all_changes()
        self.commit(message)

    def rebase_to_branch(self, branch: BranchRef, message: str, halt_on_error: bool = True) -> None:
        """Squash local work onto the commit ``branch`` resolves to; no-op if it does not resolve."""
        commit = self.fetch_commit(branch)
        if commit is None:
            return

        self.rebase_after_commit(commit, message, halt_on_error=halt_on_error)
        logger.info(f"Rebased {self.repo_name}:{commit}")

    # --- Read-only text ---
    def status_message(self, halt_on_error: bool = True) -> str:
        return trim_output(self.run_git(["status", "HEAD"], halt_on_error=halt_on_error).output)

    def last_commit_message(self, halt_on_error: bool = True) -> str:
        return trim_output(self.run_git(["log", "-1"], halt_on_error=halt_on_error).output)

    def current_diff(self, halt_on_error: bool = True) -> str:
        return trim_output(self.run_git(["diff", "HEAD"], halt_on_error=halt_on_error).output)

    # --- Submodules ---
    def submodule_states_for_branch(
        self, branch: BranchRef, halt_on_error: bool = False
    ) -> List[SubmoduleEntry]:
        commit = self.fetch_commit(branch, halt_on_error=halt_on_error)
        if commit is None:
            return []
        return self.submodule_states(commit, halt_on_error=halt_on_error)

    def submodule_states(self, reference: str, halt_on_error: bool = False) -> List[SubmoduleEntry]:
        """
        List the submodules recorded in the tree at ``reference``.

        Each entry holds a client bound to ``<repo_path>/<submodule path>`` and
        the commit the parent tree records for it.
        """
        result = self.run_git(["ls-tree", reference], halt_on_error=halt_on_error)
        entries: List[SubmoduleEntry] = []
        for relative_path, commit in parse_submodule_listing(result.output):
            client = RepoClient(self.repo_path / relative_path, runner=self.runner)
            entries.append(SubmoduleEntry(client=client, commit=commit))
        logger.debug(f"Found {len(entries)} submodule(s) in {self.repo_name} at {reference}")
        return entries

    def perform_repo_and_submodule_action(
        self, action: Callable[[RepoClient], None], halt_on_error: bool = False
    ) -> None:
        """Call ``action`` on each submodule at HEAD in listing order, then on this repository."""
        for entry in self.submodule_states("HEAD", halt_on_error=halt_on_error):
            action(entry.client)

        action(self)
