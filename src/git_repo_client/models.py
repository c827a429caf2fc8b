"""
Data models for the git repository client.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    # For type checkers only; avoids runtime circular import
    from .repo_client import RepoClient


@dataclass(frozen=True)
class BranchRef:
    """A branch name with an optional remote."""

    name: str
    remote: Optional[str] = None

    @property
    def has_remote(self) -> bool:
        """True only for a non-empty remote name."""
        return bool(self.remote)

    def remote_qualified_name(self) -> str:
        """Return ``remote/name`` when a remote is set, else the bare name.

        An empty-string remote still counts as set here and yields ``/name``.
        """
        if self.remote is not None:
            return f"{self.remote}/{self.name}"
        return self.name


@dataclass(frozen=True)
class ExitError:
    """Stringified exit code of a failed git process."""

    code: str

    def __str__(self) -> str:
        return f"git exited with code {self.code}"


@dataclass(frozen=True)
class CommandResult:
    """Raw output of a git invocation plus its error, if any."""

    output: str
    error: Optional[ExitError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def description(self) -> str:
        if self.error is not None:
            return f"{self.error.code}\n{self.output}"
        return self.output


class RebaseStatus(Enum):
    """Classification of a rebase attempt."""

    CONFLICTS = "conflicts"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class RebaseOutcome:
    """Tagged result of a rebase; ``error`` is set only for ERROR."""

    status: RebaseStatus
    error: Optional[ExitError] = None

    @classmethod
    def conflicts(cls) -> RebaseOutcome:
        return cls(RebaseStatus.CONFLICTS)

    @classmethod
    def success(cls) -> RebaseOutcome:
        return cls(RebaseStatus.SUCCESS)

    @classmethod
    def failed(cls, error: ExitError) -> RebaseOutcome:
        return cls(RebaseStatus.ERROR, error)

    @property
    def is_conflicts(self) -> bool:
        return self.status is RebaseStatus.CONFLICTS

    @property
    def is_success(self) -> bool:
        return self.status is RebaseStatus.SUCCESS

    @property
    def is_error(self) -> bool:
        return self.status is RebaseStatus.ERROR


@dataclass(frozen=True)
class SubmoduleEntry:
    """A submodule client paired with the commit recorded for it in the parent tree."""

    client: "RepoClient"
    commit: str

    @property
    def path(self) -> Path:
        return self.client.repo_path


class GitClientError(Exception):
    """Base exception for git client operations."""

    pass


class GitCommandHalted(GitClientError):
    """Raised when a command configured to halt on error exits non-zero.

    Carries the diagnostic the halt reports: exit code, raw output and the
    full argument vector.
    """

    def __init__(self, code: str, output: str, command: List[str]) -> None:
        self.code = code
        self.output = output
        self.command = list(command)
        super().__init__(f"Error Code: {code}. Error: {output} Command: {self.command}")
