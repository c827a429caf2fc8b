"""
Git Repo Client - a thin facade over the git command line.

This package builds git invocations for staging, committing, pushing,
fetching, merging, rebasing and submodule enumeration, and classifies their
output into simple result values.
"""

__version__ = "0.1.0"

from .repo_client import RepoClient
from .models import (
    BranchRef,
    CommandResult,
    ExitError,
    GitClientError,
    GitCommandHalted,
    RebaseOutcome,
    RebaseStatus,
    SubmoduleEntry,
)
from .runner import CommandRunner, GitPythonRunner
from .parsing import classify_rebase, parse_submodule_listing

__all__ = [
    "RepoClient",
    "BranchRef",
    "CommandResult",
    "ExitError",
    "GitClientError",
    "GitCommandHalted",
    "RebaseOutcome",
    "RebaseStatus",
    "SubmoduleEntry",
    "CommandRunner",
    "GitPythonRunner",
    "classify_rebase",
    "parse_submodule_listing",
]
