"""
Basic tests for the git repository client package.
"""

from git_repo_client import __version__
from git_repo_client import (
    RepoClient, BranchRef, CommandResult, ExitError, RebaseOutcome, SubmoduleEntry,
    GitPythonRunner, classify_rebase, parse_submodule_listing,
)


def test_version_matches_semver():
    """Test that the version string is semver."""
    import re
    semver_pattern = r'^\d+\.\d+\.\d+$'
    assert re.match(semver_pattern, __version__)


def test_all_imports():
    """Test that all main names can be imported."""
    assert RepoClient is not None
    assert BranchRef is not None
    assert CommandResult is not None
    assert ExitError is not None
    assert RebaseOutcome is not None
    assert SubmoduleEntry is not None
    assert GitPythonRunner is not None
    assert classify_rebase is not None
    assert parse_submodule_listing is not None


def test_package_structure():
    """Test package structure and __all__ exports."""
    import git_repo_client

    for export in git_repo_client.__all__:
        assert hasattr(git_repo_client, export), f'Missing export: {export}'


def test_default_runner():
    """Test that a client without a runner uses GitPython."""
    client = RepoClient('/tmp/somewhere')
    assert isinstance(client.runner, GitPythonRunner)
