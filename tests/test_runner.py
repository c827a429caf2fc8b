"""
Tests for the GitPython-backed command runner.
"""

import logging
import shutil
from unittest.mock import patch

import pytest
from git.exc import GitCommandNotFound

from git_repo_client.runner import COMMAND_NOT_FOUND_CODE, GitPythonRunner


@patch('git_repo_client.runner.Git')
def test_combines_stdout_and_stderr(mock_git_class):
    """Output is stdout then stderr, joined by a newline."""
    mock_git_class.return_value.execute.return_value = (1, 'Applying: x', 'hint: Resolve all conflicts manually')

    output, code = GitPythonRunner().run(['git', 'rebase', 'abc'])

    assert code == 1
    assert output == 'Applying: x\nhint: Resolve all conflicts manually'
    mock_git_class.return_value.execute.assert_called_once_with(
        ['git', 'rebase', 'abc'], with_extended_output=True, with_exceptions=False
    )


@patch('git_repo_client.runner.Git')
def test_empty_streams(mock_git_class):
    """Empty streams produce empty output."""
    mock_git_class.return_value.execute.return_value = (0, '', '')
    assert GitPythonRunner().run(['git', 'add', '-u']) == ('', 0)


@patch('git_repo_client.runner.Git')
def test_exit_is_logged_with_full_argv(mock_git_class, caplog):
    """The exit status is logged together with the complete argument vector."""
    mock_git_class.return_value.execute.return_value = (0, '', '')
    argv = ['git', '--git-dir', '/r/.git', '--work-tree', '/r', 'push', '--force', 'origin', 'a:refs/heads/b']

    with caplog.at_level(logging.DEBUG, logger='git_repo_client.runner'):
        GitPythonRunner().run(argv)

    assert f'Exit 0 from {argv}' in caplog.messages


@patch('git_repo_client.runner.Git')
def test_missing_executable_maps_to_127(mock_git_class):
    """A missing git executable is reported as exit code 127."""
    mock_git_class.return_value.execute.side_effect = GitCommandNotFound(['git'], 'not found')

    output, code = GitPythonRunner().run(['git', 'status'])

    assert code == COMMAND_NOT_FOUND_CODE
    assert output


@patch('git_repo_client.runner.Git')
def test_working_dir_forwarded(mock_git_class, tmp_path):
    """The working directory is handed to GitPython."""
    GitPythonRunner(tmp_path)
    mock_git_class.assert_called_once_with(str(tmp_path))


@pytest.mark.skipif(shutil.which('git') is None, reason='git executable not available')
def test_real_git_version():
    """The real git executable runs and reports its version."""
    output, code = GitPythonRunner().run(['git', '--version'])
    assert code == 0
    assert output.startswith('git version')


@pytest.mark.skipif(shutil.which('git') is None, reason='git executable not available')
def test_real_git_failure_exit_code(tmp_path):
    """A failing real git command reports a non-zero code and its message."""
    output, code = GitPythonRunner().run(
        ['git', '--git-dir', str(tmp_path / '.git'), '--work-tree', str(tmp_path), 'log', '-1']
    )
    assert code != 0
    assert output
