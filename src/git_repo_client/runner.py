"""
Process execution for git invocations.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Sequence, Tuple, Union

from git.cmd import Git
from git.exc import GitCommandNotFound


logger = logging.getLogger(__name__)

# Shell convention for a command that could not be found or spawned
COMMAND_NOT_FOUND_CODE = 127


class CommandRunner(ABC):
    """Abstract capability that executes an argument vector."""

    @abstractmethod
    def run(self, args: Sequence[str]) -> Tuple[str, int]:
        """
        Execute a command and wait for it to exit.

        Args:
            args: Full argument vector, executable first

        Returns:
            Tuple of (captured output text, exit code)
        """
        pass


class GitPythonRunner(CommandRunner):
    """Runs commands through GitPython's process layer.

    Output is stdout followed by stderr, so messages git prints on stderr
    (rebase hints, for example) are visible to output classification.
    """

    def __init__(self, working_dir: Optional[Union[str, Path]] = None) -> None:
        self.working_dir = str(working_dir) if working_dir is not None else None
        self._git = Git(self.working_dir)

    def run(self, args: Sequence[str]) -> Tuple[str, int]:
        argv = list(args)
        logger.debug(f"Running {argv}")
        try:
            status, stdout, stderr = self._git.execute(
                argv,
                with_extended_output=True,
                with_exceptions=False,
            )
        except GitCommandNotFound as e:
            logger.warning(f"Could not execute {argv[0]!r}: {e}")
            return str(e), COMMAND_NOT_FOUND_CODE

        output = "\n".join(part for part in (stdout, stderr) if part)
        logger.debug(f"Exit {status} from {argv}")
        return output, int(status)
