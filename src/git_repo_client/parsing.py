"""
Classification of raw git output.

These helpers depend on exact wording of git's human readable output and on
the four column ``ls-tree`` format. A change upstream in either breaks them.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from .models import ExitError, RebaseOutcome


CONFLICT_MARKER = "Resolve all conflicts manually"
APPLYING_MARKER = "Applying"
GITLINK_TYPE = "commit"


def trim_output(text: str) -> str:
    """Strip leading/trailing whitespace; no other normalization."""
    return text.strip()


def classify_rebase(output: str, error: Optional[ExitError]) -> RebaseOutcome:
    """Classify ``git rebase`` output and exit status.

    A non-zero exit alongside "Applying" progress text counts as success.
    """
    if CONFLICT_MARKER in output:
        return RebaseOutcome.conflicts()
    if error is not None:
        if APPLYING_MARKER in output:
            return RebaseOutcome.success()
        return RebaseOutcome.failed(error)
    return RebaseOutcome.success()


def parse_submodule_listing(output: str) -> List[Tuple[str, str]]:
    """Return ``(relative_path, commit)`` pairs for gitlink entries of ``ls-tree`` output.

    Lines without a ``commit`` token or without exactly four tokens
    (mode, type, hash, path) are skipped.
    """
    entries: List[Tuple[str, str]] = []
    for line in output.split("\n"):
        if not line:
            continue
        tokens = [t for t in line.replace("\t", " ").split(" ") if t]
        if GITLINK_TYPE not in tokens:
            continue
        if len(tokens) != 4:
            continue
        entries.append((tokens[3], tokens[2]))
    return entries
