"""
Command-line interface for the git repository client.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
import os
import sys
from pathlib import Path
from typing import List, Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .repo_client import RepoClient
from .models import BranchRef, GitClientError, RebaseStatus, SubmoduleEntry
from . import __version__ as PACKAGE_VERSION


console = Console()
logger = logging.getLogger(__name__)


def _print_version(ctx, param, value):
    """Eager option callback to print version and exit."""
    if not value or ctx.resilient_parsing:
        return
    click.echo(f"git-repo-client {PACKAGE_VERSION}")
    ctx.exit()


def _default_log_path() -> Path:
    """Determine default log file path (~/.git-repo-client/git-repo-client.log)."""
    env_path = os.environ.get("GIT_REPO_CLIENT_LOG")
    if env_path:
        return Path(env_path).expanduser()
    return Path.home() / ".git-repo-client" / "git-repo-client.log"


def setup_logging(
    verbose: bool = False, console_level: Optional[str] = None, log_file: Optional[Path] = None
) -> Path:
    """Setup logging to a rotating file, plus the console when requested.

    Console logging is disabled unless --verbose or --log-level is given.
    Returns the log file path.
    """
    log_path = Path(log_file) if log_file else _default_log_path()
    log_path.parent.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    # Clear existing handlers to avoid duplication in tests / repeated invocations
    root.handlers.clear()
    root.setLevel(logging.DEBUG)

    file_handler = RotatingFileHandler(
        str(log_path), maxBytes=1_000_000, backupCount=3, encoding="utf-8"
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s %(levelname)s [%(name)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root.addHandler(file_handler)

    if verbose or console_level:
        level_map = {
            "debug": logging.DEBUG,
            "info": logging.INFO,
            "warning": logging.WARNING,
            "error": logging.ERROR,
        }
        console_handler = RichHandler(console=console, rich_tracebacks=True)
        console_handler.setLevel(level_map.get((console_level or "info").lower(), logging.INFO))
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(console_handler)

    return log_path


def _client(ctx: click.Context) -> RepoClient:
    return RepoClient(ctx.obj.get("repo_path") or Path.cwd())


def _fail(message: str, error: Exception) -> None:
    console.print(f"\n❌ **{message}:** {error}", style="bold red")
    # Debug stack trace to file logs for diagnostics
    logger.debug(message, exc_info=True)
    sys.exit(1)


@click.group()
@click.option(
    "--version",
    "-V",
    is_flag=True,
    callback=_print_version,
    expose_value=False,
    is_eager=True,
    help="Show version and exit.",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose console logging (INFO)")
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Console log level. By default, console logging is disabled.",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Log file path (defaults to $GIT_REPO_CLIENT_LOG or ~/.git-repo-client/git-repo-client.log)",
)
@click.option(
    "--repo-path",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Path to repository working tree (defaults to current directory)",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    log_level: Optional[str],
    log_file: Optional[Path],
    repo_path: Optional[Path],
) -> None:
    """Git Repo Client - run common git operations on a repository and its submodules."""
    log_path = setup_logging(verbose, console_level=log_level, log_file=log_file)

    ctx.ensure_object(dict)
    ctx.obj["log_path"] = log_path
    ctx.obj["repo_path"] = repo_path.resolve() if isinstance(repo_path, Path) else None
    logger.debug(f"CLI init: cwd={Path.cwd()} repo_path={ctx.obj['repo_path']}")


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show `git status HEAD` for the repository."""
    try:
        console.print(_client(ctx).status_message(), markup=False)
    except GitClientError as e:
        _fail("Error getting status", e)


@cli.command("log")
@click.pass_context
def last_commit(ctx: click.Context) -> None:
    """Show the most recent commit."""
    try:
        console.print(_client(ctx).last_commit_message(), markup=False)
    except GitClientError as e:
        _fail("Error reading last commit", e)


@cli.command()
@click.pass_context
def diff(ctx: click.Context) -> None:
    """Show the diff of the working tree against HEAD."""
    try:
        console.print(_client(ctx).current_diff(), markup=False, highlight=False)
    except GitClientError as e:
        _fail("Error reading diff", e)


@cli.command()
@click.argument("reference", required=False, default="HEAD")
@click.option("--branch", "branch_name", help="Resolve submodules at this branch instead of REFERENCE")
@click.option("--remote", default=None, help="Remote of --branch (refreshed before resolving)")
@click.pass_context
def submodules(
    ctx: click.Context, reference: str, branch_name: Optional[str], remote: Optional[str]
) -> None:
    """List submodules and the commits recorded for them at REFERENCE."""
    client = _client(ctx)
    if branch_name:
        entries = client.submodule_states_for_branch(BranchRef(branch_name, remote))
        label = BranchRef(branch_name, remote).remote_qualified_name()
    else:
        entries = client.submodule_states(reference)
        label = reference
    _display_submodules(label, entries)


@cli.command("each-status")
@click.pass_context
def each_status(ctx: click.Context) -> None:
    """Show status of every submodule at HEAD, then of the repository itself."""

    def show(client: RepoClient) -> None:
        console.print(f"\n📁 **{escape(client.repo_name)}** [dim]{escape(str(client.repo_path))}[/dim]")
        console.print(client.status_message(), markup=False)

    try:
        _client(ctx).perform_repo_and_submodule_action(show)
    except GitClientError as e:
        _fail("Error getting status", e)


@cli.command()
@click.argument("branch")
@click.option("--remote", default=None, help="Remote holding BRANCH (refreshed first)")
@click.pass_context
def rebase(ctx: click.Context, branch: str, remote: Optional[str]) -> None:
    """Rebase the current branch onto BRANCH."""
    outcome = _client(ctx).rebase_with_branch(BranchRef(branch, remote))
    if outcome.status is RebaseStatus.CONFLICTS:
        console.print("\n⚠️  **Rebase stopped with conflicts.** Resolve them, then continue.", style="bold yellow")
        sys.exit(1)
    if outcome.status is RebaseStatus.ERROR:
        console.print(f"\n❌ **Rebase failed:** {outcome.error}", style="bold red")
        sys.exit(1)
    console.print("\n🎉 **Rebase completed successfully!**", style="bold green")


@cli.command()
@click.argument("branch")
@click.argument("message")
@click.option("--remote", default=None, help="Remote holding BRANCH (refreshed first)")
@click.pass_context
def squash(ctx: click.Context, branch: str, message: str, remote: Optional[str]) -> None:
    """Squash local work onto BRANCH as a single commit with MESSAGE."""
    try:
        _client(ctx).rebase_to_branch(BranchRef(branch, remote), message)
        console.print("\n✅ **Done**", style="bold green")
    except GitClientError as e:
        _fail("Squash failed", e)


@cli.command()
@click.argument("branch")
@click.argument("message")
@click.option("--remote", default=None, help="Remote holding BRANCH (refreshed first)")
@click.pass_context
def merge(ctx: click.Context, branch: str, message: str, remote: Optional[str]) -> None:
    """Merge BRANCH into the current branch with MESSAGE."""
    if not _client(ctx).merge_branch(BranchRef(branch, remote), message):
        console.print(f"\n❌ **Merge of {branch} failed**", style="bold red")
        sys.exit(1)
    console.print("\n🎉 **Merge completed successfully!**", style="bold green")


@cli.command("add-remote")
@click.argument("name")
@click.argument("url")
@click.pass_context
def add_remote(ctx: click.Context, name: str, url: str) -> None:
    """Create remote NAME, or repoint it, at URL."""
    _client(ctx).add_remote(name, url)
    console.print(f"Remote {name} -> {url}")


@cli.command()
def version() -> None:
    """Print the current git-repo-client version."""
    console.print(f"git-repo-client {PACKAGE_VERSION}")


def _display_submodules(label: str, entries: List[SubmoduleEntry]) -> None:
    if not entries:
        console.print(f"\n📦 **No submodules at {label}.**", style="bold yellow")
        return

    console.print(f"\n📦 **Submodules at {label}**")
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Submodule", style="cyan")
    table.add_column("Path", style="dim")
    table.add_column("Commit", style="green")

    for entry in entries:
        table.add_row(entry.client.repo_name, str(entry.path), entry.commit)

    console.print(table)


def main() -> None:
    """Main entry point for the CLI."""
    try:
        cli()
    except KeyboardInterrupt:
        console.print("\n\n🚫 **Operation cancelled by user**", style="bold yellow")
        logger.debug("Top-level cancellation (KeyboardInterrupt)", exc_info=True)
        sys.exit(130)
    except Exception as e:
        console.print(f"\n💥 **Unexpected error:** {e}", style="bold red")
        # Debug stack trace to file logs for diagnostics
        logger.debug("Unexpected error in main()", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
