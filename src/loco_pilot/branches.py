from __future__ import annotations
import logging
from pathlib import Path
import subprocess
import sys
from typing import TextIO

log = logging.getLogger(__name__)


class BranchError(Exception):
    """Raised when the local branches of a repository cannot be listed"""


def list_branches(cwd: Path | None = None) -> list[str]:
    """
    Return the names of the local branches of the Git repository at ``cwd``
    (default: the current directory)

    :raises BranchError: if the current directory cannot be determined, if
        ``cwd`` does not contain a ``.git`` entry, or if ``git branch`` could
        not be run or failed
    """
    if cwd is None:
        try:
            cwd = Path.cwd()
        except OSError as e:
            raise BranchError(f"Failed to get current directory: {e}") from e
    if not (cwd / ".git").exists():
        raise BranchError("Not in a git repository")
    log.debug("Running: git branch --format=%(refname:short)")
    try:
        r = subprocess.run(
            ["git", "branch", "--format=%(refname:short)"],
            cwd=cwd,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
    except OSError as e:
        raise BranchError(f"Failed to execute git command: {e}") from e
    if r.returncode != 0:
        raise BranchError(f"Git command failed: {r.stderr.strip()}")
    return [line.strip() for line in r.stdout.splitlines() if line.strip()]


def select_branch(branches: list[str], stdin: TextIO | None = None) -> str | None:
    """
    Show a numbered menu of ``branches``, read the user's choice from
    ``stdin`` (default: `sys.stdin`), and return the chosen branch.  If the
    input is not a number in range, print a diagnostic to stderr and return
    `None`.
    """
    if stdin is None:
        stdin = sys.stdin
    print("Select a branch to copy:")
    for i, branch in enumerate(branches, start=1):
        print(f"{i}. {branch}")
    print(f"Enter number (1-{len(branches)}): ", end="", flush=True)
    choice = stdin.readline().strip()
    try:
        num = int(choice)
    except ValueError:
        num = 0
    if not 1 <= num <= len(branches):
        print("Invalid selection", file=sys.stderr)
        return None
    return branches[num - 1]


def copy_text(text: str) -> None:
    """
    "Copy" ``text`` by printing it to stdout, from where the user can copy it
    with their terminal.  There is no clipboard integration.
    """
    print(text)
