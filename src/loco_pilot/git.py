from __future__ import annotations
from dataclasses import dataclass
import logging
from pathlib import Path
import re
import subprocess
from .cache import GIT_TTL, TTLCache

log = logging.getLogger(__name__)

#: Values of the ``branch.head`` header that mean ``HEAD`` is detached
DETACHED_HEADS = frozenset({"(detached)", "HEAD"})

#: Length of the abbreviated commit hashes we show
SHORT_SHA_LEN = 7


@dataclass(frozen=True)
class GitStatus:
    #: The name of the current branch, or ``"detached@<short-sha>"`` if
    #: ``HEAD`` is detached, or ``"unknown"`` if no branch could be determined
    branch: str

    #: `True` iff there are any staged, unstaged, or untracked changes
    dirty: bool = False

    #: The number of commits by which ``HEAD`` is ahead of its upstream (0 if
    #: there is no upstream)
    ahead: int = 0

    #: The number of commits by which ``HEAD`` is behind its upstream (0 if
    #: there is no upstream)
    behind: int = 0


@dataclass
class ParsedStatus:
    """The result of parsing ``git status --branch --porcelain=v2`` output"""

    status: GitStatus

    #: The full commit hash reported in the ``branch.oid`` header, if any
    oid: str | None = None

    @property
    def detached(self) -> bool:
        return self.status.branch in DETACHED_HEADS


def parse_status(output: str) -> ParsedStatus:
    """
    Parse the output of ``git status --branch --porcelain=v2``.

    Header lines (those starting with ``#``) supply the branch name, commit,
    and ahead/behind counts; every other non-blank line is a changed,
    unmerged, untracked, or ignored entry and thus marks the working tree as
    dirty, unless it starts with a space.  Lines that cannot be parsed are
    skipped.
    """
    branch = "unknown"
    oid: str | None = None
    ahead = 0
    behind = 0
    dirty = False
    for line in output.splitlines():
        if line.startswith("# branch.head "):
            branch = line[len("# branch.head ") :].strip() or branch
        elif line.startswith("# branch.oid "):
            oid = line[len("# branch.oid ") :].strip()
        elif line.startswith("# branch.ab "):
            # Format: "+<ahead> -<behind>".  Each count is identified by its
            # sign rather than its position.
            counts = line[len("# branch.ab ") :].split()
            if len(counts) != 2 or not all(
                re.fullmatch(r"[-+]\d+", c) for c in counts
            ):
                log.debug("Skipping malformed branch.ab line: %r", line)
                continue
            for c in counts:
                if c[0] == "+":
                    ahead = int(c[1:])
                else:
                    behind = int(c[1:])
        elif line.startswith("#"):
            continue
        elif len(line) > 1 and not line.startswith(" "):
            dirty = True
    return ParsedStatus(
        status=GitStatus(branch=branch, dirty=dirty, ahead=ahead, behind=behind),
        oid=oid if oid and oid != "(initial)" else None,
    )


class GitProber:
    """
    Determines the Git status of a directory (by default, the current working
    directory) and caches the result for `GIT_TTL` seconds, so that rendering
    several prompts in quick succession only runs Git once.
    """

    def __init__(
        self, cache: TTLCache[GitStatus] | None = None, cwd: Path | None = None
    ) -> None:
        self.cache: TTLCache[GitStatus] = (
            cache if cache is not None else TTLCache(GIT_TTL)
        )
        self.cwd = cwd

    def probe(self) -> GitStatus | None:
        """
        If the directory contains a ``.git`` entry, return a `GitStatus`
        describing the repository.  If it does not, or if Git is not
        installed, or if ``git status`` fails, return `None`.

        Only the directory itself is checked for ``.git``; a working tree
        rooted in a parent directory is not detected.
        """
        return self.cache.get_or_compute(self._probe)

    def _probe(self) -> GitStatus | None:
        cwd = self.cwd
        if cwd is None:
            try:
                cwd = Path.cwd()
            except OSError as e:
                log.debug("Could not determine current directory: %s", e)
                return None
        if not (cwd / ".git").exists():
            log.debug("No .git in %s; not probing", cwd)
            return None
        output = git("status", "--branch", "--porcelain=v2", cwd=cwd, strip=False)
        if output is None:
            return None
        parsed = parse_status(output)
        status = parsed.status
        if parsed.detached:
            sha = git("rev-parse", f"--short={SHORT_SHA_LEN}", "HEAD", cwd=cwd)
            if not sha and parsed.oid is not None:
                sha = parsed.oid[:SHORT_SHA_LEN]
            if sha:
                status = GitStatus(
                    branch=f"detached@{sha}",
                    dirty=status.dirty,
                    ahead=status.ahead,
                    behind=status.behind,
                )
        log.debug("Git status for %s: %r", cwd, status)
        return status


def git(*args: str, cwd: Path | None = None, strip: bool = True) -> str | None:
    """
    Run a Git command (suppressing stderr) and return its stdout, with leading
    & trailing whitespace stripped if ``strip`` is true.  If Git is not
    installed, the command fails, or its output is not valid UTF-8, return
    `None`.
    """
    log.debug("Running: git %s", " ".join(args))
    try:
        out = subprocess.run(
            ["git", *args],
            cwd=cwd,
            check=True,
            text=True,
            encoding="utf-8",
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
        ).stdout
    except (OSError, subprocess.CalledProcessError, UnicodeDecodeError) as e:
        log.debug("git %s failed: %s", args[0] if args else "", e)
        return None
    return out.strip() if strip else out


def commit_sha(cwd: Path | None = None) -> str | None:
    """
    Return the abbreviated hash of the commit checked out in the repository at
    ``cwd`` (default: the current directory).  Git itself is asked first; if
    that fails, the hash is read from the repository's metadata on disk.
    Returns `None` if no commit can be found.
    """
    if sha := git("rev-parse", f"--short={SHORT_SHA_LEN}", "HEAD", cwd=cwd):
        return sha
    if cwd is None:
        try:
            cwd = Path.cwd()
        except OSError as e:
            log.debug("Could not determine current directory: %s", e)
            return None
    return read_head_sha(resolve_git_dir(cwd / ".git"))


def resolve_git_dir(dotgit: Path) -> Path:
    """
    Return the Git directory for the ``.git`` entry ``dotgit``.  In linked
    worktrees and submodules, ``.git`` is a file containing a ``gitdir:``
    line that points to the real Git directory, relative to the file's
    directory if not absolute.
    """
    if dotgit.is_file():
        content = cat(dotgit) or ""
        if content.startswith("gitdir: "):
            return dotgit.parent / content[len("gitdir: ") :].strip()
    return dotgit


def read_head_sha(git_dir: Path) -> str | None:
    """
    Resolve ``HEAD`` in the Git directory ``git_dir`` by reading the files in
    it directly, following a symbolic ref to either a loose ref file or an
    entry in ``packed-refs``.  For a linked worktree, branch refs are looked
    up in the common Git directory named by its ``commondir`` file.  Returns
    the abbreviated hash or `None`.
    """
    head = cat(git_dir / "HEAD")
    if head is None:
        return None
    if head.startswith("ref: "):
        ref = head[len("ref: ") :].strip()
        if (commondir := cat(git_dir / "commondir")) is not None:
            refs_dir = git_dir / commondir
        else:
            refs_dir = git_dir
        sha = cat(refs_dir / ref)
        if sha is None:
            packed = cat(refs_dir / "packed-refs") or ""
            for line in packed.splitlines():
                if line.startswith(("#", "^")):
                    continue
                parts = line.split()
                if len(parts) == 2 and parts[1] == ref:
                    sha = parts[0]
                    break
    else:
        sha = head
    if sha is None or not re.fullmatch(r"[0-9a-f]{40}(?:[0-9a-f]{24})?", sha):
        return None
    return sha[:SHORT_SHA_LEN]


def cat(path: Path) -> str | None:
    """
    Return the contents of the given file with leading & trailing whitespace
    stripped.  If the file cannot be read, return `None`.
    """
    try:
        return path.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError):
        return None
