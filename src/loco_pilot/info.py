from __future__ import annotations
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
import logging
import os
from pathlib import Path
import subprocess
import threading
import time
from .cache import PATH_TTL, CachedValue, TTLCache
from .git import GitProber, GitStatus

log = logging.getLogger(__name__)

#: Paths no longer than this are never abbreviated
MAX_CWD_LEN = 15

#: Format for the time shown in the prompt
TIME_FORMAT = "%H:%M:%S"


@dataclass
class PromptInfo:
    """A snapshot of everything that a prompt can display"""

    username: str

    hostname: str

    #: The path to the current working directory.  If the directory is at or
    #: under :envvar:`HOME`, the path will start with ``~``.  Long paths are
    #: abbreviated by `shortened()`.
    cwdstr: str

    #: The current local time as ``HH:MM:SS``
    time: str

    git: GitStatus | None

    @classmethod
    def get(
        cls,
        env: EnvironmentCache,
        prober: GitProber | None = None,
        now: datetime | None = None,
    ) -> PromptInfo:
        """
        Gather a snapshot of the environment.  If ``prober`` is `None`, Git is
        not consulted at all.
        """
        if now is None:
            now = datetime.now()
        return cls(
            username=env.username(),
            hostname=env.hostname(),
            cwdstr=shortened(env.directory()),
            time=now.strftime(TIME_FORMAT),
            git=prober.probe() if prober is not None else None,
        )


@dataclass
class _PathRecord:
    directory: CachedValue[str] | None = None
    home: CachedValue[str | None] | None = None
    hostname: CachedValue[str] | None = None


class EnvironmentCache:
    """
    Caches the current directory, home directory, and hostname for ``ttl``
    seconds each, so that repeated lookups within a short burst do not hit
    the OS again.  The three values live in one record guarded by one lock.
    The username is cached separately and never expires.
    """

    def __init__(
        self, ttl: float = PATH_TTL, clock: Callable[[], float] = time.monotonic
    ) -> None:
        self.ttl = ttl
        self.clock = clock
        self._lock = threading.Lock()
        self._record = _PathRecord()
        self._username: TTLCache[str] = TTLCache(None, clock=clock)

    def directory(self) -> str:
        """
        Return the path to the current working directory, with a leading home
        directory replaced by ``~``
        """
        with self._lock:
            now = self.clock()
            if (c := self._record.directory) is not None and c.is_fresh(
                now, self.ttl
            ):
                return c.value
            # Prefer $PWD to os.getcwd() as the former does not resolve symlinks
            if not (pwd := os.environ.get("PWD")):
                try:
                    pwd = os.getcwd()
                except OSError as e:
                    log.debug("Could not determine current directory: %s", e)
                    self._record.directory = CachedValue("", now)
                    return ""
            cwd = Path(pwd)
            if (home := self._home(now)) is not None:
                try:
                    cwd = "~" / cwd.relative_to(home)
                except ValueError:
                    pass
            self._record.directory = CachedValue(str(cwd), now)
            return str(cwd)

    def home(self) -> str | None:
        """Return the user's home directory, or `None` if it cannot be found"""
        with self._lock:
            return self._home(self.clock())

    def _home(self, now: float) -> str | None:
        # Must be called with the lock held
        if (c := self._record.home) is not None and c.is_fresh(now, self.ttl):
            return c.value
        try:
            home: str | None = str(Path.home())
        except RuntimeError:
            log.debug("Could not determine home directory")
            home = None
        self._record.home = CachedValue(home, now)
        return home

    def hostname(self) -> str:
        """
        Return the local hostname, taken from the first of the following that
        yields a nonempty value: :envvar:`HOSTNAME`, :envvar:`HOST`, the
        output of the ``hostname`` command, or else ``"localhost"``.
        """
        with self._lock:
            now = self.clock()
            if (c := self._record.hostname) is not None and c.is_fresh(
                now, self.ttl
            ):
                return c.value
            hostname = (
                os.environ.get("HOSTNAME")
                or os.environ.get("HOST")
                or hostname_command()
                or "localhost"
            )
            self._record.hostname = CachedValue(hostname, now)
            return hostname

    def username(self) -> str:
        """Return :envvar:`USER`, or ``"user"`` if it is not set"""
        name = self._username.get_or_compute(
            lambda: os.environ.get("USER") or "user"
        )
        assert name is not None
        return name


def hostname_command() -> str | None:
    """
    Return the output of the ``hostname`` command, or `None` if it could not
    be run or printed nothing usable
    """
    try:
        r = subprocess.run(
            ["hostname"],
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            text=True,
            encoding="utf-8",
        )
    except (OSError, UnicodeDecodeError) as e:
        log.debug("Could not run hostname: %s", e)
        return None
    return r.stdout.strip() or None


def shortened(path: str) -> str:
    """
    Abbreviate the path ``path`` if it is longer than `MAX_CWD_LEN`
    characters and has more than three ``/``-separated segments, keeping the
    first segment and the last two:

    >>> shortened("/home/user/projects/deep/nested/dir")
    '/.../nested/dir'
    >>> shortened("~/projects/deep/nested/dir")
    '~/.../nested/dir'
    """
    if len(path) <= MAX_CWD_LEN:
        return path
    parts = path.split("/")
    if len(parts) <= 3:
        return path
    return f"{parts[0]}/.../{parts[-2]}/{parts[-1]}"
