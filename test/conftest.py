from __future__ import annotations
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
import subprocess
import sys
from typing import Any
import pytest


@dataclass
class FakeClock:
    now: float = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, secs: float) -> None:
        self.now += secs


@dataclass
class FakeRun:
    """
    Stand-in for `subprocess.run()` that records the commands it is asked to
    run and answers them from ``responses``, a mapping from argument tuples
    to ``(returncode, stdout, stderr)`` triples.  Unknown commands fail with
    exit status 128.
    """

    responses: dict[tuple[str, ...], tuple[int, str, str]] = field(
        default_factory=dict
    )
    calls: list[list[str]] = field(default_factory=list)

    def respond(
        self, *args: str, stdout: str = "", stderr: str = "", returncode: int = 0
    ) -> None:
        self.responses[args] = (returncode, stdout, stderr)

    def __call__(
        self, cmd: Sequence[str], **kwargs: Any
    ) -> subprocess.CompletedProcess:
        cmd = list(cmd)
        self.calls.append(cmd)
        rc, stdout, stderr = self.responses.get(tuple(cmd), (128, "", "fatal: no"))
        if kwargs.get("check") and rc != 0:
            raise subprocess.CalledProcessError(rc, cmd, output=stdout, stderr=stderr)
        return subprocess.CompletedProcess(cmd, rc, stdout=stdout, stderr=stderr)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_run(monkeypatch: pytest.MonkeyPatch) -> FakeRun:
    fake = FakeRun()
    monkeypatch.setattr(subprocess, "run", fake)
    return fake


@pytest.fixture
def deleted_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Change into a directory and then remove it out from under the process"""
    if sys.platform == "win32":
        pytest.skip("The current directory cannot be removed on Windows")
    gone = tmp_path / "gone"
    gone.mkdir()
    monkeypatch.chdir(gone)
    gone.rmdir()
    monkeypatch.delenv("PWD", raising=False)
    return gone
