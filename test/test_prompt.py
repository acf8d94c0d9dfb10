from __future__ import annotations
import pytest
from loco_pilot.config import ColorConfig, Config
from loco_pilot.git import GitStatus
from loco_pilot.info import PromptInfo
from loco_pilot.prompt import PromptStyle, generate_prompt, render
from loco_pilot.styles import ANSIStyler, BashStyler, Painter, theme_from_colors


def mkinfo(git: GitStatus | None = None) -> PromptInfo:
    return PromptInfo(
        username="alice",
        hostname="firefly",
        cwdstr="~/work",
        time="12:34:56",
        git=git,
    )


@pytest.fixture
def paint() -> Painter:
    return Painter(ANSIStyler(), theme_from_colors(ColorConfig()))


@pytest.mark.parametrize(
    "name,style",
    [
        ("minimal", PromptStyle.MINIMAL),
        ("info", PromptStyle.INFO),
        ("emoji", PromptStyle.EMOJI),
        ("default", PromptStyle.DEFAULT),
        ("fancy", PromptStyle.DEFAULT),
        ("Minimal", PromptStyle.DEFAULT),
    ],
)
def test_style_from_name(name: str, style: PromptStyle) -> None:
    assert PromptStyle.from_name(name) is style


@pytest.mark.parametrize(
    "info,rendered",
    [
        pytest.param(
            mkinfo(),
            "\x1B[32malice\x1B[m@\x1B[33mfirefly\x1B[m:\x1B[36m~/work\x1B[m $ ",
            id="no-git",
        ),
        pytest.param(
            mkinfo(GitStatus(branch="main")),
            (
                "\x1B[32malice\x1B[m@\x1B[33mfirefly\x1B[m:\x1B[36m~/work\x1B[m"
                " (\x1B[32mmain\x1B[m) $ "
            ),
            id="clean",
        ),
        pytest.param(
            mkinfo(GitStatus(branch="main", dirty=True, ahead=5, behind=2)),
            (
                "\x1B[32malice\x1B[m@\x1B[33mfirefly\x1B[m:\x1B[36m~/work\x1B[m"
                " (\x1B[32mmain\x1B[m)"
                " \x1B[33;1m↑5\x1B[m"
                " \x1B[35;1m↓2\x1B[m"
                "\x1B[31m*\x1B[m $ "
            ),
            id="dirty-ahead-behind",
        ),
        pytest.param(
            mkinfo(GitStatus(branch="detached@0123456", behind=3)),
            (
                "\x1B[32malice\x1B[m@\x1B[33mfirefly\x1B[m:\x1B[36m~/work\x1B[m"
                " (\x1B[32mdetached@0123456\x1B[m)"
                " \x1B[35;1m↓3\x1B[m $ "
            ),
            id="detached-behind",
        ),
    ],
)
def test_render_default(info: PromptInfo, rendered: str, paint: Painter) -> None:
    assert render(PromptStyle.DEFAULT, info, paint) == rendered


def test_render_info(paint: Painter) -> None:
    info = mkinfo(GitStatus(branch="main", ahead=1))
    assert render(PromptStyle.INFO, info, paint) == (
        "[\x1B[34m12:34:56\x1B[m] "
        "\x1B[32malice\x1B[m@\x1B[33mfirefly\x1B[m: \x1B[36m~/work\x1B[m"
        " (\x1B[32mmain\x1B[m) \x1B[33;1m↑1\x1B[m $ "
    )


def test_render_emoji(paint: Painter) -> None:
    info = mkinfo(GitStatus(branch="main", dirty=True, ahead=1, behind=4))
    assert render(PromptStyle.EMOJI, info, paint) == (
        "🕒 \x1B[34m12:34:56\x1B[m"
        " 👤 \x1B[32malice\x1B[m"
        " 🖥️  \x1B[33mfirefly\x1B[m"
        " 📁 \x1B[36m~/work\x1B[m"
        " 🔖 main ↑1 ↓4 🔴"
        " ➡️  "
    )


def test_render_emoji_no_git(paint: Painter) -> None:
    assert render(PromptStyle.EMOJI, mkinfo(), paint).endswith(
        " 📁 \x1B[36m~/work\x1B[m ➡️  "
    )


@pytest.mark.parametrize(
    "git",
    [None, GitStatus(branch="main", dirty=True, ahead=5, behind=2)],
)
def test_render_minimal(git: GitStatus | None, paint: Painter) -> None:
    assert render(PromptStyle.MINIMAL, mkinfo(git), paint) == "$ "


def test_render_default_bash() -> None:
    paint = Painter(
        BashStyler(),
        theme_from_colors(ColorConfig(username="bold_red", git_branch="chartreuse")),
    )
    assert render(PromptStyle.DEFAULT, mkinfo(GitStatus(branch="main")), paint) == (
        r"\[\e[31;1m\]alice\[\e[m\]@\[\e[33m\]firefly\[\e[m\]:"
        r"\[\e[36m\]~/work\[\e[m\] (\[\e[32;1m\]main\[\e[m\]) \$ "
    )


class ExplodingEnv:
    def __getattr__(self, name: str) -> None:
        raise AssertionError(f"Environment consulted: {name}")


class StubEnv:
    def username(self) -> str:
        return "alice"

    def hostname(self) -> str:
        return "firefly"

    def directory(self) -> str:
        return "~/work"


class StubProber:
    def __init__(self, status: GitStatus | None) -> None:
        self.status = status
        self.calls = 0

    def probe(self) -> GitStatus | None:
        self.calls += 1
        return self.status


@pytest.mark.parametrize("show_git", [True, False])
def test_generate_minimal_looks_nothing_up(show_git: bool, paint: Painter) -> None:
    prober = StubProber(GitStatus(branch="main"))
    s = generate_prompt(
        PromptStyle.MINIMAL,
        Config(show_git=show_git),
        ExplodingEnv(),  # type: ignore[arg-type]
        prober,  # type: ignore[arg-type]
        paint,
    )
    assert s == "$ "
    assert prober.calls == 0


def test_generate_with_git(paint: Painter) -> None:
    prober = StubProber(GitStatus(branch="main"))
    s = generate_prompt(
        PromptStyle.DEFAULT,
        Config(),
        StubEnv(),  # type: ignore[arg-type]
        prober,  # type: ignore[arg-type]
        paint,
    )
    assert s == (
        "\x1B[32malice\x1B[m@\x1B[33mfirefly\x1B[m:\x1B[36m~/work\x1B[m"
        " (\x1B[32mmain\x1B[m) $ "
    )
    assert prober.calls == 1


def test_generate_show_git_off_skips_probe(paint: Painter) -> None:
    prober = StubProber(GitStatus(branch="main"))
    s = generate_prompt(
        PromptStyle.DEFAULT,
        Config(show_git=False),
        StubEnv(),  # type: ignore[arg-type]
        prober,  # type: ignore[arg-type]
        paint,
    )
    assert s == "\x1B[32malice\x1B[m@\x1B[33mfirefly\x1B[m:\x1B[36m~/work\x1B[m $ "
    assert prober.calls == 0


def test_generate_not_a_repository(paint: Painter) -> None:
    prober = StubProber(None)
    s = generate_prompt(
        PromptStyle.DEFAULT,
        Config(),
        StubEnv(),  # type: ignore[arg-type]
        prober,  # type: ignore[arg-type]
        paint,
    )
    assert s == "\x1B[32malice\x1B[m@\x1B[33mfirefly\x1B[m:\x1B[36m~/work\x1B[m $ "
    assert prober.calls == 1
