from __future__ import annotations
from collections.abc import Callable
from enum import Enum
import logging
from .config import Config
from .git import GitProber, GitStatus
from .info import EnvironmentCache, PromptInfo
from .styles import Painter
from .styles import StyleClass as SC

log = logging.getLogger(__name__)

#: The entire prompt in the "minimal" style
MINIMAL_PROMPT = "$ "


class PromptStyle(Enum):
    MINIMAL = "minimal"
    INFO = "info"
    EMOJI = "emoji"
    DEFAULT = "default"

    @classmethod
    def from_name(cls, name: str) -> PromptStyle:
        """Look up a style by name; unknown names give the default style"""
        try:
            return cls(name)
        except ValueError:
            log.debug("Unknown style %r; using default", name)
            return cls.DEFAULT


def render_minimal(info: PromptInfo, paint: Painter) -> str:
    return MINIMAL_PROMPT


def render_default(info: PromptInfo, paint: Painter) -> str:
    # user@host:dir (branch) ↑1 ↓2* $
    ps1 = paint(info.username, SC.USERNAME)
    ps1 += "@"
    ps1 += paint(info.hostname, SC.HOSTNAME)
    ps1 += ":"
    ps1 += paint(info.cwdstr, SC.DIRECTORY)
    if info.git is not None:
        ps1 += git_segment(info.git, paint)
    ps1 += " " + paint.styler.prompt_suffix + " "
    return ps1


def render_info(info: PromptInfo, paint: Painter) -> str:
    # [time] user@host: dir (branch) ↑1 ↓2* $
    ps1 = "[" + paint(info.time, SC.TIME) + "] "
    ps1 += paint(info.username, SC.USERNAME)
    ps1 += "@"
    ps1 += paint(info.hostname, SC.HOSTNAME)
    ps1 += ": "
    ps1 += paint(info.cwdstr, SC.DIRECTORY)
    if info.git is not None:
        ps1 += git_segment(info.git, paint)
    ps1 += " " + paint.styler.prompt_suffix + " "
    return ps1


def render_emoji(info: PromptInfo, paint: Painter) -> str:
    ps1 = "🕒 " + paint(info.time, SC.TIME)
    ps1 += " 👤 " + paint(info.username, SC.USERNAME)
    ps1 += " 🖥️  " + paint(info.hostname, SC.HOSTNAME)
    ps1 += " 📁 " + paint(info.cwdstr, SC.DIRECTORY)
    if info.git is not None:
        ps1 += emoji_git_segment(info.git)
    ps1 += " ➡️  "
    return ps1


def git_segment(gs: GitStatus, paint: Painter) -> str:
    """Show the Git status as `` (branch) ↑ahead ↓behind*``"""
    s = " (" + paint(gs.branch, SC.GIT_BRANCH) + ")"
    if gs.ahead:
        s += " " + paint(f"↑{gs.ahead}", SC.GIT_AHEAD)
    if gs.behind:
        s += " " + paint(f"↓{gs.behind}", SC.GIT_BEHIND)
    if gs.dirty:
        s += paint("*", SC.GIT_DIRTY)
    return s


def emoji_git_segment(gs: GitStatus) -> str:
    s = f" 🔖 {gs.branch}"
    if gs.ahead:
        s += f" ↑{gs.ahead}"
    if gs.behind:
        s += f" ↓{gs.behind}"
    if gs.dirty:
        s += " 🔴"
    return s


RENDERERS: dict[PromptStyle, Callable[[PromptInfo, Painter], str]] = {
    PromptStyle.MINIMAL: render_minimal,
    PromptStyle.INFO: render_info,
    PromptStyle.EMOJI: render_emoji,
    PromptStyle.DEFAULT: render_default,
}


def render(style: PromptStyle, info: PromptInfo, paint: Painter) -> str:
    """Construct a complete prompt string in the given style"""
    return RENDERERS[style](info, paint)


def generate_prompt(
    style: PromptStyle,
    config: Config,
    env: EnvironmentCache,
    prober: GitProber,
    paint: Painter,
) -> str:
    """
    Gather information about the environment and render it as a prompt.  The
    minimal style needs no information, so nothing is looked up for it, and Git
    is only probed if the configuration asks for Git information.
    """
    if style is PromptStyle.MINIMAL:
        return MINIMAL_PROMPT
    info = PromptInfo.get(env, prober if config.show_git else None)
    return render(style, info, paint)
