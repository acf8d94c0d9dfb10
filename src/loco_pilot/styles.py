from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, ClassVar, Protocol

if TYPE_CHECKING:
    from .config import ColorConfig


class Color(Enum):
    """
    An enumeration of the supported foreground colors.  Each color's value
    equals its xterm number.
    """

    BLACK = 0
    RED = 1
    GREEN = 2
    YELLOW = 3
    BLUE = 4
    MAGENTA = 5
    CYAN = 6
    WHITE = 7
    BRIGHT_BLACK = 8
    BRIGHT_RED = 9
    BRIGHT_GREEN = 10
    BRIGHT_YELLOW = 11
    BRIGHT_BLUE = 12
    BRIGHT_MAGENTA = 13
    BRIGHT_CYAN = 14
    BRIGHT_WHITE = 15

    def asfg(self) -> int:
        """
        Return the ANSI SGR parameter for setting the color as the foreground
        color
        """
        c = self.value
        return c + 30 if c < 8 else c + 82


#: Mapping from the color names accepted in the configuration to colors
COLOR_NAMES: dict[str, Color] = {
    "black": Color.BLACK,
    "red": Color.RED,
    "green": Color.GREEN,
    "yellow": Color.YELLOW,
    "blue": Color.BLUE,
    "purple": Color.MAGENTA,
    "magenta": Color.MAGENTA,
    "cyan": Color.CYAN,
    "white": Color.WHITE,
    "gray": Color.BRIGHT_BLACK,
    "bright_black": Color.BRIGHT_BLACK,
    "bright_red": Color.BRIGHT_RED,
    "bright_green": Color.BRIGHT_GREEN,
    "bright_yellow": Color.BRIGHT_YELLOW,
    "bright_blue": Color.BRIGHT_BLUE,
    "bright_purple": Color.BRIGHT_MAGENTA,
    "bright_magenta": Color.BRIGHT_MAGENTA,
    "bright_cyan": Color.BRIGHT_CYAN,
    "bright_white": Color.BRIGHT_WHITE,
}


@dataclass(frozen=True)
class Style:
    color: Color | None = None
    bold: bool = False

    @classmethod
    def from_name(cls, name: str) -> Style:
        """
        Convert a color name like ``"cyan"``, ``"bright_red"``, or
        ``"bold_blue"`` to a `Style`.  Names are case-sensitive; unrecognized
        names are rendered bold green.
        """
        if name.startswith("bold_"):
            bold = True
            name = name[len("bold_") :]
        else:
            bold = False
        if (c := COLOR_NAMES.get(name)) is not None:
            return cls(c, bold=bold)
        else:
            return cls(Color.GREEN, bold=True)

    def as_params(self) -> list[str]:
        params = []
        if self.color is not None:
            params.append(str(self.color.asfg()))
        if self.bold:
            params.append("1")
        return params


class Styler(Protocol):
    prompt_suffix: ClassVar[str]

    def __call__(self, s: str, style: Style) -> str: ...


class BashStyler:
    """Class for escaping & styling strings for use in Bash's PS1 variable"""

    #: The actual prompt symbol to add at the end of the output, just before a
    #: final space character
    prompt_suffix: ClassVar[str] = r"\$"

    def __call__(self, s: str, style: Style) -> str:
        r"""
        Return the string ``s`` escaped for use in a PS1 variable and wrapped
        in the escape sequences for ``style``.  All escape sequences are
        wrapped in ``\[ ... \]`` so that Bash does not count them when
        computing the width of the prompt.

        :param str s: the string to stylize
        :param Style style: the color & weight to stylize the string with
        """
        s = self.escape(s)
        if params := style.as_params():
            s = rf"\[\e[{';'.join(params)}m\]{s}\[\e[m\]"
        return s

    def escape(self, s: str) -> str:
        """
        Escape characters in the string ``s`` that have special meaning in a
        PS1 variable
        """
        return s.replace("\\", r"\\")


class ANSIStyler:
    """Class for styling strings for display immediately in the terminal"""

    #: The actual prompt symbol to add at the end of the output, just before a
    #: final space character
    prompt_suffix: ClassVar[str] = "$"

    def __call__(self, s: str, style: Style) -> str:
        """
        Stylize the string ``s`` with ANSI escape sequences for ``style``

        :param str s: the string to stylize
        :param Style style: the color & weight to stylize the string with
        """
        if params := style.as_params():
            s = f"\x1B[{';'.join(params)}m{s}\x1B[m"
        return s


class ZshStyler:
    """Class for escaping & styling strings for use in zsh's PS1 variable"""

    #: The actual prompt symbol to add at the end of the output, just before a
    #: final space character
    prompt_suffix: ClassVar[str] = "%#"

    def __call__(self, s: str, style: Style) -> str:
        """
        Return the string ``s`` escaped for use in a zsh PS1 variable and
        stylized with zsh's own (zero-width) prompt escapes for ``style``

        :param str s: the string to stylize
        :param Style style: the color & weight to stylize the string with
        """
        s = self.escape(s)
        if style.bold:
            s = f"%B{s}%b"
        if style.color is not None:
            s = f"%F{{{style.color.value}}}{s}%f"
        return s

    def escape(self, s: str) -> str:
        return s.replace("%", "%%")


StyleClass = Enum(
    "StyleClass",
    [
        "USERNAME",
        "HOSTNAME",
        "DIRECTORY",
        "TIME",
        "GIT_BRANCH",
        "GIT_DIRTY",
        "GIT_AHEAD",
        "GIT_BEHIND",
    ],
)

Theme = dict[StyleClass, Style]


def theme_from_colors(colors: ColorConfig) -> Theme:
    """Build a theme from the color names in a user's configuration"""
    return {
        StyleClass.USERNAME: Style.from_name(colors.username),
        StyleClass.HOSTNAME: Style.from_name(colors.hostname),
        StyleClass.DIRECTORY: Style.from_name(colors.directory),
        StyleClass.TIME: Style.from_name(colors.time),
        StyleClass.GIT_BRANCH: Style.from_name(colors.git_branch),
        StyleClass.GIT_DIRTY: Style.from_name(colors.git_dirty),
        StyleClass.GIT_AHEAD: Style(Color.YELLOW, bold=True),
        StyleClass.GIT_BEHIND: Style(Color.MAGENTA, bold=True),
    }


@dataclass
class Painter:
    styler: Styler
    theme: Theme

    def __call__(self, s: str, klass: StyleClass) -> str:
        return self.styler(s, self.theme[klass])
