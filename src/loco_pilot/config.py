"""
Persistent user preferences

The configuration is stored as TOML at
``$XDG_CONFIG_HOME/loco-pilot/config.toml`` (or the platform's equivalent):

.. code:: toml

    style = "default"
    show_git = true

    [colors]
    username = "green"
    hostname = "yellow"
    directory = "cyan"
    git_branch = "green"
    git_dirty = "red"
    time = "blue"

Unknown keys are ignored, and missing keys take their default values.
"""

from __future__ import annotations
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field, fields, replace
import logging
from pathlib import Path
import time
from typing import Any
import platformdirs
import tomlkit
from tomlkit.exceptions import TOMLKitError
from .cache import CONFIG_TTL, TTLCache

log = logging.getLogger(__name__)

APP_NAME = "loco-pilot"

CONFIG_FILENAME = "config.toml"


class UnknownConfigKey(ValueError):
    def __init__(self, key: str) -> None:
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"Unknown configuration key: {self.key}"


@dataclass(frozen=True)
class ColorConfig:
    """The color name used for each part of the prompt"""

    username: str = "green"
    hostname: str = "yellow"
    directory: str = "cyan"
    git_branch: str = "green"
    git_dirty: str = "red"
    time: str = "blue"


@dataclass(frozen=True)
class Config:
    #: The prompt style to use when none is given on the command line
    style: str = "default"

    #: Whether to show Git information in the prompt
    show_git: bool = True

    colors: ColorConfig = field(default_factory=ColorConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Config:
        """
        Construct a `Config` from parsed TOML.  Unknown keys are ignored, and
        missing keys or keys with values of the wrong type are replaced by
        their defaults.
        """
        default = cls()
        style = _typed(data, "style", str, default.style)
        show_git = _typed(data, "show_git", bool, default.show_git)
        color_data = data.get("colors")
        if not isinstance(color_data, dict):
            color_data = {}
        colors = ColorConfig(
            **{
                name: _typed(color_data, name, str, getattr(default.colors, name))
                for name in COLOR_FIELDS
            }
        )
        return cls(style=style, show_git=show_git, colors=colors)

    def to_toml(self) -> str:
        doc = tomlkit.document()
        doc.add("style", self.style)
        doc.add("show_git", self.show_git)
        doc.add(tomlkit.nl())
        colors = tomlkit.table()
        for f in fields(ColorConfig):
            colors.add(f.name, getattr(self.colors, f.name))
        doc.add("colors", colors)
        return tomlkit.dumps(doc)

    def update(self, key: str, value: str) -> Config:
        """
        Return a copy of the configuration with the setting ``key`` (one of
        ``style``, ``show_git``, or ``color.<field>``) set to ``value``.

        :raises UnknownConfigKey: if ``key`` is not a recognized setting
        """
        if key == "style":
            return replace(self, style=value)
        elif key == "show_git":
            return replace(self, show_git=value.lower() == "true")
        elif key.startswith("color.") and key[6:] in COLOR_FIELDS:
            return replace(self, colors=replace(self.colors, **{key[6:]: value}))
        else:
            raise UnknownConfigKey(key)

    def get(self, key: str) -> str:
        """
        Return the display form of the setting ``key``

        :raises UnknownConfigKey: if ``key`` is not a recognized setting
        """
        for k, v in self.items():
            if k == key:
                return v
        raise UnknownConfigKey(key)

    def items(self) -> Iterator[tuple[str, str]]:
        """Yield each setting's key and the display form of its value"""
        yield ("style", self.style)
        yield ("show_git", "true" if self.show_git else "false")
        for f in fields(ColorConfig):
            yield (f"color.{f.name}", getattr(self.colors, f.name))


COLOR_FIELDS = frozenset(f.name for f in fields(ColorConfig))


def _typed(data: dict[str, Any], key: str, typ: type, default: Any) -> Any:
    value = data.get(key, default)
    if not isinstance(value, typ):
        log.debug("Ignoring config value %r for %s: not a %s", value, key, typ)
        return default
    return value


def default_config_path() -> Path:
    return platformdirs.user_config_path(APP_NAME) / CONFIG_FILENAME


class ConfigStore:
    """
    Loads & saves the `Config` stored at ``path``, keeping the last config
    read or written in memory for ``ttl`` seconds
    """

    def __init__(
        self,
        path: Path | None = None,
        ttl: float = CONFIG_TTL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._path = path
        self.cache: TTLCache[Config] = TTLCache(ttl, clock=clock)

    @property
    def path(self) -> Path:
        if self._path is None:
            self._path = default_config_path()
        return self._path

    def load(self) -> Config:
        """
        Return the user's configuration.  If the config file does not exist
        or cannot be read or parsed, the default configuration is returned.
        """
        config = self.cache.get_or_compute(self._read)
        assert config is not None
        return config

    def _read(self) -> Config:
        try:
            path = self.path
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            log.debug("Could not read configuration: %s", e)
            return Config()
        try:
            data = tomlkit.parse(content).unwrap()
        except TOMLKitError as e:
            log.debug("Could not parse %s: %s", path, e)
            return Config()
        return Config.from_dict(data)

    def save(self, config: Config) -> None:
        """
        Write ``config`` to the config file, replacing its previous contents

        :raises OSError: if the file or its directory could not be written
        """
        path = self.path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(config.to_toml(), encoding="utf-8")
        log.debug("Saved configuration to %s", path)
        self.cache.put(config)

    def set(self, key: str, value: str) -> Config:
        """
        Set ``key`` to ``value`` in the stored configuration and save it.
        Returns the updated configuration.

        :raises UnknownConfigKey: if ``key`` is not a recognized setting; the
            config file is left untouched
        :raises OSError: if the config file could not be written
        """
        config = self.load().update(key, value)
        self.save(config)
        return config
