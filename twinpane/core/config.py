"""Config loader for twinpane."""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path

from ..filesystem.port import expand_home
from ..filesystem.sorting import SortOrder, SortPolicy

LOGGER = logging.getLogger(__name__)

DEFAULT_TICK_RATE = 240
HOTKEY_COMMANDS = tuple(f"command_{slot}" for slot in range(1, 10))


@dataclass(frozen=True)
class TabConfig:
    """Listing order applied to every tab."""

    directories_first: bool = False
    sort_by_name: SortOrder = SortOrder.NONE
    sort_by_date: SortOrder = SortOrder.NONE
    sort_by_attr: SortOrder = SortOrder.NONE


@dataclass(frozen=True)
class AppConfig:
    """Read-only configuration snapshot held by the store."""

    tick_rate: int = DEFAULT_TICK_RATE
    show_hidden: bool = True
    show_icons: bool = False
    list_arrow: str = "> "
    tab: TabConfig = field(default_factory=TabConfig)
    hotkey_commands: dict = field(default_factory=dict)
    file_associations: dict = field(default_factory=dict)
    key_bindings: dict = field(default_factory=dict)

    def sort_policy(self) -> SortPolicy:
        return SortPolicy(
            by_name=self.tab.sort_by_name,
            by_date=self.tab.sort_by_date,
            by_attr=self.tab.sort_by_attr,
            directories_first=self.tab.directories_first,
        )

    def with_sort_policy(self, policy: SortPolicy) -> "AppConfig":
        return replace(
            self,
            tab=TabConfig(
                directories_first=policy.directories_first,
                sort_by_name=policy.by_name,
                sort_by_date=policy.by_date,
                sort_by_attr=policy.by_attr,
            ),
        )

    def hotkey_path(self, command: str) -> str:
        """Return the path bound to a quick-jump command, '' when unbound."""
        return expand_home(self.hotkey_commands.get(command, "")) or ""

    def program_for(self, extension: str) -> str | None:
        programs = self.file_associations
        return programs.get(extension) or programs.get("default")


def default_config_paths() -> list[Path]:
    """Candidate config files, most specific first."""
    paths = []
    override = os.environ.get("TWINPANE_CONFIG")
    if override:
        paths.append(Path(expand_home(override)))
    paths.append(Path.home() / ".config" / "twinpane" / "config.toml")
    return paths


def _coerce_bool(value, default=False):
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lower = value.strip().lower()
        if lower in ("1", "true", "yes", "on"):
            return True
        if lower in ("0", "false", "no", "off"):
            return False
    return default


def _coerce_int(value, default, minimum=1):
    if isinstance(value, bool):
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return max(minimum, number)


def _string_table(raw, section):
    table = raw.get(section, {})
    if not isinstance(table, dict):
        return {}
    return {str(key): str(value) for key, value in table.items() if isinstance(value, (str, int))}


def _parse_binding(spec):
    """Return ``(key, modifier)`` for one binding; modifier is "c", "s", "a" or ""."""
    if isinstance(spec, str):
        key, modifier = spec, ""
    elif isinstance(spec, dict):
        key, modifier = spec.get("key"), spec.get("modifier", "")
    else:
        return None
    if not isinstance(key, str) or not key or not isinstance(modifier, str):
        return None
    return key, modifier.strip().lower()[:1]


def _key_bindings(raw):
    """Command name -> tuple of ``(key, modifier)`` from the [keyboard_cfg] table."""
    table = raw.get("keyboard_cfg", {})
    if not isinstance(table, dict):
        return {}
    bindings = {}
    for command, spec in table.items():
        specs = spec if isinstance(spec, list) else [spec]
        parsed = tuple(binding for binding in map(_parse_binding, specs) if binding)
        if parsed:
            bindings[str(command)] = parsed
        else:
            LOGGER.warning("Ignoring key binding for %s: %r", command, spec)
    return bindings


def parse_config(text: str) -> AppConfig:
    """Parse TOML text into an AppConfig; invalid TOML yields defaults."""
    try:
        raw = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        LOGGER.warning("Ignoring invalid config: %s", exc)
        return AppConfig()
    return _normalize_config(raw)


def _normalize_config(raw: dict) -> AppConfig:
    core = raw.get("core", {})
    if not isinstance(core, dict):
        core = {}

    tab = TabConfig(
        directories_first=_coerce_bool(core.get("directory_first"), default=False),
        sort_by_name=SortOrder.parse(core.get("sort_by_name")),
        sort_by_date=SortOrder.parse(core.get("sort_by_date")),
        sort_by_attr=SortOrder.parse(core.get("sort_by_attr")),
    )
    list_arrow = core.get("list_arrow", AppConfig.list_arrow)
    return AppConfig(
        tick_rate=_coerce_int(core.get("tick_rate"), DEFAULT_TICK_RATE),
        show_hidden=_coerce_bool(core.get("show_hidden"), default=True),
        show_icons=_coerce_bool(core.get("show_icons"), default=False),
        list_arrow=list_arrow if isinstance(list_arrow, str) else AppConfig.list_arrow,
        tab=tab,
        hotkey_commands=_string_table(raw, "hotkey_commands_programs"),
        file_associations=_string_table(raw, "file_associated_programs"),
        key_bindings=_key_bindings(raw),
    )


def load_config(filesystem, paths=None) -> AppConfig:
    """Load the first readable config file through the filesystem port."""
    candidates = default_config_paths() if paths is None else [Path(expand_home(p)) for p in paths]
    for path in candidates:
        text = filesystem.read_to_string(str(path))
        if text is None:
            continue
        LOGGER.debug("Loaded config from %s", path)
        return parse_config(text)
    return AppConfig()
