"""Loads the PyGlaunch bindings file."""

##==============================================================#
## SECTION: Imports                                             #
##==============================================================#

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, List, Optional
import logging
import os

from auxly.filesys import File, makedirs

##==============================================================#
## SECTION: Global Definitions                                  #
##==============================================================#

logger = logging.getLogger(__name__)

DEFAULT_PATH = os.path.join(os.path.expanduser("~"), ".config", "pyglaunch", "pyglaunch.conf")

DEFAULT_CONFIG = """\
# PyGlaunch Configuration
# Format: <action> <key> <app_id>
# App IDs can be with or without .desktop suffix
# Find app IDs in: /usr/share/applications, /var/lib/snapd/desktop/applications, /var/lib/flatpak/exports/share/applications

# App Shortcuts
launch f9 firefox_firefox.desktop
launch f10 emacsclient.desktop
launch f11 kitty.desktop

# Window Management
win_prev f4
win_other f12
win_delete f3
win_center_mouse
"""

##==============================================================#
## SECTION: Class Definitions                                   #
##==============================================================#

class ConfigError(Exception):
    """The bindings file could not be created or read."""

class ActKind(Enum):
    """The kinds of actions a bindings file line can name."""
    LAUNCH = "launch"
    WIN_OTHER = "win_other"
    WIN_DELETE = "win_delete"
    WIN_PREV = "win_prev"
    WIN_CENTER_MOUSE = "win_center_mouse"

@dataclass
class ConfigEntry:
    """A single significant line of the bindings file, split into fields."""
    act: str
    key: Optional[str] = None
    app: Optional[str] = None

@dataclass(frozen=True)
class Action:
    kind: ClassVar[ActKind]

@dataclass(frozen=True)
class KeyAction(Action):
    key: str

@dataclass(frozen=True)
class LaunchAction(KeyAction):
    app: str
    kind: ClassVar[ActKind] = ActKind.LAUNCH

@dataclass(frozen=True)
class WinOtherAction(KeyAction):
    kind: ClassVar[ActKind] = ActKind.WIN_OTHER

@dataclass(frozen=True)
class WinDeleteAction(KeyAction):
    kind: ClassVar[ActKind] = ActKind.WIN_DELETE

@dataclass(frozen=True)
class WinPrevAction(KeyAction):
    kind: ClassVar[ActKind] = ActKind.WIN_PREV

@dataclass(frozen=True)
class CenterMouseAction(Action):
    kind: ClassVar[ActKind] = ActKind.WIN_CENTER_MOUSE

@dataclass
class Config:
    """Parsed bindings file."""
    path: Optional[str] = None
    entries: List[ConfigEntry] = field(default_factory=lambda: [])
    actions: List[Action] = field(default_factory=lambda: [])

    @property
    def center_mouse(self) -> bool:
        return any(isinstance(a, CenterMouseAction) for a in self.actions)

    @classmethod
    def from_text(cls, text: str, path: Optional[str] = None) -> Config:
        entries = parse_lines(text)
        actions = []
        for entry in entries:
            action = to_action(entry)
            if action:
                actions.append(action)
        return cls(path=path, entries=entries, actions=actions)

##==============================================================#
## SECTION: Function Definitions                                #
##==============================================================#

def parse_lines(text: str) -> List[ConfigEntry]:
    entries = []
    for num, line in enumerate(text.splitlines(), 1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        parts = line.split()
        if len(parts) > 3:
            logger.warning(f"Ignoring malformed config line {num}")
            continue
        entries.append(ConfigEntry(*parts))
    return entries

def to_action(entry: ConfigEntry) -> Optional[Action]:
    """Converts a raw entry into its typed action. Returns None (after logging
    a warning) for unknown actions or entries missing a required field."""
    try:
        kind = ActKind(entry.act)
    except ValueError:
        logger.warning(f"Ignoring unknown action: {entry.act}")
        return None
    if kind == ActKind.WIN_CENTER_MOUSE:
        return CenterMouseAction()
    if not entry.key:
        logger.warning(f"Ignoring {entry.act} binding without a key")
        return None
    if kind == ActKind.LAUNCH:
        if not entry.app:
            logger.warning(f"Ignoring launch binding on {entry.key} without an app id")
            return None
        return LaunchAction(entry.key, entry.app)
    if kind == ActKind.WIN_OTHER:
        return WinOtherAction(entry.key)
    if kind == ActKind.WIN_DELETE:
        return WinDeleteAction(entry.key)
    if kind == ActKind.WIN_PREV:
        return WinPrevAction(entry.key)
    raise TypeError(f"Unhandled action kind: {kind}")

def create_default(cfg_path: str):
    try:
        cfg_dir = os.path.dirname(cfg_path)
        if cfg_dir and not os.path.isdir(cfg_dir):
            makedirs(cfg_dir)
        cfile = File(cfg_path, make=True)
        cfile.write(DEFAULT_CONFIG)
    except Exception as e:
        raise ConfigError(f"Error creating config file {cfg_path}: {e}") from e
    if not File(cfg_path).isfile():
        raise ConfigError(f"Error creating config file {cfg_path}")
    logger.info(f"Created default config file: {cfg_path}")

def load_config(cfg_path: Optional[str] = None) -> Config:
    cfg_path = cfg_path or DEFAULT_PATH
    if not File(cfg_path).isfile():
        create_default(cfg_path)
    try:
        text = File(cfg_path).read()
    except Exception as e:
        raise ConfigError(f"Error loading config file {cfg_path}: {e}") from e
    if text is None:
        raise ConfigError(f"Error loading config file {cfg_path}")
    return Config.from_text(text, cfg_path)
