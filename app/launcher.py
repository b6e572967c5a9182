"""Maps open windows to the applications they belong to and decides what a
launch hotkey does: cycle the focused app, switch to a running app or launch
a new instance."""

##==============================================================#
## SECTION: Imports                                             #
##==============================================================#

from __future__ import annotations
from typing import Callable, Dict, List, Optional, Tuple
import logging
import re

from glconfig import ActKind, Action, Config
from winctrl import AppSystemBase, WinControlBase

##==============================================================#
## SECTION: Global Definitions                                  #
##==============================================================#

logger = logging.getLogger(__name__)

OTHER = "other"
DESKTOP_SUFFIX = ".desktop"

_PARENTHETICAL = re.compile(r"\s*\([^)]*\)")

##==============================================================#
## SECTION: Class Definitions                                   #
##==============================================================#

class App:
    """A single OS window tracked by the launcher."""
    def __init__(self, winctrl: WinControlBase, win):
        self._winctrl = winctrl
        self._win = win

    def __repr__(self):
        return self.name

    @property
    def win(self):
        return self._win

    @property
    def name(self) -> str:
        return self._winctrl.info(self._win).wmclass

    def focus(self, center_pointer: bool = False):
        self._winctrl.activate(self._win)
        if center_pointer:
            self._winctrl.center_pointer(self._win)

class AppCollection:
    """The windows of one application in the order they were opened."""
    def __init__(self, app: App, center_pointer: bool, winctrl: WinControlBase):
        self._apps: List[App] = [app]
        self._center_pointer = center_pointer
        self._winctrl = winctrl

    def __len__(self):
        return len(self._apps)

    def __repr__(self):
        return f"AppCollection({self._apps})"

    @property
    def apps(self) -> List[App]:
        return list(self._apps)

    def size(self) -> int:
        return len(self._apps)

    def has(self, win) -> bool:
        return self._index(win) is not None

    def store_app(self, win):
        if self.has(win):
            return
        self._apps.append(App(self._winctrl, win))

    def delete_app(self, win):
        self._apps = [app for app in self._apps if app.win != win]

    def go_next(self):
        """Focuses the window after the focused one, wrapping around. The
        focused window always comes from the window system."""
        idx = self._index(self._winctrl.focused())
        nxt = 0 if idx is None else (idx + 1) % len(self._apps)
        self._apps[nxt].focus(self._center_pointer)

    def switch_to_app(self):
        """Focuses the most recently used window of the collection."""
        for win in self._winctrl.list():
            idx = self._index(win)
            if idx is not None:
                self._apps[idx].focus(self._center_pointer)
                return
        self._apps[0].focus(self._center_pointer)

    def _index(self, win) -> Optional[int]:
        if win is None:
            return None
        for idx, app in enumerate(self._apps):
            if app.win == win:
                return idx
        return None

class Launcher:
    """Registry of open applications keyed by desktop file id.

    Windows whose application is not bound to a launch key are collected
    under the OTHER id.
    """
    def __init__(self, winctrl: WinControlBase, appsys: AppSystemBase, config: Config):
        self._winctrl = winctrl
        self._appsys = appsys
        self._apps: Dict[str, AppCollection] = {}
        self._win_ids: Dict[object, str] = {}  #: App id each stored window was filed under.
        self._bound_ids: List[str] = []
        self._actions: List[Action] = []
        self._center_pointer = False
        self._started = False
        self._apply_config(config)

    @property
    def apps(self) -> Dict[str, AppCollection]:
        return dict(self._apps)

    @property
    def bound_ids(self) -> List[str]:
        return list(self._bound_ids)

    @property
    def center_pointer(self) -> bool:
        return self._center_pointer

    @property
    def started(self) -> bool:
        return self._started

    def start(self):
        self._startup_mapping()
        self._winctrl.watch(self.store_app, self.delete_app)
        self._started = True

    def stop(self):
        self._winctrl.unwatch()
        self._apps = {}
        self._win_ids = {}
        self._started = False

    def reload(self, config: Config):
        self._apply_config(config)
        self._apps = {}
        self._win_ids = {}
        self._startup_mapping()

    def bindings(self) -> List[Tuple[str, Callable]]:
        bindings = []
        for action in self._actions:
            callback = self._action_callback(action)
            if callback:
                bindings.append((action.key, callback))
        return bindings

    def app_id_for_window(self, win) -> str:
        if win is None:
            return OTHER
        try:
            app_id = self._winctrl.app_id(win)
            if not app_id:
                return OTHER
            if app_id in self._bound_ids:
                return app_id
            # Tolerates variants such as emacsclient showing as "Emacs (Client)".
            name = _match_name(app_id)
            if not name:
                return OTHER
            for bound_id in self._bound_ids:
                bound_name = _match_name(bound_id)
                if not bound_name:
                    continue
                if bound_name in name or name in bound_name:
                    return bound_id
            return OTHER
        except Exception as e:
            logger.warning(f"Error getting app ID for window: {e}")
            return OTHER

    def store_app(self, win):
        if win is None:
            return
        try:
            if win in self._win_ids or not self._is_tracked(win):
                return
            app_id = self.app_id_for_window(win)
            self._win_ids[win] = app_id
            appcol = self._apps.get(app_id)
            if appcol:
                logger.debug(f"Adding window to {app_id}")
                appcol.store_app(win)
            else:
                logger.debug(f"Creating new collection for {app_id}")
                app = App(self._winctrl, win)
                self._apps[app_id] = AppCollection(app, self._center_pointer, self._winctrl)
        except Exception as e:
            logger.warning(f"Error storing app: {e}")

    def delete_app(self, win):
        if win is None:
            return
        try:
            # The id is not resolved again, it may have changed since the
            # window was stored.
            app_id = self._win_ids.pop(win, None)
            appcol = self._apps.get(app_id)
            if not appcol:
                return
            logger.debug(f"Removing window from {app_id}")
            appcol.delete_app(win)
            if appcol.size() == 0:
                logger.debug(f"Removing empty collection: {app_id}")
                del self._apps[app_id]
        except Exception as e:
            logger.warning(f"Error deleting app: {e}")

    def handle_app(self, app_id: str):
        app_id = normalize_app_id(app_id)
        focused_id = self.app_id_for_window(self._winctrl.focused())
        logger.debug(f"Handling app: {app_id}")
        logger.debug(f"Currently focused: {focused_id}")

        appcol = self._apps.get(app_id)
        if appcol and focused_id == app_id:
            logger.debug("Cycling to next window")
            appcol.go_next()
        elif appcol:
            logger.debug("Switching to app")
            appcol.switch_to_app()
        else:
            logger.debug("Launching new instance")
            self._launch(app_id)

    def go_to_prev(self):
        wins = self._winctrl.list()
        if len(wins) < 2:
            return
        App(self._winctrl, wins[1]).focus(self._center_pointer)

    def delete_win(self):
        win = self._winctrl.focused()
        if win is None:
            return
        try:
            self._winctrl.close(win)
        except Exception as e:
            logger.warning(f"Error closing window: {e}")

    def _launch(self, app_id: str):
        app = self._appsys.lookup(app_id)
        if not app:
            logger.error(f"Could not find app: {app_id}")
            return
        try:
            self._appsys.launch(app)
        except Exception as e:
            logger.error(f"Could not launch app {app_id}: {e}")

    def _is_tracked(self, win) -> bool:
        return self._winctrl.is_normal(win) and not self._winctrl.is_own(win)

    def _apply_config(self, config: Config):
        self._actions = list(config.actions)
        self._center_pointer = config.center_mouse
        self._bound_ids = []
        for action in self._actions:
            if action.kind != ActKind.LAUNCH:
                continue
            app_id = normalize_app_id(action.app)
            if app_id != OTHER and app_id not in self._bound_ids:
                self._bound_ids.append(app_id)
                logger.debug(f"Bound app: {app_id}")

    def _action_callback(self, action: Action) -> Optional[Callable]:
        if action.kind == ActKind.LAUNCH:
            return lambda: self.handle_app(action.app)
        if action.kind == ActKind.WIN_OTHER:
            return lambda: self.handle_app(OTHER)
        if action.kind == ActKind.WIN_DELETE:
            return self.delete_win
        if action.kind == ActKind.WIN_PREV:
            return self.go_to_prev
        if action.kind == ActKind.WIN_CENTER_MOUSE:
            return None
        raise TypeError(f"Unhandled action kind: {action.kind}")

    def _startup_mapping(self):
        for win in self._winctrl.list():
            self.store_app(win)
        counts = {app_id: len(appcol) for app_id, appcol in self._apps.items()}
        logger.debug(f"Mapped open windows: {counts}")

##==============================================================#
## SECTION: Function Definitions                                #
##==============================================================#

def normalize_app_id(app_id: str) -> str:
    """Normalizes an app id to its desktop file id, e.g. "firefox_firefox" and
    "firefox_firefox.desktop" both give "firefox_firefox.desktop"."""
    if app_id == OTHER:
        return OTHER
    if app_id.endswith(DESKTOP_SUFFIX):
        return app_id
    return app_id + DESKTOP_SUFFIX

def normalize_app_name(name: str) -> str:
    """Removes a parenthetical qualifier, "Emacs (Client)" gives "Emacs"."""
    return _PARENTHETICAL.sub("", name, count=1)

def _match_name(app_id: str) -> str:
    return normalize_app_name(app_id).lower().replace(DESKTOP_SUFFIX, "")
