##==============================================================#
## SECTION: Imports                                             #
##==============================================================#

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, List, Optional
import logging
import os

import psutil

try:
    import gi
    gi.require_version("Gdk", "3.0")
    gi.require_version("GdkX11", "3.0")
    gi.require_version("Gtk", "3.0")
    gi.require_version("Wnck", "3.0")
    from gi.repository import Gdk, GdkX11, Gio, Gtk, Wnck
    from pynput import mouse
except (ImportError, ValueError):
    Gdk = GdkX11 = Gio = Gtk = Wnck = mouse = None

##==============================================================#
## SECTION: Global Definitions                                  #
##==============================================================#

logger = logging.getLogger(__name__)

##==============================================================#
## SECTION: Class Definitions                                   #
##==============================================================#

class WinControlError(Exception):
    """The window system cannot be controlled on this desktop."""

##-- Generic ---------------------------------------------------#

@dataclass(frozen=True, eq=True)
class WinInfo:
    title: str
    wmclass: str
    exe: str
    pid: int

class WinControlBase(ABC):
    """Window system operations needed by the launcher. Window handles are
    opaque to everything outside of the implementation."""
    @abstractmethod
    def list(self) -> List:
        """Normal top-level windows, most recently used first."""
    @abstractmethod
    def app_id(self, win) -> Optional[str]:
        pass
    @abstractmethod
    def info(self, win) -> WinInfo:
        pass
    @abstractmethod
    def is_normal(self, win) -> bool:
        pass
    @abstractmethod
    def is_own(self, win) -> bool:
        pass
    @abstractmethod
    def focused(self):
        pass
    @abstractmethod
    def activate(self, win):
        pass
    @abstractmethod
    def center_pointer(self, win):
        pass
    @abstractmethod
    def close(self, win):
        pass
    @abstractmethod
    def watch(self, on_opened: Callable, on_closed: Callable):
        pass
    @abstractmethod
    def unwatch(self):
        pass

class AppSystemBase(ABC):
    @abstractmethod
    def lookup(self, app_id: str):
        """Returns a launchable application for the id or None."""
    @abstractmethod
    def launch(self, app):
        pass

##-- Linux -----------------------------------------------------#

class AppSystem(AppSystemBase):
    """Desktop entries known to Gio, indexed by the WM class they start."""
    def __init__(self):
        if Gio is None:
            raise WinControlError("GObject introspection (Gio) is not available!")
        self._wmclasses = {}
        self._ids = set()
        self._monitor = Gio.AppInfoMonitor.get()
        self._monitor.connect("changed", lambda _: self.refresh())
        self.refresh()

    def refresh(self):
        self._wmclasses = {}
        self._ids = set()
        for appinfo in Gio.AppInfo.get_all():
            app_id = appinfo.get_id()
            if not app_id:
                continue
            self._ids.add(app_id)
            wmclass = appinfo.get_startup_wm_class()
            if wmclass:
                self._wmclasses[wmclass.lower()] = app_id
        logger.debug(f"Indexed {len(self._ids)} desktop entries")

    def match(self, *names) -> Optional[str]:
        """Finds the desktop file id for a window known by the given class or
        process names. Falls back to the first name when there is no entry."""
        names = [name for name in names if name]
        if not names:
            return None
        for name in names:
            app_id = self._wmclasses.get(name.lower())
            if app_id:
                return app_id
        for name in names:
            for app_id in (f"{name}.desktop", f"{name.lower()}.desktop"):
                if app_id in self._ids:
                    return app_id
        for name in names:
            try:
                results = Gio.DesktopAppInfo.search(name)
            except Exception as e:
                logger.debug(f"Desktop entry search failed for {name}: {e}")
                continue
            if results and results[0]:
                return results[0][0]
        return names[0]

    def lookup(self, app_id):
        return Gio.DesktopAppInfo.new(app_id)

    def launch(self, app):
        app.launch([], None)

class WinControl(WinControlBase):
    """Controls X11 windows through libwnck."""
    def __init__(self, appsys: AppSystem):
        if Wnck is None:
            raise WinControlError("libwnck introspection data or pynput is not available!")
        self._appsys = appsys
        self._screen = Wnck.Screen.get_default()
        if not self._screen:
            raise WinControlError("No X11 screen found, only X11 desktops are supported!")
        self._screen.force_update()
        self._mouse = mouse.Controller()
        self._handlers = []

    def list(self):
        wins = []
        for win in reversed(self._screen.get_windows_stacked() or []):
            if self.is_normal(win) and not win.is_skip_tasklist():
                wins.append(win)
        return wins

    def app_id(self, win):
        info = self.info(win)
        return self._appsys.match(
            win.get_class_instance_name(),
            win.get_class_group_name(),
            info.exe)

    def info(self, win):
        pid = win.get_pid()
        exe = ""
        if pid:
            try:
                exe = psutil.Process(pid).name()
            except psutil.Error:
                pass
        return WinInfo(
            win.get_name() or "",
            win.get_class_instance_name() or "",
            exe,
            pid)

    def is_normal(self, win):
        return win.get_window_type() == Wnck.WindowType.NORMAL

    def is_own(self, win):
        return win.get_pid() == os.getpid()

    def focused(self):
        return self._screen.get_active_window()

    def activate(self, win):
        timestamp = _timestamp()
        try:
            workspace = win.get_workspace()
            if workspace and workspace != self._screen.get_active_workspace():
                workspace.activate(timestamp)
            win.activate(timestamp)
        except Exception as e:
            logger.debug(f"Could not activate window: {e}")

    def center_pointer(self, win):
        try:
            x, y, width, height = win.get_geometry()
        except Exception as e:
            logger.debug(f"Could not read window geometry: {e}")
            return
        self._mouse.position = (x + width // 2, y + height // 2)

    def close(self, win):
        win.close(_timestamp())

    def watch(self, on_opened, on_closed):
        self.unwatch()
        self._handlers = [
            self._screen.connect("window-opened", lambda _, win: on_opened(win)),
            self._screen.connect("window-closed", lambda _, win: on_closed(win)),
        ]

    def unwatch(self):
        for handler in self._handlers:
            self._screen.disconnect(handler)
        self._handlers = []

##==============================================================#
## SECTION: Function Definitions                                #
##==============================================================#

def _timestamp() -> int:
    # NOTE: Zero outside of a GTK event handler (e.g. pynput hotkeys).
    timestamp = Gtk.get_current_event_time()
    if not timestamp:
        timestamp = GdkX11.x11_get_server_time(Gdk.get_default_root_window())
    return timestamp

##==============================================================#
## SECTION: Main Body                                           #
##==============================================================#

if __name__ == '__main__':
    pass
