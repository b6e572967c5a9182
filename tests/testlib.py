"""Provides a library to aid testing."""

##==============================================================#
## SECTION: Imports                                             #
##==============================================================#

import os.path as op
import sys
import unittest

##==============================================================#
## SECTION: Function Definitions                                #
##==============================================================#

def _add_relative_dir_to_syspath(reldir):
    absdir = op.normpath(op.join(op.abspath(op.dirname(__file__)), reldir))
    sys.path.insert(0, absdir)

##==============================================================#
## SECTION: Special Setup                                       #
##==============================================================#

_add_relative_dir_to_syspath("../app")
from glconfig import Config
from winctrl import AppSystemBase, WinControlBase, WinInfo

##==============================================================#
## SECTION: Class Definitions                                   #
##==============================================================#

class FakeWindow:
    """A window as seen by FakeWinControl. The app_id may be an exception
    instance, which app_id() then raises."""
    def __init__(self, app_id, wmclass=None, normal=True, own=False):
        self.app_id = app_id
        self.wmclass = wmclass or str(app_id)
        self.normal = normal
        self.own = own

    def __repr__(self):
        return f"FakeWindow({self.wmclass})"

class FakeWinControl(WinControlBase):
    """In-memory window system. Windows are kept most recently used first and
    activating a window moves it to the front."""
    def __init__(self, wins=None, focused=None):
        self.wins = list(wins or [])
        self.focused_win = focused
        self.activated = []
        self.centered = []
        self.closed = []
        self.on_opened = None
        self.on_closed = None

    def list(self):
        return [win for win in self.wins if win.normal]

    def app_id(self, win):
        if isinstance(win.app_id, Exception):
            raise win.app_id
        return win.app_id

    def info(self, win):
        return WinInfo("", win.wmclass, "", 0)

    def is_normal(self, win):
        return win.normal

    def is_own(self, win):
        return win.own

    def focused(self):
        return self.focused_win

    def activate(self, win):
        self.activated.append(win)
        self.focused_win = win
        if win in self.wins:
            self.wins.remove(win)
            self.wins.insert(0, win)

    def center_pointer(self, win):
        self.centered.append(win)

    def close(self, win):
        self.closed.append(win)
        self.remove(win)

    def watch(self, on_opened, on_closed):
        self.on_opened = on_opened
        self.on_closed = on_closed

    def unwatch(self):
        self.on_opened = None
        self.on_closed = None

    def open(self, win, focus=True):
        self.wins.insert(0, win)
        if focus:
            self.focused_win = win
        if self.on_opened:
            self.on_opened(win)

    def remove(self, win):
        self.wins.remove(win)
        if self.focused_win is win:
            self.focused_win = self.wins[0] if self.wins else None
        if self.on_closed:
            self.on_closed(win)

class FakeAppSystem(AppSystemBase):
    def __init__(self, app_ids=None):
        self.app_ids = set(app_ids or [])
        self.launched = []

    def lookup(self, app_id):
        if app_id in self.app_ids:
            return app_id
        return None

    def launch(self, app):
        self.launched.append(app)

##==============================================================#
## SECTION: Function Definitions                                #
##==============================================================#

def make_config(text: str) -> Config:
    return Config.from_text(text)

##==============================================================#
## SECTION: Main Body                                           #
##==============================================================#

if __name__ == '__main__':
    unittest.main()
