##==============================================================#
## SECTION: Imports                                             #
##==============================================================#

from dataclasses import dataclass
from typing import Callable, List, Optional
import logging

from pynput import keyboard
from wx.lib.embeddedimage import PyEmbeddedImage
import wx
import wx.adv

##==============================================================#
## SECTION: Global Definitions                                  #
##==============================================================#

logger = logging.getLogger(__name__)

#: Modifier spellings accepted in bindings files mapped to pynput key names.
KEY_ALIASES = {
    "control": "ctrl",
    "super": "cmd",
    "win": "cmd",
    "meta": "cmd",
    "escape": "esc",
    "return": "enter",
}

##==============================================================#
## SECTION: Class Definitions                                   #
##==============================================================#

class _Default:
    icon = PyEmbeddedImage(
        "iVBORw0KGgoAAAANSUhEUgAAACAAAAAgCAYAAABzenr0AAAABHNCSVQICAgIfAhkiAAAALhJ"
        "REFUWIXtl80SgyAMhHeR99Y+eJseLAdHbJM0TjiwN2dI+MgfQpYFmSqpu0+AEQDqrwXyeorH"
        "McvCEIBdm3F7/fr0FKgBRFaIrHkAdykdQFmEGm2HL233BAIAYmxYEqjePo9SBYBvBKppclDz"
        "prMcqAhbAtknJx+3AKRHgGhnv4iApQY+jtSWpOY27BnifNt5uyk9BekAoZNwl21yDBSBi/63"
        "yOMiLAXaf8AuwP9n94vzaTYBsgHeht4lXXmb7yQAAAAASUVORK5CYII=")

@dataclass
class MenuItem:
    name: str
    msg: str
    func: Callable
    confirm: bool = False

@dataclass
class Config:
    name: str = ""
    version: str = ""
    about: str = "Built with QWindow"
    iconpath: Optional[str] = None
    menuitems: Optional[List[MenuItem]] = None

class TaskBarIcon(wx.adv.TaskBarIcon):
    def __init__(self, app):
        self.app = app
        super(TaskBarIcon, self).__init__()
        self.SetIcon(self.app.icon, self.app.config.name)

    @staticmethod
    def CreateMenuItem(menu, label, func):
        item = wx.MenuItem(menu, -1, label)
        menu.Bind(wx.EVT_MENU, func, id=item.GetId())
        menu.Append(item)
        return item

    def CreatePopupMenu(self):
        menu = wx.Menu()
        if self.app.config.menuitems:
            for item in self.app.config.menuitems:
                TaskBarIcon.CreateMenuItem(menu, item.name, self.CreatePopupFunc(item))
            menu.AppendSeparator()
        TaskBarIcon.CreateMenuItem(menu, 'About', self.OnAbout)
        TaskBarIcon.CreateMenuItem(menu, 'Exit', self.OnExit)
        return menu

    def CreatePopupFunc(self, item):
        return lambda _: self.ShowMenuItemDialog(item)

    def ShowMenuItemDialog(self, item):
        no = 8
        if item.confirm and wx.MessageBox("Perform this action?", item.name, wx.YES_NO) == no:
            return
        item.func()
        if item.msg:
            wx.MessageBox(item.msg, item.name, wx.OK)

    def OnAbout(self, event):
        about = wx.adv.AboutDialogInfo()
        about.SetIcon(self.app.icon)
        about.SetName(self.app.config.name)
        about.SetVersion(self.app.config.version)
        about.SetDescription(self.app.config.about)
        wx.adv.AboutBox(about)

    def OnExit(self, event):
        self.Destroy()
        self.app.hostwin.Destroy()

class App(wx.App):
    """Runs a hotkey processor on the wx main loop. Hotkeys are delivered by
    a pynput listener thread and handed to the main loop with CallAfter, so
    the processor only ever runs on the main thread."""
    def __init__(self, config: Config, make_processor: Callable):
        self.config = config
        self.processor = None
        self._make_processor = make_processor
        self._hotkeys = None
        super(App, self).__init__()

    def InitIcon(self):
        self.icon = _Default.icon.GetIcon()
        if self.config.iconpath:
            try:
                self.icon = wx.Icon(wx.Bitmap(self.config.iconpath))
            except Exception:
                logger.warning(f"Could not load icon {self.config.iconpath}, using default")

    def OnInit(self):
        self.ValidateConfig()
        self.hostwin = HostWindow(self)
        self.SetTopWindow(self.hostwin)
        try:
            self.processor = self._make_processor()
            self.processor.start()
        except Exception as e:
            _WxUtils.ErrorOut(f"Could not start: {e}")
        self.InitIcon()
        self.taskbaricon = TaskBarIcon(self)
        self.InitSystemHotkeys()
        return True

    def OnExit(self):
        self.StopSystemHotkeys()
        if self.processor:
            self.processor.stop()
        return 0

    def ValidateConfig(self):
        if not self.config.name:
            _WxUtils.ErrorOut("Name must be provided!")

    @staticmethod
    def ParseHotkey(hotkey: str) -> str:
        """Converts a binding such as "ctrl+alt+t" or "f9" into pynput syntax,
        "<ctrl>+<alt>+t" and "<f9>" respectively."""
        toks = []
        for tok in hotkey.lower().split("+"):
            tok = KEY_ALIASES.get(tok.strip(), tok.strip())
            toks.append(tok if len(tok) == 1 else f"<{tok}>")
        return "+".join(toks)

    @staticmethod
    def MakeHotkeyFunc(func):
        return lambda: wx.CallAfter(func)

    def InitSystemHotkeys(self) -> bool:
        self.StopSystemHotkeys()
        hotkeys = {}
        for key, func in self.processor.bindings():
            hotkey = App.ParseHotkey(key)
            if hotkey in hotkeys:
                logger.warning(f"Hotkey {key} is bound more than once, using the last binding")
            hotkeys[hotkey] = App.MakeHotkeyFunc(func)
        if not hotkeys:
            logger.warning("No hotkeys are configured")
            return False
        try:
            self._hotkeys = keyboard.GlobalHotKeys(hotkeys)
            self._hotkeys.start()
        except Exception as e:
            _WxUtils.ErrorOut(f"The hotkeys could not be registered: {e}")
        logger.debug(f"Registered hotkeys: {', '.join(hotkeys)}")
        return True

    def StopSystemHotkeys(self):
        if self._hotkeys:
            self._hotkeys.stop()
            self._hotkeys = None

class HostWindow(wx.Frame):
    """Hidden top-level window that keeps the main loop alive."""
    def __init__(self, app):
        super(HostWindow, self).__init__(None, -1, app.config.name)
        self.app = app
        self.Bind(wx.EVT_CLOSE, self.OnCloseWindow)

    def OnCloseWindow(self, event):
        self.app.taskbaricon.Destroy()
        self.Destroy()

class _WxUtils:
    @staticmethod
    def ErrorOut(msg):
        logger.error(msg)
        wx.MessageBox(msg, 'QWindow Fatal Error', wx.OK | wx.ICON_ERROR)
        exit()

##==============================================================#
## SECTION: Main Body                                           #
##==============================================================#

if __name__ == '__main__':
    pass
