"""PyGlaunch: launch or switch to applications with global hotkeys."""

##==============================================================#
## SECTION: Imports                                             #
##==============================================================#

import argparse
import logging
import sys

import auxly

from launcher import Launcher
from qwindow import App, Config, MenuItem
from winctrl import AppSystem, WinControl
import glconfig

##==============================================================#
## SECTION: Global Definitions                                  #
##==============================================================#

__version__ = "0.1.0"

logger = logging.getLogger(__name__)

##==============================================================#
## SECTION: Function Definitions                                #
##==============================================================#

def fatal(msg):
    sys.exit(f"ERROR: {msg}")

def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog="pyglaunch", description=__doc__)
    parser.add_argument("config", nargs="?", default=glconfig.DEFAULT_PATH,
                        help="bindings file, created with defaults if missing (default: %(default)s)")
    parser.add_argument("--debug", action="store_true", help="enable debug logging")
    return parser.parse_args(argv)

def make_launcher(cfg):
    """Creates the launcher. Must be called after the wx app has initialized
    GTK since libwnck needs the default screen."""
    appsys = AppSystem()
    winctrl = WinControl(appsys)
    return Launcher(winctrl, appsys, cfg)

def start_app(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    if not auxly.islinux():
        fatal("Only Linux (X11) desktops are supported!")
    try:
        cfg = glconfig.load_config(args.config)
    except glconfig.ConfigError as e:
        fatal(str(e))

    def reload_bindings():
        try:
            new_cfg = glconfig.load_config(args.config)
        except glconfig.ConfigError as e:
            logger.error(str(e))
            return
        app.processor.reload(new_cfg)
        app.InitSystemHotkeys()

    menuitems = [
        MenuItem(
            name='Edit bindings',
            msg='',
            func=lambda: auxly.open(args.config)
        ),
        MenuItem(
            name='Reload bindings',
            msg='Bindings have been reloaded from file',
            func=reload_bindings
        ),
    ]
    config = Config(
        name='PyGlaunch',
        version=__version__,
        about='Launch or switch to applications with hotkeys',
        menuitems=menuitems
    )
    app = App(config, lambda: make_launcher(cfg))
    app.MainLoop()

##==============================================================#
## SECTION: Main Body                                           #
##==============================================================#

if __name__ == '__main__':
    start_app()
