"""Tests app id and app name normalization."""

##==============================================================#
## SECTION: Imports                                             #
##==============================================================#

from testlib import *

from launcher import OTHER, normalize_app_id, normalize_app_name

##==============================================================#
## SECTION: Class Definitions                                   #
##==============================================================#

class TestCase(unittest.TestCase):

    def test_short_id_gets_desktop_suffix(self):
        self.assertEqual("firefox_firefox.desktop", normalize_app_id("firefox_firefox"))

    def test_suffixed_id_is_unchanged(self):
        self.assertEqual("kitty.desktop", normalize_app_id("kitty.desktop"))

    def test_other_is_unchanged(self):
        self.assertEqual(OTHER, normalize_app_id(OTHER))

    def test_normalize_is_idempotent(self):
        for app_id in ["kitty", "kitty.desktop", OTHER, "org.gnome.Nautilus", ""]:
            once = normalize_app_id(app_id)
            self.assertEqual(once, normalize_app_id(once))

    def test_name_parenthetical_is_removed(self):
        self.assertEqual("Emacs", normalize_app_name("Emacs (Client)"))

    def test_name_without_parenthetical_is_unchanged(self):
        self.assertEqual("emacsclient.desktop", normalize_app_name("emacsclient.desktop"))

    def test_only_first_parenthetical_is_removed(self):
        self.assertEqual("App (b)", normalize_app_name("App (a) (b)"))

##==============================================================#
## SECTION: Main Body                                           #
##==============================================================#

if __name__ == '__main__':
    unittest.main()
