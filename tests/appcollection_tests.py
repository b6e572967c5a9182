"""Tests the AppCollection class."""

##==============================================================#
## SECTION: Imports                                             #
##==============================================================#

from testlib import *

from launcher import App, AppCollection

##==============================================================#
## SECTION: Class Definitions                                   #
##==============================================================#

class TestCase(unittest.TestCase):

    def setUp(self):
        self.wins = [FakeWindow("kitty.desktop", f"kitty{n}") for n in range(3)]
        self.winctrl = FakeWinControl(list(self.wins), focused=self.wins[0])

    def make_collection(self, wins, center_pointer=False):
        appcol = AppCollection(App(self.winctrl, wins[0]), center_pointer, self.winctrl)
        for win in wins[1:]:
            appcol.store_app(win)
        return appcol

    def test_collection_starts_with_one_window(self):
        appcol = AppCollection(App(self.winctrl, self.wins[0]), False, self.winctrl)
        self.assertEqual(1, appcol.size())
        self.assertEqual(1, len(appcol))

    def test_store_appends_in_arrival_order(self):
        appcol = self.make_collection(self.wins)
        self.assertEqual(self.wins, [app.win for app in appcol.apps])

    def test_store_same_window_twice_is_tolerated(self):
        appcol = self.make_collection(self.wins)
        appcol.store_app(self.wins[1])
        self.assertEqual(3, appcol.size())

    def test_delete_removes_window(self):
        appcol = self.make_collection(self.wins)
        appcol.delete_app(self.wins[1])
        self.assertEqual([self.wins[0], self.wins[2]], [app.win for app in appcol.apps])

    def test_delete_absent_window_is_noop(self):
        appcol = self.make_collection(self.wins[:2])
        appcol.delete_app(self.wins[2])
        self.assertEqual(2, appcol.size())

    def test_go_next_visits_each_window_once(self):
        appcol = self.make_collection(self.wins)
        visited = [self.winctrl.focused()]
        for _ in range(len(self.wins) - 1):
            appcol.go_next()
            visited.append(self.winctrl.focused())
        self.assertCountEqual(self.wins, visited)
        appcol.go_next()
        self.assertIs(self.wins[0], self.winctrl.focused())

    def test_go_next_follows_external_focus_changes(self):
        appcol = self.make_collection(self.wins)
        self.winctrl.focused_win = self.wins[1]
        appcol.go_next()
        self.assertIs(self.wins[2], self.winctrl.focused())

    def test_go_next_wraps_to_first(self):
        appcol = self.make_collection(self.wins)
        self.winctrl.focused_win = self.wins[2]
        appcol.go_next()
        self.assertIs(self.wins[0], self.winctrl.focused())

    def test_go_next_with_single_window_refocuses_it(self):
        appcol = self.make_collection(self.wins[:1])
        appcol.go_next()
        self.assertEqual([self.wins[0]], self.winctrl.activated)

    def test_go_next_with_unknown_focus_focuses_first(self):
        appcol = self.make_collection(self.wins[1:])
        self.winctrl.focused_win = FakeWindow("other")
        appcol.go_next()
        self.assertIs(self.wins[1], self.winctrl.focused())

    def test_switch_to_app_picks_most_recently_used(self):
        appcol = self.make_collection(self.wins[1:])
        self.winctrl.wins = [self.wins[0], self.wins[2], self.wins[1]]
        appcol.switch_to_app()
        self.assertEqual([self.wins[2]], self.winctrl.activated)

    def test_switch_to_app_falls_back_to_first(self):
        appcol = self.make_collection(self.wins)
        self.winctrl.wins = []
        appcol.switch_to_app()
        self.assertEqual([self.wins[0]], self.winctrl.activated)

    def test_center_pointer_flag_centers_on_focus(self):
        appcol = self.make_collection(self.wins, center_pointer=True)
        appcol.go_next()
        self.assertEqual([self.wins[1]], self.winctrl.centered)

    def test_no_center_pointer_by_default(self):
        appcol = self.make_collection(self.wins)
        appcol.switch_to_app()
        self.assertEqual([], self.winctrl.centered)

    def test_app_name_is_wm_class(self):
        self.assertEqual("kitty1", App(self.winctrl, self.wins[1]).name)

##==============================================================#
## SECTION: Main Body                                           #
##==============================================================#

if __name__ == '__main__':
    unittest.main()
