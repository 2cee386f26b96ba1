import unittest
from random import Random

from dataterm import keys
from dataterm.view import HEADER_ROWS, STATUS_ROWS, ViewState, compute_page_height


class TestPageHeight(unittest.TestCase):
    def test_without_overlay(self) -> None:
        self.assertEqual(compute_page_height(24), 24 - HEADER_ROWS - STATUS_ROWS)

    def test_overlay_reserves_body_and_separator(self) -> None:
        self.assertEqual(compute_page_height(24, 1, has_overlay=True), 24 - 5 - 2)
        self.assertEqual(compute_page_height(24, 3, has_overlay=True), 24 - 5 - 4)

    def test_overlay_height_ignored_without_overlay(self) -> None:
        self.assertEqual(compute_page_height(24, 3, has_overlay=False), 19)


class TestViewNavigation(unittest.TestCase):
    def test_down_is_monotonic_and_stops_at_last_row(self) -> None:
        for n in (1, 2, 7, 40):
            state = ViewState()
            state.page_height = 10
            prev = state.selected
            for _ in range(n + 5):
                state.navigate(keys.DOWN, n)
                self.assertGreaterEqual(state.selected, prev)
                self.assertGreaterEqual(state.selected, 0)
                self.assertLessEqual(state.selected, n - 1)
                prev = state.selected
            self.assertEqual(state.selected, n - 1)

    def test_up_stops_at_zero(self) -> None:
        state = ViewState()
        state.selected = 2
        for _ in range(5):
            state.navigate(keys.UP, 10)
        self.assertEqual(state.selected, 0)

    def test_page_up_and_down(self) -> None:
        state = ViewState()
        state.page_height = 10
        state.navigate(keys.PAGE_DOWN, 25)
        self.assertEqual((state.selected, state.top), (10, 10))
        state.navigate(keys.PAGE_DOWN, 25)
        self.assertEqual(state.selected, 20)
        # top overshoots until the next visibility correction.
        self.assertEqual(state.top, 20)
        state.ensure_visible(25)
        self.assertEqual(state.top, 15)
        state.navigate(keys.PAGE_DOWN, 25)
        self.assertEqual(state.selected, 24)

        state.navigate(keys.PAGE_UP, 25)
        self.assertEqual((state.selected, state.top), (14, 15))
        state.ensure_visible(25)
        self.assertEqual(state.top, 14)
        state.navigate(keys.PAGE_UP, 25)
        state.navigate(keys.PAGE_UP, 25)
        self.assertEqual((state.selected, state.top), (0, 0))

    def test_other_keys_are_not_navigation(self) -> None:
        state = ViewState()
        state.page_height = 10
        self.assertFalse(state.navigate(keys.ENTER, 10))
        self.assertFalse(state.navigate(keys.KeyEvent.of("j"), 10))
        self.assertEqual((state.selected, state.top), (0, 0))

    def test_empty_list_is_ignored(self) -> None:
        state = ViewState()
        self.assertFalse(state.navigate(keys.DOWN, 0))
        self.assertEqual(state.selected, 0)


class TestViewVisibilityInvariants(unittest.TestCase):
    def test_random_navigation_keeps_selection_on_page(self) -> None:
        rng = Random(0)
        moves = [keys.UP, keys.DOWN, keys.PAGE_UP, keys.PAGE_DOWN, keys.ENTER]
        for _ in range(200):
            n = rng.randint(1, 120)
            state = ViewState()
            for _ in range(60):
                state.page_height = rng.randint(1, 30)
                state.navigate(rng.choice(moves), n)
                state.ensure_visible(n)
                self.assertGreaterEqual(state.selected, 0)
                self.assertLess(state.selected, n)
                self.assertLessEqual(state.top, state.selected)
                self.assertLessEqual(state.selected, state.top + state.page_height - 1)
                self.assertGreaterEqual(state.top, 0)
                self.assertLessEqual(state.top, max(0, n - state.page_height))

    def test_scrolls_down_to_keep_selection_visible(self) -> None:
        state = ViewState()
        state.page_height = 5
        state.selected = 7
        state.ensure_visible(40)
        self.assertEqual(state.top, 3)

    def test_short_list_is_pinned_to_top(self) -> None:
        state = ViewState()
        state.page_height = 20
        state.selected = 3
        state.top = 3
        state.ensure_visible(5)
        self.assertEqual(state.top, 0)


class TestViewTinyTerminal(unittest.TestCase):
    def test_paging_with_no_room_for_rows_moves_by_one(self) -> None:
        for page_height in (0, -1, -4):
            state = ViewState()
            state.page_height = page_height
            state.navigate(keys.PAGE_DOWN, 10)
            self.assertEqual(state.selected, 1)
            state.navigate(keys.PAGE_DOWN, 10)
            self.assertEqual(state.selected, 2)
            state.navigate(keys.PAGE_UP, 10)
            state.navigate(keys.PAGE_UP, 10)
            state.navigate(keys.PAGE_UP, 10)
            self.assertEqual((state.selected, state.top), (0, 0))

    def test_selection_stays_in_range_on_tiny_pages(self) -> None:
        rng = Random(3)
        moves = [keys.UP, keys.DOWN, keys.PAGE_UP, keys.PAGE_DOWN]
        state = ViewState()
        for _ in range(300):
            state.page_height = rng.randint(-3, 2)
            state.navigate(rng.choice(moves), 6)
            state.ensure_visible(6)
            self.assertGreaterEqual(state.selected, 0)
            self.assertLess(state.selected, 6)
            self.assertGreaterEqual(state.top, 0)


if __name__ == "__main__":
    unittest.main()
