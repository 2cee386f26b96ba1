import threading
import unittest

from dataterm.errors import StateError
from dataterm.records import SimpleRecord
from dataterm.rows import Row, RowStore


class TestRowStoreRegister(unittest.TestCase):
    def test_register_seeds_row_from_record(self) -> None:
        store = RowStore()
        rec = SimpleRecord("Temp", "21.5", read_only=True)
        self.assertTrue(store.register(rec))
        row = store[0]
        self.assertIs(row.record, rec)
        self.assertEqual(row.label, "Temp")
        self.assertEqual(row.value, "21.5")
        self.assertTrue(row.read_only)
        self.assertTrue(row.invalidated)
        self.assertIsNone(row.highlight_start)

    def test_register_twice_yields_one_row(self) -> None:
        store = RowStore()
        rec = SimpleRecord("a")
        self.assertTrue(store.register(rec))
        self.assertFalse(store.register(rec))
        self.assertEqual(len(store), 1)

    def test_equal_looking_records_are_distinct(self) -> None:
        store = RowStore()
        store.register(SimpleRecord("a", "1"))
        store.register(SimpleRecord("a", "1"))
        self.assertEqual(len(store), 2)

    def test_register_keeps_order(self) -> None:
        store = RowStore()
        recs = [SimpleRecord(f"Item {i}") for i in range(5)]
        for r in recs:
            store.register(r)
        self.assertEqual([row.label for row in store.rows()], [f"Item {i}" for i in range(5)])

    def test_register_while_running_fails(self) -> None:
        store = RowStore()
        store.running = True
        with self.assertRaises(StateError):
            store.register(SimpleRecord("late"))
        self.assertEqual(len(store), 0)

    def test_register_none_fails(self) -> None:
        with self.assertRaises(TypeError):
            RowStore().register(None)  # type: ignore[arg-type]


class TestRowStoreNotify(unittest.TestCase):
    def test_notify_refreshes_cached_fields(self) -> None:
        store = RowStore()
        rec = SimpleRecord("a", "1")
        store.register(rec)
        row = store[0]
        row.mark_displayed(100.0)
        self.assertFalse(row.invalidated)

        rec.set_value("2")
        store.notify(rec)
        self.assertEqual(row.value, "2")
        self.assertTrue(row.invalidated)

    def test_notify_unregistered_record_is_noop(self) -> None:
        store = RowStore()
        known = SimpleRecord("known", "1")
        store.register(known)
        store[0].mark_displayed(1.0)

        store.notify(SimpleRecord("stranger", "x"))
        store.notify(None)
        row = store[0]
        self.assertEqual(row.value, "1")
        self.assertFalse(row.invalidated)
        self.assertEqual(len(store), 1)

    def test_notify_after_stop_is_accepted(self) -> None:
        store = RowStore()
        rec = SimpleRecord("a", "1")
        store.register(rec)
        store.running = True
        store.running = False
        rec.set_value("late")
        store.notify(rec)
        self.assertEqual(store[0].value, "late")

    def test_concurrent_notifications_last_write_wins(self) -> None:
        store = RowStore()
        recs = [SimpleRecord(f"r{i}", "0") for i in range(8)]
        for r in recs:
            store.register(r)

        def _writer(rec: SimpleRecord) -> None:
            for v in range(200):
                rec.set_value(str(v))
                store.notify(rec)

        threads = [threading.Thread(target=_writer, args=(r,)) for r in recs]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=5.0)

        for row in store.rows():
            self.assertEqual(row.value, "199")
            self.assertTrue(row.invalidated)


class TestRowHighlight(unittest.TestCase):
    def test_first_display_starts_highlight_window(self) -> None:
        row = Row(record=SimpleRecord("a"), label="a", value=None, read_only=False)
        self.assertFalse(row.is_highlighted(10.0, 1.0))
        row.mark_displayed(10.0)
        self.assertEqual(row.highlight_start, 10.0)
        self.assertTrue(row.is_highlighted(10.5, 1.0))
        self.assertFalse(row.is_highlighted(11.0, 1.0))

    def test_redisplay_without_change_keeps_start(self) -> None:
        row = Row(record=SimpleRecord("a"), label="a", value=None, read_only=False)
        row.mark_displayed(10.0)
        row.mark_displayed(20.0)
        self.assertEqual(row.highlight_start, 10.0)


class TestRowStoreNotifyOrdering(unittest.TestCase):
    def test_slow_older_read_does_not_overwrite_newer_value(self) -> None:
        entered = threading.Event()
        release = threading.Event()

        class _SlowRead(SimpleRecord):
            def value(self):
                current = super().value()
                if threading.current_thread().name == "slow-reader":
                    entered.set()
                    release.wait(timeout=5.0)
                return current

        store = RowStore()
        rec = _SlowRead("a", "old")
        store.register(rec)

        slow = threading.Thread(target=store.notify, args=(rec,), name="slow-reader")
        slow.start()
        self.assertTrue(entered.wait(timeout=5.0))

        rec.set_value("new")
        fast = threading.Thread(target=store.notify, args=(rec,), name="fast-reader")
        fast.start()
        fast.join(timeout=0.1)
        release.set()
        slow.join(timeout=5.0)
        fast.join(timeout=5.0)

        self.assertEqual(rec.value(), "new")
        self.assertEqual(store[0].value, "new")


if __name__ == "__main__":
    unittest.main()
