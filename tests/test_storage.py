import threading
import uuid
from datetime import datetime, timedelta

from clipdeck.models import ClipboardEntry, EntryType
from clipdeck.storage import EntryStore


def _same_text(text):
    return lambda e: e.entry_type == EntryType.TEXT and e.content == text


class TestAddAndRetrieve:
    def test_add_entry(self, store, make_entry):
        entry = store.add_entry(make_entry("test text"))
        assert store.count() == 1
        assert store.get_entry(entry.id) == entry

    def test_newest_first(self, store, make_entry):
        store.add_entry(make_entry("first"))
        store.add_entry(make_entry("second"))
        assert [e.content for e in store.entries] == ["second", "first"]

    def test_get_entry_not_found(self, store):
        assert store.get_entry(uuid.uuid4()) is None

    def test_entries_is_a_snapshot(self, store, make_entry):
        store.add_entry(make_entry("one"))
        snapshot = store.entries
        store.add_entry(make_entry("two"))
        assert len(snapshot) == 1
        assert len(store) == 2

    def test_re_adding_same_id_does_not_duplicate(self, store, make_entry):
        entry = make_entry("once")
        store.add_entry(entry)
        store.add_entry(entry)
        assert store.count() == 1


class TestDeduplication:
    def test_insert_removes_duplicate(self, store, make_entry):
        store.insert(make_entry("dup"), _same_text("dup"))
        store.insert(make_entry("other"), _same_text("other"))
        new = store.insert(make_entry("dup"), _same_text("dup"))
        assert [e.content for e in store.entries] == ["dup", "other"]
        assert store.entries[0].id == new.id

    def test_insert_carries_star(self, store, make_entry):
        old = store.insert(make_entry("starred"), _same_text("starred"))
        store.toggle_star(old.id)
        new = store.insert(make_entry("starred"), _same_text("starred"))
        assert new.is_starred is True
        assert new.id != old.id
        assert store.get_entry(old.id) is None

    def test_insert_unstarred_duplicate_stays_unstarred(self, store, make_entry):
        store.insert(make_entry("plain"), _same_text("plain"))
        new = store.insert(make_entry("plain"), _same_text("plain"))
        assert new.is_starred is False


class TestCapacity:
    def test_purges_tail(self, make_entry):
        store = EntryStore(max_entries=50)
        for i in range(55):
            store.add_entry(make_entry(f"Item {i}"))
        assert store.count() == 50
        assert store.entries[0].content == "Item 54"
        assert store.entries[-1].content == "Item 5"

    def test_purge_old_explicit(self, store, make_entry):
        for i in range(10):
            store.add_entry(make_entry(f"item {i}"))
        assert store.purge_old(keep_count=3) == 7
        assert [e.content for e in store.entries] == ["item 9", "item 8", "item 7"]

    def test_purge_nothing(self, store, make_entry):
        store.add_entry(make_entry("one"))
        assert store.purge_old() == 0


class TestMutations:
    def test_update_entry_keeps_id_timestamp_and_position(self, store, make_entry):
        first = store.add_entry(make_entry("first"))
        store.add_entry(make_entry("second"))
        updated = store.update_entry(first.id, content="edited")
        assert updated.id == first.id
        assert updated.timestamp == first.timestamp
        assert store.entries[1].content == "edited"

    def test_update_missing(self, store):
        assert store.update_entry(uuid.uuid4(), content="x") is None

    def test_toggle_star(self, store, make_entry):
        entry = store.add_entry(make_entry("star me"))
        assert store.toggle_star(entry.id) is True
        assert store.get_entry(entry.id).is_starred is True
        assert store.toggle_star(entry.id) is False
        assert store.get_entry(entry.id).is_starred is False

    def test_toggle_star_missing(self, store):
        assert store.toggle_star(uuid.uuid4()) is None

    def test_delete(self, store, make_entry):
        keep = store.add_entry(make_entry("keep"))
        gone = store.add_entry(make_entry("delete me"))
        assert store.delete_entry(gone.id) is True
        assert store.entries == [keep]

    def test_delete_missing(self, store):
        assert store.delete_entry(uuid.uuid4()) is False

    def test_clear_all(self, store, make_entry):
        store.add_entry(make_entry("a"))
        store.add_entry(make_entry("b"))
        assert store.clear_all() == 2
        assert store.count() == 0


class TestExpiry:
    def test_remove_expired(self, store, make_entry):
        store.add_entry(make_entry("old!pass", is_password=True, timestamp=datetime.now() - timedelta(seconds=61)))
        store.add_entry(make_entry("new!pass", is_password=True, timestamp=datetime.now() - timedelta(seconds=30)))
        store.add_entry(make_entry("ancient text", timestamp=datetime.now() - timedelta(days=3)))
        assert store.remove_expired() == 1
        assert [e.content for e in store.entries] == ["ancient text", "new!pass"]


class TestConcurrency:
    def test_parallel_inserts_respect_capacity(self, make_entry):
        store = EntryStore(max_entries=50)

        def worker(prefix):
            for i in range(100):
                store.insert(make_entry(f"{prefix}-{i}"), _same_text(f"{prefix}-{i}"))

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        entries = store.entries
        assert len(entries) == 50
        assert len({e.id for e in entries}) == 50
