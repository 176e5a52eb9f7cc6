"""Unit tests for the in-memory session store."""
import threading

from dentalbot.models.chat import ConversationStep
from dentalbot.services.session_store import SessionStore

from conftest import FakeClock


class TestSessionLifecycle:
    """Create / get / delete / list behaviour without eviction."""

    def test_get_or_create_initializes_session(self, store, clock):
        session = store.get_or_create("s1", "u1")
        assert session.id == "s1"
        assert session.user_id == "u1"
        assert session.current_step == ConversationStep.WELCOME
        assert session.messages == []
        assert session.patient_info.model_dump(exclude_none=True) == {}
        assert session.created_at == session.updated_at == clock.now

    def test_get_or_create_returns_existing(self, store):
        first = store.get_or_create("s1", "u1")
        second = store.get_or_create("s1", "someone-else")
        assert first is second
        assert second.user_id == "u1"

    def test_get_unknown_returns_none(self, store):
        assert store.get("missing") is None

    def test_delete(self, store):
        store.get_or_create("s1", "u1")
        assert store.delete("s1") is True
        assert store.get("s1") is None
        assert store.delete("s1") is False

    def test_list_all_keeps_insertion_order(self, store):
        for sid in ("b", "a", "c"):
            store.get_or_create(sid, "u")
        assert [s.id for s in store.list_all()] == ["b", "a", "c"]

    def test_list_all_is_a_snapshot(self, store):
        store.get_or_create("s1", "u1")
        snapshot = store.list_all()
        store.get_or_create("s2", "u1")
        assert len(snapshot) == 1
        assert len(store) == 2

    def test_concurrent_creation_yields_one_session(self):
        store = SessionStore()
        seen = []

        def worker():
            seen.append(store.get_or_create("shared", "u1"))

        threads = [threading.Thread(target=worker) for _ in range(20)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(store) == 1
        assert all(s is seen[0] for s in seen)


class TestEviction:
    """TTL expiry and capacity bound."""

    def test_no_expiry_by_default(self, store, clock):
        store.get_or_create("s1", "u1")
        clock.advance(10 ** 7)
        assert store.get("s1") is not None
        assert store.purge_expired() == 0

    def test_expired_session_is_hidden_and_recreated(self):
        clock = FakeClock()
        store = SessionStore(ttl_seconds=60, clock=clock)
        original = store.get_or_create("s1", "u1")
        original.current_step = ConversationStep.COLLECTING_AGE

        clock.advance(61)
        assert store.get("s1") is None
        fresh = store.get_or_create("s1", "u1")
        assert fresh is not original
        assert fresh.current_step == ConversationStep.WELCOME

    def test_recent_activity_keeps_session_alive(self):
        clock = FakeClock()
        store = SessionStore(ttl_seconds=60, clock=clock)
        session = store.get_or_create("s1", "u1")
        clock.advance(50)
        session.updated_at = clock.now
        clock.advance(50)
        assert store.get("s1") is session

    def test_purge_expired_counts_removed(self):
        clock = FakeClock()
        store = SessionStore(ttl_seconds=60, clock=clock)
        store.get_or_create("old", "u1")
        clock.advance(30)
        store.get_or_create("new", "u1")
        clock.advance(40)
        assert store.purge_expired() == 1
        assert [s.id for s in store.list_all()] == ["new"]

    def test_capacity_evicts_least_recently_updated(self):
        clock = FakeClock()
        store = SessionStore(max_sessions=2, clock=clock)
        first = store.get_or_create("first", "u1")
        clock.advance(1)
        store.get_or_create("second", "u1")
        clock.advance(1)
        first.updated_at = clock.now

        store.get_or_create("third", "u1")
        assert store.get("second") is None
        assert {s.id for s in store.list_all()} == {"first", "third"}

    def test_busy_session_is_not_evicted_for_capacity(self):
        clock = FakeClock()
        store = SessionStore(max_sessions=1, clock=clock)
        store.get_or_create("busy", "u1")
        store.mark_busy("busy")
        clock.advance(1)

        store.get_or_create("other", "u2")
        assert {s.id for s in store.list_all()} == {"busy", "other"}

        store.mark_idle("busy")
        clock.advance(1)
        store.get_or_create("third", "u3")
        assert [s.id for s in store.list_all()] == ["third"]

    def test_busy_session_does_not_expire(self):
        clock = FakeClock()
        store = SessionStore(ttl_seconds=60, clock=clock)
        session = store.get_or_create("s1", "u1")
        store.mark_busy("s1")
        clock.advance(120)

        assert store.get("s1") is session
        assert store.purge_expired() == 0

        store.mark_idle("s1")
        assert store.get("s1") is None

    def test_busy_marks_are_counted(self, store):
        store.mark_busy("s1")
        store.mark_busy("s1")
        store.mark_idle("s1")
        assert store.is_busy("s1")
        store.mark_idle("s1")
        assert not store.is_busy("s1")
        store.mark_idle("s1")
        assert not store.is_busy("s1")
