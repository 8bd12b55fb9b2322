"""Unit tests for the key-value retry ticket store."""

import threading

import pytest

from infrastructure.commands import CapacityError


class TestKeyValueRetryTicketStore:
    """Tests for KeyValueRetryTicketStore."""

    def test_enqueue_and_get(self, retry_store, ticket_factory):
        ticket = ticket_factory()

        retry_store.enqueue(ticket, capacity=10)

        assert retry_store.get("req_1") == ticket
        assert retry_store.count() == 1

    def test_queue_is_one_document(self, retry_store, ticket_factory, kv_store):
        """Test that every ticket lives in the single queue document."""
        retry_store.enqueue(ticket_factory("req_1"), capacity=10)
        retry_store.enqueue(ticket_factory("req_2"), capacity=10)

        document = kv_store.get("test_queue")

        assert set(document) == {"req_1", "req_2"}
        assert document["req_1"]["action"] == "save_settings"

    def test_enqueue_rejects_when_full(self, retry_store, ticket_factory):
        retry_store.enqueue(ticket_factory("req_1"), capacity=1)

        with pytest.raises(CapacityError) as exc_info:
            retry_store.enqueue(ticket_factory("req_2"), capacity=1)

        assert exc_info.value.data == {"queue_size": 1}
        assert retry_store.count() == 1

    def test_enqueue_existing_id_replaces_when_full(self, retry_store, ticket_factory):
        retry_store.enqueue(ticket_factory("req_1"), capacity=1)

        retry_store.enqueue(ticket_factory("req_1", attempts=1), capacity=1)

        assert retry_store.get("req_1").attempts == 1

    def test_update_only_existing(self, retry_store, ticket_factory):
        assert retry_store.update(ticket_factory()) is False

        retry_store.enqueue(ticket_factory(), capacity=10)

        assert retry_store.update(ticket_factory(attempts=2)) is True
        assert retry_store.get("req_1").attempts == 2

    def test_delete(self, retry_store, ticket_factory, kv_store):
        retry_store.enqueue(ticket_factory(), capacity=10)

        assert retry_store.delete("req_1") is True
        assert retry_store.delete("req_1") is False
        assert kv_store.get("test_queue") is None

    def test_list_skips_malformed_entries(self, retry_store, ticket_factory, kv_store):
        retry_store.enqueue(ticket_factory(), capacity=10)
        document = kv_store.get("test_queue")
        document["broken"] = {"id": "broken"}
        kv_store.set("test_queue", document)

        tickets = retry_store.list()

        assert [ticket.id for ticket in tickets] == ["req_1"]
        assert retry_store.get("broken") is None

    def test_non_dict_document_reads_as_empty(self, retry_store, kv_store):
        kv_store.set("test_queue", ["garbage"])

        assert retry_store.list() == []
        assert retry_store.count() == 0

    def test_apply_merges_against_current_document(
        self, retry_store, ticket_factory
    ):
        """Test that apply keeps tickets added since the sweep read the queue."""
        retry_store.enqueue(ticket_factory("req_1"), capacity=10)
        retry_store.enqueue(ticket_factory("req_2"), capacity=10)
        snapshot = retry_store.list()

        retry_store.enqueue(ticket_factory("req_3"), capacity=10)
        retry_store.delete("req_2")
        retry_store.apply(
            ["req_1"], [t for t in snapshot if t.id == "req_2"]
        )

        assert {ticket.id for ticket in retry_store.list()} == {"req_3"}

    def test_clear(self, retry_store, ticket_factory):
        retry_store.enqueue(ticket_factory(), capacity=10)

        retry_store.clear()

        assert retry_store.count() == 0

    def test_concurrent_enqueue_loses_nothing(self, retry_store, ticket_factory):
        """Test that in-process writers are serialized."""
        tickets = [ticket_factory(f"req_{i}") for i in range(50)]
        threads = [
            threading.Thread(target=retry_store.enqueue, args=(ticket, 100))
            for ticket in tickets
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert retry_store.count() == 50
