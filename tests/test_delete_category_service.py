"""Tests for the category deletion orchestrator."""

import pytest

from app.domain.category.errors import PublishError
from app.domain.category.model.category import DeletionStatus
from app.domain.category.service.delete_category_service import CategoryDeletionService
from app.infrastructure.messaging.event_publisher import PublishResult
from app.infrastructure.storage.partition_store import DynamoPartitionStore
from fakes import TABLES, FakeDynamoClient, RecordingPublisher, client_error


def _service(client, publisher):
    return CategoryDeletionService(DynamoPartitionStore(client), publisher, TABLES)


class TestCategoryDeletionService:

    def test_requires_partitions(self):
        with pytest.raises(ValueError):
            CategoryDeletionService(DynamoPartitionStore(FakeDynamoClient()), RecordingPublisher(), ())

    @pytest.mark.parametrize("failing_index", [None, 0, 1, 2, 3])
    def test_publishes_only_when_every_partition_succeeded(self, failing_index):
        failures = {} if failing_index is None else {TABLES[failing_index]: client_error()}
        publisher = RecordingPublisher()

        outcome = _service(FakeDynamoClient(failures), publisher).delete_category("books")

        if failing_index is None:
            assert outcome.status is DeletionStatus.COMPLETE
            assert [event.name for event in publisher.events] == ["books"]
        else:
            assert outcome.status is DeletionStatus.FAILED
            assert publisher.events == []

    def test_dropped_publish_keeps_complete_outcome(self):
        publisher = RecordingPublisher(result=PublishResult.dropped(PublishError("Channel is not initialized")))

        outcome = _service(FakeDynamoClient(), publisher).delete_category("toys")

        assert outcome.status is DeletionStatus.COMPLETE
        assert len(publisher.events) == 1

    def test_publisher_exception_is_contained(self):
        publisher = RecordingPublisher(raises=RuntimeError("socket closed"))

        outcome = _service(FakeDynamoClient(), publisher).delete_category("toys")

        assert outcome.status is DeletionStatus.COMPLETE

    def test_no_rollback_after_partial_failure(self):
        client = FakeDynamoClient({TABLES[2]: client_error()})

        outcome = _service(client, RecordingPublisher()).delete_category("books")

        assert outcome.deleted_partitions == TABLES[:2]
        assert [table for table, _ in client.calls] == list(TABLES[:3])

    def test_event_is_handed_to_dispatch(self):
        publisher = RecordingPublisher()
        service = _service(FakeDynamoClient(), publisher)
        deferred = []

        outcome = service.delete_category("electronics", dispatch=lambda func, *args: deferred.append((func, args)))

        assert outcome.status is DeletionStatus.COMPLETE
        assert publisher.events == []
        assert len(deferred) == 1

        func, args = deferred[0]
        result = func(*args)

        assert result.published is True
        assert [event.name for event in publisher.events] == ["electronics"]

    def test_failed_delete_dispatches_nothing(self):
        deferred = []

        _service(FakeDynamoClient({TABLES[0]: client_error()}), RecordingPublisher()).delete_category(
            "books", dispatch=lambda func, *args: deferred.append(func)
        )

        assert deferred == []
