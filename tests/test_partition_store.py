"""Tests for the multi-partition storage gateway."""

from unittest.mock import patch

import pytest

from app.domain.category.errors import PartitionDeleteError
from app.domain.category.model.category import DeletionStatus
from app.infrastructure.secrets.credential_bootstrapper import Credentials
from app.infrastructure.storage.partition_store import DynamoPartitionStore, create_dynamodb_client
from fakes import TABLES, FakeDynamoClient, client_error


class TestDeleteAcrossPartitions:

    def test_deletes_every_partition_in_order(self):
        client = FakeDynamoClient()
        store = DynamoPartitionStore(client)

        outcome = store.delete_across_partitions("electronics", TABLES)

        assert outcome.status is DeletionStatus.COMPLETE
        assert [table for table, _ in client.calls] == list(TABLES)
        assert all(key == {"name": {"S": "electronics"}} for _, key in client.calls)

    def test_repeated_delete_is_complete(self):
        """Deleting an absent key is not an error."""
        client = FakeDynamoClient()
        store = DynamoPartitionStore(client)

        first = store.delete_across_partitions("electronics", TABLES)
        second = store.delete_across_partitions("electronics", TABLES)

        assert first.status is DeletionStatus.COMPLETE
        assert second.status is DeletionStatus.COMPLETE
        assert len(client.calls) == 2 * len(TABLES)

    @pytest.mark.parametrize("failing_index", range(len(TABLES)))
    def test_stops_at_first_failure(self, failing_index):
        failing = TABLES[failing_index]
        client = FakeDynamoClient(failures={failing: client_error()})
        store = DynamoPartitionStore(client)

        outcome = store.delete_across_partitions("books", TABLES)

        assert outcome.status is DeletionStatus.FAILED
        for index, table in enumerate(TABLES):
            expected = 1 if index <= failing_index else 0
            assert client.calls_for(table) == expected
        assert outcome.deleted_partitions == TABLES[:failing_index]
        assert outcome.failed_partition == failing
        assert outcome.skipped_partitions == TABLES[failing_index + 1:]

    def test_failure_is_captured_not_raised(self):
        cause = client_error(message="Table busy")
        client = FakeDynamoClient(failures={TABLES[0]: cause})

        outcome = DynamoPartitionStore(client).delete_across_partitions("books", TABLES)

        assert isinstance(outcome.error, PartitionDeleteError)
        assert outcome.error.partition == TABLES[0]
        assert outcome.error.cause is cause
        assert "Table busy" in str(outcome.error)

    def test_custom_key_attribute(self):
        client = FakeDynamoClient()

        DynamoPartitionStore(client, key_attribute="categoryName").delete_item("T", "toys")

        assert client.calls == [("T", {"categoryName": {"S": "toys"}})]


class TestCreateDynamoClient:

    def test_client_uses_bootstrapped_credentials(self):
        credentials = Credentials(access_id="AKIATEST", access_secret="s3cr3t")

        with patch("app.infrastructure.storage.partition_store.boto3.client") as factory:
            create_dynamodb_client(credentials, "us-east-2", timeout=3.0)

        kwargs = factory.call_args.kwargs
        assert kwargs["service_name"] == "dynamodb"
        assert kwargs["region_name"] == "us-east-2"
        assert kwargs["aws_access_key_id"] == "AKIATEST"
        assert kwargs["aws_secret_access_key"] == "s3cr3t"
        assert "endpoint_url" not in kwargs
        assert kwargs["config"].connect_timeout == 3.0
        assert kwargs["config"].read_timeout == 3.0

    def test_endpoint_override(self):
        credentials = Credentials(access_id="AKIATEST", access_secret="s3cr3t")

        with patch("app.infrastructure.storage.partition_store.boto3.client") as factory:
            create_dynamodb_client(credentials, "us-east-2", endpoint_url="http://localhost:8000")

        assert factory.call_args.kwargs["endpoint_url"] == "http://localhost:8000"
