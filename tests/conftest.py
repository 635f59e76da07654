"""Pytest configuration and fixtures."""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.main import create_app
from fakes import TABLES, FakeDynamoClient, RecordingPublisher, lambda_payload, secret_payload


@pytest.fixture
def settings():
    return Settings(category_tables=TABLES, log_level="DEBUG")


@pytest.fixture
def lambda_client():
    client = MagicMock()
    client.invoke.side_effect = lambda **kwargs: lambda_payload(secret_payload())
    return client


@pytest.fixture
def dynamodb_client():
    return FakeDynamoClient()


@pytest.fixture
def publisher():
    return RecordingPublisher()


@pytest.fixture
def make_client(settings, lambda_client):
    """Build a started TestClient around the given collaborators."""
    clients = []

    def _make(dynamodb_client, publisher):
        app = create_app(
            settings,
            lambda_client=lambda_client,
            dynamodb_client=dynamodb_client,
            publisher=publisher,
        )
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def api_client(make_client, dynamodb_client, publisher):
    return make_client(dynamodb_client, publisher)
