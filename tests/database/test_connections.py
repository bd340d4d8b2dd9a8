"""
Tests for MongoDB connections and index creation.

These tests cover:
- Client creation and caching per connection string
- Stable API pinning
- Index creation on the identity collections
"""

import pytest
from unittest.mock import AsyncMock, MagicMock, call, patch

import identity_store.database.connections as conn_module
from identity_store.config import StoreOptions
from identity_store.core.errors import StoreConfigurationError
from identity_store.database.connections import close_connections, get_mongo_client
from identity_store.database.indexes import ROLE_INDEXES, USER_INDEXES, create_identity_indexes


@pytest.fixture(autouse=True)
def reset_clients():
    """Start every test with an empty client cache."""
    conn_module._mongo_clients.clear()
    yield
    conn_module._mongo_clients.clear()


class TestMongoDBConnection:
    """Tests for MongoDB client handling."""

    def test_get_mongo_client_creates_connection(self):
        """get_mongo_client should create the client on first call."""
        with patch("identity_store.database.connections.AsyncIOMotorClient") as mock_client:
            mock_instance = MagicMock()
            mock_client.return_value = mock_instance

            client = get_mongo_client("mongodb://test:27017")

            mock_client.assert_called_once_with("mongodb://test:27017")
            assert client is mock_instance

    def test_get_mongo_client_is_cached(self):
        """The same settings should share one client."""
        with patch("identity_store.database.connections.AsyncIOMotorClient") as mock_client:
            first = get_mongo_client("mongodb://test:27017")
            second = get_mongo_client("mongodb://test:27017")
            get_mongo_client("mongodb://other:27017")

            assert first is second
            assert mock_client.call_count == 2

    def test_get_mongo_client_with_server_api(self):
        """The server API flag should pin the Stable API version 1."""
        with patch("identity_store.database.connections.AsyncIOMotorClient") as mock_client:
            get_mongo_client("mongodb://test:27017", use_server_api_v1=True)

            _, kwargs = mock_client.call_args
            assert kwargs["server_api"].version == "1"

    @pytest.mark.parametrize("connection_string", [None, "", "   "])
    def test_blank_connection_string_raises(self, connection_string):
        with pytest.raises(StoreConfigurationError):
            get_mongo_client(connection_string)

    def test_close_connections_cleans_up(self):
        """close_connections should close and forget every client."""
        mock_mongo = MagicMock()
        conn_module._mongo_clients[("mongodb://test:27017", False)] = mock_mongo

        close_connections()

        mock_mongo.close.assert_called_once()
        assert conn_module._mongo_clients == {}


class TestIndexCreation:
    """Tests for index creation on the identity collections."""

    @pytest.mark.asyncio
    async def test_creates_indexes_on_configured_collections(self):
        users = MagicMock()
        users.create_index = AsyncMock()
        roles = MagicMock()
        roles.create_index = AsyncMock()
        db = MagicMock()
        db.__getitem__.side_effect = {"acme_users": users, "acme_roles": roles}.__getitem__

        options = StoreOptions(users_collection="acme_users", roles_collection="acme_roles")
        await create_identity_indexes(db, options)

        assert users.create_index.await_count == len(USER_INDEXES)
        assert roles.create_index.await_count == len(ROLE_INDEXES)
        users.create_index.assert_has_awaits([call([("normalized_name", 1)]), call([("tenant_id", 1)])], any_order=True)
        roles.create_index.assert_has_awaits([call([("normalized_name", 1)])])

    @pytest.mark.asyncio
    async def test_creates_indexes_on_mock_database(self, mock_identity_db):
        """Index creation should run against a mongomock database."""
        await create_identity_indexes(mock_identity_db, StoreOptions())

        indexes = await mock_identity_db.users.index_information()
        assert "normalized_name_1" in indexes
        assert "logins.provider_1_logins.login_key_1" in indexes
