"""Tests for the cached MongoDB client."""

import unittest
from unittest.mock import MagicMock, patch

from pymongo.errors import ServerSelectionTimeoutError

from adapter.mongodb import connection
from adapter.mongodb.connection import close_client, get_mongodb_client, ping, reset_client


class TestGetMongodbClient(unittest.TestCase):

    def setUp(self):
        reset_client()

    def tearDown(self):
        reset_client()

    def test_missing_url_returns_none(self):
        self.assertIsNone(get_mongodb_client(None))

    @patch('adapter.mongodb.connection.MongoClient')
    def test_client_is_cached_and_tz_aware(self, mock_client_cls):
        first = get_mongodb_client("mongodb://db")
        second = get_mongodb_client("mongodb://db")

        self.assertIs(first, second)
        mock_client_cls.assert_called_once()
        self.assertTrue(mock_client_cls.call_args.kwargs['tz_aware'])

    @patch('adapter.mongodb.connection.MongoClient')
    def test_initial_failure_is_remembered(self, mock_client_cls):
        mock_client_cls.return_value.admin.command.side_effect = ServerSelectionTimeoutError("no server")

        self.assertIsNone(get_mongodb_client("mongodb://db"))
        self.assertIsNone(get_mongodb_client("mongodb://db"))
        mock_client_cls.assert_called_once()

    @patch('adapter.mongodb.connection.MongoClient')
    def test_dead_cached_client_is_replaced(self, mock_client_cls):
        dead, fresh = MagicMock(), MagicMock()
        mock_client_cls.side_effect = [dead, fresh]
        get_mongodb_client("mongodb://db")
        dead.admin.command.side_effect = ServerSelectionTimeoutError("gone")

        self.assertIs(get_mongodb_client("mongodb://db"), fresh)

    @patch('adapter.mongodb.connection.MongoClient')
    def test_close_client_drops_cache(self, mock_client_cls):
        client = get_mongodb_client("mongodb://db")

        close_client()

        client.close.assert_called_once()
        self.assertIsNone(connection._client)


class TestPing(unittest.TestCase):

    def test_ping(self):
        healthy = MagicMock()
        broken = MagicMock()
        broken.admin.command.side_effect = ServerSelectionTimeoutError("down")

        self.assertTrue(ping(healthy))
        self.assertFalse(ping(broken))


if __name__ == '__main__':
    unittest.main()
