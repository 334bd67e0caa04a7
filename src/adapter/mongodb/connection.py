"""Process-wide MongoDB client.

One client is shared by every request. A client that stops answering pings
is replaced on the next call; a missing or unusable MONGO_URL is remembered
so later calls fail fast instead of waiting on server selection again.
"""

import logging

from pymongo import MongoClient
from pymongo.errors import ConnectionFailure, PyMongoError

logger = logging.getLogger(__name__)

# Driver-level logs are noisy at INFO
logging.getLogger('pymongo').setLevel(logging.WARNING)

USERS_COLLECTION_NAME = 'users'

_CLIENT_OPTIONS = {
    # stored timestamps compare against aware UTC datetimes
    'tz_aware': True,
    'serverSelectionTimeoutMS': 5000,
    'connectTimeoutMS': 5000,
    'socketTimeoutMS': 30000,
    'maxPoolSize': 10,
    'minPoolSize': 0,
    'maxIdleTimeMS': 30000,
    'waitQueueTimeoutMS': 10000,
    'retryWrites': True,
    'retryReads': True,
}

_client: MongoClient | None = None
_ever_connected = False
_unusable = False


def ping(client: MongoClient) -> bool:
    try:
        client.admin.command('ping')
        return True
    except PyMongoError:
        return False


def reset_client():
    """Forget the cached client and any recorded failure."""
    global _client, _ever_connected, _unusable
    _client = None
    _ever_connected = False
    _unusable = False


def close_client():
    """Close the cached client. Called on application shutdown."""
    global _client
    if _client is None:
        return
    try:
        _client.close()
        logger.info("[MONGODB] Client closed")
    except PyMongoError as e:
        logger.error(f"[MONGODB] Error closing client: {e}")
    finally:
        _client = None


def _connect(mongo_url: str) -> MongoClient | None:
    global _client, _ever_connected, _unusable
    try:
        client = MongoClient(mongo_url, **_CLIENT_OPTIONS)
        client.admin.command('ping')
    except (ConnectionFailure, PyMongoError) as e:
        if _ever_connected:
            logger.warning(f"[MONGODB] Reconnect failed: {str(e)[:200]}")
        else:
            # First contact failed: treat as configuration, not an outage
            logger.error(f"[MONGODB] Initial connection failed: {str(e)[:200]}")
            _unusable = True
        return None

    if not _ever_connected:
        logger.info("[MONGODB] Connected successfully")
    _ever_connected = True
    _client = client
    return client


def get_mongodb_client(mongo_url: str | None) -> MongoClient | None:
    """Return a healthy client, reconnecting if the cached one went away.

    Returns None when MongoDB is unreachable or not configured.
    """
    global _client, _unusable

    if _client is not None:
        if ping(_client):
            return _client
        logger.debug("[MONGODB] Cached client failed ping, reconnecting")
        _client = None

    if _unusable:
        return None

    if not mongo_url:
        logger.error("[MONGODB] MONGO_URL not configured.")
        _unusable = True
        return None

    return _connect(mongo_url)
