"""MongoDB index management for the users collection.

Index specs are declared once; startup reconciles them with whatever the
database already has, replacing indexes whose name or options drifted.
"""

from dataclasses import dataclass, field
from logging import getLogger

from pymongo.collection import Collection
from pymongo.errors import OperationFailure

logger = getLogger(__name__)

_COMPARED_OPTIONS = ('unique', 'sparse')


@dataclass(frozen=True)
class IndexSpec:
    name: str
    keys: list[tuple[str, int]]
    options: dict = field(default_factory=dict)

    def matches(self, info: dict) -> bool:
        """True when an index_information() entry has our keys and options."""
        if list(info.get('key', [])) != self.keys:
            return False
        return all(
            bool(info.get(opt, False)) == bool(self.options.get(opt, False))
            for opt in _COMPARED_OPTIONS
        )


USER_INDEXES = [
    IndexSpec('idx_users_email', [('email', 1)], {'unique': True}),
    IndexSpec('idx_users_reset_token', [('reset_token', 1)], {'sparse': True}),
    IndexSpec('idx_users_created_at', [('created_at', -1)]),
]


def ensure_index(collection: Collection, spec: IndexSpec) -> bool:
    """Create an index, dropping a stale index that blocks it.

    A stale index is one with our name but different keys/options, or our
    keys under a different name.
    """
    existing = collection.index_information()
    current = existing.get(spec.name)
    if current and spec.matches(current):
        return True

    for idx_name, info in existing.items():
        if idx_name == '_id_':
            continue
        same_name = idx_name == spec.name
        same_keys = list(info.get('key', [])) == spec.keys
        if same_name or same_keys:
            logger.warning(f"Dropping stale index: {idx_name}")
            collection.drop_index(idx_name)

    try:
        collection.create_index(spec.keys, name=spec.name, **spec.options)
    except OperationFailure as e:
        logger.error(f"Failed to create index {spec.name}: {e}")
        return False
    logger.info(f"Created index: {spec.name}")
    return True


def ensure_all_indexes(db) -> bool:
    """Ensure indexes for all collections. Called at app startup."""
    from adapter.mongodb.user_repository import MongoUserRepository

    return MongoUserRepository(db).ensure_indexes()
