import logging
from typing import Optional

from idpyoidc.exception import MissingRequiredAttribute

from minifed.exception import TrustWriteError
from minifed.message import SubordinateInfo

logger = logging.getLogger(__name__)


class SubordinateStore(object):
    """
    Information about the immediate subordinates of an entity, keyed by the
    subordinate's entity identifier.
    """

    def __init__(self):
        self._db = {}

    def write(self, entity_id: str, info: SubordinateInfo):
        if not entity_id:
            raise TrustWriteError("Can not store subordinate information without an entity_id")

        try:
            info.verify()
        except (MissingRequiredAttribute, ValueError) as err:
            raise TrustWriteError(f"{entity_id}: {err}")

        if info["entity_id"] != entity_id:
            raise TrustWriteError(
                f"Key mismatch, {entity_id} != {info['entity_id']}")

        self._db[entity_id] = info

    def read(self, entity_id: str) -> Optional[SubordinateInfo]:
        return self._db.get(entity_id)

    def keys(self):
        return self._db.keys()

    def items(self):
        return self._db.items()

    def __contains__(self, entity_id):
        return entity_id in self._db

    def __getitem__(self, entity_id):
        return self._db[entity_id]

    def __len__(self):
        return len(self._db)
