"""
Cache-invalidation signals emitted after successful mutations.

Views that cache query results connect to ``collection_invalidated`` and
drop the cached entries for the collection named in the payload.

Payload (keyword arguments, ids as strings):
    - collection: one of the ``*_COLLECTION`` constants below
    - entity_id: id of the mutated entity
    - operation: name of the service operation that succeeded
"""

from blinker import Namespace

APPOINTMENTS_COLLECTION = "appointments"
CLINICAL_RECORDS_COLLECTION = "clinical-records"

_signals = Namespace()

collection_invalidated = _signals.signal("collection-invalidated")


def emit_invalidation(sender, collection: str, entity_id: str, operation: str) -> None:
    collection_invalidated.send(
        sender, collection=collection, entity_id=str(entity_id), operation=operation
    )
