from typing import Any, Dict, Optional

from ..utils.logger import logger


class OfflineDataProvider:
    """
    In-memory stand-in used when Firestore is unconfigured or, outside
    production, unreachable. Starts empty; documents created while offline
    land here so they can be read back during the same session.
    """

    def __init__(self, seed: Optional[Dict[str, Dict[str, Dict[str, Any]]]] = None):
        self._collections: Dict[str, Dict[str, Dict[str, Any]]] = {}
        for collection_name, documents in (seed or {}).items():
            for doc_id, data in documents.items():
                self.put_document(collection_name, doc_id, data)

    def get_document(self, collection_name: str, doc_id: str) -> Optional[Dict[str, Any]]:
        document = self._collections.get(collection_name, {}).get(doc_id)
        if document is None:
            logger.debug(f"📭 Offline store has no document {collection_name}/{doc_id}")
            return None
        return dict(document)

    def put_document(self, collection_name: str, doc_id: str, data: Dict[str, Any]) -> None:
        self._collections.setdefault(collection_name, {})[doc_id] = {**data, "id": doc_id}

    def clear(self) -> None:
        self._collections.clear()
