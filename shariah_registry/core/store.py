"""
In-memory report store.

Holds the keyed record map and the catalog: the append-only list of
identities in first-write order. Records are immutable and replaced
wholesale, so readers never see a half-written record.
"""

from typing import Dict, List, Optional

from .models import ProtocolReport


class InMemoryReportStore:
    """Keyed store plus catalog, kept in process memory."""

    def __init__(self):
        self._reports: Dict[bytes, ProtocolReport] = {}
        self._catalog: List[bytes] = []

    def get(self, identity: bytes) -> Optional[ProtocolReport]:
        return self._reports.get(bytes(identity))

    def exists(self, identity: bytes) -> bool:
        return bytes(identity) in self._reports

    def get_many(self, identities: List[bytes]) -> Dict[bytes, ProtocolReport]:
        """Stored reports for the given identities; missing ones are omitted."""
        keys = [bytes(i) for i in identities]
        return {key: self._reports[key] for key in keys if key in self._reports}

    def upsert(self, identity: bytes, report: ProtocolReport, is_new: bool) -> None:
        """
        Store a record, appending its identity to the catalog when new.

        Callers serialise writes; `is_new` must reflect `exists()` under
        the same lock.
        """
        key = bytes(identity)
        # Record first, so a catalog entry always resolves to a stored report
        self._reports[key] = report
        if is_new:
            self._catalog.append(key)

    def catalog_slice(self, offset: int, limit: int) -> List[bytes]:
        return self._catalog[offset:offset + limit]

    def catalog_length(self) -> int:
        return len(self._catalog)
