"""
Rating Registry - Shariah compliance ratings for RWA protocols.

Write path:
    caller -> rater check -> identity -> upsert (+ catalog append) -> event

Read path never consults authorization and never takes the write lock.
Records are replaced wholesale, so a reader sees either the previous or
the new record for an identity.
"""

import json
import threading
import time
from pathlib import Path
from typing import Callable, Iterator, List, Optional

from ..config.settings import PAGINATION_CONFIG
from .access import RaterAuthorization, RATER_ROLE
from .errors import AuthorizationError
from .events import NotificationBus, RatingUpdated
from .identity import derive_identity, normalize_address, AddressLike
from .models import ProtocolReport, RiskScore, ShariahData
from .scoring import compute_overall_score, check_score_bounds
from .store import InMemoryReportStore


DEFAULT_PAGE_LIMIT = PAGINATION_CONFIG["default_limit"]
FULL_DUMP_WARN_THRESHOLD = PAGINATION_CONFIG["full_dump_warn_threshold"]


def _unix_now() -> int:
    return int(time.time())


def _check_page_args(offset: int, limit: int) -> None:
    for name, value in (("offset", offset), ("limit", limit)):
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"{name} must be an integer, got {value!r}")
        if value < 0:
            raise ValueError(f"{name} must be non-negative, got {value}")


class RatingRegistry:
    """
    Registry of protocol ratings keyed by (chain id, token address).

    One instance owns its store, catalog and notification bus. Create it
    once at service start and pass it to whatever needs it.
    """

    def __init__(
        self,
        authorization: RaterAuthorization,
        store=None,
        bus: NotificationBus = None,
        clock: Callable[[], int] = None,
        strict_scores: Optional[bool] = None,
    ):
        """
        Args:
            authorization: Provider of `has_rater_capability(caller)`
            store: Report store (defaults to InMemoryReportStore)
            bus: Notification bus for RatingUpdated events
            clock: Returns the current unix time in seconds
            strict_scores: Reject sub-scores above 100 (None = settings)
        """
        self.authorization = authorization
        self.store = store if store is not None else InMemoryReportStore()
        self.bus = bus if bus is not None else NotificationBus()
        self.clock = clock or _unix_now
        self.strict_scores = strict_scores
        self._write_lock = threading.Lock()

    # =========================================================================
    # WRITE PATH
    # =========================================================================

    def submit_rating(
        self,
        caller: AddressLike,
        name: str,
        symbol: str,
        chain_id: int,
        token_address: AddressLike,
        website: str,
        scores: RiskScore,
        shariah: ShariahData,
    ) -> ProtocolReport:
        """
        Create or replace the rating for a protocol.

        Args:
            caller: Address submitting the rating (must be a rater)
            name: Protocol name
            symbol: Token symbol
            chain_id: EVM chain id
            token_address: Token contract address
            website: Protocol website URL
            scores: Five risk sub-scores
            shariah: Shariah classification

        Returns:
            The stored report

        Raises:
            AuthorizationError: caller is not a rater; nothing is stored
        """
        if not self.authorization.has_rater_capability(caller):
            raise AuthorizationError(str(caller), RATER_ROLE)

        check_score_bounds(scores, self.strict_scores)
        overall_score = compute_overall_score(scores)
        identity = derive_identity(chain_id, token_address)
        token_address = normalize_address(token_address)
        rater = normalize_address(caller)

        with self._write_lock:
            is_new = not self.store.exists(identity)
            report = ProtocolReport(
                name=name,
                symbol=symbol,
                chain_id=chain_id,
                token_address=token_address,
                website=website,
                scores=scores,
                shariah=shariah,
                overall_score=overall_score,
                last_update=int(self.clock()),
                rater=rater,
                is_listed=True,
            )
            self.store.upsert(identity, report, is_new)
            self.bus.publish(RatingUpdated(
                identity=identity,
                symbol=symbol,
                chain_id=chain_id,
                overall_score=overall_score,
            ))

        return report

    # =========================================================================
    # READ PATH
    # =========================================================================

    def protocol_id(self, chain_id: int, token_address: AddressLike) -> bytes:
        """Identity the registry uses for (chain_id, token_address)."""
        return derive_identity(chain_id, token_address)

    def get_report(self, identity: bytes) -> ProtocolReport:
        """
        Look up a report.

        Returns the zero-value record (is_listed=False) for identities that
        were never submitted.
        """
        report = self.store.get(identity)
        return report if report is not None else ProtocolReport.empty()

    def get_report_by_token(self, chain_id: int, token_address: AddressLike) -> ProtocolReport:
        return self.get_report(self.protocol_id(chain_id, token_address))

    def is_listed(self, identity: bytes) -> bool:
        return self.get_report(identity).is_listed

    def count(self) -> int:
        """Number of listed protocols."""
        return self.store.catalog_length()

    def list_identities(self, offset: int = 0, limit: int = DEFAULT_PAGE_LIMIT) -> List[bytes]:
        """
        Page through the catalog in first-submission order.

        An offset at or past the end yields an empty list; a page running
        past the end is clipped.
        """
        _check_page_args(offset, limit)
        total = self.store.catalog_length()
        if offset >= total or limit == 0:
            return []
        end = min(offset + limit, total)
        return self.store.catalog_slice(offset, end - offset)

    def list_reports(self, offset: int = 0, limit: int = DEFAULT_PAGE_LIMIT) -> List[ProtocolReport]:
        """Reports for `list_identities(offset, limit)`, same order."""
        return self._resolve(self.list_identities(offset, limit))

    def iter_reports(self, page_size: int = DEFAULT_PAGE_LIMIT) -> Iterator[ProtocolReport]:
        """Walk every listed report one bounded page at a time."""
        if page_size <= 0:
            raise ValueError(f"page_size must be positive, got {page_size}")
        offset = 0
        while True:
            page = self.list_reports(offset, page_size)
            if not page:
                return
            yield from page
            offset += len(page)

    # Administrative full dumps. Cost is linear in the catalog size; prefer
    # list_identities / list_reports / iter_reports for anything user-facing.

    def all_identities(self) -> List[bytes]:
        """Every listed identity, unbounded."""
        total = self.store.catalog_length()
        self._warn_full_dump("all_identities", total)
        return self.store.catalog_slice(0, total)

    def all_reports(self) -> List[ProtocolReport]:
        """Every listed report, unbounded, in catalog order."""
        return self._resolve(self.all_identities())

    def _resolve(self, identities: List[bytes]) -> List[ProtocolReport]:
        """Batch lookup keeping the order of `identities`."""
        found = self.store.get_many(identities)
        return [found.get(bytes(i), ProtocolReport.empty()) for i in identities]

    @staticmethod
    def _warn_full_dump(operation: str, total: int) -> None:
        if total > FULL_DUMP_WARN_THRESHOLD:
            print(
                f"Warning: {operation} returning {total} entries "
                f"(threshold {FULL_DUMP_WARN_THRESHOLD}); use paginated reads"
            )


def load_ratings_from_directory(registry: RatingRegistry, caller: AddressLike, directory: str) -> int:
    """
    Submit every JSON rating file in a directory.

    Each file holds one report in `ProtocolReport.to_dict()` layout
    (name, symbol, chain_id, token_address, website, scores, shariah).

    Args:
        registry: Target registry
        caller: Rater submitting the files
        directory: Path to directory containing JSON ratings

    Returns:
        Number of ratings loaded
    """
    loaded = 0
    dir_path = Path(directory)

    for json_file in sorted(dir_path.glob("*.json")):
        try:
            with open(json_file, 'r') as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError(f"expected a JSON object, got {type(data).__name__}")
            report = ProtocolReport.from_dict(data)
            # No zero-address fallback: a rating must name its protocol
            registry.submit_rating(
                caller,
                name=report.name,
                symbol=report.symbol,
                chain_id=int(data["chain_id"]),
                token_address=data["token_address"],
                website=report.website,
                scores=report.scores,
                shariah=report.shariah,
            )
            print(f"  Loaded: {json_file.name}")
            loaded += 1
        except (ValueError, TypeError, KeyError) as e:
            print(f"  Failed to load {json_file.name}: {e}")

    return loaded
