"""Core registry components."""

from .errors import AuthorizationError

from .models import (
    ComplianceStatus,
    AssetType,
    RiskScore,
    ShariahData,
    ProtocolReport,
    ZERO_ADDRESS,
)

from .identity import (
    derive_identity,
    normalize_address,
    identity_to_hex,
    identity_from_hex,
)

from .scoring import (
    SCORE_WEIGHTS,
    compute_overall_score,
    score_band,
    check_score_bounds,
)

from .access import RaterAuthorization, RaterRoles
from .events import RatingUpdated, NotificationBus
from .store import InMemoryReportStore
from .registry import RatingRegistry, load_ratings_from_directory

__all__ = [
    # Errors
    "AuthorizationError",
    # Models
    "ComplianceStatus",
    "AssetType",
    "RiskScore",
    "ShariahData",
    "ProtocolReport",
    "ZERO_ADDRESS",
    # Identity
    "derive_identity",
    "normalize_address",
    "identity_to_hex",
    "identity_from_hex",
    # Scoring
    "SCORE_WEIGHTS",
    "compute_overall_score",
    "score_band",
    "check_score_bounds",
    # Access
    "RaterAuthorization",
    "RaterRoles",
    # Events
    "RatingUpdated",
    "NotificationBus",
    # Registry
    "InMemoryReportStore",
    "RatingRegistry",
    "load_ratings_from_directory",
]
