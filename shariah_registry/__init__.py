"""
Shariah RWA Rating Registry.

Records Shariah-compliance ratings for real-world-asset protocols, keyed by
(chain id, token address).

Quick Start:
    from shariah_registry import RatingRegistry, RaterRoles, RiskScore, ShariahData

    roles = RaterRoles(admin="0x...")
    registry = RatingRegistry(roles)
    registry.submit_rating("0x...", "Protocol", "RWA", 1, "0x...",
                           "https://example.org", RiskScore(80, 80, 80, 80, 80),
                           ShariahData())
    print(registry.count())
"""

__version__ = "1.0.0"

from .core import (
    AuthorizationError,
    ComplianceStatus,
    AssetType,
    RiskScore,
    ShariahData,
    ProtocolReport,
    ZERO_ADDRESS,
    derive_identity,
    normalize_address,
    identity_to_hex,
    identity_from_hex,
    SCORE_WEIGHTS,
    compute_overall_score,
    score_band,
    RaterAuthorization,
    RaterRoles,
    RatingUpdated,
    NotificationBus,
    InMemoryReportStore,
    RatingRegistry,
    load_ratings_from_directory,
)

__all__ = [
    "__version__",
    "AuthorizationError",
    "ComplianceStatus",
    "AssetType",
    "RiskScore",
    "ShariahData",
    "ProtocolReport",
    "ZERO_ADDRESS",
    "derive_identity",
    "normalize_address",
    "identity_to_hex",
    "identity_from_hex",
    "SCORE_WEIGHTS",
    "compute_overall_score",
    "score_band",
    "RaterAuthorization",
    "RaterRoles",
    "RatingUpdated",
    "NotificationBus",
    "InMemoryReportStore",
    "RatingRegistry",
    "load_ratings_from_directory",
]
