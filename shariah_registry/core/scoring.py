"""
Overall score computation.

overall = floor((transparency*25 + track_record*25 + asset_backing*20
                 + smart_contract*15 + liquidity*15) / 100)

Weights sum to 100, so in-range sub-scores give an overall score in [0, 100].
"""

from typing import Dict, Optional

from ..config.settings import SCORE_CONFIG
from .models import RiskScore, RISK_SCORE_FIELDS


# =============================================================================
# WEIGHTS
# =============================================================================

SCORE_WEIGHTS = {
    "transparency": 25,
    "track_record": 25,
    "asset_backing": 20,
    "smart_contract": 15,
    "liquidity": 15,
}

WEIGHT_TOTAL = sum(SCORE_WEIGHTS.values())

MAX_SUB_SCORE = 100

# =============================================================================
# SCORE BANDS (used for notification formatting)
# =============================================================================

SCORE_BANDS = {
    "A": {"min": 85, "max": 100, "label": "Excellent"},
    "B": {"min": 70, "max": 84, "label": "Good"},
    "C": {"min": 55, "max": 69, "label": "Adequate"},
    "D": {"min": 40, "max": 54, "label": "Below Average"},
    "F": {"min": 0, "max": 39, "label": "Poor"},
}


def compute_overall_score(scores: RiskScore) -> int:
    """Weighted aggregate of the five sub-scores, truncated."""
    total = sum(getattr(scores, name) * SCORE_WEIGHTS[name] for name in RISK_SCORE_FIELDS)
    return total // WEIGHT_TOTAL


def score_band(score: int) -> str:
    """Convert an overall score to its letter band."""
    for band, config in SCORE_BANDS.items():
        if config["min"] <= score <= config["max"]:
            return band
    # Out-of-range sub-scores can push the aggregate above 100
    return "A" if score > SCORE_BANDS["A"]["max"] else "F"


def out_of_range_fields(scores: RiskScore) -> Dict[str, int]:
    """Return the sub-scores that lie above MAX_SUB_SCORE."""
    return {
        name: getattr(scores, name)
        for name in RISK_SCORE_FIELDS
        if getattr(scores, name) > MAX_SUB_SCORE
    }


def check_score_bounds(scores: RiskScore, strict: Optional[bool] = None) -> None:
    """
    Enforce the [0, 100] sub-score range when strict bounds are enabled.

    Args:
        scores: Sub-scores to check
        strict: Override for SCORE_CONFIG["strict_bounds"]
    """
    if strict is None:
        strict = SCORE_CONFIG["strict_bounds"]
    if not strict:
        return
    offending = out_of_range_fields(scores)
    if offending:
        details = ", ".join(f"{k}={v}" for k, v in offending.items())
        raise ValueError(f"Sub-scores must be within 0..{MAX_SUB_SCORE}: {details}")
