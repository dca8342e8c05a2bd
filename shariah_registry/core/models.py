"""
Registry data model.

A ProtocolReport is the single entity the registry stores. It is created on the
first submission for a protocol identity and replaced wholesale on every later
submission.

Usage:
    scores = RiskScore(transparency=80, track_record=75, asset_backing=90,
                       smart_contract=70, liquidity=60)
    shariah = ShariahData(status=ComplianceStatus.COMPLIANT,
                          asset_type=AssetType.REAL_ESTATE,
                          document_cid="bafy...")
"""

from typing import Dict, Any
from dataclasses import dataclass, field, asdict
from enum import Enum
import json


ZERO_ADDRESS = "0x" + "0" * 40

# Sub-scores are stored as uint8 on the reference deployment
UINT8_MAX = 255

RISK_SCORE_FIELDS = (
    "transparency",
    "track_record",
    "asset_backing",
    "smart_contract",
    "liquidity",
)


class ComplianceStatus(Enum):
    NON_COMPLIANT = 0
    COMPLIANT = 1
    DOUBTFUL = 2


class AssetType(Enum):
    DEBT_BASED = 0
    EQUITY = 1
    COMMODITY = 2
    REAL_ESTATE = 3
    HYBRID = 4


def _parse_enum(enum_cls, value):
    """Accept an enum member, its name (any case) or its ordinal."""
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        try:
            return enum_cls[value.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown {enum_cls.__name__}: {value!r}") from None
    return enum_cls(value)


@dataclass(frozen=True)
class RiskScore:
    """Five sub-scores, each expected in [0, 100]."""
    transparency: int = 0
    track_record: int = 0
    asset_backing: int = 0
    smart_contract: int = 0
    liquidity: int = 0

    def __post_init__(self):
        for name in RISK_SCORE_FIELDS:
            value = getattr(self, name)
            # bool is an int subclass but never a meaningful score
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an integer, got {value!r}")
            if not 0 <= value <= UINT8_MAX:
                raise ValueError(f"{name} must fit in 0..{UINT8_MAX}, got {value}")

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RiskScore":
        return cls(**{name: data.get(name, 0) for name in RISK_SCORE_FIELDS})


@dataclass(frozen=True)
class ShariahData:
    """Shariah classification and its supporting documentation."""
    status: ComplianceStatus = ComplianceStatus.NON_COMPLIANT
    asset_type: AssetType = AssetType.DEBT_BASED
    document_cid: str = ""  # IPFS content id of the fatwa / screening report
    has_purification: bool = False
    non_compliant_income_notes: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.name,
            "asset_type": self.asset_type.name,
            "document_cid": self.document_cid,
            "has_purification": self.has_purification,
            "non_compliant_income_notes": self.non_compliant_income_notes,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ShariahData":
        return cls(
            status=_parse_enum(ComplianceStatus, data.get("status", ComplianceStatus.NON_COMPLIANT)),
            asset_type=_parse_enum(AssetType, data.get("asset_type", AssetType.DEBT_BASED)),
            document_cid=data.get("document_cid", ""),
            has_purification=bool(data.get("has_purification", False)),
            non_compliant_income_notes=data.get("non_compliant_income_notes", ""),
        )


@dataclass(frozen=True)
class ProtocolReport:
    """
    Complete rating record for one protocol identity.

    Records are immutable; an update stores a new instance. The default
    instance is the zero-value record returned for identities that were
    never listed, so callers must check `is_listed` to tell absence apart
    from a genuine zero-scored entry.
    """
    name: str = ""
    symbol: str = ""
    chain_id: int = 0
    token_address: str = ZERO_ADDRESS
    website: str = ""
    scores: RiskScore = field(default_factory=RiskScore)
    shariah: ShariahData = field(default_factory=ShariahData)
    overall_score: int = 0
    last_update: int = 0  # unix seconds
    rater: str = ZERO_ADDRESS
    is_listed: bool = False

    @classmethod
    def empty(cls) -> "ProtocolReport":
        """Return the zero-value record."""
        return cls()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "symbol": self.symbol,
            "chain_id": self.chain_id,
            "token_address": self.token_address,
            "website": self.website,
            "scores": self.scores.to_dict(),
            "shariah": self.shariah.to_dict(),
            "overall_score": self.overall_score,
            "last_update": self.last_update,
            "rater": self.rater,
            "is_listed": self.is_listed,
        }

    def to_json(self, indent: int = 2) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProtocolReport":
        """Create from dictionary (e.g., loaded from JSON or a database row)."""
        scores = data.get("scores") or {}
        shariah = data.get("shariah") or {}
        for field, value in (("scores", scores), ("shariah", shariah)):
            if not isinstance(value, (dict, RiskScore, ShariahData)):
                raise TypeError(f"{field} must be an object, got {type(value).__name__}")
        return cls(
            name=data.get("name", ""),
            symbol=data.get("symbol", ""),
            chain_id=int(data.get("chain_id", 0)),
            token_address=data.get("token_address", ZERO_ADDRESS),
            website=data.get("website", ""),
            scores=scores if isinstance(scores, RiskScore) else RiskScore.from_dict(scores),
            shariah=shariah if isinstance(shariah, ShariahData) else ShariahData.from_dict(shariah),
            overall_score=int(data.get("overall_score", 0)),
            last_update=int(data.get("last_update", 0)),
            rater=data.get("rater", ZERO_ADDRESS),
            is_listed=bool(data.get("is_listed", False)),
        )
