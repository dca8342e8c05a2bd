"""
Pytest configuration and fixtures for the Shariah Rating Registry.

This file contains shared fixtures used across all test modules.
Fixtures follow the pattern: factory functions with auto-cleanup.
"""

import pytest
from typing import Dict, Any
from unittest.mock import MagicMock, patch

from shariah_registry import (
    RatingRegistry,
    RaterRoles,
    RiskScore,
    ShariahData,
    ComplianceStatus,
    AssetType,
    NotificationBus,
)


# =============================================================================
# ADDRESSES
# =============================================================================

ADMIN = "0x" + "1" * 40
RATER = "0x" + "2" * 40
OUTSIDER = "0x" + "3" * 40

TOKEN_A = "0x" + "aa" * 20


@pytest.fixture
def admin() -> str:
    return ADMIN


@pytest.fixture
def rater() -> str:
    return RATER


@pytest.fixture
def outsider() -> str:
    return OUTSIDER


# =============================================================================
# REGISTRY FIXTURES
# =============================================================================

class FakeClock:
    """Deterministic unix clock for lastUpdate assertions."""

    def __init__(self, start: int = 1_700_000_000):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int = 60) -> int:
        self.now += seconds
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def roles() -> RaterRoles:
    """Role table with ADMIN as admin and RATER granted."""
    table = RaterRoles(ADMIN)
    table.grant_rater(ADMIN, RATER)
    return table


@pytest.fixture
def bus() -> NotificationBus:
    return NotificationBus()


@pytest.fixture
def events(bus):
    """Collects every RatingUpdated published on `bus`."""
    received = []
    bus.subscribe(received.append)
    return received


@pytest.fixture
def registry(roles, bus, clock) -> RatingRegistry:
    return RatingRegistry(roles, bus=bus, clock=clock)


@pytest.fixture
def rating_factory():
    """
    Factory fixture for submit_rating keyword arguments.

    Usage:
        def test_something(registry, rater, rating_factory):
            registry.submit_rating(rater, **rating_factory(symbol="XYZ"))
    """
    def _create_rating(**overrides) -> Dict[str, Any]:
        base = {
            "name": "Factory Sukuk",
            "symbol": "FSUK",
            "chain_id": 1,
            "token_address": TOKEN_A,
            "website": "https://factory.example",
            "scores": RiskScore(
                transparency=80,
                track_record=80,
                asset_backing=80,
                smart_contract=80,
                liquidity=80,
            ),
            "shariah": ShariahData(
                status=ComplianceStatus.COMPLIANT,
                asset_type=AssetType.DEBT_BASED,
                document_cid="bafybeigdyrzt5sfp7udm7hu76uh7y26nf3efuylqabf3oclgtqy55fbzdi",
                has_purification=True,
                non_compliant_income_notes="",
            ),
        }
        base.update(overrides)
        return base

    return _create_rating


@pytest.fixture
def populated_registry(registry, rater, rating_factory):
    """Registry holding seven protocols on chain 1, tokens 0x..01 to 0x..07."""
    for i in range(1, 8):
        registry.submit_rating(rater, **rating_factory(
            name=f"Protocol {i}",
            symbol=f"P{i}",
            token_address=i.to_bytes(20, "big"),
        ))
    return registry


# =============================================================================
# MOCK FIXTURES FOR EXTERNAL SERVICES
# =============================================================================

@pytest.fixture
def mock_requests_post():
    """
    Mock requests.post for webhook testing.

    Usage:
        def test_send(mock_requests_post):
            send_slack_message({...})
            mock_requests_post.assert_called_once()
    """
    with patch("requests.post") as mock_post:
        mock_response = MagicMock()
        mock_response.status_code = 200
        mock_response.json.return_value = {"ok": True}
        mock_post.return_value = mock_response
        yield mock_post


@pytest.fixture
def mock_cursor():
    """Cursor returned by the mocked psycopg2 connection."""
    return MagicMock()


@pytest.fixture
def mock_db_connect(mock_cursor):
    """Mock psycopg2.connect so stores run without a database."""
    with patch("psycopg2.connect") as mock_connect:
        conn = MagicMock()
        conn.cursor.return_value.__enter__.return_value = mock_cursor
        mock_connect.return_value = conn
        yield mock_connect
