"""
Registry Handler - RPC-style entry point for the Rating Registry.

Event shape:
    {"action": "submit_rating", "caller": "0x...", "rating": {...}}
    {"action": "get_report", "identity": "0x..."}
    {"action": "get_report", "chain_id": 1, "token_address": "0x..."}
    {"action": "count"}
    {"action": "list_identities", "offset": 0, "limit": 50}
    {"action": "list_reports", "offset": 0, "limit": 50}
    {"action": "all_identities"} / {"action": "all_reports"}

Ratings use the ProtocolReport.to_dict() layout.
"""

import json
import traceback
from datetime import datetime, timezone
from typing import Any, Callable, Dict

from ..config.settings import REGISTRY_CONFIG
from ..core.access import RaterRoles
from ..core.errors import AuthorizationError
from ..core.identity import identity_to_hex, identity_from_hex
from ..core.models import RiskScore, ShariahData
from ..core.registry import RatingRegistry, DEFAULT_PAGE_LIMIT
from .notification_handler import attach_notifiers


def create_default_registry() -> RatingRegistry:
    """
    Build the service registry from REGISTRY_CONFIG.

    Requires REGISTRY_ADMIN; the admin is bootstrapped as the first rater.
    """
    admin = REGISTRY_CONFIG["admin"]
    if not admin:
        raise ValueError("REGISTRY_ADMIN not configured")

    store = None
    if REGISTRY_CONFIG["store"] == "postgres":
        from ..core.db import PostgresReportStore
        store = PostgresReportStore()
        store.ensure_schema()

    registry = RatingRegistry(RaterRoles(admin), store=store)
    attach_notifiers(registry, REGISTRY_CONFIG["notify_channels"])
    return registry


def _page_args(event: Dict) -> Dict[str, Any]:
    return {
        "offset": event.get("offset", 0),
        "limit": event.get("limit", DEFAULT_PAGE_LIMIT),
    }


def _submit_rating(registry: RatingRegistry, event: Dict) -> Dict:
    rating = event["rating"]
    report = registry.submit_rating(
        event["caller"],
        name=rating.get("name", ""),
        symbol=rating.get("symbol", ""),
        chain_id=int(rating["chain_id"]),
        token_address=rating["token_address"],
        website=rating.get("website", ""),
        scores=RiskScore.from_dict(rating.get("scores") or {}),
        shariah=ShariahData.from_dict(rating.get("shariah") or {}),
    )
    identity = registry.protocol_id(report.chain_id, report.token_address)
    return {"identity": identity_to_hex(identity), "report": report.to_dict()}


def _get_report(registry: RatingRegistry, event: Dict) -> Dict:
    if event.get("identity"):
        identity = identity_from_hex(event["identity"])
    else:
        identity = registry.protocol_id(int(event["chain_id"]), event["token_address"])
    return {
        "identity": identity_to_hex(identity),
        "report": registry.get_report(identity).to_dict(),
    }


ACTIONS: Dict[str, Callable[[RatingRegistry, Dict], Any]] = {
    "submit_rating": _submit_rating,
    "get_report": _get_report,
    "count": lambda registry, event: {"count": registry.count()},
    "list_identities": lambda registry, event: {
        "identities": [identity_to_hex(i) for i in registry.list_identities(**_page_args(event))]
    },
    "list_reports": lambda registry, event: {
        "reports": [r.to_dict() for r in registry.list_reports(**_page_args(event))]
    },
    "all_identities": lambda registry, event: {
        "identities": [identity_to_hex(i) for i in registry.all_identities()]
    },
    "all_reports": lambda registry, event: {
        "reports": [r.to_dict() for r in registry.all_reports()]
    },
}


def build_handler(registry: RatingRegistry) -> Callable[[Dict, Any], Dict]:
    """
    Bind a handler to a registry instance.

    Args:
        registry: Registry the handler serves

    Returns:
        handler(event, context) callable
    """

    def handler(event, context):
        """
        Handle one registry request.

        Args:
            event: Request dict with an "action" key
            context: Lambda context (unused)

        Returns:
            Dict with statusCode and body
        """
        start_time = datetime.now(timezone.utc)
        event = event or {}
        action = event.get("action")

        response = {
            "statusCode": 200,
            "body": {
                "handler": "registry",
                "action": action,
                "timestamp": start_time.isoformat(),
                "status": "success",
                "result": None,
                "error": None
            }
        }

        try:
            if action not in ACTIONS:
                raise ValueError(f"Unknown action: {action}. Options: {list(ACTIONS)}")
            response["body"]["result"] = ACTIONS[action](registry, event)

        except AuthorizationError as e:
            response["statusCode"] = 403
            response["body"]["status"] = "error"
            response["body"]["error"] = str(e)
            print(f"[{start_time.isoformat()}] {action} rejected: {e}")

        except (ValueError, KeyError, TypeError) as e:
            response["statusCode"] = 400
            response["body"]["status"] = "error"
            response["body"]["error"] = f"Bad request: {e}"
            print(f"[{start_time.isoformat()}] {action} bad request: {e}")

        except Exception as e:
            response["statusCode"] = 500
            response["body"]["status"] = "error"
            response["body"]["error"] = str(e)
            print(f"ERROR: {e}")
            traceback.print_exc()

        end_time = datetime.now(timezone.utc)
        duration_ms = (end_time - start_time).total_seconds() * 1000
        response["body"]["duration_ms"] = duration_ms

        return response

    return handler


_default_handler = None


def handler(event, context):
    """
    Service entry point backed by the registry from REGISTRY_CONFIG.

    The registry is created on the first call and reused afterwards.
    """
    global _default_handler
    if _default_handler is None:
        _default_handler = build_handler(create_default_registry())
    return _default_handler(event, context)


# For local testing
if __name__ == "__main__":
    print("Testing registry handler locally...")
    demo_admin = "0x" + "1" * 40
    local = build_handler(RatingRegistry(RaterRoles(demo_admin)))
    local({
        "action": "submit_rating",
        "caller": demo_admin,
        "rating": {
            "name": "Demo Sukuk",
            "symbol": "DSUK",
            "chain_id": 1,
            "token_address": "0x" + "a" * 40,
            "website": "https://example.org",
            "scores": {"transparency": 90, "track_record": 85, "asset_backing": 70,
                       "smart_contract": 95, "liquidity": 60},
            "shariah": {"status": "COMPLIANT", "asset_type": "DEBT_BASED"},
        },
    }, None)
    print(json.dumps(local({"action": "list_reports"}, None), indent=2, default=str))
