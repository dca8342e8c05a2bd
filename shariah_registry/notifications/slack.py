"""
Slack Notification Module - Post rating updates to Slack.

Features:
- One attachment per rating update
- Colour by overall score band
"""

import os
import requests
from typing import Dict
from datetime import datetime, timezone

from ..config.settings import ALERT_CONFIG
from ..core.events import RatingUpdated
from ..core.scoring import score_band, SCORE_BANDS


# Slack webhook URL from environment or config
SLACK_WEBHOOK_URL = os.getenv("SLACK_WEBHOOK_URL") or ALERT_CONFIG.get("slack_webhook")

# Band colors for Slack
BAND_COLORS = {
    "A": "#2EB67D",  # Green
    "B": "#7CC242",
    "C": "#ECB22E",  # Amber
    "D": "#FFA500",  # Orange
    "F": "#FF0000",  # Red
}


def format_rating_update(event: RatingUpdated) -> Dict:
    """
    Format a rating update as a Slack attachment.

    Args:
        event: RatingUpdated event

    Returns:
        Slack attachment dict
    """
    data = event.to_dict()
    band = score_band(event.overall_score)

    fields = [
        {
            "title": "Symbol",
            "value": event.symbol or "Unknown",
            "short": True
        },
        {
            "title": "Chain",
            "value": str(event.chain_id),
            "short": True
        },
        {
            "title": "Overall Score",
            "value": f"{event.overall_score} ({band} - {SCORE_BANDS[band]['label']})",
            "short": True
        },
        {
            "title": "Identity",
            "value": f"`{data['identity']}`",
            "short": False
        }
    ]

    return {
        "color": BAND_COLORS.get(band, "#808080"),
        "title": f":bookmark_tabs: Rating updated: {event.symbol}",
        "fields": fields,
        "footer": "Shariah Rating Registry",
        "ts": int(datetime.now(timezone.utc).timestamp())
    }


def send_slack_message(payload: Dict) -> bool:
    """
    Send a message to Slack webhook.

    Args:
        payload: Slack message payload

    Returns:
        True if successful
    """
    if not SLACK_WEBHOOK_URL:
        print("Warning: SLACK_WEBHOOK_URL not configured")
        return False

    try:
        response = requests.post(
            SLACK_WEBHOOK_URL,
            json=payload,
            headers={"Content-Type": "application/json"},
            timeout=10
        )
        response.raise_for_status()
        return True
    except requests.exceptions.RequestException as e:
        print(f"Slack send error: {e}")
        return False


def send_slack_rating_update(event: RatingUpdated) -> bool:
    """
    Post a single rating update to Slack.

    Args:
        event: RatingUpdated event

    Returns:
        True if successful
    """
    attachment = format_rating_update(event)
    return send_slack_message({"attachments": [attachment]})
