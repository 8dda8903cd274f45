"""
Slack alerts for deployment runs
"""

import logging
from typing import Dict, Optional

import requests

logger = logging.getLogger(__name__)


def send_slack_alert(webhook: Optional[str], message: str, fields: Optional[Dict[str, str]] = None) -> bool:
    """Send alert to a Slack webhook. Returns False when nothing was delivered."""
    if not webhook:
        return False

    payload = {"text": f"Deployment Alert: {message}"}
    if fields:
        payload["attachments"] = [
            {
                "fields": [
                    {"title": title, "value": value, "short": True}
                    for title, value in fields.items()
                ]
            }
        ]

    try:
        response = requests.post(webhook, json=payload, timeout=10)
        response.raise_for_status()
    except requests.exceptions.RequestException as e:
        logger.error(f"Failed to send Slack alert: {e}")
        return False

    logger.info("Slack alert sent successfully")
    return True
