"""
Slack Attachment Payloads

Creates the colored attachment messages posted for build notifications.
"""

import json
from typing import Any, Dict, List


def _attachment(text: str, color: str) -> Dict[str, Any]:
    """Create a colored attachment rendering text as mrkdwn."""
    return {
        "fallback": text,
        "color": color,
        "text": text,
        "mrkdwn_in": ["pretext", "text", "fields"],
    }


def build_attachment_payload(text: str, color: str, channel: str) -> Dict[str, Any]:
    """
    Build the payload for one channel.

    Args:
        text: Message text (already escaped by the message builder)
        color: Severity color tag (good, danger, warning)
        channel: Target channel or user

    Returns:
        Payload dictionary
    """
    payload: Dict[str, Any] = {"attachments": [_attachment(text, color)]}
    if channel:
        payload["channel"] = channel
    return payload


def encode_payload(payload: Dict[str, Any]) -> Dict[str, str]:
    """Form-encode a payload the way the incoming-hook endpoint expects."""
    return {"payload": json.dumps(payload)}


def split_channels(channel: str) -> List[str]:
    """Split a comma/space separated channel list; empty yields one default target."""
    rooms = [room for room in channel.replace(",", " ").split() if room] if channel else []
    return rooms or [""]
