"""Utility helpers for the headshot router."""

import hashlib
from typing import Any, Dict, Optional

from fastapi import Request


def get_client_ip(request: Request) -> Optional[str]:
    """Extract the requester IP from common proxy headers."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()

    cf_ip = request.headers.get("CF-Connecting-IP")
    if cf_ip:
        return cf_ip

    if request.client:
        return request.client.host

    return None


def build_device_key(request: Request, client_ip: Optional[str]) -> Optional[str]:
    """Create a stable device identifier from IP and user agent."""
    if not client_ip:
        return None

    user_agent = request.headers.get("User-Agent", "unknown")
    user_agent_hash = hashlib.sha256(user_agent.encode("utf-8")).hexdigest()
    return f"{client_ip}:{user_agent_hash}"


def quota_message(status: Dict[str, Any]) -> str:
    if status["allowed"]:
        return f"You have {status['remaining']} generations left today"
    return "You have 0 generations left today"


def rate_limit_headers(status: Dict[str, Any]) -> Dict[str, str]:
    return {
        "X-RateLimit-Limit": str(status["limit"]),
        "X-RateLimit-Remaining": str(status["remaining"]),
    }
