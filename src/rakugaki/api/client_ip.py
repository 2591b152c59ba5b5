from __future__ import annotations

from fastapi import Request

UNKNOWN_CLIENT = "unknown"


def get_client_ip(request: Request) -> str:
    """Best-effort client address, preferring proxy headers over the socket peer."""
    headers = request.headers
    cf_ip = (headers.get("cf-connecting-ip") or "").strip()
    if cf_ip:
        return cf_ip

    forwarded = (headers.get("x-forwarded-for") or "").split(",")[0].strip()
    if forwarded:
        return forwarded

    real_ip = (headers.get("x-real-ip") or "").strip()
    if real_ip:
        return real_ip

    if request.client and request.client.host:
        return request.client.host
    return UNKNOWN_CLIENT
