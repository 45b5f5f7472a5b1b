# Stateless session keys: per-flow state is carried by the client as a
# time-boxed, URL-safe base64 JSON blob instead of a server-side store.

import base64
import binascii
import json
import logging
import time
from typing import Any

from qrproxy.core.config import settings

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


def encode(data: dict, ttl: float | None = None) -> str:
    """
    Packs ``data`` into an opaque session key valid for ``ttl`` seconds.

    The payload is not signed. Its contents only select which vendor call
    to make, the vendor decides whether the login is real.
    """
    if ttl is None:
        ttl = settings.SESSION_TTL_SECONDS
    now = _now_ms()
    payload = {
        "data": data,
        "expireTime": now + int(ttl * 1000),
        "timestamp": now,
    }
    raw = json.dumps(payload, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def decode(token: str | None) -> Any | None:
    """
    Returns the data packed by ``encode`` or None when the key is missing,
    malformed or past its expiry.
    """
    if not token or not isinstance(token, str):
        return None

    padded = token + "=" * (-len(token) % 4)
    try:
        raw = base64.urlsafe_b64decode(padded.encode("ascii"))
        payload = json.loads(raw.decode("utf-8"))
    except (binascii.Error, UnicodeError, ValueError) as e:
        logger.warning(f"Session key decode failed: {type(e).__name__}")
        return None

    if not isinstance(payload, dict):
        return None

    expire_time = payload.get("expireTime")
    if not isinstance(expire_time, (int, float)) or _now_ms() > expire_time:
        return None

    return payload.get("data")
