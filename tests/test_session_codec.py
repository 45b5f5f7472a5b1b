import base64
import json

import pytest

from qrproxy.core import session_codec


def freeze(monkeypatch, now_ms):
    monkeypatch.setattr(session_codec, "_now_ms", lambda: now_ms)


@pytest.mark.parametrize(
    "payload",
    [
        {"platform": "quark", "token": "abc", "request_id": "r-1"},
        {"platform": "115", "uid": "u1", "time": 1700000000, "sign": "s"},
        {"platform": "uc", "cookies": ["a=1; Path=/", "b=2; HttpOnly"]},
        {"platform": "ali", "note": "扫码登录 ✓"},
        {},
    ],
)
def test_round_trip(payload):
    token = session_codec.encode(payload, ttl=60)
    assert session_codec.decode(token) == payload


def test_token_is_url_safe():
    # Enough varied bytes to make +, / and = likely in plain base64
    payload = {"platform": "quark", "blob": "".join(chr(c) for c in range(32, 255))}
    token = session_codec.encode(payload, ttl=60)
    assert not set("+/=") & set(token)
    assert session_codec.decode(token) == payload


def test_expires_after_ttl(monkeypatch):
    freeze(monkeypatch, 1_000_000)
    token = session_codec.encode({"platform": "115"}, ttl=300)

    freeze(monkeypatch, 1_000_000 + 300_000)
    assert session_codec.decode(token) == {"platform": "115"}

    freeze(monkeypatch, 1_000_000 + 300_001)
    assert session_codec.decode(token) is None


def test_default_ttl_is_five_minutes(monkeypatch):
    freeze(monkeypatch, 0)
    token = session_codec.encode({"platform": "uc"})

    freeze(monkeypatch, 299_999)
    assert session_codec.decode(token) is not None

    freeze(monkeypatch, 300_001)
    assert session_codec.decode(token) is None


def test_wire_format():
    token = session_codec.encode({"platform": "ali", "ck": "x"}, ttl=10)
    raw = base64.urlsafe_b64decode(token + "=" * (-len(token) % 4))
    payload = json.loads(raw)

    assert payload["data"] == {"platform": "ali", "ck": "x"}
    assert payload["expireTime"] - payload["timestamp"] == 10_000


def test_accepts_tokens_from_other_encoders():
    # Standard base64 with the same character substitutions
    payload = {"data": {"platform": "115"}, "expireTime": 32503680000000, "timestamp": 0}
    encoded = base64.b64encode(json.dumps(payload).encode()).decode()
    token = encoded.replace("+", "-").replace("/", "_").rstrip("=")

    assert session_codec.decode(token) == {"platform": "115"}


@pytest.mark.parametrize(
    "token",
    [
        None,
        "",
        "not-a-session-key",
        "!!!!",
        "é",
        base64.urlsafe_b64encode(b"[1, 2, 3]").decode(),
        base64.urlsafe_b64encode(b'{"data": {"platform": "115"}}').decode(),
        base64.urlsafe_b64encode(b'{"data": {}, "expireTime": "soon"}').decode(),
    ],
)
def test_invalid_tokens_decode_to_none(token):
    assert session_codec.decode(token) is None


def test_tampered_token_decodes_to_none():
    token = session_codec.encode({"platform": "quark", "token": "t"}, ttl=60)
    assert session_codec.decode(token[:-5] + "#####") is None
