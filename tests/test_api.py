from qrproxy.core import session_codec
from qrproxy.platforms.registry import registry


def assert_envelope(body, success):
    assert body["success"] is success
    assert isinstance(body["timestamp"], int)
    assert "message" in body
    assert "data" in body


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"ok": True}


def test_list_platforms(client):
    resp = client.get("/api/platforms")
    assert resp.status_code == 200
    assert set(resp.json()["data"]["platforms"]) == {"115", "quark", "ali", "uc", "uc_token", "baidu"}


def test_unknown_platform_is_rejected(client, vendor):
    resp = client.post("/api/qrcode", json={"platform": "dropbox"})
    assert resp.status_code == 400
    body = resp.json()
    assert_envelope(body, False)
    assert "dropbox" in body["message"]
    assert vendor.calls == []


def test_missing_platform_is_rejected(client):
    resp = client.post("/api/qrcode", json={})
    assert resp.status_code == 400
    assert_envelope(resp.json(), False)

    resp = client.post("/api/check-status", json={"sessionKey": "abc"})
    assert resp.status_code == 400
    assert resp.json()["message"] == "missing platform parameter"


def test_malformed_body_is_rejected(client):
    resp = client.post("/api/qrcode", content="not json", headers={"Content-Type": "application/json"})
    assert resp.status_code == 400
    assert_envelope(resp.json(), False)


def test_wrong_method(client):
    resp = client.get("/api/qrcode")
    assert resp.status_code == 405
    body = resp.json()
    assert_envelope(body, False)
    assert body["message"] == "Method not allowed"


def test_options_short_circuits(client):
    resp = client.options("/api/check-status")
    assert resp.status_code == 200


def test_cors_preflight(client):
    resp = client.options(
        "/api/qrcode",
        headers={
            "Origin": "https://example.com",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Content-Type",
        },
    )
    assert resp.status_code == 200
    assert resp.headers["access-control-allow-origin"] in ("*", "https://example.com")


def test_tampered_session_key_is_expired(client, vendor):
    key = session_codec.encode({"platform": "quark", "token": "t", "request_id": "r"})
    resp = client.post("/api/check-status", json={"platform": "quark", "sessionKey": key[:10] + "xx" + key[12:]})
    assert resp.status_code == 200
    body = resp.json()
    assert_envelope(body, True)
    assert body["data"] == {"status": "EXPIRED"}
    assert vendor.calls == []


def test_missing_session_key_is_expired(client, vendor):
    resp = client.post("/api/check-status", json={"platform": "ali"})
    assert resp.status_code == 200
    assert resp.json()["data"] == {"status": "EXPIRED"}


def test_expired_session_key(client, vendor, monkeypatch):
    monkeypatch.setattr(session_codec, "_now_ms", lambda: 1_000)
    key = session_codec.encode({"platform": "115", "uid": "u", "time": 1, "sign": "s"})
    monkeypatch.setattr(session_codec, "_now_ms", lambda: 1_000 + 301_000)

    resp = client.post("/api/check-status", json={"platform": "115", "sessionKey": key})
    assert resp.json()["data"] == {"status": "EXPIRED"}
    assert vendor.calls == []


def test_session_key_is_bound_to_its_platform(client, vendor):
    key = session_codec.encode({"platform": "quark", "token": "t", "request_id": "r"})

    for other in ("uc", "115", "ali", "uc_token", "baidu"):
        resp = client.post("/api/check-status", json={"platform": other, "sessionKey": key})
        assert resp.status_code == 200
        assert resp.json()["data"] == {"status": "EXPIRED"}

    assert vendor.calls == []


def test_vendor_failure_is_a_business_error(client, vendor):
    # No routes registered: every vendor call answers 404
    resp = client.post("/api/qrcode", json={"platform": "quark"})
    assert resp.status_code == 200
    body = resp.json()
    assert_envelope(body, False)
    assert body["message"].startswith("quark:")


def test_unexpected_error_is_500(client, monkeypatch):
    async def boom():
        raise RuntimeError("kaboom")

    monkeypatch.setattr(registry.get("ali"), "generate_qrcode", boom)

    resp = client.post("/api/qrcode", json={"platform": "ali"})
    assert resp.status_code == 500
    body = resp.json()
    assert_envelope(body, False)
    assert "kaboom" in body["message"]
