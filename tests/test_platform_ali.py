import base64
import json
from urllib.parse import parse_qs

import pytest

from qrproxy.core import session_codec

GENERATE_URL = "https://passport.aliyundrive.com/newlogin/qrcode/generate.do"
QUERY_URL = "https://passport.aliyundrive.com/newlogin/qrcode/query.do"


def check(client):
    key = session_codec.encode({"platform": "ali", "ck": "ck-1", "t": 1700000000000})
    return client.post("/api/check-status", json={"platform": "ali", "sessionKey": key})


def query_response(data):
    return {"content": {"data": data, "status": 0, "success": True}, "hasError": False}


def biz_ext(payload):
    return base64.b64encode(json.dumps(payload).encode()).decode()


def test_generate_qrcode(client, vendor):
    vendor.on(
        "GET",
        GENERATE_URL,
        json=query_response({"t": 1700000000000, "ck": "ck-1", "codeContent": "https://passport.aliyundrive.com/qrcodeCheck.htm?lgToken=x"}),
    )

    body = client.post("/api/qrcode", json={"platform": "ali"}).json()
    assert body["success"] is True
    assert body["data"]["qrcode"].startswith("data:image/png;base64,")
    assert session_codec.decode(body["data"]["sessionKey"]) == {"platform": "ali", "ck": "ck-1", "t": 1700000000000}
    assert vendor.calls[0].url.params["appName"] == "aliyun_drive"


@pytest.mark.parametrize(
    "qr_status, expected",
    [
        ("NEW", "NEW"),
        ("SCANED", "SCANNED"),
        ("CANCELED", "CANCELED"),
        ("EXPIRED", "EXPIRED"),
        ("SOMETHING_ELSE", "EXPIRED"),
        (["NEW"], "EXPIRED"),
    ],
)
def test_status_mapping(client, vendor, qr_status, expected):
    vendor.on("POST", QUERY_URL, json=query_response({"qrCodeStatus": qr_status}))

    body = check(client).json()
    assert body["success"] is True
    assert body["data"] == {"status": expected}

    form = parse_qs(vendor.calls[0].content.decode())
    assert form["ck"] == ["ck-1"]
    assert form["t"] == ["1700000000000"]


def test_missing_content_is_expired(client, vendor):
    vendor.on("POST", QUERY_URL, json={"content": None, "hasError": True})

    body = check(client).json()
    assert body["data"] == {"status": "EXPIRED"}


def test_confirmed_returns_refresh_token(client, vendor):
    ext = biz_ext({"pds_login_result": {"refreshToken": "refresh-abc", "accessToken": "access-xyz"}})
    vendor.on("POST", QUERY_URL, json=query_response({"qrCodeStatus": "CONFIRMED", "bizExt": ext}))

    body = check(client).json()
    assert body["success"] is True
    assert body["data"] == {"status": "CONFIRMED", "token": "refresh-abc", "refresh_token": "refresh-abc"}


@pytest.mark.parametrize("ext", [None, "", "%%%not-base64%%%", biz_ext({"unexpected": True}), biz_ext([1, 2])])
def test_confirmed_without_usable_biz_ext_is_expired(client, vendor, ext):
    vendor.on("POST", QUERY_URL, json=query_response({"qrCodeStatus": "CONFIRMED", "bizExt": ext}))

    body = check(client).json()
    assert body["success"] is True
    assert body["data"] == {"status": "EXPIRED"}
