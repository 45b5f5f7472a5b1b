# Baidu netdisk: passport QR login. The QR image is served by Baidu itself;
# confirmation yields a BDUSS which is traded for STOKEN via the auth redirect.

import json
import logging
import re
import time
import uuid
from urllib.parse import quote

import httpx

from qrproxy.core.config import settings
from qrproxy.core.status import Status
from qrproxy.platforms.base import BasePlatform, PlatformError, QRCodeResult, StatusResult

logger = logging.getLogger(__name__)

GETQRCODE_URL = "https://passport.baidu.com/v2/api/getqrcode"
UNICAST_URL = "https://passport.baidu.com/channel/unicast"
BDUSS_LOGIN_URL = "https://passport.baidu.com/v3/login/main/qrbdusslogin"
AUTH_URL = "https://passport.baidu.com/v3/login/api/auth/"
PAN_HOME = "https://pan.baidu.com/disk/home"

TPL = "netdisk"
APIVER = "v3"
HEADERS = {"Referer": "https://pan.baidu.com/"}
CHANNEL_CANCELED = 2


def extract_value(text: str, key: str) -> str:
    match = re.search(rf'"{key}":\s*"(.*?)"', text, re.IGNORECASE)
    return match.group(1) if match else ""


def build_cookie_string(cookies: dict) -> str:
    return "; ".join(f"{k}={v}" for k, v in cookies.items())


def pick_set_cookie(set_cookies: list[str], name: str) -> str:
    needle = name.lower() + "="
    for c in set_cookies:
        if needle in c.lower():
            return c.split(";")[0]
    return ""


def redirect_accepted(status_code: int) -> bool:
    return status_code < 400


class BaiduPlatform(BasePlatform):
    name = "baidu"

    async def generate_qrcode(self) -> QRCodeResult:
        request_id = str(uuid.uuid4()).upper()
        t3 = str(int(time.time() * 1000))
        t1 = str(int(time.time()))

        _, body = await self.fetch_json(
            "GET",
            GETQRCODE_URL,
            params={
                "lp": "pc",
                "qrloginfrom": "pc",
                "gid": request_id,
                "apiver": APIVER,
                "tt": t3,
                "tpl": TPL,
                "logPage": f"traceId:pc_loginv5_{t1},logPage:loginv5",
                "_": t3,
            },
            headers=HEADERS,
        )
        data = (body.get("data") or body) if isinstance(body, dict) else None
        if not isinstance(data, dict) or not data.get("imgurl"):
            raise self.fail("failed to generate QR code: invalid response")

        session_key = self.create_session_key(
            t1=t1,
            t3=t3,
            channelId=data.get("sign"),
            requestId=request_id,
        )
        qrcode = await self.fetch_qrcode_image("https://" + data["imgurl"])
        return QRCodeResult(qrcode=qrcode, sessionKey=session_key)

    async def check_status(self, session_key: str) -> StatusResult:
        session = self.parse_session_key(session_key)
        if not session:
            return StatusResult(Status.EXPIRED)

        try:
            return await self.poll(session)
        except (PlatformError, httpx.HTTPError, ValueError, KeyError, TypeError) as e:
            # Keep the client polling; the session key TTL bounds the wait
            logger.warning(f"[baidu] Status check failed, reporting NEW: {e}")
            return StatusResult(Status.NEW)

    async def poll(self, session: dict) -> StatusResult:
        t3 = session["t3"]
        _, body = await self.fetch_json(
            "GET",
            UNICAST_URL,
            params={
                "channel_id": session["channelId"],
                "gid": session["requestId"],
                "tpl": TPL,
                "_sdkFrom": "1",
                "apiver": APIVER,
                "tt": t3,
                "_": t3,
            },
            headers=HEADERS,
        )
        data = (body.get("data") or body) if isinstance(body, dict) else None
        if not isinstance(data, dict):
            return StatusResult(Status.NEW)

        if data.get("channel_v"):
            channel = json.loads(data["channel_v"])
            if not isinstance(channel, dict):
                return StatusResult(Status.NEW)
            if channel.get("v"):
                cookie = await self.baidu_cookie(channel["v"], session["t1"], t3)
                return StatusResult(Status.CONFIRMED, cookie=cookie)
            if channel.get("status") == CHANNEL_CANCELED:
                return StatusResult(Status.CANCELED)
            return StatusResult(Status.SCANNED)

        if data.get("data"):
            return StatusResult(Status.EXPIRED)

        return StatusResult(Status.NEW)

    async def baidu_cookie(self, bduss: str, t1: str, t3: str) -> str:
        response = await self.request(
            "GET",
            BDUSS_LOGIN_URL,
            params={
                "v": t3,
                "bduss": bduss,
                "u": PAN_HOME,
                "loginVersion": "v4",
                "qrcode": "1",
                "tpl": TPL,
                "maskId": "",
                "fileId": "",
                "apiver": APIVER,
                "tt": t3,
                "traceid": "",
                "time": t1,
                "alg": "v3",
                "elapsed": "1",
            },
            headers=HEADERS,
            timeout=settings.HTTP_LONG_TIMEOUT_SECONDS,
        )
        text = response.text
        login_bduss = extract_value(text, "bduss")
        stoken = extract_value(text, "stoken")
        ptoken = extract_value(text, "ptoken")
        ubi = quote(extract_value(text, "ubi"), safe="!~*'()")

        # STOKEN and PTOKEN may only arrive as Set-Cookie after the redirect
        if not login_bduss:
            raise self.fail("failed to parse cookie data: missing BDUSS")

        cookies = {
            "newlogin": "1",
            "UBI": ubi,
            "STOKEN": stoken,
            "BDUSS": login_bduss,
            "PTOKEN": ptoken,
            "BDUSS_BFESS": login_bduss,
            "STOKEN_BFESS": stoken,
            "PTOKEN_BFESS": ptoken,
            "UBI_BFESS": ubi,
        }
        auth_headers = {
            **HEADERS,
            "Cookie": build_cookie_string(cookies),
            "Accept": "*/*",
        }

        auth_response = await self.request(
            "GET",
            AUTH_URL,
            params={"return_type": "5", "tpl": TPL, "u": PAN_HOME},
            headers=auth_headers,
            timeout=settings.HTTP_LONG_TIMEOUT_SECONDS,
            accept_status=redirect_accepted,
        )
        location = auth_response.headers.get("location")
        if location:
            final_response = await self.request(
                "GET",
                str(auth_response.url.join(location)),
                headers=auth_headers,
                timeout=settings.HTTP_LONG_TIMEOUT_SECONDS,
                accept_status=redirect_accepted,
            )
            set_cookies = final_response.headers.get_list("set-cookie")
            stoken_cookie = pick_set_cookie(set_cookies, "STOKEN_BFESS") or pick_set_cookie(
                set_cookies, "STOKEN"
            )
            if stoken_cookie:
                return f"BDUSS={login_bduss};{stoken_cookie};"

        fallback_stoken = f"STOKEN={stoken};" if stoken else ""
        return f"BDUSS={login_bduss};{fallback_stoken}"
