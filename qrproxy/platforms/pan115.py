# 115 cloud drive: web QR token, polled via qrcodeapi, cookies from the
# android app login endpoint.

import logging
import time

from qrproxy.core.status import Status
from qrproxy.platforms.base import BasePlatform, QRCodeResult, StatusResult
from qrproxy.services.http_client import format_cookies, set_cookies

logger = logging.getLogger(__name__)

TOKEN_URL = "https://qrcodeapi.115.com/api/1.0/web/1.0/token"
STATUS_URL = "https://qrcodeapi.115.com/get/status/"
LOGIN_URL = "https://passportapi.115.com/app/1.0/android/1.0/login/qrcode"
REFERER = "https://115.com/"
LOGIN_APP = "android"

# data.status -> normalised status; 2 means signed in and is handled separately
STATUS_MAP = {
    0: Status.NEW,
    1: Status.SCANNED,
    -1: Status.EXPIRED,
    -2: Status.CANCELED,
}
SIGNED_IN = 2


class Platform115(BasePlatform):
    name = "115"

    async def generate_qrcode(self) -> QRCodeResult:
        _, body = await self.fetch_json("GET", TOKEN_URL, headers={"Referer": REFERER})
        try:
            qr_data = body["data"]
            session_key = self.create_session_key(
                uid=qr_data["uid"],
                time=qr_data["time"],
                sign=qr_data["sign"],
            )
            content = qr_data["qrcode"]
        except (KeyError, TypeError) as e:
            raise self.fail(f"failed to generate QR code: missing {e}") from e

        return QRCodeResult(qrcode=self.render_qrcode(content), sessionKey=session_key)

    async def check_status(self, session_key: str) -> StatusResult:
        session = self.parse_session_key(session_key)
        if not session:
            return StatusResult(Status.EXPIRED)

        uid = session.get("uid")
        _, body = await self.fetch_json(
            "GET",
            STATUS_URL,
            params={
                "_": int(time.time()),
                "sign": session.get("sign"),
                "time": session.get("time"),
                "uid": uid,
            },
            headers={"Referer": REFERER},
        )
        try:
            vendor_status = body["data"]["status"]
        except (KeyError, TypeError) as e:
            raise self.fail(f"failed to check status: missing {e}") from e

        if vendor_status == SIGNED_IN:
            cookie = await self.login_cookie(uid)
            return StatusResult(Status.CONFIRMED, cookie=cookie)

        if not isinstance(vendor_status, int):
            return StatusResult(Status.EXPIRED)
        return StatusResult(STATUS_MAP.get(vendor_status, Status.EXPIRED))

    async def login_cookie(self, uid: str) -> str:
        response, body = await self.fetch_json(
            "POST",
            LOGIN_URL,
            data={"account": uid, "app": LOGIN_APP},
            headers={"Referer": REFERER},
        )
        if not isinstance(body, dict) or body.get("state") != 1:
            message = body.get("message") if isinstance(body, dict) else body
            logger.warning(f"[115] Login rejected for uid={uid}: {message}")
            raise self.fail(f"login failed: {message}")
        return format_cookies(set_cookies(response))
