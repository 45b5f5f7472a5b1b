# Alibaba Cloud Drive: passport newlogin QR flow. On confirmation the
# refresh token is carried in ``bizExt``, a base64 encoded JSON document.

import base64
import binascii
import json
import logging

from qrproxy.core.status import Status
from qrproxy.platforms.base import BasePlatform, QRCodeResult, StatusResult

logger = logging.getLogger(__name__)

GENERATE_URL = "https://passport.aliyundrive.com/newlogin/qrcode/generate.do"
QUERY_URL = "https://passport.aliyundrive.com/newlogin/qrcode/query.do"

BASE_PARAMS = {
    "appName": "aliyun_drive",
    "fromSite": "52",
    "_bx_v": "2.2.3",
}
FORM_PARAMS = {
    "appName": "aliyun_drive",
    "appEntrance": "web",
    "isMobile": "false",
    "lang": "zh_CN",
    "returnUrl": "",
    "bizParams": "",
}

STATUS_MAP = {
    "NEW": Status.NEW,
    "SCANED": Status.SCANNED,
    "CANCELED": Status.CANCELED,
}


def parse_biz_ext(biz_ext: str) -> dict:
    raw = base64.b64decode(biz_ext + "=" * (-len(biz_ext) % 4))
    return json.loads(raw.decode("utf-8"))


class AliPlatform(BasePlatform):
    name = "ali"

    async def generate_qrcode(self) -> QRCodeResult:
        _, body = await self.fetch_json(
            "GET",
            GENERATE_URL,
            params={**BASE_PARAMS, **FORM_PARAMS},
        )
        try:
            content = body["content"]["data"]
            session_key = self.create_session_key(ck=content["ck"], t=content["t"])
            code_content = content["codeContent"]
        except (KeyError, TypeError) as e:
            raise self.fail(f"failed to generate QR code: missing {e}") from e

        return QRCodeResult(qrcode=self.render_qrcode(code_content), sessionKey=session_key)

    async def check_status(self, session_key: str) -> StatusResult:
        session = self.parse_session_key(session_key)
        if not session:
            return StatusResult(Status.EXPIRED)

        _, body = await self.fetch_json(
            "POST",
            QUERY_URL,
            params=BASE_PARAMS,
            data={
                "ck": session.get("ck"),
                "t": session.get("t"),
                **FORM_PARAMS,
                "navlanguage": "zh-CN",
            },
        )
        content = (body.get("content") or {}) if isinstance(body, dict) else {}
        data = content.get("data") if isinstance(content, dict) else None
        if not isinstance(data, dict):
            return StatusResult(Status.EXPIRED)

        qr_status = data.get("qrCodeStatus")
        if qr_status == "CONFIRMED":
            return self.confirmed(data.get("bizExt"))

        if not isinstance(qr_status, str):
            return StatusResult(Status.EXPIRED)
        return StatusResult(STATUS_MAP.get(qr_status, Status.EXPIRED))

    def confirmed(self, biz_ext: str | None) -> StatusResult:
        if not biz_ext:
            return StatusResult(Status.EXPIRED)
        try:
            token = parse_biz_ext(biz_ext)["pds_login_result"]["refreshToken"]
        except (binascii.Error, UnicodeDecodeError, ValueError, KeyError, TypeError) as e:
            logger.error(f"[ali] Failed to parse bizExt: {type(e).__name__}")
            return StatusResult(Status.EXPIRED)
        return StatusResult(Status.CONFIRMED, token=token, refresh_token=token)
