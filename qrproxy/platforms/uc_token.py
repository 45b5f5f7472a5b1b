# UC drive TV client: OAuth device flow against the open platform API.
# Yields an access/refresh token pair instead of a cookie.

import hashlib
import logging
import time

import httpx

from qrproxy.core.config import settings
from qrproxy.core.status import Status
from qrproxy.platforms.base import BasePlatform, QRCodeResult, StatusResult

logger = logging.getLogger(__name__)

API_BASE = "https://open-api-drive.uc.cn"
AUTHORIZE_PATH = "/oauth/authorize"
CODE_PATH = "/oauth/code"

ERRNO_EXPIRED = 11002
ERRNO_WAITING = 11003

DEVICE_INFO = {
    "device_brand": "Xiaomi",
    "platform": "tv",
    "device_name": "M2004J7AC",
    "device_model": "M2004J7AC",
    "build_device": "M2004J7AC",
    "build_product": "M2004J7AC",
    "device_gpu": "Adreno (TM) 550",
    "activity_rect": "{}",
}


def timestamp_ms() -> str:
    # Seconds precision, rendered in milliseconds
    return f"{int(time.time())}000"


def md5_hex(value: str) -> str:
    return hashlib.md5(value.encode("utf-8")).hexdigest()


def device_id_for(timestamp: str) -> str:
    return md5_hex(timestamp)[:16]


def req_id_for(device_id: str, timestamp: str) -> str:
    return md5_hex(device_id + timestamp)[:16]


def x_pan_token(method: str, pathname: str, timestamp: str, key: str) -> str:
    data = f"{method}&{pathname}&{timestamp}&{key}"
    return hashlib.sha256(data.encode("utf-8")).hexdigest()


class UCTokenPlatform(BasePlatform):
    name = "uc_token"

    def device_params(self, device_id: str, timestamp: str) -> dict:
        return {
            "req_id": req_id_for(device_id, timestamp),
            "app_ver": settings.UC_TV_APP_VER,
            "device_id": device_id,
            **DEVICE_INFO,
            "channel": settings.UC_TV_CHANNEL,
        }

    def signed_headers(self, method: str, pathname: str, timestamp: str) -> dict:
        return {
            "x-pan-tm": timestamp,
            "x-pan-token": x_pan_token(method, pathname, timestamp, settings.UC_TV_SIGN_KEY),
            "x-pan-client-id": settings.UC_TV_CLIENT_ID,
        }

    async def generate_qrcode(self) -> QRCodeResult:
        timestamp = timestamp_ms()
        device_id = settings.UC_TV_DEVICE_ID or device_id_for(timestamp)

        _, body = await self.fetch_json(
            "GET",
            API_BASE + AUTHORIZE_PATH,
            params={
                **self.device_params(device_id, timestamp),
                "access_token": "",
                "auth_type": "code",
                "client_id": settings.UC_TV_CLIENT_ID,
                "scope": "netdisk",
                "qrcode": "1",
                "qr_width": "460",
                "qr_height": "460",
            },
            headers=self.signed_headers("GET", AUTHORIZE_PATH, timestamp),
        )
        if not isinstance(body, dict) or body.get("status") != 0:
            message = body.get("message") if isinstance(body, dict) else None
            raise self.fail(f"failed to generate QR code: {message or 'unknown error'}")

        query_token = body.get("query_token")
        qr_data = body.get("qr_data")
        if not query_token or not qr_data:
            raise self.fail("failed to generate QR code: incomplete response")

        session_key = self.create_session_key(
            query_token=query_token,
            device_id=device_id,
            timestamp=timestamp,
        )
        return QRCodeResult(qrcode=f"data:image/png;base64,{qr_data}", sessionKey=session_key)

    async def check_status(self, session_key: str) -> StatusResult:
        session = self.parse_session_key(session_key)
        if not session:
            return StatusResult(Status.EXPIRED)

        device_id = session.get("device_id")
        status, code = await self.check_code(session.get("query_token"), device_id)
        if status != Status.CONFIRMED:
            return StatusResult(status)

        return await self.access_token(code, device_id)

    async def check_code(self, query_token: str, device_id: str) -> tuple[Status, str | None]:
        """
        Polls for the authorization code. The endpoint answers 400 while
        waiting, so every status code is accepted and any failure reads as NEW.
        """
        timestamp = timestamp_ms()
        try:
            response = await self.http.request(
                "GET",
                API_BASE + CODE_PATH,
                params={
                    **self.device_params(device_id, timestamp),
                    "access_token": "",
                    "client_id": settings.UC_TV_CLIENT_ID,
                    "scope": "netdisk",
                    "query_token": query_token,
                },
                headers=self.signed_headers("GET", CODE_PATH, timestamp),
                accept_status=lambda _: True,
            )
            body = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"[uc_token] Code check failed, reporting NEW: {e}")
            return Status.NEW, None

        if not isinstance(body, dict):
            return Status.NEW, None
        if response.status_code == 200 and body.get("status") == 0 and body.get("code"):
            return Status.CONFIRMED, body["code"]
        if response.status_code == 400:
            if body.get("errno") == ERRNO_EXPIRED:
                return Status.EXPIRED, None
            if body.get("errno") == ERRNO_WAITING:
                return Status.NEW, None
        return Status.NEW, None

    async def access_token(self, code: str, device_id: str) -> StatusResult:
        timestamp = timestamp_ms()
        _, body = await self.fetch_json(
            "POST",
            settings.UC_TV_TOKEN_URL,
            json={**self.device_params(device_id, timestamp), "code": code},
            headers={"Content-Type": "application/json"},
        )
        if not isinstance(body, dict):
            raise self.fail("failed to obtain access_token: unknown error")
        data = body.get("data")
        if body.get("code") != 200 or not isinstance(data, dict) or not data.get("access_token"):
            message = body.get("message")
            raise self.fail(f"failed to obtain access_token: {message or 'unknown error'}")

        return StatusResult(
            Status.CONFIRMED,
            token=data["access_token"],
            refresh_token=data.get("refresh_token"),
            expires_in=data.get("expires_in"),
        )
