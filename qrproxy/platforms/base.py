# Common behaviour for cloud-drive QR login adapters.

import logging
from dataclasses import asdict, dataclass
from typing import Any

import httpx

from qrproxy.core import session_codec
from qrproxy.core.status import Status
from qrproxy.services.http_client import HttpDispatcher
from qrproxy.services.qr_service import QRService

logger = logging.getLogger(__name__)


class PlatformError(Exception):
    """A vendor call failed in a way the client should be told about."""

    def __init__(self, platform: str, message: str):
        super().__init__(f"{platform}: {message}")
        self.platform = platform
        self.message = message


@dataclass
class QRCodeResult:
    qrcode: str
    sessionKey: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class StatusResult:
    status: Status
    cookie: str | None = None
    token: str | None = None
    refresh_token: str | None = None
    expires_in: int | None = None

    def to_dict(self) -> dict:
        data = {k: v for k, v in asdict(self).items() if v is not None}
        data["status"] = self.status.value
        return data


class BasePlatform:
    name: str = ""

    def __init__(self, http: HttpDispatcher):
        self.http = http

    async def generate_qrcode(self) -> QRCodeResult:
        raise NotImplementedError(f"generate_qrcode must be implemented by {self.name}")

    async def check_status(self, session_key: str) -> StatusResult:
        raise NotImplementedError(f"check_status must be implemented by {self.name}")

    def create_session_key(self, **fields: Any) -> str:
        return session_codec.encode({"platform": self.name, **fields})

    def parse_session_key(self, session_key: str | None) -> dict | None:
        """
        Decodes a session key issued by this platform. Keys that are expired,
        malformed or were issued for another platform yield None.
        """
        data = session_codec.decode(session_key)
        if not isinstance(data, dict) or data.get("platform") != self.name:
            return None
        return data

    def fail(self, message: str) -> PlatformError:
        return PlatformError(self.name, message)

    async def request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            return await self.http.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"[{self.name}] HTTP request failed: {e}")
            raise self.fail(f"request failed: {e}") from e

    async def fetch_json(self, method: str, url: str, **kwargs: Any) -> tuple[httpx.Response, Any]:
        response = await self.request(method, url, **kwargs)
        try:
            return response, response.json()
        except ValueError as e:
            raise self.fail(f"invalid JSON from {url}") from e

    def render_qrcode(self, content: str) -> str:
        return QRService.create_qr_image(content)

    async def fetch_qrcode_image(self, url: str) -> str:
        response = await self.request("GET", url)
        mime = response.headers.get("content-type", "image/png").split(";")[0].strip()
        if not mime.startswith("image/"):
            mime = "image/png"
        return QRService.to_data_uri(response.content, mime)
