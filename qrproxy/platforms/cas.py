# QR login through the UCWeb CAS service, shared by Quark and UC drive.

import logging
from typing import Any

from qrproxy.core.status import Status
from qrproxy.platforms.base import BasePlatform, QRCodeResult, StatusResult
from qrproxy.services.http_client import cookie_fragments, set_cookies

logger = logging.getLogger(__name__)

CAS_CONFIRMED = 2000000
CAS_EXPIRED = 50004002
CAS_VERSION = "1.2"


class CasPlatform(BasePlatform):
    client_id: str = ""
    token_url: str = ""
    ticket_url: str = ""
    account_info_url: str = ""
    qr_url_template: str = ""
    headers: dict = {}

    def new_request_id(self) -> Any:
        raise NotImplementedError

    def ticket_params(self, session: dict) -> dict:
        return {
            "client_id": self.client_id,
            "v": CAS_VERSION,
            "token": session.get("token"),
            "request_id": session.get("request_id"),
        }

    async def fetch_cloud_cookies(self, cookie: str) -> list[str]:
        """Final call of the cookie chain, returns its raw Set-Cookie values."""
        raise NotImplementedError

    async def generate_qrcode(self) -> QRCodeResult:
        request_id = self.new_request_id()
        response, body = await self.fetch_json(
            "GET",
            self.token_url,
            params={"client_id": self.client_id, "v": CAS_VERSION, "request_id": request_id},
            headers=self.headers,
        )
        try:
            token = body["data"]["members"]["token"]
        except (KeyError, TypeError) as e:
            raise self.fail(f"failed to generate QR code: missing {e}") from e

        session_key = self.create_session_key(
            token=token,
            request_id=request_id,
            cookies=set_cookies(response),
        )
        qr_url = self.qr_url_template.format(token=token, client_id=self.client_id)
        return QRCodeResult(qrcode=self.render_qrcode(qr_url), sessionKey=session_key)

    async def check_status(self, session_key: str) -> StatusResult:
        session = self.parse_session_key(session_key)
        if not session:
            return StatusResult(Status.EXPIRED)

        _, body = await self.fetch_json(
            "GET",
            self.ticket_url,
            params=self.ticket_params(session),
            headers=self.headers,
        )
        vendor_status = body.get("status") if isinstance(body, dict) else None

        if vendor_status == CAS_CONFIRMED:
            try:
                service_ticket = body["data"]["members"]["service_ticket"]
            except (KeyError, TypeError) as e:
                raise self.fail(f"failed to check status: missing {e}") from e
            cookie = await self.full_cookie(service_ticket, session.get("cookies"))
            return StatusResult(Status.CONFIRMED, cookie=cookie)

        if vendor_status == CAS_EXPIRED:
            return StatusResult(Status.EXPIRED)

        return StatusResult(Status.NEW)

    async def full_cookie(self, service_ticket: str, initial_cookies: list[str] | None) -> str:
        cookies = cookie_fragments(initial_cookies)

        response = await self.request(
            "GET",
            self.account_info_url,
            params={"st": service_ticket, "fr": "pc", "platform": "pc"},
            headers={**self.headers, "Cookie": "".join(cookies)},
        )
        cookies += cookie_fragments(set_cookies(response))

        cookies += cookie_fragments(await self.fetch_cloud_cookies("".join(cookies)))

        logger.info(f"[{self.name}] Cookie assembled from {len(cookies)} fragments")
        return "".join(cookies)
