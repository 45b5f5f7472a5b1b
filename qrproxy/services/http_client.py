# Outbound HTTP calls to vendor APIs with shared default headers and timeout.

import logging
from typing import Callable, Iterable

import httpx

from qrproxy.core.config import settings

logger = logging.getLogger(__name__)

COMMON_HEADERS = {
    "User-Agent": settings.USER_AGENT,
    "Accept": "application/json, text/plain, */*",
    "Accept-Language": "zh-CN,zh;q=0.9,en;q=0.8",
    "Cache-Control": "no-cache",
    "Pragma": "no-cache",
}


def _is_success(status_code: int) -> bool:
    return 200 <= status_code < 300


class HttpDispatcher:
    def __init__(self, transport: httpx.AsyncBaseTransport | None = None):
        # Tests swap in an httpx.MockTransport here
        self.transport = transport

    async def request(
        self,
        method: str,
        url: str,
        *,
        params: dict | None = None,
        data: dict | str | None = None,
        json: dict | None = None,
        headers: dict | None = None,
        timeout: float | None = None,
        accept_status: Callable[[int], bool] = _is_success,
    ) -> httpx.Response:
        """
        Sends one request and returns the response.

        Redirects are never followed. Raises httpx.HTTPStatusError when
        ``accept_status`` rejects the status code.
        """
        merged = {**COMMON_HEADERS, **(headers or {})}
        kwargs = {"params": params, "headers": merged}
        if isinstance(data, str):
            kwargs["content"] = data
        elif data is not None:
            kwargs["data"] = data
        if json is not None:
            kwargs["json"] = json

        async with httpx.AsyncClient(
            transport=self.transport,
            timeout=timeout or settings.HTTP_TIMEOUT_SECONDS,
            follow_redirects=False,
        ) as client:
            try:
                response = await client.request(method, url, **kwargs)
            except httpx.HTTPError as e:
                logger.error(f"HTTP request failed: {method} {url}: {e}")
                raise

        if not accept_status(response.status_code):
            logger.error(f"HTTP request failed: {method} {url}: status {response.status_code}")
            raise httpx.HTTPStatusError(
                f"unexpected status {response.status_code}",
                request=response.request,
                response=response,
            )
        return response


def set_cookies(response: httpx.Response) -> list[str]:
    return response.headers.get_list("set-cookie")


def cookie_fragments(cookies: Iterable[str] | None) -> list[str]:
    """Reduces raw Set-Cookie values to their ``name=value;`` part."""
    if not cookies:
        return []
    return [c.split(";")[0] + ";" for c in cookies]


def format_cookies(cookies: Iterable[str] | str | None) -> str:
    if not cookies:
        return ""
    if isinstance(cookies, str):
        return cookies
    return "".join(cookie_fragments(cookies))


dispatcher = HttpDispatcher()
