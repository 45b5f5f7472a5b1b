import time

from qrproxy.platforms.cas import CasPlatform
from qrproxy.services.http_client import set_cookies


class UCPlatform(CasPlatform):
    name = "uc"
    client_id = "381"
    token_url = "https://api.open.uc.cn/cas/ajax/getTokenForQrcodeLogin"
    ticket_url = "https://api.open.uc.cn/cas/ajax/getServiceTicketByQrcodeToken"
    account_info_url = "https://drive.uc.cn/account/info"
    cloud_api_url = "https://pc-api.uc.cn/1/clouddrive/config"
    qr_url_template = (
        "https://su.uc.cn/1_n0ZCv?token={token}&client_id={client_id}"
        "&uc_param_str=&uc_biz_str=S%3Acustom%7CC%3Atitlebar_fix"
    )
    headers = {"Referer": "https://drive.uc.cn/"}

    def new_request_id(self) -> int:
        return int(time.time() * 1000)

    def ticket_params(self, session: dict) -> dict:
        return {"__t": int(time.time() * 1000), **super().ticket_params(session)}

    async def fetch_cloud_cookies(self, cookie: str) -> list[str]:
        response = await self.request(
            "POST",
            self.cloud_api_url,
            params={"pr": "UCBrowser", "fr": "pc"},
            json={},
            headers={"Cookie": cookie},
        )
        return set_cookies(response)
