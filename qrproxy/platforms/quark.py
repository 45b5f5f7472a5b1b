import uuid

from qrproxy.platforms.cas import CasPlatform
from qrproxy.services.http_client import set_cookies


class QuarkPlatform(CasPlatform):
    name = "quark"
    client_id = "532"
    token_url = "https://uop.quark.cn/cas/ajax/getTokenForQrcodeLogin"
    ticket_url = "https://uop.quark.cn/cas/ajax/getServiceTicketByQrcodeToken"
    account_info_url = "https://pan.quark.cn/account/info"
    cloud_api_url = "https://drive-pc.quark.cn/1/clouddrive/config"
    qr_url_template = (
        "https://su.quark.cn/4_eMHBJ?token={token}&client_id={client_id}&ssb=weblogin"
        "&uc_param_str=&uc_biz_str=S%3Acustom%7COPT%3ASAREA%400%7COPT%3AIMMERSIVE%401"
        "%7COPT%3ABACK_BTN_STYLE%400"
    )

    def new_request_id(self) -> str:
        return str(uuid.uuid4())

    async def fetch_cloud_cookies(self, cookie: str) -> list[str]:
        response = await self.request(
            "GET",
            self.cloud_api_url,
            params={"pr": "ucpro", "fr": "pc", "uc_param_str": "", "aver": "1"},
            headers={"Cookie": cookie},
        )
        return set_cookies(response)
