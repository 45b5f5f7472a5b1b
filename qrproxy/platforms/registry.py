from qrproxy.platforms.ali import AliPlatform
from qrproxy.platforms.baidu import BaiduPlatform
from qrproxy.platforms.base import BasePlatform
from qrproxy.platforms.pan115 import Platform115
from qrproxy.platforms.quark import QuarkPlatform
from qrproxy.platforms.uc import UCPlatform
from qrproxy.platforms.uc_token import UCTokenPlatform
from qrproxy.services.http_client import HttpDispatcher, dispatcher

PLATFORM_CLASSES = (
    Platform115,
    QuarkPlatform,
    AliPlatform,
    UCPlatform,
    UCTokenPlatform,
    BaiduPlatform,
)


class PlatformRegistry:
    def __init__(self, http: HttpDispatcher):
        self._platforms: dict[str, BasePlatform] = {cls.name: cls(http) for cls in PLATFORM_CLASSES}

    def get(self, name: str | None) -> BasePlatform | None:
        if not name:
            return None
        return self._platforms.get(name)

    def names(self) -> list[str]:
        return list(self._platforms)


registry = PlatformRegistry(dispatcher)
