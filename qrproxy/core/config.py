# Centralised application configuration
# (environment variables, constants, timeouts).

import os


class Settings:
    APP_NAME = os.getenv("APP_NAME", "Cloud Drive QR Login Proxy")
    HOST = os.getenv("HOST", "0.0.0.0")
    PORT = int(os.getenv("PORT", "3000"))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    SESSION_TTL_SECONDS = int(os.getenv("SESSION_TTL_SECONDS", "300"))  # 5 Minutes

    HTTP_TIMEOUT_SECONDS = float(os.getenv("HTTP_TIMEOUT_SECONDS", "15"))
    HTTP_LONG_TIMEOUT_SECONDS = float(os.getenv("HTTP_LONG_TIMEOUT_SECONDS", "30"))
    USER_AGENT = os.getenv(
        "USER_AGENT",
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    )

    CORS_ALLOW_ORIGINS = [
        o.strip() for o in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",") if o.strip()
    ]

    QR_BOX_SIZE = int(os.getenv("QR_BOX_SIZE", "6"))
    QR_BORDER = int(os.getenv("QR_BORDER", "1"))

    # UC TV open platform
    UC_TV_CLIENT_ID = os.getenv("UC_TV_CLIENT_ID", "5acf882d27b74502b7040b0c65519aa7")
    UC_TV_SIGN_KEY = os.getenv("UC_TV_SIGN_KEY", "l3srvtd7p42l0d0x1u8d7yc8ye9kki4d")
    UC_TV_APP_VER = os.getenv("UC_TV_APP_VER", "1.6.8")
    UC_TV_CHANNEL = os.getenv("UC_TV_CHANNEL", "UCTVOFFICIALWEB")
    UC_TV_DEVICE_ID = os.getenv("UC_TV_DEVICE_ID", "")
    UC_TV_TOKEN_URL = os.getenv("UC_TV_TOKEN_URL", "http://api.extscreen.com/ucdrive/token")


settings = Settings()
