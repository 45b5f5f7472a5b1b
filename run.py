import argparse
import socket

import uvicorn

from qrproxy.core.config import settings


def get_lan_ip():
    try:
        # Connect to a public DNS server to determine the route
        s = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        s.connect(("8.8.8.8", 80))
        ip = s.getsockname()[0]
        s.close()
        return ip
    except OSError:
        return "127.0.0.1"


def parse_args():
    parser = argparse.ArgumentParser(description=settings.APP_NAME)
    parser.add_argument("--host", default=settings.HOST)
    parser.add_argument("--port", type=int, default=settings.PORT)
    parser.add_argument("--reload", action="store_true", help="reload on code changes (dev only)")
    return parser.parse_args()


def main():
    args = parse_args()

    print("\n" + "=" * 60)
    print(f"🚀 {settings.APP_NAME}")
    print(f"📡 LAN URL:  http://{get_lan_ip()}:{args.port}")
    print(f"🏠 Local:    http://127.0.0.1:{args.port}")
    print("=" * 60 + "\n")

    uvicorn.run(
        "qrproxy.main:app",
        host=args.host,
        port=args.port,
        log_level=settings.LOG_LEVEL.lower(),
        reload=args.reload,
    )


if __name__ == "__main__":
    main()
