# QR login proxy routes: QR code generation and status polling for every
# supported cloud-drive platform.

import logging

from fastapi import APIRouter, HTTPException, Response
from pydantic import BaseModel

from qrproxy.core.responses import error_response, success_response
from qrproxy.platforms.base import BasePlatform, PlatformError
from qrproxy.platforms.registry import registry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["qrcode"])


class QRCodeReq(BaseModel):
    platform: str | None = None


class CheckStatusReq(BaseModel):
    platform: str | None = None
    sessionKey: str | None = None


def resolve_platform(name: str | None) -> BasePlatform:
    if not name:
        logger.warning("Rejected request: missing platform")
        raise HTTPException(status_code=400, detail="missing platform parameter")

    platform = registry.get(name)
    if not platform:
        logger.warning(f"Rejected request: unsupported platform {name}")
        raise HTTPException(status_code=400, detail=f"unsupported platform: {name}")
    return platform


@router.get("/platforms")
def list_platforms():
    return success_response({"platforms": registry.names()})


@router.post("/qrcode")
async def create_qrcode(req: QRCodeReq):
    platform = resolve_platform(req.platform)
    logger.info(f"QR code requested: platform={platform.name}")

    try:
        result = await platform.generate_qrcode()
    except PlatformError as e:
        return error_response(str(e))

    logger.info(f"QR code issued: platform={platform.name}")
    return success_response(result.to_dict())


@router.post("/check-status")
async def check_status(req: CheckStatusReq):
    platform = resolve_platform(req.platform)
    logger.info(f"Status check: platform={platform.name}, sessionKey length={len(req.sessionKey or '')}")

    try:
        result = await platform.check_status(req.sessionKey)
    except PlatformError as e:
        return error_response(str(e))

    logger.info(f"Status checked: platform={platform.name}, status={result.status.value}")
    return success_response(result.to_dict())


@router.options("/qrcode")
@router.options("/check-status")
def preflight():
    return Response(status_code=200)
