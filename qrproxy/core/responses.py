# Normalised JSON envelope returned by every API endpoint.

import logging
import time
from typing import Any, Optional

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class Envelope(BaseModel):
    success: bool
    data: Optional[Any] = None
    message: str = ""
    timestamp: int


def create_response(success: bool, data: Any = None, message: str = "") -> dict:
    return Envelope(
        success=success,
        data=data,
        message=message,
        timestamp=int(time.time() * 1000),
    ).model_dump()


def success_response(data: Any = None, message: str = "") -> dict:
    return create_response(True, data, message)


def error_response(message: str) -> dict:
    logger.error(f"API error: {message}")
    return create_response(False, None, message)
