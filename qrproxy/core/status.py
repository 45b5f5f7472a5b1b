from enum import Enum


class Status(str, Enum):
    """Normalised QR login state shared by every platform."""

    NEW = "NEW"
    SCANNED = "SCANNED"
    CONFIRMED = "CONFIRMED"
    CANCELED = "CANCELED"
    EXPIRED = "EXPIRED"
