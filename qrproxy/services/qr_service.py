import base64
import io

import qrcode

from qrproxy.core.config import settings


class QRService:
    @staticmethod
    def to_data_uri(image_bytes: bytes, mime: str = "image/png") -> str:
        return f"data:{mime};base64,{base64.b64encode(image_bytes).decode()}"

    @staticmethod
    def create_qr_image(content: str) -> str:
        """
        Renders ``content`` as a QR code and returns it as a PNG data URI
        """
        qr = qrcode.QRCode(
            version=None,
            error_correction=qrcode.constants.ERROR_CORRECT_M,
            box_size=settings.QR_BOX_SIZE,
            border=settings.QR_BORDER,
        )
        qr.add_data(content)
        qr.make(fit=True)

        img = qr.make_image(fill_color="black", back_color="white")

        buffered = io.BytesIO()
        img.save(buffered, format="PNG")
        return QRService.to_data_uri(buffered.getvalue())
