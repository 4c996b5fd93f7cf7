"""Renderização do código de pareamento em QR (PNG data URL / ASCII)."""

from __future__ import annotations

import base64
import io
import logging

import qrcode
from PIL import Image
from qrcode.exceptions import DataOverflowError

logger = logging.getLogger(__name__)

QR_IMAGE_WIDTH = 400
QR_BORDER = 1
DATA_URL_PREFIX = "data:image/png;base64,"


def _build_qr(raw_code: str) -> qrcode.QRCode:
    qr = qrcode.QRCode(
        error_correction=qrcode.constants.ERROR_CORRECT_H,
        box_size=10,
        border=QR_BORDER,
    )
    qr.add_data(raw_code)
    qr.make(fit=True)
    return qr


def render_qr_png(raw_code: str, *, width: int = QR_IMAGE_WIDTH) -> bytes:
    """Renderiza o código como PNG quadrado de `width` pixels."""
    qr = _build_qr(raw_code)
    img = qr.make_image(fill_color="#000000", back_color="#FFFFFF").convert("RGB")
    if img.size[0] != width:
        img = img.resize((width, width), Image.Resampling.NEAREST)
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def render_qr_data_url(raw_code: str) -> str | None:
    """Renderiza o código como data URL PNG.

    Falhas de renderização são logadas e retornam None; o handler de
    pareamento segue publicando o evento sem imagem.
    """
    try:
        png = render_qr_png(raw_code)
    except (ValueError, OSError, DataOverflowError) as exc:
        logger.warning(
            "qr_render_failed",
            extra={"error_type": type(exc).__name__},
        )
        return None
    return DATA_URL_PREFIX + base64.b64encode(png).decode("ascii")


def render_qr_ascii(raw_code: str) -> str:
    """Renderiza o código em ASCII para terminais headless."""
    out = io.StringIO()
    _build_qr(raw_code).print_ascii(out=out)
    return out.getvalue()
