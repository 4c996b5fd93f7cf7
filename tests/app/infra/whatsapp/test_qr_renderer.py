"""Testes da renderização do QR de pareamento."""

from __future__ import annotations

import base64
import io

from PIL import Image

from app.infra.whatsapp import render_qr_ascii, render_qr_data_url, render_qr_png
from app.infra.whatsapp.qr_renderer import DATA_URL_PREFIX, QR_IMAGE_WIDTH

PAIRING_CODE = "2@Ab12Cd34Ef56,Gh78Ij90Kl12Mn34Op56Qr78St90=,Uv12Wx34Yz56=,Ab12Cd34="


def test_png_has_configured_width() -> None:
    png = render_qr_png(PAIRING_CODE)

    image = Image.open(io.BytesIO(png))
    assert image.format == "PNG"
    assert image.size == (QR_IMAGE_WIDTH, QR_IMAGE_WIDTH)


def test_data_url_wraps_png() -> None:
    data_url = render_qr_data_url(PAIRING_CODE)

    assert data_url is not None
    assert data_url.startswith(DATA_URL_PREFIX)
    png = base64.b64decode(data_url.removeprefix(DATA_URL_PREFIX))
    assert png.startswith(b"\x89PNG")


def test_render_failure_returns_none() -> None:
    # Acima da capacidade máxima de um QR com correção H
    assert render_qr_data_url("x" * 5000) is None


def test_ascii_rendering() -> None:
    art = render_qr_ascii(PAIRING_CODE)
    assert len(art.splitlines()) > 10
