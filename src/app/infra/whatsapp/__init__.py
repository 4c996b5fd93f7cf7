"""Adaptadores do canal WhatsApp Web: QR, telefone e transport em memória."""

from app.infra.whatsapp.memory_transport import MemoryTransportClient, create_memory_transport
from app.infra.whatsapp.phone_normalizer import LibPhoneNumberNormalizer
from app.infra.whatsapp.qr_renderer import (
    render_qr_ascii,
    render_qr_data_url,
    render_qr_png,
)
from app.infra.whatsapp.transport_loader import load_transport_factory

__all__ = [
    "LibPhoneNumberNormalizer",
    "MemoryTransportClient",
    "create_memory_transport",
    "load_transport_factory",
    "render_qr_ascii",
    "render_qr_data_url",
    "render_qr_png",
]
