"""Agregador de settings do gateway.

Re-exporta todas as settings e funções de cada módulo.
Organização por domínio para isolamento de mudanças.
"""

from __future__ import annotations

# Base settings
from config.settings.base import (
    BaseSettings,
    Environment,
    SessionSettings,
    SessionStoreBackend,
    get_base_settings,
    get_session_settings,
)

# Channel-specific settings
from config.settings.whatsapp import (
    CONTACT_ADDRESS_SUFFIX,
    DEFAULT_RESTART_CEILING,
    WhatsAppSettings,
    get_whatsapp_settings,
)

__all__ = [
    # Constants
    "CONTACT_ADDRESS_SUFFIX",
    "DEFAULT_RESTART_CEILING",
    # Base
    "BaseSettings",
    "Environment",
    "SessionSettings",
    "SessionStoreBackend",
    # Channels
    "WhatsAppSettings",
    "get_base_settings",
    "get_session_settings",
    "get_whatsapp_settings",
]
