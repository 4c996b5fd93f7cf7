"""Normalização de números de destino com phonenumbers (libphonenumber)."""

from __future__ import annotations

import logging

import phonenumbers
from phonenumbers import NumberParseException, PhoneNumberFormat

from app.protocols.normalizer import PhoneNormalizerProtocol
from config.logging import mask_phone

logger = logging.getLogger(__name__)


class LibPhoneNumberNormalizer(PhoneNormalizerProtocol):
    """Converte entrada livre em E.164 sem '+'.

    Números sem DDI são interpretados na região padrão. O prefixo '='
    (exportação de planilhas) é descartado.

    Exemplo:
        >>> LibPhoneNumberNormalizer("PK").normalize("0300 1234567")
        '923001234567'
    """

    __slots__ = ("_default_region",)

    def __init__(self, default_region: str = "PK") -> None:
        self._default_region = default_region.upper()

    @property
    def default_region(self) -> str:
        return self._default_region

    def normalize(self, raw_phone: str) -> str | None:
        value = str(raw_phone or "").strip()
        if value.startswith("="):
            value = value[1:].strip()
        if not value:
            return None

        try:
            parsed = phonenumbers.parse(value, self._default_region)
        except NumberParseException as exc:
            logger.debug(
                "phone_parse_failed",
                extra={"error_type": exc.error_type, "region": self._default_region},
            )
            return None

        if not phonenumbers.is_valid_number(parsed):
            logger.debug("phone_invalid", extra={"phone": mask_phone(value)})
            return None

        e164 = phonenumbers.format_number(parsed, PhoneNumberFormat.E164)
        return e164.removeprefix("+")
