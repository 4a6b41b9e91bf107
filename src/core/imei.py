from __future__ import annotations

from .cursor import ByteCursor
from .errors import InvalidImei, InvalidPreamble
from .models import ImeiPreamble

IMEI_LENGTH = 15
IMEI_PREFIX = IMEI_LENGTH.to_bytes(2, "big")    # 00 0F, единственное допустимое значение


def decode_imei(data: bytes | bytearray | memoryview) -> ImeiPreamble:
    """Преамбула идентификации устройства, приходит один раз на соединение.

    Возвращает IMEI и непрочитанный остаток буфера.
    """
    cursor = ByteCursor(data)

    prefix = cursor.take_exact(len(IMEI_PREFIX), "imei.length")
    if prefix != IMEI_PREFIX:
        raise InvalidPreamble(f"unexpected IMEI length marker {prefix.hex()}", "imei.length", 0)

    offset = cursor.position
    raw = cursor.take_exact(IMEI_LENGTH, "imei.digits")
    try:
        imei = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidImei(f"IMEI is not text: {e.reason}", "imei.digits", offset) from e
    if not raw.isdigit():
        raise InvalidImei(f"IMEI contains non-digits: {imei!r}", "imei.digits", offset)

    return ImeiPreamble(imei=imei, consumed=cursor.position, remainder=cursor.rest())
