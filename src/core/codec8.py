from __future__ import annotations

from .avl import decode_avl_record
from .cursor import ByteCursor, read_counted
from .errors import InvalidPreamble, UnsupportedCodec
from .models import Codec8Frame, DecodedFrame
from utils.crc import CRC16ARC

CODEC_8 = 0x08
PREAMBLE = bytes(4)


def read_codec8_frame(cursor: ByteCursor) -> DecodedFrame:
    """Чтение одного кадра Codec 8 с текущей позиции курсора.

    Шаги строго линейные:
      1. преамбула 00000000
      2. data_length
      3. CRC-16/ARC по data_length байтам, без их потребления
      4. codec id (только 0x08)
      5. record count и сами записи
      6. эхо record count
      7. контрольная сумма (4 байта, значимы младшие 16 бит)

    Несовпадение эха или контрольной суммы не прерывает разбор, оно
    возвращается в DecodedFrame. Остальные ошибки - исключения DecodeError,
    смещения в них считаются от начала буфера курсора.
    """
    start = cursor.position

    preamble = cursor.take_exact(len(PREAMBLE), "preamble")
    if preamble != PREAMBLE:
        raise InvalidPreamble(f"unexpected frame preamble {preamble.hex()}", "preamble", start)

    data_length = cursor.u32("data_length")
    checksum_expected = CRC16ARC.calculate(cursor.peek_exact(data_length, "data"))

    codec_offset = cursor.position
    codec_id = cursor.u8("codec_id")
    if codec_id != CODEC_8:
        raise UnsupportedCodec(codec_id, codec_offset)

    records = read_counted(cursor, decode_avl_record, "records")
    record_count_echo = cursor.u8("record_count_echo")
    checksum_received = cursor.u32("checksum")

    frame = Codec8Frame(
        data_length=data_length,
        codec_id=codec_id,
        record_count=len(records),
        records=records,
    )
    return DecodedFrame(
        frame=frame,
        record_count_echo=record_count_echo,
        checksum_expected=checksum_expected,
        checksum_received=checksum_received,
        consumed=cursor.position - start,
    )


def decode_codec8_frame(data: bytes | bytearray | memoryview) -> DecodedFrame:
    """Декодирование одного кадра из начала буфера.

    Байты после кадра возвращаются в remainder для следующего вызова.
    """
    cursor = ByteCursor(data)
    decoded = read_codec8_frame(cursor)
    return decoded.model_copy(update={"remainder": cursor.rest()})
