from __future__ import annotations


class Codec8Error(Exception):
    """Базовая ошибка декодера Teltonika Codec 8"""


class DecodeError(Codec8Error):
    """Фатальная ошибка декодирования: шаг и смещение, на котором она произошла"""

    def __init__(self, message: str, step: str, offset: int) -> None:
        super().__init__(f"{message} (step={step}, offset={offset})")
        self.step = step
        self.offset = offset


class Truncated(DecodeError):
    def __init__(self, step: str, offset: int, needed: int, available: int) -> None:
        super().__init__(
            f"need {needed} bytes, {available} available", step, offset
        )
        self.needed = needed
        self.available = available


class InvalidPreamble(DecodeError):
    pass


class UnsupportedCodec(DecodeError):
    def __init__(self, codec_id: int, offset: int) -> None:
        super().__init__(f"unsupported codec id 0x{codec_id:02X}", "codec_id", offset)
        self.codec_id = codec_id


class InvalidImei(DecodeError):
    pass


class IntegrityError(Codec8Error):
    """Кадр разобран полностью, но избыточные поля не сошлись"""


class ChecksumMismatch(IntegrityError):
    def __init__(self, expected: int, received: int) -> None:
        super().__init__(
            f"checksum mismatch: calculated 0x{expected:04X}, received 0x{received:08X}"
        )
        self.expected = expected
        self.received = received


class RecordCountMismatch(IntegrityError):
    def __init__(self, record_count: int, echo: int) -> None:
        super().__init__(f"record count {record_count} != trailing echo {echo}")
        self.record_count = record_count
        self.echo = echo


class BufferOverflow(Codec8Error):
    def __init__(self, size: int, limit: int) -> None:
        super().__init__(f"stream buffer {size} bytes exceeds limit {limit}")
        self.size = size
        self.limit = limit
