from __future__ import annotations

import structlog

from .codec8 import read_codec8_frame
from .cursor import ByteCursor
from .errors import BufferOverflow, DecodeError, Truncated
from .imei import decode_imei
from .models import DecodedFrame

logger = structlog.get_logger(__name__)


class StreamParser:
    """Разбор потока одного TCP-соединения.

    Сначала один раз IMEI, затем кадры Codec 8. Неполные данные копятся
    до следующего feed(), остаток после кадра становится началом буфера.
    """

    def __init__(
        self,
        max_buffer_size: int = 64 * 1024,
        drop_on_checksum_mismatch: bool = True,
        drop_on_record_count_mismatch: bool = True,
    ) -> None:
        self.max_buffer_size = max_buffer_size
        self.drop_on_checksum_mismatch = drop_on_checksum_mismatch
        self.drop_on_record_count_mismatch = drop_on_record_count_mismatch

        self.imei: str | None = None
        self._buffer = b""
        self._error: DecodeError | None = None
        self.stats: dict[str, int] = {"frames": 0, "records": 0, "dropped": 0}

    @property
    def error(self) -> DecodeError | None:
        """Фатальная ошибка, отложенная до выдачи ранее разобранных кадров"""
        return self._error

    @property
    def pending(self) -> int:
        return len(self._buffer)

    def feed(self, chunk: bytes) -> list[DecodedFrame]:
        if self._error is not None:
            raise self._error

        self._buffer += chunk
        if len(self._buffer) > self.max_buffer_size:
            raise BufferOverflow(len(self._buffer), self.max_buffer_size)

        if self.imei is None:
            try:
                preamble = decode_imei(self._buffer)
            except Truncated:
                return []
            self.imei = preamble.imei
            self._buffer = preamble.remainder
            logger.info("imei_received", imei=self.imei)

        frames: list[DecodedFrame] = []
        cursor = ByteCursor(self._buffer)
        consumed = 0
        try:
            while cursor.remaining:
                try:
                    decoded = read_codec8_frame(cursor)
                except Truncated as e:
                    logger.debug("frame_incomplete", imei=self.imei, step=e.step,
                                 needed=e.needed, available=e.available)
                    break
                consumed = cursor.position

                if self._accept(decoded):
                    self.stats["frames"] += 1
                    self.stats["records"] += decoded.frame.record_count
                    frames.append(decoded)
                else:
                    self.stats["dropped"] += 1
        except DecodeError as e:
            if not frames:
                raise
            # уже принятые кадры отдаём, ошибка поднимется при следующем feed()
            self._error = e
            logger.warning("frame_decode_failed", imei=self.imei, step=e.step,
                           offset=e.offset, error=str(e), delivered=len(frames))

        self._buffer = self._buffer[consumed:]
        return frames

    def _accept(self, decoded: DecodedFrame) -> bool:
        if decoded.is_intact:
            logger.debug("frame_decoded", imei=self.imei,
                         records=decoded.frame.record_count, size=decoded.consumed)
            return True

        drop = (
            (not decoded.checksum_valid and self.drop_on_checksum_mismatch)
            or (not decoded.record_count_valid and self.drop_on_record_count_mismatch)
        )
        logger.warning(
            "frame_integrity_mismatch",
            imei=self.imei,
            errors=[str(e) for e in decoded.integrity_errors()],
            dropped=drop,
        )
        return not drop
