from __future__ import annotations

from pydantic import BaseModel, Field

import structlog

from .models import AvlRecord, DecodedFrame

logger = structlog.get_logger(__name__)


class IoReading(BaseModel):
    id: int
    width: int
    value: int


class TelemetryMessage(BaseModel):
    imei: str
    timestamp: str | None          # None - вне диапазона datetime
    timestamp_ms: int
    priority: int
    longitude: float
    latitude: float
    altitude: int
    angle: int
    satellites: int
    speed: int
    event_io_id: int
    io: list[IoReading] = Field(default_factory=list)
    checksum_valid: bool = True
    record_count_valid: bool = True


class RecordProcessor:
    """Преобразует декодированные кадры в плоские сообщения для публикации"""

    def process(self, imei: str, decoded: DecodedFrame) -> list[TelemetryMessage]:
        messages = [
            self._to_message(imei, record, decoded)
            for record in decoded.frame.records
        ]
        logger.debug("frame_processed", imei=imei, records=len(messages))
        return messages

    def _to_message(self, imei: str, record: AvlRecord, decoded: DecodedFrame) -> TelemetryMessage:
        gps = record.gps
        try:
            timestamp = record.recorded_at.isoformat(timespec="milliseconds")
        except OverflowError:
            logger.warning("timestamp_out_of_range", imei=imei, timestamp_ms=record.timestamp)
            timestamp = None
        return TelemetryMessage(
            imei=imei,
            timestamp=timestamp,
            timestamp_ms=record.timestamp,
            priority=record.priority,
            longitude=gps.longitude,
            latitude=gps.latitude,
            altitude=gps.signed_altitude,
            angle=gps.angle,
            satellites=gps.visible_satellites,
            speed=gps.speed,
            event_io_id=record.io.event_io_id,
            # дубликаты id допустимы, поэтому список, а не словарь
            io=[
                IoReading(id=e.id, width=int(e.width), value=e.value)
                for e in record.io.elements
            ],
            checksum_valid=decoded.checksum_valid,
            record_count_valid=decoded.record_count_valid,
        )
