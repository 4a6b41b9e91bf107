# src/core/models.py
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from enum import IntEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .errors import ChecksumMismatch, IntegrityError, RecordCountMismatch

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class IoWidth(IntEnum):
    ONE = 1
    TWO = 2
    FOUR = 4
    EIGHT = 8


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class IoElementValue(_Frozen):
    id: int = Field(ge=0, le=0xFF)
    width: IoWidth
    value: int = Field(ge=0, le=0xFFFFFFFFFFFFFFFF)   # расширено до u64

    @model_validator(mode="after")
    def _value_fits_width(self) -> IoElementValue:
        if self.value >> (8 * self.width):
            raise ValueError(f"value {self.value} does not fit {int(self.width)} bytes")
        return self


class IoElementSet(_Frozen):
    event_io_id: int = Field(ge=0, le=0xFF)          # 0 - периодическая запись
    number_of_total_io: int = Field(ge=0, le=0xFF)   # справочное значение
    one_byte: tuple[IoElementValue, ...] = ()
    two_byte: tuple[IoElementValue, ...] = ()
    four_byte: tuple[IoElementValue, ...] = ()
    eight_byte: tuple[IoElementValue, ...] = ()

    @model_validator(mode="after")
    def _groups_match_widths(self) -> IoElementSet:
        for width in IoWidth:
            for element in self.group(width):
                if element.width != width:
                    raise ValueError(
                        f"element {element.id} of width {int(element.width)} "
                        f"in {int(width)}-byte group"
                    )
        return self

    def group(self, width: IoWidth | int) -> tuple[IoElementValue, ...]:
        return {
            IoWidth.ONE: self.one_byte,
            IoWidth.TWO: self.two_byte,
            IoWidth.FOUR: self.four_byte,
            IoWidth.EIGHT: self.eight_byte,
        }[IoWidth(width)]

    @property
    def elements(self) -> tuple[IoElementValue, ...]:
        return self.one_byte + self.two_byte + self.four_byte + self.eight_byte

    @property
    def decoded_total(self) -> int:
        return len(self.elements)

    @property
    def total_matches(self) -> bool:
        return self.decoded_total == self.number_of_total_io


class GpsFix(_Frozen):
    longitude: float = Field(ge=-214.7483648, le=214.7483647)
    latitude: float = Field(ge=-214.7483648, le=214.7483647)
    altitude: int = Field(ge=0, le=0xFFFF)
    angle: int = Field(ge=0, le=0xFFFF)
    visible_satellites: int = Field(ge=0, le=0xFF)
    speed: int = Field(ge=0, le=0xFFFF)

    @property
    def signed_altitude(self) -> int:
        """Высота передаётся как u16, но по смыслу это i16 (метры)"""
        return self.altitude - 0x10000 if self.altitude & 0x8000 else self.altitude

    @property
    def has_fix(self) -> bool:
        return self.visible_satellites > 0


class AvlRecord(_Frozen):
    timestamp: int = Field(ge=0, le=0xFFFFFFFFFFFFFFFF)   # мс от Unix epoch
    priority: int = Field(ge=0, le=0xFF)                  # 0 low, 1 high, 2 panic
    gps: GpsFix
    io: IoElementSet

    @property
    def recorded_at(self) -> datetime:
        return EPOCH + timedelta(milliseconds=self.timestamp)


class Codec8Frame(_Frozen):
    data_length: int = Field(ge=0, le=0xFFFFFFFF)
    codec_id: Literal[8] = 8
    record_count: int = Field(ge=0, le=0xFF)
    records: tuple[AvlRecord, ...] = ()

    @model_validator(mode="after")
    def _record_count_matches(self) -> Codec8Frame:
        if len(self.records) != self.record_count:
            raise ValueError(
                f"record_count={self.record_count}, got {len(self.records)} records"
            )
        return self


class ImeiPreamble(_Frozen):
    imei: str = Field(pattern=r"^[0-9]{15}$")
    consumed: int
    remainder: bytes = b""


class DecodedFrame(_Frozen):
    """Результат одного вызова декодера: кадр плюс сигналы целостности"""

    frame: Codec8Frame
    record_count_echo: int = Field(ge=0, le=0xFF)
    checksum_expected: int = Field(ge=0, le=0xFFFF)
    checksum_received: int = Field(ge=0, le=0xFFFFFFFF)
    consumed: int
    remainder: bytes = b""

    @property
    def checksum_valid(self) -> bool:
        # значимы только младшие 16 бит, старшие всегда нули
        return self.checksum_received == self.checksum_expected

    @property
    def record_count_valid(self) -> bool:
        return self.record_count_echo == self.frame.record_count

    @property
    def is_intact(self) -> bool:
        return self.checksum_valid and self.record_count_valid

    def integrity_errors(self) -> list[IntegrityError]:
        errors: list[IntegrityError] = []
        if not self.record_count_valid:
            errors.append(RecordCountMismatch(self.frame.record_count, self.record_count_echo))
        if not self.checksum_valid:
            errors.append(ChecksumMismatch(self.checksum_expected, self.checksum_received))
        return errors

    def raise_for_integrity(self) -> None:
        errors = self.integrity_errors()
        if errors:
            raise errors[0]
