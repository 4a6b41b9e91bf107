from __future__ import annotations

from .cursor import ByteCursor
from .io_elements import decode_io_elements
from .models import AvlRecord, GpsFix

COORDINATE_SCALE = 10_000_000


def decode_gps_fix(cursor: ByteCursor) -> GpsFix:
    # порядок полей фиксирован протоколом, менять нельзя
    longitude = cursor.i32("gps.longitude") / COORDINATE_SCALE
    latitude = cursor.i32("gps.latitude") / COORDINATE_SCALE
    altitude = cursor.u16("gps.altitude")
    angle = cursor.u16("gps.angle")
    visible_satellites = cursor.u8("gps.visible_satellites")
    speed = cursor.u16("gps.speed")
    return GpsFix(
        longitude=longitude,
        latitude=latitude,
        altitude=altitude,
        angle=angle,
        visible_satellites=visible_satellites,
        speed=speed,
    )


def decode_avl_record(cursor: ByteCursor) -> AvlRecord:
    timestamp = cursor.u64("record.timestamp")
    priority = cursor.u8("record.priority")
    gps = decode_gps_fix(cursor)
    io = decode_io_elements(cursor)
    return AvlRecord(timestamp=timestamp, priority=priority, gps=gps, io=io)
