from __future__ import annotations

from .cursor import ByteCursor, read_counted
from .models import IoElementSet, IoElementValue, IoWidth


def decode_io_group(cursor: ByteCursor, width: IoWidth | int) -> tuple[IoElementValue, ...]:
    """Одна группа I/O элементов фиксированной ширины: u8 count, затем (id, value) * count"""
    width = IoWidth(width)
    field = f"io.{int(width)}b"

    def element(c: ByteCursor) -> IoElementValue:
        io_id = c.u8(f"{field}.id")
        value = int.from_bytes(c.take_exact(int(width), f"{field}.value"), "big")
        return IoElementValue(id=io_id, width=width, value=value)

    return read_counted(cursor, element, field, item_size=1 + int(width))


def decode_io_elements(cursor: ByteCursor) -> IoElementSet:
    event_io_id = cursor.u8("io.event_io_id")
    number_of_total_io = cursor.u8("io.number_of_total_io")
    # порядок групп на проводе: 1, 2, 4, 8 байт
    groups = [decode_io_group(cursor, width) for width in IoWidth]
    return IoElementSet(
        event_io_id=event_io_id,
        number_of_total_io=number_of_total_io,
        one_byte=groups[0],
        two_byte=groups[1],
        four_byte=groups[2],
        eight_byte=groups[3],
    )
