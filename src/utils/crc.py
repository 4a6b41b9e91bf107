from __future__ import annotations


def _build_table(poly: int) -> tuple[int, ...]:
    table = []
    for byte in range(256):
        crc = byte
        for _ in range(8):
            if crc & 1:
                crc = (crc >> 1) ^ poly
            else:
                crc >>= 1
        table.append(crc)
    return tuple(table)


class CRC16ARC:
    """CRC-16/ARC: poly 0x8005 (reflected 0xA001), init 0x0000, без xorout"""

    _TABLE = _build_table(0xA001)

    @staticmethod
    def calculate(data: bytes | bytearray | memoryview) -> int:
        crc = 0x0000
        table = CRC16ARC._TABLE
        for byte in bytes(data):
            crc = (crc >> 8) ^ table[(crc ^ byte) & 0xFF]
        return crc & 0xFFFF

    @staticmethod
    def verify(data: bytes | bytearray | memoryview, expected_crc: int) -> bool:
        return CRC16ARC.calculate(data) == expected_crc
