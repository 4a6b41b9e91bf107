import pytest
from utils.crc import CRC16ARC


class TestCRC16ARC:
    def test_calculate_empty(self):
        """Пустые данные - начальное значение"""
        assert CRC16ARC.calculate(b"") == 0x0000

    def test_calculate_known_value(self):
        """Контрольное значение CRC-16/ARC"""
        assert CRC16ARC.calculate(b"123456789") == 0xBB3D

    def test_calculate_single_byte(self):
        assert CRC16ARC.calculate(b"\x00") == 0x0000
        assert CRC16ARC.calculate(b"\xFF") == 0x4040

    def test_accepts_memoryview_and_bytearray(self):
        data = b"123456789"
        assert CRC16ARC.calculate(memoryview(data)) == 0xBB3D
        assert CRC16ARC.calculate(bytearray(data)) == 0xBB3D

    def test_captured_frame_checksum(self, single_record_frame):
        """CRC по диапазону codec id .. эхо совпадает с переданным"""
        data_length = int.from_bytes(single_record_frame[4:8], "big")
        data = single_record_frame[8:8 + data_length]
        transmitted = int.from_bytes(single_record_frame[8 + data_length:], "big")

        assert transmitted >> 16 == 0
        assert CRC16ARC.calculate(data) == transmitted & 0xFFFF == 0xC7CF

    def test_four_records_frame_checksum(self, four_records_frame):
        assert CRC16ARC.calculate(four_records_frame[8:-4]) == 0xBA48

    def test_verify_correct(self):
        data = b"test_data"
        assert CRC16ARC.verify(data, CRC16ARC.calculate(data)) is True

    def test_verify_incorrect(self):
        assert CRC16ARC.verify(b"test_data", 0x0000) is False
        assert CRC16ARC.verify(b"test", 0xFFFF) is False

    def test_single_bit_flip_detected(self):
        data = bytearray(b"codec8 payload")
        crc = CRC16ARC.calculate(data)
        for i in range(len(data)):
            corrupted = bytearray(data)
            corrupted[i] ^= 0x01
            assert CRC16ARC.calculate(corrupted) != crc
