import os
import pytest

os.environ['DISABLE_METRICS'] = '1'

from config import Settings, IntakeConfig, DecoderConfig, MetricsConfig
from utils.crc import CRC16ARC

IMEI = "356307042441013"

# Захват с устройства: одна запись, событие по IO 1
SINGLE_RECORD_HEX = (
    "000000000000003608010000016B40D8EA30010000000000000000000000000000000105"
    "021503010101425E0F01F10000601A014E0000000000000000010000C7CF"
)

# Четыре записи; data_length (0xA7) и CRC (0xBA48) соответствуют содержимому
FOUR_RECORDS_HEX = (
    "00000000000000A7080400000113fc208dff000f14f650209cca80006f00d6040004000403"
    "0101150316030001460000015d0000000113fc17610b000f14ffe0209cc580006e00c00500"
    "010004030101150316010001460000015e0000000113fc284945000f150f00209cd2000095"
    "01080400000004030101150016030001460000015d0000000113fc267c5b000f150a50209c"
    "ccc0009300680400000004030101150016030001460000015b00040000BA48"
)

# Тот же пример в распространённом виде: заголовок 0x36 и CRC от однозаписного кадра
FOUR_RECORDS_STALE_HEX = "0000000000000036" + FOUR_RECORDS_HEX[16:-8] + "0000C7CF"


class FrameBuilder:
    """Сборка кадров Codec 8 для тестов"""

    @staticmethod
    def imei(imei=IMEI):
        return len(imei).to_bytes(2, "big") + imei.encode()

    @staticmethod
    def io_group(width, elements):
        body = bytes([len(elements)])
        for io_id, value in elements:
            body += bytes([io_id]) + value.to_bytes(width, "big")
        return body

    @classmethod
    def record(cls, timestamp=1560161086000, priority=0, longitude=0, latitude=0,
               altitude=0, angle=0, satellites=0, speed=0, event_io_id=0,
               total_io=None, io=None):
        io = io or {}
        if total_io is None:
            total_io = sum(len(v) for v in io.values())
        body = timestamp.to_bytes(8, "big") + bytes([priority])
        body += longitude.to_bytes(4, "big", signed=True)
        body += latitude.to_bytes(4, "big", signed=True)
        body += altitude.to_bytes(2, "big") + angle.to_bytes(2, "big")
        body += bytes([satellites]) + speed.to_bytes(2, "big")
        body += bytes([event_io_id, total_io])
        for width in (1, 2, 4, 8):
            body += cls.io_group(width, io.get(width, []))
        return body

    @staticmethod
    def frame(records, codec_id=8, echo=None, checksum=None, data_length=None):
        if echo is None:
            echo = len(records)
        data = bytes([codec_id, len(records)]) + b"".join(records) + bytes([echo])
        if checksum is None:
            checksum = CRC16ARC.calculate(data)
        if data_length is None:
            data_length = len(data)
        return bytes(4) + data_length.to_bytes(4, "big") + data + checksum.to_bytes(4, "big")


@pytest.fixture
def builder():
    return FrameBuilder


@pytest.fixture
def single_record_frame():
    return bytes.fromhex(SINGLE_RECORD_HEX)


@pytest.fixture
def four_records_frame():
    return bytes.fromhex(FOUR_RECORDS_HEX)


@pytest.fixture
def imei_preamble():
    return bytes([0, 15]) + IMEI.encode()


@pytest.fixture
def test_settings(tmp_path):
    return Settings(
        intake=IntakeConfig(host="127.0.0.1", port=0, idle_timeout_s=5.0),
        decoder=DecoderConfig(),
        metrics=MetricsConfig(enabled=False),
    )


@pytest.fixture
def stale_four_records_frame():
    return bytes.fromhex(FOUR_RECORDS_STALE_HEX)
